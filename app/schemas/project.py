"""
Pydantic v2 schemas for the project endpoints.

Only the single-project and per-user aggregate shapes live here; project
listing is served elsewhere.
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field


class OrganizationSummary(BaseModel):
    """Organisation reference embedded in project responses."""

    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class ProjectMemberResponse(BaseModel):
    """One membership row of a project."""

    id: str
    user_id: str
    role: str
    joined_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class ProjectDetailResponse(BaseModel):
    """Full project detail as seen by one of its members.

    Attributes:
        id: Project ID.
        name: Project name.
        description: Free-text description.
        slug: URL handle.
        status: Lifecycle status.
        organization_id: Owning organisation ID.
        owner_id: Owning user ID.
        start_date: Planned start.
        end_date: Planned end.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
        organization: Resolved organisation, if any.
        members: All memberships of the project.
        current_user_role: Role of the caller in the project.
    """

    id: str
    name: str
    description: str | None = None
    slug: str | None = None
    status: str
    organization_id: str | None = None
    owner_id: str
    start_date: datetime.datetime | None = None
    end_date: datetime.datetime | None = None
    created_at: datetime.datetime
    updated_at: datetime.datetime
    organization: OrganizationSummary | None = None
    members: list[ProjectMemberResponse] = Field(default_factory=list)
    current_user_role: str


class ProjectStatsResponse(BaseModel):
    """Project counts per lifecycle status for the calling user."""

    total: int = Field(default=0, ge=0)
    planning: int = Field(default=0, ge=0)
    active: int = Field(default=0, ge=0)
    on_hold: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    cancelled: int = Field(default=0, ge=0)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "total": 7,
                "planning": 2,
                "active": 3,
                "on_hold": 1,
                "completed": 1,
                "cancelled": 0,
            }
        }
    )
