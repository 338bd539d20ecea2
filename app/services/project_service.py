"""
Project access and detail service layer.

Two kinds of access checks live here:

- **Ownership** (``is_project_owner`` / ``require_project_owner``) — the
  gate in front of every advertising budget read and write.  Only the user
  stored in ``Project.owner_id`` passes.
- **Membership** (``check_project_access`` / ``get_user_role_in_project``)
  — used by the project detail and statistics endpoints, driven by
  ``ProjectMember`` rows.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.project import Project, ProjectMember
from app.schemas.project import (
    OrganizationSummary,
    ProjectDetailResponse,
    ProjectMemberResponse,
    ProjectStatsResponse,
)
from app.utils.constants import PROJECT_STATUSES

logger = logging.getLogger(__name__)

_ACCESS_DENIED_DETAIL = "Project not found or access denied"


# ---------------------------------------------------------------------------
# Ownership gate
# ---------------------------------------------------------------------------


def _get_owned_project(db: Session, project_id: str, user_id: str) -> Project | None:
    return (
        db.query(Project)
        .filter(Project.id == project_id, Project.owner_id == user_id)
        .first()
    )


def is_project_owner(db: Session, project_id: str, user_id: str) -> bool:
    """Return True only if the project exists and *user_id* is its owner."""
    return _get_owned_project(db, project_id, user_id) is not None


def require_project_owner(db: Session, project_id: str, user_id: str) -> Project:
    """Return the project owned by *user_id* or reject the call.

    A missing project and a project owned by someone else are reported
    the same way so callers cannot probe for project IDs.

    Raises:
        HTTPException 403: If the project is missing or not owned by the user.
    """
    project = _get_owned_project(db, project_id, user_id)
    if project is None:
        logger.info(
            "require_project_owner: denied project_id=%s user_id=%s",
            project_id, user_id,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=_ACCESS_DENIED_DETAIL,
        )
    return project


# ---------------------------------------------------------------------------
# Membership checks
# ---------------------------------------------------------------------------


def _get_membership(db: Session, project_id: str, user_id: str) -> ProjectMember | None:
    return (
        db.query(ProjectMember)
        .filter(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id,
        )
        .first()
    )


def check_project_access(db: Session, project_id: str, user_id: str) -> bool:
    """Return True if *user_id* is a member of the project (any role)."""
    return _get_membership(db, project_id, user_id) is not None


def get_user_role_in_project(db: Session, project_id: str, user_id: str) -> str | None:
    """Return the caller's role in the project, or None for non-members."""
    membership = _get_membership(db, project_id, user_id)
    return membership.role if membership is not None else None


# ---------------------------------------------------------------------------
# Detail and statistics
# ---------------------------------------------------------------------------


def get_project_detail(db: Session, project_id: str, user_id: str) -> ProjectDetailResponse:
    """Return a project with its organisation and members, for members only.

    Args:
        db: Active SQLAlchemy session.
        project_id: Project to load.
        user_id: Acting user.

    Returns:
        A ``ProjectDetailResponse`` including the caller's role.

    Raises:
        HTTPException 403: If the caller is not a member of the project.
        HTTPException 404: If the project row does not exist.
    """
    membership = _get_membership(db, project_id, user_id)
    if membership is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not a member of this project",
        )

    project: Project | None = db.query(Project).filter(Project.id == project_id).first()
    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project {project_id} not found.",
        )

    members = (
        db.query(ProjectMember)
        .filter(ProjectMember.project_id == project_id)
        .order_by(ProjectMember.joined_at)
        .all()
    )

    logger.debug("get_project_detail: project_id=%s members=%d", project_id, len(members))

    return ProjectDetailResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        slug=project.slug,
        status=project.status,
        organization_id=project.organization_id,
        owner_id=project.owner_id,
        start_date=project.start_date,
        end_date=project.end_date,
        created_at=project.created_at,
        updated_at=project.updated_at,
        organization=(
            OrganizationSummary.model_validate(project.organization)
            if project.organization is not None
            else None
        ),
        members=[ProjectMemberResponse.model_validate(m) for m in members],
        current_user_role=membership.role,
    )


def get_project_stats_for_user(db: Session, user_id: str) -> ProjectStatsResponse:
    """Count the caller's projects per lifecycle status.

    Statuses outside ``PROJECT_STATUSES`` are ignored and do not count
    toward ``total``.
    """
    rows = (
        db.query(Project.status, func.count(Project.id).label("count"))
        .join(ProjectMember, ProjectMember.project_id == Project.id)
        .filter(ProjectMember.user_id == user_id)
        .group_by(Project.status)
        .all()
    )

    counts: dict[str, int] = {s: 0 for s in PROJECT_STATUSES}
    total = 0
    for row in rows:
        if row.status in counts:
            counts[row.status] = row.count
            total += row.count

    logger.debug("get_project_stats_for_user: user_id=%s total=%d", user_id, total)
    return ProjectStatsResponse(total=total, **counts)
