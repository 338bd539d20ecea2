"""
Project router.

Mounts under ``/api/projects`` (prefix set in ``main.py``).

All endpoints require a valid JWT token and are scoped to the caller's
project memberships.

Endpoints
---------
GET /stats            — Project counts per status for the caller.
GET /{id}             — Project detail with organisation and members.
GET /{id}/access      — Whether the caller is a member of the project.
GET /{id}/role        — The caller's role in the project (or null).
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.project import ProjectDetailResponse, ProjectStatsResponse
from app.services import project_service
from app.services.auth_service import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Projects"])


@router.get(
    "/stats",
    response_model=ProjectStatsResponse,
    summary="Project statistics of the caller",
    responses={401: {"description": "Missing or invalid JWT."}},
)
def get_stats(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProjectStatsResponse:
    logger.debug("GET /projects/stats user=%s", current_user.id)
    return project_service.get_project_stats_for_user(db, current_user.id)


@router.get(
    "/{project_id}",
    response_model=ProjectDetailResponse,
    summary="Project detail",
    responses={
        401: {"description": "Missing or invalid JWT."},
        403: {"description": "Caller is not a member of the project."},
        404: {"description": "Project not found."},
    },
)
def get_project(
    project_id: str,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProjectDetailResponse:
    """Return the project with its organisation, members and the caller's role.

    Args:
        project_id: Project to load.
        db: Database session.
        current_user: Authenticated caller; must be a member.

    Returns:
        A ``ProjectDetailResponse``.
    """
    logger.debug("GET /projects/%s user=%s", project_id, current_user.id)
    return project_service.get_project_detail(db, project_id, current_user.id)


@router.get(
    "/{project_id}/access",
    response_model=bool,
    summary="Whether the caller can access the project",
)
def has_access(
    project_id: str,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> bool:
    return project_service.check_project_access(db, project_id, current_user.id)


@router.get(
    "/{project_id}/role",
    response_model=str | None,
    summary="The caller's role in the project",
)
def get_user_role(
    project_id: str,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> str | None:
    return project_service.get_user_role_in_project(db, project_id, current_user.id)
