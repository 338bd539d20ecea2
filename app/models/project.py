"""Project and ProjectMember models."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Project(Base):
    """Client engagement tracked by the agency.

    The ``owner_id`` column is the single source of truth for write access
    to the project's advertising budgets.

    Attributes:
        id: Opaque string primary key.
        name: Project name.
        description: Free-text description.
        slug: Unique URL-friendly handle.
        status: One of ``constants.PROJECT_STATUSES``.
        organization_id: FK to the owning Organization.
        owner_id: FK to the owning User.
        start_date: Planned start.
        end_date: Planned end.
        created_at: Row creation timestamp.
        updated_at: Last modification timestamp.
    """

    __tablename__ = "project"

    id = Column(String(64), primary_key=True)
    name = Column(String(300), nullable=False)
    description = Column(Text, nullable=True)
    slug = Column(String(200), unique=True, nullable=True)
    status = Column(String(20), default="planning", nullable=False)
    # "planning", "active", "on_hold", "completed", "cancelled"
    organization_id = Column(
        String(64), ForeignKey("organization.id", ondelete="CASCADE"), nullable=True
    )
    owner_id = Column(
        String(64), ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    organization = relationship("Organization", back_populates="projects", lazy="select")
    owner = relationship("User", back_populates="owned_projects", lazy="select")
    members = relationship(
        "ProjectMember",
        back_populates="project",
        lazy="select",
        cascade="all, delete-orphan",
    )
    months = relationship(
        "ProjectMonth",
        back_populates="project",
        order_by="ProjectMonth.month_label",
        lazy="select",
        cascade="all, delete-orphan",
    )


class ProjectMember(Base):
    """Membership of a user in a project with a role.

    Attributes:
        id: Opaque string primary key.
        project_id: FK to Project.
        user_id: FK to User.
        role: One of ``constants.PROJECT_ROLES``.
        joined_at: When the user joined.
        left_at: When the user left, if they did.
    """

    __tablename__ = "project_member"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_member_project_user"),
    )

    id = Column(String(64), primary_key=True)
    project_id = Column(
        String(64), ForeignKey("project.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(
        String(64), ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    role = Column(String(20), default="member", nullable=False)
    # "owner", "admin", "member", "viewer"
    joined_at = Column(DateTime, default=func.now(), nullable=False)
    left_at = Column(DateTime, nullable=True)

    # Relationships
    project = relationship("Project", back_populates="members", lazy="select")
    user = relationship("User", back_populates="memberships", lazy="select")
