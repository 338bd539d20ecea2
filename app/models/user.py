"""User model — authenticated application account."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class User(Base):
    """Person who signs in and acts on projects.

    Attributes:
        id: Opaque string primary key (also the JWT ``sub`` claim).
        email: Unique login e-mail.
        name: Display name.
        password_hash: Bcrypt hash (never store plain text).
        active: Whether the account may sign in.
        last_login_at: Timestamp of the last successful login.
        created_at: Record creation timestamp.
        updated_at: Last modification timestamp.
    """

    __tablename__ = "app_user"

    id = Column(String(64), primary_key=True)
    email = Column(String(200), unique=True, nullable=False)
    name = Column(String(200), nullable=True)
    password_hash = Column(String(200), nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    owned_projects = relationship("Project", back_populates="owner", lazy="select")
    memberships = relationship("ProjectMember", back_populates="user", lazy="select")
