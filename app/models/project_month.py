"""ProjectMonth model — per-month grouping record of a project."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class ProjectMonth(Base):
    """One calendar month of a project, created lazily on the first budget write.

    Attributes:
        id: Opaque string primary key.
        project_id: FK to Project.
        year: Calendar year.
        month: Month number (1 = January, 12 = December).
        month_label: ``YYYY-MM`` label, e.g. ``"2024-03"``.
        status: One of ``constants.MONTHLY_STATUSES``.
        currency: ISO currency code of the month's amounts.
        created_by_id: FK to the User that created the row.
        updated_by_id: FK to the User that last touched the row.
        created_at: Row creation timestamp.
        updated_at: Last modification timestamp.
    """

    __tablename__ = "project_month"
    __table_args__ = (
        UniqueConstraint("project_id", "year", "month", name="uq_project_month_period"),
    )

    id = Column(String(64), primary_key=True)
    project_id = Column(
        String(64), ForeignKey("project.id", ondelete="CASCADE"), nullable=False
    )
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)  # 1–12
    month_label = Column(String(7), nullable=False)
    status = Column(String(20), default="planned", nullable=False)
    currency = Column(String(3), default="JPY", nullable=False)
    created_by_id = Column(String(64), ForeignKey("app_user.id"), nullable=False)
    updated_by_id = Column(String(64), ForeignKey("app_user.id"), nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    project = relationship("Project", back_populates="months", lazy="select")
    advertising_spend = relationship(
        "MonthlyAdvertisingSpend",
        back_populates="project_month",
        uselist=False,
        lazy="select",
    )
