"""MonthlyAdvertisingSpend model — planned vs actual advertising spend per month."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class MonthlyAdvertisingSpend(Base):
    """Advertising budget and spend of one project for one calendar month.

    At most one row exists per ``(project_id, year, month)``; the unique
    constraint backs the guarded insert in the advertising service.

    Attributes:
        id: Opaque string primary key.
        project_id: FK to Project.
        project_month_id: FK to the ProjectMonth grouping record.
        organization_id: FK to the project's Organization.
        year: Calendar year.
        month: Month number (1–12).
        online_spend: Spend attributed to digital media.
        print_spend: Spend attributed to newspapers and magazines.
        broadcast_spend: Spend attributed to TV and radio.
        social_media_spend: Spend attributed to social media.
        other_spend: Spend attributed to other media.
        total_spend: Actual spend for the month.
        total_budget: Planned budget for the month.
        budget_utilization: total_spend / total_budget × 100 (0 without budget),
            computed from the stored (cent-rounded) amounts.
        media_type: Media type tag supplied with the last write.
        notes: Free-text notes supplied with the last write.
        currency: ISO currency code.
        generated_at: When the figures were last written.
        generated_by_id: FK to the User that last wrote the figures.
        created_at: Row creation timestamp.
    """

    __tablename__ = "monthly_advertising_spend"
    __table_args__ = (
        UniqueConstraint(
            "project_id", "year", "month", name="uq_monthly_advertising_spend_period"
        ),
    )

    id = Column(String(64), primary_key=True)
    project_id = Column(
        String(64), ForeignKey("project.id", ondelete="CASCADE"), nullable=False
    )
    project_month_id = Column(
        String(64), ForeignKey("project_month.id", ondelete="CASCADE"), nullable=True
    )
    organization_id = Column(
        String(64), ForeignKey("organization.id", ondelete="CASCADE"), nullable=True
    )
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)  # 1–12

    # Spend by media category
    online_spend = Column(Numeric(15, 2), default=0, nullable=False)
    print_spend = Column(Numeric(15, 2), default=0, nullable=False)
    broadcast_spend = Column(Numeric(15, 2), default=0, nullable=False)
    social_media_spend = Column(Numeric(15, 2), default=0, nullable=False)
    other_spend = Column(Numeric(15, 2), default=0, nullable=False)

    total_spend = Column(Numeric(15, 2), default=0, nullable=False)
    total_budget = Column(Numeric(15, 2), nullable=True)
    # percentage; sized for the largest storable spend over a one-cent budget
    budget_utilization = Column(Numeric(20, 2), nullable=True)

    media_type = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)
    currency = Column(String(3), default="JPY", nullable=False)

    generated_at = Column(DateTime, default=func.now(), nullable=False)
    generated_by_id = Column(String(64), ForeignKey("app_user.id"), nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    # Relationships
    project_month = relationship(
        "ProjectMonth", back_populates="advertising_spend", lazy="select"
    )
