import enum
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Enum, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, utcnow


def classify_absence_percentage(percentage: float) -> str:
    """Below 3% is low, below 5% medium, anything above is high."""
    if percentage < 3:
        return "low"
    if percentage < 5:
        return "medium"
    return "high"


class StatisticsPeriod(str, enum.Enum):
    month = "month"
    quarter = "quarter"
    year = "year"


class AbsenceStatistics(Base, TimestampMixin):
    __tablename__ = "absence_statistics"
    __table_args__ = (
        UniqueConstraint("employee_id", "period", "period_start", name="uq_absence_stats_period"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    company_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    period: Mapped[StatisticsPeriod] = mapped_column(Enum(StatisticsPeriod), nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)

    total_sick_days: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_sick_hours: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    absence_frequency: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    average_duration: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    absence_percentage: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    long_term_absence: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    chronic_absence: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    calculated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    @property
    def absence_level(self) -> str:
        return classify_absence_percentage(self.absence_percentage)
