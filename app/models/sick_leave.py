import enum
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Date, DateTime, Enum, Integer, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, utcnow

if TYPE_CHECKING:
    from app.models.poortwachter_milestone import PoortwachterMilestone


class SickLeaveStatus(str, enum.Enum):
    active = "active"
    recovered = "recovered"
    partially_recovered = "partially_recovered"
    long_term = "long_term"


class ReportedVia(str, enum.Enum):
    phone = "phone"
    email = "email"
    app = "app"
    in_person = "in_person"


class WiaDecision(str, enum.Enum):
    approved = "approved"
    rejected = "rejected"
    pending = "pending"


# Statuses that still count as "currently sick"
OPEN_STATUSES = (SickLeaveStatus.active, SickLeaveStatus.partially_recovered)


class SickLeave(Base, TimestampMixin):
    __tablename__ = "sick_leaves"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    employee_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    company_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    reported_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    reported_by: Mapped[str] = mapped_column(String(200), nullable=False)
    reported_via: Mapped[ReportedVia] = mapped_column(
        Enum(ReportedVia), nullable=False, default=ReportedVia.app
    )

    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    actual_return_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    status: Mapped[SickLeaveStatus] = mapped_column(
        Enum(SickLeaveStatus), nullable=False, default=SickLeaveStatus.active
    )
    work_capacity_percentage: Mapped[int] = mapped_column(SmallInteger, default=0, nullable=False)

    arbo_service_contacted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    arbo_service_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    arbo_advice: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    poortwachter_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    wia_applied_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    wia_decision: Mapped[Optional[WiaDecision]] = mapped_column(Enum(WiaDecision), nullable=True)
    wia_percentage: Mapped[Optional[int]] = mapped_column(SmallInteger, nullable=True)

    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)

    # Relationships
    milestones: Mapped[list["PoortwachterMilestone"]] = relationship(
        "PoortwachterMilestone",
        back_populates="sick_leave",
        order_by="PoortwachterMilestone.week_offset",
        cascade="all, delete-orphan",
    )
