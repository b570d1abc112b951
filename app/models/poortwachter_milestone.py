from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, SmallInteger, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin
from app.services.poortwachter import Milestone

if TYPE_CHECKING:
    from app.models.sick_leave import SickLeave


class PoortwachterMilestone(Base, TimestampMixin):
    """Persisted checkpoint. Status is derived on read, never stored."""

    __tablename__ = "poortwachter_milestones"
    __table_args__ = (
        UniqueConstraint("sick_leave_id", "week_offset", name="uq_milestone_week"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sick_leave_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sick_leaves.id", ondelete="CASCADE"), nullable=False
    )
    week_offset: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    action: Mapped[str] = mapped_column(String(255), nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    completed_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    sick_leave: Mapped["SickLeave"] = relationship("SickLeave", back_populates="milestones")

    @classmethod
    def from_milestone(cls, milestone: Milestone) -> "PoortwachterMilestone":
        return cls(
            week_offset=milestone.week_offset,
            action=milestone.action,
            due_date=milestone.due_date,
            completed_date=milestone.completed_date,
        )

    def to_milestone(self) -> Milestone:
        return Milestone(
            week_offset=self.week_offset,
            action=self.action,
            due_date=self.due_date,
            completed_date=self.completed_date,
        )
