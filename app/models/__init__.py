from app.models.base import Base, TimestampMixin
from app.models.sick_leave import (
    SickLeave,
    SickLeaveStatus,
    ReportedVia,
    WiaDecision,
    OPEN_STATUSES,
)
from app.models.poortwachter_milestone import PoortwachterMilestone
from app.models.absence_statistics import AbsenceStatistics, StatisticsPeriod

__all__ = [
    "Base",
    "TimestampMixin",
    "SickLeave",
    "SickLeaveStatus",
    "ReportedVia",
    "WiaDecision",
    "OPEN_STATUSES",
    "PoortwachterMilestone",
    "AbsenceStatistics",
    "StatisticsPeriod",
]
