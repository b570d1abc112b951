"""Poortwachter checkpoint schedule for long-term sick leave.

Everything in here is a pure function over a start date and a list of
milestones. Status is never stored: it is derived from ``completed_date``,
``due_date`` and "now" each time it is asked for.
"""

import enum
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional, Sequence

ACTIVATION_WEEKS = 6
ARBO_WEEK = 42
WIA_PREPARATION_WEEK = 91
DEFAULT_UPCOMING_DAYS = 7

# week offset -> required action
MILESTONE_SCHEDULE: dict[int, str] = {
    6: "Problem analysis: employer and employee jointly draw up a problem analysis",
    8: "Plan of action: draft a concrete reintegration plan of action",
    13: "First evaluation: evaluate progress and revise the plan if needed",
    26: "Second evaluation: evaluate progress and update the plan of action",
    42: "Occupational physician: engage the company doctor / arbo service",
    52: "Annual evaluation: evaluate the reintegration efforts of the first year",
    78: "Fourth evaluation: prepare for a possible WIA application within 6 months",
    91: "WIA preparation: start preparing the WIA application (3 months before 2 years)",
    104: "WIA application: submit the WIA application to UWV (mandatory after 2 years)",
}


class MilestoneStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"
    overdue = "overdue"


@dataclass(frozen=True)
class Milestone:
    week_offset: int
    action: str
    due_date: datetime
    completed_date: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.completed_date is not None


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now()


def should_activate(start_date: datetime, now: Optional[datetime] = None) -> bool:
    """True once at least six weeks of elapsed time have passed since ``start_date``."""
    return _now(now) - start_date >= timedelta(weeks=ACTIVATION_WEEKS)


def generate_milestones(start_date: datetime) -> list[Milestone]:
    """Build the full schedule for a case, ascending by week offset."""
    return [
        Milestone(
            week_offset=week,
            action=action,
            due_date=start_date + timedelta(weeks=week),
        )
        for week, action in sorted(MILESTONE_SCHEDULE.items())
    ]


def derive_status(milestone: Milestone, now: Optional[datetime] = None) -> MilestoneStatus:
    """Completion always wins; a milestone is only overdue strictly after its due date."""
    if milestone.completed_date is not None:
        return MilestoneStatus.completed
    if _now(now) > milestone.due_date:
        return MilestoneStatus.overdue
    return MilestoneStatus.pending


def filter_overdue(
    milestones: Sequence[Milestone], now: Optional[datetime] = None
) -> list[Milestone]:
    now = _now(now)
    return [m for m in milestones if derive_status(m, now) == MilestoneStatus.overdue]


def filter_upcoming(
    milestones: Sequence[Milestone],
    days_ahead: int = DEFAULT_UPCOMING_DAYS,
    now: Optional[datetime] = None,
) -> list[Milestone]:
    """Incomplete milestones due within ``[now, now + days_ahead]``, both ends inclusive."""
    now = _now(now)
    horizon = now + timedelta(days=days_ahead)
    return [m for m in milestones if not m.is_completed and now <= m.due_date <= horizon]


def get_weeks_since(start_date: datetime, now: Optional[datetime] = None) -> int:
    """Whole elapsed weeks since ``start_date`` (not calendar weeks)."""
    return (_now(now) - start_date) // timedelta(weeks=1)


def should_contact_arbo(milestones: Sequence[Milestone], now: Optional[datetime] = None) -> bool:
    arbo = next((m for m in milestones if m.week_offset == ARBO_WEEK), None)
    if arbo is None:
        return False
    return _now(now) >= arbo.due_date and not arbo.is_completed


def should_start_wia_preparation(start_date: datetime, now: Optional[datetime] = None) -> bool:
    return get_weeks_since(start_date, now) >= WIA_PREPARATION_WEEK


def get_next_milestone(
    milestones: Sequence[Milestone], now: Optional[datetime] = None
) -> Optional[Milestone]:
    """Earliest incomplete milestone that is not yet past due.

    Overdue milestones are late, not upcoming; use ``filter_overdue`` for those.
    """
    now = _now(now)
    candidates = [m for m in milestones if not m.is_completed and m.due_date >= now]
    return min(candidates, key=lambda m: m.due_date, default=None)


def complete_milestone(
    milestone: Milestone, completion_date: Optional[datetime] = None
) -> Milestone:
    """Return a completed copy. Early and late completion are both accepted."""
    return replace(milestone, completed_date=_now(completion_date))


def get_completion_percentage(milestones: Sequence[Milestone]) -> float:
    if not milestones:
        return 0.0
    completed = sum(1 for m in milestones if m.is_completed)
    return completed / len(milestones) * 100
