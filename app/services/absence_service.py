"""Sick-leave case workflow: intake, Poortwachter activation, milestones, recovery."""

import logging
import math
from datetime import datetime, time, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.crud import crud_sick_leave
from app.models.poortwachter_milestone import PoortwachterMilestone
from app.models.sick_leave import OPEN_STATUSES, SickLeave, SickLeaveStatus
from app.schemas.milestone import MilestoneResponse, PoortwachterOverview
from app.schemas.sick_leave import RecoveryRequest, SickLeaveCreate
from app.services import poortwachter
from app.services.poortwachter import Milestone

logger = logging.getLogger(__name__)

# Admin dashboard flags cases sick for longer than this many days
LONG_TERM_DAYS = 42


def case_start(sick_leave: SickLeave) -> datetime:
    """Start of the sick-leave case as a datetime at midnight."""
    return datetime.combine(sick_leave.start_date, time.min)


def case_milestones(sick_leave: SickLeave) -> list[Milestone]:
    """Pure milestone values for a case loaded with its milestones."""
    return [row.to_milestone() for row in sick_leave.milestones]


def is_open(sick_leave: SickLeave) -> bool:
    return sick_leave.status in OPEN_STATUSES


def _attach_schedule(sick_leave: SickLeave) -> None:
    sick_leave.milestones = [
        PoortwachterMilestone.from_milestone(m)
        for m in poortwachter.generate_milestones(case_start(sick_leave))
    ]
    sick_leave.poortwachter_active = True


async def create_sick_leave(
    db: AsyncSession,
    user_id: str,
    data: SickLeaveCreate,
    now: Optional[datetime] = None,
) -> SickLeave:
    """Register a new case; cases already six weeks old get the full schedule at once."""
    now = now or datetime.now()
    sick_leave = SickLeave(
        user_id=user_id,
        employee_id=data.employee_id,
        company_id=data.company_id,
        start_date=data.start_date,
        reported_at=now,
        reported_by=data.reported_by,
        reported_via=data.reported_via,
        work_capacity_percentage=data.work_capacity_percentage,
        status=SickLeaveStatus.active,
        notes=data.notes,
        milestones=[],
    )
    if poortwachter.should_activate(case_start(sick_leave), now):
        _attach_schedule(sick_leave)
    db.add(sick_leave)
    await db.flush()
    logger.info(
        "Sick leave %d registered for employee %s (poortwachter_active=%s)",
        sick_leave.id,
        sick_leave.employee_id,
        sick_leave.poortwachter_active,
    )
    return sick_leave


async def activate_poortwachter(
    db: AsyncSession, sick_leave: SickLeave, now: Optional[datetime] = None
) -> SickLeave:
    """Attach the schedule to an existing case. No-op when it already has one.

    ``sick_leave`` must be loaded with its milestones.
    Raises ValueError for closed cases and while the case is younger than six weeks.
    """
    if sick_leave.poortwachter_active and sick_leave.milestones:
        return sick_leave
    if not is_open(sick_leave):
        raise ValueError(f"Sick leave {sick_leave.id} is closed ({sick_leave.status.value})")
    if not poortwachter.should_activate(case_start(sick_leave), now):
        raise ValueError(
            f"Sick leave {sick_leave.id} started on {sick_leave.start_date} and has not "
            f"reached {poortwachter.ACTIVATION_WEEKS} weeks yet"
        )
    _attach_schedule(sick_leave)
    db.add(sick_leave)
    await db.flush()
    logger.info("Poortwachter activated for sick leave %d", sick_leave.id)
    return sick_leave


async def complete_case_milestone(
    db: AsyncSession,
    sick_leave: SickLeave,
    week_offset: int,
    completion_date: Optional[datetime] = None,
) -> PoortwachterMilestone:
    """Mark one milestone of a case as done.

    Raises LookupError if the case has no milestone for ``week_offset`` and
    ValueError if it was completed before.
    """
    row = next((m for m in sick_leave.milestones if m.week_offset == week_offset), None)
    if row is None:
        raise LookupError(f"Sick leave {sick_leave.id} has no week {week_offset} milestone")
    if row.completed_date is not None:
        raise ValueError(
            f"Week {week_offset} milestone was already completed on {row.completed_date}"
        )

    completed = poortwachter.complete_milestone(row.to_milestone(), completion_date)
    row.completed_date = completed.completed_date

    if week_offset == poortwachter.ARBO_WEEK and not sick_leave.arbo_service_contacted:
        sick_leave.arbo_service_contacted = True
        sick_leave.arbo_service_date = completed.completed_date.date()

    db.add(sick_leave)
    await db.flush()
    logger.info(
        "Sick leave %d: week %d milestone completed on %s",
        sick_leave.id,
        week_offset,
        row.completed_date,
    )
    return row


async def register_recovery(
    db: AsyncSession, sick_leave: SickLeave, data: RecoveryRequest
) -> SickLeave:
    """Record a (partial) return to work. Raises ValueError if it predates the start."""
    if data.end_date < sick_leave.start_date:
        raise ValueError(
            f"Recovery date {data.end_date} is before the start date {sick_leave.start_date}"
        )
    sick_leave.end_date = data.end_date
    sick_leave.actual_return_date = data.end_date
    sick_leave.work_capacity_percentage = data.work_capacity_percentage
    sick_leave.status = SickLeaveStatus(data.status)
    if data.notes is not None:
        sick_leave.notes = data.notes
    db.add(sick_leave)
    await db.flush()
    logger.info(
        "Sick leave %d closed as %s on %s", sick_leave.id, sick_leave.status.value, data.end_date
    )
    return sick_leave


def _to_response(milestone: Milestone, now: datetime) -> MilestoneResponse:
    return MilestoneResponse(
        week_offset=milestone.week_offset,
        action=milestone.action,
        due_date=milestone.due_date,
        completed_date=milestone.completed_date,
        status=poortwachter.derive_status(milestone, now),
    )


def build_overview(
    sick_leave: SickLeave,
    now: Optional[datetime] = None,
    days_ahead: int = poortwachter.DEFAULT_UPCOMING_DAYS,
) -> PoortwachterOverview:
    """Dashboard view of a case; every status is derived against ``now``."""
    now = now or datetime.now()
    start = case_start(sick_leave)
    milestones = case_milestones(sick_leave)
    next_milestone = poortwachter.get_next_milestone(milestones, now)

    return PoortwachterOverview(
        sick_leave_id=sick_leave.id,
        start_date=sick_leave.start_date,
        poortwachter_active=sick_leave.poortwachter_active,
        weeks_since_start=poortwachter.get_weeks_since(start, now),
        completion_percentage=poortwachter.get_completion_percentage(milestones),
        should_contact_arbo=poortwachter.should_contact_arbo(milestones, now),
        should_start_wia_preparation=poortwachter.should_start_wia_preparation(start, now),
        next_milestone=_to_response(next_milestone, now) if next_milestone else None,
        overdue=[_to_response(m, now) for m in poortwachter.filter_overdue(milestones, now)],
        upcoming=[
            _to_response(m, now)
            for m in poortwachter.filter_upcoming(milestones, days_ahead, now)
        ],
        milestones=[_to_response(m, now) for m in milestones],
    )


def days_sick(sick_leave: SickLeave, now: Optional[datetime] = None) -> int:
    """Days since the start of the case up to ``now``, a started day counting as a whole one.

    A partial return to work does not stop the count.
    """
    now = now or datetime.now()
    elapsed = now - case_start(sick_leave)
    return math.ceil(elapsed / timedelta(days=1))


async def company_overview(
    db: AsyncSession, company_id: str, now: Optional[datetime] = None
) -> dict:
    """Counts for the admin absence dashboard of one company."""
    now = now or datetime.now()
    active = await crud_sick_leave.get_active_for_company(db, company_id)

    long_term = [s for s in active if days_sick(s, now) > LONG_TERM_DAYS]
    tracked = [s for s in active if s.poortwachter_active]
    with_overdue = [s for s in tracked if poortwachter.filter_overdue(case_milestones(s), now)]

    return {
        "company_id": company_id,
        "active_cases": len(active),
        "long_term_cases": len(long_term),
        "poortwachter_cases": len(tracked),
        "cases_with_overdue_milestones": len(with_overdue),
        "sick_leaves": active,
    }
