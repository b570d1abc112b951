"""Yearly absence statistics per employee (verzuimpercentage, frequency, duration)."""

import logging
from datetime import date
from typing import NamedTuple, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.crud import crud_absence_statistics, crud_sick_leave
from app.models.absence_statistics import AbsenceStatistics, StatisticsPeriod
from app.models.base import utcnow
from app.models.sick_leave import SickLeave

logger = logging.getLogger(__name__)

# A single case longer than this many whole weeks counts as long-term absence
LONG_TERM_WEEKS = 6
# This many cases in one period counts as frequent (chronic) absence
CHRONIC_FREQUENCY = 3


class AbsenceSummary(NamedTuple):
    total_sick_days: int
    total_sick_hours: int
    absence_frequency: int
    average_duration: float
    absence_percentage: float
    long_term_absence: bool
    chronic_absence: bool


def _case_days(leave: SickLeave, today: date) -> int:
    end = leave.end_date or today
    return (end - leave.start_date).days


def summarize_absence(
    leaves: Sequence[SickLeave],
    today: Optional[date] = None,
    working_days: int = 260,
    hours_per_day: int = 8,
) -> AbsenceSummary:
    """Aggregate a set of cases. Open cases are counted up to ``today``."""
    today = today or date.today()
    durations = [_case_days(leave, today) for leave in leaves]

    total_days = sum(durations)
    frequency = len(durations)
    average = total_days / frequency if frequency > 0 else 0.0
    percentage = total_days / working_days * 100 if working_days > 0 else 0.0

    return AbsenceSummary(
        total_sick_days=total_days,
        total_sick_hours=total_days * hours_per_day,
        absence_frequency=frequency,
        average_duration=average,
        absence_percentage=percentage,
        long_term_absence=any(days // 7 > LONG_TERM_WEEKS for days in durations),
        chronic_absence=frequency >= CHRONIC_FREQUENCY,
    )


async def calculate_absence_stats(
    db: AsyncSession,
    employee_id: str,
    company_id: str,
    year: int,
    today: Optional[date] = None,
) -> AbsenceStatistics:
    """Recalculate the yearly row for an employee. Repeated calls update the same row."""
    settings = get_settings()
    period_start = date(year, 1, 1)
    period_end = date(year, 12, 31)

    leaves = await crud_sick_leave.get_started_between(db, employee_id, period_start, period_end)
    summary = summarize_absence(
        leaves,
        today=today,
        working_days=settings.ABSENCE_WORKING_DAYS_PER_YEAR,
        hours_per_day=settings.ABSENCE_HOURS_PER_DAY,
    )

    stats = await crud_absence_statistics.get_existing(
        db, employee_id, StatisticsPeriod.year, period_start
    )
    if stats is None:
        stats = AbsenceStatistics(
            employee_id=employee_id,
            period=StatisticsPeriod.year,
            period_start=period_start,
            period_end=period_end,
        )
        db.add(stats)
    else:
        logger.info(
            "Absence statistics for employee %s in %d already exist (id=%d), updating",
            employee_id,
            year,
            stats.id,
        )

    stats.company_id = company_id
    for field, value in summary._asdict().items():
        setattr(stats, field, value)
    stats.calculated_at = utcnow()

    await db.flush()
    return stats


async def get_absence_statistics(
    db: AsyncSession, employee_id: str, year: int
) -> Optional[AbsenceStatistics]:
    return await crud_absence_statistics.get_for_year(db, employee_id, year)
