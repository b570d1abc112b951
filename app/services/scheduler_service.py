"""APScheduler cron jobs (runs in-process with single uvicorn worker)."""
import logging
from datetime import date, datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from app.database import AsyncSessionLocal

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


async def activate_due_cases(db, now: datetime) -> list[int]:
    """Attach a schedule to every open case that crossed six weeks. Returns the case ids."""
    from app.crud import crud_sick_leave
    from app.services import absence_service, poortwachter

    activated: list[int] = []
    for sick_leave in await crud_sick_leave.get_untracked_open(db):
        if not poortwachter.should_activate(absence_service.case_start(sick_leave), now):
            continue
        await absence_service.activate_poortwachter(db, sick_leave, now)
        activated.append(sick_leave.id)
    return activated


async def collect_attention_points(db, now: datetime) -> list[dict]:
    """Per tracked case: overdue weeks plus arbo / WIA flags, only where something is due."""
    from app.crud import crud_sick_leave
    from app.services import absence_service, poortwachter

    points: list[dict] = []
    for sick_leave in await crud_sick_leave.get_tracked_open(db):
        milestones = absence_service.case_milestones(sick_leave)
        start = absence_service.case_start(sick_leave)
        overdue = poortwachter.filter_overdue(milestones, now)
        contact_arbo = poortwachter.should_contact_arbo(milestones, now)
        prepare_wia = poortwachter.should_start_wia_preparation(start, now)
        if not (overdue or contact_arbo or prepare_wia):
            continue
        points.append(
            {
                "sick_leave_id": sick_leave.id,
                "employee_id": sick_leave.employee_id,
                "company_id": sick_leave.company_id,
                "overdue_weeks": [m.week_offset for m in overdue],
                "contact_arbo": contact_arbo,
                "prepare_wia": prepare_wia and sick_leave.wia_applied_date is None,
            }
        )
    return points


async def _activate_poortwachter_cases():
    """06:00 – start tracking cases that passed the six-week mark."""
    async with AsyncSessionLocal() as db:
        try:
            activated = await activate_due_cases(db, datetime.now())
            await db.commit()
            logger.info("Poortwachter activated for %d case(s): %s", len(activated), activated)
        except Exception as exc:
            logger.error("Poortwachter activation job failed: %s", exc)
            await db.rollback()


async def _report_attention_points():
    """08:00 – log overdue milestones and arbo / WIA deadlines for case managers."""
    async with AsyncSessionLocal() as db:
        try:
            points = await collect_attention_points(db, datetime.now())
        except Exception as exc:
            logger.error("Poortwachter digest job failed: %s", exc)
            await db.rollback()
            return
        for point in points:
            logger.warning(
                "Sick leave %d (employee %s, company %s): overdue weeks %s, "
                "contact arbo=%s, prepare WIA=%s",
                point["sick_leave_id"],
                point["employee_id"],
                point["company_id"],
                point["overdue_weeks"],
                point["contact_arbo"],
                point["prepare_wia"],
            )
        logger.info("Poortwachter digest: %d case(s) need attention", len(points))


async def _refresh_absence_statistics():
    """1st of month 03:00 – recalculate this year's statistics for everyone with a case."""
    from app.crud import crud_sick_leave
    from app.services import statistics_service

    async with AsyncSessionLocal() as db:
        today = date.today()
        pairs = await crud_sick_leave.get_employees_with_leave_between(
            db, date(today.year, 1, 1), date(today.year, 12, 31)
        )
        for employee_id, company_id in pairs:
            try:
                await statistics_service.calculate_absence_stats(
                    db, employee_id, company_id, today.year, today
                )
                await db.commit()
            except Exception as exc:
                logger.error("Absence statistics failed for employee %s: %s", employee_id, exc)
                await db.rollback()


def setup_scheduler():
    """Register all cron jobs. Call once at app startup."""
    scheduler.add_job(
        _activate_poortwachter_cases,
        CronTrigger(hour=6, minute=0),
        id="poortwachter_activation",
        replace_existing=True,
    )
    scheduler.add_job(
        _report_attention_points,
        CronTrigger(hour=8, minute=0),
        id="poortwachter_digest",
        replace_existing=True,
    )
    scheduler.add_job(
        _refresh_absence_statistics,
        CronTrigger(day=1, hour=3, minute=0),
        id="absence_statistics",
        replace_existing=True,
    )
    logger.info("Scheduler jobs registered: %s", [j.id for j in scheduler.get_jobs()])
