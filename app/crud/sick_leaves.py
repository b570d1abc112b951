from datetime import date
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.models.sick_leave import OPEN_STATUSES, SickLeave
from app.schemas.sick_leave import SickLeaveCreate, SickLeaveUpdate


class CRUDSickLeave(CRUDBase[SickLeave, SickLeaveCreate, SickLeaveUpdate]):
    async def get_with_milestones(self, db: AsyncSession, sick_leave_id: int) -> Optional[SickLeave]:
        result = await db.execute(
            select(SickLeave)
            .options(selectinload(SickLeave.milestones))
            .where(SickLeave.id == sick_leave_id)
        )
        return result.scalar_one_or_none()

    async def get_by_user(
        self, db: AsyncSession, user_id: str, employee_id: Optional[str] = None
    ) -> Sequence[SickLeave]:
        query = select(SickLeave).where(SickLeave.user_id == user_id)
        if employee_id:
            query = query.where(SickLeave.employee_id == employee_id)
        result = await db.execute(query.order_by(SickLeave.start_date.desc()))
        return result.scalars().all()

    async def get_by_employee(self, db: AsyncSession, employee_id: str) -> Sequence[SickLeave]:
        result = await db.execute(
            select(SickLeave)
            .where(SickLeave.employee_id == employee_id)
            .order_by(SickLeave.start_date.desc())
        )
        return result.scalars().all()

    async def get_active_for_company(
        self, db: AsyncSession, company_id: str
    ) -> Sequence[SickLeave]:
        result = await db.execute(
            select(SickLeave)
            .options(selectinload(SickLeave.milestones))
            .where(SickLeave.company_id == company_id, SickLeave.status.in_(OPEN_STATUSES))
            .order_by(SickLeave.start_date.desc())
        )
        return result.scalars().all()

    async def get_untracked_open(self, db: AsyncSession) -> Sequence[SickLeave]:
        """Open cases that have no Poortwachter schedule yet."""
        result = await db.execute(
            select(SickLeave)
            .options(selectinload(SickLeave.milestones))
            .where(
                SickLeave.status.in_(OPEN_STATUSES),
                SickLeave.poortwachter_active.is_(False),
            )
        )
        return result.scalars().all()

    async def get_tracked_open(self, db: AsyncSession) -> Sequence[SickLeave]:
        result = await db.execute(
            select(SickLeave)
            .options(selectinload(SickLeave.milestones))
            .where(
                SickLeave.status.in_(OPEN_STATUSES),
                SickLeave.poortwachter_active.is_(True),
            )
        )
        return result.scalars().all()

    async def get_started_between(
        self, db: AsyncSession, employee_id: str, start: date, end: date
    ) -> Sequence[SickLeave]:
        result = await db.execute(
            select(SickLeave).where(
                SickLeave.employee_id == employee_id,
                SickLeave.start_date >= start,
                SickLeave.start_date <= end,
            )
        )
        return result.scalars().all()

    async def get_employees_with_leave_between(
        self, db: AsyncSession, start: date, end: date
    ) -> Sequence[tuple[str, str]]:
        """Distinct (employee_id, company_id) pairs with a case starting in the range."""
        result = await db.execute(
            select(SickLeave.employee_id, SickLeave.company_id)
            .where(SickLeave.start_date >= start, SickLeave.start_date <= end)
            .distinct()
        )
        return [(row[0], row[1]) for row in result.all()]

    async def remove(self, db: AsyncSession, *, id: int) -> Optional[SickLeave]:
        # Load milestones first so the ORM cascade can delete them without lazy IO
        obj = await self.get_with_milestones(db, id)
        if obj is None:
            return None
        await db.delete(obj)
        await db.flush()
        return obj


crud_sick_leave = CRUDSickLeave(SickLeave)
