from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.models.absence_statistics import AbsenceStatistics, StatisticsPeriod
from app.schemas.absence_statistics import AbsenceStatisticsResponse, CalculateStatisticsRequest


class CRUDAbsenceStatistics(
    CRUDBase[AbsenceStatistics, CalculateStatisticsRequest, AbsenceStatisticsResponse]
):
    async def get_existing(
        self,
        db: AsyncSession,
        employee_id: str,
        period: StatisticsPeriod,
        period_start: date,
    ) -> Optional[AbsenceStatistics]:
        result = await db.execute(
            select(AbsenceStatistics).where(
                AbsenceStatistics.employee_id == employee_id,
                AbsenceStatistics.period == period,
                AbsenceStatistics.period_start == period_start,
            )
        )
        return result.scalar_one_or_none()

    async def get_for_year(
        self, db: AsyncSession, employee_id: str, year: int
    ) -> Optional[AbsenceStatistics]:
        return await self.get_existing(db, employee_id, StatisticsPeriod.year, date(year, 1, 1))


crud_absence_statistics = CRUDAbsenceStatistics(AbsenceStatistics)
