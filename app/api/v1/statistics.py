"""Absence statistics and the company-wide absence dashboard."""

from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.api.v1.deps import require_admin, require_user
from app.auth.roles import Role, resolve_role
from app.crud import crud_sick_leave
from app.schemas.absence_statistics import (
    AbsenceStatisticsResponse,
    CalculateStatisticsRequest,
    CompanyAbsenceOverview,
)
from app.services import absence_service, statistics_service

router = APIRouter(tags=["statistics"])


@router.get("/companies/{company_id}/absence-overview", response_model=CompanyAbsenceOverview)
async def company_absence_overview(
    company_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
):
    return await absence_service.company_overview(db, company_id)


@router.post("/statistics/absence/calculate", response_model=AbsenceStatisticsResponse)
async def calculate_statistics(
    body: CalculateStatisticsRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
):
    return await statistics_service.calculate_absence_stats(
        db, body.employee_id, body.company_id, body.year
    )


@router.get("/statistics/absence", response_model=AbsenceStatisticsResponse)
async def get_statistics(
    employee_id: str,
    year: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(require_user)],
):
    if resolve_role(user_id) != Role.admin:
        if not await crud_sick_leave.get_by_user(db, user_id, employee_id):
            raise HTTPException(403, "Not authorized to view statistics for this employee")
    stats = await statistics_service.get_absence_statistics(db, employee_id, year)
    if not stats:
        raise HTTPException(404, "No statistics for this employee and year")
    return stats
