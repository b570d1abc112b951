"""Poortwachter schedule endpoints for a single sick-leave case."""

from datetime import datetime
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.api.v1.deps import get_owned_sick_leave, require_admin
from app.config import get_settings
from app.models.sick_leave import SickLeave
from app.schemas.milestone import (
    CompleteMilestoneRequest,
    MilestoneResponse,
    PoortwachterOverview,
)
from app.services import absence_service, poortwachter

router = APIRouter(prefix="/sick-leaves/{sick_leave_id}/poortwachter", tags=["poortwachter"])


@router.get("", response_model=PoortwachterOverview)
async def get_overview(
    sick_leave: Annotated[SickLeave, Depends(get_owned_sick_leave)],
    days_ahead: Annotated[Optional[int], Query(ge=0, le=365)] = None,
):
    if days_ahead is None:
        days_ahead = get_settings().POORTWACHTER_UPCOMING_DAYS
    return absence_service.build_overview(sick_leave, datetime.now(), days_ahead)


@router.post("/activate", response_model=PoortwachterOverview)
async def activate(
    sick_leave: Annotated[SickLeave, Depends(get_owned_sick_leave)],
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
):
    now = datetime.now()
    try:
        await absence_service.activate_poortwachter(db, sick_leave, now)
    except ValueError as e:
        raise HTTPException(409, str(e)) from e
    return absence_service.build_overview(sick_leave, now)


@router.post("/milestones/{week_offset}/complete", response_model=MilestoneResponse)
async def complete_milestone(
    week_offset: int,
    sick_leave: Annotated[SickLeave, Depends(get_owned_sick_leave)],
    db: Annotated[AsyncSession, Depends(get_db)],
    body: Optional[CompleteMilestoneRequest] = None,
):
    completion_date = body.completion_date if body else None
    try:
        row = await absence_service.complete_case_milestone(
            db, sick_leave, week_offset, completion_date
        )
    except LookupError as e:
        raise HTTPException(404, str(e)) from e
    except ValueError as e:
        raise HTTPException(409, str(e)) from e

    milestone = row.to_milestone()
    return MilestoneResponse(
        week_offset=milestone.week_offset,
        action=milestone.action,
        due_date=milestone.due_date,
        completed_date=milestone.completed_date,
        status=poortwachter.derive_status(milestone),
    )
