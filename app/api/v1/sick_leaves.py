"""Sick-leave (ziekmelding) endpoints."""

from typing import Annotated, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.api.v1.deps import get_owned_sick_leave, require_admin, require_user
from app.auth.roles import Role, resolve_role
from app.crud import crud_sick_leave
from app.models.sick_leave import SickLeave
from app.schemas.sick_leave import (
    RecoveryRequest,
    SickLeaveCreate,
    SickLeaveResponse,
    SickLeaveUpdate,
)
from app.services import absence_service

router = APIRouter(prefix="/sick-leaves", tags=["sick-leaves"])


@router.get("", response_model=list[SickLeaveResponse])
async def list_sick_leaves(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(require_user)],
    employee_id: Optional[str] = None,
):
    if employee_id and resolve_role(user_id) == Role.admin:
        return await crud_sick_leave.get_by_employee(db, employee_id)
    return await crud_sick_leave.get_by_user(db, user_id, employee_id)


@router.post("", response_model=SickLeaveResponse, status_code=201)
async def create_sick_leave(
    body: SickLeaveCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(require_user)],
):
    return await absence_service.create_sick_leave(db, user_id, body)


@router.get("/{sick_leave_id}", response_model=SickLeaveResponse)
async def get_sick_leave(
    sick_leave: Annotated[SickLeave, Depends(get_owned_sick_leave)],
):
    return sick_leave


@router.patch("/{sick_leave_id}", response_model=SickLeaveResponse)
async def update_sick_leave(
    body: SickLeaveUpdate,
    sick_leave: Annotated[SickLeave, Depends(get_owned_sick_leave)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await crud_sick_leave.update(db, db_obj=sick_leave, obj_in=body)


@router.post("/{sick_leave_id}/recovery", response_model=SickLeaveResponse)
async def register_recovery(
    body: RecoveryRequest,
    sick_leave: Annotated[SickLeave, Depends(get_owned_sick_leave)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    try:
        return await absence_service.register_recovery(db, sick_leave, body)
    except ValueError as e:
        raise HTTPException(422, str(e)) from e


@router.delete("/{sick_leave_id}")
async def delete_sick_leave(
    sick_leave_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    _: Annotated[str, Depends(require_admin)],
):
    s = await crud_sick_leave.remove(db, id=sick_leave_id)
    if not s:
        raise HTTPException(404, "Sick leave not found")
    return {"success": True}
