"""FastAPI dependencies."""

from typing import Annotated, Optional
from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.auth.roles import Role, can_access_sick_leave, resolve_role
from app.crud import crud_sick_leave
from app.models.sick_leave import SickLeave


async def get_user_id(
    x_user_id: Annotated[Optional[str], Header()] = None,
) -> Optional[str]:
    return x_user_id


async def require_user(
    user_id: Annotated[Optional[str], Depends(get_user_id)],
) -> str:
    if not user_id:
        raise HTTPException(status_code=401, detail="X-User-Id header required")
    return user_id


async def require_admin(
    user_id: Annotated[str, Depends(require_user)],
) -> str:
    if resolve_role(user_id) != Role.admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return user_id


async def get_owned_sick_leave(
    sick_leave_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(require_user)],
) -> SickLeave:
    """Load a case with its milestones; 404 if missing, 403 if the caller may not see it."""
    sick_leave = await crud_sick_leave.get_with_milestones(db, sick_leave_id)
    if not sick_leave:
        raise HTTPException(status_code=404, detail="Sick leave not found")
    if not can_access_sick_leave(user_id, sick_leave):
        raise HTTPException(status_code=403, detail="Not authorized to access this sick leave")
    return sick_leave
