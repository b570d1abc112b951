"""Role resolution for the X-User-Id header: admin (configured) or owner of own cases."""

from enum import Enum

from app.config import get_settings
from app.models.sick_leave import SickLeave


class Role(str, Enum):
    admin = "admin"
    employee = "employee"


def resolve_role(user_id: str) -> Role:
    if user_id in get_settings().get_admin_user_ids():
        return Role.admin
    return Role.employee


def can_access_sick_leave(user_id: str, sick_leave: SickLeave) -> bool:
    """Admins see every case; everyone else only the cases they registered."""
    if resolve_role(user_id) == Role.admin:
        return True
    return sick_leave.user_id == user_id
