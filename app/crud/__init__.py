from app.crud.sick_leaves import crud_sick_leave
from app.crud.absence_statistics import crud_absence_statistics

__all__ = [
    "crud_sick_leave",
    "crud_absence_statistics",
]
