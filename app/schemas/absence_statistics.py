from datetime import date, datetime
from typing import Literal
from pydantic import BaseModel, Field
from app.models.absence_statistics import StatisticsPeriod
from app.schemas.sick_leave import SickLeaveResponse


class CalculateStatisticsRequest(BaseModel):
    employee_id: str = Field(..., max_length=128)
    company_id: str = Field(..., max_length=128)
    year: int = Field(..., ge=2000, le=2100)


class AbsenceStatisticsResponse(BaseModel):
    model_config = {"from_attributes": True}
    id: int
    employee_id: str
    company_id: str
    period: StatisticsPeriod
    period_start: date
    period_end: date
    total_sick_days: int
    total_sick_hours: int
    absence_frequency: int
    average_duration: float
    absence_percentage: float
    absence_level: Literal["low", "medium", "high"]
    long_term_absence: bool
    chronic_absence: bool
    calculated_at: datetime


class CompanyAbsenceOverview(BaseModel):
    company_id: str
    active_cases: int
    long_term_cases: int
    poortwachter_cases: int
    cases_with_overdue_milestones: int
    sick_leaves: list[SickLeaveResponse]
