from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator
from app.models.sick_leave import ReportedVia, SickLeaveStatus, WiaDecision


class SickLeaveCreate(BaseModel):
    employee_id: str = Field(..., max_length=128)
    company_id: str = Field(..., max_length=128)
    start_date: date
    reported_by: str = Field(..., max_length=200)
    reported_via: ReportedVia = ReportedVia.app
    work_capacity_percentage: int = Field(0, ge=0, le=100)
    notes: str = ""


class SickLeaveUpdate(BaseModel):
    """Partial update of case details. Closing a case goes through the recovery endpoint."""

    work_capacity_percentage: Optional[int] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    arbo_service_contacted: Optional[bool] = None
    arbo_service_date: Optional[date] = None
    arbo_advice: Optional[str] = None
    wia_applied_date: Optional[date] = None
    wia_decision: Optional[WiaDecision] = None
    wia_percentage: Optional[int] = Field(None, ge=0, le=100)

    @field_validator("notes", "work_capacity_percentage", "arbo_service_contacted")
    @classmethod
    def reject_null(cls, v):
        # These columns are NOT NULL: leave the field out to keep the stored value
        if v is None:
            raise ValueError("may be omitted but not set to null")
        return v


class RecoveryRequest(BaseModel):
    end_date: date
    work_capacity_percentage: int = Field(100, ge=0, le=100)
    status: Literal["recovered", "partially_recovered"] = "recovered"
    notes: Optional[str] = None


class SickLeaveResponse(BaseModel):
    model_config = {"from_attributes": True}
    id: int
    user_id: str
    employee_id: str
    company_id: str
    start_date: date
    reported_at: datetime
    reported_by: str
    reported_via: ReportedVia
    end_date: Optional[date]
    actual_return_date: Optional[date]
    status: SickLeaveStatus
    work_capacity_percentage: int
    arbo_service_contacted: bool
    arbo_service_date: Optional[date]
    arbo_advice: Optional[str]
    poortwachter_active: bool
    wia_applied_date: Optional[date]
    wia_decision: Optional[WiaDecision]
    wia_percentage: Optional[int]
    notes: str
