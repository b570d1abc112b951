from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field
from app.services.poortwachter import MilestoneStatus


class MilestoneResponse(BaseModel):
    week_offset: int
    action: str
    due_date: datetime
    completed_date: Optional[datetime]
    status: MilestoneStatus


class CompleteMilestoneRequest(BaseModel):
    completion_date: Optional[datetime] = Field(
        None, description="Defaults to the current time when omitted"
    )


class PoortwachterOverview(BaseModel):
    sick_leave_id: int
    start_date: date
    poortwachter_active: bool
    weeks_since_start: int
    completion_percentage: float
    should_contact_arbo: bool
    should_start_wia_preparation: bool
    next_milestone: Optional[MilestoneResponse]
    overdue: list[MilestoneResponse]
    upcoming: list[MilestoneResponse]
    milestones: list[MilestoneResponse]
