from app.schemas.sick_leave import (
    SickLeaveCreate,
    SickLeaveUpdate,
    RecoveryRequest,
    SickLeaveResponse,
)
from app.schemas.milestone import MilestoneResponse, CompleteMilestoneRequest, PoortwachterOverview
from app.schemas.absence_statistics import (
    CalculateStatisticsRequest,
    AbsenceStatisticsResponse,
    CompanyAbsenceOverview,
)
