"""
Schemas Pydantic - Validation et sérialisation
"""
from procurement.schemas.common import PageResponse, ExistsResponse, CountResponse
from procurement.schemas.reference import (
    DesignationCreate, DesignationUpdate, DesignationResponse,
    AcronymCreate, AcronymUpdate, AcronymResponse, AwardMethodResponse,
    ConsultationPhaseResponse, ConsultationStepCreate, ConsultationStepUpdate, ConsultationStepResponse,
    RealizationStatusResponse,
)
from procurement.schemas.consultation import (
    ConsultationCreate, ConsultationUpdate, ConsultationResponse,
    ConsultationDetailsResponse, ConsultationStatistics,
)
from procurement.schemas.submission import (
    SubmissionCreate, SubmissionUpdate, SubmissionResponse,
    SubmissionFinancialStatistics, SubmissionSummary, CanModifyResponse,
)
from procurement.schemas.provider import (
    ProviderCreate, ProviderUpdate, ProviderResponse,
    RepresentatorCreate, RepresentatorUpdate, RepresentatorResponse,
    ClearanceCreate, ClearanceUpdate, ClearanceResponse,
)
from procurement.schemas.stored_file import StoredFileResponse
