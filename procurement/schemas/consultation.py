"""
Schemas pour les consultations
"""

from datetime import date, datetime
from pydantic import BaseModel, Field

from procurement.schemas.reference import (
    AwardMethodResponse, ConsultationStepResponse, DesignationResponse, RealizationStatusResponse,
)
from procurement.schemas.submission import SubmissionResponse


class ConsultationBase(BaseModel):
    """
    Champs d'une consultation.
    Les champs obligatoires et les montants sont contrôlés par le service
    afin de renvoyer une erreur métier nommant le champ en défaut.
    """
    internal_id: str | None = Field(None, max_length=3, description="Numéro interne (3 caractères max)")
    consultation_year: str | None = Field(None, pattern=r"^\d{4}$", description="Année sur 4 chiffres")
    reference: str | None = Field(None, max_length=20, description="Référence (générée si vide)")
    designation_ar: str | None = Field(None, max_length=300)
    designation_en: str | None = Field(None, max_length=300)
    designation_fr: str | None = Field(None, max_length=300, description="Intitulé en français")
    allocated_amount: float | None = Field(None, description="Enveloppe allouée")
    financial_estimation: float | None = Field(None, description="Estimation financière")
    start_date: date | None = None
    approval_reference: str | None = Field(None, max_length=20)
    approval_date: date | None = None
    publish_date: date | None = None
    deadline: datetime | None = Field(None, description="Date limite de dépôt des offres")
    observation: str | None = Field(None, max_length=500)

    award_method_id: int | None = None
    realization_nature_id: int | None = None
    budget_type_id: int | None = None
    realization_status_id: int | None = None
    approval_status_id: int | None = None
    realization_director_id: int | None = None
    consultation_step_id: int | None = None


class ConsultationCreate(ConsultationBase):
    pass


class ConsultationUpdate(ConsultationBase):
    """Remplacement complet de la consultation"""
    pass


class ConsultationResponse(BaseModel):
    id: int
    internal_id: str
    consultation_year: str
    reference: str | None = None
    designation_ar: str | None = None
    designation_en: str | None = None
    designation_fr: str
    allocated_amount: float
    financial_estimation: float
    start_date: date | None = None
    approval_reference: str | None = None
    approval_date: date | None = None
    publish_date: date | None = None
    deadline: datetime | None = None
    observation: str | None = None

    award_method_id: int
    realization_nature_id: int
    budget_type_id: int
    realization_status_id: int
    approval_status_id: int
    realization_director_id: int
    consultation_step_id: int

    award_method_designation: str | None = None
    realization_nature_designation: str | None = None
    budget_type_designation: str | None = None
    realization_status_designation: str | None = None
    approval_status_designation: str | None = None
    realization_director_designation: str | None = None
    consultation_step_designation: str | None = None

    # Indicateurs calculés
    submission_count: int = 0
    lowest_offer: float | None = None
    highest_offer: float | None = None
    average_offer: float | None = None
    days_until_deadline: int | None = None
    is_expired: bool = False
    is_active: bool = False
    has_budget_overrun: bool = False
    budget_variance_percentage: float = 0.0

    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None

    class Config:
        from_attributes = True


class ConsultationDetailsResponse(ConsultationResponse):
    """Consultation avec ses relations complètes et ses soumissions"""
    award_method: AwardMethodResponse
    realization_nature: DesignationResponse
    budget_type: DesignationResponse
    realization_status: RealizationStatusResponse
    approval_status: DesignationResponse
    realization_director: DesignationResponse
    consultation_step: ConsultationStepResponse
    submissions: list[SubmissionResponse] = []


class ConsultationStatistics(BaseModel):
    """Statistiques annuelles, recalculées à chaque appel"""
    year: str
    total_consultations: int = 0
    total_allocated_amount: float = 0.0
    total_financial_estimation: float = 0.0
    average_consultation_value: float = 0.0
    active_consultations: int = 0
    expired_consultations: int = 0
    consultations_with_submissions: int = 0
    high_value_consultations: int = 0
    average_competitive_ratio: float = 0.0
    generated_at: datetime
