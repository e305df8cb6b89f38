"""
Schemas pour les soumissions
"""

from datetime import datetime
from pydantic import BaseModel, Field


class SubmissionCreate(BaseModel):
    """Dépôt d'une offre"""
    consultation_id: int | None = Field(None, description="Consultation visée")
    tender_id: int | None = Field(None, description="Fournisseur soumissionnaire")
    submission_date: datetime | None = Field(None, description="Date de dépôt (maintenant par défaut)")
    financial_offer: float | None = Field(None, description="Offre financière (0 par défaut)")
    administrative_part_id: int | None = Field(None, description="Pli administratif")
    technical_part_id: int | None = Field(None, description="Pli technique")
    financial_part_id: int | None = Field(None, description="Pli financier")


class SubmissionUpdate(SubmissionCreate):
    """Mise à jour complète - un pli absent est détaché"""
    pass


class SubmissionResponse(BaseModel):
    id: int
    consultation_id: int
    tender_id: int
    submission_date: datetime
    financial_offer: float
    administrative_part_id: int | None = None
    technical_part_id: int | None = None
    financial_part_id: int | None = None
    is_complete: bool
    is_competitive: bool
    tender_designation: str | None = None
    consultation_reference: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None

    class Config:
        from_attributes = True


class SubmissionFinancialStatistics(BaseModel):
    """Statistiques financières des offres compétitives d'une consultation"""
    consultation_id: int
    total_submissions: int = 0
    competitive_submissions: int = 0
    lowest_offer: float | None = None
    highest_offer: float | None = None
    average_offer: float | None = None
    total_offers_value: float = 0.0


class SubmissionSummary(BaseModel):
    consultation_id: int
    total_submissions: int = 0
    complete_submissions: int = 0
    competitive_submissions: int = 0
    partial_submissions: int = 0


class CanModifyResponse(BaseModel):
    id: int
    can_modify: bool
