"""
Schemas des données de référence (désignations et acronymes multilingues)
"""

from datetime import datetime
from pydantic import BaseModel, Field


class DesignationBase(BaseModel):
    """Désignations multilingues - la désignation française est contrôlée par le service"""
    designation_ar: str | None = Field(None, max_length=300, description="Désignation en arabe")
    designation_en: str | None = Field(None, max_length=300, description="Désignation en anglais")
    designation_fr: str | None = Field(None, max_length=300, description="Désignation en français (obligatoire)")


class DesignationCreate(DesignationBase):
    pass


class DesignationUpdate(DesignationBase):
    """Mise à jour complète (tous les champs sont remplacés)"""
    pass


class AcronymBase(DesignationBase):
    acronym_ar: str | None = Field(None, max_length=20, description="Acronyme en arabe")
    acronym_en: str | None = Field(None, max_length=20, description="Acronyme en anglais")
    acronym_fr: str | None = Field(None, max_length=20, description="Acronyme en français (obligatoire)")


class AcronymCreate(AcronymBase):
    pass


class AcronymUpdate(AcronymBase):
    pass


class ConsultationStepCreate(DesignationBase):
    consultation_phase_id: int | None = Field(None, description="Phase de rattachement")


class ConsultationStepUpdate(ConsultationStepCreate):
    pass


class AuditedResponse(BaseModel):
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None


class DesignationResponse(DesignationBase, AuditedResponse):
    """Réponse API - catégorie déduite du libellé"""
    id: int
    category: str
    is_multilingual: bool = False

    class Config:
        from_attributes = True


class AcronymResponse(AcronymBase, AuditedResponse):
    id: int
    category: str
    is_multilingual: bool = False
    display_text: str | None = None

    class Config:
        from_attributes = True


class AwardMethodResponse(AcronymResponse):
    is_open_tender: bool = False
    is_negotiated: bool = False


class ConsultationPhaseResponse(DesignationResponse):
    order: int
    is_pre_award: bool = False
    is_post_award: bool = False


class ConsultationStepResponse(DesignationResponse):
    consultation_phase_id: int
    phase_designation: str | None = None


class RealizationStatusResponse(DesignationResponse):
    is_final: bool = False
