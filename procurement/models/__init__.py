"""
Modèles SQLAlchemy - Import centralisé
"""
from procurement.models.award_method import AwardMethod
from procurement.models.consultation_phase import ConsultationPhase, ConsultationStep
from procurement.models.core import ApprovalStatus, RealizationStatus, RealizationNature, RealizationDirector
from procurement.models.budget_type import BudgetType
from procurement.models.provider import EconomicNature, ExclusionType, Provider, ProviderRepresentator, Clearance
from procurement.models.stored_file import StoredFile
from procurement.models.consultation import Consultation
from procurement.models.submission import Submission

__all__ = [
    "AwardMethod", "ConsultationPhase", "ConsultationStep",
    "ApprovalStatus", "RealizationStatus", "RealizationNature", "RealizationDirector",
    "BudgetType", "EconomicNature", "ExclusionType",
    "Provider", "ProviderRepresentator", "Clearance",
    "StoredFile", "Consultation", "Submission",
]
