"""
Modèle Consultation - Dossiers de consultation (appels d'offres)
"""

from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Float, Date, DateTime, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship

from procurement.database import Base
from procurement.models.mixins import AuditMixin

REFERENCE_FORMAT = "CONS-{internal_id}-{year}"


class Consultation(AuditMixin, Base):
    __tablename__ = "consultations"
    __table_args__ = (
        UniqueConstraint("internal_id", "consultation_year", name="uq_consultation_internal_id_year"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    internal_id = Column(String(3), nullable=False)
    consultation_year = Column(String(4), nullable=False, index=True)
    reference = Column(String(20), nullable=True, index=True)
    designation_ar = Column(String(300), nullable=True)
    designation_en = Column(String(300), nullable=True)
    designation_fr = Column(String(300), nullable=False)
    allocated_amount = Column(Float, nullable=False, default=0.0)
    financial_estimation = Column(Float, nullable=False, default=0.0)
    start_date = Column(Date, nullable=True)
    approval_reference = Column(String(20), nullable=True)
    approval_date = Column(Date, nullable=True)
    publish_date = Column(Date, nullable=True)
    deadline = Column(DateTime, nullable=True, comment="Date limite de dépôt des offres")
    observation = Column(String(500), nullable=True)

    award_method_id = Column(Integer, ForeignKey("award_methods.id"), nullable=False, index=True)
    realization_nature_id = Column(Integer, ForeignKey("realization_natures.id"), nullable=False, index=True)
    budget_type_id = Column(Integer, ForeignKey("budget_types.id"), nullable=False, index=True)
    realization_status_id = Column(Integer, ForeignKey("realization_statuses.id"), nullable=False, index=True)
    approval_status_id = Column(Integer, ForeignKey("approval_statuses.id"), nullable=False, index=True)
    realization_director_id = Column(Integer, ForeignKey("realization_directors.id"), nullable=False, index=True)
    consultation_step_id = Column(Integer, ForeignKey("consultation_steps.id"), nullable=False, index=True)

    # Relations
    award_method = relationship("AwardMethod")
    realization_nature = relationship("RealizationNature")
    budget_type = relationship("BudgetType")
    realization_status = relationship("RealizationStatus")
    approval_status = relationship("ApprovalStatus")
    realization_director = relationship("RealizationDirector")
    consultation_step = relationship("ConsultationStep")
    submissions = relationship("Submission", back_populates="consultation", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Consultation(id={self.id}, reference='{self.reference}')>"

    @staticmethod
    def build_reference(internal_id: str, year: str) -> str:
        return REFERENCE_FORMAT.format(internal_id=internal_id, year=year)

    # --- Désignations des relations (affichage) ---

    @property
    def award_method_designation(self) -> str | None:
        return self.award_method.designation_fr if self.award_method else None

    @property
    def realization_nature_designation(self) -> str | None:
        return self.realization_nature.designation_fr if self.realization_nature else None

    @property
    def budget_type_designation(self) -> str | None:
        return self.budget_type.designation_fr if self.budget_type else None

    @property
    def realization_status_designation(self) -> str | None:
        return self.realization_status.designation_fr if self.realization_status else None

    @property
    def approval_status_designation(self) -> str | None:
        return self.approval_status.designation_fr if self.approval_status else None

    @property
    def realization_director_designation(self) -> str | None:
        return self.realization_director.designation_fr if self.realization_director else None

    @property
    def consultation_step_designation(self) -> str | None:
        return self.consultation_step.designation_fr if self.consultation_step else None

    # --- Indicateurs calculés à la lecture ---

    @property
    def _offers(self) -> list[float]:
        return [s.financial_offer for s in self.submissions if s.financial_offer is not None]

    @property
    def submission_count(self) -> int:
        return len(self.submissions)

    @property
    def lowest_offer(self) -> float | None:
        offers = self._offers
        return min(offers) if offers else None

    @property
    def highest_offer(self) -> float | None:
        offers = self._offers
        return max(offers) if offers else None

    @property
    def average_offer(self) -> float | None:
        offers = self._offers
        return sum(offers) / len(offers) if offers else None

    @property
    def days_until_deadline(self) -> int | None:
        if not self.deadline:
            return None
        return (self.deadline.date() - datetime.utcnow().date()).days

    @property
    def is_expired(self) -> bool:
        """Vérifie si la date limite de dépôt est dépassée"""
        if not self.deadline:
            return False
        return datetime.utcnow() > self.deadline

    @property
    def is_active(self) -> bool:
        """Publiée et encore ouverte aux offres"""
        if not self.publish_date:
            return False
        return self.publish_date <= datetime.utcnow().date() and not self.is_expired

    @property
    def has_budget_overrun(self) -> bool:
        return (self.financial_estimation or 0.0) > (self.allocated_amount or 0.0)

    @property
    def budget_variance_percentage(self) -> float:
        """Écart estimation / enveloppe allouée, en pourcentage de l'enveloppe"""
        allocated = self.allocated_amount or 0.0
        if allocated == 0:
            return 0.0
        return ((self.financial_estimation or 0.0) - allocated) / allocated * 100
