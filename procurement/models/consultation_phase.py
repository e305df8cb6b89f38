"""
Modèles ConsultationPhase / ConsultationStep - Phases et étapes du cycle de consultation
"""

from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship

from procurement.classification import (
    consultation_phase_type, consultation_step_type, phase_order, PRE_AWARD_PHASES, POST_AWARD_PHASES,
)
from procurement.database import Base
from procurement.models.mixins import AuditMixin, DesignationMixin


class ConsultationPhase(AuditMixin, DesignationMixin, Base):
    __tablename__ = "consultation_phases"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Relations
    steps = relationship("ConsultationStep", back_populates="phase")

    def __repr__(self):
        return f"<ConsultationPhase(id={self.id}, designation_fr='{self.designation_fr}')>"

    @property
    def category(self) -> str:
        return consultation_phase_type(self.designation_fr)

    @property
    def order(self) -> int:
        return phase_order(self.category)

    @property
    def is_pre_award(self) -> bool:
        return self.category in PRE_AWARD_PHASES

    @property
    def is_post_award(self) -> bool:
        return self.category in POST_AWARD_PHASES


class ConsultationStep(AuditMixin, DesignationMixin, Base):
    __tablename__ = "consultation_steps"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    consultation_phase_id = Column(
        Integer,
        ForeignKey("consultation_phases.id"),
        nullable=False,
        index=True,
    )

    # Relations
    phase = relationship("ConsultationPhase", back_populates="steps")

    def __repr__(self):
        return f"<ConsultationStep(id={self.id}, phase_id={self.consultation_phase_id})>"

    @property
    def category(self) -> str:
        return consultation_step_type(self.designation_fr)

    @property
    def phase_designation(self) -> str | None:
        return self.phase.designation_fr if self.phase else None
