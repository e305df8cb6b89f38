"""
Modèle Submission - Offres déposées par les soumissionnaires
"""

from datetime import datetime

from sqlalchemy import (
    Column, Integer, Float, DateTime, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship

from procurement.database import Base
from procurement.models.mixins import AuditMixin


class Submission(AuditMixin, Base):
    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint("consultation_id", "tender_id", name="uq_submission_consultation_tender"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    submission_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    financial_offer = Column(Float, nullable=False, default=0.0)
    consultation_id = Column(
        Integer,
        ForeignKey("consultations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tender_id = Column(
        Integer,
        ForeignKey("providers.id"),
        nullable=False,
        index=True,
        comment="Fournisseur soumissionnaire",
    )
    administrative_part_id = Column(Integer, ForeignKey("stored_files.id"), nullable=True)
    technical_part_id = Column(Integer, ForeignKey("stored_files.id"), nullable=True)
    financial_part_id = Column(Integer, ForeignKey("stored_files.id"), nullable=True)

    # Relations
    consultation = relationship("Consultation", back_populates="submissions")
    tender = relationship("Provider", back_populates="submissions")
    administrative_part = relationship("StoredFile", foreign_keys=[administrative_part_id])
    technical_part = relationship("StoredFile", foreign_keys=[technical_part_id])
    financial_part = relationship("StoredFile", foreign_keys=[financial_part_id])

    def __repr__(self):
        return f"<Submission(consultation_id={self.consultation_id}, tender_id={self.tender_id})>"

    @property
    def is_complete(self) -> bool:
        """Les trois plis (administratif, technique, financier) sont joints"""
        return all((self.administrative_part_id, self.technical_part_id, self.financial_part_id))

    @property
    def is_competitive(self) -> bool:
        return (self.financial_offer or 0.0) > 0

    @property
    def tender_designation(self) -> str | None:
        return self.tender.display_name if self.tender else None

    @property
    def consultation_reference(self) -> str | None:
        return self.consultation.reference if self.consultation else None
