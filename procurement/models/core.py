"""
Modèles de référence du noyau : statuts d'approbation et de réalisation,
natures de réalisation, directions réalisatrices
"""

from sqlalchemy import Column, Integer

from procurement.classification import (
    approval_status_type, realization_status_category, realization_nature_category, director_type,
)
from procurement.database import Base
from procurement.models.mixins import AuditMixin, DesignationMixin


class ApprovalStatus(AuditMixin, DesignationMixin, Base):
    __tablename__ = "approval_statuses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    def __repr__(self):
        return f"<ApprovalStatus(id={self.id}, designation_fr='{self.designation_fr}')>"

    @property
    def category(self) -> str:
        return approval_status_type(self.designation_fr)


class RealizationStatus(AuditMixin, DesignationMixin, Base):
    __tablename__ = "realization_statuses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    def __repr__(self):
        return f"<RealizationStatus(id={self.id}, designation_fr='{self.designation_fr}')>"

    @property
    def category(self) -> str:
        return realization_status_category(self.designation_fr)

    @property
    def is_final(self) -> bool:
        return self.category in ("COMPLETED", "CANCELLED", "REJECTED")


class RealizationNature(AuditMixin, DesignationMixin, Base):
    __tablename__ = "realization_natures"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    def __repr__(self):
        return f"<RealizationNature(id={self.id}, designation_fr='{self.designation_fr}')>"

    @property
    def category(self) -> str:
        return realization_nature_category(self.designation_fr)


class RealizationDirector(AuditMixin, DesignationMixin, Base):
    __tablename__ = "realization_directors"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    def __repr__(self):
        return f"<RealizationDirector(id={self.id}, designation_fr='{self.designation_fr}')>"

    @property
    def category(self) -> str:
        return director_type(self.designation_fr)
