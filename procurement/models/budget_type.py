"""
Modèle BudgetType - Types de budget imputés aux consultations
"""

from sqlalchemy import Column, Integer

from procurement.classification import budget_category
from procurement.database import Base
from procurement.models.mixins import AuditMixin, DesignationMixin


class BudgetType(AuditMixin, DesignationMixin, Base):
    __tablename__ = "budget_types"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    def __repr__(self):
        return f"<BudgetType(id={self.id}, designation_fr='{self.designation_fr}')>"

    @property
    def category(self) -> str:
        return budget_category(self.designation_fr)
