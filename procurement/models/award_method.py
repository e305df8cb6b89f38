"""
Modèle AwardMethod - Modes de passation des marchés
"""

from sqlalchemy import Column, Integer

from procurement.classification import award_method_category
from procurement.database import Base
from procurement.models.mixins import AuditMixin, DesignationMixin, AcronymMixin


class AwardMethod(AuditMixin, DesignationMixin, AcronymMixin, Base):
    __tablename__ = "award_methods"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    def __repr__(self):
        return f"<AwardMethod(id={self.id}, acronym_fr='{self.acronym_fr}')>"

    @property
    def category(self) -> str:
        """Catégorie déduite de l'acronyme français (AO, GRE, CP...)"""
        return award_method_category(self.acronym_fr)

    @property
    def is_open_tender(self) -> bool:
        return self.category == "APPEL_OFFRES"

    @property
    def is_negotiated(self) -> bool:
        return self.category == "MARCHE_NEGOCIE"
