"""
Colonnes communes aux modèles : audit et désignations multilingues
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime


class AuditMixin:
    """Horodatage et auteur de la création / dernière modification"""
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    created_by = Column(String(100), nullable=True)
    updated_by = Column(String(100), nullable=True)


class DesignationMixin:
    """Désignation arabe / anglaise optionnelle, française obligatoire et unique"""
    designation_ar = Column(String(300), nullable=True)
    designation_en = Column(String(300), nullable=True)
    designation_fr = Column(String(300), nullable=False, unique=True, index=True)

    @property
    def available_languages(self) -> list[str]:
        languages = []
        for language, value in (
            ("arabic", self.designation_ar),
            ("english", self.designation_en),
            ("french", self.designation_fr),
        ):
            if value and value.strip():
                languages.append(language)
        return languages

    @property
    def is_multilingual(self) -> bool:
        return len(self.available_languages) == 3


class AcronymMixin:
    """Acronymes arabe / anglais optionnels, français obligatoire et unique"""
    acronym_ar = Column(String(20), nullable=True)
    acronym_en = Column(String(20), nullable=True)
    acronym_fr = Column(String(20), nullable=False, unique=True, index=True)

    @property
    def display_text(self) -> str:
        return f"{self.acronym_fr} - {self.designation_fr}"
