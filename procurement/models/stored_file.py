"""
Modèle StoredFile - Documents téléversés (plis des soumissions)
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime

from procurement.database import Base


class StoredFile(Base):
    __tablename__ = "stored_files"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    original_name = Column(String(255), nullable=False)
    content_type = Column(String(100), nullable=True)
    size = Column(Integer, nullable=False, default=0, comment="Taille en octets")
    path = Column(String(500), nullable=False, comment="Chemin local du fichier stocké")
    created_by = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<StoredFile(id={self.id}, name='{self.original_name}')>"
