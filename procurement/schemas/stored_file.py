"""
Schemas pour les fichiers téléversés
"""

from datetime import datetime
from pydantic import BaseModel


class StoredFileResponse(BaseModel):
    """Métadonnées d'un fichier"""
    id: int
    original_name: str
    content_type: str | None = None
    size: int
    created_at: datetime
    created_by: str | None = None

    class Config:
        from_attributes = True
