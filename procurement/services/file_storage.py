"""
Service de stockage des fichiers - plis administratifs, techniques et financiers
"""

import logging
import os
import uuid

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from procurement.audit import Principal
from procurement.config import get_settings
from procurement.exceptions import BusinessValidationError, DependencyConflictError, ResourceNotFoundError
from procurement.models import StoredFile, Submission

logger = logging.getLogger(__name__)
settings = get_settings()


class FileStorageService:
    """Fichiers stockés sur disque sous UPLOAD_DIR, métadonnées en base"""

    def __init__(self, db: Session, upload_dir: str | None = None):
        self.db = db
        self.upload_dir = upload_dir or settings.upload_path

    def store(self, content: bytes, filename: str | None, content_type: str | None,
              principal: Principal) -> StoredFile:
        if not content:
            raise BusinessValidationError("Le fichier est vide")
        if len(content) > settings.max_upload_size:
            raise BusinessValidationError(
                f"Le fichier ne doit pas dépasser {settings.MAX_UPLOAD_SIZE_MB} Mo"
            )

        original_name = os.path.basename(filename or "") or "document"
        ext = original_name.rsplit(".", 1)[-1] if "." in original_name else "bin"
        os.makedirs(self.upload_dir, exist_ok=True)
        path = os.path.join(self.upload_dir, f"{uuid.uuid4().hex}.{ext}")
        with open(path, "wb") as f:
            f.write(content)

        stored = StoredFile(
            original_name=original_name,
            content_type=content_type,
            size=len(content),
            path=path,
            created_by=principal.username,
        )
        self.db.add(stored)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            os.remove(path)
            logger.error(f"❌ Enregistrement du fichier {original_name} impossible, contenu supprimé du disque")
            raise
        self.db.refresh(stored)
        logger.info(f"📎 Fichier stocké: {original_name} ({len(content)} octets, id={stored.id})")
        return stored

    def get(self, file_id: int) -> StoredFile:
        stored = self.db.get(StoredFile, file_id)
        if not stored:
            raise ResourceNotFoundError("Fichier", file_id)
        return stored

    def get_for_download(self, file_id: int) -> StoredFile:
        stored = self.get(file_id)
        if not os.path.exists(stored.path):
            raise ResourceNotFoundError("Fichier", file_id, message=f"Contenu du fichier #{file_id} introuvable sur le disque")
        return stored

    def delete(self, file_id: int, principal: Principal) -> None:
        stored = self.get(file_id)
        references = (
            self.db.query(Submission)
            .filter(or_(
                Submission.administrative_part_id == file_id,
                Submission.technical_part_id == file_id,
                Submission.financial_part_id == file_id,
            ))
            .count()
        )
        if references:
            raise DependencyConflictError(
                f"Impossible de supprimer le fichier #{file_id}: {references} soumission(s) y font référence"
            )

        path = stored.path
        self.db.delete(stored)
        self.db.commit()
        if os.path.exists(path):
            os.remove(path)
        logger.info(f"🗑️ Fichier #{file_id} supprimé par {principal.username}")
