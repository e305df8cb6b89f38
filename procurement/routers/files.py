"""
Endpoints pour les fichiers (plis des soumissions)
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from procurement.audit import Principal, get_principal
from procurement.database import get_db
from procurement.schemas.stored_file import StoredFileResponse
from procurement.services.file_storage import FileStorageService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/files",
    tags=["Fichiers"],
)


@router.post(
    "",
    response_model=StoredFileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Téléverser un fichier",
)
async def upload_file(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    content = await file.read()
    return FileStorageService(db).store(content, file.filename, file.content_type, principal)


@router.get("/{file_id}", response_model=StoredFileResponse, summary="Métadonnées d'un fichier")
def get_file(file_id: int, db: Session = Depends(get_db)):
    return FileStorageService(db).get(file_id)


@router.get("/{file_id}/download", summary="Télécharger un fichier")
def download_file(file_id: int, db: Session = Depends(get_db)):
    stored = FileStorageService(db).get_for_download(file_id)
    return FileResponse(
        path=stored.path,
        media_type=stored.content_type or "application/octet-stream",
        filename=stored.original_name,
    )


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Supprimer un fichier")
def delete_file(
    file_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    FileStorageService(db).delete(file_id, principal)
