"""
Endpoints pour les consultations (dossiers d'appels d'offres)
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from procurement.audit import Principal, get_principal
from procurement.config import get_settings
from procurement.database import get_db
from procurement.schemas.common import ExistsResponse, PageResponse
from procurement.schemas.consultation import (
    ConsultationCreate, ConsultationDetailsResponse, ConsultationResponse,
    ConsultationStatistics, ConsultationUpdate,
)
from procurement.services.consultation import ConsultationService

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/consultations",
    tags=["Consultations"],
)


@router.post(
    "",
    response_model=ConsultationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Créer une consultation",
    description="Contrôle les champs obligatoires, les dates, l'unicité (numéro interne, année) "
                "et les sept références avant toute écriture.",
)
def create_consultation(
    consultation_data: ConsultationCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return ConsultationService(db).create(consultation_data, principal)


@router.get(
    "",
    response_model=PageResponse[ConsultationResponse],
    summary="Lister les consultations",
)
def list_consultations(
    page: int = Query(1, ge=1, description="Numéro de page"),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Taille de page"),
    sort_by: str | None = Query(None, description="Colonne de tri"),
    sort_dir: str | None = Query(None, description="asc ou desc"),
    db: Session = Depends(get_db),
):
    return ConsultationService(db).list_page(page, size, sort_by, sort_dir)


@router.get(
    "/search",
    response_model=PageResponse[ConsultationResponse],
    summary="Rechercher par référence ou désignation",
)
def search_consultations(
    query: str | None = Query(None, description="Texte recherché"),
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return ConsultationService(db).search(query, page, size)


@router.get(
    "/year/{year}",
    response_model=PageResponse[ConsultationResponse],
    summary="Consultations d'une année",
)
def list_consultations_by_year(
    year: str,
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return ConsultationService(db).list_by_year(year, page, size)


@router.get(
    "/statistics/year/{year}",
    response_model=ConsultationStatistics,
    summary="Statistiques annuelles",
)
def consultation_statistics(year: str, db: Session = Depends(get_db)):
    return ConsultationService(db).statistics(year)


@router.get("/{consultation_id}", response_model=ConsultationResponse, summary="Détail d'une consultation")
def get_consultation(consultation_id: int, db: Session = Depends(get_db)):
    return ConsultationService(db).get(consultation_id)


@router.get("/{consultation_id}/exists", response_model=ExistsResponse, summary="Vérifier l'existence")
def consultation_exists(consultation_id: int, db: Session = Depends(get_db)):
    return ExistsResponse(id=consultation_id, exists=ConsultationService(db).exists(consultation_id))


@router.get(
    "/{consultation_id}/details",
    response_model=ConsultationDetailsResponse,
    summary="Consultation avec relations et soumissions",
)
def get_consultation_details(consultation_id: int, db: Session = Depends(get_db)):
    return ConsultationService(db).details(consultation_id)


@router.put("/{consultation_id}", response_model=ConsultationResponse, summary="Modifier une consultation")
def update_consultation(
    consultation_id: int,
    consultation_data: ConsultationUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return ConsultationService(db).update(consultation_id, consultation_data, principal)


@router.delete(
    "/{consultation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Supprimer une consultation et ses soumissions",
)
def delete_consultation(
    consultation_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    ConsultationService(db).delete(consultation_id, principal)
