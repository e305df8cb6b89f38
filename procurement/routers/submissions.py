"""
Endpoints pour les soumissions (offres des fournisseurs)
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from procurement.audit import Principal, get_principal
from procurement.config import get_settings
from procurement.database import get_db
from procurement.schemas.common import PageResponse
from procurement.schemas.submission import (
    CanModifyResponse, SubmissionCreate, SubmissionFinancialStatistics, SubmissionResponse,
    SubmissionSummary, SubmissionUpdate,
)
from procurement.services.submission import SubmissionService

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/submissions",
    tags=["Soumissions"],
)


@router.post(
    "",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Déposer une offre",
)
def create_submission(
    submission_data: SubmissionCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return SubmissionService(db).create(submission_data, principal)


@router.get("", response_model=PageResponse[SubmissionResponse], summary="Lister les soumissions")
def list_submissions(
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return SubmissionService(db).list_page(page, size)


@router.get("/complete", response_model=list[SubmissionResponse], summary="Soumissions complètes (3 plis)")
def list_complete_submissions(db: Session = Depends(get_db)):
    return SubmissionService(db).complete()


@router.get("/by-offer-range", response_model=list[SubmissionResponse], summary="Filtrer par montant d'offre")
def list_submissions_by_offer_range(
    min_offer: float = Query(..., ge=0, description="Offre minimale"),
    max_offer: float = Query(..., ge=0, description="Offre maximale"),
    db: Session = Depends(get_db),
):
    return SubmissionService(db).by_offer_range(min_offer, max_offer)


@router.get(
    "/consultation/{consultation_id}",
    response_model=list[SubmissionResponse],
    summary="Soumissions d'une consultation",
)
def list_by_consultation(consultation_id: int, db: Session = Depends(get_db)):
    return SubmissionService(db).list_by_consultation(consultation_id)


@router.get(
    "/consultation/{consultation_id}/competitive",
    response_model=list[SubmissionResponse],
    summary="Offres compétitives (montant > 0)",
)
def list_competitive(consultation_id: int, db: Session = Depends(get_db)):
    return SubmissionService(db).competitive(consultation_id)


@router.get(
    "/consultation/{consultation_id}/lowest-offers",
    response_model=list[SubmissionResponse],
    summary="Offres les moins-disantes",
)
def list_lowest_offers(consultation_id: int, db: Session = Depends(get_db)):
    return SubmissionService(db).lowest_offers(consultation_id)


@router.get(
    "/consultation/{consultation_id}/financial-statistics",
    response_model=SubmissionFinancialStatistics,
    summary="Statistiques financières d'une consultation",
)
def financial_statistics(consultation_id: int, db: Session = Depends(get_db)):
    return SubmissionService(db).financial_statistics(consultation_id)


@router.get(
    "/consultation/{consultation_id}/summary",
    response_model=SubmissionSummary,
    summary="Synthèse des soumissions d'une consultation",
)
def submission_summary(consultation_id: int, db: Session = Depends(get_db)):
    return SubmissionService(db).summary(consultation_id)


@router.delete(
    "/consultation/{consultation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Supprimer toutes les soumissions d'une consultation",
)
def delete_by_consultation(
    consultation_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    SubmissionService(db).delete_by_consultation(consultation_id, principal)


@router.get("/tender/{tender_id}", response_model=list[SubmissionResponse], summary="Soumissions d'un fournisseur")
def list_by_tender(tender_id: int, db: Session = Depends(get_db)):
    return SubmissionService(db).list_by_tender(tender_id)


@router.get("/{submission_id}", response_model=SubmissionResponse, summary="Détail d'une soumission")
def get_submission(submission_id: int, db: Session = Depends(get_db)):
    return SubmissionService(db).get(submission_id)


@router.get("/{submission_id}/can-modify", response_model=CanModifyResponse, summary="Soumission modifiable ?")
def can_modify_submission(submission_id: int, db: Session = Depends(get_db)):
    return CanModifyResponse(id=submission_id, can_modify=SubmissionService(db).can_modify(submission_id))


@router.put("/{submission_id}", response_model=SubmissionResponse, summary="Modifier une soumission")
def update_submission(
    submission_id: int,
    submission_data: SubmissionUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return SubmissionService(db).update(submission_id, submission_data, principal)


@router.delete("/{submission_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Supprimer une soumission")
def delete_submission(
    submission_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    SubmissionService(db).delete(submission_id, principal)
