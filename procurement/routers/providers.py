"""
Endpoints du registre des fournisseurs : fournisseurs, représentants, habilitations
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from procurement.audit import Principal, get_principal
from procurement.config import get_settings
from procurement.database import get_db
from procurement.schemas.common import PageResponse
from procurement.schemas.provider import (
    ClearanceCreate, ClearanceResponse, ClearanceUpdate,
    ProviderCreate, ProviderResponse, ProviderUpdate,
    RepresentatorCreate, RepresentatorResponse, RepresentatorUpdate,
)
from procurement.services.provider import ClearanceService, ProviderService, RepresentatorService

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/providers", tags=["Fournisseurs"])
representators_router = APIRouter(prefix="/provider-representators", tags=["Représentants"])
clearances_router = APIRouter(prefix="/clearances", tags=["Habilitations"])


# === Fournisseurs ===

@router.post("", response_model=ProviderResponse, status_code=status.HTTP_201_CREATED, summary="Créer un fournisseur")
def create_provider(
    provider_data: ProviderCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return ProviderService(db).create(provider_data, principal)


@router.get("", response_model=PageResponse[ProviderResponse], summary="Lister les fournisseurs")
def list_providers(
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return ProviderService(db).list_page(page, size)


@router.get("/search", response_model=PageResponse[ProviderResponse], summary="Rechercher un fournisseur")
def search_providers(
    query: str | None = Query(None, description="Désignation, acronyme ou numéro d'identification"),
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return ProviderService(db).search(query, page, size)


@router.get("/{provider_id}", response_model=ProviderResponse, summary="Détail d'un fournisseur")
def get_provider(provider_id: int, db: Session = Depends(get_db)):
    return ProviderService(db).get(provider_id)


@router.get(
    "/{provider_id}/representators",
    response_model=list[RepresentatorResponse],
    summary="Représentants d'un fournisseur",
)
def list_provider_representators(provider_id: int, db: Session = Depends(get_db)):
    return RepresentatorService(db).list_by_provider(provider_id)


@router.get(
    "/{provider_id}/clearances",
    response_model=list[ClearanceResponse],
    summary="Habilitations d'un fournisseur",
)
def list_provider_clearances(provider_id: int, db: Session = Depends(get_db)):
    return ClearanceService(db).list_by_provider(provider_id)


@router.put("/{provider_id}", response_model=ProviderResponse, summary="Modifier un fournisseur")
def update_provider(
    provider_id: int,
    provider_data: ProviderUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return ProviderService(db).update(provider_id, provider_data, principal)


@router.delete("/{provider_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Supprimer un fournisseur")
def delete_provider(
    provider_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    ProviderService(db).delete(provider_id, principal)


# === Représentants ===

@representators_router.post(
    "",
    response_model=RepresentatorResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Créer un représentant",
)
def create_representator(
    representator_data: RepresentatorCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return RepresentatorService(db).create(representator_data, principal)


@representators_router.get("", response_model=PageResponse[RepresentatorResponse], summary="Lister les représentants")
def list_representators(
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return RepresentatorService(db).list_page(page, size)


@representators_router.get("/{representator_id}", response_model=RepresentatorResponse, summary="Détail d'un représentant")
def get_representator(representator_id: int, db: Session = Depends(get_db)):
    return RepresentatorService(db).get(representator_id)


@representators_router.put("/{representator_id}", response_model=RepresentatorResponse, summary="Modifier un représentant")
def update_representator(
    representator_id: int,
    representator_data: RepresentatorUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return RepresentatorService(db).update(representator_id, representator_data, principal)


@representators_router.delete(
    "/{representator_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Supprimer un représentant",
)
def delete_representator(
    representator_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    RepresentatorService(db).delete(representator_id, principal)


# === Habilitations ===

@clearances_router.post(
    "",
    response_model=ClearanceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Créer une habilitation",
)
def create_clearance(
    clearance_data: ClearanceCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return ClearanceService(db).create(clearance_data, principal)


@clearances_router.get("", response_model=PageResponse[ClearanceResponse], summary="Lister les habilitations")
def list_clearances(
    page: int = Query(1, ge=1),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return ClearanceService(db).list_page(page, size)


@clearances_router.get("/active", response_model=list[ClearanceResponse], summary="Habilitations en cours")
def list_active_clearances(db: Session = Depends(get_db)):
    return ClearanceService(db).active()


@clearances_router.get("/expired", response_model=list[ClearanceResponse], summary="Habilitations expirées")
def list_expired_clearances(db: Session = Depends(get_db)):
    return ClearanceService(db).expired()


@clearances_router.get(
    "/expiring-soon",
    response_model=list[ClearanceResponse],
    summary="Habilitations arrivant à échéance",
)
def list_expiring_clearances(
    days: int = Query(settings.CLEARANCE_ALERT_DAYS, ge=0, le=3650, description="Horizon en jours"),
    db: Session = Depends(get_db),
):
    return ClearanceService(db).expiring_soon(days)


@clearances_router.get("/{clearance_id}", response_model=ClearanceResponse, summary="Détail d'une habilitation")
def get_clearance(clearance_id: int, db: Session = Depends(get_db)):
    return ClearanceService(db).get(clearance_id)


@clearances_router.put("/{clearance_id}", response_model=ClearanceResponse, summary="Modifier une habilitation")
def update_clearance(
    clearance_id: int,
    clearance_data: ClearanceUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    return ClearanceService(db).update(clearance_id, clearance_data, principal)


@clearances_router.delete("/{clearance_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Supprimer une habilitation")
def delete_clearance(
    clearance_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    ClearanceService(db).delete(clearance_id, principal)
