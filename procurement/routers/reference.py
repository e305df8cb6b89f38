"""
Endpoints des données de référence.
Un même jeu de routes est monté pour chaque entité via build_reference_router.
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from procurement.audit import Principal, get_principal
from procurement.config import get_settings
from procurement.database import get_db
from procurement.exceptions import ResourceNotFoundError
from procurement.schemas.common import CountResponse, ExistsResponse, PageResponse
from procurement.schemas.reference import (
    AcronymCreate, AcronymResponse, AcronymUpdate, AwardMethodResponse,
    ConsultationPhaseResponse, ConsultationStepCreate, ConsultationStepResponse, ConsultationStepUpdate,
    DesignationCreate, DesignationResponse, DesignationUpdate, RealizationStatusResponse,
)
from procurement.services.reference import (
    ApprovalStatusService, AwardMethodService, BudgetTypeService, ConsultationPhaseService,
    ConsultationStepService, EconomicNatureService, ExclusionTypeService, RealizationDirectorService,
    RealizationNatureService, RealizationStatusService,
)

logger = logging.getLogger(__name__)
settings = get_settings()


def build_reference_router(prefix: str, tag: str, service_class, create_schema, update_schema, response_schema):
    """
    Construit le router CRUD d'une entité de référence.
    Les routes statiques (/search, /count...) sont déclarées avant /{item_id}.
    """
    router = APIRouter(prefix=prefix, tags=[tag])
    label = service_class.label

    @router.post(
        "",
        response_model=response_schema,
        status_code=status.HTTP_201_CREATED,
        summary=f"Créer : {label}",
    )
    def create_item(
        data: create_schema,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_principal),
    ):
        return service_class(db).create(data, principal)

    @router.get("", response_model=PageResponse[response_schema], summary=f"Lister : {label}")
    def list_items(
        page: int = Query(1, ge=1, description="Numéro de page"),
        size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Taille de page"),
        sort_by: str | None = Query(None, description="Colonne de tri"),
        sort_dir: str | None = Query(None, description="asc ou desc"),
        db: Session = Depends(get_db),
    ):
        return service_class(db).list_page(page, size, sort_by, sort_dir)

    @router.get("/search", response_model=PageResponse[response_schema], summary=f"Rechercher : {label}")
    def search_items(
        query: str | None = Query(None, description="Texte recherché dans les désignations"),
        page: int = Query(1, ge=1),
        size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
        db: Session = Depends(get_db),
    ):
        return service_class(db).search(query, page, size)

    @router.get("/count", response_model=CountResponse, summary=f"Compter : {label}")
    def count_items(db: Session = Depends(get_db)):
        return CountResponse(count=service_class(db).count())

    @router.get("/category/{category}", response_model=list[response_schema], summary="Filtrer par catégorie")
    def list_by_category(category: str, db: Session = Depends(get_db)):
        return service_class(db).list_by_category(category)

    @router.get("/designation-fr/{value}", response_model=response_schema, summary="Recherche par désignation")
    def get_by_designation_fr(value: str, db: Session = Depends(get_db)):
        item = service_class(db).find_by_designation_fr(value)
        if not item:
            raise ResourceNotFoundError(label, message=f"{label} '{value}' introuvable")
        return item

    if service_class.has_acronym:
        @router.get("/acronym-fr/{value}", response_model=response_schema, summary="Recherche par acronyme")
        def get_by_acronym_fr(value: str, db: Session = Depends(get_db)):
            item = service_class(db).find_by_acronym_fr(value)
            if not item:
                raise ResourceNotFoundError(label, message=f"{label} d'acronyme '{value}' introuvable")
            return item

    @router.get("/{item_id}", response_model=response_schema, summary=f"Détail : {label}")
    def get_item(item_id: int, db: Session = Depends(get_db)):
        return service_class(db).get(item_id)

    @router.get("/{item_id}/exists", response_model=ExistsResponse, summary="Vérifier l'existence")
    def item_exists(item_id: int, db: Session = Depends(get_db)):
        return ExistsResponse(id=item_id, exists=service_class(db).exists(item_id))

    @router.put("/{item_id}", response_model=response_schema, summary=f"Modifier : {label}")
    def update_item(
        item_id: int,
        data: update_schema,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_principal),
    ):
        return service_class(db).update(item_id, data, principal)

    @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary=f"Supprimer : {label}")
    def delete_item(
        item_id: int,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_principal),
    ):
        service_class(db).delete(item_id, principal)

    return router


award_methods = build_reference_router(
    "/award-methods", "Modes de passation", AwardMethodService,
    AcronymCreate, AcronymUpdate, AwardMethodResponse,
)
consultation_phases = build_reference_router(
    "/consultation-phases", "Phases de consultation", ConsultationPhaseService,
    DesignationCreate, DesignationUpdate, ConsultationPhaseResponse,
)
consultation_steps = build_reference_router(
    "/consultation-steps", "Étapes de consultation", ConsultationStepService,
    ConsultationStepCreate, ConsultationStepUpdate, ConsultationStepResponse,
)
approval_statuses = build_reference_router(
    "/approval-statuses", "Statuts d'approbation", ApprovalStatusService,
    DesignationCreate, DesignationUpdate, DesignationResponse,
)
realization_statuses = build_reference_router(
    "/realization-statuses", "Statuts de réalisation", RealizationStatusService,
    DesignationCreate, DesignationUpdate, RealizationStatusResponse,
)
realization_natures = build_reference_router(
    "/realization-natures", "Natures de réalisation", RealizationNatureService,
    DesignationCreate, DesignationUpdate, DesignationResponse,
)
realization_directors = build_reference_router(
    "/realization-directors", "Directions réalisatrices", RealizationDirectorService,
    DesignationCreate, DesignationUpdate, DesignationResponse,
)
budget_types = build_reference_router(
    "/budget-types", "Types de budget", BudgetTypeService,
    DesignationCreate, DesignationUpdate, DesignationResponse,
)
economic_natures = build_reference_router(
    "/economic-natures", "Natures économiques", EconomicNatureService,
    AcronymCreate, AcronymUpdate, AcronymResponse,
)
exclusion_types = build_reference_router(
    "/exclusion-types", "Types d'exclusion", ExclusionTypeService,
    DesignationCreate, DesignationUpdate, DesignationResponse,
)


@consultation_steps.get(
    "/phase/{phase_id}",
    response_model=list[ConsultationStepResponse],
    summary="Étapes d'une phase",
)
def list_steps_by_phase(phase_id: int, db: Session = Depends(get_db)):
    return ConsultationStepService(db).list_by_phase(phase_id)


routers = [
    award_methods, consultation_phases, consultation_steps, approval_statuses, realization_statuses,
    realization_natures, realization_directors, budget_types, economic_natures, exclusion_types,
]
