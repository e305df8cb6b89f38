"""
Service générique des données de référence.
Chaque entité de référence (mode de passation, phase, statut, nature...)
partage le même cycle : désignation française obligatoire et unique,
recherche multilingue, liste paginée, classement par catégorie déduite.
"""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from procurement.audit import Principal, stamp_created, stamp_updated
from procurement.exceptions import (
    DependencyConflictError, DuplicateResourceError, MissingFieldError, ResourceNotFoundError,
)
from procurement.models import (
    ApprovalStatus, AwardMethod, BudgetType, Consultation, ConsultationPhase, ConsultationStep,
    EconomicNature, ExclusionType, Provider, RealizationDirector, RealizationNature, RealizationStatus,
)
from procurement.services.pagination import Page, apply_sort, paginate

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ReferenceDataService:
    """CRUD commun aux entités désignation (et acronyme)"""

    model = None
    label = "Référence"
    has_acronym = False
    # (modèle dépendant, colonne FK, libellé) vérifiés avant suppression
    dependents: tuple = ()

    def __init__(self, db: Session):
        self.db = db

    # --- Tri ---

    @property
    def default_sort(self) -> str:
        return "acronym_fr" if self.has_acronym else "designation_fr"

    @property
    def sort_fields(self) -> tuple:
        fields = ("id", "designation_fr", "designation_en", "designation_ar", "created_at", "updated_at")
        if self.has_acronym:
            fields += ("acronym_fr", "acronym_en", "acronym_ar")
        return fields

    # --- Validation ---

    def _scalar_fields(self) -> tuple:
        fields = ("designation_ar", "designation_en", "designation_fr")
        if self.has_acronym:
            fields += ("acronym_ar", "acronym_en", "acronym_fr")
        return fields

    def _values(self, data) -> dict:
        return {field: _clean(getattr(data, field)) for field in self._scalar_fields()}

    def _is_taken(self, column, value: str, exclude_id: int | None) -> bool:
        query = self.db.query(self.model.id).filter(column == value)
        if exclude_id is not None:
            query = query.filter(self.model.id != exclude_id)
        return query.first() is not None

    def _validate(self, values: dict, exclude_id: int | None = None, operation: str = "la création") -> None:
        if not values["designation_fr"]:
            raise MissingFieldError("designation_fr", operation)
        if self.has_acronym and not values["acronym_fr"]:
            raise MissingFieldError("acronym_fr", operation)

        if self._is_taken(self.model.designation_fr, values["designation_fr"], exclude_id):
            raise DuplicateResourceError(
                f"{self.label} avec la désignation '{values['designation_fr']}' existe déjà"
            )
        if self.has_acronym and self._is_taken(self.model.acronym_fr, values["acronym_fr"], exclude_id):
            raise DuplicateResourceError(
                f"{self.label} avec l'acronyme '{values['acronym_fr']}' existe déjà"
            )

    def _apply_relations(self, entity, data) -> None:
        """Résolution des relations propres à l'entité (aucune par défaut)"""

    def _commit(self, entity) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateResourceError(f"{self.label}: contrainte d'unicité violée") from e
        self.db.refresh(entity)

    # --- Écriture ---

    def create(self, data, principal: Principal):
        values = self._values(data)
        self._validate(values)

        entity = self.model(**values)
        self._apply_relations(entity, data)
        stamp_created(entity, principal)

        self.db.add(entity)
        self._commit(entity)
        logger.info(f"{self.label} créé(e): {entity.designation_fr} (id={entity.id}) par {principal.username}")
        return entity

    def update(self, entity_id: int, data, principal: Principal):
        entity = self.get(entity_id)
        values = self._values(data)
        self._validate(values, exclude_id=entity_id, operation="la mise à jour")

        for field, value in values.items():
            setattr(entity, field, value)
        self._apply_relations(entity, data)
        stamp_updated(entity, principal)

        self._commit(entity)
        logger.info(f"{self.label} #{entity_id} mis(e) à jour par {principal.username}")
        return entity

    def _check_dependents(self, entity) -> None:
        for dependent_model, column_name, dependent_label in self.dependents:
            count = (
                self.db.query(dependent_model)
                .filter(getattr(dependent_model, column_name) == entity.id)
                .count()
            )
            if count:
                raise DependencyConflictError(
                    f"Impossible de supprimer {self.label} #{entity.id}: "
                    f"{count} {dependent_label} y font référence"
                )

    def delete(self, entity_id: int, principal: Principal) -> None:
        entity = self.get(entity_id)
        self._check_dependents(entity)
        self.db.delete(entity)
        self.db.commit()
        logger.info(f"🗑️ {self.label} #{entity_id} supprimé(e) par {principal.username}")

    # --- Lecture ---

    def get(self, entity_id: int):
        entity = self.db.get(self.model, entity_id)
        if not entity:
            raise ResourceNotFoundError(self.label, entity_id)
        return entity

    def exists(self, entity_id: int) -> bool:
        return self.db.query(self.model.id).filter(self.model.id == entity_id).first() is not None

    def find_by_designation_fr(self, designation_fr: str):
        return self.db.query(self.model).filter(self.model.designation_fr == designation_fr).first()

    def find_by_acronym_fr(self, acronym_fr: str):
        if not self.has_acronym:
            return None
        return self.db.query(self.model).filter(self.model.acronym_fr == acronym_fr).first()

    def list_page(self, page: int = 1, size: int | None = None, sort_by: str | None = None,
             sort_dir: str | None = None) -> Page:
        query = apply_sort(
            self.db.query(self.model), self.model, sort_by, sort_dir, self.sort_fields, self.default_sort
        )
        return paginate(query, page, size)

    def search(self, text: str | None, page: int = 1, size: int | None = None) -> Page:
        """Recherche sur les désignations (et acronymes), insensible à la casse"""
        query = self.db.query(self.model)
        text = _clean(text)
        if text:
            pattern = f"%{text}%"
            query = query.filter(or_(*[
                getattr(self.model, field).ilike(pattern) for field in self._scalar_fields()
            ]))
        query = apply_sort(query, self.model, None, None, self.sort_fields, self.default_sort)
        return paginate(query, page, size)

    def count(self) -> int:
        return self.db.query(self.model).count()

    def list_by_category(self, category: str) -> list:
        """Catégorie déduite du libellé : filtrage en mémoire"""
        wanted = category.strip().upper()
        entities = self.db.query(self.model).order_by(getattr(self.model, self.default_sort)).all()
        return [entity for entity in entities if entity.category == wanted]


class AwardMethodService(ReferenceDataService):
    model = AwardMethod
    label = "Mode de passation"
    has_acronym = True
    dependents = ((Consultation, "award_method_id", "consultation(s)"),)


class ConsultationPhaseService(ReferenceDataService):
    model = ConsultationPhase
    label = "Phase de consultation"
    dependents = ((ConsultationStep, "consultation_phase_id", "étape(s)"),)


class ConsultationStepService(ReferenceDataService):
    model = ConsultationStep
    label = "Étape de consultation"
    dependents = ((Consultation, "consultation_step_id", "consultation(s)"),)

    def _apply_relations(self, entity, data) -> None:
        if data.consultation_phase_id is None:
            raise MissingFieldError("consultation_phase_id")
        if entity.consultation_phase_id != data.consultation_phase_id or entity.phase is None:
            phase = self.db.get(ConsultationPhase, data.consultation_phase_id)
            if not phase:
                raise ResourceNotFoundError("Phase de consultation", data.consultation_phase_id)
            entity.phase = phase

    def list_by_phase(self, phase_id: int) -> list:
        if not self.db.get(ConsultationPhase, phase_id):
            raise ResourceNotFoundError("Phase de consultation", phase_id)
        return (
            self.db.query(ConsultationStep)
            .filter(ConsultationStep.consultation_phase_id == phase_id)
            .order_by(ConsultationStep.designation_fr)
            .all()
        )


class ApprovalStatusService(ReferenceDataService):
    model = ApprovalStatus
    label = "Statut d'approbation"
    dependents = ((Consultation, "approval_status_id", "consultation(s)"),)


class RealizationStatusService(ReferenceDataService):
    model = RealizationStatus
    label = "Statut de réalisation"
    dependents = ((Consultation, "realization_status_id", "consultation(s)"),)


class RealizationNatureService(ReferenceDataService):
    model = RealizationNature
    label = "Nature de réalisation"
    dependents = ((Consultation, "realization_nature_id", "consultation(s)"),)


class RealizationDirectorService(ReferenceDataService):
    model = RealizationDirector
    label = "Direction réalisatrice"
    dependents = ((Consultation, "realization_director_id", "consultation(s)"),)


class BudgetTypeService(ReferenceDataService):
    model = BudgetType
    label = "Type de budget"
    dependents = ((Consultation, "budget_type_id", "consultation(s)"),)


class EconomicNatureService(ReferenceDataService):
    model = EconomicNature
    label = "Nature économique"
    has_acronym = True
    dependents = ((Provider, "economic_nature_id", "fournisseur(s)"),)


class ExclusionTypeService(ReferenceDataService):
    model = ExclusionType
    label = "Type d'exclusion"
