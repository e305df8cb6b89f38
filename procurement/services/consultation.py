"""
Service Consultation - création, mise à jour, consultation et statistiques
des dossiers de consultation.
Toutes les vérifications (champs obligatoires, dates, unicité, références)
passent avant la moindre écriture.
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from procurement.audit import Principal, stamp_created, stamp_updated
from procurement.config import get_settings
from procurement.exceptions import (
    BusinessValidationError, DuplicateResourceError, MissingFieldError, ResourceNotFoundError,
)
from procurement.models import (
    ApprovalStatus, AwardMethod, BudgetType, Consultation, ConsultationStep,
    RealizationDirector, RealizationNature, RealizationStatus, Submission,
)
from procurement.services.pagination import Page, apply_sort, paginate

logger = logging.getLogger(__name__)
settings = get_settings()

# (champ id, relation, modèle, libellé)
RELATIONS = (
    ("award_method_id", "award_method", AwardMethod, "Mode de passation"),
    ("realization_nature_id", "realization_nature", RealizationNature, "Nature de réalisation"),
    ("budget_type_id", "budget_type", BudgetType, "Type de budget"),
    ("realization_status_id", "realization_status", RealizationStatus, "Statut de réalisation"),
    ("approval_status_id", "approval_status", ApprovalStatus, "Statut d'approbation"),
    ("realization_director_id", "realization_director", RealizationDirector, "Direction réalisatrice"),
    ("consultation_step_id", "consultation_step", ConsultationStep, "Étape de consultation"),
)

SCALAR_FIELDS = (
    "internal_id", "consultation_year", "reference",
    "designation_ar", "designation_en", "designation_fr",
    "allocated_amount", "financial_estimation",
    "start_date", "approval_reference", "approval_date", "publish_date", "deadline",
    "observation",
)

REQUIRED_FIELDS = ("internal_id", "consultation_year", "designation_fr")

SORT_FIELDS = (
    "id", "consultation_year", "internal_id", "reference", "designation_fr",
    "deadline", "publish_date", "start_date", "allocated_amount", "financial_estimation", "created_at",
)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _naive_utc(value: datetime | None) -> datetime | None:
    """Les dates limites sont stockées en UTC sans fuseau."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class ConsultationService:
    """Cycle de vie des consultations"""

    def __init__(self, db: Session):
        self.db = db

    # --- Validation ---

    def _validate(self, data, operation: str) -> None:
        for field in REQUIRED_FIELDS:
            if _blank(getattr(data, field)):
                raise MissingFieldError(field, operation)
        for id_field, _, _, _ in RELATIONS:
            if getattr(data, id_field) is None:
                raise MissingFieldError(id_field, operation)

        for field in ("allocated_amount", "financial_estimation"):
            amount = getattr(data, field)
            if amount is not None and amount < 0:
                raise BusinessValidationError(f"Le montant '{field}' ne peut pas être négatif")

        self._validate_dates(data)

    @staticmethod
    def _validate_dates(data) -> None:
        if data.start_date is None or data.deadline is None:
            return
        deadline = _naive_utc(data.deadline).date()
        if data.start_date > deadline:
            raise BusinessValidationError("La date de début doit précéder la date limite de dépôt")
        period = (deadline - data.start_date).days
        if period < settings.CONSULTATION_MIN_PERIOD_DAYS:
            raise BusinessValidationError(
                f"La période de consultation doit être d'au moins "
                f"{settings.CONSULTATION_MIN_PERIOD_DAYS} jours ({period} jours fournis)"
            )

    def _key_taken(self, internal_id: str, year: str, exclude_id: int | None = None) -> bool:
        query = self.db.query(Consultation.id).filter(
            Consultation.internal_id == internal_id,
            Consultation.consultation_year == year,
        )
        if exclude_id is not None:
            query = query.filter(Consultation.id != exclude_id)
        return query.first() is not None

    def _resolve(self, model, entity_id: int, label: str):
        entity = self.db.get(model, entity_id)
        if not entity:
            raise ResourceNotFoundError(label, entity_id)
        return entity

    def _assign_scalars(self, consultation: Consultation, data) -> None:
        for field in SCALAR_FIELDS:
            value = getattr(data, field)
            if isinstance(value, str):
                value = value.strip() or None
            setattr(consultation, field, value)
        consultation.deadline = _naive_utc(consultation.deadline)
        consultation.allocated_amount = data.allocated_amount or 0.0
        consultation.financial_estimation = data.financial_estimation or 0.0
        if not consultation.reference:
            consultation.reference = Consultation.build_reference(
                consultation.internal_id, consultation.consultation_year
            )

    def _commit(self, consultation: Consultation) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateResourceError(
                f"Consultation {consultation.internal_id}/{consultation.consultation_year}: "
                f"contrainte d'unicité violée"
            ) from e
        self.db.refresh(consultation)

    # --- Écriture ---

    def create(self, data, principal: Principal) -> Consultation:
        """
        Crée une consultation.
        Ordre : champs obligatoires, dates, unicité (numéro, année), résolution
        des sept références, puis assemblage et persistance.
        """
        self._validate(data, "la création")

        internal_id = data.internal_id.strip()
        year = data.consultation_year.strip()
        if self._key_taken(internal_id, year):
            raise DuplicateResourceError(
                f"Une consultation {internal_id} existe déjà pour l'année {year}"
            )

        relations = {
            relation: self._resolve(model, getattr(data, id_field), label)
            for id_field, relation, model, label in RELATIONS
        }

        consultation = Consultation()
        self._assign_scalars(consultation, data)
        for relation, entity in relations.items():
            setattr(consultation, relation, entity)
        stamp_created(consultation, principal)

        self.db.add(consultation)
        self._commit(consultation)
        logger.info(f"Consultation créée: {consultation.reference} (id={consultation.id}) par {principal.username}")
        return consultation

    def update(self, consultation_id: int, data, principal: Principal) -> Consultation:
        """Remplacement complet ; une relation n'est rechargée que si son id change"""
        consultation = self.get(consultation_id)
        self._validate(data, "la mise à jour")

        internal_id = data.internal_id.strip()
        year = data.consultation_year.strip()
        if self._key_taken(internal_id, year, exclude_id=consultation_id):
            raise DuplicateResourceError(
                f"Une consultation {internal_id} existe déjà pour l'année {year}"
            )

        changed = {}
        for id_field, relation, model, label in RELATIONS:
            new_id = getattr(data, id_field)
            if getattr(consultation, id_field) != new_id:
                changed[relation] = self._resolve(model, new_id, label)

        self._assign_scalars(consultation, data)
        for relation, entity in changed.items():
            setattr(consultation, relation, entity)
        stamp_updated(consultation, principal)

        self._commit(consultation)
        logger.info(f"Consultation #{consultation_id} mise à jour par {principal.username}")
        return consultation

    def delete(self, consultation_id: int, principal: Principal) -> None:
        """Suppression inconditionnelle, les soumissions suivent"""
        consultation = self.get(consultation_id)
        submission_count = len(consultation.submissions)
        self.db.delete(consultation)
        self.db.commit()
        logger.info(
            f"🗑️ Consultation #{consultation_id} supprimée ({submission_count} soumission(s)) "
            f"par {principal.username}"
        )

    # --- Lecture ---

    def get(self, consultation_id: int) -> Consultation:
        consultation = self.db.get(Consultation, consultation_id)
        if not consultation:
            raise ResourceNotFoundError("Consultation", consultation_id)
        return consultation

    def exists(self, consultation_id: int) -> bool:
        return self.db.query(Consultation.id).filter(Consultation.id == consultation_id).first() is not None

    def get_by_key(self, internal_id: str, year: str) -> Consultation | None:
        return (
            self.db.query(Consultation)
            .filter(Consultation.internal_id == internal_id, Consultation.consultation_year == year)
            .first()
        )

    def details(self, consultation_id: int) -> Consultation:
        """Consultation avec ses sept relations et ses soumissions chargées"""
        consultation = (
            self.db.query(Consultation)
            .options(
                *[joinedload(getattr(Consultation, relation)) for _, relation, _, _ in RELATIONS],
                selectinload(Consultation.submissions).joinedload(Submission.tender),
            )
            .filter(Consultation.id == consultation_id)
            .first()
        )
        if not consultation:
            raise ResourceNotFoundError("Consultation", consultation_id)
        return consultation

    def list_page(self, page: int = 1, size: int | None = None, sort_by: str | None = None,
             sort_dir: str | None = None) -> Page:
        if sort_by is None and sort_dir is None:
            sort_dir = "desc"
        query = apply_sort(
            self.db.query(Consultation), Consultation, sort_by, sort_dir, SORT_FIELDS, "consultation_year"
        )
        return paginate(query, page, size)

    def search(self, text: str | None, page: int = 1, size: int | None = None) -> Page:
        query = self.db.query(Consultation)
        if text and text.strip():
            pattern = f"%{text.strip()}%"
            query = query.filter(or_(
                Consultation.reference.ilike(pattern),
                Consultation.designation_fr.ilike(pattern),
                Consultation.designation_en.ilike(pattern),
                Consultation.designation_ar.ilike(pattern),
            ))
        query = query.order_by(Consultation.consultation_year.desc(), Consultation.internal_id.asc())
        return paginate(query, page, size)

    def list_by_year(self, year: str, page: int = 1, size: int | None = None) -> Page:
        query = (
            self.db.query(Consultation)
            .filter(Consultation.consultation_year == year)
            .order_by(Consultation.internal_id.asc())
        )
        return paginate(query, page, size)

    def statistics(self, year: str) -> dict:
        """Statistiques de l'année, recalculées à chaque appel (zéro si aucune consultation)"""
        now = datetime.utcnow()
        today = now.date()
        base = self.db.query(Consultation).filter(Consultation.consultation_year == year)

        total = base.count()
        total_allocated, total_estimation = (
            self.db.query(
                func.coalesce(func.sum(Consultation.allocated_amount), 0.0),
                func.coalesce(func.sum(Consultation.financial_estimation), 0.0),
            )
            .filter(Consultation.consultation_year == year)
            .one()
        )

        active = base.filter(
            Consultation.publish_date.isnot(None),
            Consultation.publish_date <= today,
            or_(Consultation.deadline.is_(None), Consultation.deadline > now),
        ).count()
        expired = base.filter(Consultation.deadline.isnot(None), Consultation.deadline < now).count()
        with_submissions = base.filter(Consultation.submissions.any()).count()
        high_value = base.filter(Consultation.allocated_amount > settings.HIGH_VALUE_THRESHOLD).count()

        total_allocated = float(total_allocated)
        statistics = {
            "year": year,
            "total_consultations": total,
            "total_allocated_amount": total_allocated,
            "total_financial_estimation": float(total_estimation),
            "average_consultation_value": total_allocated / total if total else 0.0,
            "active_consultations": active,
            "expired_consultations": expired,
            "consultations_with_submissions": with_submissions,
            "high_value_consultations": high_value,
            "average_competitive_ratio": with_submissions / total if total else 0.0,
            "generated_at": now,
        }
        logger.debug(f"📊 Statistiques {year}: {total} consultation(s)")
        return statistics

    def upcoming_deadlines(self, days: int = 7) -> list[Consultation]:
        """Consultations dont la date limite tombe dans les prochains jours"""
        now = datetime.utcnow()
        limit = now + timedelta(days=days)
        return (
            self.db.query(Consultation)
            .filter(Consultation.deadline.isnot(None), Consultation.deadline >= now, Consultation.deadline <= limit)
            .order_by(Consultation.deadline.asc())
            .all()
        )
