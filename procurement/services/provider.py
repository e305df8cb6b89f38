"""
Services du registre des fournisseurs : fournisseurs, représentants, habilitations
"""

import logging
import re
from datetime import datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from procurement.audit import Principal, stamp_created, stamp_updated
from procurement.exceptions import (
    BusinessValidationError, DependencyConflictError, DuplicateResourceError,
    MissingFieldError, ResourceNotFoundError,
)
from procurement.models import Clearance, EconomicNature, Provider, ProviderRepresentator, Submission
from procurement.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

PROVIDER_FIELDS = (
    "designation_lt", "designation_ar", "acronym_lt", "acronym_ar", "address", "capital",
    "commercial_registry_number", "commercial_registry_date", "tax_identity_number",
    "stat_identity_number", "bank", "bank_account", "swift_number", "phone_numbers",
    "fax_numbers", "mail", "website",
)

# Identifiants légaux uniques lorsqu'ils sont renseignés
UNIQUE_PROVIDER_FIELDS = {
    "commercial_registry_number": "registre du commerce",
    "tax_identity_number": "identification fiscale",
    "stat_identity_number": "identification statistique",
}

REPRESENTATOR_FIELDS = (
    "firstname", "lastname", "birth_date", "birth_place", "address", "job_title",
    "mobile_phone_number", "fix_phone_number", "mail",
)


def _clean(value):
    if isinstance(value, str):
        return value.strip() or None
    return value


def _commit(db: Session, entity, label: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateResourceError(f"{label}: contrainte d'unicité violée") from e
    db.refresh(entity)


class ProviderService:
    """Fournisseurs (soumissionnaires potentiels)"""

    def __init__(self, db: Session):
        self.db = db

    def _values(self, data) -> dict:
        return {field: _clean(getattr(data, field)) for field in PROVIDER_FIELDS}

    def _validate(self, values: dict, exclude_id: int | None = None) -> None:
        if not values["designation_lt"] and not values["designation_ar"]:
            raise BusinessValidationError(
                "Au moins une désignation (latine ou arabe) est obligatoire pour un fournisseur"
            )
        if values["capital"] is not None and values["capital"] < 0:
            raise BusinessValidationError("Le capital ne peut pas être négatif")

        for field, label in UNIQUE_PROVIDER_FIELDS.items():
            value = values[field]
            if not value:
                continue
            query = self.db.query(Provider.id).filter(getattr(Provider, field) == value)
            if exclude_id is not None:
                query = query.filter(Provider.id != exclude_id)
            if query.first() is not None:
                raise DuplicateResourceError(f"Un fournisseur avec le numéro d'{label} '{value}' existe déjà")

    def _economic_nature(self, nature_id: int | None) -> EconomicNature:
        if nature_id is None:
            raise MissingFieldError("economic_nature_id")
        nature = self.db.get(EconomicNature, nature_id)
        if not nature:
            raise ResourceNotFoundError("Nature économique", nature_id)
        return nature

    def create(self, data, principal: Principal) -> Provider:
        values = self._values(data)
        self._validate(values)
        nature = self._economic_nature(data.economic_nature_id)

        provider = Provider(**values)
        provider.economic_nature = nature
        stamp_created(provider, principal)

        self.db.add(provider)
        _commit(self.db, provider, "Fournisseur")
        logger.info(f"Fournisseur créé: {provider.display_name} (id={provider.id}) par {principal.username}")
        return provider

    def update(self, provider_id: int, data, principal: Principal) -> Provider:
        provider = self.get(provider_id)
        values = self._values(data)
        self._validate(values, exclude_id=provider_id)
        if data.economic_nature_id != provider.economic_nature_id:
            provider.economic_nature = self._economic_nature(data.economic_nature_id)

        for field, value in values.items():
            setattr(provider, field, value)
        stamp_updated(provider, principal)

        _commit(self.db, provider, "Fournisseur")
        logger.info(f"Fournisseur #{provider_id} mis à jour par {principal.username}")
        return provider

    def delete(self, provider_id: int, principal: Principal) -> None:
        """Refusée si le fournisseur a soumissionné ; représentants et habilitations suivent"""
        provider = self.get(provider_id)
        submissions = self.db.query(Submission).filter(Submission.tender_id == provider_id).count()
        if submissions:
            raise DependencyConflictError(
                f"Impossible de supprimer le fournisseur #{provider_id}: {submissions} soumission(s) y font référence"
            )
        # Habilitations d'abord : elles référencent aussi les représentants
        provider.clearances.clear()
        self.db.flush()
        self.db.delete(provider)
        self.db.commit()
        logger.info(f"🗑️ Fournisseur #{provider_id} supprimé par {principal.username}")

    def get(self, provider_id: int) -> Provider:
        provider = self.db.get(Provider, provider_id)
        if not provider:
            raise ResourceNotFoundError("Fournisseur", provider_id)
        return provider

    def list_page(self, page: int = 1, size: int | None = None) -> Page:
        query = self.db.query(Provider).order_by(Provider.designation_lt.asc(), Provider.id.asc())
        return paginate(query, page, size)

    def search(self, text: str | None, page: int = 1, size: int | None = None) -> Page:
        query = self.db.query(Provider)
        if text and text.strip():
            pattern = f"%{text.strip()}%"
            query = query.filter(or_(
                Provider.designation_lt.ilike(pattern),
                Provider.designation_ar.ilike(pattern),
                Provider.acronym_lt.ilike(pattern),
                Provider.acronym_ar.ilike(pattern),
                Provider.commercial_registry_number.ilike(pattern),
                Provider.tax_identity_number.ilike(pattern),
                Provider.stat_identity_number.ilike(pattern),
            ))
        query = query.order_by(Provider.designation_lt.asc(), Provider.id.asc())
        return paginate(query, page, size)


class RepresentatorService:
    """Représentants légaux des fournisseurs"""

    def __init__(self, db: Session):
        self.db = db

    def _values(self, data) -> dict:
        return {field: _clean(getattr(data, field)) for field in REPRESENTATOR_FIELDS}

    def _validate(self, values: dict, exclude_id: int | None = None, operation: str = "la création") -> None:
        for field in ("firstname", "lastname"):
            if not values[field]:
                raise MissingFieldError(field, operation)

        if values["mail"] and not EMAIL_PATTERN.match(values["mail"]):
            raise BusinessValidationError(f"Adresse e-mail invalide: '{values['mail']}'")

        for field, label in (("mail", "l'e-mail"), ("mobile_phone_number", "le mobile")):
            value = values[field]
            if not value:
                continue
            query = self.db.query(ProviderRepresentator.id).filter(getattr(ProviderRepresentator, field) == value)
            if exclude_id is not None:
                query = query.filter(ProviderRepresentator.id != exclude_id)
            if query.first() is not None:
                raise DuplicateResourceError(f"Un représentant avec {label} '{value}' existe déjà")

    def _provider(self, provider_id: int | None) -> Provider:
        if provider_id is None:
            raise MissingFieldError("provider_id")
        provider = self.db.get(Provider, provider_id)
        if not provider:
            raise ResourceNotFoundError("Fournisseur", provider_id)
        return provider

    def create(self, data, principal: Principal) -> ProviderRepresentator:
        values = self._values(data)
        self._validate(values)
        provider = self._provider(data.provider_id)

        representator = ProviderRepresentator(**values)
        representator.provider = provider
        stamp_created(representator, principal)

        self.db.add(representator)
        _commit(self.db, representator, "Représentant")
        logger.info(f"Représentant créé: {representator.full_name} (id={representator.id}) par {principal.username}")
        return representator

    def update(self, representator_id: int, data, principal: Principal) -> ProviderRepresentator:
        representator = self.get(representator_id)
        values = self._values(data)
        self._validate(values, exclude_id=representator_id, operation="la mise à jour")
        if data.provider_id != representator.provider_id:
            provider = self._provider(data.provider_id)
            clearances = self._clearance_count(representator_id)
            if clearances:
                raise DependencyConflictError(
                    f"Impossible de changer le fournisseur du représentant #{representator_id}: "
                    f"{clearances} habilitation(s) y font référence"
                )
            representator.provider = provider

        for field, value in values.items():
            setattr(representator, field, value)
        stamp_updated(representator, principal)

        _commit(self.db, representator, "Représentant")
        logger.info(f"Représentant #{representator_id} mis à jour par {principal.username}")
        return representator

    def delete(self, representator_id: int, principal: Principal) -> None:
        representator = self.get(representator_id)
        clearances = self._clearance_count(representator_id)
        if clearances:
            raise DependencyConflictError(
                f"Impossible de supprimer le représentant #{representator_id}: "
                f"{clearances} habilitation(s) y font référence"
            )
        self.db.delete(representator)
        self.db.commit()
        logger.info(f"🗑️ Représentant #{representator_id} supprimé par {principal.username}")

    def _clearance_count(self, representator_id: int) -> int:
        return (
            self.db.query(Clearance)
            .filter(Clearance.provider_representator_id == representator_id)
            .count()
        )

    def get(self, representator_id: int) -> ProviderRepresentator:
        representator = self.db.get(ProviderRepresentator, representator_id)
        if not representator:
            raise ResourceNotFoundError("Représentant", representator_id)
        return representator

    def list_page(self, page: int = 1, size: int | None = None) -> Page:
        query = self.db.query(ProviderRepresentator).order_by(
            ProviderRepresentator.lastname.asc(), ProviderRepresentator.firstname.asc(), ProviderRepresentator.id.asc()
        )
        return paginate(query, page, size)

    def list_by_provider(self, provider_id: int) -> list[ProviderRepresentator]:
        self._provider(provider_id)
        return (
            self.db.query(ProviderRepresentator)
            .filter(ProviderRepresentator.provider_id == provider_id)
            .order_by(ProviderRepresentator.lastname.asc())
            .all()
        )


class ClearanceService:
    """Habilitations (représentant autorisé à agir pour un fournisseur)"""

    def __init__(self, db: Session):
        self.db = db

    def _validate(self, data, exclude_id: int | None = None, operation: str = "la création"):
        for field in ("provider_id", "provider_representator_id"):
            if getattr(data, field) is None:
                raise MissingFieldError(field, operation)

        provider = self.db.get(Provider, data.provider_id)
        if not provider:
            raise ResourceNotFoundError("Fournisseur", data.provider_id)
        representator = self.db.get(ProviderRepresentator, data.provider_representator_id)
        if not representator:
            raise ResourceNotFoundError("Représentant", data.provider_representator_id)
        if representator.provider_id != provider.id:
            raise BusinessValidationError(
                f"Le représentant #{representator.id} n'appartient pas au fournisseur #{provider.id}"
            )

        today = datetime.utcnow().date()
        if data.start_date and data.end_date and data.end_date < data.start_date:
            raise BusinessValidationError("La date de fin doit être postérieure ou égale à la date de début")
        if data.start_date and data.start_date > today + timedelta(days=365):
            raise BusinessValidationError("La date de début ne peut pas dépasser un an dans le futur")

        self._check_overlap(data, exclude_id)
        return provider, representator

    def _check_overlap(self, data, exclude_id: int | None) -> None:
        """Deux habilitations d'un même couple fournisseur/représentant ne se chevauchent pas"""
        query = self.db.query(Clearance).filter(
            Clearance.provider_id == data.provider_id,
            Clearance.provider_representator_id == data.provider_representator_id,
        )
        if exclude_id is not None:
            query = query.filter(Clearance.id != exclude_id)

        start = data.start_date
        end = data.end_date
        for other in query.all():
            # Bornes absentes : période ouverte
            starts_before_other_ends = other.end_date is None or start is None or start <= other.end_date
            ends_after_other_starts = end is None or other.start_date is None or end >= other.start_date
            if starts_before_other_ends and ends_after_other_starts:
                raise BusinessValidationError(
                    f"Cette habilitation chevauche l'habilitation #{other.id} du même représentant"
                )

    def create(self, data, principal: Principal) -> Clearance:
        provider, representator = self._validate(data)

        clearance = Clearance(start_date=data.start_date, end_date=data.end_date)
        clearance.provider = provider
        clearance.representator = representator
        stamp_created(clearance, principal)

        self.db.add(clearance)
        _commit(self.db, clearance, "Habilitation")
        logger.info(
            f"Habilitation créée: {representator.full_name} pour {provider.display_name} "
            f"(id={clearance.id}) par {principal.username}"
        )
        return clearance

    def update(self, clearance_id: int, data, principal: Principal) -> Clearance:
        clearance = self.get(clearance_id)
        provider, representator = self._validate(data, exclude_id=clearance_id, operation="la mise à jour")

        clearance.start_date = data.start_date
        clearance.end_date = data.end_date
        clearance.provider = provider
        clearance.representator = representator
        stamp_updated(clearance, principal)

        _commit(self.db, clearance, "Habilitation")
        logger.info(f"Habilitation #{clearance_id} mise à jour par {principal.username}")
        return clearance

    def delete(self, clearance_id: int, principal: Principal) -> None:
        clearance = self.get(clearance_id)
        self.db.delete(clearance)
        self.db.commit()
        logger.info(f"🗑️ Habilitation #{clearance_id} supprimée par {principal.username}")

    def get(self, clearance_id: int) -> Clearance:
        clearance = self.db.get(Clearance, clearance_id)
        if not clearance:
            raise ResourceNotFoundError("Habilitation", clearance_id)
        return clearance

    def list_page(self, page: int = 1, size: int | None = None) -> Page:
        query = self.db.query(Clearance).order_by(Clearance.start_date.desc(), Clearance.id.asc())
        return paginate(query, page, size)

    def list_by_provider(self, provider_id: int) -> list[Clearance]:
        if not self.db.get(Provider, provider_id):
            raise ResourceNotFoundError("Fournisseur", provider_id)
        return (
            self.db.query(Clearance)
            .filter(Clearance.provider_id == provider_id)
            .order_by(Clearance.start_date.desc(), Clearance.id.asc())
            .all()
        )

    def active(self) -> list[Clearance]:
        today = datetime.utcnow().date()
        return (
            self.db.query(Clearance)
            .filter(
                or_(Clearance.start_date.is_(None), Clearance.start_date <= today),
                or_(Clearance.end_date.is_(None), Clearance.end_date >= today),
            )
            .order_by(Clearance.id.asc())
            .all()
        )

    def expired(self) -> list[Clearance]:
        today = datetime.utcnow().date()
        return (
            self.db.query(Clearance)
            .filter(Clearance.end_date.isnot(None), Clearance.end_date < today)
            .order_by(Clearance.end_date.desc())
            .all()
        )

    def expiring_soon(self, days: int) -> list[Clearance]:
        """Habilitations en cours dont la fin tombe dans les `days` prochains jours"""
        today = datetime.utcnow().date()
        return (
            self.db.query(Clearance)
            .filter(
                Clearance.end_date.isnot(None),
                Clearance.end_date >= today,
                Clearance.end_date <= today + timedelta(days=days),
            )
            .order_by(Clearance.end_date.asc())
            .all()
        )
