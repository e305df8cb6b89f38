"""
Service Submission - dépôt et suivi des offres des soumissionnaires
"""

import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from procurement.audit import Principal, stamp_created, stamp_updated
from procurement.exceptions import (
    BusinessValidationError, DuplicateResourceError, MissingFieldError, ResourceNotFoundError,
)
from procurement.models import Consultation, Provider, StoredFile, Submission
from procurement.services.pagination import Page, paginate

logger = logging.getLogger(__name__)

FILE_PARTS = ("administrative_part", "technical_part", "financial_part")


class SubmissionService:
    """Gestion des soumissions d'une consultation"""

    def __init__(self, db: Session):
        self.db = db

    # --- Validation ---

    def _consultation(self, consultation_id: int) -> Consultation:
        consultation = self.db.get(Consultation, consultation_id)
        if not consultation:
            raise ResourceNotFoundError("Consultation", consultation_id)
        return consultation

    def _provider(self, tender_id: int) -> Provider:
        provider = self.db.get(Provider, tender_id)
        if not provider:
            raise ResourceNotFoundError("Fournisseur", tender_id)
        return provider

    def _pair_taken(self, consultation_id: int, tender_id: int) -> bool:
        return (
            self.db.query(Submission.id)
            .filter(Submission.consultation_id == consultation_id, Submission.tender_id == tender_id)
            .first()
            is not None
        )

    @staticmethod
    def _check_deadline(consultation: Consultation) -> None:
        if consultation.is_expired:
            raise BusinessValidationError(
                f"La date limite de dépôt de la consultation {consultation.reference} est dépassée"
            )

    @staticmethod
    def _check_offer(offer: float | None) -> float:
        if offer is None:
            return 0.0
        if offer < 0:
            raise BusinessValidationError("L'offre financière ne peut pas être négative")
        return offer

    def _resolve_parts(self, data) -> dict:
        """Plis joints : un id absent détache le pli"""
        parts = {}
        for part in FILE_PARTS:
            file_id = getattr(data, f"{part}_id")
            if file_id is None:
                parts[part] = None
                continue
            stored_file = self.db.get(StoredFile, file_id)
            if not stored_file:
                raise ResourceNotFoundError("Fichier", file_id)
            parts[part] = stored_file
        return parts

    @staticmethod
    def _required(data, operation: str) -> None:
        for field in ("consultation_id", "tender_id"):
            if getattr(data, field) is None:
                raise MissingFieldError(field, operation)

    def _commit(self, submission: Submission) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateResourceError("Ce soumissionnaire a déjà déposé une offre pour cette consultation") from e
        self.db.refresh(submission)

    # --- Écriture ---

    def create(self, data, principal: Principal) -> Submission:
        self._required(data, "la création")
        consultation = self._consultation(data.consultation_id)
        provider = self._provider(data.tender_id)

        if self._pair_taken(consultation.id, provider.id):
            raise DuplicateResourceError(
                f"Le fournisseur #{provider.id} a déjà soumissionné à la consultation #{consultation.id}"
            )
        self._check_deadline(consultation)
        offer = self._check_offer(data.financial_offer)
        parts = self._resolve_parts(data)

        submission = Submission(
            submission_date=data.submission_date or datetime.utcnow(),
            financial_offer=offer,
        )
        submission.consultation = consultation
        submission.tender = provider
        for part, stored_file in parts.items():
            setattr(submission, part, stored_file)
        stamp_created(submission, principal)

        self.db.add(submission)
        self._commit(submission)
        logger.info(
            f"Soumission créée: fournisseur #{provider.id} -> consultation {consultation.reference} "
            f"(offre={offer}) par {principal.username}"
        )
        return submission

    def update(self, submission_id: int, data, principal: Principal) -> Submission:
        submission = self.get(submission_id)
        self._required(data, "la mise à jour")
        # Une soumission close ne peut plus être déplacée
        self._check_deadline(submission.consultation)

        consultation = submission.consultation
        if data.consultation_id != submission.consultation_id:
            consultation = self._consultation(data.consultation_id)
        provider = submission.tender
        if data.tender_id != submission.tender_id:
            provider = self._provider(data.tender_id)

        pair_changed = (consultation.id, provider.id) != (submission.consultation_id, submission.tender_id)
        if pair_changed and self._pair_taken(consultation.id, provider.id):
            raise DuplicateResourceError(
                f"Le fournisseur #{provider.id} a déjà soumissionné à la consultation #{consultation.id}"
            )
        self._check_deadline(consultation)
        offer = self._check_offer(data.financial_offer)
        parts = self._resolve_parts(data)

        submission.consultation = consultation
        submission.tender = provider
        submission.financial_offer = offer
        if data.submission_date is not None:
            submission.submission_date = data.submission_date
        for part, stored_file in parts.items():
            setattr(submission, part, stored_file)
        stamp_updated(submission, principal)

        self._commit(submission)
        logger.info(f"Soumission #{submission_id} mise à jour par {principal.username}")
        return submission

    def delete(self, submission_id: int, principal: Principal) -> None:
        submission = self.get(submission_id)
        self.db.delete(submission)
        self.db.commit()
        logger.info(f"🗑️ Soumission #{submission_id} supprimée par {principal.username}")

    def delete_by_consultation(self, consultation_id: int, principal: Principal) -> int:
        consultation = self._consultation(consultation_id)
        count = len(consultation.submissions)
        consultation.submissions.clear()
        self.db.commit()
        logger.info(
            f"🗑️ {count} soumission(s) de la consultation #{consultation_id} supprimée(s) par {principal.username}"
        )
        return count

    # --- Lecture ---

    def get(self, submission_id: int) -> Submission:
        submission = self.db.get(Submission, submission_id)
        if not submission:
            raise ResourceNotFoundError("Soumission", submission_id)
        return submission

    def can_modify(self, submission_id: int) -> bool:
        """Modifiable tant que la date limite de la consultation n'est pas dépassée"""
        return not self.get(submission_id).consultation.is_expired

    def list_page(self, page: int = 1, size: int | None = None) -> Page:
        query = self.db.query(Submission).order_by(Submission.submission_date.desc(), Submission.id.asc())
        return paginate(query, page, size)

    def list_by_consultation(self, consultation_id: int) -> list[Submission]:
        self._consultation(consultation_id)
        return (
            self.db.query(Submission)
            .filter(Submission.consultation_id == consultation_id)
            .order_by(Submission.submission_date.asc(), Submission.id.asc())
            .all()
        )

    def list_by_tender(self, tender_id: int) -> list[Submission]:
        self._provider(tender_id)
        return (
            self.db.query(Submission)
            .filter(Submission.tender_id == tender_id)
            .order_by(Submission.financial_offer.asc())
            .all()
        )

    def competitive(self, consultation_id: int) -> list[Submission]:
        self._consultation(consultation_id)
        return (
            self.db.query(Submission)
            .filter(Submission.consultation_id == consultation_id, Submission.financial_offer > 0)
            .order_by(Submission.financial_offer.asc())
            .all()
        )

    def complete(self) -> list[Submission]:
        """Soumissions dont les trois plis sont joints"""
        return (
            self.db.query(Submission)
            .filter(
                Submission.administrative_part_id.isnot(None),
                Submission.technical_part_id.isnot(None),
                Submission.financial_part_id.isnot(None),
            )
            .order_by(Submission.id.asc())
            .all()
        )

    def lowest_offers(self, consultation_id: int) -> list[Submission]:
        """Offres égales à la plus basse offre compétitive (ex aequo inclus)"""
        self._consultation(consultation_id)
        lowest = (
            self.db.query(func.min(Submission.financial_offer))
            .filter(Submission.consultation_id == consultation_id, Submission.financial_offer > 0)
            .scalar()
        )
        if lowest is None:
            return []
        return (
            self.db.query(Submission)
            .filter(Submission.consultation_id == consultation_id, Submission.financial_offer == lowest)
            .order_by(Submission.id.asc())
            .all()
        )

    def by_offer_range(self, min_offer: float, max_offer: float) -> list[Submission]:
        if min_offer > max_offer:
            raise BusinessValidationError("L'offre minimale doit être inférieure ou égale à l'offre maximale")
        return (
            self.db.query(Submission)
            .filter(Submission.financial_offer >= min_offer, Submission.financial_offer <= max_offer)
            .order_by(Submission.financial_offer.asc())
            .all()
        )

    def financial_statistics(self, consultation_id: int) -> dict:
        self._consultation(consultation_id)
        total = self.db.query(Submission).filter(Submission.consultation_id == consultation_id).count()
        competitive_count, lowest, highest, average, total_value = (
            self.db.query(
                func.count(Submission.id),
                func.min(Submission.financial_offer),
                func.max(Submission.financial_offer),
                func.avg(Submission.financial_offer),
                func.coalesce(func.sum(Submission.financial_offer), 0.0),
            )
            .filter(Submission.consultation_id == consultation_id, Submission.financial_offer > 0)
            .one()
        )
        return {
            "consultation_id": consultation_id,
            "total_submissions": total,
            "competitive_submissions": competitive_count,
            "lowest_offer": lowest,
            "highest_offer": highest,
            "average_offer": float(average) if average is not None else None,
            "total_offers_value": float(total_value),
        }

    def summary(self, consultation_id: int) -> dict:
        submissions = self.list_by_consultation(consultation_id)
        total = len(submissions)
        complete = sum(1 for s in submissions if s.is_complete)
        return {
            "consultation_id": consultation_id,
            "total_submissions": total,
            "complete_submissions": complete,
            "competitive_submissions": sum(1 for s in submissions if s.is_competitive),
            "partial_submissions": total - complete,
        }
