"""Tests for utility endpoints, the daily review job and reference seeding."""

import inspect
import typing
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from procurement.audit import system_principal
from procurement.models import Submission
from procurement.scheduler.jobs import job_daily_review
from procurement.seed import AWARD_METHODS, PHASES, seed_reference_data
from procurement.services.consultation import ConsultationService
from procurement.services.file_storage import FileStorageService
from procurement.services.provider import ClearanceService, ProviderService, RepresentatorService
from procurement.services.reference import ConsultationStepService, ReferenceDataService
from procurement.services.submission import SubmissionService


class TestUtilityEndpoints:
    def test_root(self, client: TestClient) -> None:
        body = client.get("/").json()
        assert body["status"] == "running"
        assert body["docs"] == "/docs"

    def test_health(self, client: TestClient) -> None:
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    def test_scheduler_disabled(self, client: TestClient) -> None:
        body = client.get("/scheduler/status").json()
        assert body["enabled"] is False
        assert body["running"] is False
        assert body["jobs"] == []

    def test_error_payload_shape(self, client: TestClient) -> None:
        body = client.get("/api/v1/consultations/999").json()
        assert body == {"detail": "Consultation introuvable (id=999)", "error_code": "RESOURCE_NOT_FOUND"}


class TestDailyReview:
    def test_empty_database(self) -> None:
        summary = job_daily_review()
        assert summary["year"] == str(datetime.utcnow().year)
        assert summary["total_consultations"] == 0
        assert summary["upcoming_deadlines"] == 0
        assert summary["expiring_clearances"] == 0

    def test_counts_current_year(self, create_consultation) -> None:
        """Only deadlines in the next seven days count as upcoming."""
        year = str(datetime.utcnow().year)
        soon = (datetime.utcnow() + timedelta(days=3)).replace(microsecond=0).isoformat()
        create_consultation(consultation_year=year, deadline=soon)
        create_consultation(internal_id="002", consultation_year=year)

        summary = job_daily_review()
        assert summary["total_consultations"] == 2
        assert summary["upcoming_deadlines"] == 1


class TestSeed:
    def test_seed_is_idempotent(self, db_session) -> None:
        first = seed_reference_data(db_session, system_principal())
        assert first["award_methods"] == len(AWARD_METHODS)
        assert first["consultation_phases"] == len(PHASES)
        assert first["consultation_steps"] == sum(len(steps) for _, steps in PHASES)

        second = seed_reference_data(db_session, system_principal())
        assert set(second.values()) == {0}

    def test_seeded_award_method_category(self, client: TestClient, db_session) -> None:
        seed_reference_data(db_session, system_principal())
        body = client.get("/api/v1/award-methods/acronym-fr/AOO").json()
        assert body["category"] == "APPEL_OFFRES"
        assert body["created_by"] == "system"


SERVICE_CLASSES = [
    ConsultationService, SubmissionService, ProviderService, RepresentatorService,
    ClearanceService, ReferenceDataService, ConsultationStepService, FileStorageService,
]


class TestServiceAnnotations:
    @pytest.mark.parametrize("service_class", SERVICE_CLASSES, ids=lambda cls: cls.__name__)
    def test_annotations_resolve(self, service_class) -> None:
        """No method shadows the builtin used in return annotations."""
        assert "list" not in vars(service_class)
        for _, method in inspect.getmembers(service_class, inspect.isfunction):
            typing.get_type_hints(method)

    def test_list_annotation_is_builtin(self) -> None:
        hints = typing.get_type_hints(SubmissionService.list_by_consultation)
        assert hints["return"] == list[Submission]
