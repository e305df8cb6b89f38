"""Pytest fixtures: base SQLite en mémoire recréée pour chaque test."""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="procurement-uploads-")
os.environ["LOG_FILE"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from procurement.database import Base, engine, get_db
from procurement.main import app

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

FUTURE_DEADLINE = "2099-06-30T12:00:00"
PAST_DEADLINE = "2020-01-15T12:00:00"


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def database():
    """Schéma complet créé avant chaque test, supprimé après."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client() -> TestClient:
    """Client HTTP sans lifespan (ni init_db ni scheduler)."""
    return TestClient(app)


def create_designation(client: TestClient, path: str, label: str, **extra) -> dict:
    response = client.post(f"/api/v1/{path}", json={"designation_fr": label, **extra})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def references(client: TestClient) -> dict[str, int]:
    """Les sept références obligatoires d'une consultation."""
    award_method = client.post(
        "/api/v1/award-methods",
        json={"designation_fr": "Appel d'offres ouvert", "acronym_fr": "AOO"},
    )
    assert award_method.status_code == 201, award_method.text
    phase = create_designation(client, "consultation-phases", "Préparation du dossier")
    return {
        "award_method_id": award_method.json()["id"],
        "realization_nature_id": create_designation(client, "realization-natures", "Travaux de construction")["id"],
        "budget_type_id": create_designation(client, "budget-types", "Budget d'investissement")["id"],
        "realization_status_id": create_designation(client, "realization-statuses", "En cours de réalisation")["id"],
        "approval_status_id": create_designation(client, "approval-statuses", "Approuvé")["id"],
        "realization_director_id": create_designation(client, "realization-directors", "Direction technique")["id"],
        "consultation_step_id": create_designation(
            client, "consultation-steps", "Rédaction du cahier des charges", consultation_phase_id=phase["id"]
        )["id"],
    }


@pytest.fixture
def consultation_payload(references: dict[str, int]):
    """Fabrique de payloads de consultation valides."""

    def _build(**overrides) -> dict:
        payload = {
            "internal_id": "001",
            "consultation_year": "2024",
            "designation_fr": "Réalisation d'un bloc administratif",
            "allocated_amount": 500000.0,
            "financial_estimation": 450000.0,
            "deadline": FUTURE_DEADLINE,
            **references,
        }
        payload.update(overrides)
        return payload

    return _build


@pytest.fixture
def create_consultation(client: TestClient, consultation_payload):
    def _create(**overrides) -> dict:
        response = client.post("/api/v1/consultations", json=consultation_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def economic_nature(client: TestClient) -> dict:
    response = client.post(
        "/api/v1/economic-natures",
        json={"designation_fr": "Société à responsabilité limitée", "acronym_fr": "SARL"},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def create_provider(client: TestClient, economic_nature: dict):
    counter = {"value": 0}

    def _create(**overrides) -> dict:
        counter["value"] += 1
        payload = {
            "designation_lt": f"Entreprise {counter['value']}",
            "economic_nature_id": economic_nature["id"],
            **overrides,
        }
        response = client.post("/api/v1/providers", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def upload_file(client: TestClient):
    def _upload(name: str = "offre.pdf", content: bytes = b"%PDF-1.4 contenu") -> dict:
        response = client.post("/api/v1/files", files={"file": (name, content, "application/pdf")})
        assert response.status_code == 201, response.text
        return response.json()

    return _upload
