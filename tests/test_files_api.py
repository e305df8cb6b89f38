"""API tests for stored files (submission parts)."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from procurement.audit import system_principal
from procurement.models import StoredFile
from procurement.services import file_storage

BASE = "/api/v1/files"


class TestUpload:
    def test_upload_and_metadata(self, client: TestClient) -> None:
        response = client.post(
            BASE,
            files={"file": ("offre technique.pdf", b"%PDF-1.4 contenu", "application/pdf")},
            headers={"X-User": "amina"},
        )
        assert response.status_code == 201, response.text

        body = response.json()
        assert body["original_name"] == "offre technique.pdf"
        assert body["content_type"] == "application/pdf"
        assert body["size"] == len(b"%PDF-1.4 contenu")
        assert body["created_by"] == "amina"
        assert client.get(f"{BASE}/{body['id']}").json()["original_name"] == "offre technique.pdf"

    def test_empty_file(self, client: TestClient) -> None:
        response = client.post(BASE, files={"file": ("vide.pdf", b"", "application/pdf")})
        assert response.status_code == 400
        assert response.json()["detail"] == "Le fichier est vide"

    def test_size_limit(self, client: TestClient, monkeypatch) -> None:
        monkeypatch.setattr(file_storage.settings, "MAX_UPLOAD_SIZE_MB", 0)
        response = client.post(BASE, files={"file": ("offre.pdf", b"x", "application/pdf")})
        assert response.status_code == 400

    def test_unknown_file(self, client: TestClient) -> None:
        assert client.get(f"{BASE}/999").status_code == 404
        assert client.get(f"{BASE}/999/download").status_code == 404


class TestDownloadAndDelete:
    def test_download_returns_content(self, client: TestClient, upload_file) -> None:
        stored = upload_file("financier.pdf", b"%PDF-1.4 offre financiere")
        response = client.get(f"{BASE}/{stored['id']}/download")
        assert response.status_code == 200
        assert response.content == b"%PDF-1.4 offre financiere"
        assert "financier.pdf" in response.headers["content-disposition"]

    def test_delete_removes_file_from_disk(self, client: TestClient, upload_file, db_session) -> None:
        stored = upload_file()
        path = db_session.get(StoredFile, stored["id"]).path
        assert os.path.exists(path)

        assert client.delete(f"{BASE}/{stored['id']}").status_code == 204
        assert not os.path.exists(path)
        assert client.get(f"{BASE}/{stored['id']}").status_code == 404

    def test_delete_refused_when_attached(self, client: TestClient, upload_file, create_consultation, create_provider) -> None:
        stored = upload_file()
        consultation = create_consultation()
        provider = create_provider()
        client.post(
            "/api/v1/submissions",
            json={"consultation_id": consultation["id"], "tender_id": provider["id"],
                  "financial_part_id": stored["id"]},
        )

        response = client.delete(f"{BASE}/{stored['id']}")
        assert response.status_code == 409
        assert client.get(f"{BASE}/{stored['id']}").status_code == 200


class TestStoreFailure:
    def test_failed_commit_removes_content(self, db_session, tmp_path, monkeypatch) -> None:
        def failing_commit() -> None:
            raise OperationalError("INSERT INTO stored_files", {}, Exception("base indisponible"))

        monkeypatch.setattr(db_session, "commit", failing_commit)
        service = file_storage.FileStorageService(db_session, upload_dir=str(tmp_path))

        with pytest.raises(OperationalError):
            service.store(b"%PDF-1.4 contenu", "offre.pdf", "application/pdf", system_principal())
        assert list(tmp_path.iterdir()) == []
        assert db_session.query(StoredFile).count() == 0
