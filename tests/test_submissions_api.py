"""API tests for submission endpoints."""

import pytest
from fastapi.testclient import TestClient

from tests.conftest import PAST_DEADLINE

BASE = "/api/v1/submissions"


@pytest.fixture
def consultation(create_consultation) -> dict:
    return create_consultation()


@pytest.fixture
def submit(client: TestClient, consultation: dict):
    def _submit(tender_id: int, consultation_id: int | None = None, **extra) -> dict:
        payload = {"consultation_id": consultation_id or consultation["id"], "tender_id": tender_id, **extra}
        response = client.post(BASE, json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _submit


def _expire(client: TestClient, consultation: dict, consultation_payload) -> None:
    """Passe la date limite de la consultation dans le passé."""
    response = client.put(
        f"/api/v1/consultations/{consultation['id']}",
        json=consultation_payload(deadline=PAST_DEADLINE),
    )
    assert response.status_code == 200, response.text


class TestCreateSubmission:
    def test_defaults(self, client: TestClient, consultation, create_provider) -> None:
        """Offer defaults to 0 and submission date to now."""
        provider = create_provider(designation_lt="Batimex")
        response = client.post(
            BASE, json={"consultation_id": consultation["id"], "tender_id": provider["id"]},
            headers={"X-User": "amina"},
        )
        assert response.status_code == 201, response.text

        body = response.json()
        assert body["financial_offer"] == 0.0
        assert body["submission_date"]
        assert body["is_competitive"] is False
        assert body["is_complete"] is False
        assert body["tender_designation"] == "Batimex"
        assert body["consultation_reference"] == "CONS-001-2024"
        assert body["created_by"] == "amina"

    @pytest.mark.parametrize("field", ["consultation_id", "tender_id"])
    def test_missing_ids(self, client: TestClient, consultation, create_provider, field) -> None:
        provider = create_provider()
        payload = {"consultation_id": consultation["id"], "tender_id": provider["id"]}
        payload.pop(field)
        response = client.post(BASE, json=payload)
        assert response.status_code == 400
        assert field in response.json()["detail"]

    def test_unknown_consultation(self, client: TestClient, create_provider) -> None:
        provider = create_provider()
        response = client.post(BASE, json={"consultation_id": 999, "tender_id": provider["id"]})
        assert response.status_code == 404
        assert "Consultation" in response.json()["detail"]

    def test_unknown_provider(self, client: TestClient, consultation) -> None:
        response = client.post(BASE, json={"consultation_id": consultation["id"], "tender_id": 999})
        assert response.status_code == 404
        assert "Fournisseur" in response.json()["detail"]

    def test_one_submission_per_provider(self, client: TestClient, consultation, create_provider, submit) -> None:
        provider = create_provider()
        submit(provider["id"], financial_offer=100)

        response = client.post(
            BASE, json={"consultation_id": consultation["id"], "tender_id": provider["id"], "financial_offer": 90}
        )
        assert response.status_code == 409
        assert len(client.get(f"{BASE}/consultation/{consultation['id']}").json()) == 1

    def test_deadline_passed(self, client: TestClient, consultation, consultation_payload, create_provider) -> None:
        _expire(client, consultation, consultation_payload)
        provider = create_provider()

        response = client.post(BASE, json={"consultation_id": consultation["id"], "tender_id": provider["id"]})
        assert response.status_code == 400
        assert "date limite" in response.json()["detail"]
        assert client.get(BASE).json()["total"] == 0

    def test_negative_offer(self, client: TestClient, consultation, create_provider) -> None:
        provider = create_provider()
        response = client.post(
            BASE, json={"consultation_id": consultation["id"], "tender_id": provider["id"], "financial_offer": -1}
        )
        assert response.status_code == 400

    def test_unknown_file(self, client: TestClient, consultation, create_provider) -> None:
        provider = create_provider()
        response = client.post(
            BASE,
            json={"consultation_id": consultation["id"], "tender_id": provider["id"], "technical_part_id": 999},
        )
        assert response.status_code == 404
        assert "Fichier" in response.json()["detail"]

    def test_complete_with_three_parts(self, client: TestClient, create_provider, submit, upload_file) -> None:
        provider = create_provider()
        body = submit(
            provider["id"],
            financial_offer=410000,
            administrative_part_id=upload_file("admin.pdf")["id"],
            technical_part_id=upload_file("technique.pdf")["id"],
            financial_part_id=upload_file("financier.pdf")["id"],
        )
        assert body["is_complete"] is True
        assert body["is_competitive"] is True
        assert [item["id"] for item in client.get(f"{BASE}/complete").json()] == [body["id"]]


class TestUpdateSubmission:
    def test_update_offer_and_detach_part(self, client: TestClient, consultation, create_provider, submit, upload_file) -> None:
        provider = create_provider()
        technical = upload_file("technique.pdf")
        created = submit(provider["id"], financial_offer=100, technical_part_id=technical["id"])

        response = client.put(
            f"{BASE}/{created['id']}",
            json={"consultation_id": consultation["id"], "tender_id": provider["id"], "financial_offer": 80},
            headers={"X-User": "karim"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["financial_offer"] == 80
        assert body["technical_part_id"] is None
        assert body["updated_by"] == "karim"
        assert body["submission_date"] == created["submission_date"]

    def test_update_to_taken_pair(self, client: TestClient, consultation, create_provider, submit) -> None:
        first = create_provider()
        second = create_provider()
        submit(first["id"])
        other = submit(second["id"])

        response = client.put(
            f"{BASE}/{other['id']}", json={"consultation_id": consultation["id"], "tender_id": first["id"]}
        )
        assert response.status_code == 409

    def test_update_to_free_pair(self, client: TestClient, consultation, create_provider, submit) -> None:
        first = create_provider()
        second = create_provider()
        created = submit(first["id"], financial_offer=100)

        response = client.put(
            f"{BASE}/{created['id']}", json={"consultation_id": consultation["id"], "tender_id": second["id"]}
        )
        assert response.status_code == 200, response.text
        assert response.json()["tender_id"] == second["id"]
        assert [item["id"] for item in client.get(f"{BASE}/tender/{second['id']}").json()] == [created["id"]]
        assert client.get(f"{BASE}/tender/{first['id']}").json() == []

    def test_move_out_of_expired_consultation(self, client: TestClient, consultation, consultation_payload,
                                              create_consultation, create_provider, submit) -> None:
        """A closed submission stays where it is, even towards an open consultation."""
        provider = create_provider()
        created = submit(provider["id"], financial_offer=100)
        _expire(client, consultation, consultation_payload)
        other = create_consultation(internal_id="002")

        response = client.put(
            f"{BASE}/{created['id']}", json={"consultation_id": other["id"], "tender_id": provider["id"]}
        )
        assert response.status_code == 400
        assert "date limite" in response.json()["detail"]
        assert client.get(f"{BASE}/{created['id']}").json()["consultation_id"] == consultation["id"]

    def test_update_after_deadline(self, client: TestClient, consultation, consultation_payload, create_provider, submit) -> None:
        provider = create_provider()
        created = submit(provider["id"], financial_offer=100)
        _expire(client, consultation, consultation_payload)

        assert client.get(f"{BASE}/{created['id']}/can-modify").json() == {"id": created["id"], "can_modify": False}
        response = client.put(
            f"{BASE}/{created['id']}",
            json={"consultation_id": consultation["id"], "tender_id": provider["id"], "financial_offer": 50},
        )
        assert response.status_code == 400
        assert client.get(f"{BASE}/{created['id']}").json()["financial_offer"] == 100

    def test_can_modify_open_consultation(self, client: TestClient, create_provider, submit) -> None:
        created = submit(create_provider()["id"])
        assert client.get(f"{BASE}/{created['id']}/can-modify").json()["can_modify"] is True
        assert client.get(f"{BASE}/999/can-modify").status_code == 404

    def test_update_unknown(self, client: TestClient, consultation, create_provider) -> None:
        provider = create_provider()
        response = client.put(f"{BASE}/999", json={"consultation_id": consultation["id"], "tender_id": provider["id"]})
        assert response.status_code == 404


class TestDeleteSubmission:
    def test_delete(self, client: TestClient, create_provider, submit) -> None:
        created = submit(create_provider()["id"])
        assert client.delete(f"{BASE}/{created['id']}").status_code == 204
        assert client.get(f"{BASE}/{created['id']}").status_code == 404

    def test_delete_by_consultation(self, client: TestClient, consultation, create_consultation, create_provider, submit) -> None:
        other = create_consultation(internal_id="002")
        first = create_provider()
        second = create_provider()
        submit(first["id"])
        submit(second["id"])
        kept = submit(first["id"], consultation_id=other["id"])

        assert client.delete(f"{BASE}/consultation/{consultation['id']}").status_code == 204
        assert client.get(f"{BASE}/consultation/{consultation['id']}").json() == []
        assert client.get(f"{BASE}/{kept['id']}").status_code == 200
        assert client.get(f"/api/v1/consultations/{consultation['id']}").status_code == 200


class TestSubmissionQueries:
    @pytest.fixture
    def offers(self, create_provider, submit) -> list[dict]:
        return [
            submit(create_provider()["id"], financial_offer=offer)
            for offer in (300000, 0, 250000, 250000, 420000)
        ]

    def test_list_by_consultation(self, client: TestClient, consultation, offers) -> None:
        body = client.get(f"{BASE}/consultation/{consultation['id']}").json()
        assert len(body) == 5
        assert client.get(f"{BASE}/consultation/999").status_code == 404

    def test_list_by_tender(self, client: TestClient, create_consultation, create_provider, submit) -> None:
        provider = create_provider()
        other = create_consultation(internal_id="002")
        submit(provider["id"], financial_offer=500)
        submit(provider["id"], consultation_id=other["id"], financial_offer=200)

        body = client.get(f"{BASE}/tender/{provider['id']}").json()
        assert [item["financial_offer"] for item in body] == [200, 500]
        assert client.get(f"{BASE}/tender/999").status_code == 404

    def test_competitive_excludes_zero_offers(self, client: TestClient, consultation, offers) -> None:
        body = client.get(f"{BASE}/consultation/{consultation['id']}/competitive").json()
        assert [item["financial_offer"] for item in body] == [250000, 250000, 300000, 420000]

    def test_lowest_offers_include_ties(self, client: TestClient, consultation, offers) -> None:
        body = client.get(f"{BASE}/consultation/{consultation['id']}/lowest-offers").json()
        assert sorted(item["id"] for item in body) == sorted([offers[2]["id"], offers[3]["id"]])

    def test_lowest_offers_without_competitive_offer(self, client: TestClient, consultation, create_provider, submit) -> None:
        submit(create_provider()["id"])
        assert client.get(f"{BASE}/consultation/{consultation['id']}/lowest-offers").json() == []

    def test_offer_range(self, client: TestClient, offers) -> None:
        body = client.get(f"{BASE}/by-offer-range", params={"min_offer": 250000, "max_offer": 300000}).json()
        assert [item["financial_offer"] for item in body] == [250000, 250000, 300000]

    def test_offer_range_inverted(self, client: TestClient) -> None:
        response = client.get(f"{BASE}/by-offer-range", params={"min_offer": 10, "max_offer": 5})
        assert response.status_code == 400

    def test_financial_statistics(self, client: TestClient, consultation, offers) -> None:
        body = client.get(f"{BASE}/consultation/{consultation['id']}/financial-statistics").json()
        assert body["total_submissions"] == 5
        assert body["competitive_submissions"] == 4
        assert body["lowest_offer"] == 250000
        assert body["highest_offer"] == 420000
        assert body["average_offer"] == pytest.approx(305000)
        assert body["total_offers_value"] == 1220000

    def test_financial_statistics_without_offers(self, client: TestClient, consultation) -> None:
        body = client.get(f"{BASE}/consultation/{consultation['id']}/financial-statistics").json()
        assert body["total_submissions"] == 0
        assert body["lowest_offer"] is None
        assert body["total_offers_value"] == 0.0

    def test_summary(self, client: TestClient, consultation, create_provider, submit, upload_file) -> None:
        submit(
            create_provider()["id"],
            financial_offer=100,
            administrative_part_id=upload_file()["id"],
            technical_part_id=upload_file()["id"],
            financial_part_id=upload_file()["id"],
        )
        submit(create_provider()["id"])

        body = client.get(f"{BASE}/consultation/{consultation['id']}/summary").json()
        assert body == {
            "consultation_id": consultation["id"],
            "total_submissions": 2,
            "complete_submissions": 1,
            "competitive_submissions": 1,
            "partial_submissions": 1,
        }

    def test_paginated_list(self, client: TestClient, offers) -> None:
        body = client.get(BASE, params={"size": 2}).json()
        assert body["total"] == 5
        assert body["pages"] == 3
        assert len(body["items"]) == 2

    def test_consultation_offer_indicators(self, client: TestClient, consultation, offers) -> None:
        body = client.get(f"/api/v1/consultations/{consultation['id']}").json()
        assert body["submission_count"] == 5
        assert body["lowest_offer"] == 0
        assert body["highest_offer"] == 420000
