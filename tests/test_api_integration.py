"""
Integration tests for API endpoints.

Tests the full HTTP request/response cycle against a temporary store and a
stubbed advisor backend.
"""
import pytest
from fastapi.testclient import TestClient

from spirulina_tracker.main import app
from spirulina_tracker.infrastructure.storage import EntityStore, get_entity_store
from spirulina_tracker.services.application.advisory_service import SERVICE_ERROR_REPLY
from spirulina_tracker.infrastructure.advisor_client import AdvisorError


API = "/api/v1"


def create_pond(client: TestClient, **overrides) -> dict:
    body = {"name": "Raceway 1", "volume": 1000}
    body.update(overrides)
    response = client.post(f"{API}/ponds", json=body)
    assert response.status_code == 201
    return response.json()


def add_log(client: TestClient, pond_id: str, **overrides) -> dict:
    body = {"ph": 10.0, "temperature": 30.0, "optical_density": 0.5}
    body.update(overrides)
    response = client.post(f"{API}/ponds/{pond_id}/logs", json=body)
    assert response.status_code == 201
    return response.json()


def add_harvest(client: TestClient, pond_id: str, wet_weight: float = 100, **overrides) -> dict:
    body = {"pond_id": pond_id, "wet_weight": wet_weight}
    body.update(overrides)
    response = client.post(f"{API}/harvests", json=body)
    assert response.status_code == 201
    return response.json()


# ============================================================
# Health Check Tests
# ============================================================

class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_root_endpoint(self, test_client):
        """Root endpoint should return healthy status."""
        response = test_client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "service" in data
        assert "version" in data

    def test_health_endpoint(self, test_client):
        """Health endpoint should return healthy status."""
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


# ============================================================
# Pond Endpoint Tests
# ============================================================

class TestPondEndpoints:
    """Tests for pond and log endpoints."""

    def test_create_pond_defaults(self, test_client):
        """New ponds get an id, a creation time, Active status and default strain."""
        pond = create_pond(test_client)

        assert pond["id"]
        assert pond["created_at"]
        assert pond["status"] == "Active"
        assert pond["strain"] == "Platensis"

    def test_create_pond_rejects_negative_volume(self, test_client):
        response = test_client.post(f"{API}/ponds", json={"name": "Bad", "volume": -5})

        assert response.status_code == 422

    def test_overview_totals(self, test_client):
        create_pond(test_client, volume=1000)
        create_pond(test_client, name="Tank", volume=250, status="Maintenance")

        data = test_client.get(f"{API}/ponds/overview").json()

        assert len(data["ponds"]) == 2
        assert data["total_volume"] == 1250
        assert data["active_count"] == 1

    def test_pond_detail_without_logs(self, test_client):
        """A pond without logs reports its latest parameters as null, not zero."""
        pond = create_pond(test_client)

        data = test_client.get(f"{API}/ponds/{pond['id']}").json()

        assert data["chart_logs"] == []
        assert data["recent_logs"] == []
        latest = data["latest"]
        for field in ("ph", "temperature", "optical_density", "salinity"):
            assert latest[field] is None

    def test_pond_detail_orders_logs(self, test_client):
        pond = create_pond(test_client)
        for ph in (9.5, 10.0, 10.8):
            add_log(test_client, pond["id"], ph=ph, salinity=0)

        data = test_client.get(f"{API}/ponds/{pond['id']}").json()

        assert [log["ph"] for log in data["chart_logs"]] == [9.5, 10.0, 10.8]
        assert [log["ph"] for log in data["recent_logs"]] == [10.8, 10.0, 9.5]
        assert data["latest"]["ph"] == 10.8
        assert data["latest"]["salinity"] == 0
        assert data["latest"]["ph_alert"] is True

    def test_pond_logs_endpoint_ascending(self, test_client):
        pond = create_pond(test_client)
        first = add_log(test_client, pond["id"])
        second = add_log(test_client, pond["id"])

        data = test_client.get(f"{API}/ponds/{pond['id']}/logs").json()

        assert [log["id"] for log in data] == [first["id"], second["id"]]
        assert all(log["pond_id"] == pond["id"] for log in data)

    @pytest.mark.parametrize("raw_body", [
        '{"ph": NaN, "temperature": 30, "optical_density": 0.5}',
        '{"ph": 10, "temperature": Infinity, "optical_density": 0.5}',
        '{"ph": 10, "temperature": 30, "optical_density": -Infinity}',
    ])
    def test_non_finite_log_rejected_and_history_kept(self, test_client, raw_body):
        pond = create_pond(test_client)
        kept = add_log(test_client, pond["id"])

        response = test_client.post(
            f"{API}/ponds/{pond['id']}/logs",
            content=raw_body,
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 422
        data = test_client.get(f"{API}/ponds/{pond['id']}/logs").json()
        assert [log["id"] for log in data] == [kept["id"]]

    def test_non_finite_volume_rejected(self, test_client):
        create_pond(test_client, name="Kept")

        response = test_client.post(
            f"{API}/ponds",
            content='{"name": "Bad", "volume": Infinity}',
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 422
        assert [p["name"] for p in test_client.get(f"{API}/ponds").json()] == ["Kept"]

    def test_unknown_pond_detail_404(self, test_client):
        response = test_client.get(f"{API}/ponds/missing")

        assert response.status_code == 404

    def test_delete_pond_keeps_logs_and_harvests(self, test_client, store):
        """Deleting a pond does not cascade to its logs or harvests."""
        pond = create_pond(test_client)
        add_log(test_client, pond["id"])
        add_harvest(test_client, pond["id"], 300)

        response = test_client.delete(f"{API}/ponds/{pond['id']}")

        assert response.status_code == 204
        assert store.ponds.list() == []
        assert len(store.logs.list()) == 1
        assert len(store.harvests.list()) == 1
        ledger = test_client.get(f"{API}/harvests").json()
        assert ledger["entries"][0]["pond_name"] is None
        assert ledger["orphaned_pond_ids"] == [pond["id"]]

    def test_delete_unknown_pond_is_noop(self, test_client):
        create_pond(test_client)

        response = test_client.delete(f"{API}/ponds/missing")

        assert response.status_code == 204
        assert len(test_client.get(f"{API}/ponds").json()) == 1


# ============================================================
# Harvest Endpoint Tests
# ============================================================

class TestHarvestEndpoints:
    """Tests for the harvest ledger."""

    def test_total_wet_weight(self, test_client):
        pond = create_pond(test_client)
        add_harvest(test_client, pond["id"], 500)
        add_harvest(test_client, "another-pond", 1500)

        data = test_client.get(f"{API}/harvests").json()

        assert data["total_wet_weight_g"] == 2000
        assert data["total_wet_weight_kg"] == "2.00"

    def test_dry_weight_optional(self, test_client):
        pond = create_pond(test_client)

        without = add_harvest(test_client, pond["id"], 100)
        with_dry = add_harvest(test_client, pond["id"], 100, dry_weight=12.5, batch_id="B-7")

        assert without["dry_weight"] is None
        assert with_dry["dry_weight"] == 12.5
        assert with_dry["batch_id"] == "B-7"

    def test_paging_and_reset_on_new_harvest(self, test_client):
        """12 harvests page as 5, 10, 12; a new harvest resets to 5."""
        pond = create_pond(test_client)
        for i in range(12):
            add_harvest(test_client, pond["id"], 100 + i)

        data = test_client.get(f"{API}/harvests").json()
        assert data["visible_count"] == 5
        assert len(data["entries"]) == 5
        assert data["entries"][0]["harvest"]["wet_weight"] == 111
        assert data["remaining"] == 7

        data = test_client.post(f"{API}/harvests/load-more").json()
        assert data["visible_count"] == 10

        data = test_client.post(f"{API}/harvests/load-more").json()
        assert data["visible_count"] == 12
        assert data["can_load_more"] is False
        assert data["can_show_less"] is True

        add_harvest(test_client, pond["id"], 999)
        data = test_client.get(f"{API}/harvests").json()
        assert data["visible_count"] == 5
        assert data["entries"][0]["harvest"]["wet_weight"] == 999

    def test_show_less(self, test_client):
        pond = create_pond(test_client)
        for _ in range(7):
            add_harvest(test_client, pond["id"])
        test_client.post(f"{API}/harvests/load-more")

        data = test_client.post(f"{API}/harvests/show-less").json()

        assert data["visible_count"] == 5

    def test_repeated_load_more_stops_at_total(self, test_client):
        pond = create_pond(test_client)
        for _ in range(7):
            add_harvest(test_client, pond["id"])
        for _ in range(4):
            data = test_client.post(f"{API}/harvests/load-more").json()

        assert data["visible_count"] == 7
        assert data["remaining"] == 0
        assert data["can_show_less"] is True

    def test_infinite_wet_weight_rejected_and_ledger_kept(self, test_client):
        pond = create_pond(test_client)
        add_harvest(test_client, pond["id"], 500)

        response = test_client.post(
            f"{API}/harvests",
            content='{"pond_id": "' + pond["id"] + '", "wet_weight": Infinity}',
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 422
        data = test_client.get(f"{API}/harvests").json()
        assert data["total_wet_weight_g"] == 500
        assert len(data["entries"]) == 1

    def test_huge_wet_weight_ledger(self, test_client):
        pond = create_pond(test_client)
        add_harvest(test_client, pond["id"], 1e40)

        response = test_client.get(f"{API}/harvests")

        assert response.status_code == 200
        assert response.json()["total_wet_weight_kg"] == "1" + "0" * 37 + ".00"


# ============================================================
# Dosage Endpoint Tests
# ============================================================

class TestDosageEndpoints:
    """Tests for the dosage calculator endpoints."""

    @staticmethod
    def line(data: dict, name: str) -> dict:
        return next(line for line in data["lines"] if line["name"] == name)

    def test_new_medium_from_pond_volume(self, test_client):
        """A 1000 L pond needs 10 kg of sodium bicarbonate."""
        pond = create_pond(test_client, volume=1000)

        data = test_client.get(f"{API}/dosage/new-medium", params={"pond_id": pond["id"]}).json()

        assert data["quantity"] == 1000
        assert self.line(data, "Sodium Bicarbonate")["display"] == "10.00 kg"

    def test_new_medium_unknown_pond(self, test_client):
        response = test_client.get(f"{API}/dosage/new-medium", params={"pond_id": "missing"})

        assert response.status_code == 404

    def test_replenishment(self, test_client):
        data = test_client.get(f"{API}/dosage/replenishment", params={"wet_weight": "100"}).json()

        assert len(data["lines"]) == 6
        assert self.line(data, "Potassium Nitrate")["display"] == "20 g"
        assert self.line(data, "Sodium Bicarbonate")["note"] == "Only add if pH < 10"

    @pytest.mark.parametrize("raw", ["", "abc"])
    def test_invalid_volume_computes_zero(self, test_client, raw):
        response = test_client.get(f"{API}/dosage/new-medium", params={"volume": raw})

        assert response.status_code == 200
        data = response.json()
        assert data["quantity"] == 0
        assert all(line["amount"] == 0 for line in data["lines"])

    def test_huge_volume(self, test_client):
        response = test_client.get(f"{API}/dosage/new-medium", params={"volume": "1e30"})

        assert response.status_code == 200
        assert self.line(response.json(), "Sodium Bicarbonate")["display"] == "1" + "0" * 28 + ".00 kg"

    def test_defaults_and_presets(self, test_client):
        data = test_client.get(f"{API}/dosage/new-medium").json()
        assert data["quantity"] == 10

        presets = test_client.get(f"{API}/dosage/presets").json()
        assert presets["volume_presets_l"] == [1, 10, 20, 100, 500, 1000]
        assert presets["default_weight_g"] == 100


# ============================================================
# Advisor Endpoint Tests
# ============================================================

class TestAdvisorEndpoint:
    """Tests for the advisor endpoint."""

    def test_ask_returns_reply(self, test_client, advisor_backend):
        pond = create_pond(test_client)
        add_log(test_client, pond["id"], ph=10.2)

        response = test_client.post(f"{API}/advisor/ask", json={"question": "How is my pond?"})

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "model"
        assert data["text"] == "Keep the pH between 9 and 10.5."
        assert data["fallback"] is None
        _, context = advisor_backend.answer.await_args.args
        assert "pH 10.2" in context

    def test_ask_service_failure_is_not_an_error(self, test_client, advisor_backend):
        advisor_backend.answer.side_effect = AdvisorError("timeout")

        response = test_client.post(f"{API}/advisor/ask", json={"question": "Hello?"})

        assert response.status_code == 200
        assert response.json()["text"] == SERVICE_ERROR_REPLY

    def test_blank_question_rejected(self, test_client):
        response = test_client.post(f"{API}/advisor/ask", json={"question": "   "})

        assert response.status_code == 422


# ============================================================
# Error Handling Tests
# ============================================================

class TestStorageErrors:
    """Tests for storage failures surfacing through the API."""

    def test_write_failure_returns_503(self, test_client, tmp_path):
        blocker = tmp_path / "blocked"
        blocker.write_text("not a directory")
        app.dependency_overrides[get_entity_store] = lambda: EntityStore(data_dir=str(blocker))

        response = test_client.post(f"{API}/ponds", json={"name": "A", "volume": 1})

        assert response.status_code == 503
        assert response.json()["error"] == "Storage unavailable"

    def test_read_failure_degrades_to_empty(self, test_client, store):
        store.data_dir.mkdir(parents=True, exist_ok=True)
        store.ponds.path.write_text("corrupted")

        response = test_client.get(f"{API}/ponds")

        assert response.status_code == 200
        assert response.json() == []

    def test_unexpected_error_returns_500(self, test_client):
        def broken_store():
            raise RuntimeError("disk controller on fire")
        app.dependency_overrides[get_entity_store] = broken_store

        response = test_client.get(f"{API}/ponds")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "detail": "An unexpected error occurred",
        }


# ============================================================
# Response Format Tests
# ============================================================

class TestResponseFormats:
    """Tests for API documentation."""

    def test_openapi_schema_available(self, test_client):
        response = test_client.get("/openapi.json")

        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/api/v1/ponds" in paths
        assert "/api/v1/ponds/{pond_id}" in paths
        assert "/api/v1/harvests" in paths
        assert "/api/v1/dosage/new-medium" in paths
        assert "/api/v1/advisor/ask" in paths

    def test_rate_limit_documented_in_openapi(self, test_client):
        paths = test_client.get("/openapi.json").json()["paths"]

        assert "429" in paths["/api/v1/advisor/ask"]["post"]["responses"]

    def test_docs_endpoint_available(self, test_client):
        response = test_client.get("/docs")

        assert response.status_code == 200


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
