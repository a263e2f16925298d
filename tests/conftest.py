"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- A deterministic clock
- An entity store in a temporary directory
- Sample ponds, logs and harvests
- A stub advisor backend
- FastAPI test client wired to the temporary store
"""
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

import spirulina_tracker.api.dependencies as dependencies
from spirulina_tracker.main import app
from spirulina_tracker.api.dependencies import get_advisory_gateway
from spirulina_tracker.domain.models import (
    HarvestCreate,
    ParameterLogCreate,
    PondCreate,
    PondStatus,
)
from spirulina_tracker.infrastructure.storage import EntityStore, get_entity_store
from spirulina_tracker.services.application.advisory_service import AdvisoryGateway


class FakeClock:
    """Clock advancing by a fixed step on every reading."""
    
    def __init__(
        self,
        start: datetime = datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc),
        step: timedelta = timedelta(hours=1),
    ):
        self.current = start
        self.step = step
    
    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


# ============================================================
# Store Fixtures
# ============================================================

@pytest.fixture
def clock() -> FakeClock:
    """Clock ticking one hour per created record."""
    return FakeClock()


@pytest.fixture
def store(tmp_path, clock) -> EntityStore:
    """Entity store writing to a temporary directory."""
    return EntityStore(data_dir=str(tmp_path / "data"), clock=clock)


@pytest.fixture
def pond_payload() -> PondCreate:
    return PondCreate(name="Raceway 1", volume=1000)


@pytest.fixture
def populated_store(store) -> EntityStore:
    """Two ponds with logs and harvests, created in chronological order."""
    main = store.ponds.append(PondCreate(name="Raceway 1", volume=1000))
    spare = store.ponds.append(
        PondCreate(name="Tank B", volume=200, status=PondStatus.MAINTENANCE)
    )
    for ph, od in [(9.8, 0.4), (10.1, 0.5), (10.3, 0.6), (10.6, 0.7)]:
        store.logs.append(ParameterLogCreate(
            pond_id=main.id,
            ph=ph,
            temperature=31.0,
            optical_density=od,
            added_medium=20 if ph == 10.3 else 0,
        ))
    store.logs.append(ParameterLogCreate(
        pond_id=spare.id, ph=9.5, temperature=28.0, optical_density=0.3
    ))
    store.harvests.append(HarvestCreate(pond_id=main.id, wet_weight=500))
    store.harvests.append(HarvestCreate(pond_id=spare.id, wet_weight=1500, dry_weight=150))
    return store


# ============================================================
# Advisor Fixtures
# ============================================================

@pytest.fixture
def advisor_backend() -> AsyncMock:
    """Deterministic stand-in for the generative-text service."""
    backend = AsyncMock()
    backend.answer.return_value = "Keep the pH between 9 and 10.5."
    return backend


@pytest.fixture
def advisory_gateway(advisor_backend) -> AdvisoryGateway:
    return AdvisoryGateway(backend=advisor_backend, configured=True)


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client(store, advisory_gateway) -> TestClient:
    """Synchronous test client using the temporary store and stub advisor."""
    dependencies._culture_service = None
    app.dependency_overrides[get_entity_store] = lambda: store
    app.dependency_overrides[get_advisory_gateway] = lambda: advisory_gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        dependencies._culture_service = None
