"""
Dependency injection for FastAPI.
"""
from typing import Annotated, Optional
from fastapi import Depends

from spirulina_tracker.config import settings
from spirulina_tracker.infrastructure.advisor_client import (
    GeminiAdvisorClient,
    get_advisor_client,
)
from spirulina_tracker.infrastructure.storage import EntityStore, get_entity_store
from spirulina_tracker.services.application.advisory_service import AdvisoryGateway
from spirulina_tracker.services.application.culture_service import CultureService


_culture_service: Optional[CultureService] = None


def get_culture_service(
    store: Annotated[EntityStore, Depends(get_entity_store)],
) -> CultureService:
    """
    Dependency factory for CultureService.

    The service is shared across requests so the harvest ledger cursor
    survives between calls of the single user.

    Args:
        store: Entity store (injected)

    Returns:
        CultureService instance
    """
    global _culture_service
    if _culture_service is None or _culture_service.store is not store:
        _culture_service = CultureService(
            store=store,
            harvest_page_size=settings.harvest_page_size,
        )
    return _culture_service


def get_advisory_gateway(
    client: Annotated[GeminiAdvisorClient, Depends(get_advisor_client)],
) -> AdvisoryGateway:
    """
    Dependency factory for AdvisoryGateway.

    Args:
        client: Generative-text client (injected)

    Returns:
        AdvisoryGateway instance
    """
    return AdvisoryGateway(
        backend=client,
        configured=client.configured,
        recent_log_count=settings.advisor_recent_log_count,
    )


# Type aliases for cleaner route signatures
CultureServiceDep = Annotated[CultureService, Depends(get_culture_service)]
AdvisoryGatewayDep = Annotated[AdvisoryGateway, Depends(get_advisory_gateway)]
