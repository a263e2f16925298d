"""
API router for the harvest ledger.
"""
from fastapi import APIRouter, status

from spirulina_tracker.api.dependencies import CultureServiceDep
from spirulina_tracker.api.v1.models.responses import (
    HarvestEntryResponse,
    HarvestLedgerResponse,
)
from spirulina_tracker.domain.models import Harvest, HarvestCreate
from spirulina_tracker.services.application.culture_service import HarvestLedger


router = APIRouter(
    prefix="/harvests",
    tags=["harvests"],
)


def to_ledger_response(ledger: HarvestLedger) -> HarvestLedgerResponse:
    return HarvestLedgerResponse(
        entries=[
            HarvestEntryResponse(harvest=entry.harvest, pond_name=entry.pond_name)
            for entry in ledger.entries
        ],
        total_count=ledger.total_count,
        total_wet_weight_g=ledger.total_wet_weight_g,
        total_wet_weight_kg=ledger.total_wet_weight_kg,
        visible_count=ledger.visible_count,
        remaining=ledger.remaining,
        can_load_more=ledger.can_load_more,
        can_show_less=ledger.can_show_less,
        orphaned_pond_ids=ledger.pond_ids_missing,
    )


@router.get(
    "",
    response_model=HarvestLedgerResponse,
    summary="Harvest ledger",
    description="""
    Harvests across all ponds, newest first, limited to the current visible
    count, together with the total wet weight of every harvest.
    """,
)
async def get_ledger(culture_service: CultureServiceDep) -> HarvestLedgerResponse:
    return to_ledger_response(culture_service.harvest_ledger())


@router.post(
    "",
    response_model=Harvest,
    status_code=status.HTTP_201_CREATED,
    summary="Record a harvest",
    responses={503: {"description": "Harvest could not be saved"}},
)
async def add_harvest(payload: HarvestCreate, culture_service: CultureServiceDep) -> Harvest:
    """Record a harvest and reset the ledger to its first page."""
    return culture_service.add_harvest(payload)


@router.post(
    "/load-more",
    response_model=HarvestLedgerResponse,
    summary="Show one more page of harvests",
)
async def load_more(culture_service: CultureServiceDep) -> HarvestLedgerResponse:
    return to_ledger_response(culture_service.load_more_harvests())


@router.post(
    "/show-less",
    response_model=HarvestLedgerResponse,
    summary="Collapse the ledger to its first page",
)
async def show_less(culture_service: CultureServiceDep) -> HarvestLedgerResponse:
    return to_ledger_response(culture_service.show_less_harvests())
