"""
API router for the nutrient dosage calculator.
"""
from fastapi import APIRouter, HTTPException, Query
from typing import Annotated, Optional

from spirulina_tracker.api.dependencies import CultureServiceDep
from spirulina_tracker.api.v1.models.responses import (
    DosageLineResponse,
    DosagePresetsResponse,
    DosageTableResponse,
)
from spirulina_tracker.services.domain.dosage_calculator import (
    DEFAULT_VOLUME_L,
    DEFAULT_WEIGHT_G,
    VOLUME_PRESETS_L,
    WEIGHT_PRESETS_G,
    DosageTable,
    calculate_new_medium,
    calculate_replenishment,
)


router = APIRouter(
    prefix="/dosage",
    tags=["dosage"],
)


def to_table_response(table: DosageTable) -> DosageTableResponse:
    return DosageTableResponse(
        mode=table.mode.value,
        quantity=table.quantity,
        quantity_unit=table.quantity_unit,
        guidance=table.guidance,
        lines=[
            DosageLineResponse(
                name=line.nutrient.name,
                rate=line.nutrient.rate,
                unit=line.nutrient.unit,
                amount=line.amount,
                display=line.display,
                purpose=line.nutrient.purpose,
                category=line.nutrient.category,
                note=line.nutrient.note,
            )
            for line in table.lines
        ],
    )


@router.get(
    "/new-medium",
    response_model=DosageTableResponse,
    summary="Nutrients for fresh medium",
    description="""
    Nutrient amounts to prepare new culture medium for a water volume in
    liters. The volume can be taken from a stored pond with `pond_id`.
    Blank or non-numeric volumes compute as zero.
    """,
    responses={404: {"description": "Pond not found"}},
)
async def new_medium(
    culture_service: CultureServiceDep,
    volume: Annotated[Optional[str], Query(description="Water volume in liters")] = None,
    pond_id: Annotated[Optional[str], Query(description="Use this pond's volume")] = None,
) -> DosageTableResponse:
    if pond_id is not None:
        table = culture_service.new_medium_for_pond(pond_id)
        if table is None:
            raise HTTPException(
                status_code=404,
                detail=f"Pond with ID '{pond_id}' not found"
            )
        return to_table_response(table)
    if volume is None:
        volume = str(DEFAULT_VOLUME_L)
    return to_table_response(calculate_new_medium(volume))


@router.get(
    "/replenishment",
    response_model=DosageTableResponse,
    summary="Nutrients to replenish after a harvest",
    description="""
    Nutrient amounts to add back after harvesting a given weight of wet
    paste in grams. Blank or non-numeric weights compute as zero.
    """,
)
async def replenishment(
    wet_weight: Annotated[
        Optional[str], Query(description="Harvested wet paste in grams")
    ] = None,
) -> DosageTableResponse:
    if wet_weight is None:
        wet_weight = str(DEFAULT_WEIGHT_G)
    return to_table_response(calculate_replenishment(wet_weight))


@router.get(
    "/presets",
    response_model=DosagePresetsResponse,
    summary="Quick input presets",
)
async def presets() -> DosagePresetsResponse:
    return DosagePresetsResponse(
        volume_presets_l=list(VOLUME_PRESETS_L),
        weight_presets_g=list(WEIGHT_PRESETS_G),
        default_volume_l=DEFAULT_VOLUME_L,
        default_weight_g=DEFAULT_WEIGHT_G,
    )
