"""
API router for pond and parameter log endpoints.
"""
from fastapi import APIRouter, HTTPException, Path, status
from typing import Annotated, List

from spirulina_tracker.api.dependencies import CultureServiceDep
from spirulina_tracker.api.v1.models.requests import ParameterLogRequest
from spirulina_tracker.api.v1.models.responses import (
    PondDetailResponse,
    PondOverviewResponse,
)
from spirulina_tracker.domain.models import (
    ParameterLog,
    ParameterLogCreate,
    Pond,
    PondCreate,
)


router = APIRouter(
    prefix="/ponds",
    tags=["ponds"],
)

PondId = Annotated[str, Path(description="Unique identifier for the pond")]


@router.get("", response_model=List[Pond], summary="List ponds")
async def list_ponds(culture_service: CultureServiceDep) -> List[Pond]:
    """Return every pond in the order it was created."""
    return culture_service.list_ponds()


@router.post(
    "",
    response_model=Pond,
    status_code=status.HTTP_201_CREATED,
    summary="Create a pond",
    responses={503: {"description": "Pond could not be saved"}},
)
async def create_pond(payload: PondCreate, culture_service: CultureServiceDep) -> Pond:
    return culture_service.create_pond(payload)


@router.get(
    "/overview",
    response_model=PondOverviewResponse,
    summary="Dashboard overview",
)
async def get_overview(culture_service: CultureServiceDep) -> PondOverviewResponse:
    """
    Ponds with their total volume and number of active ponds.

    Totals are recomputed from the stored ponds on every call.
    """
    overview = culture_service.get_overview()
    return PondOverviewResponse(
        ponds=overview.ponds,
        total_volume=overview.total_volume,
        active_count=overview.active_count,
    )


@router.get(
    "/{pond_id}",
    response_model=PondDetailResponse,
    summary="Pond detail",
    responses={404: {"description": "Pond not found"}},
)
async def get_pond_detail(
    pond_id: PondId,
    culture_service: CultureServiceDep,
) -> PondDetailResponse:
    """
    Pond header, chart series (oldest first), recent history (newest first)
    and the latest reading. Without logs every latest field is null.
    """
    detail = culture_service.get_pond_detail(pond_id)
    if detail is None:
        raise HTTPException(
            status_code=404,
            detail=f"Pond with ID '{pond_id}' not found"
        )
    return PondDetailResponse(
        pond=detail.pond,
        chart_logs=detail.chart_logs,
        recent_logs=detail.recent_logs,
        latest=detail.latest,
    )


@router.delete(
    "/{pond_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a pond",
    description="""
    Delete the pond record. Its parameter logs and harvests are NOT deleted
    and remain in their collections. Deleting an unknown pond is a no-op.
    """,
)
async def delete_pond(pond_id: PondId, culture_service: CultureServiceDep) -> None:
    culture_service.delete_pond(pond_id)


@router.get(
    "/{pond_id}/logs",
    response_model=List[ParameterLog],
    summary="Parameter logs of a pond",
)
async def list_pond_logs(
    pond_id: PondId,
    culture_service: CultureServiceDep,
) -> List[ParameterLog]:
    """Logs of the pond sorted oldest first."""
    return culture_service.list_pond_logs(pond_id)


@router.post(
    "/{pond_id}/logs",
    response_model=ParameterLog,
    status_code=status.HTTP_201_CREATED,
    summary="Add a parameter log",
    responses={503: {"description": "Log could not be saved"}},
)
async def add_log(
    pond_id: PondId,
    payload: ParameterLogRequest,
    culture_service: CultureServiceDep,
) -> ParameterLog:
    return culture_service.add_log(
        ParameterLogCreate(pond_id=pond_id, **payload.model_dump())
    )
