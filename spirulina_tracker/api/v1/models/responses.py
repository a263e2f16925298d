"""
API response models using Pydantic.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from spirulina_tracker.domain.models import Harvest, LatestReading, ParameterLog, Pond


class PondOverviewResponse(BaseModel):
    """Dashboard summary."""
    ponds: List[Pond]
    total_volume: float = Field(description="Sum of pond volumes in liters")
    active_count: int = Field(description="Number of ponds with status Active")


class PondDetailResponse(BaseModel):
    """Pond page: header, chart series, history and latest reading."""
    pond: Pond
    chart_logs: List[ParameterLog] = Field(description="Logs oldest first")
    recent_logs: List[ParameterLog] = Field(description="Latest logs, newest first")
    latest: LatestReading


class HarvestEntryResponse(BaseModel):
    harvest: Harvest
    pond_name: Optional[str] = Field(
        default=None,
        description="Name of the owning pond, None if the pond was deleted"
    )


class HarvestLedgerResponse(BaseModel):
    """Harvest ledger page."""
    entries: List[HarvestEntryResponse]
    total_count: int
    total_wet_weight_g: float
    total_wet_weight_kg: str = Field(examples=["2.00"])
    visible_count: int
    remaining: int
    can_load_more: bool
    can_show_less: bool
    orphaned_pond_ids: List[str] = Field(
        default_factory=list,
        description="Pond ids referenced by harvests whose pond no longer exists"
    )


class DosageLineResponse(BaseModel):
    name: str
    rate: float
    unit: str
    amount: float
    display: str = Field(examples=["10.00 kg"])
    purpose: Optional[str] = None
    category: Optional[str] = None
    note: Optional[str] = None


class DosageTableResponse(BaseModel):
    mode: str
    quantity: float
    quantity_unit: str
    guidance: str
    lines: List[DosageLineResponse]


class DosagePresetsResponse(BaseModel):
    volume_presets_l: List[float]
    weight_presets_g: List[float]
    default_volume_l: float
    default_weight_g: float


class AdvisorReplyResponse(BaseModel):
    """Advisor answer; fallback is set when a fixed message was returned."""
    role: str = "model"
    text: str
    fallback: Optional[str] = None
    timestamp: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "role": "model",
                "text": "Your pH of 11.2 is high; dilute with fresh medium...",
                "fallback": None,
                "timestamp": "2024-01-15T10:00:00Z",
            }
        }
