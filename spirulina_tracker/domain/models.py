"""
Domain models for ponds, parameter logs and harvests.

These models represent the core domain entities and should be independent
of any infrastructure concerns (storage files, HTTP clients, etc.).
Optional numeric fields use None for "not provided"; zero is a real value.
"""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_STRAIN = "Platensis"


class PondStatus(str, Enum):
    """Operational state of a pond."""
    ACTIVE = "Active"
    MAINTENANCE = "Maintenance"
    INACTIVE = "Inactive"


class PondCreate(BaseModel):
    """Pond attributes supplied by the user."""
    model_config = ConfigDict(allow_inf_nan=False)

    name: str
    volume: float = Field(ge=0, description="Culture volume in liters")
    status: PondStatus = PondStatus.ACTIVE
    strain: str = DEFAULT_STRAIN

    @field_validator("strain", mode="before")
    @classmethod
    def default_blank_strain(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_STRAIN
        return value


class Pond(PondCreate):
    """A culture vessel tracked by the system."""
    id: str
    created_at: datetime


class ParameterLogCreate(BaseModel):
    """Water-quality measurement supplied by the user."""
    model_config = ConfigDict(allow_inf_nan=False)

    pond_id: str
    ph: float
    temperature: float = Field(description="Water temperature in °C")
    optical_density: float = Field(ge=0, description="Proxy for biomass density")
    salinity: float = Field(default=0.0, ge=0, description="Salinity in ppt")
    added_medium: float = Field(
        default=0.0,
        ge=0,
        description="Liters of culture medium added on this date"
    )
    notes: str = ""


class ParameterLog(ParameterLogCreate):
    """A timestamped water-quality measurement for one pond."""
    id: str
    timestamp: datetime


class HarvestCreate(BaseModel):
    """Harvest attributes supplied by the user."""
    model_config = ConfigDict(allow_inf_nan=False)

    pond_id: str
    wet_weight: float = Field(ge=0, description="Wet paste weight in grams")
    dry_weight: Optional[float] = Field(
        default=None,
        description="Dry weight in grams, None when not measured"
    )
    batch_id: Optional[str] = None
    notes: str = ""


class Harvest(HarvestCreate):
    """A timestamped biomass extraction event for one pond."""
    id: str
    timestamp: datetime


class LatestReading(BaseModel):
    """Most recent parameters of a pond; every field is None without logs."""
    ph: Optional[float] = None
    temperature: Optional[float] = None
    optical_density: Optional[float] = None
    salinity: Optional[float] = None
    added_medium: Optional[float] = None
    timestamp: Optional[datetime] = None
    ph_alert: Optional[bool] = Field(
        default=None,
        description="True when the latest pH is outside the healthy band"
    )
