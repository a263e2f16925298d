"""
API request models using Pydantic.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ParameterLogRequest(BaseModel):
    """Parameter log body; the pond comes from the URL."""
    model_config = ConfigDict(allow_inf_nan=False)

    ph: float = Field(description="Culture pH", examples=[10.1])
    temperature: float = Field(description="Water temperature in °C", examples=[30.5])
    optical_density: float = Field(ge=0, description="Optical density reading", examples=[0.6])
    salinity: float = Field(default=0.0, ge=0, description="Salinity in ppt")
    added_medium: float = Field(
        default=0.0,
        ge=0,
        description="Liters of culture medium added"
    )
    notes: str = ""


class AdvisorQuestion(BaseModel):
    """Question for the culture advisor."""
    question: str = Field(
        min_length=1,
        description="Free-text question",
        examples=["Why is my culture turning yellow?"]
    )

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question must not be blank")
        return value

