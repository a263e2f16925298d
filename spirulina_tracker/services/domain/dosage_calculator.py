"""
Domain service: Nutrient dosage calculator.

Two fixed recipes are supported:
- New medium: dose per liter of fresh culture water (modified Zarrouk)
- Replenishment: dose per gram of harvested wet paste, compensating the
  minerals removed with the biomass

The calculator is total: any input it cannot read as a non-negative number
is treated as zero, so it never raises and never yields NaN.
"""
import math
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP, localcontext
from enum import Enum
from typing import List, Optional, Tuple, Union


class DosageMode(str, Enum):
    NEW_MEDIUM = "new_medium"
    REPLENISHMENT = "replenishment"


@dataclass(frozen=True)
class Nutrient:
    """A recipe line: how much of a nutrient per unit of input."""
    name: str
    rate: float
    unit: str
    purpose: Optional[str] = None
    category: Optional[str] = None
    note: Optional[str] = None
    """Advisory text shown next to the amount; never gates the calculation"""


NEW_MEDIUM_RECIPE: Tuple[Nutrient, ...] = (
    Nutrient("Sodium Bicarbonate", 10, "g", "Keeps pH up and supplies carbon", "base"),
    Nutrient("Sea Salt", 5, "g", "Brackish base and trace elements", "base"),
    Nutrient("Potassium Nitrate", 2.5, "g", "Starting nitrogen", "macro"),
    Nutrient("Monopotassium Phosphate", 0.2, "g", "Phosphorus for energy", "macro"),
    Nutrient("Potassium Sulfate", 0.1, "g", "Extra potassium", "macro"),
    Nutrient("Magnesium Sulfate", 0.2, "g", "Core of the chlorophyll molecule", "micro"),
    Nutrient("Iron mix", 1, "ml", "Green color", "micro"),
)

REPLENISHMENT_RECIPE: Tuple[Nutrient, ...] = (
    Nutrient("Sodium Bicarbonate", 0.1, "g", note="Only add if pH < 10"),
    Nutrient("Potassium Nitrate", 0.2, "g"),
    Nutrient("Monopotassium Phosphate", 0.02, "g"),
    Nutrient("Potassium Sulfate", 0.01, "g"),
    Nutrient("Magnesium Sulfate", 0.01, "g"),
    Nutrient("Iron mix", 0.1, "ml"),
)

VOLUME_PRESETS_L = (1, 10, 20, 100, 500, 1000)
WEIGHT_PRESETS_G = (50, 100, 250, 500, 1000)
DEFAULT_VOLUME_L = 10
DEFAULT_WEIGHT_G = 100

NEW_MEDIUM_GUIDANCE = (
    "Dissolve the macronutrients separately before adding them to the main "
    "tank to avoid precipitation."
)
REPLENISHMENT_GUIDANCE = (
    "These doses replace the minerals removed with the biomass. Add them after "
    "harvesting to keep the culture density stable."
)

_TWO_PLACES = Decimal("0.01")


@dataclass
class DosageLine:
    nutrient: Nutrient
    amount: float
    display: str


@dataclass
class DosageTable:
    mode: DosageMode
    quantity: float
    quantity_unit: str
    guidance: str
    lines: List[DosageLine] = field(default_factory=list)


def parse_quantity(raw: Union[str, float, int, None]) -> float:
    """
    Read a user-entered quantity.

    Blank, non-numeric, non-finite and negative input all read as zero.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def round_half_up(value: Union[float, Decimal]) -> Decimal:
    """
    Round to two decimals, half up, for values of any magnitude.

    Non-finite values come back unchanged instead of raising.
    """
    number = value if isinstance(value, Decimal) else Decimal(repr(value))
    if not number.is_finite():
        return number
    with localcontext() as ctx:
        ctx.prec = max(number.adjusted() + 3, ctx.prec)
        return number.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def format_amount(amount: float, unit: str) -> str:
    """
    Render an amount for display.

    Gram amounts of 1000 or more are shown in kilograms with two decimals;
    everything else keeps its unit, rounded to at most two decimals with
    trailing zeros removed.
    """
    if unit == "g" and amount >= 1000:
        return f"{round_half_up(amount / 1000)} kg"
    text = f"{round_half_up(amount):f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return f"{text} {unit}"


def compute_amount(rate: float, quantity: float) -> float:
    return rate * quantity


def _build_table(
    mode: DosageMode,
    recipe: Tuple[Nutrient, ...],
    raw_quantity: Union[str, float, int, None],
    quantity_unit: str,
    guidance: str,
) -> DosageTable:
    quantity = parse_quantity(raw_quantity)
    lines = []
    for nutrient in recipe:
        amount = compute_amount(nutrient.rate, quantity)
        lines.append(DosageLine(
            nutrient=nutrient,
            amount=amount,
            display=format_amount(amount, nutrient.unit),
        ))
    return DosageTable(
        mode=mode,
        quantity=quantity,
        quantity_unit=quantity_unit,
        guidance=guidance,
        lines=lines,
    )


def calculate_new_medium(volume: Union[str, float, int, None]) -> DosageTable:
    """
    Nutrients needed to prepare fresh medium.

    Args:
        volume: Water volume in liters (raw user input accepted)

    Returns:
        DosageTable with one line per new-medium nutrient
    """
    return _build_table(
        DosageMode.NEW_MEDIUM, NEW_MEDIUM_RECIPE, volume, "L", NEW_MEDIUM_GUIDANCE
    )


def calculate_replenishment(wet_weight: Union[str, float, int, None]) -> DosageTable:
    """
    Nutrients to add back after a harvest.

    Args:
        wet_weight: Harvested wet paste in grams (raw user input accepted)

    Returns:
        DosageTable with one line per replenishment nutrient
    """
    return _build_table(
        DosageMode.REPLENISHMENT,
        REPLENISHMENT_RECIPE,
        wet_weight,
        "g",
        REPLENISHMENT_GUIDANCE,
    )
