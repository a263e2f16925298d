"""
Domain service: Time-series views over ponds, parameter logs and harvests.

All functions are pure and recompute from the snapshot they are given.
Sorting is stable, so records with equal timestamps keep insertion order.
"""
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from spirulina_tracker.domain.models import (
    Harvest,
    LatestReading,
    ParameterLog,
    Pond,
    PondStatus,
)
from spirulina_tracker.services.domain.dosage_calculator import round_half_up

# Healthy pH band for Spirulina cultures
PH_MIN = 9.0
PH_MAX = 10.5


def logs_for_pond(logs: Iterable[ParameterLog], pond_id: str) -> List[ParameterLog]:
    """Logs of one pond, oldest first (chart order)."""
    return sorted(
        (log for log in logs if log.pond_id == pond_id),
        key=lambda log: log.timestamp,
    )


def recent_logs(logs: Iterable[ParameterLog], pond_id: str) -> List[ParameterLog]:
    """Logs of one pond, newest first; the exact reverse of logs_for_pond."""
    return list(reversed(logs_for_pond(logs, pond_id)))


def harvests_descending(harvests: Iterable[Harvest]) -> List[Harvest]:
    """All harvests, newest first; ties keep insertion order."""
    return sorted(harvests, key=lambda harvest: harvest.timestamp, reverse=True)


def total_volume(ponds: Iterable[Pond]) -> float:
    return sum(pond.volume for pond in ponds)


def active_count(ponds: Iterable[Pond]) -> int:
    return sum(1 for pond in ponds if pond.status == PondStatus.ACTIVE)


def total_wet_weight(harvests: Iterable[Harvest]) -> float:
    """Sum of wet weight in grams across every harvest, whatever the pond."""
    return sum(harvest.wet_weight for harvest in harvests)


def wet_weight_kg(total_grams: float) -> str:
    """Grams rendered as kilograms with exactly two decimals."""
    kilograms = Decimal(repr(total_grams)).scaleb(-3)
    return f"{round_half_up(kilograms)}"


def is_ph_out_of_range(ph: float) -> bool:
    return ph < PH_MIN or ph > PH_MAX


def latest_reading(logs: Iterable[ParameterLog], pond_id: str) -> LatestReading:
    """
    Parameters of the most recent log of a pond.

    Without logs every field is None, so "no data" is never shown as zero.
    """
    ordered = recent_logs(logs, pond_id)
    if not ordered:
        return LatestReading()
    latest = ordered[0]
    return LatestReading(
        ph=latest.ph,
        temperature=latest.temperature,
        optical_density=latest.optical_density,
        salinity=latest.salinity,
        added_medium=latest.added_medium,
        timestamp=latest.timestamp,
        ph_alert=is_ph_out_of_range(latest.ph),
    )


class HarvestPager:
    """
    Visible-count cursor for the harvest ledger.

    Starts at one page, grows by one page per load_more and goes back to a
    single page on show_less or when a harvest is added.
    """

    def __init__(self, page_size: int = 5):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self.count = page_size

    def load_more(self, total: Optional[int] = None) -> None:
        """Grow by one page; with a total, never past max(total, page_size)."""
        self.count += self.page_size
        if total is not None:
            self.count = min(self.count, max(total, self.page_size))

    def show_less(self) -> None:
        self.count = self.page_size

    def reset(self) -> None:
        self.count = self.page_size

    def visible(self, total: int) -> int:
        """Number of records actually shown, clamped to the total."""
        return min(self.count, total)

    def remaining(self, total: int) -> int:
        return max(total - self.count, 0)

    def can_load_more(self, total: int) -> bool:
        return total > self.page_size and self.count < total

    def can_show_less(self, total: int) -> bool:
        return total > self.page_size and self.count >= total

    def page(self, records: Sequence[Harvest]) -> List[Harvest]:
        """Leading slice of already-sorted records."""
        return list(records[: self.visible(len(records))])


def find_pond(ponds: Iterable[Pond], pond_id: str) -> Optional[Pond]:
    return next((pond for pond in ponds if pond.id == pond_id), None)
