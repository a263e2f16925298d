"""
Application service: Orchestration over the entity store and its views.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from spirulina_tracker.domain.models import (
    Harvest,
    HarvestCreate,
    LatestReading,
    ParameterLog,
    ParameterLogCreate,
    Pond,
    PondCreate,
)
from spirulina_tracker.infrastructure.storage import EntityStore
from spirulina_tracker.services.domain import time_series
from spirulina_tracker.services.domain.dosage_calculator import (
    DosageTable,
    calculate_new_medium,
)

logger = logging.getLogger(__name__)

RECENT_LOGS_SHOWN = 5


@dataclass
class PondOverview:
    ponds: List[Pond]
    total_volume: float
    active_count: int


@dataclass
class PondDetail:
    pond: Pond
    chart_logs: List[ParameterLog]
    recent_logs: List[ParameterLog]
    latest: LatestReading


@dataclass
class HarvestEntry:
    harvest: Harvest
    pond_name: Optional[str]


@dataclass
class HarvestLedger:
    entries: List[HarvestEntry]
    total_count: int
    total_wet_weight_g: float
    total_wet_weight_kg: str
    visible_count: int
    remaining: int
    can_load_more: bool
    can_show_less: bool
    pond_ids_missing: List[str] = field(default_factory=list)


class CultureService:
    """
    Application service for ponds, logs and harvests.

    Every view is recomputed from the store on each call; the store is the
    only state apart from the harvest ledger's visible-count cursor.
    """

    def __init__(self, store: EntityStore, harvest_page_size: int = 5):
        self.store = store
        self.harvest_pager = time_series.HarvestPager(harvest_page_size)

    # Ponds

    def list_ponds(self) -> List[Pond]:
        return self.store.ponds.list()

    def create_pond(self, payload: PondCreate) -> Pond:
        pond = self.store.ponds.append(payload)
        logger.info(f"Created pond {pond.id} ({pond.name}, {pond.volume}L)")
        return pond

    def delete_pond(self, pond_id: str) -> None:
        """Remove the pond record only; its logs and harvests are kept."""
        self.store.ponds.remove(pond_id)
        logger.info(f"Deleted pond {pond_id}")

    def get_overview(self) -> PondOverview:
        ponds = self.store.ponds.list()
        return PondOverview(
            ponds=ponds,
            total_volume=time_series.total_volume(ponds),
            active_count=time_series.active_count(ponds),
        )

    def get_pond(self, pond_id: str) -> Optional[Pond]:
        return time_series.find_pond(self.store.ponds.list(), pond_id)

    def get_pond_detail(self, pond_id: str) -> Optional[PondDetail]:
        """
        Pond header, chart series, recent history and latest reading.

        Returns:
            PondDetail, or None when the pond does not exist
        """
        pond = self.get_pond(pond_id)
        if pond is None:
            return None
        logs = self.store.logs.list()
        chart_logs = time_series.logs_for_pond(logs, pond_id)
        return PondDetail(
            pond=pond,
            chart_logs=chart_logs,
            recent_logs=list(reversed(chart_logs))[:RECENT_LOGS_SHOWN],
            latest=time_series.latest_reading(logs, pond_id),
        )

    # Logs

    def list_pond_logs(self, pond_id: str) -> List[ParameterLog]:
        return time_series.logs_for_pond(self.store.logs.list(), pond_id)

    def add_log(self, payload: ParameterLogCreate) -> ParameterLog:
        log = self.store.logs.append(payload)
        logger.info(f"Logged parameters for pond {log.pond_id}")
        return log

    # Harvests

    def add_harvest(self, payload: HarvestCreate) -> Harvest:
        harvest = self.store.harvests.append(payload)
        self.harvest_pager.reset()
        logger.info(f"Recorded harvest {harvest.id} of {harvest.wet_weight}g")
        return harvest

    def load_more_harvests(self) -> HarvestLedger:
        self.harvest_pager.load_more(len(self.store.harvests.list()))
        return self.harvest_ledger()

    def show_less_harvests(self) -> HarvestLedger:
        self.harvest_pager.show_less()
        return self.harvest_ledger()

    def harvest_ledger(self) -> HarvestLedger:
        """Visible page of harvests, newest first, with global totals."""
        harvests = self.store.harvests.list()
        pond_names = {pond.id: pond.name for pond in self.store.ponds.list()}
        ordered = time_series.harvests_descending(harvests)
        total = len(ordered)
        total_grams = time_series.total_wet_weight(harvests)
        pager = self.harvest_pager
        return HarvestLedger(
            entries=[
                HarvestEntry(harvest=h, pond_name=pond_names.get(h.pond_id))
                for h in pager.page(ordered)
            ],
            total_count=total,
            total_wet_weight_g=total_grams,
            total_wet_weight_kg=time_series.wet_weight_kg(total_grams),
            visible_count=pager.visible(total),
            remaining=pager.remaining(total),
            can_load_more=pager.can_load_more(total),
            can_show_less=pager.can_show_less(total),
            pond_ids_missing=sorted({h.pond_id for h in harvests} - set(pond_names)),
        )

    # Dosage

    def new_medium_for_pond(self, pond_id: str) -> Optional[DosageTable]:
        """New-medium table preset to a pond's volume, or None if the pond is unknown."""
        pond = self.get_pond(pond_id)
        if pond is None:
            return None
        return calculate_new_medium(pond.volume)
