"""
Infrastructure layer: Entity Store backed by whole-collection JSON files.

Each collection (ponds, logs, harvests) lives in its own JSON file and is
always read and overwritten in full. Reads fail open to an empty collection;
writes raise StorageUnavailableError.
"""
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from spirulina_tracker.config import settings
from spirulina_tracker.domain.models import (
    Harvest,
    HarvestCreate,
    ParameterLog,
    ParameterLogCreate,
    Pond,
    PondCreate,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)
CreateT = TypeVar("CreateT", bound=BaseModel)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StorageUnavailableError(Exception):
    """Raised when a collection cannot be persisted."""

    def __init__(self, message: str, status_code: int = 503):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class JsonCollection(Generic[RecordT, CreateT]):
    """
    Ordered durable sequence of records stored as one JSON array.

    Subclasses bind the record type and decide which timestamp field the
    store assigns at creation time.
    """

    record_type: Type[RecordT]
    file_name: str
    timestamp_field: str = "timestamp"

    def __init__(self, data_dir: Path, clock: Optional[Clock] = None):
        """
        Initialize the collection.

        Args:
            data_dir: Directory holding the collection file
            clock: Source of creation timestamps (defaults to UTC now)
        """
        self.path = Path(data_dir) / self.file_name
        self._clock = clock or utc_now
        self._adapter = TypeAdapter(List[self.record_type])

    def list(self) -> List[RecordT]:
        """
        Return every record in insertion order.

        Any read problem degrades to an empty collection.
        """
        if not self.path.exists():
            return []
        try:
            return self._adapter.validate_json(self.path.read_bytes())
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Could not read {self.path}, treating as empty: {e}")
            return []

    def append(self, payload: CreateT) -> RecordT:
        """
        Assign an identifier and timestamp, persist and return the new record.

        Raises:
            StorageUnavailableError: If the collection cannot be written
        """
        records = self.list()
        now = self._clock()
        record = self.record_type(
            **payload.model_dump(),
            id=self._next_identifier(records, now),
            **{self.timestamp_field: now},
        )
        records.append(record)
        self._save(records)
        return record

    def remove(self, identifier: str) -> None:
        """Delete the record with the given identifier; absent ids are ignored."""
        records = self.list()
        remaining = [record for record in records if record.id != identifier]
        if len(remaining) == len(records):
            return
        self._save(remaining)

    def _next_identifier(self, records: List[RecordT], now: datetime) -> str:
        """Millisecond timestamp, bumped past existing ids created in the same instant."""
        candidate = int(now.timestamp() * 1000)
        numeric_ids = [int(record.id) for record in records if record.id.isdigit()]
        if numeric_ids and candidate <= max(numeric_ids):
            candidate = max(numeric_ids) + 1
        return str(candidate)

    def _save(self, records: List[RecordT]) -> None:
        try:
            payload = self._adapter.dump_json(records, indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.file_name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(payload)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Could not write {self.path}: {e}")
            raise StorageUnavailableError(
                f"Could not save {self.file_name}: {e}"
            ) from e


class PondRepository(JsonCollection[Pond, PondCreate]):
    record_type = Pond
    file_name = "ponds.json"
    timestamp_field = "created_at"


class ParameterLogRepository(JsonCollection[ParameterLog, ParameterLogCreate]):
    record_type = ParameterLog
    file_name = "logs.json"


class HarvestRepository(JsonCollection[Harvest, HarvestCreate]):
    record_type = Harvest
    file_name = "harvests.json"


class EntityStore:
    """
    Single source of truth for the three record collections.

    Collections are independent: there is no referential integrity between
    ponds and the logs/harvests that point at them.
    """

    def __init__(self, data_dir: Optional[str] = None, clock: Optional[Clock] = None):
        self.data_dir = Path(data_dir or settings.data_dir)
        self.ponds = PondRepository(self.data_dir, clock)
        self.logs = ParameterLogRepository(self.data_dir, clock)
        self.harvests = HarvestRepository(self.data_dir, clock)


# Singleton instance
_store: Optional[EntityStore] = None


def get_entity_store() -> EntityStore:
    """
    Get or create the singleton entity store.

    Returns:
        EntityStore instance
    """
    global _store
    if _store is None:
        _store = EntityStore()
    return _store
