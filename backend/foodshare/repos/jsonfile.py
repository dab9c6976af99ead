# foodshare/repos/jsonfile.py
import asyncio
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from foodshare.core.errors import StorageError
from foodshare.repos.inmemory import InMemoryRepo
from foodshare.schemas import Acceptor, Activity, DeliveryPerson, Restaurant

logger = logging.getLogger(__name__)


class Snapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    restaurants: List[Restaurant] = []
    acceptors: List[Acceptor] = []
    delivery_persons: List[DeliveryPerson] = Field(default=[], alias="deliveryPersons")
    activity_logs: List[Activity] = Field(default=[], alias="activityLogs")


class JsonFileRepo(InMemoryRepo):
    """
    In-memory store mirrored to a local JSON file after every mutation.

    The file is the source of truth: when a write fails, the in-memory state is
    rolled back to the last snapshot that reached disk before StorageError is
    raised, so a failed mutation is never persisted by a later flush.
    """

    engine_name = "Local JSON"

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self._write_lock = asyncio.Lock()
        self._persisted: Optional[str] = None
        self._reverts = 0

    async def startup(self) -> None:
        if not self.path.exists():
            logger.info("no snapshot at %s; starting empty", self.path)
            return
        try:
            raw = await asyncio.get_running_loop().run_in_executor(None, self.path.read_text, "utf-8")
            self._load(raw)
        except (OSError, ValidationError) as e:
            raise StorageError(f"Cannot load {self.path}: {e}") from e
        self._persisted = raw
        logger.info("history loaded from %s", self.path)

    def _load(self, raw: Optional[str]) -> None:
        snap = Snapshot.model_validate_json(raw) if raw else Snapshot()
        self.restaurants = {r.id: r for r in snap.restaurants}
        self.acceptors = {a.id: a for a in snap.acceptors}
        self.deliveries = {d.id: d for d in snap.delivery_persons}
        self.activities = {a.id: a for a in snap.activity_logs}

    def _dump(self) -> str:
        snap = Snapshot(
            restaurants=list(self.restaurants.values()),
            acceptors=list(self.acceptors.values()),
            delivery_persons=list(self.deliveries.values()),
            activity_logs=list(self.activities.values()),
        )
        return snap.model_dump_json(by_alias=True, indent=2)

    def _write(self, payload: str) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, self.path)

    async def _flush(self) -> None:
        # serialize on the loop so the snapshot is consistent, write off it
        payload = self._dump()
        generation = self._reverts
        async with self._write_lock:
            if generation != self._reverts:
                # an earlier queued write failed and already dropped this change
                raise StorageError(f"Cannot write {self.path}: an earlier write failed")
            try:
                await asyncio.get_running_loop().run_in_executor(None, self._write, payload)
            except OSError as e:
                logger.error("write to %s failed; reverting to last saved state", self.path)
                self._load(self._persisted)
                self._reverts += 1
                raise StorageError(f"Cannot write {self.path}: {e}") from e
            self._persisted = payload
