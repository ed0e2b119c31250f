"""JSON file job store.

The whole job set is one JSON document, replaced atomically on every save:
the snapshot is written to a temporary file in the same directory and then
moved over the target with ``os.replace``.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path
from typing import List, Sequence, Union

from pydantic import Field, ValidationError

from taskgate.core.logging_config import get_logger

from ..errors import StoreError
from ..schemas.base import BaseSchema
from ..schemas.domain import Job
from .base import BaseJobStore

logger = get_logger(__name__)

SNAPSHOT_VERSION = 1


class JobSnapshot(BaseSchema):
    version: int = SNAPSHOT_VERSION
    jobs: List[Job] = Field(default_factory=list)


class JsonFileJobStore(BaseJobStore):
    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def _read(self) -> List[Job]:
        if not self._path.exists():
            return []
        raw = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        if not raw.strip():
            return []
        try:
            snapshot = JobSnapshot.model_validate_json(raw)
        except ValidationError as e:
            raise StoreError(f"Corrupt job snapshot at {self._path}: {e}") from e
        logger.debug(f"Loaded {len(snapshot.jobs)} job(s) from {self._path}")
        return snapshot.jobs

    async def save_all(self, jobs: Sequence[Job]) -> None:
        async with self._lock:
            # Serialize under the lock so the document reflects one point in time.
            data = JobSnapshot(jobs=list(jobs)).model_dump_json(indent=2)
            try:
                await asyncio.to_thread(self._write_atomic, data)
            except OSError as e:
                raise StoreError(f"Failed to write job snapshot to {self._path}: {e}") from e

    def _write_atomic(self, data: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
