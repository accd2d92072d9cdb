"""
RectSizer Backend: Rectangle State Store
========================================

What:  Owns the one shared RectangleDimensions value and its durable record.
How:   Keeps the current value as an immutable Pydantic object in memory and,
       when a record path is configured, mirrors every committed write to a
       JSON file using async file I/O.
Who:   Constructed by the application factory; used by RectangleService.
When:  `load()` runs during startup; `get()`/`set()` per request.

Consistency Model:
    ┌──────────┐   set() holds _write_lock   ┌──────────────────────┐
    │  POST A  │──▶ write tmp → replace ────▶│ swap self._current   │
    │  POST B  │──▶ (waits for the lock) ───▶│ swap self._current   │
    └──────────┘                             └──────────────────────┘
         GET ─────────────────────────────────▶ read self._current

    - Readers never block: they see the old object or the new one, never a
      mix, because the whole object is replaced in a single assignment.
    - Writers are serialised so the file and memory agree on the same winner.
      Among concurrent writers the last to commit wins; stale writes are not
      rejected.
    - Memory changes only after the record is safely on disk. A failed write
      raises PersistenceError and leaves the previous value in place.

Durable record format:
    {"width": 80.0, "height": 100.0}
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import PersistenceError
from app.schemas.rectangle import RectangleDimensions

logger = logging.getLogger(__name__)

DEFAULT_DIMENSIONS = RectangleDimensions(width=80.0, height=100.0)


class RectangleStore:
    """
    Holds the current rectangle and, optionally, its durable record.

    Args:
        record_path: JSON file to mirror writes to. None keeps state in memory only.
        default: Value used when no usable record exists.
    """

    def __init__(
        self,
        record_path: Optional[str] = None,
        default: RectangleDimensions = DEFAULT_DIMENSIONS,
    ):
        self.record_path = Path(record_path).resolve() if record_path else None
        self.default = default
        self._current = default
        self._write_lock = asyncio.Lock()
        self._loaded = False

    @property
    def is_durable(self) -> bool:
        return self.record_path is not None

    async def load(self) -> RectangleDimensions:
        """
        Initialize the current value from the durable record.

        What:    Reads the record if it exists, otherwise creates it with the default.
        When:    Application startup. Safe to call more than once.

        An unreadable or invalid record is logged and replaced with the default.

        Raises:
            PersistenceError if the record has to be created and cannot be written.
        """
        if self._loaded:
            return self._current

        if not self.is_durable:
            logger.info("Rectangle state kept in memory only, default=%s", self.default)
            self._loaded = True
            return self._current

        if self.record_path.exists():
            try:
                async with aiofiles.open(self.record_path, "r", encoding="utf-8") as f:
                    raw = await f.read()
                self._current = RectangleDimensions.model_validate_json(raw)
                logger.info("Loaded rectangle record %s: %s", self.record_path, self._current)
                self._loaded = True
                return self._current
            except (OSError, PydanticValidationError) as e:
                logger.warning(
                    "Rectangle record %s is unusable (%s); resetting to default",
                    self.record_path,
                    e,
                )

        try:
            self.record_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Cannot create directory for rectangle record %s: %s", self.record_path, e)
            raise PersistenceError(
                context={"path": str(self.record_path), "os_error": str(e)},
            ) from e
        await self._write_record(self.default)
        self._current = self.default
        self._loaded = True
        logger.info("Created rectangle record %s with default %s", self.record_path, self.default)
        return self._current

    def get(self) -> RectangleDimensions:
        """Return the most recently committed dimensions."""
        return self._current

    async def set(self, dimensions: RectangleDimensions) -> RectangleDimensions:
        """
        Commit new dimensions, persisting them first when durable.

        Returns:
            The committed dimensions.

        Raises:
            PersistenceError if the record cannot be written. The current
            value is unchanged in that case.
        """
        async with self._write_lock:
            if self.is_durable:
                await self._write_record(dimensions)
            previous = self._current
            self._current = dimensions
        logger.info("Rectangle updated: %s -> %s", previous, dimensions)
        return dimensions

    async def _write_record(self, dimensions: RectangleDimensions) -> None:
        """
        Atomically replace the record file with the given dimensions.

        How:  Write a temporary sibling file, then rename it over the record,
              so a crash mid-write never leaves a truncated record behind.
        """
        tmp_path = self.record_path.with_name(
            f".{self.record_path.name}.{os.getpid()}.tmp"
        )
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(dimensions.model_dump_json())
            await aiofiles.os.replace(tmp_path, self.record_path)
        except OSError as e:
            logger.error("Failed to write rectangle record %s: %s", self.record_path, e)
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(
                context={"path": str(self.record_path), "os_error": str(e)},
            ) from e
