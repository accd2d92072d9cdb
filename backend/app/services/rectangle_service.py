"""
RectSizer Backend: Rectangle Service (Business Logic Orchestrator)
==================================================================

What:  Runs the per-request workflow for submitted dimensions.
How:   Composes the validation delay, the validator, and RectangleStore.
Who:   Called by the rectangle route handlers.

Request State Machine (POST /api/rectangle):
    ┌──────────┐    ┌──────────┐    ┌────────────┐    ┌────────────┐    ┌───────────┐
    │ Received │───▶│ Delaying │───▶│ Validating │───▶│ Persisting │───▶│ Persisted │
    └──────────┘    └──────────┘    └────────────┘    └────────────┘    └───────────┘
                                          │
                                          ▼
                                    ┌──────────┐
                                    │ Rejected │
                                    └──────────┘

    The delay is unconditional and always precedes validation. It is an
    `asyncio.sleep`, so the event loop keeps serving other requests meanwhile.
    Work is not aborted if the client disconnects during the delay.
"""

import asyncio
import logging
import time
from typing import Dict, Optional

from app.exceptions import DimensionValidationError
from app.schemas.rectangle import RectangleDimensions
from app.services.rectangle_store import RectangleStore
from app.services.validator import validate_dimensions

logger = logging.getLogger(__name__)


class RectangleService:
    """
    Business logic layer for the rectangle resource.

    Args:
        store: The shared RectangleStore.
        validation_delay: Seconds to wait before validating a candidate.
    """

    def __init__(self, store: RectangleStore, validation_delay: float = 10.0):
        self.store = store
        self.validation_delay = validation_delay

    def current(self) -> RectangleDimensions:
        return self.store.get()

    async def check(
        self,
        candidate: RectangleDimensions,
        timings: Optional[Dict[str, float]] = None,
    ) -> RectangleDimensions:
        """
        Delay, then validate the candidate without committing it.

        Args:
            candidate: Dimensions to check.
            timings: Optional dict; receives `delay_ms`, the time spent waiting.

        Raises:
            DimensionValidationError: width exceeds height
        """
        logger.info("Received candidate %s", candidate)

        started = time.perf_counter()
        if self.validation_delay > 0:
            logger.debug("Delaying validation by %.2fs", self.validation_delay)
            await asyncio.sleep(self.validation_delay)
        if timings is not None:
            timings["delay_ms"] = (time.perf_counter() - started) * 1000

        try:
            validate_dimensions(candidate)
        except DimensionValidationError as e:
            logger.warning(
                "Rejected %s: %s",
                candidate,
                e.reason,
            )
            raise

        return candidate

    async def update(
        self,
        candidate: RectangleDimensions,
        timings: Optional[Dict[str, float]] = None,
    ) -> RectangleDimensions:
        """
        Full workflow: delay → validate → persist.

        Returns:
            The committed dimensions (echo of the candidate).

        Raises:
            DimensionValidationError: width exceeds height, nothing is stored
            PersistenceError: the durable record could not be written
        """
        await self.check(candidate, timings)
        committed = await self.store.set(candidate)
        logger.info("Persisted %s", committed)
        return committed
