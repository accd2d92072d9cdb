"""
RectSizer Backend: Rectangle Service Unit Tests
===============================================

What:  Tests for the delay → validate → persist workflow.
How:   Uses a real in-memory store; asyncio.sleep and the store are mocked
       where the test needs to observe ordering.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.exceptions import DimensionValidationError, PersistenceError
from app.schemas.rectangle import RectangleDimensions
from app.services.rectangle_service import RectangleService
from app.services.rectangle_store import DEFAULT_DIMENSIONS, RectangleStore


class TestRectangleServiceUpdate:
    """Tests for update()."""

    def setup_method(self):
        self.store = RectangleStore(record_path=None)
        self.service = RectangleService(store=self.store, validation_delay=0)

    @pytest.mark.asyncio
    async def test_update_commits_valid_dimensions(self):
        candidate = RectangleDimensions(width=50, height=100)

        result = await self.service.update(candidate)

        assert result == candidate
        assert self.service.current() == candidate

    @pytest.mark.asyncio
    async def test_update_rejects_and_keeps_previous(self):
        with pytest.raises(DimensionValidationError):
            await self.service.update(RectangleDimensions(width=100, height=50))

        assert self.service.current() == DEFAULT_DIMENSIONS

    @pytest.mark.asyncio
    async def test_update_propagates_persistence_error(self):
        self.store.set = AsyncMock(side_effect=PersistenceError())

        with pytest.raises(PersistenceError):
            await self.service.update(RectangleDimensions(width=50, height=100))

    @pytest.mark.asyncio
    async def test_delay_precedes_validation_and_persist(self):
        """Order must be sleep → validate → set, with the configured delay."""
        calls = []
        service = RectangleService(store=self.store, validation_delay=10.0)

        async def fake_sleep(seconds):
            calls.append(("sleep", seconds))

        def fake_validate(candidate):
            calls.append(("validate", candidate))

        async def fake_set(candidate):
            calls.append(("set", candidate))
            return candidate

        self.store.set = fake_set
        candidate = RectangleDimensions(width=50, height=100)

        with patch("app.services.rectangle_service.asyncio.sleep", new=fake_sleep), \
             patch("app.services.rectangle_service.validate_dimensions", new=fake_validate):
            await service.update(candidate)

        assert calls == [("sleep", 10.0), ("validate", candidate), ("set", candidate)]

    @pytest.mark.asyncio
    async def test_delay_applies_to_rejected_candidates(self):
        service = RectangleService(store=self.store, validation_delay=10.0)
        sleep = AsyncMock()

        with patch("app.services.rectangle_service.asyncio.sleep", new=sleep):
            with pytest.raises(DimensionValidationError):
                await service.update(RectangleDimensions(width=100, height=50))

        sleep.assert_awaited_once_with(10.0)

    @pytest.mark.asyncio
    async def test_zero_delay_skips_sleep(self):
        sleep = AsyncMock()

        with patch("app.services.rectangle_service.asyncio.sleep", new=sleep):
            await self.service.update(RectangleDimensions(width=1, height=1))

        sleep.assert_not_awaited()


class TestRectangleServiceCheck:
    """Tests for check(), the validate-only path."""

    def setup_method(self):
        self.store = RectangleStore(record_path=None)
        self.store.set = MagicMock()
        self.service = RectangleService(store=self.store, validation_delay=0)

    @pytest.mark.asyncio
    async def test_check_valid_does_not_persist(self):
        candidate = RectangleDimensions(width=60, height=90)

        assert await self.service.check(candidate) == candidate
        self.store.set.assert_not_called()
        assert self.service.current() == DEFAULT_DIMENSIONS

    @pytest.mark.asyncio
    async def test_check_invalid_raises(self):
        with pytest.raises(DimensionValidationError):
            await self.service.check(RectangleDimensions(width=91, height=90))
        self.store.set.assert_not_called()

    @pytest.mark.asyncio
    async def test_check_reports_delay_timing(self):
        service = RectangleService(store=self.store, validation_delay=10.0)
        timings = {}

        with patch("app.services.rectangle_service.asyncio.sleep", new=AsyncMock()):
            await service.check(RectangleDimensions(width=1, height=2), timings)

        assert "delay_ms" in timings
        assert timings["delay_ms"] >= 0
