"""Tests for the refresh scheduler lifecycle.

Tests:
  1. RefreshScheduler start/stop lifecycle
  2. Job registration (interval, immediate first run, overlap allowance)
  3. Manual run and error isolation of the scheduled tick
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from insider_tracker.services.transaction_store import TransactionStore


def _refresher(result: bool = True) -> MagicMock:
    refresher = MagicMock()
    refresher.store = TransactionStore()
    refresher.refresh = AsyncMock(return_value=result)
    return refresher


class TestRefreshScheduler:

    @pytest.fixture()
    def _mock_apscheduler(self):
        """Patch AsyncIOScheduler so start() doesn't need an event loop."""
        mock_cls = MagicMock()
        mock_instance = MagicMock()
        mock_instance.get_job.return_value = None
        mock_cls.return_value = mock_instance
        with patch("insider_tracker.services.scheduler.AsyncIOScheduler", mock_cls):
            yield mock_instance

    def test_instantiation(self) -> None:
        from insider_tracker.services.scheduler import RefreshScheduler
        sched = RefreshScheduler(refresher=_refresher())
        assert not sched.is_running

    def test_get_status_when_stopped(self) -> None:
        from insider_tracker.services.scheduler import RefreshScheduler
        sched = RefreshScheduler(refresher=_refresher(), interval_seconds=60)
        status = sched.get_status()
        assert status["is_running"] is False
        assert status["next_run"] is None
        assert status["interval_seconds"] == 60
        assert status["store"]["transactions"] == 0

    def test_start_registers_refresh_job(self, _mock_apscheduler) -> None:
        from insider_tracker.services.scheduler import REFRESH_JOB_ID, RefreshScheduler
        sched = RefreshScheduler(refresher=_refresher(), interval_seconds=60)
        result = sched.start()

        assert result["status"] == "started"
        _mock_apscheduler.add_job.assert_called_once()
        args, kwargs = _mock_apscheduler.add_job.call_args
        trigger = args[1]
        assert trigger.interval.total_seconds() == 60
        assert kwargs["id"] == REFRESH_JOB_ID
        # First run fires immediately, overlapping runs are not serialised
        assert kwargs["next_run_time"] is not None
        assert kwargs["max_instances"] > 1
        _mock_apscheduler.start.assert_called_once()
        sched.stop()

    def test_overlap_cap_follows_setting(self, _mock_apscheduler) -> None:
        from insider_tracker.services.scheduler import RefreshScheduler, settings
        with patch.object(settings, "REFRESH_MAX_OVERLAP", 5):
            sched = RefreshScheduler(refresher=_refresher(), interval_seconds=60)
            sched.start()
        _, kwargs = _mock_apscheduler.add_job.call_args
        assert kwargs["max_instances"] == 5
        assert kwargs["coalesce"] is False
        sched.stop()

    @pytest.mark.usefixtures("_mock_apscheduler")
    def test_start_and_stop(self) -> None:
        from insider_tracker.services.scheduler import RefreshScheduler
        sched = RefreshScheduler(refresher=_refresher())
        assert sched.start()["status"] == "started"
        assert sched.is_running

        assert sched.stop()["status"] == "stopped"
        assert not sched.is_running
        assert sched.stop()["status"] == "not_running"

    @pytest.mark.usefixtures("_mock_apscheduler")
    def test_double_start_returns_already(self) -> None:
        from insider_tracker.services.scheduler import RefreshScheduler
        sched = RefreshScheduler(refresher=_refresher())
        sched.start()
        assert sched.start()["status"] == "already_running"
        sched.stop()

    @pytest.mark.asyncio
    async def test_run_now_reports_outcome(self) -> None:
        from insider_tracker.services.scheduler import RefreshScheduler
        ok = RefreshScheduler(refresher=_refresher(True))
        failed = RefreshScheduler(refresher=_refresher(False))
        assert (await ok.run_now())["status"] == "refreshed"
        assert (await failed.run_now())["status"] == "failed"

    @pytest.mark.asyncio
    async def test_tick_swallows_unexpected_errors(self) -> None:
        from insider_tracker.services.scheduler import RefreshScheduler
        refresher = _refresher()
        refresher.refresh.side_effect = RuntimeError("boom")
        sched = RefreshScheduler(refresher=refresher)
        await sched._refresh_tick()
        refresher.refresh.assert_awaited_once()
