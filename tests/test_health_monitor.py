"""Tests for the backend health monitor."""

import asyncio

import httpx
import pytest
import pytest_asyncio

from conftest import BACKEND_URL, FakeService, wait_until
from salesbot.assistant.backend import BackendClient
from salesbot.assistant.health import HealthMonitor
from salesbot.models.health import HealthReport, HealthStatus


@pytest_asyncio.fixture
async def monitor(http_client: httpx.AsyncClient):
    monitor = HealthMonitor(BackendClient(http_client, BACKEND_URL), interval=0.01)
    yield monitor
    await monitor.close()


class TestProbe:
    """Tests for a single probe."""

    @pytest.mark.asyncio
    async def test_healthy_backend_returned_verbatim(
        self, monitor: HealthMonitor, fake_service: FakeService
    ) -> None:
        fake_service.on(
            "GET",
            "/api/v1/health",
            httpx.Response(200, json={"status": "online", "sql": "connected", "ai": "present"}),
        )

        status = await monitor.probe()

        assert status == HealthStatus(status="online", sql="connected", ai="present")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.ConnectError("refused"),
            httpx.Response(500, json={"status": "online"}),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json=["online"]),
        ],
    )
    async def test_failures_return_offline_sentinel(
        self, monitor: HealthMonitor, fake_service: FakeService, response
    ) -> None:
        """Every failure yields exactly offline/disconnected/unknown."""
        fake_service.on("GET", "/api/v1/health", response)

        status = await monitor.probe()

        assert status.model_dump() == {"status": "offline", "sql": "disconnected", "ai": "unknown"}

    @pytest.mark.asyncio
    async def test_missing_fields_are_unknown(
        self, monitor: HealthMonitor, fake_service: FakeService
    ) -> None:
        fake_service.on("GET", "/api/v1/health", httpx.Response(200, json={"status": "online"}))

        status = await monitor.probe()

        assert status == HealthStatus(status="online", sql="unknown", ai="unknown")

    @pytest.mark.asyncio
    async def test_values_are_not_validated(
        self, monitor: HealthMonitor, fake_service: FakeService
    ) -> None:
        fake_service.on(
            "GET",
            "/api/v1/health",
            httpx.Response(200, json={"status": "degraded", "sql": "error", "ai": "missing"}),
        )

        status = await monitor.probe()

        assert status.status == "degraded"
        assert status.sql == "error"


class TestMonitorLoop:
    """Tests for the recurring probe."""

    @pytest.mark.asyncio
    async def test_start_probes_immediately_and_overwrites(
        self, http_client: httpx.AsyncClient, fake_service: FakeService
    ) -> None:
        """Each probe replaces the previous status wholesale."""
        monitor = HealthMonitor(BackendClient(http_client, BACKEND_URL), interval=0.1)
        fake_service.on(
            "GET",
            "/api/v1/health",
            httpx.Response(200, json={"status": "online", "sql": "connected", "ai": "present"}),
            httpx.Response(200, json={"status": "online"}),
        )

        monitor.start()
        await wait_until(lambda: monitor.latest.sql == "connected")
        await wait_until(lambda: monitor.latest.sql == "unknown")

        assert monitor.latest == HealthStatus(status="online")
        assert monitor.running
        await monitor.close()

    @pytest.mark.asyncio
    async def test_restart_keeps_single_task(
        self, monitor: HealthMonitor, fake_service: FakeService
    ) -> None:
        fake_service.on("GET", "/api/v1/health", httpx.Response(200, json={"status": "online"}))

        monitor.start()
        first = monitor._task
        monitor.restart()

        assert first is not monitor._task
        assert not first.running
        assert monitor.running

    @pytest.mark.asyncio
    async def test_close_stops_probing(self, monitor: HealthMonitor, fake_service: FakeService) -> None:
        fake_service.on("GET", "/api/v1/health", httpx.ConnectError("refused"))

        monitor.start()
        await wait_until(lambda: monitor.latest.status == "offline")
        await monitor.close()
        probes = len(fake_service.requests)
        await asyncio.sleep(0.03)

        assert not monitor.running
        assert len(fake_service.requests) == probes


class TestHealthLabels:
    """Tests for the display label and readiness flag."""

    @pytest.mark.parametrize(
        "status, label, ready",
        [
            (HealthStatus.offline(), "Backend Offline", False),
            (HealthStatus(status="online", sql="error", ai="present"), "SQL Error (Check Pass)", False),
            (HealthStatus(status="online", sql="connected", ai="missing"), "API Key Missing", False),
            (HealthStatus(status="online", sql="connected", ai="present"), "SQL Connected", True),
            (HealthStatus(), "Checking...", False),
        ],
    )
    def test_label_and_ready(self, status: HealthStatus, label: str, ready: bool) -> None:
        report = HealthReport.from_status(status)

        assert report.label == label
        assert report.ready is ready
