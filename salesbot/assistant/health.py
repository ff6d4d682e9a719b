"""
Backend health monitor.

Probes the backend health endpoint on a fixed interval and keeps the latest
status. Each probe replaces the previous status wholesale.
"""

from typing import Any, Optional

import httpx
import structlog

from salesbot.assistant.backend import BackendClient
from salesbot.channel.scheduler import RecurringTask
from salesbot.models.health import HealthStatus

logger = structlog.get_logger(__name__)

_HEALTH_FIELDS = ("status", "sql", "ai")


class HealthMonitor:
    def __init__(self, backend: BackendClient, interval: float = 30.0):
        self.backend = backend
        self.interval = interval
        self.latest = HealthStatus()
        self._task: Optional[RecurringTask] = None

    @property
    def running(self) -> bool:
        return self._task is not None and self._task.running

    async def probe(self) -> HealthStatus:
        """
        Query the backend once. Never raises.

        Any failure yields the offline sentinel; otherwise the reported
        fields are returned as-is, with missing ones left as "unknown".
        """
        try:
            body = await self.backend.health()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Backend health probe failed", error=str(e))
            return HealthStatus.offline()

        if not isinstance(body, dict):
            logger.warning("Backend health probe returned an unexpected body")
            return HealthStatus.offline()

        fields: dict[str, Any] = {
            key: body[key] for key in _HEALTH_FIELDS if isinstance(body.get(key), str)
        }
        return HealthStatus(**fields)

    async def refresh(self) -> HealthStatus:
        status = await self.probe()
        if status != self.latest:
            logger.info(
                "Backend health changed",
                status=status.status,
                sql=status.sql,
                ai=status.ai,
            )
        self.latest = status
        return status

    def start(self) -> None:
        """Start probing: once immediately, then every interval."""
        self.stop()
        self._task = RecurringTask(
            self.refresh,
            interval=self.interval,
            name="backend-health",
            initial_delay=0,
        ).start()

    def restart(self) -> None:
        """Restart the probe cadence, e.g. after the backend address changed."""
        logger.debug("Restarting backend health monitor")
        self.start()

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def close(self) -> None:
        task = self._task
        self.stop()
        if task is not None:
            await task.wait_closed()
