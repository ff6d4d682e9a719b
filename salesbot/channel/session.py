"""
Channel session lifecycle manager.

Owns one logical gateway session and drives it through
reset -> create -> awaiting-qr/awaiting-scan -> connected, polling the
gateway for its connection state. The manager is the only writer of the
session state.

Every StartSession and StopPolling bumps an epoch; results of gateway calls
issued under an older epoch are discarded instead of applied.
"""

import asyncio
import re
from typing import Optional

import httpx
import structlog

from salesbot.channel.scheduler import RecurringTask
from salesbot.exceptions.channel import (
    GatewayCreateException,
    GatewayTransportException,
    InvalidSessionNameException,
)
from salesbot.gateway.client import GatewayClient
from salesbot.gateway.parsing import extract_qr_code, parse_connect_body
from salesbot.models.channel import GatewayConnectionState, SessionState, SessionStatus
from salesbot.settings.gateway import GatewayConfig

logger = structlog.get_logger(__name__)

_DISALLOWED_NAME_CHARS = re.compile(r"[^a-z0-9_]")

# 403/409 on create mean the instance already exists.
_ALREADY_EXISTS_STATUSES = (403, 409)

_POLLING_STATES = (SessionState.AWAITING_QR, SessionState.AWAITING_SCAN)


def clean_session_name(name: str) -> str:
    """Lowercase the name and drop every character outside [a-z0-9_]."""
    return _DISALLOWED_NAME_CHARS.sub("", name.lower())


class ChannelSessionManager:
    """
    Provisions, pairs and monitors a messaging-gateway session.

    Usage:
        manager = ChannelSessionManager(http_client, settings.GATEWAY)
        await manager.start_session("vendas", gateway_url, api_key)
        status = manager.current_status()
    """

    def __init__(self, http_client: httpx.AsyncClient, config: GatewayConfig) -> None:
        self.http_client = http_client
        self.config = config
        self._client: Optional[GatewayClient] = None
        self._state = SessionState.IDLE
        self._session_name: Optional[str] = None
        self._gateway_status = ""
        self._qr_code: Optional[str] = None
        self._error: Optional[str] = None
        self._poller: Optional[RecurringTask] = None
        self._epoch = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session_name(self) -> Optional[str]:
        return self._session_name

    @property
    def polling(self) -> bool:
        return self._poller is not None and self._poller.running

    @property
    def connected_session_name(self) -> Optional[str]:
        """Name of the session when it is connected, otherwise None."""
        if self._state is SessionState.CONNECTED:
            return self._session_name
        return None

    @property
    def client(self) -> Optional[GatewayClient]:
        return self._client

    def current_status(self) -> SessionStatus:
        return SessionStatus(
            state=self._state,
            session_name=self._session_name,
            gateway_status=self._gateway_status.upper(),
            qr_code=self._qr_code,
            error=self._error,
        )

    async def start_session(
        self,
        name: str,
        gateway_url: Optional[str] = None,
        api_key: Optional[str] = None,
    ) -> SessionStatus:
        """
        Restart the session from scratch: reset, create, then poll.

        Returns once the create phase has finished; polling continues in the
        background until the session connects or polling is stopped.

        Raises:
            InvalidSessionNameException: If nothing is left of the name after cleaning
        """
        cleaned = clean_session_name(name)
        if not cleaned:
            raise InvalidSessionNameException(name)

        self._stop_poller()
        self._epoch += 1
        epoch = self._epoch

        self._client = GatewayClient(
            self.http_client,
            base_url=gateway_url or self.config.URL,
            api_key=api_key if api_key is not None else self.config.API_KEY,
            integration=self.config.INTEGRATION,
        )
        self._session_name = cleaned
        self._qr_code = None
        self._error = None
        self._gateway_status = "resetting"
        self._transition(SessionState.RESETTING)
        logger.info(
            "Starting channel session",
            session_name=cleaned,
            requested_name=name,
            gateway_url=self._client.base_url,
        )

        await self._reset(epoch)
        if self._is_current(epoch):
            await self._create(epoch)
        return self.current_status()

    def stop_polling(self) -> SessionStatus:
        """
        Stop polling the gateway. Idempotent; remote state is untouched.

        Responses still in flight are discarded when they arrive.
        """
        self._epoch += 1
        self._stop_poller()
        if self._state in (SessionState.RESETTING, SessionState.CREATING):
            self._transition(SessionState.IDLE)
        logger.debug("Channel session polling stopped", session_name=self._session_name)
        return self.current_status()

    async def close(self) -> None:
        """Stop polling and wait for the poll task to wind down."""
        poller = self._poller
        self.stop_polling()
        if poller is not None:
            await poller.wait_closed()

    def _is_current(self, epoch: int) -> bool:
        return epoch == self._epoch

    def _transition(self, state: SessionState) -> None:
        if state is self._state:
            return
        logger.info(
            "Channel session state changed",
            session_name=self._session_name,
            from_state=str(self._state),
            to_state=str(state),
        )
        self._state = state

    def _fail(self, message: str) -> None:
        self._stop_poller()
        self._qr_code = None
        self._error = message
        self._gateway_status = "error"
        self._transition(SessionState.ERROR)
        logger.error(
            "Channel session failed",
            session_name=self._session_name,
            error=message,
        )

    async def _reset(self, epoch: int) -> None:
        """Best-effort delete of any previous instance, then let the gateway settle."""
        client, name = self._client, self._session_name
        try:
            response = await client.delete_instance(name)
            logger.debug(
                "Previous instance delete attempted",
                session_name=name,
                status_code=response.status_code,
            )
        except GatewayTransportException as e:
            # The instance may simply not exist.
            logger.debug("Previous instance delete ignored", session_name=name, error=e.message)

        if not self._is_current(epoch):
            return
        self._gateway_status = "cleaning"
        await asyncio.sleep(self.config.SETTLE_DELAY)

    async def _create(self, epoch: int) -> None:
        client, name = self._client, self._session_name
        self._gateway_status = "starting"
        self._transition(SessionState.CREATING)

        try:
            response = await client.create_instance(name)
            if not self._is_current(epoch):
                logger.debug("Discarding stale create response", session_name=name)
                return
            if not response.ok and response.status_code not in _ALREADY_EXISTS_STATUSES:
                raise GatewayCreateException(name, response.status_code, response.text)
        except GatewayTransportException as e:
            if self._is_current(epoch):
                self._fail(e.message)
            return
        except GatewayCreateException as e:
            self._fail(e.message)
            return

        if not response.ok:
            logger.info(
                "Instance already exists, continuing",
                session_name=name,
                status_code=response.status_code,
            )
            self._gateway_status = "exists"
            self._transition(SessionState.AWAITING_QR)
        else:
            qr_code = extract_qr_code(response.body)
            if qr_code:
                self._qr_code = qr_code
                self._gateway_status = "qrcode"
                self._transition(SessionState.AWAITING_SCAN)
            else:
                self._gateway_status = "created"
                self._transition(SessionState.AWAITING_QR)

        self._start_poller(epoch)

    def _start_poller(self, epoch: int) -> None:
        self._stop_poller()

        async def tick() -> None:
            await self._poll(epoch)

        self._poller = RecurringTask(
            tick,
            interval=self.config.POLL_INTERVAL,
            name=f"channel-poll:{self._session_name}",
        ).start()

    def _stop_poller(self) -> None:
        if self._poller is not None:
            self._poller.cancel()
            self._poller = None

    async def _poll(self, epoch: int) -> None:
        if not self._is_current(epoch):
            return
        if self._state not in _POLLING_STATES:
            self._stop_poller()
            return

        client, name = self._client, self._session_name
        try:
            response = await client.connect_instance(name)
        except GatewayTransportException:
            if self._is_current(epoch) and self._state in _POLLING_STATES:
                self._gateway_status = "connection error"
            return

        if not self._is_current(epoch) or self._state not in _POLLING_STATES:
            logger.debug("Discarding stale poll response", session_name=name)
            return

        if response.status_code == 404:
            # Not provisioned yet.
            self._gateway_status = "waiting"
            return
        if not response.ok:
            self._gateway_status = f"http {response.status_code}"
            return

        snapshot = parse_connect_body(response.body)
        self._gateway_status = snapshot.raw_status

        if snapshot.state is GatewayConnectionState.OPEN:
            self._qr_code = None
            self._transition(SessionState.CONNECTED)
            self._stop_poller()
            return

        if snapshot.state is GatewayConnectionState.CONNECTING:
            # The code was scanned; the device is finishing the handshake.
            self._qr_code = None
            self._transition(SessionState.AWAITING_QR)
            return

        if snapshot.qr_code:
            self._qr_code = snapshot.qr_code
            self._transition(SessionState.AWAITING_SCAN)
