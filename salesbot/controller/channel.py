"""
Channel session controller/router for FastAPI endpoints.

Operator surface for pairing the messaging gateway: start (reset, create,
poll), inspect, stop polling and close the session surface.
"""

from fastapi import APIRouter, status
import structlog

from salesbot.dependencies import HealthMonitorDep, SessionManagerDep
from salesbot.models import ResponseModel
from salesbot.models.channel import SessionStatus, StartSessionRequest

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/channel/session",
    tags=["Channel Session"],
    responses={
        422: {"description": "Invalid session name"},
        500: {"description": "Internal Server Error"},
    },
)


@router.post(
    "",
    response_model=ResponseModel[SessionStatus],
    status_code=status.HTTP_202_ACCEPTED,
    summary="Start a channel session",
    description="Reset and recreate the gateway instance, then poll it until the QR code is scanned",
)
async def start_session(
    request_data: StartSessionRequest,
    session_manager: SessionManagerDep,
):
    """
    Start (or restart) the gateway session.

    Always restarts from scratch: any previous instance with the same name is
    deleted first, the settle delay elapses, then the instance is created.
    The call returns after the create phase; polling continues in the
    background.

    **Request Body:**
    - **name**: Session name; characters outside [a-z0-9_] are dropped after lowercasing
    - **gateway_url**: Gateway base URL (optional, configured default otherwise)
    - **api_key**: Gateway API key (optional, configured default otherwise)
    """
    session_status = await session_manager.start_session(
        request_data.name,
        gateway_url=request_data.gateway_url,
        api_key=request_data.api_key,
    )
    return ResponseModel(status_code=status.HTTP_202_ACCEPTED, data=session_status)


@router.get(
    "",
    response_model=ResponseModel[SessionStatus],
    summary="Get channel session status",
)
async def get_session_status(session_manager: SessionManagerDep):
    """Lifecycle state, uppercased gateway status and the QR code when awaiting a scan."""
    return ResponseModel(
        status_code=status.HTTP_200_OK, data=session_manager.current_status()
    )


@router.delete(
    "/polling",
    response_model=ResponseModel[SessionStatus],
    summary="Stop polling the gateway",
)
async def stop_polling(session_manager: SessionManagerDep):
    """Idempotent. The remote instance is left as it is."""
    return ResponseModel(
        status_code=status.HTTP_200_OK, data=session_manager.stop_polling()
    )


@router.post(
    "/close",
    response_model=ResponseModel[SessionStatus],
    summary="Close the channel session surface",
)
async def close_session_surface(
    session_manager: SessionManagerDep,
    health_monitor: HealthMonitorDep,
):
    session_status = session_manager.stop_polling()
    health_monitor.restart()
    logger.info(
        "Channel session surface closed",
        session_name=session_status.session_name,
        state=str(session_status.state),
    )
    return ResponseModel(status_code=status.HTTP_200_OK, data=session_status)
