"""
Assistant controller/router for FastAPI endpoints.

Conversations with the sales agent, the structured query proxy and the
backend health report.
"""

from fastapi import APIRouter, Path, status
from fastapi.responses import Response
import httpx
from pydantic import ValidationError
import structlog

from salesbot.dependencies import (
    BackendClientDep,
    ChatServiceDep,
    ConversationStoreDep,
    HealthMonitorDep,
)
from salesbot.exceptions.assistant import BackendUnavailableException
from salesbot.models import ResponseModel
from salesbot.models.agent import ConversationDetail, ExchangeResponse, MessageRequest
from salesbot.models.health import HealthReport
from salesbot.models.summary import FilterParams, StructuredSummary

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/assistant",
    tags=["Assistant"],
    responses={
        404: {"description": "Resource Not Found"},
        500: {"description": "Internal Server Error"},
    },
)


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=ResponseModel[ExchangeResponse],
    responses={
        200: {"description": "Agent reply appended"},
        409: {"description": "A reply for this conversation is still pending"},
        422: {"description": "Blank message"},
    },
    summary="Send a message to the sales agent",
    description="Append the user turn, dispatch it with the prior history and append the agent reply",
)
async def send_message(
    request_data: MessageRequest,
    chat_service: ChatServiceDep,
    conversation_id: str = Path(..., min_length=1, description="Conversation identifier"),
):
    """
    Run one exchange.

    Backend failures do not fail the request: the reply is then a
    connection-error text and the current view is left unchanged.
    """
    result = await chat_service.send(conversation_id, request_data.message)
    return ResponseModel(
        status_code=status.HTTP_200_OK,
        data=ExchangeResponse(
            conversation_id=conversation_id,
            reply=result.reply,
            current_view=result.current_view,
        ),
    )


@router.get(
    "/conversations/{conversation_id}",
    response_model=ResponseModel[ConversationDetail],
    summary="Get a conversation",
)
async def get_conversation(
    store: ConversationStoreDep,
    conversation_id: str = Path(..., description="Conversation identifier"),
):
    record = store.get(conversation_id)
    return ResponseModel(
        status_code=status.HTTP_200_OK,
        data=ConversationDetail(
            conversation_id=conversation_id,
            turns=list(record.conversation),
            current_view=record.current_view,
        ),
    )


@router.delete(
    "/conversations/{conversation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Forget a conversation",
)
async def delete_conversation(
    store: ConversationStoreDep,
    conversation_id: str = Path(..., description="Conversation identifier"),
):
    store.delete(conversation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/query",
    response_model=ResponseModel[StructuredSummary],
    responses={502: {"description": "Sales backend unavailable"}},
    summary="Run a structured sales query",
)
async def run_query(filters: FilterParams, backend: BackendClientDep):
    """
    Proxy a structured query to the sales backend.

    **Request Body:** any of startDate, endDate, seller, product, category,
    region and the other filter keys the backend understands.
    """
    try:
        body = await backend.query(filters.model_dump(by_alias=True, exclude_none=True))
        summary = StructuredSummary.model_validate(body)
    except (httpx.HTTPError, ValueError, ValidationError) as e:
        logger.warning(
            "Structured query failed",
            backend_url=backend.base_url,
            error=str(e),
        )
        raise BackendUnavailableException(backend.base_url) from e

    return ResponseModel(status_code=status.HTTP_200_OK, data=summary)


@router.get(
    "/health",
    response_model=ResponseModel[HealthReport],
    summary="Latest backend health",
)
async def get_health(health_monitor: HealthMonitorDep):
    """Last probe result plus its display label and whether chat is usable."""
    return ResponseModel(
        status_code=status.HTTP_200_OK,
        data=HealthReport.from_status(health_monitor.latest),
    )
