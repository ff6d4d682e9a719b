"""Tests for the agent dispatch loop."""

import httpx
import pytest

from conftest import BACKEND_URL, FakeService, json_body
from salesbot.assistant.backend import BackendClient
from salesbot.assistant.dispatch import AgentDispatcher, format_history
from salesbot.exceptions.assistant import EmptyMessageException
from salesbot.models.conversation import ConversationTurn, TurnRole
from salesbot.models.summary import SummaryView
from salesbot.settings.assistant import AssistantConfig


@pytest.fixture
def dispatcher(http_client: httpx.AsyncClient) -> AgentDispatcher:
    backend = BackendClient(http_client, BACKEND_URL)
    return AgentDispatcher(backend, AssistantConfig().CONNECTION_ERROR_MESSAGE)


class TestFormatHistory:
    """Tests for the history wire format."""

    def test_roles_mapped_to_wire_names(self) -> None:
        turns = [
            ConversationTurn(role=TurnRole.USER, text="oi"),
            ConversationTurn(role=TurnRole.AGENT, text="olá"),
        ]

        assert format_history(turns) == [
            {"role": "user", "parts": [{"text": "oi"}]},
            {"role": "model", "parts": [{"text": "olá"}]},
        ]

    def test_unknown_roles_dropped(self) -> None:
        """Turns in any other role never reach the model."""
        turns = [
            ConversationTurn(role="system", text="secret"),
            ConversationTurn(role=TurnRole.USER, text="oi"),
            ConversationTurn(role="tool", text="raw rows"),
        ]

        assert format_history(turns) == [{"role": "user", "parts": [{"text": "oi"}]}]


class TestDispatch:
    """Tests for AgentDispatcher.dispatch."""

    @pytest.mark.asyncio
    async def test_revenue_summary_reply(
        self, dispatcher: AgentDispatcher, fake_service: FakeService
    ) -> None:
        """A reply with data yields the parsed summary."""
        fake_service.on(
            "POST",
            "/api/v1/chat",
            httpx.Response(
                200,
                json={
                    "text": "Total: R$9000",
                    "data": {
                        "totalRevenue": 9000,
                        "totalOrders": 1,
                        "topProduct": "Cerveja",
                        "byCategory": [{"name": "Bebidas", "value": 9000}],
                        "recentTransactions": [
                            {"id": "1", "date": "2024-05-01", "total": 9000, "unitPrice": 90}
                        ],
                    },
                },
            ),
        )

        result = await dispatcher.dispatch("Qual o total de vendas hoje?", [])

        assert result.text == "Total: R$9000"
        assert result.data.total_revenue == 9000
        assert result.data.total_orders == 1
        assert result.data.recent_transactions[0].unit_price == 90
        assert result.data.active_view is SummaryView.TRANSACTIONS
        request = fake_service.calls("POST", "/api/v1/chat")[0]
        assert json_body(request) == {"message": "Qual o total de vendas hoje?", "history": []}

    @pytest.mark.asyncio
    async def test_text_only_reply(self, dispatcher: AgentDispatcher, fake_service: FakeService) -> None:
        fake_service.on("POST", "/api/v1/chat", httpx.Response(200, json={"text": "Olá!"}))

        result = await dispatcher.dispatch("oi")

        assert result.text == "Olá!"
        assert result.data is None

    @pytest.mark.asyncio
    async def test_visits_view(self, dispatcher: AgentDispatcher, fake_service: FakeService) -> None:
        """A visit list makes the visits view the active one."""
        visit = {
            "CodVend": 7,
            "NomeVendedor": "Ana",
            "CodCliente": 12,
            "RazaoSocial": "Mercado Sol",
            "DiaSemana": "Segunda",
            "Periodicidade": "Semanal",
            "DataVisita": "2024-05-06",
        }
        fake_service.on(
            "POST", "/api/v1/chat", httpx.Response(200, json={"text": "Rota", "data": {"visits": [visit]}})
        )

        result = await dispatcher.dispatch("rota da Ana")

        assert result.data.active_view is SummaryView.VISITS
        assert result.data.visits[0].RazaoSocial == "Mercado Sol"

    @pytest.mark.asyncio
    async def test_history_sent_and_not_mutated(
        self, dispatcher: AgentDispatcher, fake_service: FakeService
    ) -> None:
        fake_service.on("POST", "/api/v1/chat", httpx.Response(200, json={"text": "ok"}))
        history = (
            ConversationTurn(role=TurnRole.AGENT, text="Olá!"),
            ConversationTurn(role=TurnRole.USER, text="vendas de maio"),
        )

        await dispatcher.dispatch("  e junho?  ", history)

        body = json_body(fake_service.calls("POST", "/api/v1/chat")[0])
        assert body["message"] == "e junho?"
        assert body["history"] == [
            {"role": "model", "parts": [{"text": "Olá!"}]},
            {"role": "user", "parts": [{"text": "vendas de maio"}]},
        ]
        assert len(history) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_input_makes_no_call(
        self, dispatcher: AgentDispatcher, fake_service: FakeService, text: str
    ) -> None:
        """Blank input is rejected without contacting the backend."""
        with pytest.raises(EmptyMessageException):
            await dispatcher.dispatch(text, [])

        assert fake_service.requests == []

    @pytest.mark.asyncio
    async def test_network_failure_becomes_reply(
        self, dispatcher: AgentDispatcher, fake_service: FakeService
    ) -> None:
        """Transport errors come back as a connection-error reply with the detail."""
        fake_service.on("POST", "/api/v1/chat", httpx.ConnectError("Connection refused"))

        result = await dispatcher.dispatch("oi", [])

        assert "Connection refused" in result.text
        assert f"{BACKEND_URL}/api/v1/chat" in result.text
        assert result.data is None

    @pytest.mark.asyncio
    async def test_error_status_becomes_reply(
        self, dispatcher: AgentDispatcher, fake_service: FakeService
    ) -> None:
        fake_service.on("POST", "/api/v1/chat", httpx.Response(500, json={"error": "boom"}))

        result = await dispatcher.dispatch("oi", [])

        assert "500" in result.text
        assert result.data is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>not json</html>"),
            httpx.Response(200, json=["not", "an", "object"]),
        ],
    )
    async def test_malformed_body_becomes_reply(
        self, dispatcher: AgentDispatcher, fake_service: FakeService, response: httpx.Response
    ) -> None:
        """Malformed JSON folds into the same connection-error outcome."""
        fake_service.on("POST", "/api/v1/chat", response)

        result = await dispatcher.dispatch("oi", [])

        assert result.text.startswith("Erro de conexão")
        assert result.data is None

    @pytest.mark.asyncio
    async def test_null_columns_in_summary_are_tolerated(
        self, dispatcher: AgentDispatcher, fake_service: FakeService
    ) -> None:
        """Rows with null totals and missing columns still produce a summary."""
        fake_service.on(
            "POST",
            "/api/v1/chat",
            httpx.Response(
                200,
                json={
                    "text": "Total: R$9000",
                    "data": {
                        "totalRevenue": 9000,
                        "totalOrders": 1,
                        "averageTicket": None,
                        "byCategory": [{"name": "Bebidas", "value": None}],
                        "recentTransactions": [
                            {"id": "1", "date": None, "total": None, "seller": "Ana"},
                            {"total": 120.5},
                        ],
                        "visits": [{"RazaoSocial": "Mercado Sol", "DiaSemana": None}],
                    },
                },
            ),
        )

        result = await dispatcher.dispatch("vendas de hoje", [])

        assert result.text == "Total: R$9000"
        assert result.data.total_revenue == 9000
        assert result.data.average_ticket == 0
        assert result.data.by_category[0].value == 0
        assert [r.total for r in result.data.recent_transactions] == [0, 120.5]
        assert result.data.recent_transactions[1].id is None
        assert result.data.visits[0].CodVend is None

    @pytest.mark.asyncio
    async def test_unreadable_summary_keeps_reply_text(
        self, dispatcher: AgentDispatcher, fake_service: FakeService
    ) -> None:
        """A summary that cannot be read is dropped; the reply text survives."""
        fake_service.on(
            "POST",
            "/api/v1/chat",
            httpx.Response(200, json={"text": "Foram muitos pedidos", "data": {"totalOrders": "many"}}),
        )

        result = await dispatcher.dispatch("oi", [])

        assert result.text == "Foram muitos pedidos"
        assert result.data is None
