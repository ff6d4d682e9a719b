"""
Structured sales summary produced by the sales backend.

Field names follow the backend's camelCase JSON; Python code uses the
snake_case attribute names. Unknown keys are preserved so that newer backend
payloads survive a round trip through the service unchanged.

The backend builds these rows straight from query results, so nulls and
missing columns are expected: numeric aggregates read null as zero and
record fields are optional.
"""

from enum import StrEnum
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _none_as_zero(v: Any) -> Any:
    return 0 if v is None else v


Amount = Annotated[float, BeforeValidator(_none_as_zero)]
Count = Annotated[int, BeforeValidator(_none_as_zero)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class CategoryAggregate(_CamelModel):
    name: Optional[str] = Field(None, description="Category (family) name")
    value: Amount = Field(0.0, description="Aggregated revenue for the category")


class SalesRecord(_CamelModel):
    id: Optional[Union[str, int]] = Field(None, description="Order identifier")
    date: Optional[str] = Field(None, description="ISO date of the order")
    product: Optional[str] = None
    category: Optional[str] = None
    quantity: Optional[float] = None
    unit_price: Optional[float] = None
    total: Amount = Field(0.0, description="Net value of the line; null reads as zero")
    seller: Optional[str] = None
    region: Optional[str] = None
    payment_method: Optional[str] = None


class VisitRecord(BaseModel):
    """A planned customer visit on a seller's route."""

    model_config = ConfigDict(extra="allow")

    CodVend: Optional[int] = None
    NomeVendedor: Optional[str] = None
    CodCliente: Optional[int] = None
    RazaoSocial: Optional[str] = None
    DiaSemana: Optional[str] = None
    Periodicidade: Optional[str] = None
    DataVisita: Optional[str] = None


class OpportunityRecord(BaseModel):
    """A product the customer does not buy yet."""

    model_config = ConfigDict(extra="allow")

    cod_produto: Optional[int] = None
    descricao: Optional[str] = None
    grupo: Optional[str] = None


class DebugMeta(_CamelModel):
    period: str = Field("", description="Human readable date-range label")
    filters: list[str] = Field(default_factory=list, description="Active filter descriptions")
    sql_logic: str = Field("", description="Label of the query logic the backend applied")


class SummaryView(StrEnum):
    TRANSACTIONS = "transactions"
    VISITS = "visits"
    OPPORTUNITIES = "opportunities"


class StructuredSummary(_CamelModel):
    total_revenue: Amount = 0.0
    total_orders: Count = 0
    average_ticket: Amount = 0.0
    top_product: str = "N/A"
    by_category: list[CategoryAggregate] = Field(default_factory=list)
    recent_transactions: list[SalesRecord] = Field(default_factory=list)
    visits: Optional[list[VisitRecord]] = None
    opportunities: Optional[list[OpportunityRecord]] = None
    debug_meta: Optional[DebugMeta] = None

    @property
    def active_view(self) -> SummaryView:
        """The one view a renderer should show for this payload."""
        if self.visits:
            return SummaryView.VISITS
        if self.opportunities:
            return SummaryView.OPPORTUNITIES
        return SummaryView.TRANSACTIONS


class FilterParams(_CamelModel):
    """Filters accepted by the backend structured query."""

    start_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    end_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    seller: Optional[str] = None
    seller_id: Optional[int] = None
    customer_id: Optional[int] = None
    product: Optional[str] = None
    category: Optional[str] = None
    region: Optional[str] = None
    supervisor: Optional[str] = None
    city: Optional[str] = None
    line: Optional[str] = None
    group_by: Optional[str] = None
