"""Pydantic schemas for API requests."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

MIN_YEAR = 2000
MAX_YEAR = 2030


class ClientRequest(BaseModel):
    """Body carrying only the client key."""

    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(..., alias="clientId", min_length=1, description="DominioDZ client key")


class SalesSummaryRequest(ClientRequest):
    """Target month for an order suggestion."""

    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=MIN_YEAR, le=MAX_YEAR)


class ProductSearchRequest(ClientRequest):
    """Free-text product lookup within a client's price list."""

    search_term: str = Field(..., alias="searchTerm", min_length=3)
    limit: int | None = Field(None, ge=0, description="Max results (default 20)")
