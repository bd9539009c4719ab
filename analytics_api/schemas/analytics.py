"""Analytics report schemas module.

Response rows for the country revenue, top products, monthly sales and
top regions reports. Rows are built fresh for every request.
"""
from decimal import Decimal

from pydantic import BaseModel, Field


class CountryRevenue(BaseModel):
    """Revenue and transaction count for one country."""

    country: str = Field(..., description="Country name")
    total_revenue: Decimal = Field(
        ...,
        alias="totalRevenue",
        description="Exact sum of transaction amounts",
    )
    transaction_count: int = Field(
        ...,
        alias="transactionCount",
        description="Number of transactions",
    )

    class Config:
        populate_by_name = True


class TopProduct(BaseModel):
    """Revenue and units sold for one product."""

    product: str = Field(..., description="Product name")
    total_revenue: Decimal = Field(
        ...,
        alias="totalRevenue",
        description="Exact sum of transaction amounts",
    )
    total_quantity: int = Field(
        ...,
        alias="totalQuantity",
        description="Total units sold",
    )

    class Config:
        populate_by_name = True


class MonthlySales(BaseModel):
    """Revenue and transaction count for one calendar month."""

    year_month: str = Field(
        ...,
        alias="yearMonth",
        description="Calendar month in YYYY-MM format",
    )
    total_revenue: Decimal = Field(
        ...,
        alias="totalRevenue",
        description="Exact sum of transaction amounts",
    )
    transaction_count: int = Field(
        ...,
        alias="transactionCount",
        description="Number of transactions",
    )

    class Config:
        populate_by_name = True


class TopRegion(BaseModel):
    """Revenue and transaction count for one region."""

    region: str = Field(..., description="Region name")
    total_revenue: Decimal = Field(
        ...,
        alias="totalRevenue",
        description="Exact sum of transaction amounts",
    )
    transaction_count: int = Field(
        ...,
        alias="transactionCount",
        description="Number of transactions",
    )

    class Config:
        populate_by_name = True


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str = Field(..., description='"ok", or "degraded" in demo mode')
