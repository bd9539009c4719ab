"""Analytics endpoint module.

Provides the country revenue, top products, monthly sales and top
regions reports.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from analytics_api.exceptions.analytics_errors import InvalidArgument
from analytics_api.exceptions.api_exception import BadRequestError
from analytics_api.schemas.analytics import (
    CountryRevenue,
    MonthlySales,
    TopProduct,
    TopRegion,
)
from analytics_api.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/api/v1/analytics", tags=["analytics"])


def get_analytics_service(request: Request) -> AnalyticsService:
    """Dependency for the analytics service chosen at startup."""
    return request.app.state.analytics


@router.get("/country-revenue", response_model=list[CountryRevenue])
async def get_country_revenue(
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[CountryRevenue]:
    """
    Get total revenue per country.

    Sorted by **totalRevenue** descending, ties by country name.
    """
    return await service.country_revenue()


@router.get("/top-products", response_model=list[TopProduct])
async def get_top_products(
    limit: Optional[int] = Query(
        default=None,
        description="Number of products to return (default 5)",
    ),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[TopProduct]:
    """
    Get the best-selling products by revenue.

    Returns per product:
    - **totalRevenue**: Sum of transaction amounts
    - **totalQuantity**: Units sold
    """
    try:
        return await service.top_products(limit)
    except InvalidArgument as e:
        raise BadRequestError(str(e)) from e


@router.get("/monthly-sales", response_model=list[MonthlySales])
async def get_monthly_sales(
    year: Optional[int] = Query(
        default=None,
        description="Restrict to one calendar year",
    ),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[MonthlySales]:
    """
    Get revenue per calendar month in chronological order.

    Months without transactions are omitted.
    """
    try:
        return await service.monthly_sales(year)
    except InvalidArgument as e:
        raise BadRequestError(str(e)) from e


@router.get("/top-regions", response_model=list[TopRegion])
async def get_top_regions(
    limit: Optional[int] = Query(
        default=None,
        description="Number of regions to return (default 5)",
    ),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[TopRegion]:
    """Get the highest-revenue regions."""
    try:
        return await service.top_regions(limit)
    except InvalidArgument as e:
        raise BadRequestError(str(e)) from e
