"""
Report API routes.

Every report is computed from the account's confirmed movements and needs
the ``view_reports`` permission.

This module provides:
- GET /api/v1/accounts/{account_id}/reports/totals - Totals by month, quarter or year
- GET /api/v1/accounts/{account_id}/reports/expenses-by-category
- GET /api/v1/accounts/{account_id}/reports/income-by-category
- GET /api/v1/accounts/{account_id}/reports/compare - Compare two periods
- GET /api/v1/accounts/{account_id}/reports/top-categories
- GET /api/v1/accounts/{account_id}/reports/monthly-trends
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import ReportsAccess, ReportServiceDep
from src.models.enums import MovementType, ReportPeriod
from src.schemas.report import (
    CategoryBreakdownResponse,
    MonthlyTrendsResponse,
    PeriodComparisonParams,
    PeriodComparisonResponse,
    ReportDateRange,
    TopCategoriesResponse,
    TotalsByPeriodResponse,
)
from src.services.report_service import (
    DEFAULT_TOP_LIMIT,
    DEFAULT_TREND_MONTHS,
    MAX_TOP_LIMIT,
    MAX_TREND_MONTHS,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts/{account_id}/reports", tags=["Reports"])


@router.get(
    "/totals",
    response_model=TotalsByPeriodResponse,
    summary="Totals by period",
    description="""
    Confirmed income, expenses and balance per month, quarter or year,
    most recent period first.

    A complete `date_from`/`date_to` range takes precedence over `year`.
    """,
)
async def totals_by_period(
    account_id: uuid.UUID,
    access: ReportsAccess,
    report_service: ReportServiceDep,
    period: ReportPeriod = Query(default=ReportPeriod.year, description="Grouping"),
    year: int | None = Query(default=None, ge=1900, le=9999),
    date_range: ReportDateRange = Depends(),
) -> TotalsByPeriodResponse:
    return await report_service.totals_by_period(
        account_id,
        grouping=period,
        year=year,
        date_from=date_range.date_from,
        date_to=date_range.date_to,
    )


@router.get(
    "/expenses-by-category",
    response_model=CategoryBreakdownResponse,
    summary="Expenses by category",
)
async def expenses_by_category(
    account_id: uuid.UUID,
    access: ReportsAccess,
    report_service: ReportServiceDep,
    date_range: ReportDateRange = Depends(),
) -> CategoryBreakdownResponse:
    """Each category's share of the confirmed expenses, largest first."""
    return await report_service.breakdown_by_category(
        account_id,
        MovementType.expense,
        date_from=date_range.date_from,
        date_to=date_range.date_to,
    )


@router.get(
    "/income-by-category",
    response_model=CategoryBreakdownResponse,
    summary="Income by category",
)
async def income_by_category(
    account_id: uuid.UUID,
    access: ReportsAccess,
    report_service: ReportServiceDep,
    date_range: ReportDateRange = Depends(),
) -> CategoryBreakdownResponse:
    """Each category's share of the confirmed income, largest first."""
    return await report_service.breakdown_by_category(
        account_id,
        MovementType.income,
        date_from=date_range.date_from,
        date_to=date_range.date_to,
    )


@router.get(
    "/compare",
    response_model=PeriodComparisonResponse,
    summary="Compare two periods",
    description="""
    Per category and movement type: both totals, the difference (B - A) and
    the percentage change. A zero baseline reports 100 when period B is
    positive and 0 otherwise.
    """,
)
async def compare_periods(
    account_id: uuid.UUID,
    access: ReportsAccess,
    report_service: ReportServiceDep,
    params: PeriodComparisonParams = Depends(),
) -> PeriodComparisonResponse:
    return await report_service.compare_periods(account_id, params)


@router.get(
    "/top-categories",
    response_model=TopCategoriesResponse,
    summary="Top categories",
)
async def top_categories(
    account_id: uuid.UUID,
    access: ReportsAccess,
    report_service: ReportServiceDep,
    movement_type: MovementType = Query(default=MovementType.expense, alias="type"),
    limit: int = Query(default=DEFAULT_TOP_LIMIT, ge=1, le=MAX_TOP_LIMIT),
    date_range: ReportDateRange = Depends(),
) -> TopCategoriesResponse:
    return await report_service.top_categories(
        account_id,
        movement_type=movement_type,
        limit=limit,
        date_from=date_range.date_from,
        date_to=date_range.date_to,
    )


@router.get(
    "/monthly-trends",
    response_model=MonthlyTrendsResponse,
    summary="Monthly trends",
    description="Totals for each of the last `months` months, including empty ones.",
)
async def monthly_trends(
    account_id: uuid.UUID,
    access: ReportsAccess,
    report_service: ReportServiceDep,
    months: int = Query(default=DEFAULT_TREND_MONTHS, ge=1, le=MAX_TREND_MONTHS),
) -> MonthlyTrendsResponse:
    return await report_service.monthly_trends(account_id, months=months)
