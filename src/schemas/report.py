"""
Report Pydantic schemas for API request/response handling.

Every figure is computed from confirmed movements only and rounded to two
decimals (half away from zero).

This module provides:
- Report query parameter schemas
- Totals by period
- Income/expense breakdown by category
- Period comparison
- Top categories ranking
- Monthly trends
"""

import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from src.models.enums import MovementType, ReportPeriod


class ReportDateRange(BaseModel):
    """
    Optional inclusive date range on the operation date.

    Attributes:
        date_from: First day included
        date_to: Last day included
    """

    date_from: date | None = Field(default=None, description="First day (inclusive)")
    date_to: date | None = Field(default=None, description="Last day (inclusive)")

    @model_validator(mode="after")
    def validate_range(self) -> "ReportDateRange":
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must be on or before date_to")
        return self


class PeriodComparisonParams(BaseModel):
    """
    The two closed periods compared by the compare-periods report.

    Attributes:
        period_a_start / period_a_end: Baseline period
        period_b_start / period_b_end: Period compared against the baseline
    """

    period_a_start: date
    period_a_end: date
    period_b_start: date
    period_b_end: date

    @model_validator(mode="after")
    def validate_periods(self) -> "PeriodComparisonParams":
        if self.period_a_start > self.period_a_end:
            raise ValueError("period_a_start must be on or before period_a_end")
        if self.period_b_start > self.period_b_end:
            raise ValueError("period_b_start must be on or before period_b_end")
        return self


# -----------------------------------------------------------------------------
# Totals by period
# -----------------------------------------------------------------------------


class PeriodTotals(BaseModel):
    """
    Confirmed totals of one month, quarter or year.

    Attributes:
        period: Label, e.g. ``2024-03``, ``2024-Q1`` or ``2024``
        year: Calendar year
        month: Month number (month grouping only)
        quarter: Quarter number (quarter grouping only)
        total_income: Confirmed income
        total_expenses: Confirmed expenses
        balance: Income minus expenses
        movement_count: Confirmed movements in the period
    """

    period: str
    year: int
    month: int | None = None
    quarter: int | None = None
    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
    movement_count: int


class TotalsByPeriodResponse(BaseModel):
    """Totals per period, most recent period first."""

    grouping: ReportPeriod
    totals: list[PeriodTotals]


# -----------------------------------------------------------------------------
# Breakdown by category
# -----------------------------------------------------------------------------


class CategoryAmount(BaseModel):
    """
    Total of one category.

    Attributes:
        category_id: Category UUID
        category_name: Category name
        total: Confirmed total
        movement_count: Confirmed movements
        percentage: Share of the overall total (0 when the total is 0)
    """

    category_id: uuid.UUID
    category_name: str
    total: Decimal
    movement_count: int
    percentage: Decimal


class CategoryBreakdownResponse(BaseModel):
    """Income or expenses split by category, largest first."""

    movement_type: MovementType
    total: Decimal
    categories: list[CategoryAmount]
    date_from: date | None = None
    date_to: date | None = None


# -----------------------------------------------------------------------------
# Period comparison
# -----------------------------------------------------------------------------


class CategoryComparison(BaseModel):
    """
    One category and movement type across both periods.

    Attributes:
        category_id: Category UUID
        category_name: Category name
        type: income or expense
        period_a: Total in the baseline period
        period_b: Total in the compared period
        difference: period_b - period_a
        percentage_change: Change relative to period_a
    """

    category_id: uuid.UUID
    category_name: str
    type: MovementType
    period_a: Decimal
    period_b: Decimal
    difference: Decimal
    percentage_change: Decimal


class PeriodSummary(BaseModel):
    """Income, expenses and balance of one compared period."""

    date_from: date
    date_to: date
    income: Decimal
    expenses: Decimal
    balance: Decimal


class PeriodChange(BaseModel):
    """Percentage change of each summary figure from period A to period B."""

    income: Decimal
    expenses: Decimal
    balance: Decimal


class ComparisonSummary(BaseModel):
    period_a: PeriodSummary
    period_b: PeriodSummary
    change: PeriodChange


class PeriodComparisonResponse(BaseModel):
    """Per-category comparison, largest absolute difference first."""

    comparison: list[CategoryComparison]
    summary: ComparisonSummary


# -----------------------------------------------------------------------------
# Top categories
# -----------------------------------------------------------------------------


class TopCategory(BaseModel):
    """
    One entry of the top categories ranking.

    Attributes:
        position: 1-based rank
        category_id: Category UUID
        category_name: Category name
        total: Confirmed total
        movement_count: Confirmed movements
        first_date: Earliest operation date
        last_date: Latest operation date
    """

    position: int
    category_id: uuid.UUID
    category_name: str
    total: Decimal
    movement_count: int
    first_date: date
    last_date: date


class TopCategoriesResponse(BaseModel):
    movement_type: MovementType
    ranking: list[TopCategory]
    date_from: date | None = None
    date_to: date | None = None


# -----------------------------------------------------------------------------
# Monthly trends
# -----------------------------------------------------------------------------


class MonthlyTrend(BaseModel):
    """Confirmed totals of one calendar month."""

    period: str
    year: int
    month: int
    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
    movement_count: int


class MonthlyTrendsResponse(BaseModel):
    """
    Month-by-month totals for the last ``months`` months.

    Months without movements are included with zeros. Averages are taken
    over every month of the window.
    """

    months: int
    trends: list[MonthlyTrend]
    average_income: Decimal
    average_expenses: Decimal
    average_balance: Decimal
