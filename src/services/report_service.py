"""
Report service.

Every report aggregates the confirmed movements of one account; pending
movements never count. Figures are rounded to two decimals, half away from
zero, only when they are reported.

This module provides:
- Totals by period (month, quarter or year)
- Income or expense breakdown by category with percentages
- Comparison of two periods per category and overall
- Top categories ranking
- Monthly trends with averages
"""

import logging
import uuid
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.models.enums import MovementType, ReportPeriod
from src.models.movement import Movement
from src.repositories.movement_repository import MovementRepository
from src.schemas.report import (
    CategoryAmount,
    CategoryBreakdownResponse,
    CategoryComparison,
    ComparisonSummary,
    MonthlyTrend,
    MonthlyTrendsResponse,
    PeriodChange,
    PeriodComparisonParams,
    PeriodComparisonResponse,
    PeriodSummary,
    PeriodTotals,
    TopCategoriesResponse,
    TopCategory,
    TotalsByPeriodResponse,
)
from src.services.currency_service import round2

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

DEFAULT_TOP_LIMIT = 10
MAX_TOP_LIMIT = 50
DEFAULT_TREND_MONTHS = 12
MAX_TREND_MONTHS = 24


def percentage_change(old: Decimal, new: Decimal) -> Decimal:
    """
    Relative change from ``old`` to ``new`` in percent.

    A zero baseline reports 100 when the new value is positive and 0
    otherwise.

    Example:
        >>> percentage_change(Decimal("200"), Decimal("250"))
        Decimal('25.00')
        >>> percentage_change(Decimal("0"), Decimal("40"))
        Decimal('100.00')
    """
    if old == ZERO:
        return round2(HUNDRED) if new > ZERO else round2(ZERO)
    return round2((new - old) / old * HUNDRED)


def share_of(part: Decimal, whole: Decimal) -> Decimal:
    """``part`` as a percentage of ``whole`` (0 when ``whole`` is 0)."""
    if whole == ZERO:
        return round2(ZERO)
    return round2(part / whole * HUNDRED)


@dataclass
class _Bucket:
    """Running totals of a group of movements."""

    income: Decimal = ZERO
    expenses: Decimal = ZERO
    count: int = 0
    first_date: date | None = None
    last_date: date | None = None
    name: str = ""

    def add(self, movement: Movement) -> None:
        if movement.type == MovementType.income:
            self.income += movement.amount
        else:
            self.expenses += movement.amount
        self.count += 1
        if self.first_date is None or movement.operation_date < self.first_date:
            self.first_date = movement.operation_date
        if self.last_date is None or movement.operation_date > self.last_date:
            self.last_date = movement.operation_date

    @property
    def total(self) -> Decimal:
        return self.income + self.expenses

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses


def _period_key(operation_date: date, grouping: ReportPeriod) -> tuple[int, int]:
    if grouping == ReportPeriod.month:
        return operation_date.year, operation_date.month
    if grouping == ReportPeriod.quarter:
        return operation_date.year, (operation_date.month - 1) // 3 + 1
    return operation_date.year, 0


def _period_label(key: tuple[int, int], grouping: ReportPeriod) -> str:
    year, sub = key
    if grouping == ReportPeriod.month:
        return f"{year}-{sub:02d}"
    if grouping == ReportPeriod.quarter:
        return f"{year}-Q{sub}"
    return str(year)


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


class ReportService:
    """
    Service class for account reports.

    Movements are loaded once per report (confirmed, in range) and grouped
    in memory.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize ReportService.

        Args:
            session: Async database session
        """
        self.session = session
        self.movement_repo = MovementRepository(session)

    @staticmethod
    def _by_category(
        movements: Iterable[Movement], movement_type: MovementType
    ) -> dict[uuid.UUID, _Bucket]:
        buckets: dict[uuid.UUID, _Bucket] = defaultdict(_Bucket)
        for movement in movements:
            if movement.type != movement_type:
                continue
            bucket = buckets[movement.category_id]
            bucket.name = movement.category.name
            bucket.add(movement)
        return buckets

    async def totals_by_period(
        self,
        account_id: uuid.UUID,
        grouping: ReportPeriod = ReportPeriod.year,
        year: int | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> TotalsByPeriodResponse:
        """
        Income, expenses and balance per period, most recent first.

        A full date range wins over ``year``; with neither, all confirmed
        movements are grouped.

        Args:
            account_id: Account to report on
            grouping: month, quarter or year
            year: Restrict to one calendar year
            date_from / date_to: Inclusive range on the operation date

        Example:
            report = await report_service.totals_by_period(
                account.id, ReportPeriod.quarter, year=2024
            )
            report.totals[0].period  # "2024-Q4" if Q4 has movements
        """
        if not (date_from and date_to) and year is not None:
            date_from, date_to = date(year, 1, 1), date(year, 12, 31)

        movements = await self.movement_repo.list_confirmed(account_id, date_from, date_to)

        buckets: dict[tuple[int, int], _Bucket] = defaultdict(_Bucket)
        for movement in movements:
            buckets[_period_key(movement.operation_date, grouping)].add(movement)

        totals = [
            PeriodTotals(
                period=_period_label(key, grouping),
                year=key[0],
                month=key[1] if grouping == ReportPeriod.month else None,
                quarter=key[1] if grouping == ReportPeriod.quarter else None,
                total_income=round2(bucket.income),
                total_expenses=round2(bucket.expenses),
                balance=round2(bucket.balance),
                movement_count=bucket.count,
            )
            for key, bucket in sorted(buckets.items(), reverse=True)
        ]

        return TotalsByPeriodResponse(grouping=grouping, totals=totals)

    async def breakdown_by_category(
        self,
        account_id: uuid.UUID,
        movement_type: MovementType,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> CategoryBreakdownResponse:
        """
        Share of each category in the income or expense total, largest first.

        Percentages are relative to the total of ``movement_type`` in the
        range.
        """
        movements = await self.movement_repo.list_confirmed(account_id, date_from, date_to)
        buckets = self._by_category(movements, movement_type)
        grand_total = sum((b.total for b in buckets.values()), ZERO)

        categories = [
            CategoryAmount(
                category_id=category_id,
                category_name=bucket.name,
                total=round2(bucket.total),
                movement_count=bucket.count,
                percentage=share_of(bucket.total, grand_total),
            )
            for category_id, bucket in sorted(
                buckets.items(), key=lambda item: item[1].total, reverse=True
            )
        ]

        return CategoryBreakdownResponse(
            movement_type=movement_type,
            total=round2(grand_total),
            categories=categories,
            date_from=date_from,
            date_to=date_to,
        )

    async def compare_periods(
        self, account_id: uuid.UUID, params: PeriodComparisonParams
    ) -> PeriodComparisonResponse:
        """
        Compare period B against period A.

        Every (category, type) pair present in either period gets a row
        with both totals, the difference (B - A) and the percentage change.
        Rows are ordered by the absolute difference, largest first.
        """
        periods = []
        for start, end in (
            (params.period_a_start, params.period_a_end),
            (params.period_b_start, params.period_b_end),
        ):
            movements = await self.movement_repo.list_confirmed(account_id, start, end)
            overall = _Bucket()
            per_category: dict[tuple[uuid.UUID, MovementType], _Bucket] = defaultdict(_Bucket)
            for movement in movements:
                overall.add(movement)
                bucket = per_category[(movement.category_id, movement.type)]
                bucket.name = movement.category.name
                bucket.add(movement)
            periods.append((start, end, overall, per_category))

        (a_start, a_end, a_overall, a_categories) = periods[0]
        (b_start, b_end, b_overall, b_categories) = periods[1]

        comparison = []
        for key in set(a_categories) | set(b_categories):
            category_id, movement_type = key
            a_bucket = a_categories.get(key)
            b_bucket = b_categories.get(key)
            a_total = a_bucket.total if a_bucket else ZERO
            b_total = b_bucket.total if b_bucket else ZERO
            comparison.append(
                CategoryComparison(
                    category_id=category_id,
                    category_name=(a_bucket or b_bucket).name,
                    type=movement_type,
                    period_a=round2(a_total),
                    period_b=round2(b_total),
                    difference=round2(b_total - a_total),
                    percentage_change=percentage_change(a_total, b_total),
                )
            )
        comparison.sort(key=lambda row: abs(row.difference), reverse=True)

        summary = ComparisonSummary(
            period_a=PeriodSummary(
                date_from=a_start,
                date_to=a_end,
                income=round2(a_overall.income),
                expenses=round2(a_overall.expenses),
                balance=round2(a_overall.balance),
            ),
            period_b=PeriodSummary(
                date_from=b_start,
                date_to=b_end,
                income=round2(b_overall.income),
                expenses=round2(b_overall.expenses),
                balance=round2(b_overall.balance),
            ),
            change=PeriodChange(
                income=percentage_change(a_overall.income, b_overall.income),
                expenses=percentage_change(a_overall.expenses, b_overall.expenses),
                balance=percentage_change(a_overall.balance, b_overall.balance),
            ),
        )

        return PeriodComparisonResponse(comparison=comparison, summary=summary)

    async def top_categories(
        self,
        account_id: uuid.UUID,
        movement_type: MovementType = MovementType.expense,
        limit: int = DEFAULT_TOP_LIMIT,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> TopCategoriesResponse:
        """Rank categories by total for one movement type (at most 50 entries)."""
        limit = max(1, min(limit, MAX_TOP_LIMIT))

        movements = await self.movement_repo.list_confirmed(account_id, date_from, date_to)
        buckets = self._by_category(movements, movement_type)
        ranked = sorted(buckets.items(), key=lambda item: item[1].total, reverse=True)[:limit]

        ranking = [
            TopCategory(
                position=position,
                category_id=category_id,
                category_name=bucket.name,
                total=round2(bucket.total),
                movement_count=bucket.count,
                first_date=bucket.first_date,
                last_date=bucket.last_date,
            )
            for position, (category_id, bucket) in enumerate(ranked, start=1)
        ]

        return TopCategoriesResponse(
            movement_type=movement_type,
            ranking=ranking,
            date_from=date_from,
            date_to=date_to,
        )

    async def monthly_trends(
        self,
        account_id: uuid.UUID,
        months: int = DEFAULT_TREND_MONTHS,
        today: date | None = None,
    ) -> MonthlyTrendsResponse:
        """
        Month-by-month totals for the last ``months`` months (at most 24).

        The window ends with the current month; months without movements
        appear with zeros and count toward the averages.
        """
        months = max(1, min(months, MAX_TREND_MONTHS))
        today = today or date.today()

        first_year, first_month = _shift_month(today.year, today.month, -(months - 1))
        movements = await self.movement_repo.list_confirmed(
            account_id, date_from=date(first_year, first_month, 1), date_to=today
        )

        buckets: dict[tuple[int, int], _Bucket] = defaultdict(_Bucket)
        for movement in movements:
            buckets[_period_key(movement.operation_date, ReportPeriod.month)].add(movement)

        trends = []
        for offset in range(months):
            key = _shift_month(first_year, first_month, offset)
            bucket = buckets.get(key, _Bucket())
            trends.append(
                MonthlyTrend(
                    period=_period_label(key, ReportPeriod.month),
                    year=key[0],
                    month=key[1],
                    total_income=round2(bucket.income),
                    total_expenses=round2(bucket.expenses),
                    balance=round2(bucket.balance),
                    movement_count=bucket.count,
                )
            )

        income = sum((b.income for b in buckets.values()), ZERO)
        expenses = sum((b.expenses for b in buckets.values()), ZERO)

        return MonthlyTrendsResponse(
            months=months,
            trends=trends,
            average_income=round2(income / months),
            average_expenses=round2(expenses / months),
            average_balance=round2((income - expenses) / months),
        )
