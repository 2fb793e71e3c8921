"""
Integration tests for report routes.

Reports run over confirmed movements only; these tests check the HTTP
surface (query parameters, validation, permissions) on a small ledger.
The arithmetic itself is covered by the ReportService unit tests.
"""

from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import AsyncClient

API = "/api/v1/accounts"


@pytest_asyncio.fixture
async def owner_headers(test_user, auth_headers):
    return auth_headers(test_user)


@pytest_asyncio.fixture
async def ledger(async_client: AsyncClient, account, owner_headers):
    """
    2024-01-10  income   1500  Salary
    2024-01-20  expense   300  Groceries
    2024-02-11  expense   150  Groceries
    2024-02-12  expense    50  Transfers
    2024-02-28  expense   999  Groceries (pending review)
    """
    listed = await async_client.get(f"{API}/{account.id}/categories", headers=owner_headers)
    ids = {c["name"]: c["id"] for c in listed.json() if not c["is_global"]}
    rows = [
        ("income", "2024-01-10", "1500.00", "Salary", "confirmed"),
        ("expense", "2024-01-20", "300.00", "Groceries", "confirmed"),
        ("expense", "2024-02-11", "150.00", "Groceries", "confirmed"),
        ("expense", "2024-02-12", "50.00", "Transfers", "confirmed"),
        ("expense", "2024-02-28", "999.00", "Groceries", "pending_review"),
    ]
    for movement_type, operation_date, amount, category, state in rows:
        response = await async_client.post(
            f"{API}/{account.id}/movements",
            headers=owner_headers,
            json={
                "type": movement_type,
                "operation_date": operation_date,
                "amount": amount,
                "category_id": ids[category],
                "state": state,
            },
        )
        assert response.status_code == 201


class TestTotals:
    @pytest.mark.asyncio
    async def test_monthly_totals(self, async_client, account, owner_headers, ledger):
        response = await async_client.get(
            f"{API}/{account.id}/reports/totals",
            headers=owner_headers,
            params={"period": "month", "year": 2024},
        )

        assert response.status_code == 200
        totals = response.json()["totals"]
        assert [t["period"] for t in totals] == ["2024-02", "2024-01"]
        assert Decimal(totals[0]["total_expenses"]) == Decimal("200.00")
        assert Decimal(totals[1]["balance"]) == Decimal("1200.00")

    @pytest.mark.asyncio
    async def test_default_grouping_is_year(self, async_client, account, owner_headers, ledger):
        response = await async_client.get(
            f"{API}/{account.id}/reports/totals", headers=owner_headers
        )

        totals = response.json()["totals"]
        assert [t["period"] for t in totals] == ["2024"]
        assert totals[0]["movement_count"] == 4

    @pytest.mark.asyncio
    async def test_inverted_range_rejected(self, async_client, account, owner_headers):
        response = await async_client.get(
            f"{API}/{account.id}/reports/totals",
            headers=owner_headers,
            params={"date_from": "2024-02-01", "date_to": "2024-01-01"},
        )

        assert response.status_code == 422


class TestBreakdowns:
    @pytest.mark.asyncio
    async def test_expenses_by_category(self, async_client, account, owner_headers, ledger):
        response = await async_client.get(
            f"{API}/{account.id}/reports/expenses-by-category", headers=owner_headers
        )

        data = response.json()
        assert Decimal(data["total"]) == Decimal("500.00")
        assert [
            (c["category_name"], Decimal(c["percentage"])) for c in data["categories"]
        ] == [("Groceries", Decimal("90.00")), ("Transfers", Decimal("10.00"))]

    @pytest.mark.asyncio
    async def test_income_by_category_with_range(
        self, async_client, account, owner_headers, ledger
    ):
        response = await async_client.get(
            f"{API}/{account.id}/reports/income-by-category",
            headers=owner_headers,
            params={"date_from": "2024-02-01", "date_to": "2024-02-29"},
        )

        assert response.json()["categories"] == []

    @pytest.mark.asyncio
    async def test_top_categories(self, async_client, account, owner_headers, ledger):
        response = await async_client.get(
            f"{API}/{account.id}/reports/top-categories",
            headers=owner_headers,
            params={"limit": 1},
        )

        ranking = response.json()["ranking"]
        assert len(ranking) == 1
        assert ranking[0]["category_name"] == "Groceries"
        assert ranking[0]["movement_count"] == 2

    @pytest.mark.asyncio
    async def test_top_categories_limit_bounds(self, async_client, account, owner_headers):
        response = await async_client.get(
            f"{API}/{account.id}/reports/top-categories",
            headers=owner_headers,
            params={"limit": 0},
        )

        assert response.status_code == 422


class TestCompare:
    @pytest.mark.asyncio
    async def test_compare_months(self, async_client, account, owner_headers, ledger):
        response = await async_client.get(
            f"{API}/{account.id}/reports/compare",
            headers=owner_headers,
            params={
                "period_a_start": "2024-01-01",
                "period_a_end": "2024-01-31",
                "period_b_start": "2024-02-01",
                "period_b_end": "2024-02-29",
            },
        )

        assert response.status_code == 200
        rows = {(r["category_name"], r["type"]): r for r in response.json()["comparison"]}
        groceries = rows[("Groceries", "expense")]
        assert Decimal(groceries["difference"]) == Decimal("-150.00")
        assert Decimal(groceries["percentage_change"]) == Decimal("-50.00")
        assert Decimal(rows[("Transfers", "expense")]["percentage_change"]) == Decimal("100")

    @pytest.mark.asyncio
    async def test_compare_requires_both_periods(self, async_client, account, owner_headers):
        response = await async_client.get(
            f"{API}/{account.id}/reports/compare",
            headers=owner_headers,
            params={"period_a_start": "2024-01-01", "period_a_end": "2024-01-31"},
        )

        assert response.status_code == 422


class TestTrends:
    @pytest.mark.asyncio
    async def test_trends_end_in_current_month(self, async_client, account, owner_headers):
        response = await async_client.get(
            f"{API}/{account.id}/reports/monthly-trends",
            headers=owner_headers,
            params={"months": 2},
        )

        data = response.json()
        assert data["months"] == 2
        assert len(data["trends"]) == 2
        assert data["trends"][-1]["period"] == date.today().strftime("%Y-%m")

    @pytest.mark.asyncio
    async def test_months_over_limit_rejected(self, async_client, account, owner_headers):
        response = await async_client.get(
            f"{API}/{account.id}/reports/monthly-trends",
            headers=owner_headers,
            params={"months": 25},
        )

        assert response.status_code == 422


class TestReportAccess:
    @pytest.mark.asyncio
    async def test_readonly_member_can_view(
        self, async_client, account, owner_headers, other_user, auth_headers, ledger
    ):
        await async_client.post(
            f"{API}/{account.id}/members",
            headers=owner_headers,
            json={"email": other_user.email, "role": "readonly"},
        )

        response = await async_client.get(
            f"{API}/{account.id}/reports/totals", headers=auth_headers(other_user)
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_non_member_gets_not_found(
        self, async_client, account, other_user, auth_headers
    ):
        response = await async_client.get(
            f"{API}/{account.id}/reports/totals", headers=auth_headers(other_user)
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ACCOUNT_ACCESS_DENIED"
