"""Schemas for the analytics report endpoint."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from group_ledger.api.schemas.settlement import (
    BalanceResponse,
    MoneyString,
    SettlementResponse,
)
from group_ledger.domain.money import format_money
from group_ledger.services.analytics_report_service import (
    AnalyticsReport,
    BalanceRow,
    CategoryBreakdown,
    MonthlyBreakdown,
)


class AnalyticsBalanceRow(BalanceResponse):
    status: str

    @classmethod
    def from_row(cls, row: BalanceRow) -> AnalyticsBalanceRow:
        base = BalanceResponse.from_balance(row.balance)
        return cls(**base.model_dump(), status=row.status.value)


class MonthlyBreakdownResponse(BaseModel):
    month: str
    total: MoneyString
    count: int
    average: MoneyString

    @classmethod
    def from_breakdown(cls, item: MonthlyBreakdown) -> MonthlyBreakdownResponse:
        return cls(
            month=item.month,
            total=format_money(item.total),
            count=item.count,
            average=format_money(item.average),
        )


class CategoryBreakdownResponse(BaseModel):
    category: str
    total: MoneyString
    count: int

    @classmethod
    def from_breakdown(cls, item: CategoryBreakdown) -> CategoryBreakdownResponse:
        return cls(
            category=item.category,
            total=format_money(item.total),
            count=item.count,
        )


class AnalyticsFiltersResponse(BaseModel):
    start_date: date | None
    end_date: date | None
    categories: list[str]
    member_ids: list[str]


class AnalyticsResponse(BaseModel):
    """Settlement table plus spending breakdowns for the analytics view."""

    group_id: str
    filters: AnalyticsFiltersResponse
    settlement: SettlementResponse
    rows: list[AnalyticsBalanceRow]
    monthly: list[MonthlyBreakdownResponse]
    categories: list[CategoryBreakdownResponse]

    @classmethod
    def from_report(cls, report: AnalyticsReport) -> AnalyticsResponse:
        return cls(
            group_id=report.group_id,
            filters=AnalyticsFiltersResponse(
                start_date=report.filters.start_date,
                end_date=report.filters.end_date,
                categories=list(report.filters.categories),
                member_ids=list(report.filters.member_ids),
            ),
            settlement=SettlementResponse.from_outcome(report.outcome),
            rows=[AnalyticsBalanceRow.from_row(row) for row in report.rows],
            monthly=[
                MonthlyBreakdownResponse.from_breakdown(item)
                for item in report.monthly
            ],
            categories=[
                CategoryBreakdownResponse.from_breakdown(item)
                for item in report.categories
            ],
        )
