"""Settlement and spending report for the analytics view."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import StrEnum

from group_ledger.domain.errors import InvalidRequestError
from group_ledger.domain.money import quantize_money
from group_ledger.domain.periods import date_range
from group_ledger.domain.settlement import Balance, Transfer
from group_ledger.repositories.expense_query_repository import (
    ExpenseQueryFilters,
    ExpenseRow,
)
from group_ledger.services.debt_query_service import (
    ExpenseQueryRepositoryProtocol,
    MemberRepositoryProtocol,
    PaymentQueryRepositoryProtocol,
)
from group_ledger.services.request_context import RequestContext
from group_ledger.services.settlement_service import (
    SettlementOutcome,
    settle_with_report,
)

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"


class BalanceStatus(StrEnum):
    """How a member stands after settlement is taken into account."""

    CREDITOR = "creditor"
    DEBTOR = "debtor"
    BALANCED = "balanced"


@dataclass(frozen=True, slots=True)
class AnalyticsFilters:
    """Filter set selected in the analytics view."""

    start_date: date | None = None
    end_date: date | None = None
    categories: tuple[str, ...] = field(default_factory=tuple)
    member_ids: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class BalanceRow:
    """One table row of the settlement section."""

    balance: Balance
    status: BalanceStatus


@dataclass(frozen=True, slots=True)
class MonthlyBreakdown:
    month: str
    total: Decimal
    count: int
    average: Decimal


@dataclass(frozen=True, slots=True)
class CategoryBreakdown:
    category: str
    total: Decimal
    count: int


@dataclass(frozen=True, slots=True)
class AnalyticsReport:
    """Everything the analytics view renders for one filter selection."""

    group_id: str
    filters: AnalyticsFilters
    outcome: SettlementOutcome
    rows: tuple[BalanceRow, ...]
    monthly: tuple[MonthlyBreakdown, ...]
    categories: tuple[CategoryBreakdown, ...]

    @property
    def transfers(self) -> tuple[Transfer, ...]:
        return self.outcome.result.transfers


def classify_balance(balance: Balance, tolerance_cents: int = 0) -> BalanceStatus:
    if balance.balance_cents > tolerance_cents:
        return BalanceStatus.CREDITOR
    if balance.balance_cents < -tolerance_cents:
        return BalanceStatus.DEBTOR
    return BalanceStatus.BALANCED


def build_monthly_breakdown(rows: Iterable[ExpenseRow]) -> tuple[MonthlyBreakdown, ...]:
    """Group expenses by calendar month, newest month first."""

    totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0.00"))
    counts: dict[str, int] = defaultdict(int)
    for row in rows:
        month_key = f"{row.occurred_at.year:04d}-{row.occurred_at.month:02d}"
        totals[month_key] += row.amount
        counts[month_key] += 1

    return tuple(
        MonthlyBreakdown(
            month=month_key,
            total=quantize_money(totals[month_key]),
            count=counts[month_key],
            average=quantize_money(totals[month_key] / counts[month_key]),
        )
        for month_key in sorted(totals, reverse=True)
    )


def build_category_breakdown(
    rows: Iterable[ExpenseRow],
) -> tuple[CategoryBreakdown, ...]:
    """Group expenses by category, largest total first."""

    totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0.00"))
    counts: dict[str, int] = defaultdict(int)
    for row in rows:
        category = row.category or UNCATEGORIZED
        totals[category] += row.amount
        counts[category] += 1

    ordered = sorted(totals, key=lambda category: (-totals[category], category))
    return tuple(
        CategoryBreakdown(
            category=category,
            total=quantize_money(totals[category]),
            count=counts[category],
        )
        for category in ordered
    )


class AnalyticsReportService:
    """Builds the analytics settlement report over a UI filter selection."""

    def __init__(
        self,
        *,
        member_repository: MemberRepositoryProtocol,
        expense_query_repository: ExpenseQueryRepositoryProtocol,
        payment_query_repository: PaymentQueryRepositoryProtocol,
        tolerance_cents: int = 0,
    ) -> None:
        self._member_repository = member_repository
        self._expense_query_repository = expense_query_repository
        self._payment_query_repository = payment_query_repository
        self._tolerance_cents = tolerance_cents

    def build_report(
        self,
        *,
        context: RequestContext,
        group_id: str,
        filters: AnalyticsFilters,
    ) -> AnalyticsReport:
        context.ensure_member(group_id)

        try:
            time_range = date_range(filters.start_date, filters.end_date)
        except ValueError as exc:
            raise InvalidRequestError(
                message="start_date must not be after end_date.",
                details={
                    "start_date": str(filters.start_date),
                    "end_date": str(filters.end_date),
                },
            ) from exc

        members = self._member_repository.list_members(group_id)
        expense_rows = self._expense_query_repository.list_expenses(
            ExpenseQueryFilters(
                group_id=group_id,
                time_range=time_range,
                categories=filters.categories,
                payer_ids=filters.member_ids,
            )
        )
        payments = self._payment_query_repository.list_completed_payments(
            group_id, time_range
        )
        outcome = settle_with_report(
            members,
            [row.to_record() for row in expense_rows],
            payments,
            tolerance_cents=self._tolerance_cents,
        )

        rows = tuple(
            BalanceRow(
                balance=balance,
                status=classify_balance(balance, self._tolerance_cents),
            )
            for balance in outcome.result.balances
        )
        logger.info(
            "analytics_report_generated",
            extra={
                "group_id": group_id,
                "user_id": context.user_id,
                "expense_count": len(expense_rows),
            },
        )
        return AnalyticsReport(
            group_id=group_id,
            filters=filters,
            outcome=outcome,
            rows=rows,
            monthly=build_monthly_breakdown(expense_rows),
            categories=build_category_breakdown(expense_rows),
        )
