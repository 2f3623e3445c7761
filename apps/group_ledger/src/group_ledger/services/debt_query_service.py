"""Debt calculation query used by the chat assistant."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from group_ledger.domain.errors import MemberNotFoundError
from group_ledger.domain.periods import TimeRange, resolve_time_period
from group_ledger.domain.settlement import CompletedPayment, Member, Transfer
from group_ledger.repositories.expense_query_repository import (
    ExpenseQueryFilters,
    ExpenseRow,
)
from group_ledger.services.request_context import RequestContext
from group_ledger.services.settlement_service import (
    SettlementOutcome,
    settle_with_report,
)

logger = logging.getLogger(__name__)

DEBT_CALCULATION_TYPE = "debt_calculation"


class MemberRepositoryProtocol(Protocol):
    """Roster contract used by debt queries."""

    def list_members(self, group_id: str) -> list[Member]: ...


class ExpenseQueryRepositoryProtocol(Protocol):
    """Expense read contract used by debt queries."""

    def list_expenses(self, filters: ExpenseQueryFilters) -> list[ExpenseRow]: ...


class PaymentQueryRepositoryProtocol(Protocol):
    """Completed payment read contract used by debt queries."""

    def list_completed_payments(
        self,
        group_id: str,
        time_range: TimeRange | None = None,
    ) -> list[CompletedPayment]: ...


@dataclass(frozen=True, slots=True)
class DebtQueryFilters:
    """Filters as requested, plus the resolved time range."""

    time_period: str | None = None
    category: str | None = None
    member_name: str | None = None
    time_range: TimeRange | None = None


@dataclass(frozen=True, slots=True)
class DebtCalculation:
    """Chart-ready answer to "who owes whom" for one group."""

    group_id: str
    filters: DebtQueryFilters
    outcome: SettlementOutcome
    transfers: tuple[Transfer, ...]
    focus_member: Member | None = None
    type: str = DEBT_CALCULATION_TYPE


def find_member_by_name(members: list[Member], name: str) -> Member:
    """Return the first member whose name contains `name`, ignoring case."""

    needle = name.strip().lower()
    for member in members:
        if needle and needle in member.display_name.lower():
            return member
    raise MemberNotFoundError(details={"member_name": name})


class DebtQueryService:
    """Gathers group data for a debt question and runs the settlement engine."""

    def __init__(
        self,
        *,
        member_repository: MemberRepositoryProtocol,
        expense_query_repository: ExpenseQueryRepositoryProtocol,
        payment_query_repository: PaymentQueryRepositoryProtocol,
        tolerance_cents: int = 0,
        timezone: str = "UTC",
    ) -> None:
        self._member_repository = member_repository
        self._expense_query_repository = expense_query_repository
        self._payment_query_repository = payment_query_repository
        self._tolerance_cents = tolerance_cents
        self._timezone = timezone

    def calculate_debts(
        self,
        *,
        context: RequestContext,
        group_id: str,
        time_period: str | None = None,
        category: str | None = None,
        member_name: str | None = None,
        now: datetime | None = None,
    ) -> DebtCalculation:
        context.ensure_member(group_id)

        time_range = resolve_time_period(
            time_period,
            now=now or datetime.now(tz=UTC),
            timezone=self._timezone,
        )
        members = self._member_repository.list_members(group_id)
        focus_member = (
            find_member_by_name(members, member_name) if member_name else None
        )

        expense_rows = self._expense_query_repository.list_expenses(
            ExpenseQueryFilters(
                group_id=group_id,
                time_range=time_range,
                categories=(category,) if category else (),
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

        transfers = outcome.result.transfers
        if focus_member is not None:
            transfers = tuple(
                transfer
                for transfer in transfers
                if focus_member.member_id
                in (transfer.from_member_id, transfer.to_member_id)
            )

        logger.info(
            "debt_calculation_completed",
            extra={
                "group_id": group_id,
                "user_id": context.user_id,
                "transfer_count": len(transfers),
                "skipped_expenses": len(outcome.skipped_expense_ids),
                "skipped_payments": len(outcome.skipped_payment_ids),
            },
        )
        return DebtCalculation(
            group_id=group_id,
            filters=DebtQueryFilters(
                time_period=time_period,
                category=category,
                member_name=member_name,
                time_range=time_range,
            ),
            outcome=outcome,
            transfers=transfers,
            focus_member=focus_member,
        )
