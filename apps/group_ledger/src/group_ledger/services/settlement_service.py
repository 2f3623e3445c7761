"""Settlement runs that tolerate malformed records and report them."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from group_ledger.domain.errors import UnknownMemberError, UnknownPayerError
from group_ledger.domain.settlement import (
    CompletedPayment,
    ExpenseRecord,
    Member,
    SettlementResult,
    apply_completed_payments,
    assemble,
    compute_balances,
    solve,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SettlementOutcome:
    """Settlement result plus the records that were left out of it."""

    result: SettlementResult
    skipped_expense_ids: tuple[str, ...] = field(default_factory=tuple)
    skipped_payment_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_skipped_records(self) -> bool:
        return bool(self.skipped_expense_ids or self.skipped_payment_ids)


def settle_with_report(
    members: Sequence[Member],
    expenses: Sequence[ExpenseRecord],
    payments: Sequence[CompletedPayment],
    *,
    tolerance_cents: int = 0,
    skip_invalid: bool = True,
) -> SettlementOutcome:
    """Run the settlement engine, skipping records outside the roster.

    With `skip_invalid` set to False the first UnknownPayerError or
    UnknownMemberError propagates and nothing is computed.
    """

    skipped_expense_ids: tuple[str, ...] = ()
    try:
        balances = compute_balances(members, expenses)
    except UnknownPayerError as exc:
        if not skip_invalid:
            raise
        skipped_expense_ids = tuple(exc.expense_ids)
        logger.warning(
            "settlement_records_skipped",
            extra={"record_type": "expense", "record_ids": skipped_expense_ids},
        )
        expenses = [
            expense
            for expense in expenses
            if expense.record_id not in skipped_expense_ids
        ]
        balances = compute_balances(members, expenses)

    skipped_payment_ids: tuple[str, ...] = ()
    try:
        adjusted = apply_completed_payments(balances, payments)
    except UnknownMemberError as exc:
        if not skip_invalid:
            raise
        skipped_payment_ids = tuple(exc.payment_ids)
        logger.warning(
            "settlement_records_skipped",
            extra={"record_type": "payment", "record_ids": skipped_payment_ids},
        )
        adjusted = apply_completed_payments(
            balances,
            [
                payment
                for payment in payments
                if payment.record_id not in skipped_payment_ids
            ],
        )

    transfers = solve(adjusted, tolerance_cents)
    total_spent = sum(expense.amount_cents for expense in expenses)
    return SettlementOutcome(
        result=assemble(total_spent, len(members), adjusted, transfers),
        skipped_expense_ids=skipped_expense_ids,
        skipped_payment_ids=skipped_payment_ids,
    )
