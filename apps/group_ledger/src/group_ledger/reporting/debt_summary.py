"""Plain-text rendering of settlement outcomes for chat and terminal output."""

from __future__ import annotations

from collections.abc import Iterable

from group_ledger.domain.money import format_cents, format_money
from group_ledger.domain.settlement import Balance, SettlementResult, Transfer
from group_ledger.services.debt_query_service import DebtCalculation
from group_ledger.services.settlement_service import SettlementOutcome


def _format_balance_line(balance: Balance) -> str:
    if balance.balance_cents > 0:
        position = f"is owed {format_cents(balance.balance_cents)}"
    elif balance.balance_cents < 0:
        position = f"owes {format_cents(-balance.balance_cents)}"
    else:
        position = "is settled"
    return (
        f"- {balance.display_name}: spent {format_cents(balance.spent_cents)}, "
        f"{position}"
    )


def _format_transfer_line(transfer: Transfer) -> str:
    return (
        f"- {transfer.from_name} pays {transfer.to_name} "
        f"{format_cents(transfer.amount_cents)}"
    )


def render_settlement(
    result: SettlementResult,
    transfers: Iterable[Transfer] | None = None,
) -> list[str]:
    """Return summary, balance and transfer lines for a settlement result."""

    selected = list(result.transfers if transfers is None else transfers)
    lines = [
        "Summary",
        f"- Total spent: {format_cents(result.total_spent_cents)}",
        f"- Fair share per member: {format_money(result.fair_share)}",
        f"- Members: {result.member_count}",
        "",
        "Balances",
        *(_format_balance_line(balance) for balance in result.balances),
        "",
        "Transfers",
    ]
    if selected:
        lines.extend(_format_transfer_line(transfer) for transfer in selected)
    else:
        lines.append("- Nobody owes anything.")
    return lines


def render_skipped(outcome: SettlementOutcome) -> list[str]:
    if not outcome.has_skipped_records:
        return []
    lines = ["", "Skipped records"]
    lines.extend(
        f"- expense {record_id}: payer is not a group member"
        for record_id in outcome.skipped_expense_ids
    )
    lines.extend(
        f"- payment {record_id}: party is not a group member"
        for record_id in outcome.skipped_payment_ids
    )
    return lines


def render_outcome(outcome: SettlementOutcome) -> str:
    return "\n".join(
        [*render_settlement(outcome.result), *render_skipped(outcome)]
    )


def render_debt_summary(calculation: DebtCalculation) -> str:
    """Render a debt calculation as a short plain-text answer."""

    header: list[str] = []
    applied = [
        f"{label}={value}"
        for label, value in (
            ("period", calculation.filters.time_period),
            ("category", calculation.filters.category),
            ("member", calculation.filters.member_name),
        )
        if value
    ]
    if applied:
        header = [f"Filters: {', '.join(applied)}", ""]

    body = render_settlement(calculation.outcome.result, calculation.transfers)
    return "\n".join([*header, *body, *render_skipped(calculation.outcome)])
