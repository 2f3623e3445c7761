"""Balance reconciliation and debt settlement for group expenses.

The engine works on integer cents. Fair shares are split with
`split_evenly`, so balances coming out of `compute_balances` always add up to
exactly zero and the default settlement tolerance is zero cents.

The solver pairs the largest creditor with the largest debtor until one side
runs out. It usually needs few transfers but it is a heuristic: finding the
true minimum number of transfers is NP-hard in general.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Any

from group_ledger.domain.errors import (
    EmptyGroupError,
    InvalidRequestError,
    UnknownMemberError,
    UnknownPayerError,
)
from group_ledger.domain.money import from_cents, quantize_money, split_evenly


@dataclass(frozen=True, slots=True)
class Member:
    """Group member as seen by one settlement run."""

    member_id: str
    display_name: str


@dataclass(frozen=True, slots=True)
class ExpenseRecord:
    """Expense paid by one member, already filtered to the reporting scope."""

    record_id: str
    payer_id: str
    amount_cents: int
    occurred_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.amount_cents < 0:
            raise ValueError("Expense amount must not be negative")


@dataclass(frozen=True, slots=True)
class CompletedPayment:
    """Peer-to-peer payment that has already been completed."""

    record_id: str
    from_member_id: str
    to_member_id: str
    amount_cents: int

    def __post_init__(self) -> None:
        if self.amount_cents <= 0:
            raise ValueError("Payment amount must be greater than zero")
        if self.from_member_id == self.to_member_id:
            raise ValueError("Payment sender and receiver must differ")


@dataclass(frozen=True, slots=True)
class Balance:
    """Signed position of one member; positive means the group owes them."""

    member_id: str
    display_name: str
    spent_cents: int
    fair_share_cents: int
    balance_cents: int

    @property
    def is_creditor(self) -> bool:
        return self.balance_cents > 0

    @property
    def is_debtor(self) -> bool:
        return self.balance_cents < 0


@dataclass(frozen=True, slots=True)
class Transfer:
    """Proposed payment from a debtor to a creditor."""

    from_member_id: str
    from_name: str
    to_member_id: str
    to_name: str
    amount_cents: int


@dataclass(frozen=True, slots=True)
class SettlementResult:
    """Immutable outcome of one settlement run."""

    total_spent_cents: int
    fair_share: Decimal
    member_count: int
    balances: tuple[Balance, ...]
    transfers: tuple[Transfer, ...]

    @property
    def is_balanced(self) -> bool:
        return not self.transfers

    def as_dict(self) -> dict[str, Any]:
        """Return plain JSON-friendly data with money as two-place strings."""

        return {
            "total_spent": f"{from_cents(self.total_spent_cents):.2f}",
            "fair_share": f"{self.fair_share:.2f}",
            "member_count": self.member_count,
            "balances": [
                {
                    **asdict(balance),
                    "spent": f"{from_cents(balance.spent_cents):.2f}",
                    "fair_share": f"{from_cents(balance.fair_share_cents):.2f}",
                    "balance": f"{from_cents(balance.balance_cents):.2f}",
                }
                for balance in self.balances
            ],
            "transfers": [
                {
                    **asdict(transfer),
                    "amount": f"{from_cents(transfer.amount_cents):.2f}",
                }
                for transfer in self.transfers
            ],
        }


def _duplicate_record_error(record_type: str, record_id: str) -> InvalidRequestError:
    return InvalidRequestError(
        message=f"Each {record_type} must have a unique identifier.",
        details={"record_type": record_type, "record_id": record_id},
    )


def compute_balances(
    members: Sequence[Member],
    expenses: Iterable[ExpenseRecord],
) -> dict[str, Balance]:
    """Compute each member's spend minus their equal share of the total."""

    if not members:
        raise EmptyGroupError()

    spent: dict[str, int] = {}
    for member in members:
        if member.member_id in spent:
            raise InvalidRequestError(
                message="Member identifiers must be unique in a settlement run.",
                details={"member_id": member.member_id},
            )
        spent[member.member_id] = 0

    seen_expense_ids: set[str] = set()
    unknown_expense_ids: list[str] = []
    for expense in expenses:
        if expense.record_id in seen_expense_ids:
            raise _duplicate_record_error("expense", expense.record_id)
        seen_expense_ids.add(expense.record_id)
        if expense.payer_id not in spent:
            unknown_expense_ids.append(expense.record_id)
            continue
        spent[expense.payer_id] += expense.amount_cents
    if unknown_expense_ids:
        raise UnknownPayerError(unknown_expense_ids)

    total_spent = sum(spent.values())
    shares = split_evenly(total_spent, len(members))
    return {
        member.member_id: Balance(
            member_id=member.member_id,
            display_name=member.display_name,
            spent_cents=spent[member.member_id],
            fair_share_cents=share,
            balance_cents=spent[member.member_id] - share,
        )
        for member, share in zip(members, shares, strict=True)
    }


def apply_completed_payments(
    balances: Mapping[str, Balance],
    payments: Iterable[CompletedPayment],
) -> dict[str, Balance]:
    """Fold completed payments into balances and return a new mapping.

    The sender's balance goes up by the paid amount and the receiver's goes
    down. Amounts are applied as recorded, even when they overshoot what was
    actually owed.
    """

    payment_list = list(payments)
    seen_payment_ids: set[str] = set()
    for payment in payment_list:
        if payment.record_id in seen_payment_ids:
            raise _duplicate_record_error("payment", payment.record_id)
        seen_payment_ids.add(payment.record_id)

    unknown_payment_ids = [
        payment.record_id
        for payment in payment_list
        if payment.from_member_id not in balances
        or payment.to_member_id not in balances
    ]
    if unknown_payment_ids:
        raise UnknownMemberError(unknown_payment_ids)

    deltas = dict.fromkeys(balances, 0)
    for payment in payment_list:
        deltas[payment.from_member_id] += payment.amount_cents
        deltas[payment.to_member_id] -= payment.amount_cents

    return {
        member_id: replace(
            balance, balance_cents=balance.balance_cents + deltas[member_id]
        )
        for member_id, balance in balances.items()
    }


def solve(
    balances: Mapping[str, Balance],
    tolerance_cents: int = 0,
) -> tuple[Transfer, ...]:
    """Greedily pair the largest creditor with the largest debtor.

    Members within `tolerance_cents` of zero are treated as settled. Ties
    keep the mapping's order, which makes the output deterministic.
    """

    if tolerance_cents < 0:
        raise ValueError("tolerance_cents must not be negative")

    creditors = sorted(
        (b for b in balances.values() if b.balance_cents > tolerance_cents),
        key=lambda b: -b.balance_cents,
    )
    debtors = sorted(
        (b for b in balances.values() if b.balance_cents < -tolerance_cents),
        key=lambda b: b.balance_cents,
    )
    credit = [b.balance_cents for b in creditors]
    debt = [-b.balance_cents for b in debtors]

    transfers: list[Transfer] = []
    i = j = 0
    while i < len(creditors) and j < len(debtors):
        amount = min(credit[i], debt[j])
        if amount > tolerance_cents:
            transfers.append(
                Transfer(
                    from_member_id=debtors[j].member_id,
                    from_name=debtors[j].display_name,
                    to_member_id=creditors[i].member_id,
                    to_name=creditors[i].display_name,
                    amount_cents=amount,
                )
            )
        credit[i] -= amount
        debt[j] -= amount
        if credit[i] <= tolerance_cents:
            i += 1
        if debt[j] <= tolerance_cents:
            j += 1

    return tuple(transfers)


def assemble(
    total_spent_cents: int,
    member_count: int,
    balances: Mapping[str, Balance] | Iterable[Balance],
    transfers: Iterable[Transfer],
) -> SettlementResult:
    """Package balances and transfers into an immutable result."""

    if member_count <= 0:
        raise EmptyGroupError()

    values = balances.values() if isinstance(balances, Mapping) else balances
    fair_share = quantize_money(from_cents(total_spent_cents) / member_count)
    return SettlementResult(
        total_spent_cents=total_spent_cents,
        fair_share=fair_share,
        member_count=member_count,
        balances=tuple(values),
        transfers=tuple(transfers),
    )


def settle(
    members: Sequence[Member],
    expenses: Iterable[ExpenseRecord],
    payments: Iterable[CompletedPayment] = (),
    tolerance_cents: int = 0,
) -> SettlementResult:
    """Run the whole pipeline: balances, payments, solver and assembly."""

    expense_list = list(expenses)
    balances = compute_balances(members, expense_list)
    adjusted = apply_completed_payments(balances, payments)
    transfers = solve(adjusted, tolerance_cents)
    total_spent = sum(expense.amount_cents for expense in expense_list)
    return assemble(total_spent, len(members), adjusted, transfers)
