from __future__ import annotations

import json
from dataclasses import FrozenInstanceError
from decimal import Decimal
from itertools import permutations

import pytest

from group_ledger.domain.errors import (
    EmptyGroupError,
    InvalidRequestError,
    UnknownMemberError,
    UnknownPayerError,
)
from group_ledger.domain.settlement import (
    Balance,
    CompletedPayment,
    ExpenseRecord,
    Member,
    Transfer,
    apply_completed_payments,
    assemble,
    compute_balances,
    settle,
    solve,
)


def _members(*names: str) -> list[Member]:
    return [Member(member_id=name.lower(), display_name=name) for name in names]


def _expense(record_id: str, payer_id: str, cents: int) -> ExpenseRecord:
    return ExpenseRecord(record_id=record_id, payer_id=payer_id, amount_cents=cents)


def _payment(
    record_id: str, from_member_id: str, to_member_id: str, cents: int
) -> CompletedPayment:
    return CompletedPayment(
        record_id=record_id,
        from_member_id=from_member_id,
        to_member_id=to_member_id,
        amount_cents=cents,
    )


def _replay(
    balances: dict[str, Balance], transfers: tuple[Transfer, ...]
) -> dict[str, int]:
    remaining = {key: value.balance_cents for key, value in balances.items()}
    for transfer in transfers:
        remaining[transfer.from_member_id] += transfer.amount_cents
        remaining[transfer.to_member_id] -= transfer.amount_cents
    return remaining


def test_three_members_with_uneven_spend_need_one_transfer() -> None:
    members = _members("Ana", "Bia", "Caio")
    expenses = [
        _expense("e1", "ana", 15000),
        _expense("e2", "bia", 10000),
        _expense("e3", "caio", 5000),
    ]

    result = settle(members, expenses)

    assert result.total_spent_cents == 30000
    assert result.fair_share == Decimal("100.00")
    assert [b.balance_cents for b in result.balances] == [5000, 0, -5000]
    assert len(result.transfers) == 1
    transfer = result.transfers[0]
    assert (transfer.from_name, transfer.to_name) == ("Caio", "Ana")
    assert transfer.amount_cents == 5000


def test_completed_payment_reduces_remaining_transfer() -> None:
    members = _members("Ana", "Bia")
    expenses = [_expense("e1", "ana", 20000)]
    payments = [_payment("p1", "bia", "ana", 5000)]

    balances = compute_balances(members, expenses)
    assert [b.balance_cents for b in balances.values()] == [10000, -10000]

    adjusted = apply_completed_payments(balances, payments)
    assert [b.balance_cents for b in adjusted.values()] == [5000, -5000]

    transfers = solve(adjusted)
    assert len(transfers) == 1
    assert transfers[0].from_member_id == "bia"
    assert transfers[0].to_member_id == "ana"
    assert transfers[0].amount_cents == 5000


def test_empty_group_raises_empty_group_error() -> None:
    with pytest.raises(EmptyGroupError) as exc_info:
        compute_balances([], [])

    assert exc_info.value.code == "EMPTY_GROUP"


def test_members_at_fair_share_produce_no_transfers() -> None:
    members = _members("Ana", "Bia", "Caio", "Duda")
    expenses = [
        _expense(f"e{index}", member.member_id, 2500)
        for index, member in enumerate(members)
    ]

    balances = compute_balances(members, expenses)

    assert solve(balances) == ()
    assert settle(members, expenses).is_balanced


def test_unknown_payer_is_reported_and_rerun_without_it_succeeds() -> None:
    members = _members("Ana", "Bia")
    expenses = [
        _expense("e1", "ana", 4000),
        _expense("e2", "ghost", 999),
        _expense("e3", "bia", 2000),
        _expense("e4", "ghost", 1),
    ]

    with pytest.raises(UnknownPayerError) as exc_info:
        compute_balances(members, expenses)

    assert exc_info.value.expense_ids == ["e2", "e4"]
    valid = [e for e in expenses if e.record_id not in exc_info.value.expense_ids]
    result = settle(members, valid)
    assert result.total_spent_cents == 6000
    assert result.transfers[0].amount_cents == 1000


def test_balances_sum_to_exactly_zero_when_total_does_not_divide() -> None:
    members = _members("Ana", "Bia", "Caio")
    expenses = [_expense("e1", "ana", 10000), _expense("e2", "bia", 1)]

    balances = compute_balances(members, expenses)

    assert sum(b.balance_cents for b in balances.values()) == 0
    assert [b.fair_share_cents for b in balances.values()] == [3334, 3334, 3333]


def test_replaying_transfers_zeroes_every_balance() -> None:
    members = _members("Ana", "Bia", "Caio", "Duda", "Enzo")
    expenses = [
        _expense("e1", "ana", 12345),
        _expense("e2", "bia", 678),
        _expense("e3", "duda", 45600),
        _expense("e4", "enzo", 999),
    ]
    payments = [_payment("p1", "caio", "duda", 3000)]

    balances = apply_completed_payments(compute_balances(members, expenses), payments)
    transfers = solve(balances)

    assert set(_replay(balances, transfers).values()) == {0}
    assert all(t.from_member_id != t.to_member_id for t in transfers)
    assert all(t.amount_cents > 0 for t in transfers)


def test_solve_is_deterministic_and_keeps_roster_order_on_ties() -> None:
    members = _members("Ana", "Bia", "Caio", "Duda")
    expenses = [_expense("e1", "ana", 10000), _expense("e2", "bia", 10000)]
    balances = compute_balances(members, expenses)

    first = solve(balances)
    second = solve(balances)

    assert first == second
    assert [(t.from_member_id, t.to_member_id) for t in first] == [
        ("caio", "ana"),
        ("duda", "bia"),
    ]


def test_solve_pairs_largest_creditor_with_largest_debtor_first() -> None:
    members = _members("Ana", "Bia", "Caio", "Duda")
    expenses = [_expense("e1", "bia", 9000), _expense("e2", "ana", 3000)]
    balances = compute_balances(members, expenses)

    transfers = solve(balances)

    assert [(t.from_name, t.to_name, t.amount_cents) for t in transfers] == [
        ("Caio", "Bia", 3000),
        ("Duda", "Bia", 3000),
    ]


def test_payment_order_does_not_change_adjusted_balances() -> None:
    members = _members("Ana", "Bia", "Caio")
    balances = compute_balances(
        members, [_expense("e1", "ana", 9000), _expense("e2", "bia", 3000)]
    )
    payments = [
        _payment("p1", "caio", "ana", 1000),
        _payment("p2", "bia", "ana", 500),
        _payment("p3", "caio", "bia", 250),
    ]

    outcomes = {
        tuple(
            b.balance_cents
            for b in apply_completed_payments(balances, order).values()
        )
        for order in permutations(payments)
    }

    assert outcomes == {(3500, -750, -2750)}


def test_apply_completed_payments_does_not_mutate_input() -> None:
    balances = compute_balances(_members("Ana", "Bia"), [_expense("e1", "ana", 100)])
    snapshot = dict(balances)

    apply_completed_payments(balances, [_payment("p1", "bia", "ana", 50)])

    assert balances == snapshot


def test_payment_with_unknown_member_lists_every_offender() -> None:
    balances = compute_balances(_members("Ana", "Bia"), [])
    payments = [
        _payment("p1", "ana", "bia", 100),
        _payment("p2", "ghost", "bia", 100),
        _payment("p3", "ana", "nobody", 100),
    ]

    with pytest.raises(UnknownMemberError) as exc_info:
        apply_completed_payments(balances, payments)

    assert exc_info.value.payment_ids == ["p2", "p3"]


def test_overpayment_is_applied_without_clamping() -> None:
    balances = compute_balances(_members("Ana", "Bia"), [_expense("e1", "ana", 2000)])

    adjusted = apply_completed_payments(balances, [_payment("p1", "bia", "ana", 5000)])
    transfers = solve(adjusted)

    assert [b.balance_cents for b in adjusted.values()] == [-4000, 4000]
    assert transfers[0].from_member_id == "ana"
    assert transfers[0].amount_cents == 4000


def test_tolerance_skips_balances_within_threshold() -> None:
    balances = compute_balances(
        _members("Ana", "Bia", "Caio"), [_expense("e1", "ana", 2)]
    )

    assert [b.balance_cents for b in balances.values()] == [1, -1, 0]
    assert len(solve(balances)) == 1
    assert solve(balances, tolerance_cents=1) == ()


def test_negative_tolerance_is_rejected() -> None:
    with pytest.raises(ValueError):
        solve({}, tolerance_cents=-1)


def test_duplicate_member_ids_are_rejected() -> None:
    members = [Member("ana", "Ana"), Member("ana", "Ana again")]

    with pytest.raises(InvalidRequestError):
        compute_balances(members, [])


def test_record_invariants_are_enforced_on_construction() -> None:
    with pytest.raises(ValueError):
        _expense("e1", "ana", -1)
    with pytest.raises(ValueError):
        _payment("p1", "ana", "ana", 100)
    with pytest.raises(ValueError):
        _payment("p1", "ana", "bia", 0)


def test_assemble_returns_frozen_serializable_result() -> None:
    members = _members("Ana", "Bia", "Caio")
    balances = compute_balances(members, [_expense("e1", "ana", 10000)])
    transfers = solve(balances)

    result = assemble(10000, len(members), balances, transfers)

    assert result.fair_share == Decimal("33.33")
    assert isinstance(result.balances, tuple)
    assert isinstance(result.transfers, tuple)
    with pytest.raises(FrozenInstanceError):
        result.total_spent_cents = 0  # type: ignore[misc]
    payload = json.loads(json.dumps(result.as_dict()))
    assert payload["total_spent"] == "100.00"
    assert payload["balances"][0]["balance"] == "66.66"
    assert [item["amount"] for item in payload["transfers"]] == ["33.33", "33.33"]


def test_assemble_rejects_zero_members() -> None:
    with pytest.raises(EmptyGroupError):
        assemble(0, 0, {}, ())


def test_repeated_record_ids_are_rejected_before_anything_is_dropped() -> None:
    members = _members("Ana", "Bia")

    with pytest.raises(InvalidRequestError) as exc_info:
        compute_balances(
            members, [_expense("e1", "ana", 10000), _expense("e1", "ghost", 500)]
        )
    assert exc_info.value.details == {"record_type": "expense", "record_id": "e1"}

    balances = compute_balances(members, [_expense("e1", "ana", 10000)])
    with pytest.raises(InvalidRequestError):
        apply_completed_payments(
            balances,
            [_payment("p1", "bia", "ana", 100), _payment("p1", "bia", "ana", 200)],
        )
