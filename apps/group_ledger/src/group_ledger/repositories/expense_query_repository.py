"""Read-oriented expense queries for settlement and analytics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from group_ledger.db.models.expense import Expense
from group_ledger.domain.money import quantize_money, to_cents
from group_ledger.domain.periods import TimeRange
from group_ledger.domain.settlement import ExpenseRecord


@dataclass(frozen=True, slots=True)
class ExpenseQueryFilters:
    """Supported filters for group expense queries."""

    group_id: str
    time_range: TimeRange | None = None
    categories: tuple[str, ...] = field(default_factory=tuple)
    payer_ids: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class ExpenseRow:
    """Expense projection with the fields reports need."""

    record_id: str
    payer_id: str
    amount: Decimal
    category: str | None
    occurred_at: datetime

    def to_record(self) -> ExpenseRecord:
        return ExpenseRecord(
            record_id=self.record_id,
            payer_id=self.payer_id,
            amount_cents=to_cents(self.amount),
            occurred_at=self.occurred_at,
        )


class ExpenseQueryRepository:
    """Repository focused on expense read use cases."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_expenses(self, filters: ExpenseQueryFilters) -> list[ExpenseRow]:
        statement = self._apply_filters(
            select(
                Expense.id,
                Expense.user_id,
                Expense.amount,
                Expense.category,
                Expense.occurred_at,
            ),
            filters,
        ).order_by(Expense.occurred_at.asc(), Expense.id.asc())

        return [
            ExpenseRow(
                record_id=str(expense_id),
                payer_id=str(user_id),
                amount=quantize_money(Decimal(amount)),
                category=category,
                occurred_at=occurred_at,
            )
            for expense_id, user_id, amount, category, occurred_at in (
                self._session.execute(statement).all()
            )
        ]

    @staticmethod
    def _apply_filters(
        statement: Select[tuple[str, str, Decimal, str | None, datetime]],
        filters: ExpenseQueryFilters,
    ) -> Select[tuple[str, str, Decimal, str | None, datetime]]:
        typed_statement = statement.where(Expense.group_id == filters.group_id)

        if filters.time_range is not None:
            typed_statement = typed_statement.where(
                Expense.occurred_at >= filters.time_range.start.astimezone(UTC)
            )
            if filters.time_range.end is not None:
                typed_statement = typed_statement.where(
                    Expense.occurred_at < filters.time_range.end.astimezone(UTC)
                )
        if filters.categories:
            typed_statement = typed_statement.where(
                func.lower(Expense.category).in_(
                    [category.lower() for category in filters.categories]
                )
            )
        if filters.payer_ids:
            typed_statement = typed_statement.where(
                Expense.user_id.in_(filters.payer_ids)
            )

        return typed_statement
