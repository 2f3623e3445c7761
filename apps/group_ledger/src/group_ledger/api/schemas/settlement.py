"""Schemas shared by every endpoint that returns a settlement."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, model_validator

from group_ledger.domain.money import format_cents, format_money, to_cents
from group_ledger.domain.settlement import (
    Balance,
    CompletedPayment,
    ExpenseRecord,
    Member,
    Transfer,
)
from group_ledger.services.settlement_service import SettlementOutcome

MoneyString = Annotated[str, Field(pattern=r"^-?[0-9]+\.[0-9]{2}$")]


class BalanceResponse(BaseModel):
    """Spend, fair share and signed balance of one member."""

    member_id: str
    display_name: str
    spent: MoneyString
    fair_share: MoneyString
    balance: MoneyString

    @classmethod
    def from_balance(cls, balance: Balance) -> BalanceResponse:
        return cls(
            member_id=balance.member_id,
            display_name=balance.display_name,
            spent=format_cents(balance.spent_cents),
            fair_share=format_cents(balance.fair_share_cents),
            balance=format_cents(balance.balance_cents),
        )


class TransferResponse(BaseModel):
    """Proposed transfer from a debtor to a creditor."""

    from_member_id: str
    from_name: str
    to_member_id: str
    to_name: str
    amount: MoneyString

    @classmethod
    def from_transfer(cls, transfer: Transfer) -> TransferResponse:
        return cls(
            from_member_id=transfer.from_member_id,
            from_name=transfer.from_name,
            to_member_id=transfer.to_member_id,
            to_name=transfer.to_name,
            amount=format_cents(transfer.amount_cents),
        )


class SettlementResponse(BaseModel):
    """Settlement outcome with the records that were skipped."""

    total_spent: MoneyString
    fair_share: MoneyString
    member_count: int
    balances: list[BalanceResponse]
    transfers: list[TransferResponse]
    skipped_expense_ids: list[str] = Field(default_factory=list)
    skipped_payment_ids: list[str] = Field(default_factory=list)

    @classmethod
    def from_outcome(
        cls,
        outcome: SettlementOutcome,
        transfers: tuple[Transfer, ...] | None = None,
    ) -> SettlementResponse:
        result = outcome.result
        selected = result.transfers if transfers is None else transfers
        return cls(
            total_spent=format_cents(result.total_spent_cents),
            fair_share=format_money(result.fair_share),
            member_count=result.member_count,
            balances=[BalanceResponse.from_balance(item) for item in result.balances],
            transfers=[TransferResponse.from_transfer(item) for item in selected],
            skipped_expense_ids=list(outcome.skipped_expense_ids),
            skipped_payment_ids=list(outcome.skipped_payment_ids),
        )


class MemberInput(BaseModel):
    id: str = Field(min_length=1)
    display_name: str = Field(min_length=1)

    def to_member(self) -> Member:
        return Member(member_id=self.id, display_name=self.display_name)


class ExpenseInput(BaseModel):
    id: str = Field(min_length=1)
    payer_id: str = Field(min_length=1)
    amount: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
    occurred_at: datetime | None = None

    def to_record(self) -> ExpenseRecord:
        return ExpenseRecord(
            record_id=self.id,
            payer_id=self.payer_id,
            amount_cents=to_cents(self.amount),
            occurred_at=self.occurred_at,
        )


class PaymentInput(BaseModel):
    id: str = Field(min_length=1)
    from_member_id: str = Field(min_length=1)
    to_member_id: str = Field(min_length=1)
    amount: Decimal = Field(gt=0, max_digits=14, decimal_places=2)

    @model_validator(mode="after")
    def validate_distinct_parties(self) -> PaymentInput:
        if self.from_member_id == self.to_member_id:
            raise ValueError("from_member_id and to_member_id must differ")
        return self

    def to_payment(self) -> CompletedPayment:
        return CompletedPayment(
            record_id=self.id,
            from_member_id=self.from_member_id,
            to_member_id=self.to_member_id,
            amount_cents=to_cents(self.amount),
        )


class SettlementPreviewRequest(BaseModel):
    """Stateless settlement input: roster, expenses and completed payments."""

    members: list[MemberInput]
    expenses: list[ExpenseInput] = Field(default_factory=list)
    payments: list[PaymentInput] = Field(default_factory=list)
    tolerance_cents: int | None = Field(default=None, ge=0)
    skip_invalid: bool = True

    @model_validator(mode="after")
    def validate_unique_record_ids(self) -> SettlementPreviewRequest:
        for label, ids in (
            ("expense", [item.id for item in self.expenses]),
            ("payment", [item.id for item in self.payments]),
        ):
            duplicates = sorted({item for item in ids if ids.count(item) > 1})
            if duplicates:
                raise ValueError(
                    f"{label} ids must be unique, repeated: {', '.join(duplicates)}"
                )
        return self
