"""Schemas for the debt calculation endpoint."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from group_ledger.api.schemas.settlement import SettlementResponse
from group_ledger.reporting.debt_summary import render_debt_summary
from group_ledger.services.debt_query_service import DebtCalculation


class DebtFiltersResponse(BaseModel):
    time_period: str | None
    category: str | None
    member_name: str | None
    start: datetime | None
    end: datetime | None


class DebtCalculationResponse(BaseModel):
    """Answer to "who owes whom" with a text rendering for chat clients."""

    type: Literal["debt_calculation"] = "debt_calculation"
    group_id: str
    filters: DebtFiltersResponse
    settlement: SettlementResponse
    summary: str

    @classmethod
    def from_calculation(cls, calculation: DebtCalculation) -> DebtCalculationResponse:
        time_range = calculation.filters.time_range
        return cls(
            group_id=calculation.group_id,
            filters=DebtFiltersResponse(
                time_period=calculation.filters.time_period,
                category=calculation.filters.category,
                member_name=calculation.filters.member_name,
                start=time_range.start if time_range else None,
                end=time_range.end if time_range else None,
            ),
            settlement=SettlementResponse.from_outcome(
                calculation.outcome, calculation.transfers
            ),
            summary=render_debt_summary(calculation),
        )
