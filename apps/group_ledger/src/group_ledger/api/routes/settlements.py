"""Stateless settlement preview route."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from group_ledger.api.schemas.settlement import (
    SettlementPreviewRequest,
    SettlementResponse,
)
from group_ledger.core.settings import Settings, get_settings
from group_ledger.services.settlement_service import settle_with_report

router = APIRouter(prefix="/settlements", tags=["Settlements"])


@router.post("/preview", response_model=SettlementResponse)
def preview_settlement(
    payload: SettlementPreviewRequest,
    settings: Annotated[Settings, Depends(get_settings)],
) -> SettlementResponse:
    """Settle the given roster, expenses and completed payments."""

    tolerance_cents = (
        settings.settlement_tolerance_cents
        if payload.tolerance_cents is None
        else payload.tolerance_cents
    )
    outcome = settle_with_report(
        [item.to_member() for item in payload.members],
        [item.to_record() for item in payload.expenses],
        [item.to_payment() for item in payload.payments],
        tolerance_cents=tolerance_cents,
        skip_invalid=payload.skip_invalid,
    )
    return SettlementResponse.from_outcome(outcome)
