"""API request and response schemas."""

from group_ledger.api.schemas.analytics import AnalyticsResponse
from group_ledger.api.schemas.debts import DebtCalculationResponse
from group_ledger.api.schemas.members import MembersListResponse
from group_ledger.api.schemas.settlement import (
    SettlementPreviewRequest,
    SettlementResponse,
)

__all__ = [
    "AnalyticsResponse",
    "DebtCalculationResponse",
    "MembersListResponse",
    "SettlementPreviewRequest",
    "SettlementResponse",
]
