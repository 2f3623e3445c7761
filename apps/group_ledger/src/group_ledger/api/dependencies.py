"""API dependency providers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from group_ledger.core.settings import Settings, get_settings
from group_ledger.db.session import get_db_session
from group_ledger.repositories.expense_query_repository import (
    ExpenseQueryRepository,
)
from group_ledger.repositories.member_repository import MemberRepository
from group_ledger.repositories.payment_query_repository import (
    PaymentQueryRepository,
)
from group_ledger.services.analytics_report_service import AnalyticsReportService
from group_ledger.services.debt_query_service import DebtQueryService
from group_ledger.services.request_context import RequestContext


def get_member_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> MemberRepository:
    """Build member repository with per-request session."""

    return MemberRepository(session)


def get_request_context(
    user_id: Annotated[str, Header(alias="X-User-Id", min_length=1)],
    member_repository: Annotated[MemberRepository, Depends(get_member_repository)],
) -> RequestContext:
    """Create the per-request context for the calling user."""

    return RequestContext(user_id=user_id, membership_lookup=member_repository)


def get_debt_query_service(
    session: Annotated[Session, Depends(get_db_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> DebtQueryService:
    """Build debt query service with per-request repositories."""

    return DebtQueryService(
        member_repository=MemberRepository(session),
        expense_query_repository=ExpenseQueryRepository(session),
        payment_query_repository=PaymentQueryRepository(session),
        tolerance_cents=settings.settlement_tolerance_cents,
        timezone=settings.app_timezone,
    )


def get_analytics_report_service(
    session: Annotated[Session, Depends(get_db_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AnalyticsReportService:
    """Build analytics report service with per-request repositories."""

    return AnalyticsReportService(
        member_repository=MemberRepository(session),
        expense_query_repository=ExpenseQueryRepository(session),
        payment_query_repository=PaymentQueryRepository(session),
        tolerance_cents=settings.settlement_tolerance_cents,
    )
