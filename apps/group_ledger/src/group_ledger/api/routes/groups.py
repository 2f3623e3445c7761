"""Group roster, debt calculation and analytics routes."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from group_ledger.api.dependencies import (
    get_analytics_report_service,
    get_debt_query_service,
    get_member_repository,
    get_request_context,
)
from group_ledger.api.schemas.analytics import AnalyticsResponse
from group_ledger.api.schemas.debts import DebtCalculationResponse
from group_ledger.api.schemas.members import MembersListResponse
from group_ledger.repositories.member_repository import MemberRepository
from group_ledger.services.analytics_report_service import (
    AnalyticsFilters,
    AnalyticsReportService,
)
from group_ledger.services.debt_query_service import DebtQueryService
from group_ledger.services.request_context import RequestContext

router = APIRouter(prefix="/groups", tags=["Groups"])


@router.get("/{group_id}/members", response_model=MembersListResponse)
def list_group_members(
    group_id: str,
    context: Annotated[RequestContext, Depends(get_request_context)],
    repository: Annotated[MemberRepository, Depends(get_member_repository)],
) -> MembersListResponse:
    """List every current member of the group."""

    context.ensure_member(group_id)
    return MembersListResponse.from_members(repository.list_members(group_id))


@router.get("/{group_id}/debts", response_model=DebtCalculationResponse)
def calculate_group_debts(
    group_id: str,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[DebtQueryService, Depends(get_debt_query_service)],
    time_period: Annotated[str | None, Query(max_length=60)] = None,
    category: Annotated[str | None, Query(max_length=60)] = None,
    member_name: Annotated[str | None, Query(max_length=120)] = None,
) -> DebtCalculationResponse:
    """Return who owes whom in the group, with optional filters."""

    calculation = service.calculate_debts(
        context=context,
        group_id=group_id,
        time_period=time_period,
        category=category,
        member_name=member_name,
    )
    return DebtCalculationResponse.from_calculation(calculation)


@router.get("/{group_id}/analytics", response_model=AnalyticsResponse)
def get_group_analytics(
    group_id: str,
    context: Annotated[RequestContext, Depends(get_request_context)],
    service: Annotated[AnalyticsReportService, Depends(get_analytics_report_service)],
    start_date: date | None = None,
    end_date: date | None = None,
    category: Annotated[list[str] | None, Query()] = None,
    member_id: Annotated[list[str] | None, Query()] = None,
) -> AnalyticsResponse:
    """Return balances, transfers and spending breakdowns for a selection."""

    report = service.build_report(
        context=context,
        group_id=group_id,
        filters=AnalyticsFilters(
            start_date=start_date,
            end_date=end_date,
            categories=tuple(category or ()),
            member_ids=tuple(member_id or ()),
        ),
    )
    return AnalyticsResponse.from_report(report)
