"""MCP server exposing group_ledger API capabilities to chat assistants."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from fastmcp import FastMCP

from group_ledger.core.settings import get_settings

ParamValue = str | int | float | bool | None | list[str]
ParamsMapping = Mapping[str, ParamValue]
HeadersMapping = Mapping[str, str]


class APIRequester(Protocol):
    """Requester abstraction to simplify HTTP boundary testing."""

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: ParamsMapping | None = None,
        json_body: Mapping[str, object] | None = None,
        headers: HeadersMapping | None = None,
    ) -> object: ...


@dataclass(slots=True, frozen=True)
class HTTPAPIRequester:
    """HTTP client wrapper for group_ledger API."""

    base_url: str
    timeout_seconds: float

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: ParamsMapping | None = None,
        json_body: Mapping[str, object] | None = None,
        headers: HeadersMapping | None = None,
    ) -> object:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
        ) as client:
            response = await client.request(
                method=method,
                url=path,
                params=params,
                json=dict(json_body) if json_body else None,
                headers=dict(headers) if headers else None,
            )

        if response.is_success:
            return _parse_json_response(response)
        raise RuntimeError(_build_api_error(response))


def _parse_json_response(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError as exc:
        raise RuntimeError(
            f"API returned a non-JSON response with status {response.status_code}."
        ) from exc


def _build_api_error(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        text = response.text.strip()
        if text:
            return f"API request failed with status {response.status_code}: {text}"
        return f"API request failed with status {response.status_code}."

    if isinstance(payload, Mapping):
        error_code = payload.get("code")
        error_message = payload.get("message")
        details = payload.get("details")
        if isinstance(error_code, str) and isinstance(error_message, str):
            if details is None:
                return f"API error {error_code}: {error_message}"
            return f"API error {error_code}: {error_message} | details={details}"

    return f"API request failed with status {response.status_code}: {payload}"


def _normalize_base_url(value: str) -> str:
    return value.rstrip("/")


def _user_headers(user_id: str) -> dict[str, str]:
    return {"X-User-Id": user_id}


def create_mcp_server(
    *,
    api_base_url: str | None = None,
    timeout_seconds: float | None = None,
    requester: APIRequester | None = None,
) -> FastMCP:
    """Create MCP server with curated tools mapped to REST endpoints."""

    settings = get_settings()
    resolved_base_url = _normalize_base_url(api_base_url or settings.mcp_api_base_url)
    resolved_timeout = (
        settings.mcp_api_timeout_seconds if timeout_seconds is None else timeout_seconds
    )
    if resolved_timeout <= 0:
        raise ValueError("MCP API timeout must be greater than zero.")

    mcp = FastMCP(name="Group Ledger")
    api_requester: APIRequester = requester or HTTPAPIRequester(
        base_url=resolved_base_url,
        timeout_seconds=resolved_timeout,
    )

    @mcp.tool
    async def list_group_members(group_id: str, user_id: str) -> object:
        """List every current member of a group."""

        return await api_requester.request(
            "GET",
            f"/v1/groups/{group_id}/members",
            headers=_user_headers(user_id),
        )

    @mcp.tool
    async def calculate_group_debts(
        group_id: str,
        user_id: str,
        time_period: str | None = None,
        category: str | None = None,
        member_name: str | None = None,
    ) -> object:
        """Answer who owes whom in a group, optionally filtered.

        time_period accepts: today, this week, this month, last month,
        this year, last N days.
        """

        params: dict[str, ParamValue] = {}
        if time_period is not None:
            params["time_period"] = time_period
        if category is not None:
            params["category"] = category
        if member_name is not None:
            params["member_name"] = member_name

        return await api_requester.request(
            "GET",
            f"/v1/groups/{group_id}/debts",
            params=params if params else None,
            headers=_user_headers(user_id),
        )

    @mcp.tool
    async def get_group_analytics(
        group_id: str,
        user_id: str,
        start_date: str | None = None,
        end_date: str | None = None,
        categories: list[str] | None = None,
        member_ids: list[str] | None = None,
    ) -> object:
        """Return balances, transfers and spending breakdowns for a group."""

        params: dict[str, ParamValue] = {}
        if start_date is not None:
            params["start_date"] = start_date
        if end_date is not None:
            params["end_date"] = end_date
        if categories:
            params["category"] = categories
        if member_ids:
            params["member_id"] = member_ids

        return await api_requester.request(
            "GET",
            f"/v1/groups/{group_id}/analytics",
            params=params if params else None,
            headers=_user_headers(user_id),
        )

    @mcp.tool
    async def preview_settlement(
        members: list[dict[str, Any]],
        expenses: list[dict[str, Any]],
        payments: list[dict[str, Any]] | None = None,
        tolerance_cents: int | None = None,
    ) -> object:
        """Settle an ad-hoc roster without touching stored group data."""

        payload: dict[str, object] = {
            "members": members,
            "expenses": expenses,
            "payments": payments or [],
        }
        if tolerance_cents is not None:
            payload["tolerance_cents"] = tolerance_cents

        return await api_requester.request(
            "POST",
            "/v1/settlements/preview",
            json_body=payload,
        )

    return mcp
