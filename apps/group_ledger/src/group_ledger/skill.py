"""Chat skill entry point for settling a group from a JSON payload."""

from __future__ import annotations

import json

from pydantic import ValidationError

from group_ledger.api.schemas.settlement import SettlementPreviewRequest
from group_ledger.core.settings import get_settings
from group_ledger.domain.errors import DomainError
from group_ledger.reporting.debt_summary import render_outcome
from group_ledger.services.settlement_service import settle_with_report

COMMAND_PREFIX = "settle "


def handle_command(command_text: str) -> str:
    """Handle skill commands and return a plain-text settlement summary."""
    normalized_command = command_text.strip()
    if not normalized_command:
        return "Provide a command to settle a group."

    if not normalized_command.startswith(COMMAND_PREFIX):
        return "Unsupported command. Use: settle <json_payload> to settle a group."

    raw_payload = normalized_command.removeprefix(COMMAND_PREFIX).strip()
    try:
        payload = json.loads(raw_payload)
    except json.JSONDecodeError:
        return "Invalid JSON payload. Use: settle <json_payload>."

    try:
        request = SettlementPreviewRequest.model_validate(payload)
    except ValidationError as exc:
        details = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return "Invalid settlement payload.\n- " + "\n- ".join(details)

    try:
        outcome = settle_with_report(
            [item.to_member() for item in request.members],
            [item.to_record() for item in request.expenses],
            [item.to_payment() for item in request.payments],
            tolerance_cents=(
                get_settings().settlement_tolerance_cents
                if request.tolerance_cents is None
                else request.tolerance_cents
            ),
            skip_invalid=request.skip_invalid,
        )
    except DomainError as exc:
        details = exc.details
        if details:
            return f"{exc.message}\n- " + "\n- ".join(
                f"{key}: {value}" for key, value in details.items()
            )
        return exc.message

    return render_outcome(outcome)
