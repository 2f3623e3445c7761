"""CLI bootstrap for group-ledger."""

import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError

from group_ledger.api.schemas.settlement import SettlementPreviewRequest
from group_ledger.core.settings import get_settings
from group_ledger.domain.errors import DomainError
from group_ledger.reporting.debt_summary import render_outcome
from group_ledger.services.settlement_service import settle_with_report

app = typer.Typer(help="CLI for group expense settlement.")
INPUT_FILE_OPTION = typer.Option(..., exists=True, dir_okay=False)
TOLERANCE_OPTION = typer.Option(
    None, min=0, help="Cents below which a balance counts as settled."
)
JSON_OPTION = typer.Option(False, "--json", help="Print the result as JSON.")


@app.callback()
def configure_logging() -> None:
    """Configure root logging from LOG_LEVEL."""
    logging.basicConfig(level=get_settings().log_level.upper())


@app.command("healthcheck")
def healthcheck() -> None:
    """Verify that the CLI entrypoint is available."""
    typer.echo("group-ledger is ready")


@app.command("settle")
def settle(
    input: Path = INPUT_FILE_OPTION,
    tolerance: int | None = TOLERANCE_OPTION,
    as_json: bool = JSON_OPTION,
) -> None:
    """Settle a group from a JSON file with members, expenses and payments."""
    try:
        payload = json.loads(input.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        typer.echo(f"Invalid input: malformed JSON ({exc.msg})", err=True)
        raise typer.Exit(code=2) from exc

    try:
        request = SettlementPreviewRequest.model_validate(payload)
    except ValidationError as exc:
        typer.echo(f"Invalid input: {exc.error_count()} error(s)", err=True)
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    if tolerance is None:
        tolerance = (
            request.tolerance_cents
            if request.tolerance_cents is not None
            else get_settings().settlement_tolerance_cents
        )
    try:
        outcome = settle_with_report(
            [item.to_member() for item in request.members],
            [item.to_record() for item in request.expenses],
            [item.to_payment() for item in request.payments],
            tolerance_cents=tolerance,
            skip_invalid=request.skip_invalid,
        )
    except DomainError as exc:
        typer.echo(f"{exc.code}: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc

    if as_json:
        typer.echo(
            json.dumps(
                {
                    **outcome.result.as_dict(),
                    "skipped_expense_ids": list(outcome.skipped_expense_ids),
                    "skipped_payment_ids": list(outcome.skipped_payment_ids),
                },
                indent=2,
            )
        )
        return
    typer.echo(render_outcome(outcome))


def main() -> None:
    """Run the group-ledger CLI application."""
    app()


if __name__ == "__main__":
    main()
