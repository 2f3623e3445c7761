"""Read-oriented queries for completed payments."""

from __future__ import annotations

from datetime import UTC
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from group_ledger.db.models.payment import Payment, PaymentStatus
from group_ledger.domain.money import to_cents
from group_ledger.domain.periods import TimeRange
from group_ledger.domain.settlement import CompletedPayment


class PaymentQueryRepository:
    """Repository returning only payments that already took place."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_completed_payments(
        self,
        group_id: str,
        time_range: TimeRange | None = None,
    ) -> list[CompletedPayment]:
        """Return COMPLETED payments of a group, filtered by creation time."""

        statement = select(
            Payment.id, Payment.from_user_id, Payment.to_user_id, Payment.amount
        ).where(
            Payment.group_id == group_id,
            Payment.status == PaymentStatus.COMPLETED,
        )
        if time_range is not None:
            statement = statement.where(
                Payment.created_at >= time_range.start.astimezone(UTC)
            )
            if time_range.end is not None:
                statement = statement.where(
                    Payment.created_at < time_range.end.astimezone(UTC)
                )

        rows = self._session.execute(
            statement.order_by(Payment.created_at.asc(), Payment.id.asc())
        ).all()
        return [
            CompletedPayment(
                record_id=str(payment_id),
                from_member_id=str(from_user_id),
                to_member_id=str(to_user_id),
                amount_cents=to_cents(Decimal(amount)),
            )
            for payment_id, from_user_id, to_user_id, amount in rows
        ]
