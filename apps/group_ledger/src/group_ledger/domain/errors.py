"""Domain exceptions used across the engine, services and API."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any


def compose_error_message(*, cause: str, action: str) -> str:
    """Build a user-facing error message with cause and corrective action."""

    return f"Cause: {cause} Action: {action}"


@dataclass(slots=True)
class DomainError(Exception):
    """Base exception for predictable domain failures."""

    code: str
    message: str
    status_code: int
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


class InvalidRequestError(DomainError):
    """Raised when user sends semantically invalid input."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="INVALID_REQUEST",
            message=message
            or compose_error_message(
                cause="Request data violates business rules.",
                action="Adjust the input fields and try again.",
            ),
            status_code=HTTPStatus.BAD_REQUEST,
            details=details or {},
        )


class EmptyGroupError(DomainError):
    """Raised when a settlement is requested for a group without members."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="EMPTY_GROUP",
            message=message
            or compose_error_message(
                cause="The group has no members, so no fair share is defined.",
                action="Add members to the group before settling debts.",
            ),
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            details=details or {},
        )


class UnknownPayerError(DomainError):
    """Raised when expenses reference payers outside the member roster."""

    def __init__(
        self,
        expense_ids: list[str],
        message: str | None = None,
    ) -> None:
        super().__init__(
            code="UNKNOWN_PAYER",
            message=message
            or compose_error_message(
                cause="Some expenses were paid by someone outside the group.",
                action="Exclude or reassign the listed expenses and retry.",
            ),
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            details={"expense_ids": list(expense_ids)},
        )

    @property
    def expense_ids(self) -> list[str]:
        return list(self.details["expense_ids"])


class UnknownMemberError(DomainError):
    """Raised when payments reference members outside the balance set."""

    def __init__(
        self,
        payment_ids: list[str],
        message: str | None = None,
    ) -> None:
        super().__init__(
            code="UNKNOWN_MEMBER",
            message=message
            or compose_error_message(
                cause="Some payments involve someone outside the group.",
                action="Exclude or correct the listed payments and retry.",
            ),
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            details={"payment_ids": list(payment_ids)},
        )

    @property
    def payment_ids(self) -> list[str]:
        return list(self.details["payment_ids"])


class GroupNotFoundError(DomainError):
    """Raised when the requested group does not exist."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="GROUP_NOT_FOUND",
            message=message
            or compose_error_message(
                cause="The requested group does not exist.",
                action="Check the group identifier and try again.",
            ),
            status_code=HTTPStatus.NOT_FOUND,
            details=details or {},
        )


class MemberNotFoundError(DomainError):
    """Raised when a member filter matches nobody in the group."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="MEMBER_NOT_FOUND",
            message=message
            or compose_error_message(
                cause="No group member matches the requested name.",
                action="Use the name of a current group member.",
            ),
            status_code=HTTPStatus.NOT_FOUND,
            details=details or {},
        )


class AccessDeniedError(DomainError):
    """Raised when the requester is not a member of the target group."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="ACCESS_DENIED",
            message=message
            or compose_error_message(
                cause="You are not a member of this group.",
                action="Ask a group admin for an invitation.",
            ),
            status_code=HTTPStatus.FORBIDDEN,
            details=details or {},
        )
