"""Per-request context carrying the caller identity and membership cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from group_ledger.domain.errors import AccessDeniedError, GroupNotFoundError


class MembershipLookupProtocol(Protocol):
    """Membership queries needed by the request context."""

    def group_exists(self, group_id: str) -> bool: ...

    def is_member(self, group_id: str, user_id: str) -> bool: ...


@dataclass(slots=True)
class RequestContext:
    """Short-lived context created for one request and passed explicitly.

    Membership answers are memoized per group for the lifetime of the
    context only.
    """

    user_id: str
    membership_lookup: MembershipLookupProtocol
    _memberships: dict[str, bool] = field(default_factory=dict, repr=False)

    def ensure_member(self, group_id: str) -> None:
        """Raise unless the caller belongs to the group."""

        cached = self._memberships.get(group_id)
        if cached is None:
            if not self.membership_lookup.group_exists(group_id):
                raise GroupNotFoundError(details={"group_id": group_id})
            cached = self.membership_lookup.is_member(group_id, self.user_id)
            self._memberships[group_id] = cached
        if not cached:
            raise AccessDeniedError(details={"group_id": group_id})
