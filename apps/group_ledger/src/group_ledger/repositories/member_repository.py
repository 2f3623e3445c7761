"""Group roster and membership lookups."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from group_ledger.db.models.group import Group, GroupMember
from group_ledger.db.models.user import User
from group_ledger.domain.settlement import Member


class MemberRepository:
    """Repository for group rosters used by settlement flows."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def group_exists(self, group_id: str) -> bool:
        return self._session.get(Group, group_id) is not None

    def is_member(self, group_id: str, user_id: str) -> bool:
        statement = select(GroupMember.id).where(
            GroupMember.group_id == group_id,
            GroupMember.user_id == user_id,
        )
        return self._session.scalar(statement) is not None

    def list_members(self, group_id: str) -> list[Member]:
        """Return every current member, oldest membership first."""

        statement = (
            select(User.id, User.name)
            .join(GroupMember, GroupMember.user_id == User.id)
            .where(GroupMember.group_id == group_id)
            .order_by(GroupMember.joined_at.asc(), User.name.asc(), User.id.asc())
        )
        return [
            Member(member_id=str(user_id), display_name=name)
            for user_id, name in self._session.execute(statement).all()
        ]
