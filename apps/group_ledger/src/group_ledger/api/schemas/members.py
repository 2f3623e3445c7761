"""Pydantic schemas for group member endpoints."""

from __future__ import annotations

from pydantic import BaseModel

from group_ledger.domain.settlement import Member


class MemberResponse(BaseModel):
    """Public member representation."""

    id: str
    display_name: str

    @classmethod
    def from_member(cls, member: Member) -> MemberResponse:
        return cls(id=member.member_id, display_name=member.display_name)


class MembersListResponse(BaseModel):
    """Members list payload."""

    members: list[MemberResponse]

    @classmethod
    def from_members(cls, members: list[Member]) -> MembersListResponse:
        return cls(members=[MemberResponse.from_member(item) for item in members])
