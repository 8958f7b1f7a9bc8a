"""Repository interfaces and adapters for group members."""

from __future__ import annotations

from typing import Any, Protocol
from uuid import uuid4

from backend.db.supabase_client import SupabaseClient
from backend.repositories.errors import RecordNotFoundError
from shared.models import Member, MemberCreateRequest, MemberUpdateRequest


MEMBERS_TABLE = "members"
_MEMBER_COLUMNS = "id,name"


class MembersRepository(Protocol):
    def list_members(self) -> list[Member]:
        """Return every member ordered by name."""

    def create_member(self, request: MemberCreateRequest) -> Member:
        """Create one member and return it with its assigned id."""

    def update_member(self, member_id: str, request: MemberUpdateRequest) -> Member:
        """Rename one member."""

    def delete_member(self, member_id: str) -> None:
        """Delete one member."""


def _row_to_member(row: dict[str, Any]) -> Member:
    return Member(id=str(row["id"]), name=str(row.get("name") or ""))


class InMemoryMembersRepository:
    """In-memory members repository used by tests/dev."""

    def __init__(self, members: list[Member] | None = None) -> None:
        self._members: list[Member] = list(members or [])

    def list_members(self) -> list[Member]:
        return sorted(self._members, key=lambda member: member.name)

    def get_member(self, member_id: str) -> Member | None:
        return next((member for member in self._members if member.id == member_id), None)

    def create_member(self, request: MemberCreateRequest) -> Member:
        member = Member(id=str(uuid4()), name=request.name)
        self._members.append(member)
        return member

    def update_member(self, member_id: str, request: MemberUpdateRequest) -> Member:
        for index, member in enumerate(self._members):
            if member.id != member_id:
                continue
            updated = member.model_copy(update={"name": request.name})
            self._members[index] = updated
            return updated
        raise RecordNotFoundError("Member not found")

    def delete_member(self, member_id: str) -> None:
        kept = [member for member in self._members if member.id != member_id]
        if len(kept) == len(self._members):
            raise RecordNotFoundError("Member not found")
        self._members = kept


class SupabaseMembersRepository:
    """Supabase-backed members repository."""

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    def list_members(self) -> list[Member]:
        rows, _ = self._client.get_rows(
            table=MEMBERS_TABLE,
            query=[("select", _MEMBER_COLUMNS), ("order", "name.asc")],
            with_count=False,
        )
        return [_row_to_member(row) for row in rows]

    def create_member(self, request: MemberCreateRequest) -> Member:
        rows = self._client.post_rows(
            table=MEMBERS_TABLE,
            payload={"name": request.name},
            query={"select": _MEMBER_COLUMNS},
        )
        if not rows:
            raise RuntimeError("Supabase did not return created member")
        return _row_to_member(rows[0])

    def update_member(self, member_id: str, request: MemberUpdateRequest) -> Member:
        rows = self._client.patch_rows(
            table=MEMBERS_TABLE,
            query={"id": f"eq.{member_id}", "select": _MEMBER_COLUMNS},
            payload={"name": request.name},
        )
        if not rows:
            raise RecordNotFoundError("Member not found")
        return _row_to_member(rows[0])

    def delete_member(self, member_id: str) -> None:
        rows = self._client.delete_rows(
            table=MEMBERS_TABLE,
            query={"id": f"eq.{member_id}", "select": "id"},
        )
        if not rows:
            raise RecordNotFoundError("Member not found")
