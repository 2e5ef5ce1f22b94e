"""
Credential store: read/write access to users, groups and memberships.

Services depend on the abstract CredentialStore; SupabaseCredentialStore is the
production implementation over the Supabase table API. Multi-step writes are not
wrapped in a transaction (PostgREST has none across calls), so the unique
constraints on users.email, users.google_id and members(group_id, user_id) are
what prevents duplicates. A violated constraint is raised as StoreConflictError.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from supabase import Client, PostgrestAPIError

from app.modules.members.schemas import Group, Membership
from app.modules.users.schemas import User

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"

MEMBERSHIP_WITH_USER = "group_id, user_id, created_at, member:users(*)"


class StoreConflictError(Exception):
    """A write collided with a uniqueness constraint (concurrent create)."""

    def __init__(self, table: str, detail: str = ""):
        self.table = table
        self.detail = detail
        super().__init__(f"Conflicting write on {table}: {detail}" if detail else f"Conflicting write on {table}")


class CredentialStore(ABC):
    @abstractmethod
    def find_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def find_user_by_google_id(self, google_id: str) -> Optional[User]:
        ...

    @abstractmethod
    def create_user(self, data: Dict[str, Any]) -> User:
        ...

    @abstractmethod
    def update_user(self, user_id: str, data: Dict[str, Any]) -> User:
        ...

    @abstractmethod
    def find_group(self, group_id: str) -> Optional[Group]:
        ...

    @abstractmethod
    def find_membership(self, group_id: str, user_id: str) -> Optional[Membership]:
        ...

    @abstractmethod
    def list_memberships(self, group_id: str) -> List[Membership]:
        """Memberships of a group, each with its member user embedded."""

    @abstractmethod
    def list_memberships_for_user(self, user_id: str) -> List[Membership]:
        ...

    @abstractmethod
    def list_memberships_in_groups(self, group_ids: List[str]) -> List[Membership]:
        """Memberships of several groups in one read, member user embedded, oldest first."""

    @abstractmethod
    def create_membership(self, group_id: str, user_id: str) -> Membership:
        ...

    @abstractmethod
    def delete_membership(self, group_id: str, user_id: str) -> bool:
        ...


class SupabaseCredentialStore(CredentialStore):
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _insert(self, table: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = self.supabase.table(table).insert(data).execute()
        except PostgrestAPIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.warning(f"Unique violation inserting into {table}: {e.message}")
                raise StoreConflictError(table, e.message or "") from e
            raise
        if not result.data:
            raise RuntimeError(f"Insert into {table} returned no rows")
        return result.data[0]

    def _find_user(self, column: str, value: str) -> Optional[User]:
        result = self.supabase.table("users")\
            .select("*")\
            .eq(column, value)\
            .limit(1)\
            .execute()
        return User(**result.data[0]) if result.data else None

    def find_user_by_email(self, email: str) -> Optional[User]:
        return self._find_user("email", email)

    def find_user_by_google_id(self, google_id: str) -> Optional[User]:
        return self._find_user("google_id", google_id)

    def create_user(self, data: Dict[str, Any]) -> User:
        return User(**self._insert("users", data))

    def update_user(self, user_id: str, data: Dict[str, Any]) -> User:
        try:
            result = self.supabase.table("users")\
                .update(data)\
                .eq("id", user_id)\
                .execute()
        except PostgrestAPIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise StoreConflictError("users", e.message or "") from e
            raise
        if not result.data:
            raise LookupError(f"User {user_id} vanished during update")
        return User(**result.data[0])

    def find_group(self, group_id: str) -> Optional[Group]:
        result = self.supabase.table("groups")\
            .select("*")\
            .eq("id", group_id)\
            .limit(1)\
            .execute()
        return Group(**result.data[0]) if result.data else None

    def find_membership(self, group_id: str, user_id: str) -> Optional[Membership]:
        result = self.supabase.table("members")\
            .select("group_id, user_id, created_at")\
            .eq("group_id", group_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return Membership(**result.data[0]) if result.data else None

    def list_memberships(self, group_id: str) -> List[Membership]:
        result = self.supabase.table("members")\
            .select(MEMBERSHIP_WITH_USER)\
            .eq("group_id", group_id)\
            .order("created_at")\
            .execute()
        return [Membership(**row) for row in result.data or []]

    def list_memberships_for_user(self, user_id: str) -> List[Membership]:
        result = self.supabase.table("members")\
            .select("group_id, user_id, created_at")\
            .eq("user_id", user_id)\
            .order("created_at")\
            .execute()
        return [Membership(**row) for row in result.data or []]

    def list_memberships_in_groups(self, group_ids: List[str]) -> List[Membership]:
        if not group_ids:
            return []
        result = self.supabase.table("members")\
            .select(MEMBERSHIP_WITH_USER)\
            .in_("group_id", group_ids)\
            .order("created_at")\
            .execute()
        return [Membership(**row) for row in result.data or []]

    def create_membership(self, group_id: str, user_id: str) -> Membership:
        return Membership(**self._insert("members", {"group_id": group_id, "user_id": user_id}))

    def delete_membership(self, group_id: str, user_id: str) -> bool:
        result = self.supabase.table("members")\
            .delete()\
            .eq("group_id", group_id)\
            .eq("user_id", user_id)\
            .execute()
        return len(result.data or []) > 0
