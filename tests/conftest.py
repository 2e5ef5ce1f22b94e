from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_password_hasher, get_token_issuer
from app.core.mailer import EmailSender, get_email_sender
from app.core.security import PasswordHasher, TokenIssuer
from app.database.credential_store import CredentialStore, StoreConflictError
from app.database.supabase_client import get_credential_store
from app.main import app
from app.modules.members.schemas import Group, Membership
from app.modules.users.schemas import User


class InMemoryCredentialStore(CredentialStore):
    """Dict-backed store enforcing the same unique constraints as the database."""

    def __init__(self) -> None:
        self.users: Dict[str, User] = {}
        self.groups: Dict[str, Group] = {}
        self.memberships: List[Membership] = []
        self.writes: List[tuple] = []
        self.reads: List[tuple] = []

    def _check_unique(self, data: Dict[str, Any], user_id: Optional[str] = None) -> None:
        for other in self.users.values():
            if other.id == user_id:
                continue
            if data.get("email") and other.email == data["email"]:
                raise StoreConflictError("users", "email")
            if data.get("google_id") and other.google_id == data["google_id"]:
                raise StoreConflictError("users", "google_id")

    def find_user_by_email(self, email: str) -> Optional[User]:
        return next((u.model_copy() for u in self.users.values() if u.email == email), None)

    def find_user_by_google_id(self, google_id: str) -> Optional[User]:
        return next((u.model_copy() for u in self.users.values() if u.google_id == google_id), None)

    def create_user(self, data: Dict[str, Any]) -> User:
        self._check_unique(data)
        user = User(id=str(uuid.uuid4()), created_at=datetime.now(timezone.utc), **data)
        self.users[user.id] = user
        self.writes.append(("create_user", user.id))
        return user.model_copy()

    def update_user(self, user_id: str, data: Dict[str, Any]) -> User:
        self._check_unique(data, user_id)
        user = self.users[user_id].model_copy(update=data)
        self.users[user_id] = user
        self.writes.append(("update_user", user_id))
        return user.model_copy()

    def find_group(self, group_id: str) -> Optional[Group]:
        return self.groups.get(group_id)

    def find_membership(self, group_id: str, user_id: str) -> Optional[Membership]:
        return next(
            (m for m in self.memberships if m.group_id == group_id and m.user_id == user_id),
            None
        )

    def list_memberships(self, group_id: str) -> List[Membership]:
        self.reads.append(("list_memberships", group_id))
        return [
            Membership(group_id=m.group_id, user_id=m.user_id, created_at=m.created_at,
                       member=self.users[m.user_id].model_copy())
            for m in self.memberships if m.group_id == group_id
        ]

    def list_memberships_for_user(self, user_id: str) -> List[Membership]:
        return [m for m in self.memberships if m.user_id == user_id]

    def list_memberships_in_groups(self, group_ids: List[str]) -> List[Membership]:
        self.reads.append(("list_memberships_in_groups", tuple(group_ids)))
        wanted = set(group_ids)
        return [
            Membership(group_id=m.group_id, user_id=m.user_id, created_at=m.created_at,
                       member=self.users[m.user_id].model_copy())
            for m in self.memberships if m.group_id in wanted
        ]

    def create_membership(self, group_id: str, user_id: str) -> Membership:
        if self.find_membership(group_id, user_id):
            raise StoreConflictError("members", "group_id, user_id")
        membership = Membership(group_id=group_id, user_id=user_id, created_at=datetime.now(timezone.utc))
        self.memberships.append(membership)
        self.writes.append(("create_membership", group_id, user_id))
        return membership

    def delete_membership(self, group_id: str, user_id: str) -> bool:
        before = len(self.memberships)
        self.memberships = [
            m for m in self.memberships if not (m.group_id == group_id and m.user_id == user_id)
        ]
        self.writes.append(("delete_membership", group_id, user_id))
        return len(self.memberships) < before

    # Test helpers

    def add_group(self, name: str = "Trip") -> Group:
        group = Group(id=str(uuid.uuid4()), name=name)
        self.groups[group.id] = group
        return group

    def add_user(self, email: str, **fields: Any) -> User:
        return self.create_user({"email": email, **fields})

    def join(self, group: Group, user: User) -> None:
        self.create_membership(group.id, user.id)

    def member_emails(self, group_id: str) -> List[str]:
        return sorted(m.member.email for m in self.list_memberships(group_id))


class RecordingEmailSender(EmailSender):
    def __init__(self, fail: bool = False) -> None:
        super().__init__(host="smtp.test", port=25, sender="no-reply@troopay.test")
        self.fail = fail
        self.sent: List[Dict[str, str]] = []

    def send(self, to: str, subject: str, html_body: str) -> Dict[str, Any]:
        if self.fail:
            raise ConnectionRefusedError("SMTP server unavailable")
        self.sent.append({"to": to, "subject": subject, "html": html_body})
        return {"accepted": [to], "rejected": []}


@pytest.fixture()
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture()
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture()
def tokens() -> TokenIssuer:
    return TokenIssuer(secret="tests-secret-key", algorithm="HS256", expire_days=60)


@pytest.fixture()
def mail() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture()
def client(store, hasher, tokens, mail):
    app.dependency_overrides[get_credential_store] = lambda: store
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_token_issuer] = lambda: tokens
    app.dependency_overrides[get_email_sender] = lambda: mail
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(tokens):
    def _headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {tokens.issue(user)}"}
    return _headers
