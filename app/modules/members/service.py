import logging
from typing import Dict, List

from fastapi import HTTPException

from app.database.credential_store import CredentialStore
from app.modules.members.schemas import (
    MemberResponse, Membership, ReconcileResponse, StatusResponse
)
from app.modules.users.schemas import User, UserPublic

logger = logging.getLogger(__name__)


class MemberService:
    def __init__(self, store: CredentialStore):
        self.store = store

    def _require_group(self, group_id: str) -> None:
        if not self.store.find_group(group_id):
            raise HTTPException(status_code=404, detail="Group not found")

    def list_members(self, group_id: str) -> List[MemberResponse]:
        """List the members of a group with their profiles"""
        self._require_group(group_id)
        return [
            MemberResponse(
                group_id=m.group_id,
                user_id=m.user_id,
                member=UserPublic.model_validate(m.member)
            )
            for m in self.store.list_memberships(group_id)
            if m.member
        ]

    def list_recent_members(self, user_id: str) -> List[UserPublic]:
        """Everyone who shares a group with the user, once each, excluding the user"""
        group_ids = list(dict.fromkeys(m.group_id for m in self.store.list_memberships_for_user(user_id)))
        group_order = {group_id: index for index, group_id in enumerate(group_ids)}

        # Stable sort keeps the store's within-group order
        rows = sorted(
            self.store.list_memberships_in_groups(group_ids),
            key=lambda m: group_order.get(m.group_id, len(group_order))
        )

        seen: Dict[str, UserPublic] = {}
        for m in rows:
            if not m.member or m.user_id == user_id or m.user_id in seen:
                continue
            seen[m.user_id] = UserPublic.model_validate(m.member)
        return list(seen.values())

    def reconcile(self, group_id: str, emails: List[str]) -> ReconcileResponse:
        """
        Converge the group's members to exactly the users owning `emails`.

        Additions run first; removals then re-read the group so a row added in the
        first pass is never deleted. Rows whose email is in both the current and
        target sets are left untouched. The two passes are not atomic: concurrent
        reconciliations of one group interleave and rely on the (group_id, user_id)
        unique constraint.
        """
        self._require_group(group_id)

        targets = list(dict.fromkeys(emails))
        result = ReconcileResponse()

        for email in targets:
            user = self.store.find_user_by_email(email)
            if not user:
                user = self._create_placeholder(email)
                result.created_users += 1

            if self.store.find_membership(group_id, user.id):
                continue
            self.store.create_membership(group_id, user.id)
            result.added += 1

        wanted = set(targets)
        for membership in self.store.list_memberships(group_id):
            if self._member_email(membership) in wanted:
                continue
            if self.store.delete_membership(membership.group_id, membership.user_id):
                result.removed += 1

        logger.info(
            f"Reconciled group {group_id}: +{result.added} -{result.removed} "
            f"({result.created_users} placeholder users created)"
        )
        return result

    def remove_member(self, group_id: str, user_id: str) -> StatusResponse:
        """Remove one member from the group"""
        if not self.store.find_membership(group_id, user_id):
            raise HTTPException(status_code=404, detail="Member not found")
        self.store.delete_membership(group_id, user_id)
        return StatusResponse()

    def _create_placeholder(self, email: str) -> User:
        user = self.store.create_user({"email": email})
        logger.info(f"Created placeholder user {user.id} for group invite")
        return user

    @staticmethod
    def _member_email(membership: Membership) -> str:
        return membership.member.email if membership.member else ""
