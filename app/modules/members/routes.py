from fastapi import APIRouter, Depends
from app.core.dependencies import authenticate, get_current_user_id
from app.database.credential_store import CredentialStore
from app.database.supabase_client import get_credential_store
from app.modules.members.schemas import (
    MembersResponse, MembersUpdate, RecentMembersResponse,
    ReconcileResponse, StatusResponse
)
from app.modules.members.service import MemberService

router = APIRouter(tags=["members"], dependencies=[Depends(authenticate)])


def get_member_service(store: CredentialStore = Depends(get_credential_store)) -> MemberService:
    return MemberService(store)


@router.get("/groups/{group_id}/members", response_model=MembersResponse)
def list_members(
    group_id: str,
    service: MemberService = Depends(get_member_service)
):
    """List all members of a group"""
    return MembersResponse(members=service.list_members(group_id))


@router.get("/recent-members", response_model=RecentMembersResponse)
def list_recent_members(
    user_id: str = Depends(get_current_user_id),
    service: MemberService = Depends(get_member_service)
):
    """People the caller shares at least one group with"""
    return RecentMembersResponse(members=service.list_recent_members(user_id))


@router.patch("/groups/{group_id}/members", response_model=ReconcileResponse)
def update_members(
    group_id: str,
    body: MembersUpdate,
    service: MemberService = Depends(get_member_service)
):
    """Replace the group's member list; unknown emails get placeholder accounts"""
    return service.reconcile(group_id, [str(email) for email in body.members])


@router.delete("/groups/{group_id}/members/{user_id}", response_model=StatusResponse)
def remove_member(
    group_id: str,
    user_id: str,
    service: MemberService = Depends(get_member_service)
):
    """Remove a member from the group"""
    return service.remove_member(group_id, user_id)
