from pydantic import BaseModel, EmailStr
from typing import Optional, List
from datetime import datetime

from app.modules.users.schemas import User, UserPublic


class Group(BaseModel):
    id: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Membership(BaseModel):
    group_id: str
    user_id: str
    created_at: Optional[datetime] = None
    member: Optional[User] = None  # Embedded users row when listed with the member profile

    class Config:
        from_attributes = True


class MemberResponse(BaseModel):
    group_id: str
    user_id: str
    member: UserPublic


class MembersResponse(BaseModel):
    members: List[MemberResponse]


class RecentMembersResponse(BaseModel):
    members: List[UserPublic]


class MembersUpdate(BaseModel):
    members: List[EmailStr]


class ReconcileResponse(BaseModel):
    status: bool = True
    added: int = 0
    removed: int = 0
    created_users: int = 0


class StatusResponse(BaseModel):
    status: bool = True
