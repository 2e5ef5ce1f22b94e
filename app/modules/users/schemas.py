from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from datetime import datetime


class User(BaseModel):
    """Stored user record, password hash included. Never returned to clients."""
    id: str
    email: str
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    google_id: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_placeholder(self) -> bool:
        return not self.password and not self.google_id

    class Config:
        from_attributes = True


class UserPublic(BaseModel):
    id: str
    email: str
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    avatar_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("avatar_url", "avatarUrl"),
        serialization_alias="avatarUrl"
    )  # Same spelling as the token claim

    class Config:
        from_attributes = True
