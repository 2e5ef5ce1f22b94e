from enum import Enum
from pydantic import BaseModel, EmailStr, Field, HttpUrl
from typing import Any, Dict, Optional

from app.modules.users.schemas import UserPublic


class ErrorCode(str, Enum):
    USER_DOES_NOT_EXIST = "USER_DOES_NOT_EXIST"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    USER_ALREADY_EXISTS = "USER_ALREADY_EXISTS"
    USER_AUTHENTICATED_WITH_GOOGLE = "USER_AUTHENTICATED_WITH_GOOGLE"


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


class SignUpRequest(BaseModel):
    firstname: str = Field(min_length=3)
    lastname: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=6)


class GoogleAuthRequest(BaseModel):
    accessToken: str


class GoogleProfile(BaseModel):
    """Subset of the Google userinfo payload."""
    id: str
    email: EmailStr
    given_name: str
    family_name: str
    picture: HttpUrl


class PasswordRecoveryRequest(BaseModel):
    email: EmailStr


class AuthFailure(BaseModel):
    status: bool = False
    message: str
    error: ErrorCode


class SignInResponse(BaseModel):
    status: bool = True
    token: str
    user: UserPublic


class SignUpResponse(BaseModel):
    status: bool = True
    message: str = "User registered successfully."
    token: str


class GoogleAuthResponse(BaseModel):
    status: bool = True
    token: str
    user: UserPublic


class RecoveryResponse(BaseModel):
    status: bool = True


class MeResponse(BaseModel):
    user: Dict[str, Any]


def failure(error: ErrorCode, message: Optional[str] = None) -> AuthFailure:
    return AuthFailure(message=message or FAILURE_MESSAGES[error], error=error)


FAILURE_MESSAGES = {
    ErrorCode.USER_DOES_NOT_EXIST: "User does not exist.",
    ErrorCode.INVALID_PASSWORD: "Invalid password.",
    ErrorCode.USER_ALREADY_EXISTS: "User already registered.",
    ErrorCode.USER_AUTHENTICATED_WITH_GOOGLE: "User authenticated with Google.",
}
