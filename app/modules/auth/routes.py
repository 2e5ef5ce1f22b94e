from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from starlette.concurrency import run_in_threadpool
from app.core.dependencies import authenticate, get_password_hasher, get_token_issuer
from app.core.mailer import EmailSender, get_email_sender
from app.core.security import PasswordHasher, TokenIssuer
from app.database.credential_store import CredentialStore
from app.database.supabase_client import get_credential_store
from app.modules.auth.google import GoogleProfileClient, get_google_client
from app.modules.auth.recovery import RecoveryService
from app.modules.auth.schemas import (
    AuthFailure, GoogleAuthRequest, GoogleAuthResponse, MeResponse,
    PasswordRecoveryRequest, RecoveryResponse, SignInRequest, SignInResponse,
    SignUpRequest, SignUpResponse
)
from app.modules.auth.service import AuthService
from typing import Any, Dict, Union

router = APIRouter(tags=["auth"])


def get_auth_service(
    store: CredentialStore = Depends(get_credential_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenIssuer = Depends(get_token_issuer)
) -> AuthService:
    return AuthService(store, hasher, tokens)


def get_recovery_service(
    store: CredentialStore = Depends(get_credential_store),
    sender: EmailSender = Depends(get_email_sender)
) -> RecoveryService:
    return RecoveryService(store, sender)


@router.get("/me", response_model=MeResponse)
async def me(claims: Dict[str, Any] = Depends(authenticate)):
    """Claims of the current session token"""
    return MeResponse(user=claims)


@router.post("/sign-in", response_model=Union[AuthFailure, SignInResponse])
def sign_in(
    credentials: SignInRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Sign in with email and password"""
    return service.sign_in(credentials)


@router.post("/sign-up", response_model=Union[AuthFailure, SignUpResponse], status_code=201)
def sign_up(
    register_data: SignUpRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service)
):
    """Register with email and password, completing a placeholder account if one exists"""
    result = service.sign_up(register_data)
    if isinstance(result, AuthFailure):
        response.status_code = status.HTTP_200_OK
    return result


@router.post("/google-auth", response_model=GoogleAuthResponse)
async def google_auth(
    body: GoogleAuthRequest,
    service: AuthService = Depends(get_auth_service),
    google: GoogleProfileClient = Depends(get_google_client)
):
    """Sign in with a Google access token, linking onto an existing account by email"""
    profile = await google.fetch_profile(body.accessToken)
    return await run_in_threadpool(service.resolve_google_user, profile)


@router.post("/password-recovery", response_model=Union[AuthFailure, RecoveryResponse])
def password_recovery(
    body: PasswordRecoveryRequest,
    background_tasks: BackgroundTasks,
    service: RecoveryService = Depends(get_recovery_service)
):
    """Email a password reset code. Delivery happens after the response is sent."""
    return service.request_recovery(body.email, background_tasks)
