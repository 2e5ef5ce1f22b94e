import logging
from typing import Union

from app.core.security import PasswordHasher, TokenIssuer
from app.database.credential_store import CredentialStore
from app.modules.auth.schemas import (
    AuthFailure, ErrorCode, GoogleAuthResponse, GoogleProfile,
    SignInRequest, SignInResponse, SignUpRequest, SignUpResponse, failure
)
from app.modules.users.schemas import User, UserPublic

logger = logging.getLogger(__name__)


class AuthService:
    """
    Resolves credentials to a single user record per email.

    Every email is in one of three states: no user, placeholder (added to a group
    but never signed up, no credential), or credentialed (password hash and/or
    google_id). Password and Google flows branch on the same states so that they
    converge on one user instead of creating a second record for the email.
    """

    def __init__(self, store: CredentialStore, hasher: PasswordHasher, tokens: TokenIssuer):
        self.store = store
        self.hasher = hasher
        self.tokens = tokens

    def sign_in(self, credentials: SignInRequest) -> Union[SignInResponse, AuthFailure]:
        user = self.store.find_user_by_email(credentials.email)

        if not user or user.is_placeholder:
            return failure(ErrorCode.USER_DOES_NOT_EXIST)

        # Google-only users have no hash and fall through to INVALID_PASSWORD
        if not self.hasher.verify(credentials.password, user.password):
            return failure(ErrorCode.INVALID_PASSWORD)

        return SignInResponse(
            token=self.tokens.issue(user),
            user=UserPublic.model_validate(user)
        )

    def sign_up(self, register_data: SignUpRequest) -> Union[SignUpResponse, AuthFailure]:
        user = self.store.find_user_by_email(register_data.email)

        if user and user.google_id:
            return failure(ErrorCode.USER_AUTHENTICATED_WITH_GOOGLE)
        if user and user.password:
            return failure(ErrorCode.USER_ALREADY_EXISTS)

        data = {
            "firstname": register_data.firstname,
            "lastname": register_data.lastname,
            "email": register_data.email,
            "password": self.hasher.hash(register_data.password),
        }

        if user:
            # Placeholder: complete it in place so its id and memberships survive
            user = self.store.update_user(user.id, data)
            logger.info(f"Completed placeholder user {user.id} via sign-up")
        else:
            user = self.store.create_user(data)
            logger.info(f"Registered user {user.id}")

        return SignUpResponse(token=self.tokens.issue(user))

    def resolve_google_user(self, profile: GoogleProfile) -> GoogleAuthResponse:
        user = self.store.find_user_by_google_id(profile.id)

        if not user:
            user = self._link_or_create_google_user(profile)

        return GoogleAuthResponse(
            token=self.tokens.issue(user),
            user=UserPublic.model_validate(user)
        )

    def _link_or_create_google_user(self, profile: GoogleProfile) -> User:
        data = {
            "google_id": profile.id,
            "firstname": profile.given_name,
            "lastname": profile.family_name,
            "email": profile.email,
            "avatar_url": str(profile.picture),
        }

        existing = self.store.find_user_by_email(profile.email)
        if existing:
            user = self.store.update_user(existing.id, data)
            logger.info(f"Linked Google account onto existing user {user.id}")
            return user

        user = self.store.create_user(data)
        logger.info(f"Created user {user.id} from Google sign-in")
        return user
