import logging
from typing import Union

from fastapi import BackgroundTasks

from app.core.mailer import EmailMessage, EmailSender, render_email, send_mail_in_background
from app.core.security import generate_numeric_code
from app.database.credential_store import CredentialStore
from app.modules.auth.schemas import AuthFailure, ErrorCode, RecoveryResponse, failure

logger = logging.getLogger(__name__)

RECOVERY_SUBJECT = "TrooPay - Password reset code"
RECOVERY_TITLE = "Password reset code"


def recovery_email_body(code: str) -> str:
    return f"""
    <p>We received a request to reset your password.</p>
    <div style="background: #ddd;padding: 10px; text-align: center;">
      <h2>{code}</h2>
    </div>
    <p>Please use the code above to reset your password in our app.</p>
    <p>If you did not request a password reset, ignore this email.</p>
    """


class RecoveryService:
    """Issues password reset codes. The code is only emailed, never stored."""

    def __init__(self, store: CredentialStore, sender: EmailSender):
        self.store = store
        self.sender = sender

    def request_recovery(
        self,
        email: str,
        background_tasks: BackgroundTasks
    ) -> Union[RecoveryResponse, AuthFailure]:
        user = self.store.find_user_by_email(email)

        # Google-only and placeholder accounts have no password to reset
        if not user or not user.password:
            return failure(ErrorCode.USER_DOES_NOT_EXIST)

        code = generate_numeric_code()
        message = EmailMessage(
            to=email,
            subject=RECOVERY_SUBJECT,
            html=render_email(
                RECOVERY_TITLE,
                f"{user.firstname or ''} {user.lastname or ''}",
                recovery_email_body(code)
            )
        )

        background_tasks.add_task(send_mail_in_background, self.sender, message)
        logger.info(f"Queued password recovery email for user {user.id}")

        return RecoveryResponse()
