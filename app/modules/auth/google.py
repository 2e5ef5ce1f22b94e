import logging
from typing import Optional

import httpx
from fastapi import HTTPException
from pydantic import ValidationError

from app.config import settings
from app.modules.auth.schemas import GoogleProfile

logger = logging.getLogger(__name__)


class GoogleProfileClient:
    """Exchanges a Google access token for the user's profile."""

    def __init__(
        self,
        profile_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.profile_url = profile_url or settings.google_profile_url
        self.timeout = timeout or settings.google_timeout_seconds
        self.transport = transport

    async def fetch_profile(self, access_token: str) -> GoogleProfile:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    self.profile_url,
                    headers={"Authorization": f"Bearer {access_token}"}
                )
        except httpx.HTTPError as e:
            logger.error(f"Google profile request failed: {e}")
            raise HTTPException(status_code=502, detail="Could not reach Google")

        if response.status_code != 200:
            logger.warning(f"Google profile request rejected with status {response.status_code}")
            raise HTTPException(status_code=401, detail="Invalid Google access token")

        try:
            return GoogleProfile.model_validate(response.json())
        except (ValidationError, ValueError) as e:
            logger.warning(f"Unexpected Google profile payload: {e}")
            raise HTTPException(status_code=400, detail="Invalid Google profile")


def get_google_client() -> GoogleProfileClient:
    return GoogleProfileClient()
