from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from app.application.exceptions import RemoteError
from app.core.config import settings


GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GMAIL_SEND_SCOPE = "https://www.googleapis.com/auth/gmail.send"


class GoogleOAuthClient:
    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        redirect_uri: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._client_id = client_id or settings.GOOGLE_CLIENT_ID
        self._client_secret = client_secret or settings.GOOGLE_CLIENT_SECRET
        self._redirect_uri = redirect_uri or settings.GOOGLE_REDIRECT_URI
        self._client = client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    @property
    def configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    def consent_url(self, state: str | None = None) -> str:
        params = {
            "client_id": self._client_id or "",
            "redirect_uri": self._redirect_uri or "",
            "response_type": "code",
            "scope": GMAIL_SEND_SCOPE,
            # offline access is what yields a refresh token
            "access_type": "offline",
            "prompt": "consent",
        }
        if state:
            params["state"] = state
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    def exchange_code(self, code: str) -> dict[str, Any]:
        tokens = self._token_request(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._redirect_uri or "",
            },
            action="exchange code",
        )
        if not tokens.get("refresh_token"):
            self._logger.warning("No refresh token received; the consent URL must request offline access")
        return tokens

    def refresh_access_token(self, refresh_token: str) -> str:
        tokens = self._token_request(
            {"grant_type": "refresh_token", "refresh_token": refresh_token},
            action="refresh token",
        )
        access_token = tokens.get("access_token")
        if not access_token:
            raise RemoteError("No access token returned from Google")
        return access_token

    def _token_request(self, data: dict[str, str], action: str) -> dict[str, Any]:
        payload = {
            "client_id": self._client_id or "",
            "client_secret": self._client_secret or "",
            **data,
        }
        try:
            resp = self._client.post(GOOGLE_TOKEN_URL, data=payload)
        except httpx.HTTPError as e:
            self._logger.error(f"Google {action} failed", extra={"error": str(e)})
            raise RemoteError(str(e)) from e
        if resp.status_code >= 400:
            try:
                body = resp.json()
                message = body.get("error_description") or body.get("error") or resp.text
            except Exception:
                message = resp.text
            self._logger.error(f"Google {action} failed", extra={"status": resp.status_code, "error": message})
            raise RemoteError(message, status_code=resp.status_code)
        return resp.json()
