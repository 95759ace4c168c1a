from __future__ import annotations

import base64
import logging
from email.message import EmailMessage

import httpx

from app.application.exceptions import RemoteError
from app.application.ports.email_sender import EmailSenderPort
from app.core.config import settings
from app.infrastructure.google.oauth_client import GoogleOAuthClient


GMAIL_SEND_URL = "https://gmail.googleapis.com/gmail/v1/users/me/messages/send"


def encode_message(to: str, subject: str, html: str, sender: str | None = None) -> str:
    message = EmailMessage()
    message["To"] = to
    message["Subject"] = subject
    if sender:
        message["From"] = sender
    message.set_content(html, subtype="html", charset="utf-8")
    return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii").rstrip("=")


class GmailSender(EmailSenderPort):
    def __init__(
        self,
        oauth: GoogleOAuthClient,
        refresh_token: str,
        sender: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._oauth = oauth
        self._refresh_token = refresh_token
        self._sender = sender
        self._access_token: str | None = None
        self._client = client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    def send(self, to: str, subject: str, html: str) -> None:
        raw = encode_message(to, subject, html, self._sender)
        if self._access_token is None:
            self._access_token = self._oauth.refresh_access_token(self._refresh_token)

        resp = self._post(raw)
        if resp.status_code == 401:
            # Access tokens expire after an hour; refresh once and retry
            self._logger.info("Gmail access token rejected, refreshing")
            self._access_token = self._oauth.refresh_access_token(self._refresh_token)
            resp = self._post(raw)

        if resp.status_code >= 400:
            try:
                message = resp.json().get("error", {}).get("message") or resp.text
            except Exception:
                message = resp.text
            self._logger.error(
                "Gmail send failed",
                extra={"status": resp.status_code, "error": message, "to": to},
            )
            raise RemoteError("Failed to send email", status_code=resp.status_code)

    def _post(self, raw: str) -> httpx.Response:
        try:
            return self._client.post(
                GMAIL_SEND_URL,
                json={"raw": raw},
                headers={"Authorization": f"Bearer {self._access_token}"},
            )
        except httpx.HTTPError as e:
            self._logger.error("Gmail send failed", extra={"error": str(e)})
            raise RemoteError("Failed to send email") from e
