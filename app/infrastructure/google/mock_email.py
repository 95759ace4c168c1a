from __future__ import annotations

import logging

from app.application.ports.email_sender import EmailSenderPort


class MockEmailSender(EmailSenderPort):
    def __init__(self) -> None:
        self.sent: list[dict[str, str]] = []
        self._logger = logging.getLogger(__name__)

    def send(self, to: str, subject: str, html: str) -> None:
        self.sent.append({"to": to, "subject": subject, "html": html})
        self._logger.info("Mock email send", extra={"to": to, "subject": subject})
