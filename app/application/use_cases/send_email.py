from __future__ import annotations

import logging

from app.application.exceptions import RemoteError, ValidationError
from app.application.ports.booking_repository import BookingRepositoryPort
from app.application.ports.email_sender import EmailSenderPort


class SendEmailUseCase:
    def __init__(self, sender: EmailSenderPort, repository: BookingRepositoryPort) -> None:
        self._sender = sender
        self._repository = repository
        self._logger = logging.getLogger(__name__)

    def execute(self, to: str, subject: str, html: str, booking_id: str | None = None) -> None:
        """
        Send the email, then flag the booking as delivered when a booking id is given.
        A failure to set the flag is logged only; the email has already gone out.
        """
        if not to or not subject or not html:
            raise ValidationError("Missing required fields")

        self._sender.send(to=to, subject=subject, html=html)
        self._logger.info("Email sent", extra={"booking_id": booking_id, "to": to})

        if not booking_id:
            return
        try:
            self._repository.update_fields(booking_id, {"delivery_email_sent": True})
        except RemoteError as e:
            self._logger.error(
                "Error updating booking after email",
                extra={"booking_id": booking_id, "error": str(e)},
            )
