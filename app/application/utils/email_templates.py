from __future__ import annotations

import html
from dataclasses import dataclass

from app.application.utils.formatting import format_address
from app.domain.entities.booking import Booking


@dataclass(frozen=True)
class ComposedEmail:
    to: str
    subject: str
    text: str

    @property
    def html(self) -> str:
        paragraphs = self.text.split("\n\n")
        return "".join(
            f"<p>{html.escape(p).replace(chr(10), '<br>')}</p>" for p in paragraphs
        )


def compose_media_ready_email(booking: Booking, business_name: str, signature: str) -> ComposedEmail:
    first_name = booking.agent_name.split(" ")[0] if booking.agent_name else "there"
    address = format_address(booking.address) if not booking.address.is_empty() else "your property"
    services = ", ".join(f"{s.name} ({s.count})" for s in booking.services) or "N/A"
    shoot = f"{booking.preferred_date or ''} {booking.time or ''}".strip() or "N/A"

    body = (
        f"Hi {first_name},\n\n"
        f"Thanks again for choosing {business_name}! Your final media for the listing at {address} is now ready.\n\n"
        f"Property: {address}\n"
        f"Shoot Date: {shoot}\n"
        f"Services Completed: {services}\n\n"
        f"Final Media Download: {booking.final_edits_link or 'Link not available'}\n"
        f"Invoice: {booking.invoice_link or 'Link not available'}\n\n"
        "If you have any questions or need revisions, just let us know. "
        "We look forward to working with you again soon!\n\n"
        f"Best,\n{signature}"
    )
    return ComposedEmail(
        to=booking.agent_email,
        subject=f"Your Final Photos for {address} Are Ready!",
        text=body,
    )
