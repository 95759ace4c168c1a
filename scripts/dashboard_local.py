#!/usr/bin/env python3
"""
Interactive local dashboard console (no HTTP, no browser).

Usage:
  python3 scripts/dashboard_local.py

What it does:
- Loads bookings through the same wiring the API uses (JSON store in dev)
- Lists, filters and sorts bookings, stages status edits and saves them together
- Opens a booking in an edit session to change services and save the draft
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv()

from app.application.exceptions import DashboardError
from app.application.use_cases.edit_session import BookingEditSession
from app.application.use_cases.table_editor import TableAggregateEditor
from app.application.utils.email_templates import compose_media_ready_email
from app.application.utils.formatting import format_currency, format_date, format_short_address
from app.core.config import settings
from app.wiring.dependencies import get_synchronizer, new_edit_session, new_table_editor


def _print_header() -> None:
    print("\nLocal Booking Dashboard")
    print("-" * 60)
    print("Commands: /list, /refresh, /filter <field> <value>, /sort <field>,")
    print("          /set <id> <field> <value>, /save, /discard, /open <id>, /quit")
    print("-" * 60)


def _print_rows(editor: TableAggregateEditor) -> None:
    rows = editor.visible()
    if not rows:
        print("No bookings found.")
        return
    print(f"\n{len(rows)} booking(s), sorted by {editor.sort_field} {editor.sort_direction}")
    for b in rows:
        marker = "*" if b.id in editor.pending else " "
        print(
            f"{marker} {b.id:<12} {format_date(b.preferred_date):<14} "
            f"{format_short_address(b.address)[:30]:<30} "
            f"{editor.display_value(b, 'status'):<10} "
            f"{editor.display_value(b, 'payment_status'):<9} "
            f"{editor.display_value(b, 'editing_status'):<13} "
            f"{format_currency(b.total_amount)}"
        )


def _print_session(session: BookingEditSession) -> None:
    draft = session.draft
    quote = session.quote()
    print(f"\nBooking {draft.id} ({draft.agent_name or 'N/A'}) - {draft.property_size or 'no size'}")
    for idx, s in enumerate(draft.services):
        print(f"  [{idx}] {s.name} x{s.count} @ {format_currency(s.price)}")
    print(f"  Subtotal: {format_currency(quote.subtotal)}")
    if quote.tier.percent:
        print(f"  Discount {quote.tier.percent}%: -{format_currency(quote.discount_amount)}")
    print(f"  Total: {format_currency(quote.total)}")
    print(f"  Project folders: {'created' if draft.has_project_folders() else 'not created'}")
    if session.is_dirty:
        print("  (unsaved changes)")


def _edit_loop(session: BookingEditSession) -> None:
    print("Edit commands: /add <name>, /custom <price> <name>, /inc <name>, /dec <name>,")
    print("               /up <index>, /down <index>, /size <category>, /field <name> <value>,")
    print("               /catalog, /folders, /email, /save, /close")
    _print_session(session)
    while True:
        try:
            text = input("\nedit> ").strip()
        except (EOFError, KeyboardInterrupt):
            return
        if not text:
            continue
        cmd, _, rest = text.partition(" ")
        cmd = cmd.lower()
        try:
            if cmd == "/close":
                if session.is_dirty:
                    print("Discarding unsaved changes.")
                return
            elif cmd == "/catalog":
                for entry in session.available_services():
                    print(f"  {entry.name}: {format_currency(entry.price)}")
                continue
            elif cmd == "/add":
                session.add_service(rest)
            elif cmd == "/custom":
                price, _, name = rest.partition(" ")
                if not session.add_custom_service(name, price):
                    print("Enter a service name and a valid price.")
                    continue
            elif cmd == "/inc":
                session.increment(rest)
            elif cmd == "/dec":
                session.decrement(rest)
            elif cmd in ("/up", "/down"):
                session.reorder(int(rest), cmd[1:])
            elif cmd == "/size":
                session.set_field("property_size", rest)
            elif cmd == "/field":
                name, _, value = rest.partition(" ")
                session.set_field(name, value)
            elif cmd == "/save":
                session.save()
                print("Changes saved successfully.")
            elif cmd == "/folders":
                folders = session.create_project_folders()
                print(f"Raw photos: {folders.raw_photos_link}")
                print(f"Final edits: {folders.final_edits_link}")
            elif cmd == "/email":
                email = compose_media_ready_email(session.persisted, settings.BUSINESS_NAME, settings.BUSINESS_SIGNATURE)
                print(email.text)
                if input("Send this email? [y/N] ").strip().lower() != "y":
                    continue
                session.send_email(email.to, email.subject, email.html)
                print(f"Email sent to {email.to}")
            else:
                print("Unknown command.")
                continue
        except (RuntimeError, ValueError) as e:
            print(f"Error: {e}")
            continue
        _print_session(session)


def main() -> None:
    sync = get_synchronizer()
    sync.fetch()
    if sync.error:
        print(sync.error)
    editor = new_table_editor(sync)
    _print_header()
    _print_rows(editor)

    while True:
        try:
            text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return
        if not text:
            continue

        cmd, *args = text.split()
        cmd = cmd.lower()
        try:
            if cmd in ("/quit", "/exit"):
                if editor.has_pending_changes():
                    print("Pending status changes were not saved.")
                print("Bye!")
                return
            elif cmd == "/list":
                _print_rows(editor)
            elif cmd == "/refresh":
                sync.refresh()
                editor.load(sync.bookings)
                _print_rows(editor)
            elif cmd == "/filter" and len(args) == 2:
                editor.set_filter(args[0], args[1])
                _print_rows(editor)
            elif cmd == "/sort" and len(args) == 1:
                editor.sort_by(args[0])
                _print_rows(editor)
            elif cmd == "/set" and len(args) == 3:
                editor.set_status_field(args[0], args[1], args[2])
                _print_rows(editor)
            elif cmd == "/save":
                saved = editor.save_all()
                print(f"Saved {len(saved)} booking(s).")
                _print_rows(editor)
            elif cmd == "/discard":
                editor.discard_changes()
                _print_rows(editor)
            elif cmd == "/open" and len(args) == 1:
                booking = next((b for b in editor.bookings if b.id == args[0]), None)
                if booking is None:
                    print("Booking not found.")
                    continue
                _edit_loop(new_edit_session(booking))
                sync.refresh()
                editor.load(sync.bookings)
            else:
                print("Unknown command. Type /quit to exit.")
        except DashboardError as e:
            print(f"Error: {e}")


if __name__ == "__main__":
    main()
