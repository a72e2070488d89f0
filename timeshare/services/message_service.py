"""
Host side of the vote flow: editing sessions and outgoing message composition.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from html import escape
from typing import Callable, Optional

from timeshare.config import settings
from timeshare.ledger import VoteLedger, build_message_url, parse_message_url
from timeshare.utils import get_logger

log = get_logger("services.message")

MODE_CREATE_EVENT = "create_event"
MODE_SELECT_DATES = "select_dates"

# UIColor.darkGray
_TEXT_COLOR = "#555555"
_LINE_HEIGHT = 1.25
_CHAR_WIDTH = 0.55

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

SaveCallback = Callable[[list[datetime], list[tuple[str, str]]], "ComposedMessage"]


def display_date(value: datetime) -> str:
    """Long date, short time — e.g. "January 1, 2024 at 10:00 AM"."""
    d = value.astimezone(timezone.utc)
    hour = d.hour % 12 or 12
    meridiem = "AM" if d.hour < 12 else "PM"
    return f"{_MONTHS[d.month - 1]} {d.day}, {d.year} at {hour}:{d.minute:02d} {meridiem}"


@dataclass
class ComposedMessage:
    url: str
    caption: str
    payload: list[tuple[str, str]]
    preview_lines: list[str] = field(default_factory=list)
    image_svg: str = ""


class MessageComposer:
    """Turns a finalized payload into the message handed to the conversation."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        caption: Optional[str] = None,
        inset: Optional[int] = None,
        font_size: Optional[int] = None,
    ):
        self.base_url = settings.MESSAGE_BASE_URL if base_url is None else base_url
        self.caption = settings.MESSAGE_CAPTION if caption is None else caption
        self.inset = settings.RENDER_INSET if inset is None else inset
        self.font_size = settings.RENDER_FONT_SIZE if font_size is None else font_size

    def compose(self, dates: list[datetime], payload: list[tuple[str, str]]) -> ComposedMessage:
        lines = [display_date(d) for d in dates]
        message = ComposedMessage(
            url=build_message_url(payload, self.base_url),
            caption=self.caption,
            payload=payload,
            preview_lines=lines,
            image_svg=self.render(lines),
        )
        log.info("Composed message with %d date(s): %s", len(dates), message.url)
        return message

    # ── rendering ─────────────────────────────────────
    def render(self, lines: list[str]) -> str:
        """Opaque white card with one date per line, padded by the inset."""
        line_px = self.font_size * _LINE_HEIGHT
        longest = max((len(line) for line in lines), default=0)
        width = round(longest * self.font_size * _CHAR_WIDTH + self.inset * 2)
        height = round(len(lines) * line_px + self.inset * 2)

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}">',
            f'<rect width="{width}" height="{height}" fill="#ffffff"/>',
        ]
        for i, line in enumerate(lines):
            y = round(self.inset + self.font_size + i * line_px, 2)
            parts.append(
                f'<text x="{self.inset}" y="{y}" font-family="-apple-system, sans-serif" '
                f'font-size="{self.font_size}" fill="{_TEXT_COLOR}">{escape(line)}</text>'
            )
        parts.append("</svg>")
        return "".join(parts)


class EventSession:
    """
    One participant's editing session over a single ledger.

    The session owns the ledger. Saving hands the dates and encoded
    payload to `on_save`; once that returns the ledger is finalized and the
    session is closed. If `on_save` raises, the session stays open.
    """

    def __init__(self, on_save: SaveCallback, message_url: Optional[str] = None):
        self.id = uuid.uuid4().hex
        self.mode = MODE_SELECT_DATES if message_url else MODE_CREATE_EVENT
        self.ledger = VoteLedger.decode(parse_message_url(message_url))
        self.sent: Optional[ComposedMessage] = None
        self._on_save = on_save
        log.info("Session %s started in %s mode", self.id, self.mode)

    @property
    def closed(self) -> bool:
        return self.ledger.finalized

    def add_date(self, date: datetime) -> None:
        self.ledger.append_option(date)

    def toggle_vote(self, index: int) -> None:
        self.ledger.toggle_local_vote(index)

    def save(self) -> ComposedMessage:
        dates = [option.date for option in self.ledger]
        payload = self.ledger.encode()
        message = self._on_save(dates, payload)
        self.ledger.finalize()
        self.sent = message
        log.info("Session %s saved", self.id)
        return self.sent
