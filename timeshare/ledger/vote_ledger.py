"""
Vote ledger — candidate dates, tallies and the local participant's votes.

A ledger is decoded from the query pairs of a received message, edited
by one participant, then finalized exactly once into the query pairs of
the next message. Finalizing folds the local votes into the aggregate
counts; the split between "mine" and "everyone else's" does not survive
the round trip.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from timeshare.utils import get_logger

log = get_logger("ledger.vote_ledger")

DATE_PREFIX = "date-"
VOTE_PREFIX = "vote-"
WIRE_DATE_FORMAT = "%Y-%m-%d-%H-%M"

_VOTE_RE = re.compile(r"[0-9]+")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}-[0-9]{2}-[0-9]{2}")


# ── errors ────────────────────────────────────────────
class LedgerError(Exception):
    """Base class for ledger failures that are surfaced to the caller."""


class IndexOutOfRange(LedgerError, IndexError):
    def __init__(self, index: int, size: int):
        super().__init__(f"option index {index} out of range for ledger of {size}")
        self.index = index
        self.size = size


class LedgerFinalized(LedgerError):
    """Raised when a ledger is used after finalize()."""


class InvalidDate(LedgerError, ValueError):
    """Raised when a proposed date has no UTC equivalent."""


# ── wire helpers ──────────────────────────────────────
def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError as exc:
        raise InvalidDate(f"{value.isoformat()} is outside the supported UTC range") from exc


def format_wire_date(value: datetime) -> str:
    d = _utc(value)
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}-{d.hour:02d}-{d.minute:02d}"


def parse_wire_date(text: Optional[str]) -> datetime:
    """Parse `YYYY-MM-DD-HH-mm` as UTC, falling back to the current time."""
    if text and _DATE_RE.fullmatch(text):
        try:
            return datetime.strptime(text, WIRE_DATE_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError:
            pass
    log.debug("Unparseable date %r, using now", text)
    return datetime.now(timezone.utc)


def parse_vote_count(text: Optional[str]) -> int:
    if text and _VOTE_RE.fullmatch(text):
        try:
            return int(text)
        except ValueError:
            # longer than sys.get_int_max_str_digits()
            pass
    log.debug("Unparseable vote count %.40r, using 0", text)
    return 0


# ── model ─────────────────────────────────────────────
@dataclass
class DateOption:
    date: datetime
    aggregate_votes: int = 0
    local_vote: int = 0

    @property
    def total_votes(self) -> int:
        return self.aggregate_votes + self.local_vote


class VoteLedger:
    """Ordered candidate dates with vote state, in display order."""

    def __init__(self, options: Optional[Iterable[DateOption]] = None):
        self._options: list[DateOption] = list(options or [])
        self._finalized = False

    def __len__(self) -> int:
        return len(self._options)

    def __iter__(self):
        return iter(self._options)

    def __getitem__(self, index: int) -> DateOption:
        return self._options[index]

    @property
    def options(self) -> list[DateOption]:
        return list(self._options)

    @property
    def finalized(self) -> bool:
        return self._finalized

    # ── decode ────────────────────────────────────────
    @classmethod
    def decode(cls, payload: Optional[Iterable[tuple[str, str]]]) -> "VoteLedger":
        """
        Build a ledger from received query pairs.

        The n-th `date-` key is paired with the n-th `vote-` key in the
        order they arrive; the numeric suffix is not consulted. Bad values
        degrade to defaults instead of raising.
        """
        dates: list[datetime] = []
        votes: list[int] = []

        for key, value in payload or ():
            if key.startswith(DATE_PREFIX):
                dates.append(parse_wire_date(value))
            elif key.startswith(VOTE_PREFIX):
                votes.append(parse_vote_count(value))

        if len(votes) > len(dates):
            log.warning("Dropping %d vote count(s) with no matching date", len(votes) - len(dates))

        options = [
            DateOption(
                date=d,
                aggregate_votes=votes[i] if i < len(votes) else 0,
                local_vote=0,
            )
            for i, d in enumerate(dates)
        ]
        log.info("Decoded ledger with %d option(s)", len(options))
        return cls(options)

    # ── mutation ──────────────────────────────────────
    def append_option(self, date: datetime) -> None:
        """Add a proposed date; the proposer votes for it."""
        self._check_open()
        self._options.append(DateOption(date=_utc(date), aggregate_votes=0, local_vote=1))
        log.debug("Appended option #%d: %s", len(self._options) - 1, format_wire_date(date))

    def toggle_local_vote(self, index: int) -> None:
        self._check_open()
        if not 0 <= index < len(self._options):
            raise IndexOutOfRange(index, len(self._options))
        option = self._options[index]
        option.local_vote = 1 - option.local_vote

    # ── encode ────────────────────────────────────────
    def encode(self) -> list[tuple[str, str]]:
        """Query pairs with local votes folded into the totals; leaves the ledger open."""
        self._check_open()
        payload: list[tuple[str, str]] = []
        for i, option in enumerate(self._options):
            payload.append((f"{DATE_PREFIX}{i}", format_wire_date(option.date)))
            payload.append((f"{VOTE_PREFIX}{i}", str(option.total_votes)))
        return payload

    def finalize(self) -> list[tuple[str, str]]:
        """Encode, then close the ledger against further use."""
        payload = self.encode()
        self._finalized = True
        log.info("Finalized ledger with %d option(s)", len(self._options))
        return payload

    def _check_open(self) -> None:
        if self._finalized:
            raise LedgerFinalized("ledger has already been finalized")
