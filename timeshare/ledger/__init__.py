from timeshare.ledger.codec import build_message_url, parse_message_url
from timeshare.ledger.vote_ledger import (
    DateOption,
    IndexOutOfRange,
    InvalidDate,
    LedgerError,
    LedgerFinalized,
    VoteLedger,
    format_wire_date,
    parse_wire_date,
)

__all__ = [
    "DateOption",
    "IndexOutOfRange",
    "InvalidDate",
    "LedgerError",
    "LedgerFinalized",
    "VoteLedger",
    "build_message_url",
    "format_wire_date",
    "parse_message_url",
    "parse_wire_date",
]
