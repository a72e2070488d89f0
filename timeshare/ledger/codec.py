"""
Message URL <-> ordered query pairs.
"""

from __future__ import annotations

from typing import Iterable, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit

from timeshare.utils import get_logger

log = get_logger("ledger.codec")


def parse_message_url(url: Optional[str]) -> list[tuple[str, str]]:
    """Query items of a message URL, in the order they appear."""
    if not url:
        return []
    query = urlsplit(url).query
    pairs = parse_qsl(query, keep_blank_values=True)
    log.debug("Parsed %d query item(s) from message URL", len(pairs))
    return pairs


def build_message_url(pairs: Iterable[tuple[str, str]], base_url: str = "") -> str:
    # A bare query component renders as "?a=b", same as a URL with no scheme/host
    query = urlencode(list(pairs))
    return f"{base_url}?{query}"
