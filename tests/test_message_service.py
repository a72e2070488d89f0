from datetime import datetime, timezone

import pytest

from timeshare.ledger import LedgerFinalized
from timeshare.services import (
    MODE_CREATE_EVENT,
    MODE_SELECT_DATES,
    EventSession,
    MessageComposer,
    display_date,
)


@pytest.fixture
def composer():
    return MessageComposer(base_url="", caption="I voted", inset=20, font_size=17)


def test_display_date_long_style():
    assert display_date(datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)) == "January 1, 2024 at 10:00 AM"
    assert display_date(datetime(2024, 12, 25, 0, 5, tzinfo=timezone.utc)) == "December 25, 2024 at 12:05 AM"
    assert display_date(datetime(2024, 6, 9, 13, 30, tzinfo=timezone.utc)) == "June 9, 2024 at 1:30 PM"


def test_compose_builds_url_caption_and_preview(composer):
    dates = [datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)]
    payload = [("date-0", "2024-01-01-10-00"), ("vote-0", "1")]

    message = composer.compose(dates, payload)

    assert message.url == "?date-0=2024-01-01-10-00&vote-0=1"
    assert message.caption == "I voted"
    assert message.payload == payload
    assert message.preview_lines == ["January 1, 2024 at 10:00 AM"]
    assert message.image_svg.startswith("<svg")
    assert "January 1, 2024 at 10:00 AM" in message.image_svg
    assert 'fill="#ffffff"' in message.image_svg


def test_render_without_dates_is_just_the_inset(composer):
    svg = composer.render([])
    assert 'width="40"' in svg
    assert 'height="40"' in svg
    assert "<text" not in svg


def test_new_session_is_create_mode_and_empty(composer):
    session = EventSession(on_save=composer.compose)
    assert session.mode == MODE_CREATE_EVENT
    assert len(session.ledger) == 0
    assert not session.closed


def test_session_from_message_loads_tallies(composer):
    session = EventSession(
        on_save=composer.compose,
        message_url="?date-0=2024-01-01-10-00&vote-0=1",
    )
    assert session.mode == MODE_SELECT_DATES
    assert session.ledger[0].aggregate_votes == 1
    assert session.ledger[0].local_vote == 0


def test_save_hands_dates_and_payload_to_callback():
    calls = []

    def on_save(dates, payload):
        calls.append((dates, payload))
        return "sent"

    session = EventSession(on_save=on_save, message_url="?date-0=2024-01-01-10-00&vote-0=1")
    session.toggle_vote(0)
    session.add_date(datetime(2024, 1, 2, 9, 0, tzinfo=timezone.utc))

    assert session.save() == "sent"
    assert session.sent == "sent"
    assert session.closed
    assert calls == [(
        [datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc), datetime(2024, 1, 2, 9, 0, tzinfo=timezone.utc)],
        [("date-0", "2024-01-01-10-00"), ("vote-0", "2"), ("date-1", "2024-01-02-09-00"), ("vote-1", "1")],
    )]


def test_session_cannot_be_saved_twice(composer):
    session = EventSession(on_save=composer.compose)
    session.save()
    with pytest.raises(LedgerFinalized):
        session.save()


def test_failed_save_keeps_session_open(composer):
    def on_save(dates, payload):
        raise RuntimeError("conversation unavailable")

    session = EventSession(on_save=on_save)
    session.add_date(datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc))

    with pytest.raises(RuntimeError):
        session.save()
    assert not session.closed
    assert session.sent is None

    session._on_save = composer.compose
    assert session.save().url == "?date-0=2024-01-01-10-00&vote-0=1"
    assert session.closed


def test_display_date_uses_english_month_names():
    months = [display_date(datetime(2024, m, 1, 12, 0, tzinfo=timezone.utc)).split()[0] for m in range(1, 13)]
    assert months == [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ]
