from timeshare.services.message_service import (
    MODE_CREATE_EVENT,
    MODE_SELECT_DATES,
    ComposedMessage,
    EventSession,
    MessageComposer,
    display_date,
)

__all__ = [
    "MODE_CREATE_EVENT",
    "MODE_SELECT_DATES",
    "ComposedMessage",
    "EventSession",
    "MessageComposer",
    "display_date",
]
