import os

# keep test runs from writing app.log
os.environ.setdefault("LOG_FILE", "")

import pytest

from timeshare.api import routes


@pytest.fixture(autouse=True)
def reset_sessions():
    """Clear the in-memory session store between tests."""
    routes._sessions.clear()
    yield
    routes._sessions.clear()
