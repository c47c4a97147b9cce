from datetime import UTC, datetime

import pytest
from net_inspector.core.http_transaction import HTTPTransaction
from net_inspector.core.url_transaction import URLRequest

INSPECTOR_ENV_VARS = ["LOG_LEVEL", "NET_INSPECTOR_PREVIEW_LENGTH", "NET_INSPECTOR_TIMESTAMP_FORMAT"]


@pytest.fixture(autouse=True)
def clean_inspector_env(monkeypatch):
    """AUTOUSE: Tests start without any inspector settings from the environment or a .env file."""
    for env_var in INSPECTOR_ENV_VARS:
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def start_time():
    return datetime(2024, 5, 17, 12, 30, 45, tzinfo=UTC)


@pytest.fixture
def get_request():
    """Returns a GET request for an items endpoint."""
    return URLRequest(
        method="GET",
        url="https://api.example.com/v1/items?page=2",
        headers={"Accept": "application/json", "X-Trace-Id": "trace-abc123"},
    )


@pytest.fixture
def http_transaction(get_request, start_time):
    return HTTPTransaction.with_request(get_request, request_id="req-1", start_time=start_time)
