import json
import time

import pytest

# 2023-11-14 22:13:20 UTC
CREATION_MS = 1700000000000


def make_raw(message, timestamp=CREATION_MS, ingestion=CREATION_MS + 250,
             stream="12345678-aaaa-bbbb-cccc-123456789012", event_id="evt-1"):
    """Build a FilteredLogEvent mapping the way boto3 returns it."""
    if isinstance(message, dict):
        message = json.dumps(message)
    return {
        "logStreamName": stream,
        "timestamp": timestamp,
        "message": message,
        "ingestionTime": ingestion,
        "eventId": event_id,
    }


@pytest.fixture
def raw_factory():
    return make_raw


@pytest.fixture
def structured_message():
    return json.dumps({
        "level": "ERROR",
        "time": "2024-01-15T10:30:00Z",
        "source": {"function": "main.handle", "file": "handler.go", "line": 88},
        "msg": "Database connection failed",
        "count": 3,
        "request_id": "req-001",
    })


@pytest.fixture
def utc_local_time(monkeypatch):
    """Pin the process local time zone to UTC for formatting tests."""
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
