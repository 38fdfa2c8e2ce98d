from __future__ import annotations

import pytest

from errors import ValidationError
from log_store import LogStore, utc_timestamp
from models import LogData

DATA = {"body": "ok", "headers": {"content-type": "text/plain"}}


def test_append_then_list(log_store: LogStore) -> None:
    log = log_store.append("t1", "m1", status_code=200, response_time=42, data=DATA)

    assert log.owner == "t1"
    assert log.monitor_id == "m1"
    assert log.data == LogData(**DATA)
    assert log.created_at.endswith("Z")
    assert log_store.list("t1", "m1") == [log]


def test_zero_values_are_accepted(log_store: LogStore) -> None:
    log = log_store.append("t1", "m1", status_code=0, response_time=0, data=DATA)
    assert log.status_code == 0
    assert log.response_time == 0


@pytest.mark.parametrize(
    ("status_code", "response_time", "data"),
    [(None, 10, DATA), (200, None, DATA), (200, 10, None)],
)
def test_append_requires_fields(log_store: LogStore, status_code, response_time, data) -> None:
    with pytest.raises(ValidationError):
        log_store.append("t1", "m1", status_code, response_time, data)
    assert log_store.list("t1", "m1") == []


def test_logs_are_scoped_per_tenant_and_monitor(log_store: LogStore) -> None:
    log_store.append("a", "m1", 200, 1, DATA)
    log_store.append("a", "m2", 200, 1, DATA)
    log_store.append("b", "m1", 200, 1, DATA)

    assert len(log_store.list("a", "m1")) == 1
    assert log_store.list("b", "m2") == []


def test_json_shape_is_camel_case(log_store: LogStore) -> None:
    log = log_store.append("t1", "m1", 503, 12, DATA)
    record = log.to_record()
    assert {"id", "monitorId", "statusCode", "responseTime", "owner", "data", "createdAt"} == set(record)


def test_utc_timestamp_format() -> None:
    stamp = utc_timestamp()
    assert stamp.endswith("Z")
    assert "T" in stamp
