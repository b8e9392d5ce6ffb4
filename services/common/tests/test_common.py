import asyncio
import json
import logging
import sys

import pytest

from services.common.core.logging_config import CustomJsonFormatter
from services.common.core.request_context import (
    clear_run,
    get_activation_id,
    get_run_id,
    start_run,
)


@pytest.fixture(autouse=True)
def _clean_context():
    clear_run()
    yield
    clear_run()


def make_record(msg="Test message", **extra):
    record = logging.LogRecord(
        name="ingest.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=None,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_run_context_basic():
    assert get_run_id() is None

    run_id = start_run("act-1")
    assert run_id == get_run_id()
    assert get_activation_id() == "act-1"

    clear_run()
    assert get_run_id() is None
    assert get_activation_id() is None


def test_start_run_generates_new_ids():
    assert start_run() != start_run()
    assert get_activation_id() is None


@pytest.mark.asyncio
async def test_run_context_isolation():
    async def task(activation_id, delay):
        start_run(activation_id)
        await asyncio.sleep(delay)
        return get_activation_id()

    results = await asyncio.gather(task("act-1", 0.02), task("act-2", 0.01))
    assert results == ["act-1", "act-2"]


def test_custom_json_formatter():
    formatter = CustomJsonFormatter()

    output = json.loads(formatter.format(make_record()))
    assert output["message"] == "Test message"
    assert output["level"] == "INFO"
    assert output["logger"] == "ingest.test"
    assert "run_id" not in output

    run_id = start_run("act-9")
    output = json.loads(formatter.format(make_record()))
    assert output["run_id"] == run_id
    assert output["activation_id"] == "act-9"


def test_custom_json_formatter_includes_extra_fields():
    record = make_record(file_name="chk1.png", file_count=3)

    output = json.loads(CustomJsonFormatter().format(record))

    assert output["file_name"] == "chk1.png"
    assert output["file_count"] == 3
    assert "lineno" not in output


def test_custom_json_formatter_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord(
            "ingest.test", logging.ERROR, "test.py", 1, "failed", None, sys.exc_info()
        )

    output = json.loads(CustomJsonFormatter().format(record))
    assert "ValueError: boom" in output["exception"]
