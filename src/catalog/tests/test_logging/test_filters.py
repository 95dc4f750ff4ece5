import logging

from catalog.core.logging.filters import (
    RedactFilter,
    RequestIdFilter,
    get_request_id,
    reset_request_id,
    set_request_id,
)


def make_record():
    # name, level, pathname, lineno, msg, args, exc_info
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello %s", ("world",), None)


def test_request_id_filter_defaults_to_dash():
    rec = make_record()
    token = set_request_id(None)
    try:
        assert RequestIdFilter().filter(rec) is True
        assert rec.request_id == "-"
    finally:
        reset_request_id(token)


def test_request_id_filter_uses_contextvar():
    rec = make_record()
    token = set_request_id("abc-123")
    try:
        RequestIdFilter().filter(rec)
        assert rec.request_id == "abc-123"
    finally:
        reset_request_id(token)


def test_request_id_filter_respects_record_extra():
    rec = make_record()
    rec.request_id = "explicit"
    token = set_request_id("context-id")
    try:
        RequestIdFilter().filter(rec)
        assert rec.request_id == "explicit"
    finally:
        reset_request_id(token)


def test_reset_restores_previous_value():
    outer = set_request_id("outer")
    inner = set_request_id("inner")
    assert get_request_id() == "inner"

    reset_request_id(inner)
    assert get_request_id() == "outer"
    reset_request_id(outer)


def test_redact_filter_masks_sensitive_extras():
    rec = make_record()
    rec.password = "hunter2"
    rec.Authorization = "Bearer abc"
    rec.category_name = "Electronics"

    assert RedactFilter().filter(rec) is True
    assert rec.password == "***REDACTED***"
    assert rec.Authorization == "***REDACTED***"
    assert rec.category_name == "Electronics"


def test_redact_filter_custom_keys():
    rec = make_record()
    rec.api_key = "k-123"
    rec.password = "still visible"

    RedactFilter(keys=["API_KEY"]).filter(rec)

    assert rec.api_key == "***REDACTED***"
    assert rec.password == "still visible"
