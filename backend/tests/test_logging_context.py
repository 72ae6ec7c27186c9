import logging

from backend.app.core.logging_context import RequestIdFilter, configure_logging, set_request_id


def test_filter_attaches_request_id():
    set_request_id("req-7")
    record = logging.LogRecord("backend.test", logging.INFO, __file__, 1, "hello", None, None)

    assert RequestIdFilter().filter(record)
    assert record.request_id == "req-7"


def test_configure_logging_is_idempotent():
    configure_logging("debug")
    configure_logging("info")

    root = logging.getLogger("backend")
    installed = [h for h in root.handlers if getattr(h, "_salon_handler", False)]
    assert len(installed) == 1
    assert root.level == logging.INFO
