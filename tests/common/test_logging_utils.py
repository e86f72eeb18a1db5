from __future__ import annotations

import logging

from school_attendance.common.logging_utils import SensitiveDataFilter


def _record(msg, args):
    return logging.LogRecord("school_attendance", logging.INFO, __file__, 1, msg, args, None)


def test_password_in_args_is_masked():
    record = _record("login password=%s for %s", ("hunter2", "bob"))

    assert SensitiveDataFilter().filter(record) is True
    message = record.getMessage()
    assert "hunter2" not in message
    assert message == "login password: ******** for bob"


def test_plain_messages_pass_through():
    record = _record("Lesson %s created", (12,))

    SensitiveDataFilter().filter(record)

    assert record.getMessage() == "Lesson 12 created"
