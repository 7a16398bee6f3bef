import asyncio
import logging

from app.core.logging import ContextFilter, LogContext, current_context


def make_record(**extra):
    record = logging.LogRecord("spendwise.test", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_context_is_copied_onto_records():
    with LogContext(phone="+15551230000"):
        record = make_record()
        ContextFilter().filter(record)

    assert record.phone == "+15551230000"
    assert current_context() == {}


def test_nested_context_merges_and_restores():
    with LogContext(phone="+15551230000"):
        with LogContext(user_id="u1", intent="spend"):
            assert current_context() == {"phone": "+15551230000", "user_id": "u1", "intent": "spend"}
        assert current_context() == {"phone": "+15551230000"}


def test_explicit_extra_wins_over_context():
    with LogContext(phone="+15551230000"):
        record = make_record(phone="+15559990000")
        ContextFilter().filter(record)

    assert record.phone == "+15559990000"


async def test_concurrent_tasks_keep_their_own_context():
    seen = {}

    async def handle(phone):
        with LogContext(phone=phone):
            await asyncio.sleep(0)
            seen[phone] = current_context()["phone"]

    await asyncio.gather(handle("+1555000001"), handle("+1555000002"))

    assert seen == {"+1555000001": "+1555000001", "+1555000002": "+1555000002"}
