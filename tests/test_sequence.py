import asyncio
import re
from datetime import datetime

import pytest
from sqlalchemy import select

from civic_reporter import sequence
from civic_reporter.database import models
from civic_reporter.sequence import (
    ISSUE_CODE_COUNTER,
    allocate_issue_code,
    format_issue_code,
    next_sequence,
)


def test_format_issue_code_pads_every_component():
    now = datetime(2025, 3, 7, 9, 5, 2)
    assert format_issue_code(42, now) == "RP-250307-090502-0042"


def test_format_issue_code_widens_large_sequences():
    now = datetime(2024, 12, 31, 23, 59, 59)
    assert format_issue_code(12345, now) == "RP-241231-235959-12345"


async def test_next_sequence_creates_then_increments(db):
    assert await next_sequence(db, "reports") == 1
    assert await next_sequence(db, "reports") == 2
    await db.commit()

    counter = await db.get(models.SequenceCounter, "reports")
    assert counter.value == 2


async def test_counters_are_independent(db):
    assert await next_sequence(db, "a") == 1
    assert await next_sequence(db, "b") == 1
    assert await next_sequence(db, "a") == 2


async def test_concurrent_allocations_never_repeat(session_factory):
    async def allocate():
        async with session_factory() as session:
            value = await next_sequence(session, ISSUE_CODE_COUNTER)
            await session.commit()
            return value

    values = await asyncio.gather(*(allocate() for _ in range(25)))

    assert sorted(values) == list(range(1, 26))


async def test_allocate_issue_code_commits_increment(db, session_factory):
    code = await allocate_issue_code(db)

    assert re.fullmatch(r"RP-\d{6}-\d{6}-0001", code)
    async with session_factory() as other:
        result = await other.execute(
            select(models.SequenceCounter.value).where(
                models.SequenceCounter.name == ISSUE_CODE_COUNTER
            )
        )
        assert result.scalar_one() == 1


async def test_unsupported_dialect_is_refused(db, monkeypatch):
    monkeypatch.setattr(sequence, "_UPSERT_DIALECTS", {})

    with pytest.raises(RuntimeError, match="not supported on sqlite"):
        await next_sequence(db, ISSUE_CODE_COUNTER)
