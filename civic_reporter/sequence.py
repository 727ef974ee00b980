"""Atomic sequence counters and human-readable issue codes."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from civic_reporter.database import models

logger = logging.getLogger(__name__)

ISSUE_CODE_COUNTER = "issueIdCounter"

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def next_sequence(db: AsyncSession, counter_name: str) -> int:
    """
    Increment the named counter and return its new value.

    The counter is created with value 1 if it does not exist yet. The
    increment and the read happen in one ``INSERT ... ON CONFLICT DO UPDATE
    ... RETURNING`` statement, so concurrent callers never see the same value.

    The caller owns the transaction; nothing is committed here.
    """
    dialect = db.get_bind().dialect.name
    insert = _UPSERT_DIALECTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"Atomic counters are not supported on {dialect}")

    counters = models.SequenceCounter.__table__
    stmt = (
        insert(counters)
        .values(name=counter_name, value=1)
        .on_conflict_do_update(
            index_elements=[counters.c.name],
            set_={"value": counters.c.value + 1},
        )
        .returning(counters.c.value)
    )
    result = await db.execute(stmt)
    return result.scalar_one()


def format_issue_code(sequence: int, now: Optional[datetime] = None) -> str:
    """Build an ``RP-YYMMDD-HHMMSS-NNNN`` code; the suffix widens past 9999."""
    now = now or datetime.now()
    return f"RP-{now:%y%m%d}-{now:%H%M%S}-{sequence:04d}"


async def allocate_issue_code(db: AsyncSession) -> str:
    """Allocate the next issue code and commit the counter increment."""
    sequence = await next_sequence(db, ISSUE_CODE_COUNTER)
    await db.commit()

    code = format_issue_code(sequence)
    logger.info("Allocated issue code", extra={"issue_code": code, "sequence": sequence})
    return code
