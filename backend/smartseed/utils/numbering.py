"""Sequential human-readable codes.

Format tokens:
  {date}       → YYYYMMDD (UTC day)
  {seq:N}      → zero-padded sequence number, N digits, resets daily per prefix

Formats come from settings:
  request:   REQ-{date}-{seq:3}
  batch:     BATCH-{date}-{seq:3}
"""

import logging
import re
from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smartseed.config import settings
from smartseed.models.nursery import Batch
from smartseed.models.seedling_request import SeedlingRequest

logger = logging.getLogger("smartseed.numbering")

# Entity type → code column counted for the next sequence number
ENTITY_COLUMN_MAP = {
    "request": SeedlingRequest.request_code,
    "batch": Batch.batch_code,
}

CODE_ATTEMPTS = 5


def utc_today() -> date:
    """Calendar day used for codes, task checklists and dashboard windows."""
    return datetime.utcnow().date()


def _get_format(entity: str) -> str:
    if entity == "request":
        return settings.request_code_format
    if entity == "batch":
        return settings.batch_code_format
    raise ValueError(f"No code format for entity: {entity}")


def build_prefix(fmt: str, today_str: str) -> str:
    """Everything before {seq:N}, with {date} substituted."""
    prefix = fmt.replace("{date}", today_str)
    return re.sub(r"\{seq:\d+\}.*$", "", prefix)


def format_code(fmt: str, today_str: str, seq_num: int) -> str:
    seq_match = re.search(r"\{seq:(\d+)\}", fmt)
    seq_width = int(seq_match.group(1)) if seq_match else 3

    code = fmt.replace("{date}", today_str)
    return re.sub(r"\{seq:\d+\}", f"{seq_num:0{seq_width}d}", code)


async def generate_code(db: AsyncSession, entity: str, skip: int = 0) -> str:
    """Generate the next code for ``entity``, e.g. "REQ-20240601-004".

    ``skip`` moves past that many numbers after the count, for retries
    after a clash.
    """
    fmt = _get_format(entity)
    today_str = utc_today().strftime("%Y%m%d")
    prefix = build_prefix(fmt, today_str)

    column = ENTITY_COLUMN_MAP[entity]
    count = await db.scalar(
        select(func.count(column)).where(column.like(f"{prefix}%"))
    ) or 0

    return format_code(fmt, today_str, count + 1 + skip)


async def add_with_code(db: AsyncSession, obj, entity: str) -> str:
    """Give ``obj`` the next ``entity`` code and flush it.

    Each try runs in a savepoint. When the code is already taken (a
    concurrent writer got the same count, or numbering has a gap) the
    savepoint is rolled back and the next number is tried.
    """
    attr = ENTITY_COLUMN_MAP[entity].key
    for attempt in range(CODE_ATTEMPTS):
        code = await generate_code(db, entity, skip=attempt)
        setattr(obj, attr, code)
        try:
            async with db.begin_nested():
                db.add(obj)
                await db.flush()
        except IntegrityError:
            if attempt == CODE_ATTEMPTS - 1:
                raise
            logger.warning("%s code %s already taken, trying the next one", entity, code)
        else:
            return code
