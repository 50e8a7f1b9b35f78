"""Tests for human-readable request and batch codes."""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from smartseed.models import Batch
from smartseed.utils.numbering import (
    add_with_code,
    build_prefix,
    format_code,
    generate_code,
    utc_today,
)


@pytest.mark.unit
class TestFormat:

    def test_prefix_stops_at_sequence(self):
        assert build_prefix("REQ-{date}-{seq:3}", "20240601") == "REQ-20240601-"

    def test_sequence_is_zero_padded(self):
        assert format_code("BATCH-{date}-{seq:3}", "20240601", 7) == "BATCH-20240601-007"
        assert format_code("R{seq:5}", "20240601", 42) == "R00042"


@pytest.mark.unit
@pytest.mark.asyncio
class TestGenerateCode:

    async def test_sequence_counts_todays_codes(self, db_session: AsyncSession):
        first = await generate_code(db_session, "batch")
        db_session.add(Batch(batch_code=first, source_location="Makiling", wildlings_count=1))
        await db_session.flush()

        second = await generate_code(db_session, "batch")

        assert first.endswith("-001")
        assert second.endswith("-002")

    async def test_unknown_entity(self, db_session: AsyncSession):
        with pytest.raises(ValueError):
            await generate_code(db_session, "invoice")

    async def test_skip_moves_past_the_count(self, db_session: AsyncSession):
        code = await generate_code(db_session, "batch", skip=2)
        assert code.endswith("-003")
        assert code.split("-")[1] == utc_today().strftime("%Y%m%d")


@pytest.mark.unit
@pytest.mark.asyncio
class TestAddWithCode:

    async def test_taken_code_falls_through_to_next_number(self, db_session: AsyncSession):
        today = utc_today().strftime("%Y%m%d")
        # One code today, but it is -002, so the count alone would clash
        db_session.add(Batch(batch_code=f"BATCH-{today}-002", source_location="Makiling",
                             wildlings_count=1))
        await db_session.commit()

        batch = Batch(source_location="Banahaw", wildlings_count=5)
        code = await add_with_code(db_session, batch, "batch")
        await db_session.commit()

        assert code == f"BATCH-{today}-003"
        assert batch.batch_code == code
        codes = (await db_session.scalars(select(Batch.batch_code))).all()
        assert sorted(codes) == [f"BATCH-{today}-002", f"BATCH-{today}-003"]
