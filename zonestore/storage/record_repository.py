# storage/record_repository.py
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from zonestore.models.record_db import ZoneRecord


async def fetch_by_zone(db: AsyncSession, zone: str) -> List[ZoneRecord]:
    result = await db.execute(
        select(ZoneRecord).where(ZoneRecord.zone == zone).order_by(ZoneRecord.id)
    )
    return result.scalars().all()

async def insert_record(db: AsyncSession, zone: str, name: str, ttl_seconds: int,
                        content: str, record_type: str) -> int:
    """Insert and commit one row, returning the id the database assigned."""
    row = ZoneRecord(
        zone=zone,
        name=name,
        ttl_seconds=ttl_seconds,
        content=content,
        record_type=record_type,
    )
    db.add(row)
    await db.commit()
    return row.id

async def delete_by_id(db: AsyncSession, record_id: int) -> int:
    result = await db.execute(delete(ZoneRecord).where(ZoneRecord.id == record_id))
    await db.commit()
    return result.rowcount
