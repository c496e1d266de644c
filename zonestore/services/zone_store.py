import logging
import re
from datetime import timedelta
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from zonestore.core.errors import (
    BatchResult,
    ErrorCode,
    InvalidIDError,
    OperationNotImplementedError,
    StoreConnectionError,
    ZoneStoreError,
)
from zonestore.models.record_db import ZoneRecord
from zonestore.models.record_schema import Record
from zonestore.services import codec
from zonestore.storage import record_repository as repo
from zonestore.storage.db import ConnectionManager

logger = logging.getLogger(__name__)

# Signed base-10, same range as a BIGINT primary key
ID_PATTERN = re.compile(r"[+-]?[0-9]+")
MAX_ID = 2 ** 63 - 1


def parse_record_id(record_id: str) -> int:
    if not ID_PATTERN.fullmatch(record_id):
        raise InvalidIDError(record_id)
    value = int(record_id)
    if not -MAX_ID - 1 <= value <= MAX_ID:
        raise InvalidIDError(record_id)
    return value


def row_to_record(row: ZoneRecord) -> Record:
    return Record(
        id=str(row.id),
        type=row.record_type,
        name=row.name,
        value=codec.decode(row.content, row.record_type),
        ttl=timedelta(seconds=row.ttl_seconds),
    )


def _store_error(e: Exception) -> ZoneStoreError:
    if isinstance(e, ZoneStoreError):
        return e
    error = StoreConnectionError(ErrorCode.CONNECTION_FAILED.format(e))
    error.__cause__ = e
    return error


class ZoneStore:
    """Zone-scoped CRUD over the ``coredns_records`` table.

    Every operation returns a :class:`BatchResult`. Batches stop at the
    first failing record; the result then carries the records handled
    before it together with the error, and writes already committed are
    kept. Cancelling the calling task aborts the in-flight query and
    propagates ``CancelledError`` instead of returning a result.
    """

    def __init__(self, database_url: Optional[str] = None, connections: Optional[ConnectionManager] = None):
        self.connections = connections or ConnectionManager(database_url)

    async def list(self, zone: str) -> BatchResult:
        records: List[Record] = []
        try:
            async with self.connections.session() as db:
                for row in await repo.fetch_by_zone(db, zone):
                    records.append(row_to_record(row))
        except (ZoneStoreError, SQLAlchemyError) as e:
            return self._stopped("list", zone, records, e)

        logger.info(f"Listed {len(records)} records in zone {zone}")
        return BatchResult(records)

    async def append(self, zone: str, records: Iterable[Record]) -> BatchResult:
        inserted: List[Record] = []
        try:
            async with self.connections.session() as db:
                for record in records:
                    content = codec.encode(record)
                    ttl_seconds = record.ttl_seconds
                    record_id = await repo.insert_record(
                        db, zone, record.name, ttl_seconds, content, record.type
                    )
                    logger.debug(f"Inserted {record.type} record {record.name} in zone {zone} as {record_id}")
                    inserted.append(record.model_copy(update={
                        "id": str(record_id),
                        "ttl": timedelta(seconds=ttl_seconds),
                    }))
        except (ZoneStoreError, SQLAlchemyError) as e:
            return self._stopped("append", zone, inserted, e)

        logger.info(f"Appended {len(inserted)} records to zone {zone}")
        return BatchResult(inserted)

    async def set(self, zone: str, records: Iterable[Record]) -> BatchResult:
        """Updating records in place is not supported by this store."""
        logger.warning(f"Set called for zone {zone}, which is not implemented")
        return BatchResult([], OperationNotImplementedError("set"))

    async def delete(self, zone: str, records: Iterable[Record]) -> BatchResult:
        """Delete records by ID.

        Records without an ID are skipped without error, and a successful
        result echoes every input record whether or not a row was removed
        for it. Callers cannot tell deleted records from skipped ones.
        """
        records = list(records)
        processed = 0
        try:
            async with self.connections.session() as db:
                for record in records:
                    if record.id:
                        record_id = parse_record_id(record.id)
                        deleted = await repo.delete_by_id(db, record_id)
                        logger.debug(f"Deleted {deleted} row(s) with id {record_id} from zone {zone}")
                    else:
                        logger.debug(f"Skipped {record.type} record {record.name} without ID in zone {zone}")
                    processed += 1
        except (ZoneStoreError, SQLAlchemyError) as e:
            return self._stopped("delete", zone, records[:processed], e)

        logger.info(f"Delete processed {len(records)} records in zone {zone}")
        return BatchResult(records)

    async def close(self):
        await self.connections.dispose()

    def _stopped(self, operation: str, zone: str, records: List[Record], e: Exception) -> BatchResult:
        error = _store_error(e)
        logger.error(f"{operation} stopped in zone {zone} after {len(records)} records: {error}")
        return BatchResult(records, error)
