from typing import Iterator, List, Optional


class ErrorCode:
    CONNECTION_FAILED = "Database operation failed: {}"
    UNSUPPORTED_TYPE = "Unsupported record type: {}"
    INVALID_VALUE = "Invalid value for {} record: {!r}"
    MALFORMED_CONTENT = "Malformed {} record content: {}"
    INVALID_ID = "Invalid record ID: {!r}"
    NOT_IMPLEMENTED = "{} is not implemented"


class ZoneStoreError(Exception):
    """Base class for every error surfaced by the zone store."""


class StoreConnectionError(ZoneStoreError):
    pass


class UnsupportedTypeError(ZoneStoreError):
    def __init__(self, record_type: str):
        self.record_type = record_type
        super().__init__(ErrorCode.UNSUPPORTED_TYPE.format(record_type))


class InvalidValueError(ZoneStoreError):
    def __init__(self, record_type: str, value: str):
        self.record_type = record_type
        self.value = value
        super().__init__(ErrorCode.INVALID_VALUE.format(record_type, value))


class MalformedContentError(InvalidValueError):
    """A stored payload does not match the layout of its record type."""

    def __init__(self, record_type: str, content: str, reason: str):
        self.record_type = record_type
        self.value = content
        ZoneStoreError.__init__(self, ErrorCode.MALFORMED_CONTENT.format(record_type, reason))


class InvalidIDError(ZoneStoreError):
    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(ErrorCode.INVALID_ID.format(record_id))


class OperationNotImplementedError(ZoneStoreError, NotImplementedError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(ErrorCode.NOT_IMPLEMENTED.format(operation))


class BatchResult:
    """Records processed by a batch operation and the error that ended it, if any.

    Batch operations stop at the first failure. ``records`` then holds the
    prefix handled before the failing item and ``error`` the failure itself;
    nothing already written is rolled back.
    """

    def __init__(self, records: Optional[List] = None, error: Optional[ZoneStoreError] = None):
        self.records = list(records or [])
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> List:
        if self.error is not None:
            raise self.error
        return self.records

    def __iter__(self) -> Iterator:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __repr__(self) -> str:
        return f"BatchResult(records={self.records!r}, error={self.error!r})"
