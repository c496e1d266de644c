"""Conversion between record values and the JSON stored in the ``content`` column.

Each supported record type owns one payload model. The model parses a
record value into its stored form and renders the stored form back into
text; ``record_type`` on the row selects which model reads the content.
"""
import logging
from typing import Dict, List, Type

from pydantic import BaseModel, IPvAnyAddress, ValidationError, field_validator

from zonestore.core.errors import InvalidValueError, MalformedContentError, UnsupportedTypeError
from zonestore.models.record_schema import Record, RecordType

logger = logging.getLogger(__name__)


class ARecordContent(BaseModel):
    ip: IPvAnyAddress

    @field_validator("ip")
    @classmethod
    def plain_address(cls, ip):
        if getattr(ip, "scope_id", None):
            raise ValueError("scoped IPv6 addresses are not allowed")
        # IPv4-mapped IPv6 is kept as the IPv4 address it carries
        if getattr(ip, "ipv4_mapped", None) is not None:
            return ip.ipv4_mapped
        return ip

    @classmethod
    def from_value(cls, value: str) -> "ARecordContent":
        return cls(ip=value)

    def to_value(self) -> str:
        # ipaddress renders the canonical form (lowercase, compressed IPv6)
        return str(self.ip)


class TXTRecordContent(BaseModel):
    text: str

    @classmethod
    def from_value(cls, value: str) -> "TXTRecordContent":
        return cls(text=value)

    def to_value(self) -> str:
        return self.text


CONTENT_MODELS: Dict[RecordType, Type[BaseModel]] = {
    RecordType.A: ARecordContent,
    RecordType.TXT: TXTRecordContent,
}


def supported_types() -> List[str]:
    return [record_type.value for record_type in CONTENT_MODELS]


def content_model(record_type: str) -> Type[BaseModel]:
    try:
        return CONTENT_MODELS[RecordType(record_type)]
    except (ValueError, KeyError):
        raise UnsupportedTypeError(record_type) from None


def encode(record: Record) -> str:
    """Serialize ``record.value`` into the payload stored for ``record.type``."""
    model = content_model(record.type)
    try:
        payload = model.from_value(record.value)
    except ValidationError:
        logger.debug(f"Rejected {record.type} value {record.value!r} for {record.name}")
        raise InvalidValueError(record.type, record.value) from None
    return payload.model_dump_json()


def decode(content: str, record_type: str) -> str:
    """Render stored ``content`` back into the record value text."""
    model = content_model(record_type)
    try:
        payload = model.model_validate_json(content)
    except ValidationError as e:
        reason = "; ".join(error["msg"] for error in e.errors())
        raise MalformedContentError(record_type, content, reason) from e
    return payload.to_value()


def canonical(value: str, record_type: str) -> str:
    """The text ``value`` reads back as once stored."""
    model = content_model(record_type)
    try:
        return model.from_value(value).to_value()
    except ValidationError:
        raise InvalidValueError(record_type, value) from None
