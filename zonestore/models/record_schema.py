import enum
from datetime import timedelta

from pydantic import BaseModel


class RecordType(str, enum.Enum):
    A = "A"
    TXT = "TXT"


class Record(BaseModel):
    """A DNS resource record as exchanged with the embedding DNS server.

    ``id`` is empty until the record has been stored. ``priority`` travels
    with the record in memory only; the table has no column for it.
    """

    id: str = ""
    type: str
    name: str
    value: str
    ttl: timedelta = timedelta(0)
    priority: int = 0

    @property
    def ttl_seconds(self) -> int:
        # Truncated toward zero: 1.5s is stored as 1
        return int(self.ttl.total_seconds())
