from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class ZoneRecord(Base):
    __tablename__ = "coredns_records"

    id = Column(Integer, primary_key=True, autoincrement=True)  # Assigned by the database, exposed as Record.id
    zone = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    ttl_seconds = Column(Integer, nullable=False, default=0)
    content = Column(Text, nullable=False)  # JSON payload, layout depends on record_type
    record_type = Column(String(10), nullable=False)
