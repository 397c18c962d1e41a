from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text, func
from sqlalchemy.orm import declarative_base


Base = declarative_base()


class CrawlResultRecord(Base):
    __tablename__ = "crawl_results"

    id = Column(String(36), primary_key=True)
    payload = Column(Text, nullable=False)  # JSON-serialized CrawlResult
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
