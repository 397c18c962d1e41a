import json
import uuid
from datetime import datetime
from typing import Any, NamedTuple, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from keywordcrawl.db.models import CrawlResultRecord


class StoredCrawlResult(NamedTuple):
    id: str
    payload: dict[str, Any]
    created_at: Optional[datetime]


class CrawlResultsRepository:
    """Repository for serialized crawl results.

    Requires an explicit `session_factory` (callable returning a `Session`).
    Payloads are stored as opaque JSON text.
    """
    def __init__(self, session_factory):
        self.session_factory = session_factory

    def get_session(self) -> Session:
        return self.session_factory()

    def _to_stored(self, row: CrawlResultRecord) -> StoredCrawlResult:
        return StoredCrawlResult(id=row.id, payload=json.loads(row.payload), created_at=row.created_at)

    def save(self, payload: dict) -> str:
        result_id = str(uuid.uuid4())
        text = json.dumps(payload, default=str)
        with self.get_session() as session:
            session.add(CrawlResultRecord(id=result_id, payload=text))
            session.commit()
        return result_id

    def get(self, result_id: str) -> Optional[StoredCrawlResult]:
        with self.get_session() as session:
            row = session.execute(select(CrawlResultRecord).where(CrawlResultRecord.id == result_id)).scalars().first()
            if row is None:
                return None
            return self._to_stored(row)

    def list_recent(self, limit: int = 20) -> list[StoredCrawlResult]:
        with self.get_session() as session:
            q = select(CrawlResultRecord).order_by(CrawlResultRecord.created_at.desc()).limit(limit)
            rows = session.execute(q).scalars().all()
            return [self._to_stored(r) for r in rows]
