from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import pytest

from keywordcrawl.db.models import Base
from keywordcrawl.repository.crawl_results import CrawlResultsRepository


@pytest.fixture
def repo():
    engine = create_engine("sqlite:///:memory:", future=True)
    Base.metadata.create_all(engine)
    session_factory = sessionmaker(bind=engine, future=True)
    return CrawlResultsRepository(session_factory)


def _payload(url="https://a.test"):
    return {
        "results": [{"url": url, "matches": [], "pages_crawled": 1, "error": None}],
        "total_pages_crawled": 1,
        "total_processing_time_ms": 12,
        "crawl_timestamp": "1700000000",
    }


def test_save_then_get_roundtrips_payload(repo):
    result_id = repo.save(_payload())

    stored = repo.get(result_id)

    assert stored is not None
    assert stored.id == result_id
    assert stored.payload == _payload()
    assert stored.created_at is not None


def test_get_unknown_id_returns_none(repo):
    assert repo.get("does-not-exist") is None


def test_save_assigns_distinct_ids(repo):
    assert repo.save(_payload()) != repo.save(_payload())


def test_list_recent_respects_limit(repo):
    ids = {repo.save(_payload(f"https://{i}.test")) for i in range(3)}

    recent = repo.list_recent(limit=2)
    assert len(recent) == 2
    assert {s.id for s in recent} <= ids
    assert len(repo.list_recent()) == 3


def test_list_recent_empty(repo):
    assert repo.list_recent() == []
