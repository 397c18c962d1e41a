from datetime import datetime
from unittest.mock import Mock

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from keywordcrawl.api.routers.crawl import CrawlRequestBody, create_crawl_router
from keywordcrawl.api.routers.systems import create_systems_router
from keywordcrawl.domain.crawl_result import CrawlResult, DomainResult
from keywordcrawl.exceptions import DateParsingError, InvalidRequestError
from keywordcrawl.repository.crawl_results import StoredCrawlResult


def _get_endpoint(router, path: str, method: str):
    for route in router.routes:
        if getattr(route, "path", None) != path:
            continue
        methods = getattr(route, "methods", set())
        if method.upper() in methods:
            return route.endpoint
    raise AssertionError(f"No route found for {method} {path}")


def _result():
    return CrawlResult(
        results=[DomainResult(url="https://a.test", pages_crawled=1)],
        total_pages_crawled=1,
        total_processing_time_ms=5,
        crawl_timestamp="1700000000",
    )


def test_body_defaults_map_to_domain_request():
    body = CrawlRequestBody(url="a.test", keywords=["widget"])
    request = body.to_domain(default_max_pages=7)
    assert request.max_pages == 7
    assert request.follow_pagination is False
    assert request.max_depth is None
    assert request.keywords == ["widget"]


def test_body_explicit_max_pages_wins():
    body = CrawlRequestBody(url="a.test", keywords=[], max_pages=0, follow_pagination=True)
    request = body.to_domain(default_max_pages=7)
    assert request.max_pages == 0
    assert request.follow_pagination is True


def test_body_rejects_negative_limits():
    with pytest.raises(ValidationError):
        CrawlRequestBody(url="a.test", keywords=["x"], max_pages=-1)


def test_crawl_returns_serialized_result():
    orchestrator = Mock(crawl=Mock(return_value=_result()))
    router = create_crawl_router(orchestrator)
    endpoint = _get_endpoint(router, "/crawl", "POST")
    background_tasks = Mock()

    payload = endpoint(req=CrawlRequestBody(url="a.test", keywords=["x"]), background_tasks=background_tasks)

    assert payload["total_pages_crawled"] == 1
    assert payload["results"][0]["url"] == "https://a.test"
    background_tasks.add_task.assert_not_called()


def test_crawl_passes_default_max_pages():
    orchestrator = Mock(crawl=Mock(return_value=_result()))
    router = create_crawl_router(orchestrator, default_max_pages=3)
    endpoint = _get_endpoint(router, "/crawl", "POST")

    endpoint(req=CrawlRequestBody(url="a.test", keywords=["x"]), background_tasks=Mock())

    request = orchestrator.crawl.call_args.args[0]
    assert request.max_pages == 3


@pytest.mark.parametrize("error", [
    DateParsingError("date_from cannot be after date_to"),
    InvalidRequestError("No valid URLs provided"),
])
def test_crawl_request_errors_are_400(error):
    orchestrator = Mock(crawl=Mock(side_effect=error))
    router = create_crawl_router(orchestrator)
    endpoint = _get_endpoint(router, "/crawl", "POST")

    with pytest.raises(HTTPException) as exc:
        endpoint(req=CrawlRequestBody(url="a.test", keywords=["x"]), background_tasks=Mock())
    assert exc.value.status_code == 400
    assert exc.value.detail == str(error)


def test_crawl_schedules_persistence_when_store_configured():
    orchestrator = Mock(crawl=Mock(return_value=_result()))
    results_repo = Mock(save=Mock(return_value="abc"))
    router = create_crawl_router(orchestrator, results_repo=results_repo)
    endpoint = _get_endpoint(router, "/crawl", "POST")
    background_tasks = Mock()

    payload = endpoint(req=CrawlRequestBody(url="a.test", keywords=["x"]), background_tasks=background_tasks)

    assert background_tasks.add_task.call_count == 1
    task, task_payload = background_tasks.add_task.call_args.args
    assert task_payload == payload
    results_repo.save.assert_not_called()

    task(task_payload)
    results_repo.save.assert_called_once_with(payload)


def test_persistence_failure_is_not_raised():
    orchestrator = Mock(crawl=Mock(return_value=_result()))
    results_repo = Mock(save=Mock(side_effect=RuntimeError("db down")))
    router = create_crawl_router(orchestrator, results_repo=results_repo)
    endpoint = _get_endpoint(router, "/crawl", "POST")
    background_tasks = Mock()

    endpoint(req=CrawlRequestBody(url="a.test", keywords=["x"]), background_tasks=background_tasks)
    task, task_payload = background_tasks.add_task.call_args.args
    task(task_payload)


def test_list_results_without_store():
    router = create_crawl_router(Mock())
    endpoint = _get_endpoint(router, "/crawl/results", "GET")
    assert endpoint(limit=5) == {"results": []}


def test_list_results_from_store():
    created = datetime(2024, 1, 1, 12, 0, 0)
    results_repo = Mock(list_recent=Mock(return_value=[StoredCrawlResult("id-1", {"k": 1}, created)]))
    router = create_crawl_router(Mock(), results_repo=results_repo)
    endpoint = _get_endpoint(router, "/crawl/results", "GET")

    body = endpoint(limit=5)

    results_repo.list_recent.assert_called_once_with(limit=5)
    assert body == {"results": [{"id": "id-1", "created_at": created, "payload": {"k": 1}}]}


def test_get_result_404s():
    router = create_crawl_router(Mock())
    endpoint = _get_endpoint(router, "/crawl/results/{result_id}", "GET")
    with pytest.raises(HTTPException) as exc:
        endpoint(result_id="x")
    assert exc.value.status_code == 404

    router = create_crawl_router(Mock(), results_repo=Mock(get=Mock(return_value=None)))
    endpoint = _get_endpoint(router, "/crawl/results/{result_id}", "GET")
    with pytest.raises(HTTPException) as exc:
        endpoint(result_id="missing")
    assert exc.value.status_code == 404
    assert exc.value.detail == "result not found"


def test_get_result_found():
    stored = StoredCrawlResult("id-1", {"k": 1}, None)
    router = create_crawl_router(Mock(), results_repo=Mock(get=Mock(return_value=stored)))
    endpoint = _get_endpoint(router, "/crawl/results/{result_id}", "GET")
    assert endpoint(result_id="id-1") == {"id": "id-1", "created_at": None, "payload": {"k": 1}}


def test_systems_config_hides_database_url():
    router = create_systems_router({"DATABASE_URL": "postgresql://secret", "HTTP_TIMEOUT": 10.0, "LOG_LEVEL": None})
    endpoint = _get_endpoint(router, "/systems/config", "GET")
    assert endpoint() == {"environment": {"HTTP_TIMEOUT": "10.0", "LOG_LEVEL": None}}


def test_systems_health():
    router = create_systems_router({})
    assert _get_endpoint(router, "/systems/health", "GET")() == {"status": "ok"}
