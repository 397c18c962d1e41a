import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException
from pydantic import BaseModel, Field

from keywordcrawl.domain.crawl_request import DEFAULT_MAX_PAGES, CrawlRequest
from keywordcrawl.exceptions import CrawlerError
from keywordcrawl.services.crawl_orchestrator import CrawlOrchestrator
from keywordcrawl.services.protocols import ResultStore

logger = logging.getLogger(__name__)


class CrawlRequestBody(BaseModel):
    url: str
    keywords: list[str]
    max_depth: Optional[int] = Field(default=None, ge=0)
    max_time_seconds: Optional[float] = Field(default=None, ge=0)
    follow_pagination: Optional[bool] = None
    max_pages: Optional[int] = Field(default=None, ge=0)
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    def to_domain(self, default_max_pages: int = DEFAULT_MAX_PAGES) -> CrawlRequest:
        return CrawlRequest(
            url=self.url,
            keywords=list(self.keywords),
            max_depth=self.max_depth,
            max_time_seconds=self.max_time_seconds,
            follow_pagination=bool(self.follow_pagination),
            max_pages=self.max_pages if self.max_pages is not None else default_max_pages,
            date_from=self.date_from,
            date_to=self.date_to,
        )


def create_crawl_router(
    orchestrator: CrawlOrchestrator,
    results_repo: Optional[ResultStore] = None,
    default_max_pages: int = DEFAULT_MAX_PAGES,
):
    router = APIRouter(tags=["Crawl"])

    def _persist(payload: dict):
        # runs after the response is sent; failures must not reach the caller
        try:
            result_id = results_repo.save(payload)
            logger.info("Stored crawl result %s", result_id)
        except Exception:
            logger.exception("Could not store crawl result")

    @router.post("/crawl")
    def crawl(req: CrawlRequestBody, background_tasks: BackgroundTasks):
        try:
            result = orchestrator.crawl(req.to_domain(default_max_pages))
        except CrawlerError as e:
            logger.info("Rejected crawl request for %r: %s", req.url, e)
            raise HTTPException(status_code=400, detail=str(e))

        payload = result.to_dict()
        if results_repo is not None:
            background_tasks.add_task(_persist, payload)
        return payload

    @router.get("/crawl/results")
    def list_results(limit: int = 20):
        if results_repo is None:
            return {"results": []}
        stored = results_repo.list_recent(limit=limit)
        return {
            "results": [
                {"id": s.id, "created_at": s.created_at, "payload": s.payload}
                for s in stored
            ]
        }

    @router.get("/crawl/results/{result_id}")
    def get_result(result_id: str):
        if results_repo is None:
            raise HTTPException(status_code=404, detail="no result store configured")
        stored = results_repo.get(result_id)
        if stored is None:
            raise HTTPException(status_code=404, detail="result not found")
        return {"id": stored.id, "created_at": stored.created_at, "payload": stored.payload}

    return router
