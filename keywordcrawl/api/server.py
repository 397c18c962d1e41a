from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from keywordcrawl.api.routers import create_crawl_router, create_systems_router


def create_app(container) -> FastAPI:
    """Build the FastAPI application from a wired `Container`."""
    app = FastAPI(title="KeywordCrawl")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Accept", "Content-Type"],
    )

    env = container.config()
    results_repo = container.crawl_results_repository() if env.get("DATABASE_URL") else None

    app.include_router(create_crawl_router(
        container.crawl_orchestrator(),
        results_repo=results_repo,
        default_max_pages=int(env.get("KEYWORDCRAWL_DEFAULT_MAX_PAGES") or 10),
    ))
    app.include_router(create_systems_router(env))
    return app
