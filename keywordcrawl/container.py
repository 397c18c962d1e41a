"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests
from sqlalchemy.orm import sessionmaker

from keywordcrawl.db.engine import make_engine
from keywordcrawl.repository.crawl_results import CrawlResultsRepository
from keywordcrawl.services.crawl_orchestrator import CrawlOrchestrator
from keywordcrawl.services.date_filter import DateFilter
from keywordcrawl.services.domain_crawler import DomainCrawler
from keywordcrawl.services.http_service import HttpService
from keywordcrawl.services.keyword_scorer import KeywordScorer
from keywordcrawl.services.page_extractor import PageExtractor
from keywordcrawl import config as env


# Environment variables used by the container (read via `keywordcrawl.config` helpers).
#
# DATABASE_URL (str | optional)
#   SQLAlchemy URL for the crawl_results table. When unset, results are not stored.
#
# USER_AGENT (str, default: "KeywordCrawl/0.1")
#   User-Agent header for outbound HTTP requests.
#
# HTTP_TIMEOUT (float seconds, default: 10)
#   Upper bound for each page fetch. A request's max_time_seconds can shorten it.
#
# KEYWORDCRAWL_DEFAULT_MAX_PAGES (int, default: 10)
#   Page budget per domain when a request does not set max_pages.
#
# KEYWORDCRAWL_MAX_CONCURRENCY (int, default: 4)
#   Number of domains of one request crawled in parallel. 1 crawls them in order.
#
# SERVER_HOST / SERVER_PORT (default: 0.0.0.0 / 3000)
#   Bind address for the API server.
#
# LOG_LEVEL (str, default: "INFO")
#   Root logging level configured by run.py.
ENV = {
    "DATABASE_URL": env.get_optional_str_env("DATABASE_URL"),
    "USER_AGENT": env.get_str_env("USER_AGENT", "KeywordCrawl/0.1"),
    "HTTP_TIMEOUT": env.get_float_env("HTTP_TIMEOUT", 10.0),
    "KEYWORDCRAWL_DEFAULT_MAX_PAGES": env.get_int_env("KEYWORDCRAWL_DEFAULT_MAX_PAGES", 10),
    "KEYWORDCRAWL_MAX_CONCURRENCY": env.get_int_env("KEYWORDCRAWL_MAX_CONCURRENCY", 4),
    "SERVER_HOST": env.get_str_env("SERVER_HOST", "0.0.0.0"),
    "SERVER_PORT": env.get_int_env("SERVER_PORT", 3000),
    "LOG_LEVEL": env.get_str_env("LOG_LEVEL", "INFO").strip().upper(),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for KeywordCrawl application."""

    # Configuration
    config = providers.Configuration(default=ENV)

    # Database engine - Singleton to reuse connection pool
    db_engine = providers.Singleton(
        make_engine,
        database_url=config.DATABASE_URL
    )
    # Session factory bound to the engine
    session_factory = providers.Factory(
        sessionmaker,
        bind=db_engine,
        future=True
    )

    crawl_results_repository = providers.Singleton(
        CrawlResultsRepository,
        session_factory=session_factory
    )

    # Services - Singleton instances; all are stateless between requests
    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(float)
    )

    page_extractor = providers.Singleton(
        PageExtractor
    )

    keyword_scorer = providers.Singleton(
        KeywordScorer,
        text_cleaner=page_extractor.provided.clean_text,
    )

    date_filter = providers.Singleton(
        DateFilter
    )

    domain_crawler = providers.Singleton(
        DomainCrawler,
        fetcher=http_service,
        page_extractor=page_extractor,
        keyword_scorer=keyword_scorer,
        date_filter=date_filter,
        http_timeout=config.HTTP_TIMEOUT.as_(float),
    )

    crawl_orchestrator = providers.Singleton(
        CrawlOrchestrator,
        domain_crawler=domain_crawler,
        date_filter=date_filter,
        max_concurrency=config.KEYWORDCRAWL_MAX_CONCURRENCY.as_(int),
    )
