from .crawl_results import CrawlResultsRepository, StoredCrawlResult

__all__ = ["CrawlResultsRepository", "StoredCrawlResult"]
