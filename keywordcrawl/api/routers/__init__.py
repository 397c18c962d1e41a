"""API router factory functions."""
from .crawl import create_crawl_router
from .systems import create_systems_router

__all__ = [
    "create_crawl_router",
    "create_systems_router",
]
