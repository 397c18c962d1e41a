from .engine import make_engine, init_db
from .models import Base, CrawlResultRecord

__all__ = [
    "make_engine",
    "init_db",
    "Base",
    "CrawlResultRecord",
]
