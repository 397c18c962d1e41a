import logging
from typing import Optional

import uvicorn

from keywordcrawl.api.server import create_app
from keywordcrawl.container import Container
from keywordcrawl.db.engine import init_db

logger = logging.getLogger(__name__)


def main(container: Optional[Container] = None):
    container = container or Container()
    env = container.config()

    logging.basicConfig(
        level=env.get("LOG_LEVEL") or "INFO",
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if env.get("DATABASE_URL"):
        try:
            init_db(container.db_engine())
        except Exception:
            logger.exception("Could not initialize crawl_results table; results will not be stored")
            container.config.DATABASE_URL.from_value(None)
    else:
        logger.warning("DATABASE_URL not set; crawl results will not be stored")

    app = create_app(container)
    host = env.get("SERVER_HOST") or "0.0.0.0"
    port = int(env.get("SERVER_PORT") or 3000)
    logger.info("Server running on http://%s:%s", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == '__main__':
    main()
