"""
Run the gallery server:

  python -m photogallery

Host, port and log level come from HOST, PORT and LOG_LEVEL (env or .env);
DEBUG=true overrides LOG_LEVEL.
"""

import logging
import sys

import uvicorn
from dotenv import load_dotenv

from photogallery.core.config import get_settings


def main() -> int:
    load_dotenv()
    settings = get_settings()
    logging.basicConfig(
        level="DEBUG" if settings.DEBUG else settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    logger = logging.getLogger("photogallery")
    logger.info("Server is starting on %s:%s", settings.HOST, settings.PORT)
    uvicorn.run(
        "photogallery.main:get_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
