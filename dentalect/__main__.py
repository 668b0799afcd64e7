"""Run the API with uvicorn: `python -m dentalect`.

Store credentials are resolved before uvicorn starts, so a missing
DATABASE_URL ends the process with exit status 1.
"""

import logging
import sys

import uvicorn

from dentalect.config import get_settings, resolve_database_url
from dentalect.core.errors import ConfigurationError
from dentalect.infrastructure.observability import setup_logging

logger = logging.getLogger("dentalect")


def main() -> None:
    settings = get_settings()
    try:
        resolve_database_url(settings)
    except ConfigurationError as e:
        setup_logging(settings.log_level, settings.log_format)
        logger.critical(
            f"Cannot start: {e.message}",
            extra={"error_code": e.code},
        )
        sys.exit(1)
    uvicorn.run(
        "dentalect.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
