import logging

import uvicorn

from config import server_config, logging_config
from middleware.request_logging import setup_logging

logger = logging.getLogger(__name__)


def main():
    setup_logging()
    logger.info(f"Starting server on {server_config.host}:{server_config.port}")
    uvicorn.run(
        "app:app",
        host=server_config.host,
        port=server_config.port,
        log_level=logging_config.level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
