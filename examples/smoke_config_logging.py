from __future__ import annotations

import logging

from roommatetap.config import load_config
from roommatetap.logging import init_logging


def main() -> None:
    config = load_config("configs")
    init_logging(config.logging)

    logger = logging.getLogger("smoke")
    logger.info("Config loaded environment=%s", config.environment)
    logger.info("Listening on %s:%s max_header_bytes=%s", config.http.host, config.http.port, config.http.max_header_bytes)
    logger.info("Limiter rps=%s burst=%s ttl=%s", config.limiter.rps, config.limiter.burst, config.limiter.ttl)


if __name__ == "__main__":
    main()
