from __future__ import annotations

import logging
import os

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging() -> None:
    level_name = os.getenv("STOREFRONT_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown STOREFRONT_LOG_LEVEL={level_name!r}")

    logging.basicConfig(level=level, format=_FORMAT)
    logging.getLogger("services.storefront").setLevel(level)
