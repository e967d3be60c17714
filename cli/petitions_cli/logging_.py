from __future__ import annotations

import logging

SDK_LOGGER = "petitions_client"


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    # verbose shows every resolved request URL; otherwise only failed verifications
    logging.getLogger(SDK_LOGGER).setLevel(level)
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
