from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator, Mapping, Optional

from .config_loader import PipelineConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LEVEL_ENV_VAR = "LEADS_ETL_LOG_LEVEL"
DEFAULT_LEVEL = "WARNING"


def level_from_name(name: Optional[str]) -> int:
    """Numeric level for ``name`` ("debug", "20", ...); unknown names give INFO."""
    text = str(name or "").strip().upper()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text)
    if isinstance(level, int):
        return level
    return logging.INFO


def configure_logging(config: PipelineConfig, level_override: Optional[str] = None) -> int:
    """Set the root level and install a stderr handler on first use.

    The first of ``$LEADS_ETL_LOG_LEVEL``, ``level_override`` (``--log-level``)
    and ``config.logging.level`` that is set decides; WARNING otherwise.
    Returns the numeric level applied.
    """
    candidates = (os.getenv(LEVEL_ENV_VAR), level_override, config.logging.level)
    chosen = next((value for value in candidates if value), DEFAULT_LEVEL)
    level = level_from_name(chosen)

    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return level


def log_summary(logger: logging.Logger, title: str, counts: Mapping[str, object]) -> None:
    rendered = ", ".join(f"{key}={value}" for key, value in counts.items())
    logger.info("%s: %s", title, rendered)


@contextmanager
def timed_run(logger: logging.Logger, label: str) -> Iterator[None]:
    started = time.monotonic()
    try:
        yield
    finally:
        logger.info("%s finished in %.2fs", label, time.monotonic() - started)
