"""Logging configuration for the CDK app and helper scripts."""

from __future__ import annotations

import logging
import os
import sys


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once for an entry point.

    The level defaults to ``SITE_LOG_LEVEL`` from the environment, then INFO.
    Output goes to stderr so that ``cdk synth`` keeps stdout for the template.
    """
    level_name = (level or os.environ.get("SITE_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
