# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/logging/log.py

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

LOGGER_NAME = "customcert"

# Libraries that log every HTTP round-trip at DEBUG.
_CHATTY = ("urllib3", "kubernetes")


def init_logging(
    log_dir: Path,
    *,
    action: str = "run",
    verbose: bool = False,
) -> tuple[logging.Logger, str, Path]:
    """
    Configure the ``customcert`` logger for one invocation.

    The run log (``<action>-<utc timestamp>-<run_id>.log``) always holds
    the DEBUG trace, including each request URL. The console stays at
    INFO unless *verbose*. Returns ``(logger, run_id, log_path)``; the
    run_id also keys the JSON event journal.
    """
    run_id = uuid.uuid4().hex[:12]
    log_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    log_path = log_dir / f"{action}-{stamp}-{run_id}.log"

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = False

    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(module)s: %(message)s"))

    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(logging.Formatter("%(levelname)-7s %(message)s"))

    logger.addHandler(fh)
    logger.addHandler(ch)

    for name in _CHATTY:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    logger.info(f"customcert {action}: run_id={run_id} log={log_path}")
    return logger, run_id, log_path
