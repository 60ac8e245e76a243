# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/config/loader.py

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .models import Settings

log = logging.getLogger("customcert")

SETTINGS_ENV = "CUSTOMCERT_SETTINGS_FILE"


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Recursively merge *override* into *base* (mutates base).
    Only overwrites when the override value is non-empty.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            _deep_merge(base[key], value)
        else:
            if value not in (None, ""):
                base[key] = value
    return base


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    return yaml.safe_load(expanded) or {}


def _find_settings_file(environ: Mapping[str, str]) -> Optional[Path]:
    env = environ.get(SETTINGS_ENV)
    if not env:
        return None
    p = Path(env).expanduser()
    if p.is_file():
        return p
    log.warning("%s=%s does not exist, using defaults", SETTINGS_ENV, env)
    return None


def load_settings(
    overrides: Optional[dict] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build the run settings.

    Values are layered, later layers winning:
      1. model defaults
      2. YAML file named by ``CUSTOMCERT_SETTINGS_FILE`` (``${ENV}`` expanded)
      3. explicit *overrides* (e.g. from CLI flags)
    """
    environ = os.environ if environ is None else environ
    data: dict = {}

    path = _find_settings_file(environ)
    if path:
        log.debug("Loading settings from %s", path)
        _deep_merge(data, _load_yaml(path))

    if overrides:
        _deep_merge(data, overrides)

    return Settings.model_validate(data)
