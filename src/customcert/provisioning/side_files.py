# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/provisioning/side_files.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from customcert.certs.editor import canonical_commands
from customcert.certs.material import CertificateMaterial

log = logging.getLogger("customcert")

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
OVERLAY_TEMPLATE = "overlay.yaml.j2"


def render_overlay(cert_name: str) -> str:
    """Render the ytt overlay that makes future clusters trust the CA."""
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
    )
    return env.get_template(OVERLAY_TEMPLATE).render(
        cert_name=cert_name,
        commands=canonical_commands(cert_name),
    )


def write_provisioning_files(
    cert: CertificateMaterial,
    target_dir: Path,
    *,
    cert_name: str,
) -> List[str]:
    """
    Drop the overlay and the PEM into the tanzu ytt customizations dir.

    Each write is independent and best-effort: a failure is logged and
    returned, never raised.
    """
    errors: List[str] = []
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        msg = f"unable to create {target_dir}: {exc}"
        log.error(msg)
        return [msg]

    writes = [
        (target_dir / "overlay.yaml", render_overlay(cert_name)),
        (target_dir / f"{cert_name}.pem", cert.content),
    ]
    for path, text in writes:
        try:
            path.write_text(text)
            path.chmod(0o644)
            log.info(f"Wrote {path}")
        except OSError as exc:
            msg = f"unable to write {path.name} to {path.parent}: {exc}"
            log.error(msg)
            errors.append(msg)
    return errors
