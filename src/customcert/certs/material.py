# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/certs/material.py

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger("customcert")

PEM_MARKER = "-----BEGIN CERTIFICATE-----"


class CertificateError(RuntimeError):
    """The operator-supplied certificate file is unusable."""


@dataclass(frozen=True)
class CertificateMaterial:
    path: Path
    content: str

    def b64(self) -> str:
        return base64.b64encode(self.content.encode("utf-8")).decode("ascii")


def load_certificate(path: str | Path) -> CertificateMaterial:
    """
    Read the CA certificate once for the whole run.

    The content is kept byte-for-byte (no whitespace normalisation) because
    file entries are matched on exact content.
    """
    path = Path(path).expanduser()
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CertificateError(f"Error reading certificate {path}: {exc}") from exc

    if not content.strip():
        raise CertificateError(f"Certificate file {path} is empty")
    if PEM_MARKER not in content:
        raise CertificateError(f"{path} does not contain a PEM certificate block")

    log.debug(f"Loaded certificate {path} ({len(content)} bytes)")
    return CertificateMaterial(path=path, content=content)
