# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/k8s/errors.py

from __future__ import annotations

from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    NOT_FOUND = "NotFound"
    UNAUTHORIZED = "Unauthorized"
    CONFLICT = "Conflict"
    TRANSPORT = "Transport"
    DECODE = "Decode"
    UNEXPECTED_STATUS = "UnexpectedStatus"


class ResourceError(RuntimeError):
    """Base class for failed cluster API calls."""

    kind: FailureKind = FailureKind.UNEXPECTED_STATUS

    def __init__(self, message: str, *, status: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.url = url


class NotFoundError(ResourceError):
    kind = FailureKind.NOT_FOUND


class UnauthorizedError(ResourceError):
    kind = FailureKind.UNAUTHORIZED


class ConflictError(ResourceError):
    kind = FailureKind.CONFLICT


class TransportError(ResourceError):
    """Connection, TLS or timeout failure before any HTTP status was seen."""

    kind = FailureKind.TRANSPORT


class DecodeError(ResourceError):
    """Response body is not JSON, or not the shape we expected."""

    kind = FailureKind.DECODE


class UnexpectedStatusError(ResourceError):
    kind = FailureKind.UNEXPECTED_STATUS


class CredentialsError(RuntimeError):
    """Raised when the kubeconfig cannot be turned into a cluster endpoint."""


def error_for_status(status: int, message: str, *, url: Optional[str] = None) -> ResourceError:
    if status == 404:
        cls = NotFoundError
    elif status in (401, 403):
        cls = UnauthorizedError
    elif status == 409:
        cls = ConflictError
    else:
        cls = UnexpectedStatusError
    return cls(message, status=status, url=url)
