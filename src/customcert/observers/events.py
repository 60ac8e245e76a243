# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import List, Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events in a single invocation
    env: str          # append/delete
    context: Optional[str]  # kube-context

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(env: str, context: Optional[str], run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
        "env": env,
        "context": context,
    }


# ---------------------------------------------------------------------
# Run lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class RunStarted(BaseEvent):
    action: str
    namespace: str

@dataclass(frozen=True)
class CertificateLoaded(BaseEvent):
    path: str
    size: int

@dataclass(frozen=True)
class RunFailed(BaseEvent):
    kind: str
    name: Optional[str]
    error: str

@dataclass(frozen=True)
class RunSummary(BaseEvent):
    action: str
    status: str          # "OK" or "FAILED"
    configs: List[str] = field(default_factory=list)
    node_groups: List[str] = field(default_factory=list)
    error: Optional[str] = None


# ---------------------------------------------------------------------
# Per-object lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class ObjectsListed(BaseEvent):
    kind: str
    names: List[str]

@dataclass(frozen=True)
class BootstrapConfigPatched(BaseEvent):
    kind: str
    name: str
    mode: str
    files: int           # file entries after the edit

@dataclass(frozen=True)
class RolloutTriggered(BaseEvent):
    name: str
    timestamp: str

@dataclass(frozen=True)
class ObjectSkipped(BaseEvent):
    kind: str
    name: str
    reason: str


# ---------------------------------------------------------------------
# Best-effort side effects
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class SideEffectFailed(BaseEvent):
    name: str            # "side-files" | "kapp-secret"
    error: str
