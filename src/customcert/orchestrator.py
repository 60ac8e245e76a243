# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/orchestrator.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from customcert.certs.editor import append_file, bootstrap_patch, files_of, remove_file
from customcert.certs.material import CertificateMaterial
from customcert.config.models import Settings
from customcert.k8s.client import ApplyMode, ResourceClient
from customcert.k8s.errors import FailureKind, ResourceError
from customcert.k8s.kinds import ClusterKinds, ResourceKind, cluster_kinds
from customcert.observers.dispatcher import EventBus
from customcert.observers.events import (
    new_ctx,
    BootstrapConfigPatched,
    ObjectSkipped,
    ObjectsListed,
    RolloutTriggered,
    RunFailed,
    RunStarted,
    RunSummary,
)
from customcert.rollout.trigger import DATE_ANNOTATION, bump_rollout, rollout_patch

log = logging.getLogger("customcert")


class Action(str, Enum):
    APPEND = "append"
    DELETE = "delete"


@dataclass
class RunReport:
    action: Action
    configs: Dict[str, List[str]] = field(default_factory=dict)   # kind -> patched names
    node_groups: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    def summary(self) -> str:
        patched = sum(len(v) for v in self.configs.values())
        return f"CONFIGS={patched} NODE_GROUPS={len(self.node_groups)} SKIPPED={len(self.skipped)}"


class CertificateOrchestrator:
    """
    Pushes a CA file into every kubeadm bootstrap config, then rolls the
    MachineDeployments that consume them.

    Strictly sequential: list, fetch, edit, submit, one object at a time.
    Every bootstrap config is written before the first rollout is
    triggered, so new machines always boot with the updated config. There
    is no rollback; a failure leaves earlier objects mutated and later ones
    untouched, and re-running the same action converges.
    """

    def __init__(
        self,
        client: ResourceClient,
        settings: Settings,
        *,
        bus: Optional[EventBus] = None,
        run_ctx: Optional[Dict[str, Any]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.client = client
        self.settings = settings
        self.kinds: ClusterKinds = cluster_kinds(settings)
        self.bus = bus or EventBus([])
        self.run_ctx = run_ctx or new_ctx(env="customcert", context=None)
        self.clock = clock

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _fetch(self, kind: ResourceKind, name: str, report: RunReport) -> Optional[Dict[str, Any]]:
        try:
            return self.client.get(kind, name)
        except ResourceError as exc:
            if exc.kind is FailureKind.NOT_FOUND and self.settings.skip_missing:
                log.warning(f"{kind.kind}/{name} disappeared after listing, skipping")
                report.skipped.append(f"{kind.kind}/{name}")
                self.bus.emit(ObjectSkipped(kind=kind.kind, name=name, reason=str(exc), **self.run_ctx))
                return None
            raise

    def _list(self, kind: ResourceKind) -> List[str]:
        names = self.client.list_names(kind)
        self.bus.emit(ObjectsListed(kind=kind.kind, names=list(names), **self.run_ctx))
        log.info(f"{kind.kind}: {len(names)} found")
        return names

    def _edit(self, action: Action, obj: Dict[str, Any], kind: ResourceKind, cert: CertificateMaterial) -> Dict[str, Any]:
        edit = append_file if action is Action.APPEND else remove_file
        return edit(obj, cert.content, spec_path=kind.spec_path, cert_name=self.settings.cert_name)

    def _update_configs(
        self,
        action: Action,
        kind: ResourceKind,
        cert: CertificateMaterial,
        report: RunReport,
        *,
        mode: ApplyMode = ApplyMode.MERGE_PATCH,
    ) -> None:
        patched = report.configs.setdefault(kind.kind, [])
        for name in self._list(kind):
            obj = self._fetch(kind, name, report)
            if obj is None:
                continue

            edited = self._edit(action, obj, kind, cert)
            body = edited if mode is ApplyMode.REPLACE else bootstrap_patch(edited, kind.spec_path)

            log.info(f"[{action.value}] {kind.kind}/{name} ({mode.value})")
            self.client.apply(kind, name, body, mode)

            patched.append(name)
            self.bus.emit(
                BootstrapConfigPatched(
                    kind=kind.kind,
                    name=name,
                    mode=mode.value,
                    files=len(files_of(edited, kind.spec_path)),
                    **self.run_ctx,
                )
            )

    def _roll_node_groups(self, report: RunReport) -> None:
        kind = self.kinds.machine_deployment
        for name in self._list(kind):
            obj = self._fetch(kind, name, report)
            if obj is None:
                continue

            now = self.clock() if self.clock else None
            bumped = bump_rollout(obj, now)
            patch = rollout_patch(bumped)
            stamp = patch["spec"]["template"]["metadata"]["annotations"][DATE_ANNOTATION]

            log.info(f"Rolling {kind.kind}/{name} (date={stamp})")
            self.client.apply(kind, name, patch, ApplyMode.MERGE_PATCH)

            report.node_groups.append(name)
            self.bus.emit(RolloutTriggered(name=name, timestamp=stamp, **self.run_ctx))

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def run(self, action: Action, cert: CertificateMaterial) -> RunReport:
        action = Action(action)
        report = RunReport(action=action)
        self.bus.emit(RunStarted(action=action.value, namespace=self.settings.namespace, **self.run_ctx))

        try:
            if self.settings.include_control_plane:
                # KubeadmControlPlane: full replace on append, merge patch on delete
                cp_mode = ApplyMode.REPLACE if action is Action.APPEND else ApplyMode.MERGE_PATCH
                self._update_configs(action, self.kinds.control_plane, cert, report, mode=cp_mode)

            self._update_configs(action, self.kinds.config_template, cert, report)

            # Only after every bootstrap config is written.
            self._roll_node_groups(report)

        except ResourceError as exc:
            self.bus.emit(RunFailed(kind=exc.kind.value, name=exc.url, error=str(exc), **self.run_ctx))
            self.bus.emit(
                RunSummary(
                    action=action.value,
                    status="FAILED",
                    configs=[n for names in report.configs.values() for n in names],
                    node_groups=list(report.node_groups),
                    error=str(exc),
                    **self.run_ctx,
                )
            )
            raise

        log.info(f"[{action.value}] done: {report.summary()}")
        self.bus.emit(
            RunSummary(
                action=action.value,
                status="OK",
                configs=[n for names in report.configs.values() for n in names],
                node_groups=list(report.node_groups),
                **self.run_ctx,
            )
        )
        return report
