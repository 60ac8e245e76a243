# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/k8s/kinds.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from customcert.config.models import Settings


@dataclass(frozen=True)
class ResourceKind:
    """
    A namespaced Cluster API resource collection.

    ``spec_path`` locates the kubeadm config block (files and
    preKubeadmCommands) inside an object of this kind; it is empty for
    kinds that carry no bootstrap configuration.
    """

    kind: str
    group: str
    version: str
    plural: str
    namespace: str = "default"
    spec_path: Tuple[str, ...] = ()

    def collection_path(self) -> str:
        return f"/apis/{self.group}/{self.version}/namespaces/{self.namespace}/{self.plural}/"

    def object_path(self, name: str) -> str:
        return self.collection_path() + name


@dataclass(frozen=True)
class ClusterKinds:
    control_plane: ResourceKind
    config_template: ResourceKind
    machine_deployment: ResourceKind


def cluster_kinds(settings: Settings) -> ClusterKinds:
    ns = settings.namespace
    return ClusterKinds(
        control_plane=ResourceKind(
            kind="KubeadmControlPlane",
            group="controlplane.cluster.x-k8s.io",
            version=settings.controlplane_api_version,
            plural="kubeadmcontrolplanes",
            namespace=ns,
            spec_path=("spec", "kubeadmConfigSpec"),
        ),
        config_template=ResourceKind(
            kind="KubeadmConfigTemplate",
            group="bootstrap.cluster.x-k8s.io",
            version=settings.bootstrap_api_version,
            plural="kubeadmconfigtemplates",
            namespace=ns,
            spec_path=("spec", "template", "spec"),
        ),
        machine_deployment=ResourceKind(
            kind="MachineDeployment",
            group="cluster.x-k8s.io",
            version=settings.cluster_api_version,
            plural="machinedeployments",
            namespace=ns,
        ),
    )
