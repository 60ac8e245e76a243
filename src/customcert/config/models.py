# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/config/models.py

from pathlib import Path

from pydantic import BaseModel, Field


def _default_provisioning_dir() -> Path:
    return Path.home() / ".config" / "tanzu" / "tkg" / "providers" / "ytt" / "03_customizations"


def _default_log_dir() -> Path:
    return Path.home() / ".customcert" / "logs"


class Settings(BaseModel):
    """Run-wide settings for a certificate append/delete invocation."""

    # Cluster API coordinates
    namespace: str = "default"
    controlplane_api_version: str = "v1beta1"
    bootstrap_api_version: str = "v1beta1"
    cluster_api_version: str = "v1beta1"

    # Certificate placement on the nodes
    cert_name: str = "tkg-custom-ca"

    # Local side files for future cluster provisioning
    provisioning_dir: Path = Field(default_factory=_default_provisioning_dir)

    # kapp-controller trust secret
    secret_name: str = "kapp-controller-config"
    secret_namespace: str = "tkg-system"

    # Behaviour
    request_timeout_s: float = 30
    include_control_plane: bool = False   # KubeadmControlPlane is treated as immutable by default
    skip_missing: bool = False            # skip objects deleted between list and get

    log_dir: Path = Field(default_factory=_default_log_dir)
