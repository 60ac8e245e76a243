# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/k8s/credentials.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests
from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from .errors import CredentialsError

log = logging.getLogger("customcert")


@dataclass(frozen=True)
class ClusterEndpoint:
    """API server URL plus the TLS client identity used against it."""

    base_url: str
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_file: Optional[str] = None
    verify_ssl: bool = True
    token: Optional[str] = None      # full Authorization header value, e.g. "Bearer abc"

    def session(self) -> requests.Session:
        s = requests.Session()
        if self.cert_file and self.key_file:
            s.cert = (self.cert_file, self.key_file)
        if not self.verify_ssl:
            s.verify = False
        elif self.ca_file:
            s.verify = self.ca_file
        if self.token:
            s.headers["Authorization"] = self.token
        s.headers["Accept"] = "application/json"
        return s

    def api_client(self) -> client.ApiClient:
        """A kubernetes ApiClient sharing this endpoint's identity."""
        cfg = client.Configuration()
        cfg.host = self.base_url
        cfg.cert_file = self.cert_file
        cfg.key_file = self.key_file
        cfg.ssl_ca_cert = self.ca_file
        cfg.verify_ssl = self.verify_ssl
        if self.token:
            cfg.api_key = {"authorization": self.token}
        return client.ApiClient(cfg)


def load_endpoint(kubeconfig: Optional[str] = None, context: Optional[str] = None) -> ClusterEndpoint:
    """
    Resolve the current (or named) kubeconfig context into a ClusterEndpoint.

    Inline certificate data in the kubeconfig is materialised to temp files
    by the kubernetes config loader; we only keep the resulting paths.
    """
    cfg = client.Configuration()
    try:
        config.load_kube_config(
            config_file=kubeconfig,
            context=context,
            client_configuration=cfg,
        )
    except (ConfigException, OSError) as exc:
        raise CredentialsError(f"Unable to load kubeconfig {kubeconfig or '(default)'}: {exc}") from exc

    if not cfg.host:
        raise CredentialsError("kubeconfig context has no API server host")

    token = (cfg.api_key or {}).get("authorization")
    endpoint = ClusterEndpoint(
        base_url=cfg.host.rstrip("/"),
        cert_file=cfg.cert_file,
        key_file=cfg.key_file,
        ca_file=cfg.ssl_ca_cert,
        verify_ssl=cfg.verify_ssl,
        token=token,
    )
    log.info(f"API server: {endpoint.base_url}")
    return endpoint
