# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/provisioning/kapp_secret.py

from __future__ import annotations

import logging
from typing import Optional

import urllib3
from kubernetes import client
from kubernetes.client.rest import ApiException

from customcert.certs.material import CertificateMaterial

log = logging.getLogger("customcert")


def build_kapp_secret(cert: CertificateMaterial, *, name: str, namespace: str) -> client.V1Secret:
    # Secret.data values are base64 on the wire; the decoded value is the PEM itself.
    return client.V1Secret(
        api_version="v1",
        kind="Secret",
        metadata=client.V1ObjectMeta(name=name, namespace=namespace),
        type="Opaque",
        data={"certificate": cert.b64()},
    )


def create_kapp_secret(
    core: client.CoreV1Api,
    cert: CertificateMaterial,
    *,
    name: str = "kapp-controller-config",
    namespace: str = "tkg-system",
) -> Optional[str]:
    """
    Create the kapp-controller trust secret.

    Best-effort: returns an error string instead of raising, so a missing
    namespace or an existing secret never blocks the certificate rollout.
    """
    body = build_kapp_secret(cert, name=name, namespace=namespace)
    try:
        result = core.create_namespaced_secret(namespace=namespace, body=body)
    except ApiException as exc:
        if exc.status == 409:
            msg = f"Secret {namespace}/{name} already exists, leaving it unchanged"
            log.warning(msg)
        else:
            msg = f"Secret {namespace}/{name} not created: {exc.status} {exc.reason}"
            log.error(msg)
        return msg
    except urllib3.exceptions.HTTPError as exc:
        msg = f"Secret {namespace}/{name} not created: {exc}"
        log.error(msg)
        return msg

    log.info(f"Secret {result.metadata.namespace}/{result.metadata.name} created")
    return None
