# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/certs/editor.py

from __future__ import annotations

import copy
from typing import Any, Dict, List, Sequence

from pydantic import BaseModel

DEFAULT_CERT_NAME = "tkg-custom-ca"
TEMPLATE_SPEC_PATH = ("spec", "template", "spec")


class BootstrapFile(BaseModel):
    """One entry of a kubeadm config ``files`` list."""

    content: str
    owner: str = "root"
    path: str
    permissions: str = "0644"


def cert_file_entry(cert_content: str, cert_name: str = DEFAULT_CERT_NAME) -> Dict[str, str]:
    return BootstrapFile(
        content=cert_content,
        path=f"/etc/ssl/certs/{cert_name}.pem",
    ).model_dump()


def canonical_commands(cert_name: str = DEFAULT_CERT_NAME) -> List[str]:
    """
    preKubeadmCommands that re-index the node trust store.

    Photon ships rehash_ca_certificates.sh, Ubuntu ships
    update-ca-certificates (which only reads /usr/local/share).
    """
    return [
        "! which rehash_ca_certificates.sh 2>/dev/null || rehash_ca_certificates.sh",
        "! which update-ca-certificates 2>/dev/null || "
        f"(mv /etc/ssl/certs/{cert_name}.pem /usr/local/share/ca-certificates/{cert_name}.crt"
        " && update-ca-certificates)",
    ]


def _kubeadm_spec(obj: Dict[str, Any], spec_path: Sequence[str]) -> Dict[str, Any]:
    node = obj
    for key in spec_path:
        child = node.get(key)
        if child is None:
            child = node[key] = {}
        node = child
    return node


def files_of(obj: Dict[str, Any], spec_path: Sequence[str] = TEMPLATE_SPEC_PATH) -> List[Dict[str, Any]]:
    node = obj
    for key in spec_path:
        node = (node or {}).get(key)
    return list((node or {}).get("files") or [])


def append_file(
    config: Dict[str, Any],
    cert_content: str,
    *,
    spec_path: Sequence[str] = TEMPLATE_SPEC_PATH,
    cert_name: str = DEFAULT_CERT_NAME,
) -> Dict[str, Any]:
    """
    Return a copy of *config* whose file list holds the certificate once.

    The entry is only appended when no file already carries the same
    content, so repeated runs never duplicate it. preKubeadmCommands is
    replaced (not merged) with the canonical sequence.
    """
    out = copy.deepcopy(config)
    spec = _kubeadm_spec(out, spec_path)

    files = list(spec.get("files") or [])
    if not any(f.get("content") == cert_content for f in files):
        files.append(cert_file_entry(cert_content, cert_name))
    spec["files"] = files
    spec["preKubeadmCommands"] = canonical_commands(cert_name)
    return out


def remove_file(
    config: Dict[str, Any],
    cert_content: str,
    *,
    spec_path: Sequence[str] = TEMPLATE_SPEC_PATH,
    cert_name: str = DEFAULT_CERT_NAME,
) -> Dict[str, Any]:
    """
    Return a copy of *config* without any file whose content is the certificate.

    Every matching entry goes, not just the first. The commands are
    rewritten exactly as in append_file so delete-only runs still
    re-index the trust store.
    """
    out = copy.deepcopy(config)
    spec = _kubeadm_spec(out, spec_path)

    spec["files"] = [f for f in (spec.get("files") or []) if f.get("content") != cert_content]
    spec["preKubeadmCommands"] = canonical_commands(cert_name)
    return out


def bootstrap_patch(config: Dict[str, Any], spec_path: Sequence[str] = TEMPLATE_SPEC_PATH) -> Dict[str, Any]:
    """
    Minimal JSON merge patch carrying the edited kubeadm fields.

    Lists are replaced wholesale by a merge patch, so the full file list
    and command list are sent.
    """
    spec = _kubeadm_spec(copy.deepcopy(config), spec_path)
    patch: Dict[str, Any] = {
        "files": spec.get("files") or [],
        "preKubeadmCommands": spec.get("preKubeadmCommands") or [],
    }
    for key in reversed(spec_path):
        patch = {key: patch}
    return patch
