# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/k8s/client.py

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

import requests

from .credentials import ClusterEndpoint
from .errors import DecodeError, TransportError, error_for_status
from .kinds import ResourceKind

log = logging.getLogger("customcert")

MERGE_PATCH = "application/merge-patch+json"


class ApplyMode(str, Enum):
    CREATE = "create"            # POST to the collection
    REPLACE = "replace"          # PUT the whole object
    MERGE_PATCH = "merge_patch"  # PATCH with a JSON merge patch


class ResourceClient:
    """
    Blocking REST client for namespaced Cluster API resources.

    Every call round-trips; nothing is cached and nothing is retried.
    Reads must answer 200, writes any 2xx. Anything else raises a
    ResourceError subclass describing the failure.
    """

    def __init__(
        self,
        endpoint: ClusterEndpoint,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ):
        self.endpoint = endpoint
        self.session = session or endpoint.session()
        self.timeout = timeout

    # -----------------------
    # HTTP helpers
    # -----------------------
    def _url(self, path: str) -> str:
        return self.endpoint.base_url.rstrip("/") + path

    def _request(
        self,
        method: str,
        path: str,
        *,
        body: Optional[Dict[str, Any]] = None,
        content_type: str = "application/json",
        write: bool = False,
    ) -> Dict[str, Any]:
        url = self._url(path)
        headers = {}
        data = None
        if body is not None:
            headers["Content-Type"] = content_type
            data = json.dumps(body)

        log.debug(f"{method} {url}")
        try:
            r = self.session.request(method, url, data=data, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}", url=url) from exc

        ok = 200 <= r.status_code < 300 if write else r.status_code == 200
        if not ok:
            raise error_for_status(
                r.status_code,
                f"{method} {url} returned {r.status_code}: {r.text}",
                url=url,
            )

        try:
            decoded = r.json()
        except ValueError as exc:
            if write:
                # the write already succeeded; an unreadable reply must not stop the run
                log.warning(f"{method} {url}: {r.status_code} with unreadable body: {exc}")
                return {}
            raise DecodeError(f"{method} {url}: response is not JSON: {exc}", status=r.status_code, url=url) from exc
        if not isinstance(decoded, dict):
            if write:
                log.warning(f"{method} {url}: {r.status_code} with non-object body")
                return {}
            raise DecodeError(f"{method} {url}: expected a JSON object", status=r.status_code, url=url)
        return decoded

    # -----------------------
    # Resource operations
    # -----------------------
    def list_names(self, kind: ResourceKind) -> List[str]:
        """
        Names of every object of *kind*, in server order.

        Single request, no pagination: collections are assumed to fit in
        one response. A continue token is logged as a truncated list.
        """
        doc = self._request("GET", kind.collection_path())
        items = doc.get("items")
        if not isinstance(items, list):
            raise DecodeError(f"{kind.kind} list has no items array", url=self._url(kind.collection_path()))

        if (doc.get("metadata") or {}).get("continue"):
            log.warning(f"{kind.kind} list was truncated by the server; only the first page is processed")

        names: List[str] = []
        for item in items:
            try:
                names.append(item["metadata"]["name"])
            except (KeyError, TypeError) as exc:
                raise DecodeError(f"{kind.kind} list item without metadata.name") from exc
        log.debug(f"{kind.kind}: {names}")
        return names

    def get(self, kind: ResourceKind, name: str) -> Dict[str, Any]:
        return self._request("GET", kind.object_path(name))

    def apply(
        self,
        kind: ResourceKind,
        name: str,
        body: Dict[str, Any],
        mode: ApplyMode = ApplyMode.MERGE_PATCH,
    ) -> Dict[str, Any]:
        if mode is ApplyMode.CREATE:
            result = self._request("POST", kind.collection_path(), body=body, write=True)
        elif mode is ApplyMode.REPLACE:
            result = self._request("PUT", kind.object_path(name), body=body, write=True)
        else:
            result = self._request("PATCH", kind.object_path(name), body=body, content_type=MERGE_PATCH, write=True)
        log.debug(f"{mode.value} {kind.kind}/{name}: resourceVersion={(result.get('metadata') or {}).get('resourceVersion')}")
        return result
