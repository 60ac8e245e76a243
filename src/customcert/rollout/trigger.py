# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/customcert/rollout/trigger.py

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any, Dict, Optional

DATE_ANNOTATION = "date"
RESOLVE_OS_IMAGE = "run.tanzu.vmware.com/resolve-os-image"

# e.g. "Wed Feb 25 11:06:39.123456 UTC 2015"
TIMESTAMP_LAYOUT = "%a %b %d %H:%M:%S.%f %Z %Y"


def rollout_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime(TIMESTAMP_LAYOUT)


def bump_rollout(node_group: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Stamp a MachineDeployment's template annotations so its machines roll.

    Changing spec.template forces Cluster API to create a new MachineSet,
    which re-renders bootstrap data from the (already updated) config
    templates. The timestamp always changes; this is never a no-op.
    """
    out = copy.deepcopy(node_group)
    spec = out["spec"] = out.get("spec") or {}
    template = spec["template"] = spec.get("template") or {}
    metadata = template["metadata"] = template.get("metadata") or {}
    annotations = dict(metadata.get("annotations") or {})

    annotations[DATE_ANNOTATION] = rollout_timestamp(now)
    annotations[RESOLVE_OS_IMAGE] = RESOLVE_OS_IMAGE
    metadata["annotations"] = annotations
    return out


def rollout_patch(node_group: Dict[str, Any]) -> Dict[str, Any]:
    """Merge patch touching only the two rollout annotations."""
    template = (node_group.get("spec") or {}).get("template") or {}
    annotations = (template.get("metadata") or {}).get("annotations") or {}
    return {
        "spec": {
            "template": {
                "metadata": {
                    "annotations": {
                        DATE_ANNOTATION: annotations.get(DATE_ANNOTATION),
                        RESOLVE_OS_IMAGE: annotations.get(RESOLVE_OS_IMAGE),
                    }
                }
            }
        }
    }
