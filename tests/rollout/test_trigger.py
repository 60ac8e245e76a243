import copy
from datetime import datetime, timedelta, timezone

from customcert.rollout.trigger import (
    DATE_ANNOTATION,
    RESOLVE_OS_IMAGE,
    bump_rollout,
    rollout_patch,
    rollout_timestamp,
)

T0 = datetime(2015, 2, 25, 11, 6, 39, tzinfo=timezone.utc)


def _md(annotations=None):
    md = {"kind": "MachineDeployment", "metadata": {"name": "md1"}, "spec": {"template": {"spec": {"version": "v1.27.5"}}}}
    if annotations is not None:
        md["spec"]["template"]["metadata"] = {"annotations": annotations}
    return md


def _annotations(obj):
    return obj["spec"]["template"]["metadata"]["annotations"]


def test_timestamp_layout():
    assert rollout_timestamp(T0) == "Wed Feb 25 11:06:39.000000 UTC 2015"


def test_bump_sets_date_and_marker():
    out = bump_rollout(_md(), T0)
    ann = _annotations(out)
    assert ann[DATE_ANNOTATION] == rollout_timestamp(T0)
    assert ann[RESOLVE_OS_IMAGE] == "run.tanzu.vmware.com/resolve-os-image"
    assert out["spec"]["template"]["spec"] == {"version": "v1.27.5"}


def test_bump_always_changes_timestamp():
    first = bump_rollout(_md(), T0)
    second = bump_rollout(first, T0 + timedelta(microseconds=1))
    assert _annotations(first)[DATE_ANNOTATION] != _annotations(second)[DATE_ANNOTATION]


def test_bump_with_wall_clock_differs_across_ticks():
    a = bump_rollout(_md())
    b = bump_rollout(_md(), datetime.now(timezone.utc) + timedelta(seconds=1))
    assert _annotations(a)[DATE_ANNOTATION] != _annotations(b)[DATE_ANNOTATION]


def test_bump_keeps_other_annotations_and_input():
    md = _md({"owner": "platform"})
    snapshot = copy.deepcopy(md)
    out = bump_rollout(md, T0)
    assert _annotations(out)["owner"] == "platform"
    assert md == snapshot


def test_rollout_patch_only_carries_rollout_annotations():
    out = bump_rollout(_md({"owner": "platform"}), T0)
    patch = rollout_patch(out)
    assert patch == {
        "spec": {
            "template": {
                "metadata": {
                    "annotations": {
                        DATE_ANNOTATION: rollout_timestamp(T0),
                        RESOLVE_OS_IMAGE: RESOLVE_OS_IMAGE,
                    }
                }
            }
        }
    }
