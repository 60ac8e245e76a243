import copy

from customcert.certs.editor import (
    append_file,
    bootstrap_patch,
    canonical_commands,
    files_of,
    remove_file,
)

CERT = "-----BEGIN CERTIFICATE-----\nCERT_A\n-----END CERTIFICATE-----\n"
OTHER = {"content": "registry-ca", "owner": "root:root", "path": "/etc/containerd/ca.crt", "permissions": "0600"}


def _template(files=None, commands=None):
    spec = {}
    if files is not None:
        spec["files"] = files
    if commands is not None:
        spec["preKubeadmCommands"] = commands
    return {
        "apiVersion": "bootstrap.cluster.x-k8s.io/v1beta1",
        "kind": "KubeadmConfigTemplate",
        "metadata": {"name": "t1", "namespace": "default"},
        "spec": {"template": {"spec": spec}},
    }


def _matching(obj, content=CERT, spec_path=("spec", "template", "spec")):
    return [f for f in files_of(obj, spec_path) if f.get("content") == content]


def test_append_adds_root_owned_pem_entry():
    out = append_file(_template(files=[OTHER]), CERT)
    files = files_of(out)
    assert files[0] == OTHER
    assert files[-1] == {
        "content": CERT,
        "owner": "root",
        "path": "/etc/ssl/certs/tkg-custom-ca.pem",
        "permissions": "0644",
    }


def test_append_twice_keeps_a_single_entry():
    once = append_file(_template(files=[OTHER]), CERT)
    twice = append_file(once, CERT)
    assert len(_matching(twice)) == 1
    assert files_of(twice) == files_of(once)


def test_append_uses_cert_name_for_path_and_commands():
    out = append_file(_template(), CERT, cert_name="corp-root")
    assert files_of(out)[0]["path"] == "/etc/ssl/certs/corp-root.pem"
    cmds = out["spec"]["template"]["spec"]["preKubeadmCommands"]
    assert "/usr/local/share/ca-certificates/corp-root.crt" in cmds[1]


def test_remove_drops_every_matching_entry():
    dup = {"content": CERT, "owner": "root", "path": "/etc/ssl/certs/a.pem", "permissions": "0644"}
    obj = _template(files=[dict(dup), OTHER, dict(dup, path="/etc/ssl/certs/b.pem")])
    out = remove_file(obj, CERT)
    assert files_of(out) == [OTHER]


def test_remove_is_idempotent():
    obj = _template(files=[OTHER, {"content": CERT, "path": "/x"}], commands=["echo hi"])
    once = remove_file(obj, CERT)
    assert remove_file(once, CERT) == once


def test_remove_without_match_is_noop_on_files():
    obj = _template(files=[OTHER])
    assert files_of(remove_file(obj, CERT)) == [OTHER]


def test_append_then_remove_restores_files():
    obj = _template(files=[OTHER])
    assert files_of(remove_file(append_file(obj, CERT), CERT)) == files_of(obj)

    bare = _template()
    assert files_of(remove_file(append_file(bare, CERT), CERT)) == files_of(bare) == []


def test_commands_are_replaced_not_merged():
    obj = _template(files=[], commands=["echo custom", "hostnamectl set-hostname x"])
    for edit in (append_file, remove_file):
        out = edit(obj, CERT)
        assert out["spec"]["template"]["spec"]["preKubeadmCommands"] == canonical_commands()
        assert len(canonical_commands()) == 2


def test_canonical_commands_text():
    first, second = canonical_commands()
    assert first == "! which rehash_ca_certificates.sh 2>/dev/null || rehash_ca_certificates.sh"
    assert second == (
        "! which update-ca-certificates 2>/dev/null || "
        "(mv /etc/ssl/certs/tkg-custom-ca.pem /usr/local/share/ca-certificates/tkg-custom-ca.crt"
        " && update-ca-certificates)"
    )


def test_edits_do_not_touch_the_input():
    obj = _template(files=[OTHER], commands=["echo hi"])
    snapshot = copy.deepcopy(obj)
    append_file(obj, CERT)
    remove_file(obj, CERT)
    assert obj == snapshot


def test_control_plane_spec_path():
    kcp = {"kind": "KubeadmControlPlane", "metadata": {"name": "cp"}, "spec": {"kubeadmConfigSpec": {"files": [OTHER]}}}
    path = ("spec", "kubeadmConfigSpec")
    out = append_file(kcp, CERT, spec_path=path)
    assert len(_matching(out, spec_path=path)) == 1
    assert out["spec"]["kubeadmConfigSpec"]["preKubeadmCommands"] == canonical_commands()
    assert "template" not in out["spec"]


def test_bootstrap_patch_carries_only_edited_fields():
    out = append_file(_template(files=[OTHER]), CERT)
    patch = bootstrap_patch(out)
    assert list(patch) == ["spec"]
    spec = patch["spec"]["template"]["spec"]
    assert set(spec) == {"files", "preKubeadmCommands"}
    assert spec["files"][-1]["content"] == CERT
