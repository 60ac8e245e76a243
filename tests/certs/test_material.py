import base64
from pathlib import Path

import pytest

from customcert.certs.material import CertificateError, load_certificate

PEM = "-----BEGIN CERTIFICATE-----\nMIIBszCCAVmgAwIBAgIU\n-----END CERTIFICATE-----\n"


def test_load_keeps_content_verbatim(tmp_path: Path):
    f = tmp_path / "tkg-custom-ca.crt"
    f.write_text(PEM)
    cert = load_certificate(f)
    assert cert.content == PEM
    assert cert.path == f
    assert base64.b64decode(cert.b64()).decode() == PEM


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(CertificateError):
        load_certificate(tmp_path / "nope.crt")


def test_empty_file_raises(tmp_path: Path):
    f = tmp_path / "empty.crt"
    f.write_text("  \n")
    with pytest.raises(CertificateError, match="empty"):
        load_certificate(f)


def test_non_pem_file_raises(tmp_path: Path):
    f = tmp_path / "key.txt"
    f.write_text("not a certificate")
    with pytest.raises(CertificateError, match="PEM"):
        load_certificate(f)
