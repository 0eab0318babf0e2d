"""
Shared test fixtures and helpers for the bundled-roots test suite.

Certificates are minted on the fly with cryptography (EC P-256, self-signed)
so the suite needs no binary fixtures on disk.
"""

from __future__ import annotations

import base64
import datetime
from pathlib import Path

import pytest
import structlog
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

_NOT_BEFORE = datetime.datetime(2020, 1, 1, tzinfo=datetime.UTC)
_NOT_AFTER = datetime.datetime(2040, 1, 1, tzinfo=datetime.UTC)


def make_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


def make_root(
    common_name: str,
    *,
    key: ec.EllipticCurvePrivateKey | None = None,
    with_ski: bool = True,
    organization: str = "Bundled Roots Test CA",
) -> x509.Certificate:
    """Build a self-signed CA certificate; SKI derived from the public key."""
    key = key or make_key()
    name = x509.Name(
        [
            x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization),
            x509.NameAttribute(NameOID.COMMON_NAME, common_name),
        ]
    )
    builder = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(_NOT_BEFORE)
        .not_valid_after(_NOT_AFTER)
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
    )
    if with_ski:
        builder = builder.add_extension(
            x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False
        )
    return builder.sign(key, hashes.SHA256())


def pem_of(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.PEM)


def der_of(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.DER)


def ski_of(cert: x509.Certificate) -> bytes:
    return cert.extensions.get_extension_for_class(x509.SubjectKeyIdentifier).value.digest


def private_key_pem(key: ec.EllipticCurvePrivateKey | None = None) -> bytes:
    return (key or make_key()).private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


def armor(block_type: str, body: bytes, headers: dict[str, str] | None = None) -> bytes:
    """Hand-build a PEM block, optionally with RFC 1421 headers."""
    lines = [f"-----BEGIN {block_type}-----"]
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    if headers:
        lines.append("")
    encoded = base64.b64encode(body).decode("ascii")
    lines.extend(encoded[i : i + 64] for i in range(0, len(encoded), 64))
    lines.append(f"-----END {block_type}-----")
    return ("\n".join(lines) + "\n").encode("ascii")


@pytest.fixture(scope="session")
def root_a() -> x509.Certificate:
    return make_root("Test Root A")


@pytest.fixture(scope="session")
def root_b() -> x509.Certificate:
    return make_root("Test Root B")


@pytest.fixture()
def bundle_path(tmp_path: Path) -> Path:
    """Path of a certs.pem inside a fresh temporary directory (not yet written)."""
    return tmp_path / "certs.pem"


@pytest.fixture(autouse=True)
def _reset_structlog() -> None:
    """Undo any global structlog configuration a test (e.g. main()) installed."""
    yield
    structlog.reset_defaults()
