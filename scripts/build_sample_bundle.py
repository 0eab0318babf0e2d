"""
Build a sample certs.pem for trying the generator locally.

Infrastructure script — writes a bundle that exercises every scanner and
decoder path the generator cares about:

  certs.pem
  ├── comment line (ignored)
  ├── CERTIFICATE  "Sample Root CA 1"                (emitted)
  ├── CERTIFICATE  "Sample Root CA 2"  same key      (emitted, shares SKI)
  ├── CERTIFICATE  "Sample Legacy Root" no SKI       (emitted, empty key id)
  ├── CERTIFICATE with Proc-Type header              (skipped)
  └── PRIVATE KEY                                    (skipped)

Usage:
  python scripts/build_sample_bundle.py [OUTPUT]
  bundled-roots-gen --output root_darwin_arm64.go
"""

from __future__ import annotations

import base64
import datetime
import sys
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

DEFAULT_OUTPUT = Path("certs.pem")
NOT_BEFORE = datetime.datetime(2020, 1, 1, tzinfo=datetime.UTC)
NOT_AFTER = datetime.datetime(2040, 1, 1, tzinfo=datetime.UTC)


def _self_signed_root(
    common_name: str, key: ec.EllipticCurvePrivateKey, *, with_ski: bool = True
) -> x509.Certificate:
    name = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Sample Trust Services"),
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
    ])
    builder = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(NOT_BEFORE)
        .not_valid_after(NOT_AFTER)
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
    )
    if with_ski:
        builder = builder.add_extension(
            x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False
        )
    return builder.sign(key, hashes.SHA256())


def _armored_with_header(der: bytes) -> bytes:
    body = base64.b64encode(der).decode("ascii")
    lines = [body[i:i + 64] for i in range(0, len(body), 64)]
    return (
        "-----BEGIN CERTIFICATE-----\n"
        "Proc-Type: 4,ENCRYPTED\n"
        "\n" + "\n".join(lines) + "\n"
        "-----END CERTIFICATE-----\n"
    ).encode("ascii")


def build_sample(output_path: Path = DEFAULT_OUTPUT) -> Path:
    """Write the sample bundle and return its path."""
    shared_key = ec.generate_private_key(ec.SECP256R1())
    roots = [
        _self_signed_root("Sample Root CA 1", shared_key),
        _self_signed_root("Sample Root CA 2", shared_key),
        _self_signed_root(
            "Sample Legacy Root", ec.generate_private_key(ec.SECP256R1()), with_ski=False
        ),
    ]
    skipped = _self_signed_root("Sample Encrypted Root", ec.generate_private_key(ec.SECP256R1()))

    bundle = b"# Sample trust store export\n"
    bundle += b"".join(cert.public_bytes(serialization.Encoding.PEM) for cert in roots)
    bundle += _armored_with_header(skipped.public_bytes(serialization.Encoding.DER))
    bundle += shared_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    output_path.write_bytes(bundle)

    print(f"✓ {output_path} ({len(bundle)} bytes)")
    print(f"  Emitted certificates: {len(roots)}")
    print("  Skipped blocks: 2 (header-bearing CERTIFICATE, PRIVATE KEY)")
    return output_path


if __name__ == "__main__":
    build_sample(Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_OUTPUT)
