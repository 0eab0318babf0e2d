"""
X.509 decoder adapter — PEM bundle bytes → CertificateRecord list.

Implements the CertificateDecoder port using:
  - cryptography (PyCA): strict DER parsing and the SubjectKeyIdentifier extension
  - asn1crypto: the subject Name bytes exactly as encoded in the certificate

Pipeline:
  bundle bytes
    → scan_pem_blocks()            (malformed blocks skipped)
    → select_certificate_blocks()  (plain CERTIFICATE blocks only)
    → x509.load_der_x509_certificate()
    → CertificateRecord

cryptography re-serializes Names on request, which can differ from the
original encoding; the runtime pool compares raw subjects byte for byte, so
the subject is taken from asn1crypto, which keeps the parsed bytes.
"""

from __future__ import annotations

import structlog
from asn1crypto import x509 as asn1_x509
from cryptography import x509
from cryptography.x509.extensions import ExtensionNotFound
from railway import ErrorCode
from railway.result import Result

from bundled_roots.adapters.pem_scanner import scan_pem_blocks, select_certificate_blocks
from bundled_roots.domain.models import CertificateRecord, PemBlock

log = structlog.get_logger()


def _extract_ski(cert: x509.Certificate) -> bytes:
    """Raw SubjectKeyIdentifier digest, or b"" if the extension is absent."""
    try:
        ext = cert.extensions.get_extension_for_class(x509.SubjectKeyIdentifier)
    except ExtensionNotFound:
        return b""
    return ext.value.digest


def _raw_subject(der_bytes: bytes) -> bytes:
    return asn1_x509.Certificate.load(der_bytes)["tbs_certificate"]["subject"].dump()


def _der_to_certificate_record(der_bytes: bytes) -> CertificateRecord:
    """
    Convert DER-encoded X.509 bytes into a CertificateRecord.

    Raises on anything cryptography refuses to parse. A missing SKI is not an
    error: the record gets an empty key id.
    """
    cert = x509.load_der_x509_certificate(der_bytes)
    return CertificateRecord(
        raw_der=der_bytes,
        subject_dn=_raw_subject(der_bytes),
        subject_key_id=_extract_ski(cert),
    )


def _warn_if_missing_ski(ordinal: int, record: CertificateRecord) -> None:
    if not record.subject_key_id:
        log.warning(
            "certificate.missing_ski",
            block=ordinal,
            subject=asn1_x509.Name.load(record.subject_dn).human_friendly,
        )


class X509CertificateDecoder:
    """
    Decode PEM bundles into certificate records.

    Implements the CertificateDecoder port. Exceptions from the parsing
    libraries are converted at this boundary via Result.from_computation().
    """

    def decode(self, der: bytes) -> Result[CertificateRecord]:
        """Parse one DER certificate. Returns Result.failure(DECODE_ERROR) if invalid."""
        return Result.from_computation(
            lambda: _der_to_certificate_record(der),
            ErrorCode.DECODE_ERROR,
            "Failed to parse X.509 certificate",
        )

    def decode_bundle(self, pem_bytes: bytes) -> Result[list[CertificateRecord]]:
        """
        Decode every plain CERTIFICATE block of a PEM bundle, in bundle order.

        Stops at the first block that fails to parse; the failure message
        gives the 1-based ordinal of that block among accepted blocks.
        Certificates without a key id are logged once here as
        `certificate.missing_ski`; decode() itself stays quiet.
        """
        blocks = select_certificate_blocks(scan_pem_blocks(pem_bytes))
        return Result.all_of(
            self._decode_block(ordinal, block) for ordinal, block in enumerate(blocks, start=1)
        ).peek(lambda records: log.info("decoder.complete", certificates=len(records)))

    def _decode_block(self, ordinal: int, block: PemBlock) -> Result[CertificateRecord]:
        return Result.from_computation(
            lambda: _der_to_certificate_record(block.data),
            ErrorCode.DECODE_ERROR,
            f"Failed to parse certificate block #{ordinal}",
        ).peek(lambda record: _warn_if_missing_ski(ordinal, record))
