"""
Domain models — immutable value objects flowing through the generator.

    bytes → PemBlock → CertificateRecord → EmissionUnit → GeneratedSource

All models are frozen dataclasses. None of them outlives a single run.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class PemBlock:
    """
    One decoded PEM block.

    `type` is the label between BEGIN and the closing dashes (e.g. "CERTIFICATE").
    `headers` holds RFC 1421 style "Name: Value" lines; order is not significant.
    """

    type: str
    data: bytes = field(repr=False)
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class CertificateRecord:
    """
    A decoded root certificate.

    `subject_dn` is the subject Name exactly as DER-encoded inside the
    certificate. `subject_key_id` is the raw SubjectKeyIdentifier value, or
    b"" when the certificate has no such extension.
    """

    raw_der: bytes = field(repr=False)
    subject_dn: bytes = field(repr=False)
    subject_key_id: bytes = b""


@dataclass(frozen=True, slots=True)
class EmissionUnit:
    """The three literals emitted for one certificate."""

    subject_dn: bytes = field(repr=False)
    subject_key_id: bytes
    compressed_payload: bytes = field(repr=False)


@dataclass(frozen=True, slots=True)
class GeneratedSource:
    """
    Template model for the generated file.

    `command` and `output_name` feed the DO NOT EDIT marker; `units` are
    rendered in order, one registration statement each.
    """

    command: str
    output_name: str
    units: tuple[EmissionUnit, ...] = ()


@dataclass(frozen=True, slots=True)
class KeyIdReport:
    """
    Summary of the deduplication key space of a bundle.

    Duplicates are only reported: the runtime pool drops later entries that
    share a key id, so the generator keeps scan order and emits them all.
    """

    total: int
    unique: int
    missing: int
    duplicates: dict[bytes, int] = field(default_factory=dict)

    @staticmethod
    def of(records: list[CertificateRecord]) -> KeyIdReport:
        keyed = [r.subject_key_id for r in records if r.subject_key_id]
        counts = Counter(keyed)
        return KeyIdReport(
            total=len(records),
            unique=len(counts),
            missing=len(records) - len(keyed),
            duplicates={k: n for k, n in counts.items() if n > 1},
        )

    @property
    def has_duplicates(self) -> bool:
        return bool(self.duplicates)


@dataclass(frozen=True, slots=True)
class GenerationSummary:
    """What a successful run produced."""

    certificates: int
    bytes_written: int
    output_path: Path
