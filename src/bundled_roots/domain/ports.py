"""
Ports — Protocol-based interfaces for the generator's adapters.

These define WHAT the pipeline needs without saying HOW it is done:

  Domain ← Ports (protocols) ← Adapters (implementations)

Adapters satisfy a port structurally — no inheritance. Every method returns a
Result so that failures travel on the railway instead of as exceptions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from railway.result import Result

from bundled_roots.domain.models import CertificateRecord


@runtime_checkable
class BundleReader(Protocol):
    """Port: load the whole PEM bundle into memory."""

    def read(self, path: Path) -> Result[bytes]: ...


@runtime_checkable
class CertificateDecoder(Protocol):
    """
    Port: turn PEM bundle bytes into certificate records.

    Only header-free CERTIFICATE blocks are decoded; anything else is skipped.
    A block that passes the filter but fails to parse fails the whole bundle.
    """

    def decode(self, der: bytes) -> Result[CertificateRecord]: ...

    def decode_bundle(self, pem_bytes: bytes) -> Result[list[CertificateRecord]]: ...


@runtime_checkable
class PayloadCompressor(Protocol):
    """
    Port: compress one certificate body on its own.

    No state is shared between calls, so any single payload can be
    decompressed without the others.
    """

    def compress(self, der: bytes) -> Result[bytes]: ...

    def decompress(self, payload: bytes) -> bytes: ...


@runtime_checkable
class SourceFormatter(Protocol):
    """Port: canonically format rendered source, failing if it is malformed."""

    def format(self, source: str) -> Result[str]: ...


@runtime_checkable
class SourceWriter(Protocol):
    """
    Port: replace the output file with the given text.

    Returns the number of bytes written. A failed write leaves any existing
    file untouched.
    """

    def write(self, path: Path, text: str) -> Result[int]: ...
