"""
Gzip payload compressor — implements the PayloadCompressor port.

Each certificate becomes its own gzip member so the runtime can inflate any
entry alone. The header timestamp is pinned to zero: with a fixed level and
the same zlib, identical input gives byte-identical output across runs.
"""

from __future__ import annotations

import gzip

from railway import ErrorCode
from railway.result import Result

BEST_COMPRESSION = 9


class GzipPayloadCompressor:
    def __init__(self, level: int = BEST_COMPRESSION) -> None:
        if not 1 <= level <= 9:
            raise ValueError(f"gzip level must be between 1 and 9, got {level}")
        self._level = level

    @property
    def level(self) -> int:
        return self._level

    def compress(self, der: bytes) -> Result[bytes]:
        return Result.from_computation(
            lambda: gzip.compress(der, compresslevel=self._level, mtime=0),
            ErrorCode.COMPRESSION_ERROR,
            "Failed to compress certificate payload",
        )

    def decompress(self, payload: bytes) -> bytes:
        """Inverse of compress(); raises on a corrupt payload."""
        return gzip.decompress(payload)
