"""
Filesystem adapters — implement the BundleReader and SourceWriter ports.

The writer never truncates the target in place. Text goes to a temporary file
in the destination directory, gets fixed permissions, and is renamed over the
target, so a failed run leaves the previous generated file intact.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import structlog
from railway import ErrorCode
from railway.result import Result

log = structlog.get_logger()

OUTPUT_MODE = 0o644


class FileBundleReader:
    def read(self, path: Path) -> Result[bytes]:
        return Result.from_computation(
            lambda: path.read_bytes(),
            ErrorCode.INPUT_READ_ERROR,
            f"Failed to read certificate bundle {path}",
        ).peek(lambda data: log.debug("reader.loaded", path=str(path), size=len(data)))


class AtomicFileWriter:
    def __init__(self, mode: int = OUTPUT_MODE) -> None:
        self._mode = mode

    def write(self, path: Path, text: str) -> Result[int]:
        return Result.from_computation(
            lambda: self._replace(path, text.encode("utf-8")),
            ErrorCode.OUTPUT_WRITE_ERROR,
            f"Failed to write {path}",
        )

    def _replace(self, path: Path, payload: bytes) -> int:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(payload)
            os.chmod(tmp_name, self._mode)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        log.info("writer.written", path=str(path), size=len(payload))
        return len(payload)
