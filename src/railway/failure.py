"""
Failure description — structured error information for the failure track.

Every generator stage reports problems as a FailureDescription carrying one
ErrorCode, a human-readable message (which names the offending path or block
when there is one), and the causing exception if any.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique


@unique
class ErrorCode(Enum):
    """
    Error codes for the generator's failure track.

    One code per pipeline stage, so the exit message says where a run died.
    """

    INPUT_READ_ERROR = "INPUT_READ_ERROR"
    """Bundle file missing or unreadable."""

    DECODE_ERROR = "DECODE_ERROR"
    """An accepted CERTIFICATE block is not a valid X.509 certificate."""

    COMPRESSION_ERROR = "COMPRESSION_ERROR"
    """The compressor failed while writing a payload."""

    VERIFICATION_ERROR = "VERIFICATION_ERROR"
    """A compressed payload did not decode back to its source certificate."""

    RENDER_FORMAT_ERROR = "RENDER_FORMAT_ERROR"
    """Rendered source is not well-formed (an emitter encoding bug)."""

    OUTPUT_WRITE_ERROR = "OUTPUT_WRITE_ERROR"
    """Target path could not be written."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Invalid settings or command-line arguments."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor carrying error code, message, optional exception, and timestamp.

    >>> desc = FailureDescription(ErrorCode.DECODE_ERROR, "block #3 is not a certificate")
    >>> desc.code
    <ErrorCode.DECODE_ERROR: 'DECODE_ERROR'>
    """

    code: ErrorCode
    message: str
    exception: BaseException | None = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def describe(self) -> str:
        """One-line summary for stderr: code, message and the causing exception."""
        if self.exception is None:
            return f"{self.code.value}: {self.message}"
        return f"{self.code.value}: {self.message}: {self.exception}"

    def full_stack_trace(self) -> str:
        """Full stack trace string including the message and exception chain."""
        if self.exception is None:
            return self.message
        tb = "".join(
            traceback.format_exception(
                type(self.exception), self.exception, self.exception.__traceback__
            )
        )
        return f"{self.message}\n{tb}"
