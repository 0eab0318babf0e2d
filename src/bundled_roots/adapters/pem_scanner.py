"""
PEM block scanner — splits an arbitrary byte blob into PEM blocks.

Bundles exported from trust stores carry commentary, parsed dumps and
occasionally damaged blocks between the armored certificates. The scanner walks
BEGIN lines in order and hands each complete BEGIN/END span to asn1crypto's
unarmor for header and base64 decoding:

  blob ─▶ find "-----BEGIN <T>-----" ─▶ find "-----END <T>-----" ─▶ pem.unarmor ─▶ PemBlock

A span that cannot be decoded (no matching END, junk after the END marker, a
nested BEGIN, a body outside the base64 alphabet) is skipped and scanning resumes right after its BEGIN
line. Running out of BEGIN lines is the normal end of input.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

import structlog
from asn1crypto import pem

from bundled_roots.domain.models import PemBlock

log = structlog.get_logger()

CERTIFICATE_TYPE = "CERTIFICATE"

_BEGIN_RE = re.compile(rb"^-----BEGIN (.+)-----[ \t\r]*$", re.MULTILINE)
_DASHES = b"-----"
_BASE64_RE = re.compile(rb"[A-Za-z0-9+/]*={0,2}")


def _end_marker(block_type: bytes) -> re.Pattern[bytes]:
    return re.compile(rb"^-----END " + re.escape(block_type) + rb"-----(.*)$", re.MULTILINE)


def _is_strict_base64(body: bytes) -> bool:
    """
    True when the lines after any headers use only the base64 alphabet.

    pem.unarmor drops characters outside the alphabet instead of failing, so a
    damaged body would otherwise decode to plausible bytes.
    """
    lines = [line.strip() for line in body.splitlines()]
    while lines and (not lines[0] or b":" in lines[0]):
        lines.pop(0)
    return _BASE64_RE.fullmatch(b"".join(lines)) is not None


def _decode_span(span: bytes, body: bytes) -> PemBlock | None:
    """Decode one BEGIN..END span, or None if it is malformed."""
    if not _is_strict_base64(body):
        return None
    try:
        block_type, headers, der = pem.unarmor(span)
    except ValueError:
        return None
    return PemBlock(
        type=block_type,
        data=der,
        headers={name.strip(): value for name, value in headers.items()},
    )


def scan_pem_blocks(data: bytes) -> Iterator[PemBlock]:
    """
    Lazily yield every well-formed PEM block in `data`, in order.

    Never raises for malformed input: broken blocks are skipped and the
    iterator simply ends when no further block can be found.
    """
    pos = 0
    while True:
        begin = _BEGIN_RE.search(data, pos)
        if begin is None:
            return
        block_type = begin.group(1)
        end = _end_marker(block_type).search(data, begin.end())
        if end is None or end.group(1).strip():
            log.debug("scanner.block_malformed", type=block_type, offset=begin.start())
            pos = begin.end()
            continue
        body = data[begin.end() : end.start()]
        if _DASHES in body:
            # another armor line inside the body: this BEGIN was truncated
            log.debug("scanner.block_truncated", type=block_type, offset=begin.start())
            pos = begin.end()
            continue
        block = _decode_span(data[begin.start() : end.end()], body)
        if block is None:
            log.debug("scanner.block_undecodable", type=block_type, offset=begin.start())
            pos = begin.end()
            continue
        yield block
        pos = end.end()


def is_plain_certificate(block: PemBlock) -> bool:
    """True only for CERTIFICATE blocks without any PEM headers."""
    return block.type == CERTIFICATE_TYPE and not block.headers


def select_certificate_blocks(blocks: Iterable[PemBlock]) -> Iterator[PemBlock]:
    """
    Keep plain CERTIFICATE blocks and drop everything else without error.

    Certificates carrying headers (trust attributes, encryption info) are
    dropped too: they are not untouched exports.
    """
    for block in blocks:
        if is_plain_certificate(block):
            yield block
        else:
            log.debug(
                "scanner.block_skipped",
                type=block.type,
                headers=sorted(block.headers),
            )
