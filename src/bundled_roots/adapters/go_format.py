"""
Go source formatters — implement the SourceFormatter port.

The emitter builds text by concatenation, so a formatting pass doubles as the
last line of defence against encoding bugs: anything that does not tokenize
cleanly fails the run with RENDER_FORMAT_ERROR before a file is touched.

  - CanonicalGoFormatter: built-in tokenizer. Checks literals, comments and
    bracket nesting, then re-indents with tabs by brace depth.
  - GofmtFormatter: pipes the text through an external gofmt binary.
"""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass

import structlog
from railway import ErrorCode
from railway.result import Result

from bundled_roots.adapters.go_emitter import parse_go_string_literal

log = structlog.get_logger()

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = frozenset(_OPENERS.values())
_PACKAGE_RE = re.compile(r"^package [A-Za-z_][A-Za-z0-9_]*$", re.MULTILINE)


class GoSyntaxError(ValueError):
    """Rendered text is not well-formed Go source."""


@dataclass(frozen=True, slots=True)
class _LineInfo:
    depth: int
    # line starts inside a raw string or block comment and must be kept as is
    verbatim: bool


def _analyze(source: str) -> list[_LineInfo]:
    """
    Tokenize just enough Go to know, for every line, the bracket depth at its
    start. Raises GoSyntaxError on unterminated tokens, bad string literals or
    mismatched brackets.
    """
    stack: list[tuple[str, int]] = []
    infos = [_LineInfo(depth=0, verbatim=False)]
    state = "code"
    line_no = 1
    literal_start = 0
    i, n = 0, len(source)
    while i < n:
        ch = source[i]
        if ch == "\n":
            if state in ("string", "rune"):
                raise GoSyntaxError(f"line {line_no}: newline in {state} literal")
            if state == "line_comment":
                state = "code"
            line_no += 1
            infos.append(_LineInfo(depth=len(stack), verbatim=state in ("raw", "block_comment")))
            i += 1
            continue

        if state == "code":
            if source.startswith("//", i):
                state = "line_comment"
                i += 2
                continue
            if source.startswith("/*", i):
                state = "block_comment"
                i += 2
                continue
            if ch == '"':
                state, literal_start = "string", i
            elif ch == "`":
                state = "raw"
            elif ch == "'":
                state, literal_start = "rune", i
            elif ch in _OPENERS:
                stack.append((_OPENERS[ch], line_no))
            elif ch in _CLOSERS:
                if not stack or stack[-1][0] != ch:
                    raise GoSyntaxError(f"line {line_no}: unexpected {ch!r}")
                stack.pop()
        elif state in ("string", "rune"):
            quote = '"' if state == "string" else "'"
            if ch == "\\":
                if source[i + 1 : i + 2] in ("", "\n"):
                    raise GoSyntaxError(f"line {line_no}: unterminated escape sequence")
                i += 2
                continue
            if ch == quote:
                if state == "string":
                    try:
                        parse_go_string_literal(source[literal_start : i + 1])
                    except ValueError as e:
                        raise GoSyntaxError(f"line {line_no}: {e}") from e
                elif i == literal_start + 1:
                    raise GoSyntaxError(f"line {line_no}: empty rune literal")
                state = "code"
        elif state == "raw":
            if ch == "`":
                state = "code"
        elif state == "block_comment":
            if source.startswith("*/", i):
                state = "code"
                i += 2
                continue
        i += 1

    if state not in ("code", "line_comment"):
        raise GoSyntaxError(f"unterminated {state.replace('_', ' ')} at end of file")
    if stack:
        closer, opened_at = stack[-1]
        raise GoSyntaxError(f"line {opened_at}: bracket never closed, expected {closer!r}")
    return infos


def canonicalize_go(source: str) -> str:
    """
    Return the canonical layout of `source`.

    Lines are indented with one tab per open bracket, trailing whitespace is
    removed, blank-line runs collapse to one, and the file ends with exactly
    one newline. Raises GoSyntaxError if the text is malformed.
    """
    infos = _analyze(source)
    out: list[str] = []
    for line, info in zip(source.split("\n"), infos, strict=True):
        if info.verbatim:
            out.append(line)
            continue
        stripped = line.strip()
        if not stripped:
            if out and out[-1]:
                out.append("")
            continue
        leading_closers = len(stripped) - len(stripped.lstrip(")]}"))
        out.append("\t" * max(info.depth - leading_closers, 0) + stripped)
    while out and not out[-1]:
        out.pop()
    text = "\n".join(out) + "\n"
    if _PACKAGE_RE.search(text) is None:
        raise GoSyntaxError("missing package clause")
    return text


class CanonicalGoFormatter:
    """Built-in formatter; needs no Go toolchain."""

    def format(self, source: str) -> Result[str]:
        return Result.from_computation(
            lambda: canonicalize_go(source),
            ErrorCode.RENDER_FORMAT_ERROR,
            "Generated source is not well-formed Go",
        )


class GofmtFormatter:
    """
    Format with an external gofmt binary.

    A missing binary, a timeout or a non-zero exit all fail the run.
    """

    def __init__(self, gofmt_path: str = "gofmt", timeout: float = 60.0) -> None:
        self._gofmt_path = gofmt_path
        self._timeout = timeout

    def format(self, source: str) -> Result[str]:
        return Result.from_computation(
            lambda: self._run(source),
            ErrorCode.RENDER_FORMAT_ERROR,
            f"{self._gofmt_path} rejected the generated source",
        )

    def _run(self, source: str) -> str:
        completed = subprocess.run(  # noqa: S603
            [self._gofmt_path],
            input=source,
            capture_output=True,
            text=True,
            timeout=self._timeout,
            check=False,
        )
        if completed.returncode != 0:
            raise GoSyntaxError(completed.stderr.strip() or f"exit status {completed.returncode}")
        log.debug("formatter.gofmt_ok", binary=self._gofmt_path)
        return completed.stdout
