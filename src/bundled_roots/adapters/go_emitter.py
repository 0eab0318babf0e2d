"""
Go source emitter — renders a GeneratedSource into the text of a Go file.

Rendering is a pure function of the template model and the pool contract:

  // Code generated by <command> --output <file>; DO NOT EDIT.
  <license notice, build constraint, package clause>
  func loadSystemRoots() (*CertPool, error) {
  	p := NewCertPool()
  	p.addCertFuncNotDup("<subject>", "<key id>", certUncompressor("<gzip>"))   ← one per unit
  	return p, nil
  }

All binary data goes through go_bytes_literal(), whose output is an ASCII
interpreted string literal that the Go compiler turns back into exactly the
original bytes. parse_go_string_literal() is its inverse.
"""

from __future__ import annotations

from bundled_roots.domain.contract import DEFAULT_CONTRACT, PoolContract
from bundled_roots.domain.models import EmissionUnit, GeneratedSource

_SHORT_ESCAPES = {
    0x07: r"\a",
    0x08: r"\b",
    0x09: r"\t",
    0x0A: r"\n",
    0x0B: r"\v",
    0x0C: r"\f",
    0x0D: r"\r",
    0x22: r"\"",
    0x5C: r"\\",
}

_BYTE_TOKENS: tuple[str, ...] = tuple(
    _SHORT_ESCAPES.get(b) or (chr(b) if 0x20 <= b < 0x7F else f"\\x{b:02x}")
    for b in range(256)
)

_UNESCAPES = {ord(v[1]): k for k, v in _SHORT_ESCAPES.items()}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_OCT_DIGITS = frozenset("01234567")


def go_bytes_literal(data: bytes) -> str:
    """Encode bytes as a Go interpreted string literal, quotes included."""
    return '"' + "".join(_BYTE_TOKENS[b] for b in data) + '"'


def _take_digits(text: str, start: int, count: int, digits: frozenset[str]) -> str:
    chunk = text[start : start + count]
    if len(chunk) != count or not set(chunk) <= digits:
        raise ValueError(f"invalid escape at offset {start - 2} in {text[:40]!r}")
    return chunk


def parse_go_string_literal(text: str) -> bytes:
    """
    Decode a Go interpreted string literal ("...") into the bytes it denotes.

    Accepts the full escape grammar (\\a..\\v, \\\\, \\", \\NNN octal, \\xNN,
    \\uNNNN, \\UNNNNNNNN). Raises ValueError on anything the Go compiler
    would reject.
    """
    if len(text) < 2 or text[0] != '"' or text[-1] != '"':
        raise ValueError(f"not a Go string literal: {text[:40]!r}")
    out = bytearray()
    i, end = 1, len(text) - 1
    while i < end:
        ch = text[i]
        if ch == "\n" or ch == '"':
            raise ValueError(f"unescaped {ch!r} at offset {i} in string literal")
        if ch != "\\":
            out += ch.encode("utf-8")
            i += 1
            continue
        if i + 1 >= end:
            raise ValueError("string literal ends inside an escape sequence")
        esc = text[i + 1]
        i += 2
        if ord(esc) in _UNESCAPES:
            out.append(_UNESCAPES[ord(esc)])
        elif esc == "x":
            out.append(int(_take_digits(text, i, 2, _HEX_DIGITS), 16))
            i += 2
        elif esc in _OCT_DIGITS:
            value = int(_take_digits(text, i - 1, 3, _OCT_DIGITS), 8)
            if value > 0xFF:
                raise ValueError(f"octal escape value {value} > 255")
            out.append(value)
            i += 2
        elif esc in ("u", "U"):
            width = 4 if esc == "u" else 8
            code_point = int(_take_digits(text, i, width, _HEX_DIGITS), 16)
            if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
                raise ValueError(f"escape sequence is invalid Unicode code point {code_point:#x}")
            out += chr(code_point).encode("utf-8")
            i += width
        else:
            raise ValueError(f"unknown escape sequence \\{esc}")
    return bytes(out)


def _call(name: str, args: list[str], arity: int) -> str:
    if len(args) != arity:
        raise ValueError(f"{name} takes {arity} arguments, got {len(args)}")
    return f"{name}({', '.join(args)})"


def render_statement(unit: EmissionUnit, contract: PoolContract = DEFAULT_CONTRACT) -> str:
    """One registration statement, without indentation or newline."""
    accessor = _call(
        contract.uncompressor,
        [go_bytes_literal(unit.compressed_payload)],
        contract.uncompressor_arity,
    )
    return "p." + _call(
        contract.register,
        [go_bytes_literal(unit.subject_dn), go_bytes_literal(unit.subject_key_id), accessor],
        contract.register_arity,
    )


def _license_block(contract: PoolContract) -> str:
    if not contract.license_notice:
        return ""
    return "".join(f"// {line}\n" for line in contract.license_notice) + "\n"


def render_header(source: GeneratedSource, contract: PoolContract = DEFAULT_CONTRACT) -> str:
    return (
        f"// Code generated by {source.command} --output {source.output_name}; DO NOT EDIT.\n"
        "\n"
        + _license_block(contract)
        + f"//go:build {contract.build_constraint}\n"
        f"// +build {contract.build_constraint}\n"
        "\n"
        f"package {contract.package}\n"
        "\n"
        f"func {contract.entry_point}() (*CertPool, error) {{\n"
        f"\tp := {contract.pool_constructor}()\n"
    )


def render_footer() -> str:
    return "\n\treturn p, nil\n}\n"


def render_source(source: GeneratedSource, contract: PoolContract = DEFAULT_CONTRACT) -> str:
    """Render the whole file. Pure: same model and contract, same text."""
    statements = "".join(f"\t{render_statement(unit, contract)}\n" for unit in source.units)
    return render_header(source, contract) + statements + render_footer()
