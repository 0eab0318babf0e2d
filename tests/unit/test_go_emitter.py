"""
Unit tests for the Go source emitter.

Literal escaping is tested apart from any file I/O: the generated file is only
as correct as go_bytes_literal().
"""

from __future__ import annotations

import dataclasses

import pytest

from bundled_roots.adapters.go_emitter import (
    go_bytes_literal,
    parse_go_string_literal,
    render_source,
    render_statement,
)
from bundled_roots.domain.contract import DEFAULT_CONTRACT
from bundled_roots.domain.models import EmissionUnit, GeneratedSource


def _unit(
    dn: bytes = b"0\x00",
    ski: bytes = b"\x01\x02",
    payload: bytes = b"\x1f\x8b",
) -> EmissionUnit:
    return EmissionUnit(subject_dn=dn, subject_key_id=ski, compressed_payload=payload)


class TestGoBytesLiteral:
    def test_printable_ascii_is_verbatim(self) -> None:
        assert go_bytes_literal(b"Root CA 1") == '"Root CA 1"'

    def test_quote_and_backslash_are_escaped(self) -> None:
        assert go_bytes_literal(b'a"b\\c') == r'"a\"b\\c"'

    def test_control_and_high_bytes(self) -> None:
        assert go_bytes_literal(b"\x00\n\t\x7f\xff") == r'"\x00\n\t\x7f\xff"'

    def test_empty(self) -> None:
        assert go_bytes_literal(b"") == '""'

    def test_output_is_single_line_ascii(self) -> None:
        literal = go_bytes_literal(bytes(range(256)))
        assert literal.isascii()
        assert "\n" not in literal

    def test_every_byte_value_round_trips(self) -> None:
        """
        GIVEN all 256 byte values in one string
        WHEN encoded and parsed back
        THEN the original bytes are recovered exactly.
        """
        data = bytes(range(256)) + bytes(reversed(range(256)))
        assert parse_go_string_literal(go_bytes_literal(data)) == data


class TestParseGoStringLiteral:
    def test_octal_hex_and_unicode_escapes(self) -> None:
        assert parse_go_string_literal(r'"\101\x42é\U0001F600"') == (
            b"AB" + "é".encode() + "😀".encode()
        )

    def test_raw_utf8_characters(self) -> None:
        assert parse_go_string_literal('"Certinomis – Root"') == "Certinomis – Root".encode()

    @pytest.mark.parametrize(
        "text",
        [
            '"unterminated',
            r'"bad \q escape"',
            r'"\x4"',
            r'"\400"',
            r'"\ud800"',
            '"inner " quote"',
            '"new\nline"',
            "'x'",
        ],
    )
    def test_rejects_invalid_literals(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_go_string_literal(text)


class TestRenderSource:
    def test_empty_source_has_header_and_footer_only(self) -> None:
        text = render_source(GeneratedSource(command="gen", output_name="out.go"))
        assert text.startswith("// Code generated by gen --output out.go; DO NOT EDIT.\n")
        assert "//go:build !x509omitbundledroots\n" in text
        assert "// +build !x509omitbundledroots\n" in text
        assert "package x509\n" in text
        assert "func loadSystemRoots() (*CertPool, error) {\n\tp := NewCertPool()\n" in text
        assert text.endswith("\treturn p, nil\n}\n")
        assert "addCertFuncNotDup" not in text

    def test_one_statement_per_unit_in_order(self) -> None:
        units = (_unit(dn=b"first"), _unit(dn=b"second"), _unit(dn=b"third"))
        text = render_source(GeneratedSource("gen", "out.go", units))
        lines = [line for line in text.splitlines() if "addCertFuncNotDup" in line]
        assert len(lines) == 3
        assert [line.split('"')[1] for line in lines] == ["first", "second", "third"]

    def test_statement_shape(self) -> None:
        statement = render_statement(_unit(dn=b"CN", ski=b"\xab", payload=b"\x1f\x8b\x01"))
        assert statement == r'p.addCertFuncNotDup("CN", "\xab", certUncompressor("\x1f\x8b\x01"))'

    def test_marker_names_command_and_output_flag(self) -> None:
        source = GeneratedSource(command="bundled-roots-gen", output_name="x509/root_ios.go")
        first_line = render_source(source).splitlines()[0]
        assert first_line == (
            "// Code generated by bundled-roots-gen --output x509/root_ios.go; DO NOT EDIT."
        )

    def test_license_notice_follows_marker(self) -> None:
        """
        GIVEN the default contract
        WHEN a source is rendered
        THEN the package's license comment sits between the marker and the build constraint.
        """
        text = render_source(GeneratedSource(command="gen", output_name="out.go"))
        lines = text.splitlines()
        assert lines[2:6] == [
            "// Copyright 2015 The Go Authors. All rights reserved.",
            "// Use of this source code is governed by a BSD-style",
            "// license that can be found in the LICENSE file.",
            "",
        ]
        assert lines[6] == "//go:build !x509omitbundledroots"

    def test_contract_without_license_notice(self) -> None:
        contract = dataclasses.replace(DEFAULT_CONTRACT, license_notice=())
        text = render_source(GeneratedSource(command="gen", output_name="out.go"), contract)
        assert "Copyright" not in text
        assert text.splitlines()[2] == "//go:build !x509omitbundledroots"

    def test_rendering_is_pure(self) -> None:
        source = GeneratedSource("gen", "out.go", (_unit(), _unit(dn=b"x")))
        assert render_source(source) == render_source(source)

    def test_contract_names_are_used(self) -> None:
        contract = dataclasses.replace(
            DEFAULT_CONTRACT, version=2, register="addRoot", uncompressor="lazyGunzip"
        )
        statement = render_statement(_unit(dn=b"d", ski=b"k", payload=b"z"), contract)
        assert statement == 'p.addRoot("d", "k", lazyGunzip("z"))'

    def test_arity_mismatch_is_rejected(self) -> None:
        contract = dataclasses.replace(DEFAULT_CONTRACT, register_arity=2)
        with pytest.raises(ValueError, match="takes 2 arguments"):
            render_statement(_unit(), contract)
