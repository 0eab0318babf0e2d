"""
Application entry point — parses the command line, wires adapters, runs once.

Composition root: the only place where concrete adapter classes are
instantiated. Everything else depends on the Protocol ports.

Responsibilities:
  1. Parse --output
  2. Load and validate GeneratorSettings
  3. Configure structlog (to stderr, the generated file goes to disk)
  4. Create the adapters and run the pipeline
  5. Exit non-zero with the failure on stderr if the settings or any stage failed
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn, TypeAlias

import structlog
from pydantic import ValidationError
from railway import ErrorCode, FailureDescription

from bundled_roots import __version__
from bundled_roots.adapters.compressor import GzipPayloadCompressor
from bundled_roots.adapters.filesystem import AtomicFileWriter, FileBundleReader
from bundled_roots.adapters.go_format import CanonicalGoFormatter, GofmtFormatter
from bundled_roots.adapters.x509_decoder import X509CertificateDecoder
from bundled_roots.config import DEFAULT_OUTPUT, GeneratorSettings
from bundled_roots.domain.contract import DEFAULT_CONTRACT
from bundled_roots.domain.models import GenerationSummary
from bundled_roots.pipeline import run_pipeline


def configure_structlog(log_level: str = "WARNING") -> None:
    """Configure structlog for human-readable console output on stderr."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.WARNING)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bundled-roots-gen",
        description="Generate Go source embedding a compressed snapshot of certs.pem.",
    )
    parser.add_argument(
        "--output",
        default=None,
        help=f"file name to write (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


_Adapters: TypeAlias = tuple[
    FileBundleReader,
    X509CertificateDecoder,
    GzipPayloadCompressor,
    CanonicalGoFormatter | GofmtFormatter,
    AtomicFileWriter,
]


def _create_adapters(settings: GeneratorSettings) -> _Adapters:
    """Instantiate the concrete adapters selected by the settings."""
    formatter: CanonicalGoFormatter | GofmtFormatter
    if settings.formatter == "gofmt":
        formatter = GofmtFormatter(gofmt_path=settings.gofmt_path)
    else:
        formatter = CanonicalGoFormatter()
    return (
        FileBundleReader(),
        X509CertificateDecoder(),
        GzipPayloadCompressor(level=settings.compression_level),
        formatter,
        AtomicFileWriter(),
    )


def _fail(error: FailureDescription) -> NoReturn:
    log = structlog.get_logger()
    log.error("generator.failed", code=error.code.value, error=error.message)
    log.debug("generator.failure_trace", trace=error.full_stack_trace())
    print(f"FATAL: {error.describe()}", file=sys.stderr)  # noqa: T201
    sys.exit(1)


def _done(summary: GenerationSummary) -> None:
    structlog.get_logger().info(
        "generator.done",
        certificates=summary.certificates,
        bytes_written=summary.bytes_written,
        output=str(summary.output_path),
    )


def main(argv: list[str] | None = None) -> None:
    """Run the generator once; exits with status 1 on any failure."""
    args = build_arg_parser().parse_args(argv)
    overrides = {"output_path": Path(args.output)} if args.output is not None else {}
    try:
        settings = GeneratorSettings(**overrides)
    except ValidationError as e:
        configure_structlog()
        _fail(FailureDescription(ErrorCode.CONFIGURATION_ERROR, "Invalid settings", e))

    configure_structlog(settings.log_level)

    reader, decoder, compressor, formatter, writer = _create_adapters(settings)
    result = run_pipeline(
        reader,
        decoder,
        compressor,
        formatter,
        writer,
        input_path=settings.input_path,
        output_path=settings.output_path,
        command=settings.command,
        output_name=args.output if args.output is not None else str(settings.output_path),
        contract=DEFAULT_CONTRACT,
        verify_round_trip=settings.verify_round_trip,
    )
    result.either(_done, _fail)


if __name__ == "__main__":
    main()
