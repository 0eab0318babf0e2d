"""
Pipeline — the ROP chain that turns a PEM bundle into a Go source file.

All I/O is injected via ports (Protocol interfaces); rendering is a pure
function. Stages are connected with flat_map:

  reader.read(input_path)
    → decoder.decode_bundle(bytes)          DECODE_ERROR on the first bad block
      → compress each record                COMPRESSION_ERROR
        → round-trip self-check (optional)  VERIFICATION_ERROR
          → render_source(model)            RENDER_FORMAT_ERROR
            → formatter.format(text)        RENDER_FORMAT_ERROR
              → writer.write(output_path)   OUTPUT_WRITE_ERROR

The writer is the only stage with a lasting side effect and it runs last, so
any earlier failure leaves the output path untouched.
"""

from __future__ import annotations

from pathlib import Path

import structlog
from railway import ErrorCode
from railway.result import Result

from bundled_roots.adapters.go_emitter import render_source
from bundled_roots.domain.contract import DEFAULT_CONTRACT, PoolContract
from bundled_roots.domain.models import (
    CertificateRecord,
    EmissionUnit,
    GeneratedSource,
    GenerationSummary,
    KeyIdReport,
)
from bundled_roots.domain.ports import (
    BundleReader,
    CertificateDecoder,
    PayloadCompressor,
    SourceFormatter,
    SourceWriter,
)

log = structlog.get_logger()


def _report_key_ids(records: list[CertificateRecord]) -> None:
    report = KeyIdReport.of(records)
    log.info(
        "pipeline.key_ids",
        certificates=report.total,
        unique_key_ids=report.unique,
        missing_key_ids=report.missing,
    )
    if report.has_duplicates:
        # the runtime pool skips later entries whose key id it already holds
        log.warning(
            "pipeline.duplicate_key_ids",
            key_ids={k.hex(): n for k, n in report.duplicates.items()},
        )


def _to_unit(record: CertificateRecord, compressor: PayloadCompressor) -> Result[EmissionUnit]:
    return compressor.compress(record.raw_der).map(
        lambda payload: EmissionUnit(
            subject_dn=record.subject_dn,
            subject_key_id=record.subject_key_id,
            compressed_payload=payload,
        )
    )


def compress_records(
    records: list[CertificateRecord],
    compressor: PayloadCompressor,
) -> Result[list[EmissionUnit]]:
    """Compress every record independently, preserving order."""
    return Result.all_of(_to_unit(record, compressor) for record in records)


def _verify_unit(
    ordinal: int,
    unit: EmissionUnit,
    decoder: CertificateDecoder,
    compressor: PayloadCompressor,
) -> Result[EmissionUnit]:
    return (
        Result.from_computation(
            lambda: compressor.decompress(unit.compressed_payload),
            ErrorCode.VERIFICATION_ERROR,
            f"Payload #{ordinal} does not decompress",
        )
        .flat_map(decoder.decode)
        .ensure(
            lambda record: (record.subject_dn, record.subject_key_id)
            == (unit.subject_dn, unit.subject_key_id),
            ErrorCode.VERIFICATION_ERROR,
            f"Payload #{ordinal} does not match its subject or key id",
        )
        .map(lambda _: unit)
    )


def verify_units(
    units: list[EmissionUnit],
    decoder: CertificateDecoder,
    compressor: PayloadCompressor,
) -> Result[list[EmissionUnit]]:
    """
    Decompress and re-parse every payload, checking it against its literals.

    Guards the invariant the runtime relies on: the subject and key id the
    pool indexes by are those of the certificate it will later inflate.
    """
    return Result.all_of(
        _verify_unit(ordinal, unit, decoder, compressor)
        for ordinal, unit in enumerate(units, start=1)
    ).peek(lambda checked: log.debug("pipeline.verified", units=len(checked)))


def _render(source: GeneratedSource, contract: PoolContract) -> Result[str]:
    return Result.from_computation(
        lambda: render_source(source, contract),
        ErrorCode.RENDER_FORMAT_ERROR,
        "Failed to render generated source",
    )


def run_pipeline(
    reader: BundleReader,
    decoder: CertificateDecoder,
    compressor: PayloadCompressor,
    formatter: SourceFormatter,
    writer: SourceWriter,
    *,
    input_path: Path,
    output_path: Path,
    command: str,
    output_name: str | None = None,
    contract: PoolContract = DEFAULT_CONTRACT,
    verify_round_trip: bool = True,
) -> Result[GenerationSummary]:
    """
    Generate the bundled roots file.

    `output_name` is the value shown after --output in the DO NOT EDIT marker;
    it defaults to `output_path` as given.

    Returns Result[GenerationSummary] on success, or the failure of the first
    stage that failed.
    """
    marker_name = output_name if output_name is not None else str(output_path)

    def build_units(records: list[CertificateRecord]) -> Result[list[EmissionUnit]]:
        units = compress_records(records, compressor)
        if verify_round_trip:
            return units.flat_map(lambda built: verify_units(built, decoder, compressor))
        return units

    def write(text: str, count: int) -> Result[GenerationSummary]:
        return writer.write(output_path, text).map(
            lambda size: GenerationSummary(
                certificates=count,
                bytes_written=size,
                output_path=output_path,
            )
        )

    log.info("pipeline.starting", input=str(input_path), contract_version=contract.version)
    return (
        reader.read(input_path)
        .flat_map(decoder.decode_bundle)
        .peek(_report_key_ids)
        .flat_map(build_units)
        .map(lambda units: GeneratedSource(command, marker_name, tuple(units)))
        .flat_map(
            lambda source: _render(source, contract)
            .flat_map(formatter.format)
            .flat_map(lambda text: write(text, len(source.units)))
        )
    )
