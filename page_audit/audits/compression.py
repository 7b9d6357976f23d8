"""
Audit a page to ensure that text resources are served with gzip/br/deflate
compression.

One evaluator serves every byte-efficiency variant; a variant differs only
in its AuditDefinition (id, texts, candidates artifact).
"""

from functools import partial
from typing import Any, Mapping

from ..config import AuditSettings
from ..core.base_audit import AuditDefinition
from ..core.byte_savings import KB_IN_BYTES, ByteSavingsEstimator, round_half_up
from ..core.models import AuditResult
from ..lib.url import display_name


TABLE_HEADINGS = {
    "url": "Uncompressed resource URL",
    "total_kb": "Original",
    "potential_savings": "GZIP Savings",
}


def evaluate(
    artifacts: Mapping[str, Any],
    settings: AuditSettings,
    candidates_artifact: str = "CompressionCandidates",
) -> AuditResult:
    estimator = ByteSavingsEstimator(settings)
    summary = estimator.summarize(
        artifacts[candidates_artifact],
        network_throughput=artifacts.get("NetworkThroughput"),
    )

    results = sorted(summary.results, key=lambda r: r.wasted_bytes, reverse=True)
    table = []
    for savings in results:
        row = savings.to_dict()
        row["display_url"] = display_name(savings.url)
        row["total_kb"] = f"{round_half_up(savings.total_bytes / KB_IN_BYTES):,} KB"
        table.append(row)

    wasted_kb = round_half_up(summary.total_wasted_bytes / KB_IN_BYTES)
    display_value = None
    if results:
        display_value = f"Potential savings of {wasted_kb:,} KB"
        if summary.wasted_ms is not None:
            display_value += f" (~{summary.wasted_ms:,.0f} ms)"

    debug_string = None
    if not summary.passes:
        threshold_kb = round_half_up(settings.total_wasted_bytes_threshold / KB_IN_BYTES)
        debug_string = (
            f"{len(results)} uncompressed resources waste {wasted_kb:,} KB, "
            f"above the {threshold_kb:,} KB threshold"
        )

    return AuditResult(
        raw_value=summary.passes,
        debug_string=debug_string,
        display_value=display_value,
        extended_info={
            "results": table,
            "table_headings": TABLE_HEADINGS,
            "total_wasted_bytes": summary.total_wasted_bytes,
            "wasted_ms": summary.wasted_ms,
        },
    )


def compression_definition(
    audit_id: str = "uses-request-compression",
    description: str = "Compression enabled for server responses",
    candidates_artifact: str = "CompressionCandidates",
) -> AuditDefinition:
    """Описание byte-efficiency аудита поверх заданного артефакта кандидатов."""
    return AuditDefinition(
        id=audit_id,
        description=description,
        help_text=(
            "Text-based responses should be served with compression (gzip, deflate or brotli) "
            "to minimize total network bytes."
        ),
        category="Performance",
        required_artifacts=(candidates_artifact,),
        optional_artifacts=("NetworkThroughput",),
        evaluate=partial(evaluate, candidates_artifact=candidates_artifact),
    )


DEFINITION = compression_definition()
