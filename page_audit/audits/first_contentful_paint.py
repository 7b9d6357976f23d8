"""
First contentful paint, measured from the navigation start that caused it.
"""

from typing import Any, Mapping

from ..config import AuditSettings
from ..core.base_audit import AuditDefinition
from ..core.models import AuditResult


def score_for(fcp_ms: float, threshold_ms: float) -> float:
    """1.0 до порога, линейно до 0 при двойном пороге."""
    if fcp_ms <= threshold_ms:
        return 1.0
    return max(0.0, 1 - (fcp_ms - threshold_ms) / threshold_ms)


def evaluate(artifacts: Mapping[str, Any], settings: AuditSettings) -> AuditResult:
    timeline = artifacts["PageTimeline"]
    fcp_ms = timeline.first_contentful_paint_ms
    score = score_for(fcp_ms, settings.fcp_threshold_ms)

    return AuditResult(
        raw_value=fcp_ms,
        score=round(score, 2),
        display_value=f"{fcp_ms:,.0f} ms",
        extended_info={
            "frame_id": timeline.frame_start_event.frame_id,
            "timestamps": {
                "navigation_start": timeline.navigation_start_event.timestamp,
                "first_contentful_paint": timeline.first_contentful_paint_event.timestamp,
            },
        },
    )


DEFINITION = AuditDefinition(
    id="first-contentful-paint",
    description="First Contentful Paint",
    help_text="First contentful paint marks the time at which the first text or image is painted.",
    category="Performance",
    required_artifacts=("PageTimeline",),
    evaluate=evaluate,
)
