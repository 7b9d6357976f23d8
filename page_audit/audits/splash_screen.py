"""
Audits if a page is configured for a custom splash screen when launched.

Requirements:
- manifest is available and parses
- manifest has a name
- manifest has a valid background_color
- manifest has a valid theme_color
- manifest has an icon of at least splash_icon_min_size
"""

from typing import Any, Mapping

from ..config import AuditSettings
from ..core.base_audit import AuditDefinition, unsatisfied_requirements
from ..core.models import AuditResult


def evaluate(artifacts: Mapping[str, Any], settings: AuditSettings) -> AuditResult:
    manifest_values = artifacts["ManifestValues"]
    failures = [r.message for r in manifest_values.all_checks.failures("validity", "splash")]

    return unsatisfied_requirements(
        failures,
        extended_info={"manifest_values": manifest_values.to_dict(), "failures": failures},
    )


DEFINITION = AuditDefinition(
    id="splash-screen",
    description="Configured for a custom splash screen",
    help_text=(
        "A default splash screen will be constructed, but meeting these requirements "
        "guarantees a high-quality splash screen between tapping the home screen icon "
        "and the app's first paint."
    ),
    required_artifacts=("ManifestValues",),
    evaluate=evaluate,
)
