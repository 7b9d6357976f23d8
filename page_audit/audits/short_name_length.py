"""
Audits that the homescreen name (short_name, falling back to name) fits
without truncation.

The length check itself is the `short_name_length` item of the manifest
checklist, so the limit comes from the settings ManifestValues was
computed with.
"""

from typing import Any, Mapping

from ..artifacts.manifest_values import homescreen_name
from ..config import AuditSettings
from ..core.base_audit import AuditDefinition
from ..core.models import AuditResult


CHECK_ID = "short_name_length"


def evaluate(artifacts: Mapping[str, Any], settings: AuditSettings) -> AuditResult:
    manifest_values = artifacts["ManifestValues"]
    if manifest_values.is_parse_failure:
        return AuditResult(raw_value=False, debug_string=manifest_values.parse_failure_reason)

    check = manifest_values.all_checks.find(CHECK_ID)
    if check is None:
        return AuditResult(raw_value=False, debug_string=f"Manifest checklist has no {CHECK_ID} result")

    name = homescreen_name(artifacts["Manifest"].value)
    if not check.passing:
        return AuditResult(raw_value=False, debug_string=check.message, extended_info={"short_name": name})

    return AuditResult(raw_value=True, extended_info={"short_name": name})


DEFINITION = AuditDefinition(
    id="manifest-short-name-length",
    description="Manifest's short_name won't be truncated when displayed on homescreen",
    help_text="Keep your app's short_name short enough to fit on the homescreen without truncation.",
    required_artifacts=("Manifest", "ManifestValues"),
    evaluate=evaluate,
)
