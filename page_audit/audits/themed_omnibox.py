"""
Audits if a page is configured for a themed address bar.

Requirements:
- manifest is available and parses
- manifest has a valid theme_color
- HTML has a valid theme-color meta tag
"""

from typing import Any, List, Mapping, Optional

from ..config import AuditSettings
from ..core.base_audit import AuditDefinition, unsatisfied_requirements
from ..core.models import AuditResult, ManifestValues
from ..lib.css_color import is_valid_color


NO_META_TAG = 'No `<meta name="theme-color">` tag found'
INVALID_META_TAG = "The theme-color meta tag did not contain a valid CSS color"


def assess_meta_theme_color(theme_color_meta: Optional[str], failures: List[str]) -> None:
    if theme_color_meta is None:
        failures.append(NO_META_TAG)
    elif not is_valid_color(theme_color_meta):
        failures.append(INVALID_META_TAG)


def assess_manifest(manifest_values: ManifestValues, failures: List[str]) -> None:
    if manifest_values.is_parse_failure:
        failures.append(manifest_values.parse_failure_reason)
        return

    theme_color_check = manifest_values.all_checks.find("has_theme_color")
    if theme_color_check is not None and not theme_color_check.passing:
        failures.append(theme_color_check.message)


def evaluate(artifacts: Mapping[str, Any], settings: AuditSettings) -> AuditResult:
    failures: List[str] = []

    # Обе проверки независимы: провал manifest не отменяет проверку meta
    assess_manifest(artifacts["ManifestValues"], failures)
    assess_meta_theme_color(artifacts["ThemeColor"], failures)

    return unsatisfied_requirements(failures, extended_info={"failures": failures})


DEFINITION = AuditDefinition(
    id="themed-omnibox",
    description="Address bar matches brand colors",
    help_text=(
        "The browser address bar can be themed to match your site. A `theme-color` meta tag "
        "upgrades the address bar when a user browses the site, and the manifest `theme_color` "
        "applies the same theme site-wide once it's been added to homescreen."
    ),
    required_artifacts=("ManifestValues", "ThemeColor"),
    evaluate=evaluate,
)
