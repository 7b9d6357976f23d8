"""
Installability audit.

Requirements:
- manifest is available and parses
- manifest has start_url, short_name, name
- manifest has a square icon of at least installable_icon_min_size
- an activated service worker from the same origin as the final URL
"""

from typing import Any, Iterable, Mapping

from ..config import AuditSettings
from ..core.base_audit import AuditDefinition, unsatisfied_requirements
from ..core.models import AuditResult, ServiceWorkerVersion
from ..lib.url import origin


SERVICE_WORKER_REQUIREMENT = "Site registers a Service Worker"


def has_service_worker(versions: Iterable[ServiceWorkerVersion], final_url: str) -> bool:
    """
    Есть ли активированный service worker для страницы.

    Сравнивается только origin: путь скрипта значения не имеет.
    Используется final URL, чтобы учесть редиректы.
    """
    page_origin = origin(final_url)
    if page_origin is None:
        return False
    return any(
        version.status == "activated" and origin(version.script_url) == page_origin
        for version in versions
    )


def evaluate(artifacts: Mapping[str, Any], settings: AuditSettings) -> AuditResult:
    manifest_values = artifacts["ManifestValues"]

    # 1: manifest
    failures = [r.message for r in manifest_values.all_checks.failures("validity", "installability")]

    # 2: service worker
    if not has_service_worker(artifacts["ServiceWorker"], artifacts["URL"]):
        failures.append(SERVICE_WORKER_REQUIREMENT)

    return unsatisfied_requirements(
        failures,
        extended_info={"manifest_values": manifest_values.to_dict(), "failures": failures},
    )


DEFINITION = AuditDefinition(
    id="webapp-install-banner",
    description="User can be prompted to Install the Web App",
    help_text=(
        "Browsers can proactively prompt users to add your app to their homescreen, "
        "which can lead to higher engagement."
    ),
    required_artifacts=("URL", "ServiceWorker", "ManifestValues"),
    evaluate=evaluate,
)
