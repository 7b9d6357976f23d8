"""
Manifest checklist artifact.

One evaluation pass produces every manifest check; audits read the groups
they care about (installability, splash, omnibox, ...) from the same report.
"""

import logging
from typing import Optional, Tuple

from ..config import AuditSettings
from ..core.checklist import RuleChecklist, make_item
from ..core.models import ChecklistItem, Manifest, ManifestNode, ManifestValues
from ..lib import icons
from ..lib.css_color import is_valid_color


logger = logging.getLogger(__name__)

VALIDITY_GROUP = "validity"

NO_MANIFEST_REASON = "No manifest was fetched"


def _value(subject: ManifestNode[Manifest]) -> Manifest:
    # Только для предикатов после validity: subject и subject.value гарантированно есть
    return subject.value


def homescreen_name(manifest: Manifest) -> Optional[str]:
    """Имя под иконкой на homescreen: short_name, иначе name."""
    return manifest.short_name.value or manifest.name.value


def _has_color(field_name: str):
    def predicate(subject) -> bool:
        node = getattr(_value(subject), field_name)
        return node.present and is_valid_color(node.value)
    return predicate


def _explain_color(field_name: str):
    def explain(subject) -> Optional[str]:
        node = getattr(_value(subject), field_name)
        if not node.present:
            return node.debug_string or f"`{field_name}` is missing"
        return f"'{node.value}' is not a valid CSS color"
    return explain


def _explain_missing(field_name: str):
    def explain(subject) -> Optional[str]:
        node = getattr(_value(subject), field_name)
        return node.debug_string
    return explain


def build_manifest_checklist(settings: AuditSettings) -> Tuple[ChecklistItem, ...]:
    """
    Упорядоченный список проверок manifest.

    Args:
        settings: Пороги (размеры иконок, режимы display, длина short_name)
    """
    installable_size = settings.installable_icon_min_size
    splash_size = settings.splash_icon_min_size
    display_modes = tuple(settings.pwa_display_modes)
    max_short_name = settings.short_name_max_length

    def has_display(subject) -> bool:
        display = _value(subject).display
        return display.present and display.value in display_modes

    def short_name_fits(subject) -> bool:
        display_name = homescreen_name(_value(subject))
        return bool(display_name) and len(display_name) <= max_short_name

    def explain_short_name(subject) -> Optional[str]:
        display_name = homescreen_name(_value(subject))
        if not display_name:
            return "neither `short_name` nor `name` is set"
        return f"{len(display_name)} characters, maximum is {max_short_name}"

    return (
        make_item(
            "has_manifest",
            "Manifest is available",
            [VALIDITY_GROUP],
            lambda subject: subject is not None,
        ),
        make_item(
            "has_parseable_manifest",
            "Manifest is parsed as JSON",
            [VALIDITY_GROUP],
            lambda subject: subject is not None and subject.value is not None,
            explain=lambda subject: subject.debug_string if subject is not None else None,
        ),
        make_item(
            "has_start_url",
            "Manifest contains `start_url`",
            ["installability"],
            lambda subject: bool(_value(subject).start_url.value),
            explain=_explain_missing("start_url"),
        ),
        make_item(
            f"has_icons_at_least_{installable_size}px",
            f"Manifest contains icons at least {installable_size}px",
            ["installability"],
            lambda subject: len(icons.size_at_least(installable_size, _value(subject))) > 0,
        ),
        make_item(
            f"has_icons_at_least_{splash_size}px",
            f"Manifest contains icons at least {splash_size}px",
            ["splash"],
            lambda subject: len(icons.size_at_least(splash_size, _value(subject))) > 0,
        ),
        make_item(
            "has_pwa_display_value",
            f"Manifest's `display` property is one of: {', '.join(display_modes)}",
            ["display"],
            has_display,
        ),
        make_item(
            "has_background_color",
            "Manifest contains a valid `background_color`",
            ["splash"],
            _has_color("background_color"),
            explain=_explain_color("background_color"),
        ),
        make_item(
            "has_theme_color",
            "Manifest contains a valid `theme_color`",
            ["splash", "omnibox"],
            _has_color("theme_color"),
            explain=_explain_color("theme_color"),
        ),
        make_item(
            "has_short_name",
            "Manifest contains `short_name`",
            ["installability"],
            lambda subject: bool(_value(subject).short_name.value),
            explain=_explain_missing("short_name"),
        ),
        make_item(
            "short_name_length",
            "Manifest's `short_name` won't be truncated when displayed on homescreen",
            ["short-name"],
            short_name_fits,
            explain=explain_short_name,
        ),
        make_item(
            "has_name",
            "Manifest contains `name`",
            ["installability", "splash"],
            lambda subject: bool(_value(subject).name.value),
            explain=_explain_missing("name"),
        ),
    )


def compute_manifest_values(
    manifest: Optional[ManifestNode[Manifest]],
    settings: AuditSettings,
) -> ManifestValues:
    """
    Прогнать чеклист manifest.

    Args:
        manifest: Результат парсера (None = страница без manifest)
        settings: Настройки аудита

    Returns:
        ManifestValues со всеми проверками
    """
    checklist = RuleChecklist(build_manifest_checklist(settings), prerequisite_group=VALIDITY_GROUP)
    report = checklist.evaluate(manifest)

    parse_failure_reason = None
    if manifest is None:
        parse_failure_reason = NO_MANIFEST_REASON
    elif manifest.value is None:
        parse_failure_reason = manifest.debug_string or "Manifest could not be parsed"

    logger.debug(
        f"Manifest checklist: {len(report.results)} checks, "
        f"{len(report.failures())} failing, short_circuited={report.short_circuited}"
    )

    return ManifestValues(
        is_parse_failure=parse_failure_reason is not None,
        parse_failure_reason=parse_failure_reason,
        all_checks=report,
    )
