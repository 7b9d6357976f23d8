"""
Helpers for manifest icon lists.
"""

import re
from typing import List, Optional

from ..core.models import Manifest, ManifestIcon, ManifestNode


_SIZE_RE = re.compile(r"^(\d+)x(\d+)$")


def does_exist(manifest: Optional[Manifest]) -> bool:
    """В manifest есть непустой список иконок."""
    if manifest is None or not manifest.icons.present:
        return False
    return len(manifest.icons.value) > 0


def _icon_sizes(icon_node: ManifestNode[ManifestIcon]) -> List[str]:
    icon = icon_node.value
    if icon is None or not icon.sizes.present:
        return []
    return list(icon.sizes.value)


def size_at_least(size: int, manifest: Manifest) -> List[str]:
    """
    Все квадратные размеры иконок не меньше size.

    Args:
        size: Минимальная сторона в пикселях
        manifest: Разобранный manifest

    Returns:
        Список строк вида '192x192'; неквадратные размеры не учитываются
    """
    if not does_exist(manifest):
        return []

    matching = []
    for icon_node in manifest.icons.value:
        for size_str in _icon_sizes(icon_node):
            match = _SIZE_RE.match(size_str.strip().lower())
            if not match:
                continue
            width, height = int(match.group(1)), int(match.group(2))
            if width == height and width >= size:
                matching.append(size_str)
    return matching
