"""
Byte savings model shared by compression audits.

Gating rules:
- a candidate is ignored when compressed/original exceeds the percent
  threshold or the absolute savings are below the byte threshold;
- the page passes while the total wasted bytes stay under the ceiling;
- the same (url, original size) pair counts once.
"""

import logging
import math
from typing import Iterable, List, Optional, Set, Tuple

from ..config import AuditSettings
from .models import ByteSavings, CompressionCandidate, SavingsSummary


logger = logging.getLogger(__name__)

KB_IN_BYTES = 1024


def round_half_up(value: float) -> int:
    """Округление .5 вверх (встроенный round округляет .5 к чётному)."""
    return math.floor(value + 0.5)


def to_savings_string(wasted_bytes: float = 0, wasted_percent: float = 0) -> str:
    """'12 KB (40%)'."""
    return f"{round_half_up(wasted_bytes / KB_IN_BYTES):,} KB ({round_half_up(wasted_percent):,}%)"


def wasted_ms(total_wasted_bytes: float, network_throughput: Optional[float]) -> Optional[float]:
    """
    Время, которое займёт загрузка потерянных байт.

    Args:
        total_wasted_bytes: Суммарные потери
        network_throughput: Пропускная способность, байт/сек

    Returns:
        Миллисекунды с точностью до 10 мс или None без оценки пропускной способности
    """
    if not network_throughput or network_throughput <= 0:
        return None
    return round_half_up(total_wasted_bytes / network_throughput * 100) * 10


class ByteSavingsEstimator:
    """Оценка потерь от несжатых ответов."""

    def __init__(self, settings: AuditSettings):
        self.ignore_threshold_percent = settings.compression_ignore_threshold_percent
        self.ignore_threshold_bytes = settings.compression_ignore_threshold_bytes
        self.total_wasted_bytes_threshold = settings.total_wasted_bytes_threshold
        self.gzip_estimate_ratio = settings.gzip_estimate_ratio

    def estimate_compressed_size(self, original_size: float) -> float:
        """Модельный размер после gzip."""
        return original_size * self.gzip_estimate_ratio

    def estimate(self, url: str, original_size: int, compressed_size: Optional[float] = None) -> ByteSavings:
        """
        Посчитать потери для одного ресурса.

        Args:
            url: URL ресурса
            original_size: Размер после распаковки
            compressed_size: Наблюдаемый или модельный сжатый размер
                (None = модель gzip)
        """
        if compressed_size is None:
            compressed_size = self.estimate_compressed_size(original_size)

        wasted = original_size - compressed_size
        percent = 100 * wasted / original_size if original_size else 0
        return ByteSavings(
            url=url,
            total_bytes=original_size,
            wasted_bytes=wasted,
            wasted_percent=percent,
            potential_savings=to_savings_string(wasted, percent),
        )

    def should_ignore(self, original_size: float, compressed_size: float) -> bool:
        """Сжатие почти не помогает или экономия слишком мала."""
        if original_size <= 0:
            return True
        savings = original_size - compressed_size
        return (
            compressed_size / original_size > self.ignore_threshold_percent
            or savings < self.ignore_threshold_bytes
        )

    def summarize(
        self,
        candidates: Iterable[CompressionCandidate],
        network_throughput: Optional[float] = None,
    ) -> SavingsSummary:
        """
        Агрегировать кандидатов в вердикт по странице.

        Детализация по ресурсам возвращается и тогда, когда страница проходит.
        """
        results: List[ByteSavings] = []
        seen: Set[Tuple[str, int]] = set()
        total_wasted = 0.0

        for candidate in candidates:
            original = candidate.resource_size
            compressed = candidate.estimated_compressed_size

            if self.should_ignore(original, compressed):
                continue

            key = (candidate.url, original)
            if key in seen:
                continue
            seen.add(key)

            savings = self.estimate(candidate.url, original, compressed)
            total_wasted += savings.wasted_bytes
            results.append(savings)

        passes = total_wasted < self.total_wasted_bytes_threshold
        logger.debug(
            f"Compression summary: {len(results)} counted resources, "
            f"wasted={total_wasted:.0f}B, passes={passes}"
        )

        return SavingsSummary(
            results=tuple(results),
            total_wasted_bytes=total_wasted,
            passes=passes,
            wasted_ms=wasted_ms(total_wasted, network_throughput),
        )
