"""
Find text responses that were served without content encoding.

Each candidate carries a modeled gzip size; the gzip ratio for text is
predictable enough that the size is estimated rather than measured.
"""

import logging
from typing import Iterable, List

from ..config import AuditSettings
from ..core.byte_savings import ByteSavingsEstimator
from ..core.models import CompressionCandidate, RawNetworkRecord


logger = logging.getLogger(__name__)

CONTENT_ENCODING = "content-encoding"


def is_compressed(record: RawNetworkRecord, encodings: Iterable[str]) -> bool:
    """Ответ пришёл с одним из известных content-encoding."""
    accepted = {e.lower() for e in encodings}
    for value in record.header_values(CONTENT_ENCODING):
        tokens = {t.strip().lower() for t in value.split(",")}
        if tokens & accepted:
            return True
    return False


def filter_unoptimized_responses(
    network_records: Iterable[RawNetworkRecord],
    settings: AuditSettings,
) -> List[RawNetworkRecord]:
    """Текстовые ответы ненулевого размера без сжатия."""
    return [
        record for record in network_records
        if record.is_text
        and record.resource_size > settings.compression_min_resource_bytes
        and not is_compressed(record, settings.compressed_encodings)
    ]


def compute_compression_candidates(
    network_records: Iterable[RawNetworkRecord],
    settings: AuditSettings,
) -> List[CompressionCandidate]:
    """
    Построить CompressionCandidate для каждого несжатого текстового ответа.

    Args:
        network_records: Записи сети gatherer'а
        settings: Настройки (кодировки, минимальный размер, модель gzip)
    """
    estimator = ByteSavingsEstimator(settings)
    records = filter_unoptimized_responses(network_records, settings)

    candidates = [
        CompressionCandidate(
            url=record.url,
            mime_type=record.mime_type,
            resource_size=record.resource_size,
            estimated_compressed_size=estimator.estimate_compressed_size(record.resource_size),
        )
        for record in records
    ]
    logger.debug(f"Found {len(candidates)} uncompressed text responses")
    return candidates
