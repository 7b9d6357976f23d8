"""
Configuration for the audit pipeline.

Every threshold an audit uses lives here so it can be tuned from the
environment (PAGE_AUDIT_* variables or a .env file) without touching audits.
Out-of-range values fail when AuditSettings is loaded.
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AuditSettings(BaseSettings):
    """Настройки аудита."""

    model_config = SettingsConfigDict(env_prefix="PAGE_AUDIT_", env_file=".env", extra="ignore")

    # === Compression ===
    # Ресурс игнорируется, если compressed/original больше этого порога
    compression_ignore_threshold_percent: float = Field(0.9, gt=0, le=1)
    # ...или экономия меньше этого количества байт
    compression_ignore_threshold_bytes: int = Field(1400, ge=0)
    # Страница проходит, если суммарные потери меньше этого значения
    total_wasted_bytes_threshold: int = Field(100 * 1024, ge=0)
    # Ответы с таким или меньшим размером не считаются кандидатами
    compression_min_resource_bytes: int = Field(0, ge=0)
    # Модель gzip: сжатый размер ~ 2/3 исходного
    gzip_estimate_ratio: float = Field(2 / 3, gt=0, le=1)
    compressed_encodings: List[str] = ["gzip", "br", "deflate"]

    # === Manifest ===
    short_name_max_length: int = Field(12, gt=0)
    pwa_display_modes: List[str] = ["fullscreen", "standalone", "minimal-ui"]
    installable_icon_min_size: int = Field(144, gt=0)
    splash_icon_min_size: int = Field(512, gt=0)

    # === Timeline ===
    # Делитель в score_for: должен быть > 0
    fcp_threshold_ms: float = Field(3000.0, gt=0)

    # === Execution ===
    parallel_execution: bool = True


@lru_cache
def get_settings() -> AuditSettings:
    return AuditSettings()
