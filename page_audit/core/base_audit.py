"""
Audit definitions and the uniform audit runner.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..config import AuditSettings
from .errors import AuditError, MissingPrerequisite
from .models import AuditResult


logger = logging.getLogger(__name__)

Evaluator = Callable[[Mapping[str, Any], AuditSettings], AuditResult]


@dataclass(frozen=True)
class AuditDefinition:
    """
    Описание аудита.

    Аудит не наследуется от базового класса: всё, что его отличает,
    лежит в этой записи, а логика в чистой функции evaluate.
    """

    id: str
    description: str
    required_artifacts: Tuple[str, ...]
    evaluate: Evaluator
    help_text: str = ""
    category: str = "PWA"
    # Передаются в evaluate только если собраны
    optional_artifacts: Tuple[str, ...] = ()


def unsatisfied_requirements(
    failures: List[str],
    extended_info: Optional[Dict[str, Any]] = None,
) -> AuditResult:
    """
    Результат для аудитов-чеклистов.

    Args:
        failures: Тексты невыполненных требований
        extended_info: Дополнительные данные для отчёта

    Returns:
        Проваленный AuditResult с перечнем требований или пройденный
    """
    extended_info = extended_info or {}
    if failures:
        return AuditResult(
            raw_value=False,
            debug_string=f"Unsatisfied requirements: {', '.join(failures)}.",
            extended_info=extended_info,
        )
    return AuditResult(raw_value=True, extended_info=extended_info)


class AuditRunner:
    """
    Выполнение одного аудита над кэшем артефактов.

    Предоставляет:
    - Разрешение required_artifacts через ArtifactCache
    - Превращение AuditError в проваленный AuditResult
    - Логирование и замер длительности
    """

    def __init__(self, definition: AuditDefinition, settings: AuditSettings):
        """
        Args:
            definition: Описание аудита
            settings: Настройки аудита
        """
        self.definition = definition
        self.settings = settings
        self.name = definition.id
        self.logger = logging.getLogger(f"page_audit.{definition.id}")

    def run(self, cache) -> AuditResult:
        """
        Выполнить аудит.

        Args:
            cache: ArtifactCache текущего прогона

        Returns:
            AuditResult

        Raises:
            Exception: любая ошибка кроме AuditError является дефектом и пробрасывается
        """
        self.logger.debug(f"Starting {self.name}...")
        start_time = time.perf_counter()

        try:
            artifacts = cache.resolve_many(self.definition.required_artifacts)
            for name in self.definition.optional_artifacts:
                try:
                    artifacts[name] = cache.resolve(name)
                except MissingPrerequisite:
                    self.logger.debug(f"Optional artifact {name} not available")
            result = self.definition.evaluate(artifacts, self.settings)
        except AuditError as e:
            result = AuditResult(raw_value=False, debug_string=str(e))
        except Exception as e:
            self.logger.error(f"{self.name} failed with exception: {e}", exc_info=True)
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.logger.info(
            f"Completed {self.name}: "
            f"passed={result.passed}, "
            f"duration={duration_ms:.2f}ms"
        )
        return result
