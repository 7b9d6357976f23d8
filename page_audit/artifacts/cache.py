"""
Per-run memoization of computed artifacts.

Features:
- each artifact is derived at most once per cache instance
- failures are cached and re-raised, never retried
- single-flight per artifact name: concurrent callers of one artifact wait
  for the first computation, other artifacts are not blocked
"""

import logging
import threading
from typing import Any, Dict, Iterable, Mapping, Optional

from ..config import AuditSettings, get_settings
from ..core.errors import MissingPrerequisite
from .registry import ComputedArtifact, build_registry


logger = logging.getLogger(__name__)


class _Entry:
    """Слот одного артефакта."""

    __slots__ = ("lock", "done", "value", "error")

    def __init__(self):
        self.lock = threading.Lock()
        self.done = False
        self.value: Any = None
        self.error: Optional[BaseException] = None


class ArtifactCache:
    """Кэш производных артефактов одного прогона аудита."""

    def __init__(
        self,
        raw_artifacts: Mapping[str, Any],
        settings: Optional[AuditSettings] = None,
        registry: Optional[Dict[str, ComputedArtifact]] = None,
    ):
        """
        Args:
            raw_artifacts: Сырые артефакты gatherer'а по именам
            settings: Настройки аудита (по умолчанию get_settings())
            registry: Реестр производных артефактов (по умолчанию стандартный)
        """
        self.raw_artifacts = dict(raw_artifacts)
        self.settings = settings or get_settings()
        self.registry = registry if registry is not None else build_registry()
        self._entries: Dict[str, _Entry] = {}
        self._guard = threading.Lock()

    def _entry(self, name: str) -> _Entry:
        # Глобальный lock держится только на время поиска/создания слота
        with self._guard:
            entry = self._entries.get(name)
            if entry is None:
                entry = _Entry()
                self._entries[name] = entry
            return entry

    def is_computed_artifact(self, name: str) -> bool:
        return name in self.registry

    def compute(self, name: str, *inputs: Any) -> Any:
        """
        Получить производный артефакт, вычислив его при первом запросе.

        Args:
            name: Имя зарегистрированного артефакта
            *inputs: Входы derive (используются только первым вызовом)

        Returns:
            Общее для всех вызовов значение

        Raises:
            KeyError: артефакт не зарегистрирован
            Exception: закэшированная ошибка первого вычисления
        """
        artifact = self.registry.get(name)
        if artifact is None:
            raise KeyError(f"Unknown computed artifact: {name}")

        entry = self._entry(name)
        with entry.lock:
            if not entry.done:
                logger.debug(f"Computing artifact {name}")
                try:
                    entry.value = artifact.derive(*inputs, settings=self.settings)
                except Exception as e:
                    logger.info(f"Artifact {name} failed: {type(e).__name__}: {e}")
                    entry.error = e
                entry.done = True

        if entry.error is not None:
            raise entry.error
        return entry.value

    def resolve(self, name: str) -> Any:
        """
        Получить артефакт по имени: сырой из snapshot или производный.

        Raises:
            MissingPrerequisite: сырой артефакт не был собран
        """
        artifact = self.registry.get(name)
        if artifact is not None:
            inputs = [self.resolve(input_name) for input_name in artifact.inputs]
            return self.compute(name, *inputs)

        if name not in self.raw_artifacts:
            raise MissingPrerequisite(f"Required {name} gatherer did not run")
        return self.raw_artifacts[name]

    def resolve_many(self, names: Iterable[str]) -> Dict[str, Any]:
        return {name: self.resolve(name) for name in names}
