"""
Audit orchestrator for one page snapshot.

Features:
- One ArtifactCache per run, shared by every audit
- Parallel execution of audits in worker threads
- Sequential mode
- Graceful degradation: a defective audit yields an error result
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from page_audit.artifacts.cache import ArtifactCache
from page_audit.audits import DEFAULT_AUDITS
from page_audit.config import AuditSettings, get_settings
from page_audit.core.base_audit import AuditDefinition, AuditRunner
from page_audit.core.models import AuditResult, PageSnapshot


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Настроить логирование."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _error_result(error: BaseException) -> AuditResult:
    return AuditResult(
        raw_value=False,
        debug_string=f"Audit error: {type(error).__name__}: {error}",
        extended_info={"exception_type": type(error).__name__},
        error=True,
    )


class AuditOrchestrator:
    """Оркестратор одного прогона аудита."""

    def __init__(self, settings: Optional[AuditSettings] = None, strict: bool = False):
        """
        Args:
            settings: Настройки аудита
            strict: Пробрасывать дефекты аудитов вместо error-результата
        """
        self.settings = settings or get_settings()
        self.strict = strict

    def _runners(self, definitions: Iterable[AuditDefinition]) -> List[AuditRunner]:
        runners = [AuditRunner(d, self.settings) for d in definitions]
        ids = [r.name for r in runners]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate audit ids: {ids}")
        return runners

    async def run_audits_parallel(
        self,
        runners: List[AuditRunner],
        cache: ArtifactCache,
    ) -> Dict[str, AuditResult]:
        """
        Запустить аудиты параллельно.

        Каждый аудит выполняется в отдельном потоке; общие артефакты
        вычисляются один раз благодаря ArtifactCache.
        """
        if not runners:
            return {}

        logger.info(f"Running {len(runners)} audits in parallel...")

        tasks = [asyncio.to_thread(runner.run, cache) for runner in runners]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        processed: Dict[str, AuditResult] = {}
        for runner, result in zip(runners, results):
            if isinstance(result, BaseException):
                if self.strict or not isinstance(result, Exception):
                    raise result
                logger.error(f"Audit {runner.name} failed: {result}")
                processed[runner.name] = _error_result(result)
            else:
                processed[runner.name] = result

        return processed

    async def run_audits_sequential(
        self,
        runners: List[AuditRunner],
        cache: ArtifactCache,
    ) -> Dict[str, AuditResult]:
        """Запустить аудиты последовательно."""
        if not runners:
            return {}

        logger.info(f"Running {len(runners)} audits sequentially...")

        processed: Dict[str, AuditResult] = {}
        for i, runner in enumerate(runners, 1):
            logger.info(f"[{i}/{len(runners)}] Running {runner.name}...")
            try:
                processed[runner.name] = runner.run(cache)
            except Exception as e:
                if self.strict:
                    raise
                logger.error(f"Audit {runner.name} failed: {e}")
                processed[runner.name] = _error_result(e)

            status = "PASSED" if processed[runner.name].passed else "FAILED"
            logger.info(f"  {status}")

        return processed

    async def run(
        self,
        snapshot: PageSnapshot,
        definitions: Optional[Iterable[AuditDefinition]] = None,
        parallel: Optional[bool] = None,
    ) -> Dict[str, AuditResult]:
        """
        Прогнать аудиты над snapshot.

        Args:
            snapshot: Данные gatherer'а
            definitions: Аудиты (по умолчанию DEFAULT_AUDITS)
            parallel: Параллельно или последовательно (по умолчанию из настроек)

        Returns:
            Словарь audit id -> AuditResult в порядке definitions
        """
        if parallel is None:
            parallel = self.settings.parallel_execution

        runners = self._runners(definitions if definitions is not None else DEFAULT_AUDITS)
        cache = ArtifactCache(snapshot.as_artifacts(), settings=self.settings)

        if parallel:
            results = await self.run_audits_parallel(runners, cache)
        else:
            results = await self.run_audits_sequential(runners, cache)

        failed = [name for name, r in results.items() if not r.passed]
        logger.info(f"Audit run complete: {len(results) - len(failed)}/{len(results)} passed")
        if failed:
            logger.info(f"  Failed: {', '.join(failed)}")
        return results


# Convenience function
def run_audits(
    snapshot: PageSnapshot,
    settings: Optional[AuditSettings] = None,
    definitions: Optional[Iterable[AuditDefinition]] = None,
    parallel: Optional[bool] = None,
) -> Dict[str, AuditResult]:
    """
    Синхронная обёртка для запуска аудита без своего event loop.

    Returns:
        Словарь audit id -> AuditResult
    """
    orchestrator = AuditOrchestrator(settings)
    return asyncio.run(orchestrator.run(snapshot, definitions=definitions, parallel=parallel))
