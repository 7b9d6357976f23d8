"""
Core data models for the audit pipeline.

Raw gathered inputs (network records, trace events, service worker versions)
are pydantic models: they arrive as gatherer JSON and are validated once.
Derived artifacts and results are plain dataclasses owned by a single run.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Generic, List, Optional, Protocol, Tuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MalformedInput


T = TypeVar("T")

# Resource types that DevTools reports as textual.
TEXT_RESOURCE_TYPES = frozenset({
    "Document",
    "Stylesheet",
    "Script",
    "XHR",
    "Fetch",
    "EventSource",
    "Manifest",
    "TextTrack",
})


# ═══════════════════════════════════════════════════════
# Raw gathered inputs
# ═══════════════════════════════════════════════════════

class ResponseHeader(BaseModel):
    """HTTP заголовок ответа."""
    model_config = ConfigDict(frozen=True)

    name: str
    value: str = ""


class RawNetworkRecord(BaseModel):
    """Сетевой запрос, записанный gatherer'ом."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    url: str
    mime_type: str = Field("", alias="mimeType")
    resource_type: str = Field("Other", alias="resourceType")
    is_text_type: Optional[bool] = Field(None, alias="isTextType")
    resource_size: int = Field(0, alias="resourceSize")
    response_headers: List[ResponseHeader] = Field(default_factory=list, alias="responseHeaders")
    protocol: str = ""

    @property
    def is_text(self) -> bool:
        """Текстовый ли ресурс (явный флаг gatherer'а или тип ресурса)."""
        if self.is_text_type is not None:
            return self.is_text_type
        return self.resource_type in TEXT_RESOURCE_TYPES

    def header_values(self, name: str) -> List[str]:
        """Все значения заголовка (имя сравнивается без учёта регистра)."""
        name = name.lower()
        return [h.value for h in self.response_headers if h.name.lower() == name]


class TraceEvent(BaseModel):
    """Событие performance trace."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    category: str = Field("", alias="cat")
    name: str
    timestamp: float = Field(0, alias="ts")
    process_id: int = Field(0, alias="pid")
    thread_id: int = Field(0, alias="tid")
    phase: str = Field("", alias="ph")
    args: Dict[str, Any] = Field(default_factory=dict)

    @property
    def categories(self) -> List[str]:
        return [c.strip() for c in self.category.split(",") if c.strip()]

    @property
    def frame_id(self) -> Optional[str]:
        """
        Идентификатор фрейма события.

        User timing события хранят его в args.frame, маркер
        TracingStartedInPage в args.data.page.
        """
        frame = self.args.get("frame")
        if frame is not None:
            return frame
        data = self.args.get("data")
        if isinstance(data, dict):
            return data.get("page")
        return None


class ServiceWorkerVersion(BaseModel):
    """Версия service worker, зарегистрированная страницей."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    status: str
    script_url: str = Field(alias="scriptURL")


class SnapshotPayload(BaseModel):
    """JSON gatherer'а целиком (без manifest, он разбирается внешним парсером)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    final_url: str = Field(alias="finalUrl")
    network_records: List[RawNetworkRecord] = Field(default_factory=list, alias="networkRecords")
    trace_events: List[TraceEvent] = Field(default_factory=list, alias="traceEvents")
    theme_color: Optional[str] = Field(None, alias="themeColor")
    service_worker_versions: List[ServiceWorkerVersion] = Field(default_factory=list, alias="serviceWorkerVersions")
    # байт/сек
    network_throughput: Optional[float] = Field(None, alias="networkThroughput", ge=0)


# ═══════════════════════════════════════════════════════
# Manifest tree
# ═══════════════════════════════════════════════════════

@dataclass(frozen=True)
class ManifestNode(Generic[T]):
    """
    Значение поля manifest вместе с диагностикой.

    value is None означает, что поле отсутствует или не разобралось;
    debug_string объясняет почему. Доступ к полю никогда не бросает.
    """

    value: Optional[T] = None
    raw: Any = None
    debug_string: Optional[str] = None

    @property
    def present(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class ManifestIcon:
    """Иконка из manifest.icons."""

    src: ManifestNode[str] = field(default_factory=ManifestNode)
    sizes: ManifestNode[List[str]] = field(default_factory=ManifestNode)
    type: ManifestNode[str] = field(default_factory=ManifestNode)


@dataclass(frozen=True)
class Manifest:
    """Разобранный Web App Manifest (только поля, которые проверяются)."""

    name: ManifestNode[str] = field(default_factory=ManifestNode)
    short_name: ManifestNode[str] = field(default_factory=ManifestNode)
    start_url: ManifestNode[str] = field(default_factory=ManifestNode)
    display: ManifestNode[str] = field(default_factory=ManifestNode)
    theme_color: ManifestNode[str] = field(default_factory=ManifestNode)
    background_color: ManifestNode[str] = field(default_factory=ManifestNode)
    icons: ManifestNode[List[ManifestNode[ManifestIcon]]] = field(default_factory=ManifestNode)


class ManifestParser(Protocol):
    """Внешний парсер manifest: сырой текст -> дерево ManifestNode."""

    def __call__(self, raw: str, manifest_url: str, document_url: str) -> ManifestNode[Manifest]:
        ...


# ═══════════════════════════════════════════════════════
# Derived artifacts
# ═══════════════════════════════════════════════════════

@dataclass(frozen=True)
class CompressionCandidate:
    """Текстовый ответ без content-encoding и его оценочный сжатый размер."""

    url: str
    mime_type: str
    resource_size: int
    estimated_compressed_size: float


@dataclass(frozen=True)
class PageTimeline:
    """Ключевые события одной загрузки страницы."""

    ordered_frame_events: Tuple[TraceEvent, ...]
    frame_start_event: TraceEvent
    navigation_start_event: TraceEvent
    first_contentful_paint_event: TraceEvent

    @property
    def first_contentful_paint_ms(self) -> float:
        """FCP относительно выбранного navigationStart, в миллисекундах."""
        delta = self.first_contentful_paint_event.timestamp - self.navigation_start_event.timestamp
        return delta / 1000


@dataclass(frozen=True)
class ChecklistItem:
    """
    Одно требование чеклиста.

    predicate должен быть чистой функцией subject -> bool.
    explain (опционально) уточняет причину провала, например
    "поле отсутствует" против "поле есть, но невалидно".
    """

    id: str
    user_text: str
    groups: FrozenSet[str]
    predicate: Callable[[Any], bool] = field(compare=False)
    explain: Optional[Callable[[Any], Optional[str]]] = field(default=None, compare=False)


@dataclass(frozen=True)
class ChecklistResult:
    """Результат проверки одного ChecklistItem в конкретном прогоне."""

    id: str
    user_text: str
    groups: FrozenSet[str]
    passing: bool
    reason: Optional[str] = None

    @property
    def message(self) -> str:
        if self.reason:
            return f"{self.user_text} ({self.reason})"
        return self.user_text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_text": self.user_text,
            "groups": sorted(self.groups),
            "passing": self.passing,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class ChecklistReport:
    """Упорядоченные результаты одного прогона чеклиста."""

    results: Tuple[ChecklistResult, ...]
    short_circuited: bool = False

    @property
    def all_passing(self) -> bool:
        return not self.short_circuited and all(r.passing for r in self.results)

    def select(self, *groups: str) -> List[ChecklistResult]:
        """Результаты, входящие хотя бы в одну из групп (порядок сохраняется)."""
        wanted = set(groups)
        return [r for r in self.results if r.groups & wanted]

    def failures(self, *groups: str) -> List[ChecklistResult]:
        selected = self.select(*groups) if groups else list(self.results)
        return [r for r in selected if not r.passing]

    def find(self, item_id: str) -> Optional[ChecklistResult]:
        for result in self.results:
            if result.id == item_id:
                return result
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "short_circuited": self.short_circuited,
        }


@dataclass(frozen=True)
class ManifestValues:
    """Computed artifact с результатами чеклиста manifest."""

    is_parse_failure: bool
    parse_failure_reason: Optional[str]
    all_checks: ChecklistReport

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_parse_failure": self.is_parse_failure,
            "parse_failure_reason": self.parse_failure_reason,
            "all_checks": self.all_checks.to_dict(),
        }


@dataclass(frozen=True)
class ByteSavings:
    """Оценка экономии для одного ресурса."""

    url: str
    total_bytes: int
    wasted_bytes: float
    wasted_percent: float
    potential_savings: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "total_bytes": self.total_bytes,
            "wasted_bytes": self.wasted_bytes,
            "wasted_percent": self.wasted_percent,
            "potential_savings": self.potential_savings,
        }


@dataclass(frozen=True)
class SavingsSummary:
    """Агрегат экономии по странице."""

    results: Tuple[ByteSavings, ...]
    total_wasted_bytes: float
    passes: bool
    wasted_ms: Optional[float] = None


# ═══════════════════════════════════════════════════════
# Results
# ═══════════════════════════════════════════════════════

@dataclass
class AuditResult:
    """Единый результат любого аудита."""

    raw_value: Union[bool, float]
    debug_string: Optional[str] = None
    extended_info: Dict[str, Any] = field(default_factory=dict)
    display_value: Optional[str] = None
    score: Optional[float] = None
    error: bool = False

    @property
    def passed(self) -> bool:
        if isinstance(self.raw_value, bool):
            return self.raw_value
        if self.score is not None:
            return self.score >= 1.0
        return not self.error

    def to_dict(self) -> Dict[str, Any]:
        """Преобразовать в словарь для JSON."""
        return {
            "raw_value": self.raw_value,
            "debug_string": self.debug_string,
            "extended_info": self.extended_info,
            "display_value": self.display_value,
            "score": self.score,
            "error": self.error,
        }


# ═══════════════════════════════════════════════════════
# Snapshot
# ═══════════════════════════════════════════════════════

@dataclass
class PageSnapshot:
    """Всё, что gatherer собрал за один прогон страницы."""

    final_url: str
    network_records: List[RawNetworkRecord] = field(default_factory=list)
    trace_events: List[TraceEvent] = field(default_factory=list)
    manifest: Optional[ManifestNode[Manifest]] = None
    theme_color: Optional[str] = None
    service_worker_versions: List[ServiceWorkerVersion] = field(default_factory=list)
    network_throughput: Optional[float] = None

    @classmethod
    def from_dict(
        cls,
        payload: Dict[str, Any],
        manifest: Optional[ManifestNode[Manifest]] = None,
    ) -> "PageSnapshot":
        """
        Собрать snapshot из JSON gatherer'а.

        Manifest передаётся уже разобранным внешним парсером.

        Args:
            payload: Словарь с ключами finalUrl, networkRecords, traceEvents,
                themeColor, serviceWorkerVersions, networkThroughput
            manifest: Результат ManifestParser или None

        Raises:
            MalformedInput: payload не проходит валидацию SnapshotPayload
        """
        try:
            parsed = SnapshotPayload.model_validate(payload)
        except ValidationError as e:
            raise MalformedInput(f"Invalid gatherer payload: {e}") from e

        return cls(
            final_url=parsed.final_url,
            network_records=parsed.network_records,
            trace_events=parsed.trace_events,
            manifest=manifest,
            theme_color=parsed.theme_color,
            service_worker_versions=parsed.service_worker_versions,
            network_throughput=parsed.network_throughput,
        )

    def as_artifacts(self) -> Dict[str, Any]:
        """Сырые артефакты по именам, которые объявляют аудиты."""
        artifacts: Dict[str, Any] = {
            "URL": self.final_url,
            "NetworkRecords": self.network_records,
            "Trace": self.trace_events,
            "Manifest": self.manifest,
            "ThemeColor": self.theme_color,
            "ServiceWorker": self.service_worker_versions,
        }
        if self.network_throughput is not None:
            artifacts["NetworkThroughput"] = self.network_throughput
        return artifacts
