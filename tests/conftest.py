"""
Pytest configuration and fixtures.

Использование:
    pytest tests/ -v
"""

import copy
import json
from typing import Any, Dict, Optional

import pytest

from page_audit.config import AuditSettings
from page_audit.core.models import (
    Manifest,
    ManifestIcon,
    ManifestNode,
    ManifestParser,
    PageSnapshot,
    RawNetworkRecord,
    ServiceWorkerVersion,
    TraceEvent,
)


EXAMPLE_DOC_URL = "https://example.com/index.html"

EXAMPLE_MANIFEST = {
    "name": "Airhorner: Super Simple Airhorn",
    "short_name": "Airhorner",
    "start_url": "/?homescreen=1",
    "display": "standalone",
    "theme_color": "#2196F3",
    "background_color": "#2196F3",
    "icons": [
        {"src": "/images/touch/homescreen48.png", "sizes": "48x48", "type": "image/png"},
        {"src": "/images/touch/homescreen144.png", "sizes": "144x144", "type": "image/png"},
        {"src": "/images/touch/homescreen192.png", "sizes": "192x192", "type": "image/png"},
        {"src": "/images/touch/homescreen512.png", "sizes": "512x512", "type": "image/png"},
    ],
}


# ═══════════════════════════════════════════════════════
# MANIFEST
# ═══════════════════════════════════════════════════════

def _string_node(data: Dict[str, Any], key: str) -> ManifestNode:
    raw = data.get(key)
    if raw is None:
        return ManifestNode()
    if not isinstance(raw, str):
        return ManifestNode(raw=raw, debug_string=f"ERROR: expected a string for {key}")
    return ManifestNode(value=raw.strip(), raw=raw)


def _icon_node(raw: Any) -> ManifestNode:
    if not isinstance(raw, dict):
        return ManifestNode(raw=raw, debug_string="ERROR: icon is not an object")
    sizes_raw = raw.get("sizes")
    sizes = ManifestNode()
    if isinstance(sizes_raw, str) and sizes_raw.strip():
        sizes = ManifestNode(value=sizes_raw.split(), raw=sizes_raw)
    icon = ManifestIcon(
        src=_string_node(raw, "src"),
        sizes=sizes,
        type=_string_node(raw, "type"),
    )
    return ManifestNode(value=icon, raw=raw)


def parse_manifest(raw: str, manifest_url: str = "https://example.com/manifest.json",
                   document_url: str = EXAMPLE_DOC_URL) -> ManifestNode:
    """Упрощённая замена внешнего парсера manifest для тестов."""
    try:
        data = json.loads(raw)
    except ValueError as e:
        return ManifestNode(raw=raw, debug_string=f"ERROR: file isn't valid JSON: {e}")
    if not isinstance(data, dict):
        return ManifestNode(raw=raw, debug_string="ERROR: manifest is not an object")

    icons = ManifestNode()
    if isinstance(data.get("icons"), list):
        icons = ManifestNode(value=[_icon_node(i) for i in data["icons"]], raw=data["icons"])

    manifest = Manifest(
        name=_string_node(data, "name"),
        short_name=_string_node(data, "short_name"),
        start_url=_string_node(data, "start_url"),
        display=_string_node(data, "display"),
        theme_color=_string_node(data, "theme_color"),
        background_color=_string_node(data, "background_color"),
        icons=icons,
    )
    return ManifestNode(value=manifest, raw=raw)


@pytest.fixture(scope="session")
def settings():
    """Настройки по умолчанию, без .env."""
    return AuditSettings(_env_file=None)


@pytest.fixture
def manifest_from():
    """Фабрика: dict -> ManifestNode[Manifest]."""
    def factory(data: Dict[str, Any]) -> ManifestNode:
        return parse_manifest(json.dumps(data))
    return factory


@pytest.fixture
def manifest_parser() -> ManifestParser:
    return parse_manifest


@pytest.fixture
def example_manifest_data() -> Dict[str, Any]:
    """Копия EXAMPLE_MANIFEST, которую тест может менять."""
    return copy.deepcopy(EXAMPLE_MANIFEST)


@pytest.fixture
def example_manifest(manifest_from):
    return manifest_from(EXAMPLE_MANIFEST)


# ═══════════════════════════════════════════════════════
# TRACE
# ═══════════════════════════════════════════════════════

@pytest.fixture
def trace_event():
    """Фабрика событий trace."""
    def factory(name: str, ts: float, frame: Optional[str] = "frame-1", pid: int = 1,
                cat: str = "blink.user_timing", tid: int = 1) -> TraceEvent:
        args: Dict[str, Any] = {}
        if name == "TracingStartedInPage":
            args = {"data": {"page": frame}}
            cat = "disabled-by-default-devtools.timeline"
        elif frame is not None:
            args = {"frame": frame}
        return TraceEvent(cat=cat, name=name, ts=ts, pid=pid, tid=tid, ph="R", args=args)
    return factory


@pytest.fixture
def page_load_trace(trace_event):
    """Trace одной загрузки: маркер, два navigationStart, FCP и шум."""
    return [
        trace_event("firstContentfulPaint", 1_500_000),
        trace_event("navigationStart", 1_000_000),
        trace_event("TracingStartedInPage", 1_000_100),
        trace_event("navigationStart", 900_000),
        trace_event("ParseHTML", 1_200_000, frame=None, cat="devtools.timeline", tid=2),
        trace_event("navigationStart", 1_000_000, frame="frame-2", pid=2),
        trace_event("firstContentfulPaint", 1_100_000, frame="frame-2", pid=2),
    ]


# ═══════════════════════════════════════════════════════
# NETWORK / SNAPSHOT
# ═══════════════════════════════════════════════════════

@pytest.fixture
def network_record():
    """Фабрика сетевых записей."""
    def factory(url: str, size: int, mime_type: str = "text/javascript",
                resource_type: str = "Script", encoding: Optional[str] = None) -> RawNetworkRecord:
        headers = [{"name": "Content-Type", "value": mime_type}]
        if encoding is not None:
            headers.append({"name": "Content-Encoding", "value": encoding})
        return RawNetworkRecord.model_validate({
            "url": url,
            "mimeType": mime_type,
            "resourceType": resource_type,
            "resourceSize": size,
            "responseHeaders": headers,
            "protocol": "h2",
        })
    return factory


@pytest.fixture
def activated_sw():
    return ServiceWorkerVersion(status="activated", scriptURL="https://example.com/sw.js")


@pytest.fixture
def snapshot(example_manifest, page_load_trace, network_record, activated_sw):
    """Полный snapshot страницы, которая проходит PWA аудиты."""
    return PageSnapshot(
        final_url="https://example.com/",
        network_records=[
            network_record("https://example.com/app.js", 300_000),
            network_record("https://example.com/style.css", 20_000, "text/css", "Stylesheet", encoding="gzip"),
            network_record("https://example.com/logo.png", 50_000, "image/png", "Image"),
        ],
        trace_events=page_load_trace,
        manifest=example_manifest,
        theme_color="#2196F3",
        service_worker_versions=[activated_sw],
        network_throughput=200_000,
    )
