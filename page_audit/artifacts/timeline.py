"""
Reconstruct one page load from an unordered performance trace.

A browser trace can span several tabs and processes and several navigations.
The frame of record is the one named by the first TracingStartedInPage
marker; milestones are taken from that frame only.
"""

import logging
from typing import Iterable, List, Optional

from ..core.errors import MissingPrerequisite
from ..core.models import PageTimeline, TraceEvent


logger = logging.getLogger(__name__)

USER_TIMING_CATEGORY = "blink.user_timing"
TRACING_STARTED_IN_PAGE = "TracingStartedInPage"
NAVIGATION_START = "navigationStart"
FIRST_CONTENTFUL_PAINT = "firstContentfulPaint"


def _by_timestamp(events: Iterable[TraceEvent]) -> List[TraceEvent]:
    # sorted() is stable: equal timestamps keep discovery order
    return sorted(events, key=lambda e: e.timestamp)


def is_key_event(event: TraceEvent) -> bool:
    return USER_TIMING_CATEGORY in event.categories or event.name == TRACING_STARTED_IN_PAGE


def reconstruct_timeline(trace_events: Iterable[TraceEvent]) -> PageTimeline:
    """
    Построить PageTimeline для одной загрузки страницы.

    Args:
        trace_events: Все события trace в произвольном порядке

    Returns:
        PageTimeline

    Raises:
        MissingPrerequisite: нет маркера TracingStartedInPage, нет
            firstContentfulPaint или нет navigationStart перед ним
    """
    trace_events = list(trace_events)
    key_events = _by_timestamp(e for e in trace_events if is_key_event(e))

    # Первый маркер определяет renderer и фрейм; он может прийти чуть позже navigationStart
    frame_start = next((e for e in key_events if e.name == TRACING_STARTED_IN_PAGE), None)
    if frame_start is None:
        raise MissingPrerequisite(f"No {TRACING_STARTED_IN_PAGE} event found in trace")

    frame_id = frame_start.frame_id
    frame_events = [e for e in key_events if e.frame_id == frame_id]

    first_fcp: Optional[TraceEvent] = next(
        (e for e in frame_events if e.name == FIRST_CONTENTFUL_PAINT), None
    )
    if first_fcp is None:
        raise MissingPrerequisite(f"No {FIRST_CONTENTFUL_PAINT} event found in trace for frame {frame_id}")

    # Последний navigationStart строго до FCP
    navigation_starts = [
        e for e in frame_events
        if e.name == NAVIGATION_START and e.timestamp < first_fcp.timestamp
    ]
    if not navigation_starts:
        raise MissingPrerequisite(
            f"No {NAVIGATION_START} event found before {FIRST_CONTENTFUL_PAINT} for frame {frame_id}"
        )

    # Все события процесса (включая не-main потоки)
    process_events = _by_timestamp(e for e in trace_events if e.process_id == frame_start.process_id)

    logger.debug(
        f"Timeline for frame {frame_id}: {len(frame_events)} key events, "
        f"{len(process_events)} process events, "
        f"{len(navigation_starts)} navigationStart candidates"
    )

    return PageTimeline(
        ordered_frame_events=tuple(process_events),
        frame_start_event=frame_start,
        navigation_start_event=navigation_starts[-1],
        first_contentful_paint_event=first_fcp,
    )
