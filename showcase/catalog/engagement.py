"""Best-effort engagement tracking and outward call-to-action links.

Tracking is dispatched and never awaited by the caller. A failed write is
rolled back, noted in the structured log when the log itself is writable,
and dropped: there is no retry and no queue. Navigation built by
:func:`dispatch_cta` is returned whatever the tracking outcome.
"""
from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from enum import Enum
from typing import Callable
from urllib.parse import quote

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..logging_service import log_manager
from .domain import Catalog, EngagementKind
from .services import increment_counter

EngagementSink = Callable[[str, EngagementKind], None]

# characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


class CtaAction(str, Enum):
    CALL = "call"
    WHATSAPP = "whatsapp"
    DIRECTIONS = "directions"


CTA_COUNTERS = {
    CtaAction.CALL: EngagementKind.CALL_CLICKS,
    CtaAction.WHATSAPP: EngagementKind.WHATSAPP_CLICKS,
    CtaAction.DIRECTIONS: EngagementKind.DIRECTION_CLICKS,
}

CTA_LABELS = {
    CtaAction.CALL: "Call",
    CtaAction.WHATSAPP: "WhatsApp",
    CtaAction.DIRECTIONS: "Directions",
}


@dataclass(frozen=True)
class Cta:
    """An outward navigation target and the counter it increments."""

    action: CtaAction
    kind: EngagementKind
    href: str

    @property
    def label(self) -> str:
        return CTA_LABELS[self.action]


def phone_uri(phone_number: str) -> str:
    return f"tel:{phone_number}"


def whatsapp_uri(whatsapp_number: str) -> str:
    return f"https://wa.me/{whatsapp_number}"


def maps_uri(address: str) -> str:
    return f"https://maps.google.com/?q={quote(address, safe=_URI_COMPONENT_SAFE)}"


def build_cta(catalog: Catalog, action: CtaAction | str) -> Cta | None:
    """Return the CTA for ``action`` or None when the catalog lacks the contact."""

    action = CtaAction(action)
    if action is CtaAction.CALL:
        href = phone_uri(catalog.phone_number) if catalog.phone_number else None
    elif action is CtaAction.WHATSAPP:
        href = whatsapp_uri(catalog.whatsapp_number) if catalog.whatsapp_number else None
    else:
        href = maps_uri(catalog.address) if catalog.address else None

    if href is None:
        return None
    return Cta(action=action, kind=CTA_COUNTERS[action], href=href)


def available_ctas(catalog: Catalog) -> list[Cta]:
    """Return the CTAs the catalog has contact details for, in display order."""

    ctas = (build_cta(catalog, action) for action in CtaAction)
    return [cta for cta in ctas if cta is not None]


class EngagementTracker:
    """Dispatch counter increments without blocking the caller."""

    def __init__(self, sink: EngagementSink | None = None) -> None:
        self.app = None
        self._sink = sink
        self._executor: ThreadPoolExecutor | None = None
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def init_app(self, app) -> None:
        """Attach the tracker to the Flask app and size its worker pool."""

        self.shutdown(wait=False)
        self.app = app
        workers = int(app.config.get("ENGAGEMENT_WORKERS", 0))
        if workers > 0:
            self._executor = ThreadPoolExecutor(
                max_workers=workers, thread_name_prefix="showcase-engagement"
            )
        app.extensions["showcase_engagement"] = self

    def shutdown(self, *, wait: bool = True) -> None:
        """Stop the worker pool; later events run inline."""

        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def use_sink(self, sink: EngagementSink | None) -> None:
        """Replace the write function; None restores the database counter."""

        self._sink = sink

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def record_event(self, catalog_id: str, kind: EngagementKind | str) -> Future | None:
        """Dispatch one increment. Never raises and never waits for the write."""

        try:
            kind = EngagementKind(kind)
        except ValueError:
            return None

        if self._executor is None:
            self._write(catalog_id, kind)
            return None

        try:
            future = self._executor.submit(self._write_in_context, catalog_id, kind)
        except RuntimeError:
            # pool already shut down
            return None

        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def drain(self, timeout: float | None = None) -> bool:
        """Wait for dispatched writes; returns True when none remain."""

        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _write_in_context(self, catalog_id: str, kind: EngagementKind) -> None:
        with self.app.app_context():
            self._write(catalog_id, kind)

    def _write(self, catalog_id: str, kind: EngagementKind) -> None:
        sink = self._sink or increment_counter
        try:
            sink(catalog_id, kind)
        except Exception as exc:  # noqa: BLE001 - tracking failures never reach visitors
            db.session.rollback()
            self._report_failure(catalog_id, kind, exc)

    def _report_failure(self, catalog_id: str, kind: EngagementKind, exc: Exception) -> None:
        try:
            log_manager.record(
                component="Engagement",
                action="track",
                level="warn",
                result="dropped",
                title="Engagement event dropped",
                user_summary=f"A {kind.value} event could not be recorded and was discarded.",
                technical_details=(
                    f"engagement.record_event catalog={catalog_id} kind={kind.value}"
                    f" raised {exc.__class__.__name__}: {exc}"
                ),
            )
        except SQLAlchemyError:
            db.session.rollback()


def dispatch_cta(
    catalog: Catalog, action: CtaAction | str, tracker: EngagementTracker
) -> Cta | None:
    """Record one click for ``action`` and return where to navigate."""

    cta = build_cta(catalog, action)
    if cta is None:
        return None
    tracker.record_event(catalog.id, cta.kind)
    return cta


tracker = EngagementTracker()
