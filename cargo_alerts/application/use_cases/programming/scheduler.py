"""Throttled control loop turning programming records into notifications."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Sequence
from datetime import datetime, tzinfo

from cargo_alerts.application.use_cases.notifications import NotificationStore
from cargo_alerts.config import Settings
from cargo_alerts.domain.entities import (
    BUCKET_PAST,
    BUCKET_TODAY_OVERDUE,
    BUCKET_TODAY_PENDING,
    NOTIFICATION_KIND_ERROR,
    NOTIFICATION_KIND_INFO,
    NOTIFICATION_KIND_WARNING,
    NOTIFIED_BUCKETS,
    ScheduledItem,
    TickReport,
)
from cargo_alerts.infrastructure.programming_source import ScheduledItemSource
from cargo_alerts.infrastructure.repositories import ProgrammingRegistryRepository
from cargo_alerts.utils import get_app_timezone, now_in_app_timezone

from . import messages
from .classifier import DEFAULT_IMMINENT_WINDOW_MINUTES, classify

logger = logging.getLogger(__name__)

DEFAULT_THROTTLE_SECONDS = 30
DEFAULT_MAX_NOTIFICATIONS_PER_TICK = 5
DEFAULT_CHECK_INTERVAL_SECONDS = 60

TODAY_PENDING_ALERT_PRIORITY = 5
IMMINENT_ALERT_PRIORITY = 10

PAST_SUMMARY_KEY = "programming-past-summary"
TODAY_SUMMARY_KEY = "programming-today-summary"
FUTURE_SUMMARY_KEY = "programming-future-summary"

Clock = Callable[[], datetime]


class AlertScheduler:
    """Classify programming records and emit each notification exactly once.

    A tick is accepted only when the source finished loading, holds at least
    one record and the throttle interval elapsed since the previous accepted
    tick. Per-bucket registries remember which items were already notified,
    so repeated ticks never emit twice for the same item and bucket.
    """

    def __init__(
        self,
        source: ScheduledItemSource,
        store: NotificationStore,
        registries: ProgrammingRegistryRepository,
        *,
        clock: Clock | None = None,
        tz: tzinfo | None = None,
        throttle_seconds: float = DEFAULT_THROTTLE_SECONDS,
        max_notifications_per_tick: int = DEFAULT_MAX_NOTIFICATIONS_PER_TICK,
        imminent_window_minutes: float = DEFAULT_IMMINENT_WINDOW_MINUTES,
        check_interval_seconds: float = DEFAULT_CHECK_INTERVAL_SECONDS,
    ) -> None:
        self.source = source
        self.store = store
        self.registries = registries
        self._clock = clock or now_in_app_timezone
        self._tz = tz or get_app_timezone()
        self.throttle_seconds = throttle_seconds
        self.max_notifications_per_tick = max_notifications_per_tick
        self.imminent_window_minutes = imminent_window_minutes
        self.check_interval_seconds = check_interval_seconds

        self._last_tick = 0.0
        self._overdue_count = 0
        self._timer_task: asyncio.Task[None] | None = None
        self._notified: dict[str, set[int | str]] = {}
        self._imminent_sent: set[int | str] = set()
        self._load_registries()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        source: ScheduledItemSource,
        store: NotificationStore,
        registries: ProgrammingRegistryRepository,
        clock: Clock | None = None,
    ) -> "AlertScheduler":
        return cls(
            source,
            store,
            registries,
            clock=clock,
            throttle_seconds=settings.throttle_seconds,
            max_notifications_per_tick=settings.max_notifications_per_tick,
            imminent_window_minutes=settings.imminent_window_minutes,
            check_interval_seconds=settings.check_interval_seconds,
        )

    @property
    def overdue_count(self) -> int:
        """Past plus today-overdue records seen by the last accepted tick."""

        return self._overdue_count

    @property
    def last_tick_timestamp(self) -> float:
        return self._last_tick

    @property
    def is_running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    def notified_ids(self, bucket: str) -> set[int | str]:
        return set(self._notified.get(bucket, ()))

    @property
    def imminent_sent_ids(self) -> set[int | str]:
        return set(self._imminent_sent)

    def maybe_tick(self) -> TickReport | None:
        """Run a tick if the source is ready and the throttle allows it."""

        if self.source.loading:
            logger.debug("Programación cargando; se omite la verificación")
            return None
        items = self.source.list_items()
        if not items:
            return None

        now = self._clock()
        timestamp = now.timestamp()
        if timestamp - self._last_tick < self.throttle_seconds:
            logger.debug("Omitiendo verificación de programación (throttling)")
            return None
        # Set before processing so an overlapping trigger is throttled.
        self._last_tick = timestamp
        return self.process(items, now)

    source_loaded = maybe_tick

    def check_now(self) -> TickReport | None:
        """Force an immediate tick, bypassing the throttle."""

        self._last_tick = 0.0
        return self.maybe_tick()

    def reset_notifications(self) -> None:
        """Forget every notified item so all records are evaluated again.

        Tombstones are kept: dismissed keys stay dismissed.
        """

        logger.info("Limpiando IDs de programación notificados")
        self._notified = {bucket: set() for bucket in NOTIFIED_BUCKETS}
        self._imminent_sent = set()
        self.registries.clear()

    def on_session_start(self) -> TickReport | None:
        """Reload persisted state after login and run a fresh check."""

        self.store.reload()
        self._load_registries()
        self._last_tick = 0.0
        return self.maybe_tick()

    def on_session_end(self) -> None:
        """Stop the periodic timer and reset the throttle after logout."""

        self._last_tick = 0.0
        self._overdue_count = 0
        if self._timer_task is not None:
            self._timer_task.cancel()
            self._timer_task = None

    def start(self) -> asyncio.Task[None]:
        """Start the periodic timer on the running event loop."""

        task = self._timer_task
        if task is None or task.done():
            task = asyncio.get_running_loop().create_task(self._run_timer())
            self._timer_task = task
        return task

    async def stop(self) -> None:
        task, self._timer_task = self._timer_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run_timer(self) -> None:
        refresh = getattr(self.source, "refresh", None)
        while True:
            await asyncio.sleep(self.check_interval_seconds)
            try:
                if refresh is not None:
                    await refresh()
                self.maybe_tick()
            except Exception:
                logger.exception("Error en la verificación periódica de programación")

    def process(self, items: Sequence[ScheduledItem], now: datetime) -> TickReport:
        """Classify ``items`` against ``now`` and emit pending notifications."""

        pending = classify(
            items,
            now,
            notified=self._notified,
            imminent_sent=self._imminent_sent,
            imminent_window_minutes=self.imminent_window_minutes,
            tz=self._tz,
        )
        snapshot = classify(items, now, imminent_window_minutes=0, tz=self._tz)
        report = TickReport(
            past=len(snapshot.past),
            today_overdue=len(snapshot.today_overdue),
            today_pending=len(snapshot.today_pending),
            future=len(snapshot.future),
        )
        logger.info(
            "Programación: %s de días anteriores, %s vencidos hoy, %s pendientes hoy, %s futuros",
            report.past,
            report.today_overdue,
            report.today_pending,
            report.future,
        )

        emitted = 0
        for bucket in NOTIFIED_BUCKETS:
            for item in pending.bucket(bucket):
                if emitted >= self.max_notifications_per_tick:
                    report.deferred += 1
                    continue
                key = f"{bucket}-{item.id}"
                if self.store.is_tombstoned(key):
                    continue
                try:
                    self._emit_for_bucket(bucket, item, key)
                except Exception:
                    logger.exception("No se pudo notificar la programación %s", item.id)
                    continue
                self._notified.setdefault(bucket, set()).add(item.id)
                report.emitted_keys.append(key)
                emitted += 1

        for imminent in pending.imminent:
            item = imminent.item
            key = f"imminent-{item.id}"
            if self.store.is_tombstoned(key):
                continue
            logger.info(
                "Servicio inminente: %s, faltan %.1f minutos",
                item.id,
                imminent.minutes_until_start,
            )
            title, message = messages.imminent_alert(item, imminent.minutes_until_start)
            try:
                self.store.add_alert(
                    title=title,
                    message=message,
                    kind=NOTIFICATION_KIND_WARNING,
                    dedup_key=key,
                    priority=IMMINENT_ALERT_PRIORITY,
                )
            except Exception:
                logger.exception("No se pudo crear la alerta inminente %s", key)
                continue
            self._imminent_sent.add(item.id)
            report.imminent_keys.append(key)

        report.summary_keys.extend(self._emit_summaries(pending))

        self.registries.save_notified(self._notified)
        self.registries.save_imminent_sent(self._imminent_sent)
        self._overdue_count = report.overdue_count
        if report.deferred:
            logger.info("%s notificaciones quedan para la siguiente verificación", report.deferred)
        return report

    def _emit_for_bucket(self, bucket: str, item: ScheduledItem, key: str) -> None:
        if bucket == BUCKET_PAST:
            title, message = messages.past_notification(item)
            self.store.add_notification(
                title=title, message=message, kind=NOTIFICATION_KIND_ERROR, dedup_key=key
            )
        elif bucket == BUCKET_TODAY_OVERDUE:
            title, message = messages.today_overdue_notification(item)
            self.store.add_notification(
                title=title, message=message, kind=NOTIFICATION_KIND_ERROR, dedup_key=key
            )
            title, message = messages.today_overdue_alert(item)
            self.store.add_alert(
                title=title,
                message=message,
                kind=NOTIFICATION_KIND_ERROR,
                dedup_key=f"alert-{key}",
            )
        elif bucket == BUCKET_TODAY_PENDING:
            title, message = messages.today_pending_notification(item)
            self.store.add_notification(
                title=title, message=message, kind=NOTIFICATION_KIND_WARNING, dedup_key=key
            )
            title, message = messages.today_pending_alert(item)
            self.store.add_alert(
                title=title,
                message=message,
                kind=NOTIFICATION_KIND_WARNING,
                dedup_key=f"alert-{key}",
                priority=TODAY_PENDING_ALERT_PRIORITY,
            )

    def _emit_summaries(self, pending) -> list[str]:
        candidates: list[tuple[str, str, tuple[str, str]]] = []
        if pending.past:
            candidates.append(
                (PAST_SUMMARY_KEY, NOTIFICATION_KIND_ERROR, messages.past_summary(len(pending.past)))
            )
        if pending.today_overdue or pending.today_pending:
            candidates.append(
                (
                    TODAY_SUMMARY_KEY,
                    NOTIFICATION_KIND_WARNING,
                    messages.today_summary(len(pending.today_overdue), len(pending.today_pending)),
                )
            )
        if pending.future:
            candidates.append(
                (FUTURE_SUMMARY_KEY, NOTIFICATION_KIND_INFO, messages.future_summary(len(pending.future)))
            )

        created: list[str] = []
        for key, kind, (title, message) in candidates:
            # Summaries are created once and never refreshed.
            if self.store.is_tombstoned(key) or self.store.has_notification(key):
                continue
            if self.store.add_notification(
                title=title, message=message, kind=kind, dedup_key=key
            ) is not None:
                created.append(key)
        return created

    def _load_registries(self) -> None:
        notified = self.registries.load_notified()
        self._notified = {bucket: set(notified.get(bucket, ())) for bucket in NOTIFIED_BUCKETS}
        self._imminent_sent = self.registries.load_imminent_sent()


__all__ = [
    "AlertScheduler",
    "PAST_SUMMARY_KEY",
    "TODAY_SUMMARY_KEY",
    "FUTURE_SUMMARY_KEY",
    "IMMINENT_ALERT_PRIORITY",
    "TODAY_PENDING_ALERT_PRIORITY",
]
