"""User-facing texts for programming notifications and alerts."""

from __future__ import annotations

from cargo_alerts.domain.entities import ScheduledItem

from .classifier import parse_scheduled_date


def _describe(item: ScheduledItem) -> str:
    return f"{item.service or 'Servicio'} ({item.reference or 'Sin referencia'})"


def _format_date(item: ScheduledItem) -> str:
    try:
        day = parse_scheduled_date(item.scheduled_date)
    except ValueError:
        day = None
    return day.strftime("%d/%m/%Y") if day else "Sin fecha"


def past_notification(item: ScheduledItem) -> tuple[str, str]:
    return (
        "Servicio no programado (vencido)",
        f"{_describe(item)} programado para {_format_date(item)} - "
        f"{item.display_time} venció sin asignar.",
    )


def today_overdue_notification(item: ScheduledItem) -> tuple[str, str]:
    return (
        "Servicio no programado a tiempo (hoy)",
        f"{_describe(item)} programado para hoy a las {item.display_time} ya pasó.",
    )


def today_overdue_alert(item: ScheduledItem) -> tuple[str, str]:
    return (
        "Servicio no programado a tiempo",
        f"El servicio {_describe(item)} programado para hoy a las "
        f"{item.display_time} ya pasó.",
    )


def today_pending_notification(item: ScheduledItem) -> tuple[str, str]:
    return (
        "Servicio pendiente para hoy",
        f"{_describe(item)} debe ser programado para hoy a las {item.display_time}.",
    )


def today_pending_alert(item: ScheduledItem) -> tuple[str, str]:
    return (
        "Alerta de programación pendiente",
        f"El servicio {_describe(item)} debe ser programado para hoy a las "
        f"{item.display_time}.",
    )


def imminent_alert(item: ScheduledItem, minutes_until_start: float) -> tuple[str, str]:
    minutes = max(0, round(minutes_until_start))
    suffix = "" if minutes == 1 else "s"
    return (
        "¡Servicio a punto de comenzar!",
        f"{_describe(item)} programado para las {item.display_time} "
        f"comenzará en {minutes} minuto{suffix}.",
    )


def past_summary(count: int) -> tuple[str, str]:
    return (
        "Programaciones vencidas",
        f"Hay {count} servicios de días anteriores sin asignar.",
    )


def today_summary(overdue: int, pending: int) -> tuple[str, str]:
    return (
        "Programaciones para hoy",
        f"Hay {overdue} servicios vencidos y {pending} pendientes para hoy.",
    )


def future_summary(count: int) -> tuple[str, str]:
    return (
        "Próximas programaciones",
        f"Hay {count} servicios para programar en días futuros.",
    )
