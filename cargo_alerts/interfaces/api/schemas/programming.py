"""Pydantic models describing programming check results."""

from __future__ import annotations

from pydantic import BaseModel, Field

from cargo_alerts.domain.entities import TickReport


class TickReportRead(BaseModel):
    """Outcome of one programming check."""

    past: int = 0
    today_overdue: int = 0
    today_pending: int = 0
    future: int = 0
    overdue_count: int = 0
    emitted_keys: list[str] = Field(default_factory=list)
    imminent_keys: list[str] = Field(default_factory=list)
    summary_keys: list[str] = Field(default_factory=list)
    deferred: int = 0

    @classmethod
    def from_report(cls, report: TickReport) -> "TickReportRead":
        return cls(
            past=report.past,
            today_overdue=report.today_overdue,
            today_pending=report.today_pending,
            future=report.future,
            overdue_count=report.overdue_count,
            emitted_keys=list(report.emitted_keys),
            imminent_keys=list(report.imminent_keys),
            summary_keys=list(report.summary_keys),
            deferred=report.deferred,
        )


class ProgrammingCheckResponse(BaseModel):
    """Result of a forced check; ``report`` is empty when nothing ran."""

    executed: bool
    report: TickReportRead | None = None

    @classmethod
    def from_report(cls, report: TickReport | None) -> "ProgrammingCheckResponse":
        if report is None:
            return cls(executed=False)
        return cls(executed=True, report=TickReportRead.from_report(report))


class ProgrammingRefreshResponse(BaseModel):
    items: int


__all__ = [
    "TickReportRead",
    "ProgrammingCheckResponse",
    "ProgrammingRefreshResponse",
]
