from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from linepipe.common.time import getNowIso
from linepipe.domain.errors import PipelineError


@dataclass
class ReportMeta:
    """
    Назначение:
        Метаданные запуска команды.
    """

    run_id: str
    command: str
    started_at: str
    source: str | None = None
    finished_at: str | None = None
    duration_ms: int | None = None


@dataclass
class ReportEnvelope:
    status: str
    meta: ReportMeta
    values_count: int
    error: dict[str, Any] | None
    context: dict[str, Any] = field(default_factory=dict)


class ReportCollector:
    """
    Назначение/ответственность:
        Сборщик отчёта одного запуска команды.
    """

    def __init__(self, run_id: str, command: str, started_at: str | None = None) -> None:
        self.meta = ReportMeta(run_id=run_id, command=command, started_at=started_at or getNowIso())
        self.values_count = 0
        self.error: PipelineError | None = None
        self.unexpected: BaseException | None = None
        self.context: dict[str, Any] = {}

    def set_context(self, name: str, value: dict[str, Any]) -> None:
        self.context[name] = value

    def set_source(self, source: str) -> None:
        self.meta.source = source

    def record_success(self, values_count: int) -> None:
        self.values_count = values_count
        self.error = None

    def record_failure(self, error: PipelineError) -> None:
        self.values_count = 0
        self.error = error

    def record_unexpected(self, exc: BaseException) -> None:
        """
        Назначение:
            Фиксирует неклассифицированное исключение, прервавшее команду.
        """
        self.values_count = 0
        self.unexpected = exc

    def finish(self, finished_at: str | None = None, duration_ms: int | None = None) -> None:
        self.meta.finished_at = finished_at or getNowIso()
        self.meta.duration_ms = duration_ms

    @property
    def status(self) -> str:
        return "failed" if self.error is not None or self.unexpected is not None else "ok"

    def build(self) -> ReportEnvelope:
        return ReportEnvelope(
            status=self.status,
            meta=self.meta,
            values_count=self.values_count,
            error=self._error_dict(),
            context=self.context,
        )

    def _error_dict(self) -> dict[str, Any] | None:
        if self.error is not None:
            return self.error.to_dict()
        if self.unexpected is not None:
            return {
                "kind": "UNEXPECTED_ERROR",
                "message": str(self.unexpected),
                "type": type(self.unexpected).__name__,
            }
        return None


def asdict_report(envelope: ReportEnvelope) -> dict[str, Any]:
    return {
        "status": envelope.status,
        "meta": asdict(envelope.meta),
        "values_count": envelope.values_count,
        "error": envelope.error,
        "context": envelope.context,
    }


__all__ = ["ReportCollector", "ReportEnvelope", "ReportMeta", "asdict_report"]
