from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from linepipe.domain.errors import PipelineError

T = TypeVar("T")


@dataclass
class PipelineResult(Generic[T]):
    """
    Назначение:
        Итог одного прогона пайплайна: либо полный упорядоченный список значений,
        либо одна классифицированная ошибка.

    Инварианты/гарантии:
        - При error is not None список values пуст (частичных результатов нет).
    """

    values: list[T] = field(default_factory=list)
    error: PipelineError | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.values:
            raise ValueError("PipelineResult cannot carry values together with an error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, values: list[T]) -> "PipelineResult[T]":
        return cls(values=list(values), error=None)

    @classmethod
    def failure(cls, error: PipelineError) -> "PipelineResult[T]":
        return cls(values=[], error=error)

    def unwrap(self) -> list[T]:
        if self.error is not None:
            raise self.error
        return self.values


__all__ = ["PipelineResult"]
