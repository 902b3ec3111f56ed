from __future__ import annotations

import logging
from typing import Generic, TypeVar

from linepipe.domain.errors import PipelineError
from linepipe.domain.ports.sources import LineSourceOpener
from linepipe.domain.result import PipelineResult
from linepipe.domain.transform.transforms import LineTransform, apply_transform
from linepipe.infra.logging.setup import logEvent
from linepipe.infra.sources.line_source import DEFAULT_ENCODING, FileLineSource

T = TypeVar("T")

_NULL_LOGGER = logging.getLogger("linepipe.pipeline")
_NULL_LOGGER.addHandler(logging.NullHandler())


class LinePipeline(Generic[T]):
    """
    Назначение/ответственность:
        Последовательный проход по строкам файла: open -> next_line -> transform -> accumulate.

    Инварианты/гарантии:
        - Первая же ошибка прерывает прогон; накопленные значения отбрасываются.
        - Порядок значений совпадает с порядком строк в файле.
        - Дескриптор файла освобождается на любом пути выхода.
    """

    def __init__(
        self,
        transform: LineTransform[T] | None = None,
        encoding: str = DEFAULT_ENCODING,
        logger: logging.Logger | None = None,
        run_id: str = "-",
        open_source: LineSourceOpener = FileLineSource.open,
    ) -> None:
        self.transform = transform
        self.encoding = encoding
        self.logger = logger or _NULL_LOGGER
        self.run_id = run_id
        self.open_source = open_source

    def collect(self, path: str) -> list[T]:
        """
        Назначение:
            Строгий прогон: возвращает все значения или поднимает PipelineError.
        """
        transform_name = self.transform.name if self.transform is not None else "identity"
        logEvent(self.logger, logging.INFO, self.run_id, "pipeline", f"Open source path={path} transform={transform_name}")

        values: list = []
        with self.open_source(path, self.encoding) as source:
            line_no = 0
            while True:
                line = source.next_line()
                if line is None:
                    break
                line_no += 1
                values.append(apply_transform(self.transform, line, line_no))
                logEvent(self.logger, logging.DEBUG, self.run_id, "pipeline", f"Line {line_no} accepted")

        logEvent(self.logger, logging.INFO, self.run_id, "pipeline", f"Source exhausted values={len(values)}")
        return values

    def run(self, path: str) -> PipelineResult[T]:
        """
        Назначение:
            Граница пайплайна: PipelineError не выходит наружу, а упаковывается в результат.
        """
        try:
            values = self.collect(path)
        except PipelineError as exc:
            logEvent(self.logger, logging.ERROR, self.run_id, "pipeline", f"Run aborted kind={exc.kind.value}: {exc}")
            return PipelineResult.failure(exc)
        return PipelineResult.success(values)


def run_pipeline(path: str, transform: LineTransform[T] | None = None, **kwargs) -> PipelineResult[T]:
    return LinePipeline(transform=transform, **kwargs).run(path)


__all__ = ["LinePipeline", "run_pipeline"]
