from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict


class ErrorKind(str, Enum):
    """
    Назначение:
        Закрытая таксономия ошибок пайплайна.
    """

    ARGUMENT_MISSING = "ARGUMENT_MISSING"
    FILE_OPEN_FAILED = "FILE_OPEN_FAILED"
    LINE_READ_FAILED = "LINE_READ_FAILED"
    PARSE_FAILED = "PARSE_FAILED"


class PipelineError(Exception):
    """
    Назначение:
        Базовый класс классифицированных ошибок пайплайна.

    Инварианты/гарантии:
        - Каждый подкласс соответствует ровно одному ErrorKind.
        - str(error) совпадает с render_error(error).
    """

    kind: ErrorKind
    cause: BaseException | None

    def __post_init__(self) -> None:
        super().__init__(render_error(self))

    def __str__(self) -> str:
        return render_error(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": render_error(self),
            "cause": describe_cause(self.cause) if self.cause is not None else None,
        }


@dataclass(eq=False)
class ArgumentMissingError(PipelineError):
    name: str = "argument"
    cause: BaseException | None = None

    kind = ErrorKind.ARGUMENT_MISSING

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["name"] = self.name
        return data


@dataclass(eq=False)
class FileOpenFailedError(PipelineError):
    path: str
    cause: BaseException

    kind = ErrorKind.FILE_OPEN_FAILED

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["path"] = self.path
        return data


@dataclass(eq=False)
class LineReadFailedError(PipelineError):
    path: str
    line_no: int
    cause: BaseException

    kind = ErrorKind.LINE_READ_FAILED

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["path"] = self.path
        data["line_no"] = self.line_no
        return data


@dataclass(eq=False)
class ParseFailedError(PipelineError):
    """
    Назначение:
        Ошибка преобразования строки (или аргумента командной строки).

    Поля:
        line_no: номер строки файла (с 1) или None, если разбирался аргумент.
        line: исходный текст, на котором упало преобразование.
    """

    line_no: int | None
    line: str
    cause: BaseException

    kind = ErrorKind.PARSE_FAILED

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["line_no"] = self.line_no
        data["line"] = self.line
        return data


def describe_cause(cause: BaseException) -> str:
    """
    Назначение:
        Человекочитаемое описание первопричины.

    Алгоритм:
        - Для OSError берётся strerror (без errno и пути), иначе str(cause).
    """
    if isinstance(cause, OSError) and cause.strerror:
        return cause.strerror
    text = str(cause)
    return text or type(cause).__name__


def _render_argument_missing(error: ArgumentMissingError) -> str:
    return f"Not enough arguments: expected {error.name}"


def _render_file_open_failed(error: FileOpenFailedError) -> str:
    return f"Could not open file {error.path}: {describe_cause(error.cause)}"


def _render_line_read_failed(error: LineReadFailedError) -> str:
    return f"Error reading file {error.path} at line {error.line_no}: {describe_cause(error.cause)}"


def _render_parse_failed(error: ParseFailedError) -> str:
    if error.line_no is None:
        return f"Could not parse argument {error.line!r}: {describe_cause(error.cause)}"
    return f"Error parsing line {error.line_no} ({error.line!r}): {describe_cause(error.cause)}"


_RENDERERS: Dict[ErrorKind, Callable[[Any], str]] = {
    ErrorKind.ARGUMENT_MISSING: _render_argument_missing,
    ErrorKind.FILE_OPEN_FAILED: _render_file_open_failed,
    ErrorKind.LINE_READ_FAILED: _render_line_read_failed,
    ErrorKind.PARSE_FAILED: _render_parse_failed,
}

_unrendered = [kind.value for kind in ErrorKind if kind not in _RENDERERS]
if _unrendered:
    raise RuntimeError(f"No renderer for error kinds: {', '.join(_unrendered)}")


def render_error(error: PipelineError) -> str:
    """
    Назначение:
        Единственное правило отображения для каждого вида ошибки.

    Выходные данные:
        str
            Однострочное диагностическое сообщение.
    """
    return _RENDERERS[error.kind](error)


__all__ = [
    "ErrorKind",
    "PipelineError",
    "ArgumentMissingError",
    "FileOpenFailedError",
    "LineReadFailedError",
    "ParseFailedError",
    "describe_cause",
    "render_error",
]
