from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from linepipe.domain.errors import ParseFailedError
from linepipe.domain.transform.integers import INTEGER_TYPES, IntegerType

T = TypeVar("T")


@dataclass(frozen=True)
class LineTransform(Generic[T]):
    """
    Назначение:
        Чистое преобразование строки в значение с объявленным набором ошибок.

    Инварианты/гарантии:
        - Только исключения из errors считаются ошибкой разбора (ParseFailed);
          всё остальное пробрасывается как есть.
    """

    name: str
    func: Callable[[str], T]
    errors: tuple[type[BaseException], ...] = (ValueError,)

    def __call__(self, line: str) -> T:
        return self.func(line)


def apply_transform(transform: LineTransform[T] | None, line: str, line_no: int | None) -> T | str:
    """
    Назначение:
        Применяет преобразование к строке; без преобразования строка проходит как есть.

    Входные данные:
        transform: LineTransform | None
        line: str
        line_no: int | None
            Номер строки файла или None для аргумента командной строки.

    Поведение:
        - Объявленная ошибка преобразования -> ParseFailedError(line_no, line, cause).
    """
    if transform is None:
        return line
    try:
        return transform(line)
    except transform.errors as exc:
        raise ParseFailedError(line_no=line_no, line=line, cause=exc) from exc


def integer_transform(int_type: IntegerType, trim: bool = True) -> LineTransform[int]:
    if trim:
        return LineTransform(name=int_type.name, func=lambda line: int_type.parse(line.strip()))
    return LineTransform(name=int_type.name, func=int_type.parse)


TRANSFORMS: dict[str, LineTransform] = {name: integer_transform(t) for name, t in INTEGER_TYPES.items()}


def get_transform(name: str) -> LineTransform:
    try:
        return TRANSFORMS[name]
    except KeyError:
        raise ValueError(f"Unsupported transform: {name} (expected one of: {', '.join(TRANSFORMS)})") from None


__all__ = ["LineTransform", "apply_transform", "integer_transform", "TRANSFORMS", "get_transform"]
