from __future__ import annotations

from typing import Sequence

from linepipe.domain.errors import ArgumentMissingError


def resolve_argument(args: Sequence[str | None] | None, name: str = "argument") -> str:
    """
    Назначение:
        Возвращает первый позиционный аргумент.

    Входные данные:
        args: Sequence[str | None] | None
            Позиционные аргументы (без имени программы).
        name: str
            Имя ожидаемого аргумента для сообщения об ошибке.

    Поведение:
        - Пустой список или отсутствующее значение -> ArgumentMissingError(name).
        - Файловую систему не трогает.
    """
    if not args or args[0] is None:
        raise ArgumentMissingError(name=name)
    return args[0]
