from __future__ import annotations

from typing import Callable, Iterator, Protocol


class LineSource(Protocol):
    """
    Назначение/ответственность:
        Ленивый, конечный, однонаправленный источник декодированных строк.
    Взаимодействия:
        Владеет файловым дескриптором; освобождает его на терминальном исходе или при close().
    """

    def next_line(self) -> str | None:
        """
        Контракт:
            Возвращает очередную строку без перевода строки, None в конце,
            либо поднимает LineReadFailedError. Терминальный исход повторяется
            при последующих вызовах.
        """
        ...

    def close(self) -> None:
        ...

    def __iter__(self) -> Iterator[str]:
        ...

    def __enter__(self) -> "LineSource":
        ...

    def __exit__(self, exc_type, exc, tb) -> None:
        ...


LineSourceOpener = Callable[[str, str], LineSource]
"""
Фабрика источника: (path, encoding) -> LineSource, либо FileOpenFailedError.
"""


__all__ = ["LineSource", "LineSourceOpener"]
