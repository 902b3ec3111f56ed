from __future__ import annotations

from typing import BinaryIO, Iterator, NoReturn

from linepipe.domain.errors import FileOpenFailedError, LineReadFailedError

DEFAULT_ENCODING = "utf-8"


class FileLineSource:
    """
    Назначение/ответственность:
        Файловый источник строк: читает байты построчно, декодирует каждую строку
        строго в заданной кодировке и отдаёт её без завершающего перевода строки.

    Инварианты/гарантии:
        - Дескриптор принадлежит только источнику и закрывается при первом терминальном
          исходе (конец файла или ошибка), при close() и при выходе из with.
        - После конца/ошибки все последующие вызовы next_line() дают тот же исход.
        - Номера строк считаются с 1.
    """

    def __init__(self, path: str, handle: BinaryIO, encoding: str = DEFAULT_ENCODING) -> None:
        self.path = path
        self.encoding = encoding
        self._handle: BinaryIO | None = handle
        self._line_no = 0
        self._finished = False
        self._failure: LineReadFailedError | None = None

    @classmethod
    def open(cls, path: str, encoding: str = DEFAULT_ENCODING) -> "FileLineSource":
        """
        Назначение:
            Открывает файл на чтение.

        Выходные данные:
            FileLineSource

        Поведение:
            - Любая OSError (нет файла, нет прав, каталог и т.п.) -> FileOpenFailedError.
        """
        try:
            handle = open(path, "rb")
        except OSError as exc:
            raise FileOpenFailedError(path=path, cause=exc) from exc
        return cls(path, handle, encoding)

    @property
    def line_no(self) -> int:
        """Номер последней выданной (или упавшей) строки."""
        return self._line_no

    @property
    def closed(self) -> bool:
        return self._handle is None

    def next_line(self) -> str | None:
        if self._failure is not None:
            raise self._failure
        if self._finished or self._handle is None:
            return None

        try:
            raw = self._handle.readline()
        except OSError as exc:
            self._fail(self._line_no + 1, exc)
        if not raw:
            self._finished = True
            self.close()
            return None

        self._line_no += 1
        if raw.endswith(b"\n"):
            raw = raw[:-1]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError as exc:
            self._fail(self._line_no, exc)

    def _fail(self, line_no: int, cause: BaseException) -> NoReturn:
        self._line_no = line_no
        self._failure = LineReadFailedError(path=self.path, line_no=line_no, cause=cause)
        self.close()
        raise self._failure from cause

    def close(self) -> None:
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.close()

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.next_line()
            if line is None:
                return
            yield line

    def __enter__(self) -> "FileLineSource":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def iter_lines(path: str, encoding: str = DEFAULT_ENCODING) -> Iterator[str]:
    """
    Назначение:
        Генератор строк файла с гарантированным освобождением дескриптора,
        в том числе при досрочном прекращении итерации.
    """
    with FileLineSource.open(path, encoding) as source:
        yield from source


__all__ = ["DEFAULT_ENCODING", "FileLineSource", "iter_lines"]
