import pytest

from linepipe.domain.errors import ErrorKind, FileOpenFailedError, LineReadFailedError
from linepipe.infra.sources.line_source import FileLineSource, iter_lines


def test_reads_lines_without_terminators(tmp_path):
    data = tmp_path / "data.txt"
    data.write_bytes(b"alpha\r\nbeta\n\ngamma")

    with FileLineSource.open(str(data)) as source:
        assert list(source) == ["alpha", "beta", "", "gamma"]
        assert source.line_no == 4


def test_trailing_newline_does_not_add_empty_line(tmp_path):
    data = tmp_path / "data.txt"
    data.write_bytes(b"one\ntwo\n")

    assert list(iter_lines(str(data))) == ["one", "two"]


def test_empty_file_yields_nothing(tmp_path):
    data = tmp_path / "empty.txt"
    data.write_bytes(b"")

    source = FileLineSource.open(str(data))
    assert source.next_line() is None
    assert source.closed


def test_end_of_sequence_is_sticky(tmp_path):
    data = tmp_path / "data.txt"
    data.write_bytes(b"only\n")

    source = FileLineSource.open(str(data))
    assert source.next_line() == "only"
    assert source.next_line() is None
    assert source.next_line() is None
    assert source.closed


def test_open_missing_file_fails(tmp_path):
    missing = tmp_path / "missing.txt"

    with pytest.raises(FileOpenFailedError) as excinfo:
        FileLineSource.open(str(missing))

    assert excinfo.value.kind is ErrorKind.FILE_OPEN_FAILED
    assert excinfo.value.path == str(missing)
    assert isinstance(excinfo.value.cause, FileNotFoundError)
    assert "No such file or directory" in str(excinfo.value)


def test_open_directory_fails(tmp_path):
    with pytest.raises(FileOpenFailedError):
        FileLineSource.open(str(tmp_path))


def test_invalid_utf8_fails_and_failure_is_sticky(tmp_path):
    data = tmp_path / "data.txt"
    data.write_bytes(b"ok\n\xff\xfe\nlater\n")

    source = FileLineSource.open(str(data))
    assert source.next_line() == "ok"

    with pytest.raises(LineReadFailedError) as first:
        source.next_line()
    assert first.value.line_no == 2
    assert isinstance(first.value.cause, UnicodeDecodeError)
    assert source.closed

    with pytest.raises(LineReadFailedError) as second:
        source.next_line()
    assert second.value is first.value


class FailingHandle:
    def __init__(self):
        self.closed = False

    def readline(self):
        raise OSError(5, "Input/output error")

    def close(self):
        self.closed = True


def test_io_error_mid_read_fails_and_failure_is_sticky():
    handle = FailingHandle()
    source = FileLineSource("p", handle)

    with pytest.raises(LineReadFailedError) as first:
        source.next_line()
    assert first.value.line_no == 1
    assert first.value.path == "p"
    assert isinstance(first.value.cause, OSError)
    assert str(first.value) == "Error reading file p at line 1: Input/output error"
    assert source.closed
    assert handle.closed

    with pytest.raises(LineReadFailedError) as second:
        source.next_line()
    assert second.value is first.value


def test_encoding_is_configurable(tmp_path):
    data = tmp_path / "data.txt"
    data.write_bytes("café\n".encode("latin-1"))

    assert list(iter_lines(str(data), encoding="latin-1")) == ["café"]


def test_abandoned_generator_releases_handle(tmp_path, monkeypatch):
    data = tmp_path / "data.txt"
    data.write_bytes(b"1\n2\n3\n")
    opened = []
    original_open = FileLineSource.open.__func__

    def tracking_open(cls, path, encoding="utf-8"):
        source = original_open(cls, path, encoding)
        opened.append(source)
        return source

    monkeypatch.setattr(FileLineSource, "open", classmethod(tracking_open))

    lines = iter_lines(str(data))
    assert next(lines) == "1"
    lines.close()

    assert len(opened) == 1
    assert opened[0].closed


def test_close_is_idempotent(tmp_path):
    data = tmp_path / "data.txt"
    data.write_bytes(b"x\n")

    source = FileLineSource.open(str(data))
    source.close()
    source.close()
    assert source.closed
