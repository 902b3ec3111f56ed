from pathlib import Path

import pytest

from linepipe.domain.errors import (
    ErrorKind,
    FileOpenFailedError,
    LineReadFailedError,
    ParseFailedError,
)
from linepipe.domain.pipeline import LinePipeline, run_pipeline
from linepipe.domain.result import PipelineResult
from linepipe.domain.transform import get_transform
from linepipe.infra.sources.line_source import FileLineSource


def write(path: Path, text: str) -> str:
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_identity_returns_lines_in_order(tmp_path):
    lines = ["first", "  second  ", "", "fourth"]
    path = write(tmp_path / "data.txt", "\n".join(lines) + "\n")

    result = run_pipeline(path)

    assert result.ok
    assert result.values == lines


def test_numbers_success(tmp_path):
    path = write(tmp_path / "n.txt", "3\n4\n5")

    result = run_pipeline(path, get_transform("u64"))

    assert result == PipelineResult(values=[3, 4, 5], error=None)


def test_first_parse_failure_stops_and_discards_values(tmp_path):
    path = write(tmp_path / "n.txt", "3\n4\nx\n5\ny\n")

    result = run_pipeline(path, get_transform("u64"))

    assert not result.ok
    assert result.values == []
    assert isinstance(result.error, ParseFailedError)
    assert result.error.kind is ErrorKind.PARSE_FAILED
    assert result.error.line_no == 3
    assert result.error.line == "x"


def test_failure_on_first_line(tmp_path):
    path = write(tmp_path / "n.txt", "-1\n2\n")

    result = run_pipeline(path, get_transform("u64"))

    assert result.error.line_no == 1
    assert result.values == []


def test_missing_file_never_produces_lines(tmp_path):
    result = run_pipeline(str(tmp_path / "absent.txt"))

    assert isinstance(result.error, FileOpenFailedError)
    assert result.values == []


def test_decode_failure_is_line_read_failure(tmp_path):
    data = tmp_path / "bin.txt"
    data.write_bytes(b"1\n2\n\xc3\x28\n4\n")

    result = run_pipeline(str(data), get_transform("u64"))

    assert isinstance(result.error, LineReadFailedError)
    assert result.error.line_no == 3
    assert result.values == []


def test_repeated_runs_are_identical(tmp_path):
    path = write(tmp_path / "n.txt", "10\n20\n30\n")
    pipeline = LinePipeline(transform=get_transform("u64"))

    assert pipeline.run(path) == pipeline.run(path)

    bad = write(tmp_path / "bad.txt", "10\noops\n")
    first, second = pipeline.run(bad), pipeline.run(bad)
    assert (first.error.kind, first.error.line_no) == (second.error.kind, second.error.line_no)


def test_collect_raises_classified_error(tmp_path):
    path = write(tmp_path / "n.txt", "1\nz\n")

    with pytest.raises(ParseFailedError):
        LinePipeline(transform=get_transform("u64")).collect(path)


def test_source_is_closed_after_failure(tmp_path):
    path = write(tmp_path / "n.txt", "1\nz\n3\n")
    opened = []

    def opener(p, encoding):
        source = FileLineSource.open(p, encoding)
        opened.append(source)
        return source

    result = LinePipeline(transform=get_transform("u64"), open_source=opener).run(path)

    assert result.error is not None
    assert len(opened) == 1
    assert opened[0].closed


def test_unclassified_transform_bug_propagates(tmp_path):
    from linepipe.domain.transform import LineTransform

    path = write(tmp_path / "n.txt", "1\n")
    transform = LineTransform(name="bug", func=lambda line: 1 / 0, errors=(ValueError,))

    with pytest.raises(ZeroDivisionError):
        run_pipeline(path, transform)


def test_result_invariant():
    with pytest.raises(ValueError):
        PipelineResult(values=[1], error=FileOpenFailedError(path="p", cause=OSError("x")))

    failed = PipelineResult.failure(FileOpenFailedError(path="p", cause=OSError("x")))
    with pytest.raises(FileOpenFailedError):
        failed.unwrap()
    assert PipelineResult.success([1, 2]).unwrap() == [1, 2]
