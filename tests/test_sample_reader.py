from __future__ import annotations

from pathlib import Path

import pytest

from situpcounter.errors import SampleFormatError
from situpcounter.io.sample_reader import iter_metrics, iter_samples, parse_sample_line, read_samples
from situpcounter.landmarks.sample import LandmarkSample


def test_parse_sample_line_accepts_spaces_commas_and_na() -> None:
    assert parse_sample_line("0.3 0.3 0.6 0.6") == LandmarkSample(0.3, 0.3, 0.6, 0.6)
    assert parse_sample_line("0.3, 0.3,0.6 ,NA") == LandmarkSample(0.3, 0.3, 0.6, None)
    assert parse_sample_line("na\tNA\tNaN\tnone") == LandmarkSample.missing()


@pytest.mark.parametrize(
    ("text", "fragment"),
    [
        ("0.3 0.3 0.6", "expected 4 values"),
        ("0.3 0.3 0.6 0.6 0.6", "expected 4 values"),
        ("0.3 0.3 abc 0.6", "not a number or NA"),
        ("0.3 0.3 inf 0.6", "must be finite"),
    ],
)
def test_parse_sample_line_rejects_malformed_input(text: str, fragment: str) -> None:
    with pytest.raises(SampleFormatError) as exc_info:
        parse_sample_line(text, line_no=7)
    assert exc_info.value.line_no == 7
    assert "line 7" in str(exc_info.value)
    assert fragment in str(exc_info.value)


def test_iter_samples_skips_blank_and_comment_lines_but_keeps_line_numbers() -> None:
    lines = [
        "# left_shoulder right_shoulder left_hip right_hip\n",
        "0.40 0.40 0.70 0.70\n",
        "\n",
        "NA NA NA NA\n",
    ]
    records = list(iter_samples(lines))
    assert [record.line_no for record in records] == [2, 4]
    assert records[0].sample.metric == pytest.approx(0.30)
    assert records[1].sample == LandmarkSample.missing()


def test_iter_samples_reports_first_bad_line() -> None:
    stream = iter_samples(["0.4 0.4 0.7 0.7", "0.4 0.4 0.7"])
    assert next(stream).line_no == 1
    with pytest.raises(SampleFormatError) as exc_info:
        next(stream)
    assert exc_info.value.line_no == 2


def test_iter_metrics_reads_single_values() -> None:
    records = list(iter_metrics(["0.30", "NA", "  0.05  "]))
    assert [record.metric for record in records] == [0.30, None, 0.05]

    with pytest.raises(SampleFormatError):
        list(iter_metrics(["0.3 0.4"]))


def test_read_samples_from_file(tmp_path: Path) -> None:
    path = tmp_path / "samples.txt"
    path.write_text("0.4 0.4 0.7 0.7\n0.4,0.4,0.45,0.45\n", encoding="utf-8")

    records = read_samples(path)
    assert len(records) == 2
    assert records[1].sample.metric == pytest.approx(0.05)


def test_read_samples_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError) as exc_info:
        read_samples(tmp_path / "missing.txt")
    assert "does not exist" in str(exc_info.value)
