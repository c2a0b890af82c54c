"""Plain-text landmark streams.

One frame per line, four values in the order left shoulder, right shoulder,
left hip, right hip (normalized y). Values are separated by whitespace or
commas; ``NA`` marks a landmark that was not detected. Blank lines and lines
starting with ``#`` are ignored.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from situpcounter.errors import SampleFormatError
from situpcounter.landmarks.sample import SAMPLE_FIELDS, LandmarkSample

MISSING_TOKENS = {"na", "nan", "none", "-"}
_SEPARATOR = re.compile(r"[,\s]+")


@dataclass(frozen=True)
class SampleLine:
    line_no: int
    sample: LandmarkSample


@dataclass(frozen=True)
class MetricLine:
    line_no: int
    metric: float | None


def _split(text: str) -> list[str]:
    return [token for token in _SEPARATOR.split(text.strip()) if token]


def _parse_value(token: str, line_no: int) -> float | None:
    if token.lower() in MISSING_TOKENS:
        return None
    try:
        value = float(token)
    except ValueError as exc:
        raise SampleFormatError(f"not a number or NA: {token!r}", line_no=line_no) from exc
    if not math.isfinite(value):
        raise SampleFormatError(f"value must be finite: {token!r}", line_no=line_no)
    return value


def _content_lines(lines: Iterable[str]) -> Iterator[tuple[int, list[str]]]:
    for line_no, raw in enumerate(lines, start=1):
        text = raw.strip()
        if not text or text.startswith("#"):
            continue
        yield line_no, _split(text)


def parse_sample_line(text: str, line_no: int = 1) -> LandmarkSample:
    tokens = _split(text)
    if len(tokens) != len(SAMPLE_FIELDS):
        raise SampleFormatError(
            f"expected {len(SAMPLE_FIELDS)} values ({', '.join(SAMPLE_FIELDS)}), got {len(tokens)}",
            line_no=line_no,
        )
    return LandmarkSample.from_values([_parse_value(token, line_no) for token in tokens])


def iter_samples(lines: Iterable[str]) -> Iterator[SampleLine]:
    for line_no, tokens in _content_lines(lines):
        yield SampleLine(line_no=line_no, sample=parse_sample_line(" ".join(tokens), line_no))


def iter_metrics(lines: Iterable[str]) -> Iterator[MetricLine]:
    """Read one precomputed hip-shoulder metric (or ``NA``) per line."""
    for line_no, tokens in _content_lines(lines):
        if len(tokens) != 1:
            raise SampleFormatError(f"expected 1 metric value, got {len(tokens)}", line_no=line_no)
        yield MetricLine(line_no=line_no, metric=_parse_value(tokens[0], line_no))


def read_samples(path: str | Path) -> list[SampleLine]:
    sample_path = Path(path)
    if not sample_path.exists():
        raise FileNotFoundError(f"Sample file does not exist: {sample_path}")
    if not sample_path.is_file():
        raise ValueError(f"Sample path is not a file: {sample_path}")
    with sample_path.open("r", encoding="utf-8") as file:
        return list(iter_samples(file))
