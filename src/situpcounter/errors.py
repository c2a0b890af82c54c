from __future__ import annotations


class InvalidConfigurationError(ValueError):
    """Raised when counter thresholds describe an ill-formed hysteresis band.

    ``field`` names the offending setting when it can be attributed to one.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class SampleFormatError(ValueError):
    """Raised by the text reader when a landmark line cannot be parsed."""

    def __init__(self, message: str, *, line_no: int) -> None:
        super().__init__(f"line {line_no}: {message}")
        self.line_no = line_no
