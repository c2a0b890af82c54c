from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from situpcounter.errors import InvalidConfigurationError

DEFAULT_REST_THRESHOLD = 0.15
DEFAULT_HYSTERESIS = 0.05


class CounterConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    rest_threshold: float = Field(
        default=DEFAULT_REST_THRESHOLD,
        description="Hip-shoulder separation splitting lying from sitting posture",
    )
    hysteresis: float = Field(
        default=DEFAULT_HYSTERESIS,
        description="Dead zone around rest_threshold that must be left before a move registers",
    )

    @field_validator("rest_threshold", "hysteresis")
    @classmethod
    def validate_unit_range(cls, value: float) -> float:
        if value != value:
            raise ValueError("Threshold must be a number, got NaN")
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"Threshold must be within [0, 1], got {value}")
        return value

    @model_validator(mode="after")
    def validate_band(self) -> "CounterConfig":
        if self.hysteresis >= self.rest_threshold:
            raise ValueError(
                f"hysteresis ({self.hysteresis}) must be smaller than "
                f"rest_threshold ({self.rest_threshold})"
            )
        return self

    @property
    def lower_bound(self) -> float:
        return self.rest_threshold - self.hysteresis

    @property
    def upper_bound(self) -> float:
        return self.rest_threshold + self.hysteresis

    def as_summary(self) -> dict[str, float]:
        return {
            "rest_threshold": self.rest_threshold,
            "hysteresis": self.hysteresis,
            "lower_bound": round(self.lower_bound, 6),
            "upper_bound": round(self.upper_bound, 6),
        }


def build_counter_config(**values: Any) -> CounterConfig:
    """Validate threshold overrides, raising ``InvalidConfigurationError`` on failure.

    ``None`` values fall back to the defaults so CLI options can be passed through as-is.
    """
    overrides = {key: value for key, value in values.items() if value is not None}
    try:
        return CounterConfig(**overrides)
    except ValidationError as exc:
        error = exc.errors()[0]
        message = error.get("msg", "Invalid counter configuration")
        # The band check is model-level and has an empty loc.
        loc = error.get("loc") or ("hysteresis",)
        raise InvalidConfigurationError(message, field=str(loc[0])) from exc
