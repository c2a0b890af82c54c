from __future__ import annotations

import pytest
from pydantic import ValidationError

from situpcounter.config import (
    DEFAULT_HYSTERESIS,
    DEFAULT_REST_THRESHOLD,
    CounterConfig,
    build_counter_config,
)
from situpcounter.errors import InvalidConfigurationError


def test_defaults_match_calibrated_thresholds() -> None:
    config = CounterConfig()
    assert config.rest_threshold == DEFAULT_REST_THRESHOLD == 0.15
    assert config.hysteresis == DEFAULT_HYSTERESIS == 0.05
    assert config.lower_bound == pytest.approx(0.10)
    assert config.upper_bound == pytest.approx(0.20)


def test_config_is_frozen() -> None:
    config = CounterConfig()
    with pytest.raises(ValidationError):
        config.hysteresis = 0.01  # type: ignore[misc]


def test_build_counter_config_ignores_none_overrides() -> None:
    config = build_counter_config(rest_threshold=None, hysteresis=0.02)
    assert config.rest_threshold == DEFAULT_REST_THRESHOLD
    assert config.hysteresis == 0.02


def test_zero_hysteresis_is_allowed() -> None:
    assert build_counter_config(hysteresis=0.0).lower_bound == pytest.approx(0.15)


def test_hysteresis_must_be_below_rest_threshold() -> None:
    with pytest.raises(InvalidConfigurationError) as exc_info:
        build_counter_config(rest_threshold=0.10, hysteresis=0.10)
    assert "must be smaller than" in str(exc_info.value)
    assert exc_info.value.field == "hysteresis"


@pytest.mark.parametrize(
    "overrides",
    [
        {"rest_threshold": -0.1},
        {"rest_threshold": 1.01},
        {"hysteresis": -0.05},
        {"rest_threshold": float("nan")},
    ],
)
def test_thresholds_outside_unit_range_are_rejected(overrides: dict[str, float]) -> None:
    with pytest.raises(InvalidConfigurationError):
        build_counter_config(**overrides)


def test_invalid_configuration_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        build_counter_config(hysteresis=0.5)


def test_summary_lists_band_bounds() -> None:
    summary = CounterConfig(rest_threshold=0.2, hysteresis=0.05).as_summary()
    assert summary == {
        "rest_threshold": 0.2,
        "hysteresis": 0.05,
        "lower_bound": 0.15,
        "upper_bound": 0.25,
    }


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"rest_threshold": 1.5, "hysteresis": 0.05}, "rest_threshold"),
        ({"rest_threshold": 0.2, "hysteresis": -0.01}, "hysteresis"),
    ],
)
def test_invalid_configuration_names_offending_field(overrides: dict[str, float], field: str) -> None:
    with pytest.raises(InvalidConfigurationError) as exc_info:
        build_counter_config(**overrides)
    assert exc_info.value.field == field
