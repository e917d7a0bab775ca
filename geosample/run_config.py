"""YAML run configuration for reproducible sampling runs."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any

import numpy as np
import yaml

from .config import SampleRequest, SamplerConfig
from .errors import ConfigError, InvalidParameter
from .models import SampleResult
from .sampler import InhibitorySampler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunConfig:
    """Resolved config for one reproducible sampling run."""

    run_name: str
    seed: int | None
    request: SampleRequest
    sampler_config: SamplerConfig

    def to_serializable_dict(self) -> dict[str, Any]:
        """Return config as plain Python types for YAML/JSON output."""
        return {
            "run": {
                "name": self.run_name,
                "seed": self.seed,
                "max_attempts_per_point": self.sampler_config.max_attempts_per_point,
                "close_pair_rows": self.sampler_config.close_pair_rows,
            },
            "sample": {
                "sample_size": self.request.sample_size,
                "x_index": self.request.x_index,
                "y_index": self.request.y_index,
                "minimum_distance": self.request.minimum_distance,
                "close_pairs": self.request.close_pairs,
                "circle_radius": self.request.circle_radius,
            },
        }


def load_run_config(config_path: str | Path) -> RunConfig:
    """Load and validate YAML config for a sampling run."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle)

    if not isinstance(raw, dict):
        raise ConfigError("config root must be a mapping")

    return parse_run_config(raw)


def parse_run_config(raw: dict[str, Any]) -> RunConfig:
    """Build a RunConfig from an already-parsed mapping."""
    run = _as_dict(raw.get("run"), "run")
    sample = _as_dict(raw.get("sample"), "sample")

    run_name = str(run.get("name", "geosample"))
    if not run_name.strip():
        raise ConfigError("run.name must be a non-empty string")

    seed = _optional_int(run.get("seed"), "run.seed")
    max_attempts = _optional_int(run.get("max_attempts_per_point", 100_000), "run.max_attempts_per_point")
    close_pair_rows = str(run.get("close_pair_rows", "anchor"))

    try:
        request = SampleRequest(
            sample_size=_as_int(_require(sample, "sample_size", "sample"), "sample.sample_size"),
            x_index=_as_int(sample.get("x_index", 0), "sample.x_index"),
            y_index=_as_int(sample.get("y_index", 1), "sample.y_index"),
            minimum_distance=_as_float(_require(sample, "minimum_distance", "sample"), "sample.minimum_distance"),
            close_pairs=_as_int(sample.get("close_pairs", 0), "sample.close_pairs"),
            circle_radius=_as_float(sample.get("circle_radius", 0.0), "sample.circle_radius"),
        )
        sampler_config = SamplerConfig(
            max_attempts_per_point=max_attempts,
            close_pair_rows=close_pair_rows,
            seed=seed,
        )
    except ConfigError:
        raise
    except InvalidParameter as exc:
        raise ConfigError(str(exc)) from exc

    return RunConfig(run_name=run_name, seed=seed, request=request, sampler_config=sampler_config)


def run_sample_from_config(config_path: str | Path, population: Any) -> SampleResult:
    """Convenience wrapper: load config, sample `population`, and return the result."""
    config = load_run_config(config_path)
    logger.info(f"Run {config.run_name!r} with seed {config.seed}")

    rng = np.random.default_rng(config.seed)
    sampler = InhibitorySampler(config.request, config=config.sampler_config, rng=rng)
    return sampler.run(population)


def _as_dict(value: Any, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a mapping")
    return value


def _require(mapping: dict[str, Any], key: str, section: str) -> Any:
    if key not in mapping:
        raise ConfigError(f"missing required key '{key}' in section '{section}'")
    return mapping[key]


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer") from exc
    if not number.is_integer():
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    return int(number)


def _optional_int(value: Any, name: str) -> int | None:
    if value is None:
        return None
    return _as_int(value, name)


def _as_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number") from exc
