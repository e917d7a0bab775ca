"""Public API for inhibitory spatial sampling with close pairs."""

from .config import EffectiveParameters, SampleRequest, SamplerConfig
from .errors import (
    ConfigError,
    DataQualityWarning,
    GeosampleError,
    InfeasibleConstraint,
    InvalidInput,
    InvalidParameter,
    ParameterAdjustedWarning,
)
from .models import PointKind, SampledPoint, SampleResult
from .resolver import PopulationResolver
from .run_config import RunConfig, load_run_config, run_sample_from_config
from .sampler import InhibitorySampler, generate_sample, make_rng
from .validation import validate_population

__all__ = [
    "ConfigError",
    "DataQualityWarning",
    "EffectiveParameters",
    "GeosampleError",
    "InfeasibleConstraint",
    "InhibitorySampler",
    "InvalidInput",
    "InvalidParameter",
    "ParameterAdjustedWarning",
    "PointKind",
    "PopulationResolver",
    "RunConfig",
    "SampleRequest",
    "SampleResult",
    "SampledPoint",
    "SamplerConfig",
    "generate_sample",
    "load_run_config",
    "make_rng",
    "run_sample_from_config",
    "validate_population",
]
