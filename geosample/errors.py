"""Error and warning types raised by the inhibitory sampler."""

from __future__ import annotations


class GeosampleError(Exception):
    """Base class for all sampler errors."""


class InvalidInput(GeosampleError, TypeError):
    """Raised when the population is not a usable two-dimensional table."""


class InvalidParameter(GeosampleError, ValueError):
    """Raised when a sampling parameter is out of range."""


class InfeasibleConstraint(GeosampleError, RuntimeError):
    """Raised when the rejection loop exhausts its attempt budget for one point."""


class ConfigError(InvalidParameter):
    """Raised when a run configuration file is invalid."""


class DataQualityWarning(UserWarning):
    """Population rows were dropped or could not be resolved."""


class ParameterAdjustedWarning(UserWarning):
    """A requested parameter was changed before sampling."""
