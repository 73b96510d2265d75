"""Custom exception types for nanoparticle calculations."""

from __future__ import annotations

import math


class NanoCalcError(Exception):
    """Base exception for all nanocalc errors."""

    pass


class ConfigError(NanoCalcError):
    """Configuration-related errors."""

    pass


class UnitMismatchError(NanoCalcError, TypeError):
    """A quantity of one unit was used where another unit was required."""

    pass


class ValidationError(NanoCalcError):
    """Non-physical input parameters. Raised before any computation."""

    pass


class OutOfRangeError(ValidationError):
    """A parameter lies outside its admissible range.

    Attributes:
        parameter: Name of the offending parameter
        value: Value that was supplied
        minimum: Lower bound (exclusive for strictly positive quantities)
        maximum: Upper bound
    """

    def __init__(self, parameter: str, value: float, minimum: float, maximum: float = math.inf):
        self.parameter = parameter
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"{parameter}={value} is out of valid range [{minimum}, {maximum}]"
        )


class InvalidParameterError(ValidationError):
    """A parameter is unusable for a reason other than its numeric range."""

    def __init__(self, parameter: str, reason: str):
        self.parameter = parameter
        self.reason = reason
        super().__init__(f"Invalid parameter {parameter!r}: {reason}")


class CalculationError(NanoCalcError):
    """Failures that occur while a model is being evaluated."""

    pass


class ConvergenceError(CalculationError):
    """The series expansion ran out of terms before the truncation criterion held."""

    def __init__(self, terms_attempted: int):
        self.terms_attempted = terms_attempted
        super().__init__(f"Series did not converge after {terms_attempted} terms")


class NumericalInstabilityError(CalculationError):
    """A non-finite or otherwise unusable intermediate value was produced."""

    def __init__(self, description: str):
        self.description = description
        super().__init__(f"Numerical instability detected: {description}")


__all__ = [
    "NanoCalcError",
    "ConfigError",
    "UnitMismatchError",
    "ValidationError",
    "OutOfRangeError",
    "InvalidParameterError",
    "CalculationError",
    "ConvergenceError",
    "NumericalInstabilityError",
]
