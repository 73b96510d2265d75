"""Parameter range checks.

Errors are non-physical inputs and are raised as :class:`OutOfRangeError`
before any computation. Warnings describe inputs that are physically valid
but outside the well-characterized regime of a model; they are returned as
strings and end up in the result's metadata.
"""

from __future__ import annotations

import math

from nanocalc.core.config import ValidationLimits
from nanocalc.core.errors import OutOfRangeError
from nanocalc.core.types import CalculationRequest

# Below this temperature the Umklapp-limited mean free path scaling breaks down.
MIN_THERMAL_MODEL_TEMPERATURE_K = 100.0

# Below this diameter the effective mass approximation is unreliable.
MIN_EFFECTIVE_MASS_DIAMETER_NM = 2.0


def require_positive(parameter: str, value: float) -> None:
    """Raise unless ``value`` is finite and strictly positive."""
    if not math.isfinite(value) or value <= 0.0:
        raise OutOfRangeError(parameter, value, 0.0, math.inf)


def require_non_negative(parameter: str, value: float) -> None:
    """Raise unless ``value`` is finite and not negative."""
    if not math.isfinite(value) or value < 0.0:
        raise OutOfRangeError(parameter, value, 0.0, math.inf)


def validate_request(
    request: CalculationRequest, limits: ValidationLimits | None = None
) -> tuple[str, ...]:
    """Check an optical request.

    Args:
        request: Request to check
        limits: Regime bounds used for warnings (defaults if None)

    Returns:
        Warnings, in a stable order

    Raises:
        OutOfRangeError: If any parameter is non-physical
    """
    limits = limits or ValidationLimits()

    require_positive("radius", request.radius.value)
    require_positive("wavelength", request.wavelength.value)
    require_positive("medium_index", request.medium_index.value)
    require_positive("particle_index.real", request.particle_index.real)
    require_non_negative("particle_index.imag", request.particle_index.imag)

    warnings: list[str] = []
    x = request.size_parameter
    if not limits.min_size_parameter < x < limits.max_size_parameter:
        warnings.append(
            f"Size parameter x={x:.4g} is outside ({limits.min_size_parameter:g}, "
            f"{limits.max_size_parameter:g}); series accuracy is not characterized there"
        )
    k = request.particle_index.imag
    if k > limits.max_extinction_coefficient:
        warnings.append(
            f"Extinction coefficient k={k:.4g} exceeds {limits.max_extinction_coefficient:g}; "
            "very high absorption"
        )

    return tuple(warnings)


def validate_thermal(diameter_nm: float, temperature_k: float) -> tuple[str, ...]:
    """Check thermal model inputs, returning warnings."""
    require_positive("diameter", diameter_nm)
    require_positive("temperature", temperature_k)

    warnings: list[str] = []
    if temperature_k < MIN_THERMAL_MODEL_TEMPERATURE_K:
        warnings.append(
            f"Temperature {temperature_k:g} K is below {MIN_THERMAL_MODEL_TEMPERATURE_K:g} K; "
            "mean free path scaling assumes Umklapp-limited transport"
        )
    return tuple(warnings)


def validate_nanocrystal(diameter_nm: float) -> tuple[str, ...]:
    """Check electronic model inputs, returning warnings."""
    require_positive("diameter", diameter_nm)

    warnings: list[str] = []
    if diameter_nm < MIN_EFFECTIVE_MASS_DIAMETER_NM:
        warnings.append(
            f"Diameter {diameter_nm:g} nm is below {MIN_EFFECTIVE_MASS_DIAMETER_NM:g} nm; "
            "effective mass approximation is unreliable"
        )
    return tuple(warnings)


__all__ = [
    "MIN_THERMAL_MODEL_TEMPERATURE_K",
    "MIN_EFFECTIVE_MASS_DIAMETER_NM",
    "require_positive",
    "require_non_negative",
    "validate_request",
    "validate_thermal",
    "validate_nanocrystal",
]
