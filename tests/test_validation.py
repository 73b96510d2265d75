"""Tests for parameter range checks."""

import math

import pytest

from nanocalc.core.config import ValidationLimits
from nanocalc.core.errors import OutOfRangeError, ValidationError
from nanocalc.core.types import CalculationRequest
from nanocalc.core.units import ComplexRefractiveIndex
from nanocalc.validation import (
    require_non_negative,
    require_positive,
    validate_nanocrystal,
    validate_request,
    validate_thermal,
)


def request(radius=50.0, wavelength=500.0, index=(1.5, 0.0), medium=1.0):
    return CalculationRequest(radius, wavelength, ComplexRefractiveIndex(*index), medium)


def test_valid_request_has_no_warnings():
    assert validate_request(request()) == ()


@pytest.mark.parametrize("value", [0.0, -1.0, math.nan, math.inf])
def test_require_positive(value):
    with pytest.raises(OutOfRangeError) as excinfo:
        require_positive("radius", value)
    assert excinfo.value.parameter == "radius"
    assert excinfo.value.minimum == 0.0
    assert excinfo.value.maximum == math.inf


def test_require_non_negative_accepts_zero():
    require_non_negative("k", 0.0)
    with pytest.raises(OutOfRangeError):
        require_non_negative("k", -1e-12)


def test_out_of_range_is_a_validation_error():
    with pytest.raises(ValidationError):
        validate_request(request(radius=-1.0))


def test_hard_checks_run_in_order():
    # Both radius and wavelength are bad; radius is reported
    with pytest.raises(OutOfRangeError) as excinfo:
        validate_request(request(radius=0.0, wavelength=0.0))
    assert excinfo.value.parameter == "radius"


def test_size_parameter_window_warnings():
    small = validate_request(request(radius=0.5, wavelength=500.0))
    large = validate_request(request(radius=100_000.0, wavelength=500.0))
    assert len(small) == 1 and "Size parameter" in small[0]
    assert len(large) == 1 and "Size parameter" in large[0]


def test_warnings_are_ordered():
    warnings = validate_request(request(radius=0.1, wavelength=500.0, index=(0.5, 15.0)))
    assert len(warnings) == 2
    assert warnings[0].startswith("Size parameter")
    assert warnings[1].startswith("Extinction coefficient")


def test_limits_are_configurable():
    limits = ValidationLimits(max_extinction_coefficient=1.0)
    warnings = validate_request(request(index=(0.5, 2.0)), limits)
    assert len(warnings) == 1


def test_thermal_checks():
    assert validate_thermal(10.0, 300.0) == ()
    assert len(validate_thermal(10.0, 20.0)) == 1
    with pytest.raises(OutOfRangeError):
        validate_thermal(10.0, 0.0)


def test_nanocrystal_checks():
    assert validate_nanocrystal(5.0) == ()
    assert len(validate_nanocrystal(1.0)) == 1
    with pytest.raises(OutOfRangeError):
        validate_nanocrystal(math.nan)
