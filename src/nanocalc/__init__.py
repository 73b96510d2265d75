"""NanoCalc compute core.

Optical (Mie), thermal and electronic response of spherical nanoparticles,
with unit-tagged inputs, validation, and a cached parallel compute engine.
"""

from nanocalc.core.config import EngineConfig, load_config
from nanocalc.core.errors import (
    CalculationError,
    ConvergenceError,
    NanoCalcError,
    NumericalInstabilityError,
    OutOfRangeError,
    ValidationError,
)
from nanocalc.core.types import CalculationRequest, OpticalResult, SpectrumRequest
from nanocalc.core.units import ComplexRefractiveIndex, Kelvin, Nanometer, RefractiveIndex
from nanocalc.engine import ComputeEngine, calculate, calculate_spectrum
from nanocalc.materials import lookup_material

__version__ = "0.1.0"

__all__ = [
    "CalculationError",
    "CalculationRequest",
    "ComplexRefractiveIndex",
    "ComputeEngine",
    "ConvergenceError",
    "EngineConfig",
    "Kelvin",
    "NanoCalcError",
    "Nanometer",
    "NumericalInstabilityError",
    "OpticalResult",
    "OutOfRangeError",
    "RefractiveIndex",
    "SpectrumRequest",
    "ValidationError",
    "calculate",
    "calculate_spectrum",
    "load_config",
    "lookup_material",
]
