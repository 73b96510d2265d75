"""Optical response of a homogeneous sphere (Mie theory)."""

from __future__ import annotations

from collections.abc import Callable, Hashable

from nanocalc.core.config import SolverSettings, ValidationLimits
from nanocalc.core.errors import ConvergenceError
from nanocalc.core.logging import get_logger
from nanocalc.core.types import CalculationRequest, OpticalResult
from nanocalc.core.units import Nanometer, RefractiveIndex, as_quantity
from nanocalc.materials import MaterialRecord, lookup_material, resolve_material
from nanocalc.models.base import BaseModel
from nanocalc.physics import mie
from nanocalc.validation import validate_request

logger = get_logger(__name__)


class MieModel(BaseModel):
    """Scattering, absorption and extinction of a sphere by the Mie series.

    Args:
        request: Sphere and illumination parameters
        settings: Truncation tolerance and convergence policy
        limits: Regime bounds used for warnings
        material: Optional material whose optical table supplies the
            particle index when the model is swept to another wavelength
    """

    sweep_quantity = "wavelength (nm)"

    def __init__(
        self,
        request: CalculationRequest,
        settings: SolverSettings | None = None,
        limits: ValidationLimits | None = None,
        material: MaterialRecord | None = None,
    ):
        self.request = request
        self.settings = settings or SolverSettings()
        self.limits = limits or ValidationLimits()
        self.material = material

    @classmethod
    def from_material(
        cls,
        material: MaterialRecord | str,
        radius: Nanometer | float,
        wavelength: Nanometer | float,
        medium_index: RefractiveIndex | float = 1.0,
        lookup: Callable[[str], MaterialRecord | None] = lookup_material,
        settings: SolverSettings | None = None,
        limits: ValidationLimits | None = None,
    ) -> MieModel:
        """Build a model whose particle index comes from tabulated bulk data.

        Raises:
            InvalidParameterError: If the material is unknown or has no optical table
            OutOfRangeError: If the wavelength is outside the table
        """
        record = resolve_material(material, lookup)
        wl = as_quantity(Nanometer, wavelength, "wavelength")
        request = CalculationRequest(
            radius=radius,
            wavelength=wl,
            particle_index=record.refractive_index(wl),
            medium_index=medium_index,
        )
        return cls(request, settings, limits, material=record)

    def name(self) -> str:
        return "Mie Scattering"

    def description(self) -> str:
        return "Scattering, absorption and extinction efficiencies of a homogeneous sphere"

    def validate(self) -> None:
        validate_request(self.request, self.limits)

    def warnings(self) -> tuple[str, ...]:
        return validate_request(self.request, self.limits)

    def compute(self) -> OpticalResult:
        """Validate, then sum the Mie series.

        Raises:
            ValidationError: If the request is non-physical
            ConvergenceError: If the series did not converge and the
                settings require convergence
            NumericalInstabilityError: If an intermediate value was not finite
        """
        notes = validate_request(self.request, self.limits)
        if notes:
            logger.warning(
                "Request outside characterized regime",
                {"size_parameter": self.request.size_parameter, "warnings": list(notes)},
            )

        result = mie.solve(self.request, self.settings.truncation_tolerance, notes)

        if not result.metadata.converged and self.settings.strict_convergence:
            raise ConvergenceError(result.metadata.number_of_terms_used)
        return result

    def sweep(self, value: Nanometer | float) -> MieModel:
        wavelength = as_quantity(Nanometer, value, "wavelength")
        request = self.request.with_wavelength(wavelength)
        if self.material is not None:
            request = CalculationRequest(
                radius=request.radius,
                wavelength=wavelength,
                particle_index=self.material.refractive_index(wavelength),
                medium_index=request.medium_index,
            )
        return MieModel(request, self.settings, self.limits, self.material)

    def cache_key(self) -> Hashable:
        limits = self.limits
        return (
            self.request,
            self.settings.truncation_tolerance,
            self.settings.strict_convergence,
            (
                limits.min_size_parameter,
                limits.max_size_parameter,
                limits.max_extinction_coefficient,
            ),
        )


__all__ = ["MieModel"]
