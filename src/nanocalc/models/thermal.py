"""Size-dependent thermal conductivity of a spherical particle.

Boundary scattering is combined with intrinsic scattering by Matthiessen's
rule, giving

    kappa_eff = kappa_bulk / (1 + Lambda / d)

for a particle of diameter d and bulk carrier mean free path Lambda. Both
kappa_bulk and Lambda scale as 1/T from their 300 K reference values, the
Umklapp-limited regime.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable

from nanocalc.core.errors import InvalidParameterError
from nanocalc.core.logging import get_logger
from nanocalc.core.types import ThermalResult
from nanocalc.core.units import Kelvin, Nanometer, as_quantity
from nanocalc.materials import MaterialRecord, lookup_material
from nanocalc.models.base import BaseModel
from nanocalc.validation import validate_thermal

logger = get_logger(__name__)

REFERENCE_TEMPERATURE_K = 300.0


class ThermalConductivityModel(BaseModel):
    """Effective thermal conductivity reduced by boundary scattering."""

    sweep_quantity = "temperature (K)"

    def __init__(
        self,
        material: MaterialRecord | str,
        diameter: Nanometer | float,
        temperature: Kelvin | float = REFERENCE_TEMPERATURE_K,
        lookup: Callable[[str], MaterialRecord | None] = lookup_material,
    ):
        if isinstance(material, MaterialRecord):
            self.material_name = material.name
            self.record: MaterialRecord | None = material
        else:
            self.material_name = material
            self.record = lookup(material)
        self.diameter = as_quantity(Nanometer, diameter, "diameter")
        self.temperature = as_quantity(Kelvin, temperature, "temperature")
        self._lookup = lookup

    def name(self) -> str:
        return "Thermal Conductivity (Boundary Scattering)"

    def _record(self) -> MaterialRecord:
        if self.record is None:
            raise InvalidParameterError("material", f"unknown material {self.material_name!r}")
        return self.record

    def validate(self) -> None:
        record = self._record()
        record.require("thermal_conductivity")
        record.require("mean_free_path_nm")
        validate_thermal(self.diameter.value, self.temperature.value)

    def warnings(self) -> tuple[str, ...]:
        return validate_thermal(self.diameter.value, self.temperature.value)

    def compute(self) -> ThermalResult:
        self.validate()
        record = self._record()
        d = self.diameter.value
        t = self.temperature.value

        notes = self.warnings()
        if notes:
            logger.warning(
                "Temperature outside characterized regime",
                {"temperature": t, "warnings": list(notes)},
            )

        scale = REFERENCE_TEMPERATURE_K / t
        kappa_bulk = record.require("thermal_conductivity") * scale
        mfp = record.require("mean_free_path_nm") * scale
        reduction = 1.0 / (1.0 + mfp / d)
        ratio = d / mfp

        return ThermalResult(
            diameter=d,
            temperature=t,
            kappa_eff=kappa_bulk * reduction,
            kappa_bulk=kappa_bulk,
            reduction_factor=reduction,
            mean_free_path=mfp,
            size_to_mfp_ratio=ratio,
            dominant_mechanism="boundary" if ratio < 1.0 else "intrinsic",
            warnings=notes,
        )

    def sweep(self, value: Kelvin | float) -> ThermalConductivityModel:
        return ThermalConductivityModel(
            self.record if self.record is not None else self.material_name,
            self.diameter,
            value,
            self._lookup,
        )

    def cache_key(self) -> Hashable:
        return (self.record or self.material_name, self.diameter, self.temperature)


__all__ = ["REFERENCE_TEMPERATURE_K", "ThermalConductivityModel"]
