"""Size-dependent bandgap of semiconductor nanocrystals (Brus equation).

    E_g(R) = E_g,bulk + hbar^2 pi^2 / (2 R^2) (1/m_e* + 1/m_h*)
             - 1.786 e^2 / (4 pi eps_0 eps_r R)

The confinement regime compares the radius with the exciton Bohr radius
a_B = eps_r (m_e / mu) a_0.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Hashable

from nanocalc.core.constants import BOHR_RADIUS_NM, E, EPSILON_0, EV_TO_J, HBAR, M_E, NM_TO_M
from nanocalc.core.errors import InvalidParameterError
from nanocalc.core.logging import get_logger
from nanocalc.core.types import ConfinementRegime, ElectronicResult
from nanocalc.core.units import Nanometer, as_quantity
from nanocalc.materials import MaterialRecord, lookup_material
from nanocalc.models.base import BaseModel
from nanocalc.validation import validate_nanocrystal

logger = get_logger(__name__)

# Electron-hole Coulomb coefficient of the Brus equation
BRUS_COULOMB_COEFFICIENT = 1.786

# R / a_B thresholds between regimes
STRONG_CONFINEMENT_MAX_RATIO = 1.0
WEAK_CONFINEMENT_MIN_RATIO = 3.0


def confinement_regime(radius_nm: float, bohr_radius_nm: float) -> ConfinementRegime:
    ratio = radius_nm / bohr_radius_nm
    if ratio < STRONG_CONFINEMENT_MAX_RATIO:
        return ConfinementRegime.STRONG
    if ratio > WEAK_CONFINEMENT_MIN_RATIO:
        return ConfinementRegime.WEAK
    return ConfinementRegime.INTERMEDIATE


class BrusModel(BaseModel):
    """Quantum-confined bandgap of a spherical nanocrystal."""

    sweep_quantity = "diameter (nm)"

    def __init__(
        self,
        material: MaterialRecord | str,
        diameter: Nanometer | float,
        lookup: Callable[[str], MaterialRecord | None] = lookup_material,
    ):
        if isinstance(material, MaterialRecord):
            self.material_name = material.name
            self.record: MaterialRecord | None = material
        else:
            self.material_name = material
            self.record = lookup(material)
        self.diameter = as_quantity(Nanometer, diameter, "diameter")
        self._lookup = lookup

    def name(self) -> str:
        return "Brus Effective Mass Model"

    def _record(self) -> MaterialRecord:
        if self.record is None:
            raise InvalidParameterError("material", f"unknown material {self.material_name!r}")
        return self.record

    def validate(self) -> None:
        record = self._record()
        for attribute in ("bandgap_ev", "electron_mass", "hole_mass", "dielectric_constant"):
            record.require(attribute)
        validate_nanocrystal(self.diameter.value)

    def warnings(self) -> tuple[str, ...]:
        return validate_nanocrystal(self.diameter.value)

    def compute(self) -> ElectronicResult:
        self.validate()
        record = self._record()
        bulk_gap = record.require("bandgap_ev")
        m_e = record.require("electron_mass")
        m_h = record.require("hole_mass")
        eps_r = record.require("dielectric_constant")

        notes = self.warnings()
        if notes:
            logger.warning(
                "Nanocrystal below characterized size",
                {"diameter": self.diameter.value, "warnings": list(notes)},
            )

        radius_nm = self.diameter.value / 2.0
        radius_m = radius_nm * NM_TO_M

        confinement_j = (
            HBAR**2 * math.pi**2 / (2.0 * radius_m**2) * (1.0 / (m_e * M_E) + 1.0 / (m_h * M_E))
        )
        coulomb_j = BRUS_COULOMB_COEFFICIENT * E**2 / (4.0 * math.pi * EPSILON_0 * eps_r * radius_m)
        confinement = confinement_j / EV_TO_J
        coulomb = coulomb_j / EV_TO_J

        reduced_mass = m_e * m_h / (m_e + m_h)
        bohr_radius = eps_r / reduced_mass * BOHR_RADIUS_NM

        return ElectronicResult(
            diameter=self.diameter.value,
            bandgap=bulk_gap + confinement - coulomb,
            bulk_bandgap=bulk_gap,
            confinement_energy=confinement,
            coulomb_correction=coulomb,
            bohr_radius=bohr_radius,
            regime=confinement_regime(radius_nm, bohr_radius),
            warnings=notes,
        )

    def sweep(self, value: Nanometer | float) -> BrusModel:
        return BrusModel(
            self.record if self.record is not None else self.material_name, value, self._lookup
        )

    def cache_key(self) -> Hashable:
        return (self.record or self.material_name, self.diameter)


__all__ = [
    "BRUS_COULOMB_COEFFICIENT",
    "confinement_regime",
    "BrusModel",
]
