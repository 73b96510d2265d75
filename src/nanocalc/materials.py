"""Bulk material reference data and the material lookup capability.

Optical constants are tabulated against vacuum wavelength and linearly
interpolated. The built-in tables are abridged from Johnson & Christy (1972)
for the noble metals and Green (2008) for silicon; load fuller data with
:meth:`MaterialLibrary.from_yaml`.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import yaml

from nanocalc.core.errors import ConfigError, InvalidParameterError, OutOfRangeError
from nanocalc.core.units import ComplexRefractiveIndex, Nanometer, as_quantity


@dataclass(frozen=True)
class MaterialRecord:
    """Bulk properties of one material.

    Attributes:
        name: Material name, e.g. "Au"
        wavelengths_nm: Ascending wavelengths of the optical table
        n: Real part of the refractive index at each wavelength
        k: Extinction coefficient at each wavelength
        thermal_conductivity: Bulk conductivity at 300 K in W/(m K)
        mean_free_path_nm: Heat carrier mean free path at 300 K
        bandgap_ev: Bulk bandgap
        electron_mass: Electron effective mass in units of m_e
        hole_mass: Hole effective mass in units of m_e
        dielectric_constant: Static relative permittivity
    """

    name: str
    wavelengths_nm: tuple[float, ...] = ()
    n: tuple[float, ...] = ()
    k: tuple[float, ...] = ()
    thermal_conductivity: float | None = None
    mean_free_path_nm: float | None = None
    bandgap_ev: float | None = None
    electron_mass: float | None = None
    hole_mass: float | None = None
    dielectric_constant: float | None = None

    def __post_init__(self) -> None:
        sizes = {len(self.wavelengths_nm), len(self.n), len(self.k)}
        if len(sizes) != 1:
            raise ValueError(f"{self.name}: optical table columns differ in length")
        if any(b <= a for a, b in zip(self.wavelengths_nm, self.wavelengths_nm[1:])):
            raise ValueError(f"{self.name}: optical table wavelengths must be ascending")

    @property
    def has_optical_data(self) -> bool:
        return len(self.wavelengths_nm) > 0

    def require(self, attribute: str) -> float:
        """Return a scalar property, raising if the record does not define it."""
        value = getattr(self, attribute)
        if value is None:
            raise InvalidParameterError(
                attribute, f"material {self.name!r} does not define {attribute}"
            )
        return float(value)

    def refractive_index(self, wavelength: Nanometer | float) -> ComplexRefractiveIndex:
        """Interpolated complex refractive index at a vacuum wavelength.

        Raises:
            InvalidParameterError: If the record has no optical table
            OutOfRangeError: If the wavelength is outside the table
        """
        wl = as_quantity(Nanometer, wavelength, "wavelength").value
        if not self.has_optical_data:
            raise InvalidParameterError(
                "material", f"material {self.name!r} has no optical constants"
            )
        lo, hi = self.wavelengths_nm[0], self.wavelengths_nm[-1]
        if not lo <= wl <= hi:
            raise OutOfRangeError("wavelength", wl, lo, hi)
        n = float(np.interp(wl, self.wavelengths_nm, self.n))
        k = float(np.interp(wl, self.wavelengths_nm, self.k))
        return ComplexRefractiveIndex(n, k)

    @classmethod
    def from_mapping(cls, name: str, data: Mapping[str, Any]) -> MaterialRecord:
        optical = data.get("optical") or {}
        return cls(
            name=name,
            wavelengths_nm=tuple(float(v) for v in optical.get("wavelengths_nm", ())),
            n=tuple(float(v) for v in optical.get("n", ())),
            k=tuple(float(v) for v in optical.get("k", ())),
            thermal_conductivity=data.get("thermal_conductivity"),
            mean_free_path_nm=data.get("mean_free_path_nm"),
            bandgap_ev=data.get("bandgap_ev"),
            electron_mass=data.get("electron_mass"),
            hole_mass=data.get("hole_mass"),
            dielectric_constant=data.get("dielectric_constant"),
        )


_J_AND_C_WAVELENGTHS = (
    397.4, 413.3, 430.5, 450.9, 473.2, 495.9, 520.9, 548.6, 582.1, 616.8, 659.5, 704.5, 756.0,
)

GOLD = MaterialRecord(
    name="Au",
    wavelengths_nm=_J_AND_C_WAVELENGTHS,
    n=(1.47, 1.46, 1.45, 1.38, 1.31, 1.04, 0.62, 0.43, 0.29, 0.21, 0.14, 0.13, 0.14),
    k=(1.952, 1.958, 1.948, 1.914, 1.849, 1.833, 2.081, 2.455, 2.863, 3.272, 3.697, 4.103, 4.542),
    thermal_conductivity=318.0,
    mean_free_path_nm=37.7,
)

SILVER = MaterialRecord(
    name="Ag",
    wavelengths_nm=_J_AND_C_WAVELENGTHS,
    n=(0.05, 0.05, 0.04, 0.04, 0.05, 0.05, 0.05, 0.06, 0.05, 0.06, 0.05, 0.04, 0.03),
    k=(2.070, 2.275, 2.462, 2.657, 2.857, 3.093, 3.309, 3.586, 3.858, 4.152, 4.483, 4.838, 5.242),
    thermal_conductivity=429.0,
    mean_free_path_nm=53.3,
)

SILICON = MaterialRecord(
    name="Si",
    wavelengths_nm=(400.0, 450.0, 500.0, 550.0, 600.0, 650.0, 700.0, 750.0, 800.0),
    n=(5.57, 4.67, 4.30, 4.08, 3.94, 3.85, 3.78, 3.73, 3.69),
    k=(0.387, 0.145, 0.073, 0.041, 0.025, 0.016, 0.012, 0.0085, 0.0065),
    thermal_conductivity=148.0,
    mean_free_path_nm=300.0,
    bandgap_ev=1.12,
    electron_mass=0.26,
    hole_mass=0.386,
    dielectric_constant=11.7,
)

CADMIUM_SELENIDE = MaterialRecord(
    name="CdSe",
    thermal_conductivity=9.0,
    bandgap_ev=1.74,
    electron_mass=0.13,
    hole_mass=0.45,
    dielectric_constant=10.6,
)

BUILTIN_MATERIALS = (GOLD, SILVER, SILICON, CADMIUM_SELENIDE)


class MaterialLibrary:
    """Case-insensitive, thread-safe registry of material records."""

    def __init__(self, records: tuple[MaterialRecord, ...] | list[MaterialRecord] = ()):
        self._records: dict[str, MaterialRecord] = {}
        self._lock = threading.RLock()
        for record in records:
            self.register(record)

    @classmethod
    def builtin(cls) -> MaterialLibrary:
        return cls(BUILTIN_MATERIALS)

    @classmethod
    def from_yaml(cls, path: str | Path, include_builtin: bool = True) -> MaterialLibrary:
        """Load records from a YAML mapping of name -> properties.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigError: If the file is not a valid material mapping
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Material file not found: {path}")

        with open(path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Failed to parse material file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Material file {path} must contain a mapping")

        library = cls.builtin() if include_builtin else cls()
        for name, props in data.items():
            try:
                library.register(MaterialRecord.from_mapping(str(name), props or {}))
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid material {name!r} in {path}: {e}") from e
        return library

    def register(self, record: MaterialRecord) -> None:
        """Add or replace a record."""
        with self._lock:
            self._records[record.name.lower()] = record

    def lookup_material(self, name: str) -> MaterialRecord | None:
        """Return the record for ``name``, or None if unknown."""
        with self._lock:
            return self._records.get(name.strip().lower())

    def get(self, name: str) -> MaterialRecord:
        """Like lookup_material() but raises InvalidParameterError when unknown."""
        record = self.lookup_material(name)
        if record is None:
            raise InvalidParameterError("material", f"unknown material {name!r}")
        return record

    def names(self) -> list[str]:
        with self._lock:
            return sorted(r.name for r in self._records.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup_material(name) is not None

    def __iter__(self) -> Iterator[MaterialRecord]:
        with self._lock:
            return iter(list(self._records.values()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


default_library = MaterialLibrary.builtin()


def lookup_material(name: str) -> MaterialRecord | None:
    """Look up a material in the default library."""
    return default_library.lookup_material(name)


def resolve_material(
    material: MaterialRecord | str,
    lookup: Callable[[str], MaterialRecord | None] = lookup_material,
) -> MaterialRecord:
    """Return ``material`` itself, or the record ``lookup`` finds for its name.

    Raises:
        InvalidParameterError: If the name is unknown
    """
    if isinstance(material, MaterialRecord):
        return material
    record = lookup(material)
    if record is None:
        raise InvalidParameterError("material", f"unknown material {material!r}")
    return record


__all__ = [
    "MaterialRecord",
    "MaterialLibrary",
    "GOLD",
    "SILVER",
    "SILICON",
    "CADMIUM_SELENIDE",
    "BUILTIN_MATERIALS",
    "default_library",
    "lookup_material",
    "resolve_material",
]
