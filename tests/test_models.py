"""Tests for the thermal and electronic models and the material library."""

import pytest

from nanocalc.core.errors import ConfigError, InvalidParameterError, OutOfRangeError
from nanocalc.core.types import ConfinementRegime
from nanocalc.core.units import ComplexRefractiveIndex, Kelvin, Nanometer
from nanocalc.materials import (
    CADMIUM_SELENIDE,
    GOLD,
    SILICON,
    MaterialLibrary,
    MaterialRecord,
    lookup_material,
    resolve_material,
)
from nanocalc.models.electronic import BrusModel, confinement_regime
from nanocalc.models.optical import MieModel
from nanocalc.models.thermal import ThermalConductivityModel

ENERGY_REL_TOL = 1e-4


# Thermal


def test_silicon_boundary_scattering():
    result = ThermalConductivityModel("Si", 50.0).compute()

    assert result.kappa_bulk == pytest.approx(148.0)
    assert result.mean_free_path == pytest.approx(300.0)
    assert result.reduction_factor == pytest.approx(1.0 / 7.0)
    assert result.kappa_eff == pytest.approx(148.0 / 7.0)
    assert result.size_to_mfp_ratio == pytest.approx(50.0 / 300.0)
    assert result.dominant_mechanism == "boundary"
    assert result.warnings == ()


def test_large_particle_approaches_bulk():
    result = ThermalConductivityModel(GOLD, Nanometer(10_000.0), Kelvin(300.0)).compute()
    assert result.dominant_mechanism == "intrinsic"
    assert result.kappa_eff == pytest.approx(318.0, rel=0.01)


def test_temperature_scaling():
    result = ThermalConductivityModel("Si", 50.0, 150.0).compute()
    assert result.kappa_bulk == pytest.approx(296.0)
    assert result.mean_free_path == pytest.approx(600.0)
    assert result.reduction_factor == pytest.approx(1.0 / 13.0)


def test_low_temperature_warns():
    result = ThermalConductivityModel("Si", 50.0, 50.0).compute()
    assert len(result.warnings) == 1
    assert "100 K" in result.warnings[0]


def test_thermal_rejects_non_physical_inputs():
    with pytest.raises(OutOfRangeError):
        ThermalConductivityModel("Si", 0.0).compute()
    with pytest.raises(OutOfRangeError):
        ThermalConductivityModel("Si", 50.0, -1.0).compute()


def test_thermal_requires_mean_free_path():
    model = ThermalConductivityModel(CADMIUM_SELENIDE, 10.0)
    assert not model.is_applicable()
    with pytest.raises(InvalidParameterError) as excinfo:
        model.compute()
    assert excinfo.value.parameter == "mean_free_path_nm"


def test_thermal_sweep_keeps_material():
    model = ThermalConductivityModel("Si", 50.0)
    swept = model.sweep(200.0)
    assert swept.record is SILICON
    assert swept.temperature == Kelvin(200.0)
    assert swept.cache_key() != model.cache_key()


# Electronic


def test_cdse_quantum_dot():
    result = BrusModel("CdSe", 4.0).compute()

    assert result.confinement_energy == pytest.approx(0.93204, rel=ENERGY_REL_TOL)
    assert result.coulomb_correction == pytest.approx(0.12131, rel=ENERGY_REL_TOL)
    assert result.bandgap == pytest.approx(2.5507, rel=ENERGY_REL_TOL)
    assert result.bohr_radius == pytest.approx(5.561, rel=1e-3)
    assert result.regime is ConfinementRegime.STRONG
    assert result.warnings == ()


def test_large_nanocrystal_approaches_bulk():
    result = BrusModel("CdSe", 200.0).compute()
    assert result.bandgap == pytest.approx(1.74, abs=0.01)
    assert result.regime is ConfinementRegime.WEAK


def test_intermediate_regime():
    assert BrusModel("CdSe", 20.0).compute().regime is ConfinementRegime.INTERMEDIATE
    assert confinement_regime(1.0, 2.0) is ConfinementRegime.STRONG
    assert confinement_regime(4.0, 2.0) is ConfinementRegime.INTERMEDIATE
    assert confinement_regime(7.0, 2.0) is ConfinementRegime.WEAK


def test_tiny_nanocrystal_warns():
    result = BrusModel("CdSe", 1.5).compute()
    assert any("effective mass" in w for w in result.warnings)


def test_brus_requires_semiconductor_data():
    with pytest.raises(InvalidParameterError) as excinfo:
        BrusModel("Au", 4.0).compute()
    assert excinfo.value.parameter == "bandgap_ev"


def test_brus_rejects_non_positive_diameter():
    with pytest.raises(OutOfRangeError):
        BrusModel("Si", -2.0).compute()


def test_model_names_and_descriptions():
    models = [
        BrusModel("CdSe", 4.0),
        ThermalConductivityModel("Si", 50.0),
        MieModel.from_material("Au", 20.0, 520.9),
    ]
    names = [m.name() for m in models]
    assert len(set(names)) == 3
    assert all(m.description() for m in models)


# Materials


def test_lookup_is_case_insensitive():
    assert lookup_material("au") is GOLD
    assert lookup_material("  AU ") is GOLD
    assert lookup_material("cdse") is CADMIUM_SELENIDE
    assert lookup_material("unobtainium") is None


def test_resolve_material():
    assert resolve_material(SILICON) is SILICON
    assert resolve_material("si") is SILICON
    with pytest.raises(InvalidParameterError):
        resolve_material("unobtainium")


def test_refractive_index_interpolation():
    assert GOLD.refractive_index(520.9) == ComplexRefractiveIndex(0.62, 2.081)
    midpoint = GOLD.refractive_index((520.9 + 548.6) / 2)
    assert midpoint.real == pytest.approx((0.62 + 0.43) / 2)
    assert midpoint.imag == pytest.approx((2.081 + 2.455) / 2)


def test_refractive_index_outside_table():
    with pytest.raises(OutOfRangeError) as excinfo:
        GOLD.refractive_index(300.0)
    assert excinfo.value.minimum == pytest.approx(397.4)
    with pytest.raises(InvalidParameterError):
        CADMIUM_SELENIDE.refractive_index(500.0)


def test_mie_from_material_sweeps_index():
    model = MieModel.from_material("Au", 20.0, 520.9, medium_index=1.33)
    assert model.request.particle_index == ComplexRefractiveIndex(0.62, 2.081)
    swept = model.sweep(616.8)
    assert swept.request.particle_index == ComplexRefractiveIndex(0.21, 3.272)
    assert swept.request.medium_index.value == 1.33


def test_record_rejects_ragged_table():
    with pytest.raises(ValueError):
        MaterialRecord(name="bad", wavelengths_nm=(400.0, 500.0), n=(1.0,), k=(0.0, 0.0))
    with pytest.raises(ValueError):
        MaterialRecord(name="bad", wavelengths_nm=(500.0, 400.0), n=(1.0, 1.0), k=(0.0, 0.0))


def test_library_from_yaml(tmp_path):
    path = tmp_path / "materials.yaml"
    path.write_text(
        "ZnO:\n"
        "  bandgap_ev: 3.37\n"
        "  electron_mass: 0.24\n"
        "  hole_mass: 0.59\n"
        "  dielectric_constant: 8.5\n"
        "  optical:\n"
        "    wavelengths_nm: [400, 600]\n"
        "    n: [2.1, 2.0]\n"
        "    k: [0.0, 0.0]\n",
        encoding="utf-8",
    )
    library = MaterialLibrary.from_yaml(path)

    assert "zno" in library
    assert "Au" in library
    assert len(library) == 5
    assert library.get("ZnO").refractive_index(500.0).real == pytest.approx(2.05)

    result = BrusModel("ZnO", 6.0, lookup=library.lookup_material).compute()
    assert result.bandgap > 3.37

    only_file = MaterialLibrary.from_yaml(path, include_builtin=False)
    assert only_file.names() == ["ZnO"]


def test_library_from_bad_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        MaterialLibrary.from_yaml(path)

    path.write_text("X:\n  optical:\n    wavelengths_nm: [1, 2]\n    n: [1]\n    k: [0, 0]\n")
    with pytest.raises(ConfigError):
        MaterialLibrary.from_yaml(path)

    with pytest.raises(FileNotFoundError):
        MaterialLibrary.from_yaml(tmp_path / "missing.yaml")
