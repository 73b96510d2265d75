"""Tests for the compute engine: caching, sweeps and lifecycle."""

import logging
import threading

import pytest

from nanocalc.core.config import CacheSettings, EngineConfig, SolverSettings
from nanocalc.core.errors import ConvergenceError, InvalidParameterError, OutOfRangeError
from nanocalc.core.types import SpectrumRequest, ThermalResult
from nanocalc.engine import ComputeEngine, ResultCache, calculate, calculate_spectrum
from nanocalc.models.base import PhysicsModel
from nanocalc.models.optical import MieModel

WAVELENGTHS = [400.0, 450.0, 520.0, 600.0, 700.0, 800.0]


def test_cache_coherence(engine, gold_in_water):
    fresh = MieModel(gold_in_water).compute()
    first = engine.calculate(gold_in_water)
    second = engine.calculate(gold_in_water)

    assert first == fresh
    assert second == fresh
    assert second.q_ext == fresh.q_ext
    assert engine.cache.hits == 1
    assert engine.cache.misses == 1
    assert len(engine.cache) == 1


def test_cache_can_be_disabled(gold_in_water):
    config = EngineConfig(cache=CacheSettings(enabled=False))
    with ComputeEngine(config) as eng:
        eng.calculate(gold_in_water)
        eng.calculate(gold_in_water)
        assert len(eng.cache) == 0


def test_spectrum_index_alignment(engine, gold_in_water):
    results = engine.calculate_spectrum(gold_in_water, WAVELENGTHS)

    assert len(results) == len(WAVELENGTHS)
    for wavelength, result in zip(WAVELENGTHS, results):
        assert result.wavelength == wavelength
        assert result == MieModel(gold_in_water.with_wavelength(wavelength)).compute()


def test_spectrum_reverse_order_is_aligned(engine, gold_in_water):
    forward = engine.calculate_spectrum(gold_in_water, WAVELENGTHS)
    backward = engine.calculate_spectrum(gold_in_water, WAVELENGTHS[::-1])
    assert backward == forward[::-1]


def test_run_spectrum_request(engine, gold_in_water):
    spectrum = SpectrumRequest(gold_in_water, tuple(WAVELENGTHS))
    assert len(spectrum) == len(WAVELENGTHS)
    results = engine.run_spectrum(spectrum)
    assert [r.wavelength for r in results] == WAVELENGTHS


def test_empty_spectrum(engine, gold_in_water):
    assert engine.calculate_spectrum(gold_in_water, []) == []


def test_spectrum_validates_before_computing(engine, gold_in_water):
    with pytest.raises(OutOfRangeError) as excinfo:
        engine.calculate_spectrum(gold_in_water, [400.0, 500.0, -1.0, 600.0])
    assert excinfo.value.parameter == "wavelength"
    assert len(engine.cache) == 0


def test_spectrum_aborts_on_calculation_error(gold_in_water):
    config = EngineConfig(max_workers=2, solver=SolverSettings(truncation_tolerance=0.0))
    with ComputeEngine(config) as eng:
        with pytest.raises(ConvergenceError):
            eng.calculate_spectrum(gold_in_water, WAVELENGTHS)


def test_non_strict_spectrum_returns_flagged_results(gold_in_water):
    settings = SolverSettings(truncation_tolerance=0.0, strict_convergence=False)
    with ComputeEngine(EngineConfig(solver=settings)) as eng:
        results = eng.calculate_spectrum(gold_in_water, WAVELENGTHS)
    assert all(not r.metadata.converged for r in results)


def test_concurrent_callers_share_cache(engine, gold_in_water):
    requests = [gold_in_water.with_wavelength(w) for w in WAVELENGTHS]
    expected = [MieModel(r).compute() for r in requests]
    failures = []

    def worker():
        for request, want in zip(requests, expected):
            if engine.calculate(request) != want:
                failures.append(request)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert failures == []
    assert len(engine.cache) == len(requests)
    assert engine.cache.hits + engine.cache.misses == 8 * len(requests)


def test_models_satisfy_protocol(engine, gold_in_water):
    assert isinstance(engine.mie_model(gold_in_water), PhysicsModel)
    assert isinstance(engine.thermal_model("Si", 50.0), PhysicsModel)
    assert isinstance(engine.electronic_model("CdSe", 4.0), PhysicsModel)


def test_thermal_sweep(engine):
    temperatures = [150.0, 300.0, 600.0]
    results = engine.evaluate_sweep(engine.thermal_model("Si", 50.0), temperatures)

    assert [r.temperature for r in results] == temperatures
    assert all(isinstance(r, ThermalResult) for r in results)
    assert results[1].kappa_eff == pytest.approx(148.0 / 7.0)
    # Higher temperature: shorter mean free path, smaller bulk conductivity
    assert results[2].kappa_bulk < results[1].kappa_bulk < results[0].kappa_bulk
    assert results[2].reduction_factor > results[1].reduction_factor


def test_electronic_sweep(engine):
    diameters = [2.5, 4.0, 8.0, 20.0]
    results = engine.evaluate_sweep(engine.electronic_model("CdSe", 4.0), diameters)

    assert [r.diameter for r in results] == diameters
    gaps = [r.bandgap for r in results]
    assert gaps == sorted(gaps, reverse=True)


def test_material_sweep_interpolates_index(engine):
    model = engine.mie_model_for_material("Au", 20.0, 520.9, medium_index=1.33)
    results = engine.evaluate_sweep(model, [450.9, 520.9, 616.8])
    assert len(results) == 3
    assert len({r.q_ext for r in results}) == 3


def test_material_sweep_outside_table_raises(engine):
    model = engine.mie_model_for_material("Au", 20.0, 520.9)
    with pytest.raises(OutOfRangeError):
        engine.evaluate_sweep(model, [500.0, 1200.0])


def test_unknown_material_raises(engine):
    with pytest.raises(InvalidParameterError):
        engine.evaluate(engine.thermal_model("unobtainium", 10.0))


def test_closed_engine_rejects_work(gold_in_water):
    eng = ComputeEngine()
    eng.close()
    assert eng.closed
    with pytest.raises(RuntimeError):
        eng.calculate(gold_in_water)
    eng.close()


def test_module_level_helpers(gold_in_water):
    single = calculate(gold_in_water)
    assert single == MieModel(gold_in_water).compute()
    spectrum = calculate_spectrum(gold_in_water, [500.0, 600.0])
    assert [r.wavelength for r in spectrum] == [500.0, 600.0]


def test_sweep_logging(engine, gold_in_water, caplog):
    caplog.set_level(logging.INFO, logger="nanocalc")
    engine.calculate_spectrum(gold_in_water, WAVELENGTHS[:2])
    started = [r for r in caplog.records if r.getMessage() == "Sweep started"]
    assert len(started) == 1
    assert started[0].extra_data["points"] == 2


def test_result_cache_buckets():
    cache = ResultCache(buckets=4)
    for i in range(20):
        cache.put(("key", i), i)
    assert len(cache) == 20
    assert ("key", 3) in cache
    assert cache.get(("key", 3)) == 3
    assert cache.get(("missing", 0)) is None
    assert cache.stats() == {"entries": 20, "hits": 1, "misses": 1}

    cache.clear()
    assert len(cache) == 0
    assert cache.hits == 0

    with pytest.raises(ValueError):
        ResultCache(buckets=0)
