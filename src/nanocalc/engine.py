"""Compute engine: validated, cached, parallel evaluation of physics models.

The engine is generic over :class:`~nanocalc.models.base.PhysicsModel`. A
sweep expands a model into one work item per input, validates every item
before any work starts, fans the items out over a thread pool and collects
the results in input order.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from nanocalc.core.config import EngineConfig
from nanocalc.core.logging import get_logger
from nanocalc.core.types import (
    CalculationRequest,
    OpticalResult,
    SpectrumRequest,
    as_wavelength_tuple,
)
from nanocalc.core.units import Kelvin, Nanometer, RefractiveIndex
from nanocalc.materials import MaterialLibrary, MaterialRecord
from nanocalc.models.base import PhysicsModel
from nanocalc.models.electronic import BrusModel
from nanocalc.models.optical import MieModel
from nanocalc.models.thermal import REFERENCE_TEMPERATURE_K, ThermalConductivityModel

logger = get_logger(__name__)


class ResultCache:
    """Thread-safe result store striped over independently locked buckets.

    Two threads missing on the same key both compute and the later ``put``
    wins; results are deterministic so either value is correct. Entries are
    never evicted.

    Args:
        buckets: Number of key buckets (and locks)
    """

    def __init__(self, buckets: int = 16):
        if buckets < 1:
            raise ValueError(f"buckets must be at least 1, got {buckets}")
        self._buckets: list[dict[Hashable, Any]] = [{} for _ in range(buckets)]
        self._locks = [threading.Lock() for _ in range(buckets)]
        self._stats_lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def _index(self, key: Hashable) -> int:
        return hash(key) % len(self._buckets)

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value or None, counting a hit or a miss."""
        i = self._index(key)
        with self._locks[i]:
            value = self._buckets[i].get(key)
        with self._stats_lock:
            if value is None:
                self.misses += 1
            else:
                self.hits += 1
        return value

    def put(self, key: Hashable, value: Any) -> None:
        i = self._index(key)
        with self._locks[i]:
            self._buckets[i][key] = value

    def __contains__(self, key: Hashable) -> bool:
        i = self._index(key)
        with self._locks[i]:
            return key in self._buckets[i]

    def __len__(self) -> int:
        total = 0
        for lock, bucket in zip(self._locks, self._buckets):
            with lock:
                total += len(bucket)
        return total

    def clear(self) -> None:
        for lock, bucket in zip(self._locks, self._buckets):
            with lock:
                bucket.clear()
        with self._stats_lock:
            self.hits = 0
            self.misses = 0

    def stats(self) -> dict[str, int]:
        with self._stats_lock:
            return {"entries": len(self), "hits": self.hits, "misses": self.misses}


class ComputeEngine:
    """Evaluates physics models with caching and parallel sweeps.

    Owns a :class:`ResultCache` and a ``ThreadPoolExecutor`` for its whole
    lifetime; use it as a context manager or call :meth:`close`.

    Args:
        config: Engine configuration (defaults if None)
        materials: Material library used to build models by material name
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        materials: MaterialLibrary | None = None,
    ):
        self.config = config or EngineConfig()
        self.materials = materials or MaterialLibrary.builtin()
        self.cache = ResultCache(self.config.cache.buckets)
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers, thread_name_prefix="nanocalc"
        )
        self._closed = False

    def __enter__(self) -> ComputeEngine:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[no-untyped-def]
        self.close()

    def close(self) -> None:
        """Shut down the worker pool and drop cached results."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)
        self.cache.clear()

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("ComputeEngine is closed")

    # Model construction

    def mie_model(self, request: CalculationRequest) -> MieModel:
        return MieModel(request, self.config.solver, self.config.limits)

    def mie_model_for_material(
        self,
        material: MaterialRecord | str,
        radius: Nanometer | float,
        wavelength: Nanometer | float,
        medium_index: RefractiveIndex | float = 1.0,
    ) -> MieModel:
        return MieModel.from_material(
            material,
            radius,
            wavelength,
            medium_index,
            lookup=self.materials.lookup_material,
            settings=self.config.solver,
            limits=self.config.limits,
        )

    def thermal_model(
        self,
        material: MaterialRecord | str,
        diameter: Nanometer | float,
        temperature: Kelvin | float = REFERENCE_TEMPERATURE_K,
    ) -> ThermalConductivityModel:
        return ThermalConductivityModel(
            material, diameter, temperature, lookup=self.materials.lookup_material
        )

    def electronic_model(
        self, material: MaterialRecord | str, diameter: Nanometer | float
    ) -> BrusModel:
        return BrusModel(material, diameter, lookup=self.materials.lookup_material)

    # Generic evaluation

    def evaluate(self, model: PhysicsModel) -> Any:
        """Validate and compute ``model``, reusing a cached result when present.

        Raises:
            ValidationError: If the model's inputs are non-physical
            CalculationError: If the computation fails
        """
        self._check_open()
        model.validate()

        if not self.config.cache.enabled:
            return model.compute()

        key = (model.name(), model.cache_key())
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit", {"model": model.name()})
            return cached

        logger.debug("Cache miss", {"model": model.name()})
        result = model.compute()
        self.cache.put(key, result)
        return result

    def evaluate_sweep(self, model: PhysicsModel, inputs: Sequence[Any]) -> list[Any]:
        """Evaluate ``model`` at every input in parallel.

        Result ``i`` belongs to ``inputs[i]``. All work items are validated
        before any is submitted. The first failure by index cancels the
        items still pending and is re-raised.

        Raises:
            ValidationError: If any work item is non-physical
            CalculationError: If any computation fails
        """
        self._check_open()
        items = [model.sweep(value) for value in inputs]
        for item in items:
            item.validate()

        logger.info(
            "Sweep started",
            {
                "model": model.name(),
                "points": len(items),
                "sweep_quantity": getattr(model, "sweep_quantity", ""),
            },
        )

        futures: list[Future[Any]] = [self._executor.submit(self.evaluate, item) for item in items]
        results: list[Any] = []
        for index, future in enumerate(futures):
            try:
                results.append(future.result())
            except Exception as e:
                for pending in futures[index + 1 :]:
                    pending.cancel()
                logger.error(
                    "Sweep aborted",
                    {
                        "model": model.name(),
                        "index": index,
                        "input": inputs[index],
                        "error": repr(e),
                    },
                )
                raise

        logger.info("Sweep finished", {"model": model.name(), "cache": self.cache.stats()})
        return results

    # Optical operations

    def calculate(self, request: CalculationRequest) -> OpticalResult:
        """Efficiencies and cross sections for one sphere at one wavelength."""
        return self.evaluate(self.mie_model(request))

    def calculate_spectrum(
        self,
        template: CalculationRequest,
        wavelengths: Sequence[float | Nanometer],
    ) -> list[OpticalResult]:
        """Evaluate ``template`` at each wavelength; result ``i`` is at ``wavelengths[i]``."""
        return self.evaluate_sweep(self.mie_model(template), as_wavelength_tuple(wavelengths))

    def run_spectrum(self, spectrum: SpectrumRequest) -> list[OpticalResult]:
        return self.calculate_spectrum(spectrum.template, spectrum.wavelengths)


def calculate(request: CalculationRequest, config: EngineConfig | None = None) -> OpticalResult:
    """Evaluate one optical request on a short-lived engine."""
    with ComputeEngine(config) as engine:
        return engine.calculate(request)


def calculate_spectrum(
    template: CalculationRequest,
    wavelengths: Sequence[float | Nanometer],
    config: EngineConfig | None = None,
) -> list[OpticalResult]:
    """Evaluate a wavelength sweep on a short-lived engine."""
    with ComputeEngine(config) as engine:
        return engine.calculate_spectrum(template, wavelengths)


__all__ = [
    "ResultCache",
    "ComputeEngine",
    "calculate",
    "calculate_spectrum",
]
