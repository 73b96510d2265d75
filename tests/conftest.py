import logging
import random

import numpy as np
import pytest

from nanocalc.core.config import EngineConfig
from nanocalc.core.types import CalculationRequest
from nanocalc.core.units import ComplexRefractiveIndex, Nanometer, RefractiveIndex
from nanocalc.engine import ComputeEngine


@pytest.fixture(autouse=True)
def seed_rng() -> None:
    random.seed(0)
    np.random.seed(0)


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("nanocalc")
    for handler in list(package_logger.handlers):
        handler.close()
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture()
def engine():
    with ComputeEngine(EngineConfig(max_workers=4)) as eng:
        yield eng


@pytest.fixture()
def gold_in_water() -> CalculationRequest:
    """50 nm gold sphere in water at 520 nm."""
    return CalculationRequest(
        radius=Nanometer(50.0),
        wavelength=Nanometer(520.0),
        particle_index=ComplexRefractiveIndex(0.47, 2.40),
        medium_index=RefractiveIndex(1.33),
    )
