"""Physics models implementing the shared capability protocol."""

from .base import BaseModel, PhysicsModel
from .electronic import BrusModel
from .optical import MieModel
from .thermal import ThermalConductivityModel

__all__ = [
    "PhysicsModel",
    "BaseModel",
    "MieModel",
    "ThermalConductivityModel",
    "BrusModel",
]
