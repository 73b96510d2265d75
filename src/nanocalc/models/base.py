"""Capability protocol and abstract base for physics models.

The compute engine works with any object satisfying :class:`PhysicsModel`;
it never inspects which concrete model it was handed. New domains are added
by implementing the protocol, usually by subclassing :class:`BaseModel`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Hashable, Sequence
from typing import Any, Protocol, runtime_checkable

from nanocalc.core.errors import ValidationError


@runtime_checkable
class PhysicsModel(Protocol):
    """Protocol for physics models.

    All models must implement:
    - name(), description(): identification
    - validate(): raise ValidationError for non-physical inputs
    - warnings(): non-fatal notes about the input regime
    - compute(): evaluate at the model's own parameters
    - compute_spectrum(): evaluate over a sweep of inputs
    - sweep(): a copy of the model at one sweep input
    - cache_key(): hashable canonical form of all defining parameters
    """

    def name(self) -> str:
        ...

    def description(self) -> str:
        ...

    def validate(self) -> None:
        ...

    def warnings(self) -> tuple[str, ...]:
        ...

    def compute(self) -> Any:
        ...

    def compute_spectrum(self, inputs: Sequence[Any]) -> list[Any]:
        ...

    def sweep(self, value: Any) -> PhysicsModel:
        ...

    def cache_key(self) -> Hashable:
        ...


class BaseModel(ABC):
    """Abstract base class for models with common functionality."""

    #: Human readable description of the quantity swept by compute_spectrum
    sweep_quantity = ""

    @abstractmethod
    def name(self) -> str:
        """Human-readable name of the model."""

    def description(self) -> str:
        doc = (self.__doc__ or "").strip()
        return doc.splitlines()[0] if doc else ""

    @abstractmethod
    def validate(self) -> None:
        """Raise ValidationError if the parameters are non-physical."""

    def warnings(self) -> tuple[str, ...]:
        return ()

    def is_applicable(self) -> bool:
        """True if validate() passes."""
        try:
            self.validate()
        except ValidationError:
            return False
        return True

    @abstractmethod
    def compute(self) -> Any:
        """Evaluate the model."""

    @abstractmethod
    def sweep(self, value: Any) -> BaseModel:
        """Return a copy of this model at one sweep input."""

    @abstractmethod
    def cache_key(self) -> Hashable:
        """Canonical, hashable form of every parameter that affects compute()."""

    def compute_spectrum(self, inputs: Sequence[Any]) -> list[Any]:
        """Evaluate sequentially over ``inputs``; result i belongs to input i.

        The first failing input aborts the sweep and its error propagates.
        """
        return [self.sweep(value).compute() for value in inputs]


__all__ = [
    "PhysicsModel",
    "BaseModel",
]
