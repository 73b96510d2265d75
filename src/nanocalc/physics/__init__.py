"""Physics solvers."""

__all__ = ["mie"]
