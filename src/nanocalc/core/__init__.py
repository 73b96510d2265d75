"""Core module with constants, units, types, errors, config, and logging."""

__all__ = [
    "constants",
    "units",
    "types",
    "errors",
    "logging",
    "config",
]
