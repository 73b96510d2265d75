"""Mie scattering by a homogeneous sphere.

Efficiencies follow Bohren & Huffman, "Absorption and Scattering of Light by
Small Particles" (1983), chapter 4:

    Q_sca = (2/x^2) sum (2n+1) (|a_n|^2 + |b_n|^2)
    Q_ext = (2/x^2) sum (2n+1) Re(a_n + b_n)

The coefficients a_n, b_n are built from the logarithmic derivative
D_n(mx) = psi_n'(mx)/psi_n(mx), obtained by downward recurrence, and the
Riccati-Bessel functions psi_n(x), chi_n(x), obtained by upward recurrence
from n = 0. The series length is Wiscombe's n_max = x + 4 x^(1/3) + 2.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from nanocalc.core.errors import NumericalInstabilityError
from nanocalc.core.logging import get_logger
from nanocalc.core.types import CalculationRequest, OpticalResult, ResultMetadata

logger = get_logger(__name__)

DEFAULT_TRUNCATION_TOLERANCE = 1e-8

# Extra orders above max(n_max, |mx|) where the downward recurrence starts.
_DOWNWARD_PADDING = 15


@dataclass(frozen=True)
class MieSeries:
    """Summed Mie series.

    Attributes:
        a: Electric coefficients a_1..a_N actually used
        b: Magnetic coefficients b_1..b_N actually used
        q_sca: Scattering efficiency
        q_ext: Extinction efficiency
        terms_used: N
        converged: True if the truncation criterion was met before n_max
    """

    a: np.ndarray
    b: np.ndarray
    q_sca: float
    q_ext: float
    terms_used: int
    converged: bool


def size_parameter(radius: float, wavelength: float) -> float:
    """``x = 2 pi r / lambda`` (radius and wavelength in the same unit)."""
    return 2.0 * math.pi * radius / wavelength


def wiscombe_terms(x: float) -> int:
    """Number of series terms for size parameter ``x`` (Wiscombe 1980)."""
    return int(math.ceil(x + 4.0 * x ** (1.0 / 3.0) + 2.0))


def _require_finite(values: np.ndarray, what: str) -> None:
    if not np.all(np.isfinite(values)):
        bad = int(np.argmin(np.isfinite(values)))
        raise NumericalInstabilityError(f"non-finite {what} at order {bad}")


def log_derivative(z: complex, n_max: int) -> np.ndarray:
    """Logarithmic derivative D_n(z) for n = 0..n_max.

    Computed by downward recurrence ``D_{n-1} = n/z - 1/(D_n + n/z)``
    starting from zero well above ``n_max``, which is stable for complex z.
    """
    if z == 0:
        raise NumericalInstabilityError("log derivative requested at z = 0")

    n_start = max(n_max, int(math.ceil(abs(z)))) + _DOWNWARD_PADDING
    d = np.zeros(n_start + 1, dtype=np.complex128)
    current = 0j
    try:
        for n in range(n_start, 0, -1):
            ratio = n / z
            current = ratio - 1.0 / (current + ratio)
            d[n - 1] = current
    except (ZeroDivisionError, OverflowError) as e:
        raise NumericalInstabilityError(f"log derivative recurrence hit a pole at z={z}") from e

    d = d[: n_max + 1]
    _require_finite(d, "log derivative D_n(mx)")
    return d


def riccati_bessel(x: float, n_max: int) -> tuple[np.ndarray, np.ndarray]:
    """Riccati-Bessel functions psi_n(x) and chi_n(x) for n = 0..n_max.

    Upward recurrence ``f_n = (2n-1)/x f_{n-1} - f_{n-2}`` from
    psi_{-1} = cos x, psi_0 = sin x, chi_{-1} = -sin x, chi_0 = cos x.
    The Riccati-Hankel function is ``xi_n = psi_n - i chi_n``.
    """
    psi = np.empty(n_max + 1, dtype=np.float64)
    chi = np.empty(n_max + 1, dtype=np.float64)

    psi_prev, psi_curr = math.cos(x), math.sin(x)
    chi_prev, chi_curr = -math.sin(x), math.cos(x)
    psi[0] = psi_curr
    chi[0] = chi_curr

    for n in range(1, n_max + 1):
        factor = (2.0 * n - 1.0) / x
        psi_prev, psi_curr = psi_curr, factor * psi_curr - psi_prev
        chi_prev, chi_curr = chi_curr, factor * chi_curr - chi_prev
        psi[n] = psi_curr
        chi[n] = chi_curr

    return psi, chi


def mie_coefficients(m: complex, x: float, n_max: int) -> tuple[np.ndarray, np.ndarray]:
    """Scattering coefficients a_n and b_n for n = 1..n_max.

    Args:
        m: Relative refractive index n_particle / n_medium
        x: Size parameter
        n_max: Number of orders

    Returns:
        Arrays (a, b) of length n_max
    """
    d = log_derivative(m * x, n_max)
    psi, chi = riccati_bessel(x, n_max)
    _require_finite(psi, "Riccati-Bessel psi_n(x)")
    _require_finite(chi, "Riccati-Bessel chi_n(x)")
    xi = psi - 1j * chi

    n = np.arange(1, n_max + 1, dtype=np.float64)
    d_n = d[1:]
    psi_n, psi_nm1 = psi[1:], psi[:-1]
    xi_n, xi_nm1 = xi[1:], xi[:-1]

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        da = d_n / m + n / x
        db = m * d_n + n / x
        a = (da * psi_n - psi_nm1) / (da * xi_n - xi_nm1)
        b = (db * psi_n - psi_nm1) / (db * xi_n - xi_nm1)

    _require_finite(a, "coefficient a_n")
    _require_finite(b, "coefficient b_n")
    return a, b


def sum_series(
    a: np.ndarray, b: np.ndarray, x: float, tolerance: float = DEFAULT_TRUNCATION_TOLERANCE
) -> MieSeries:
    """Accumulate efficiencies with early truncation.

    The series stops at the first order whose scattering term
    ``(2n+1)(|a_n|^2 + |b_n|^2)`` is below ``tolerance`` times the largest
    term seen so far; that order is still included. If no order qualifies
    all terms are used and the series is reported as not converged.
    """
    n = np.arange(1, len(a) + 1, dtype=np.float64)
    weights = 2.0 * n + 1.0
    sca_terms = weights * (np.abs(a) ** 2 + np.abs(b) ** 2)
    ext_terms = weights * (a + b).real

    running_max = np.maximum.accumulate(sca_terms)
    below = sca_terms <= tolerance * running_max
    converged = bool(below.any())
    terms_used = int(np.argmax(below)) + 1 if converged else len(a)

    scale = 2.0 / (x * x)
    q_sca = scale * float(np.sum(sca_terms[:terms_used]))
    q_ext = scale * float(np.sum(ext_terms[:terms_used]))
    if not (math.isfinite(q_sca) and math.isfinite(q_ext)):
        raise NumericalInstabilityError(
            f"non-finite efficiency sum (q_sca={q_sca}, q_ext={q_ext})"
        )

    return MieSeries(
        a=a[:terms_used],
        b=b[:terms_used],
        q_sca=q_sca,
        q_ext=q_ext,
        terms_used=terms_used,
        converged=converged,
    )


def solve(
    request: CalculationRequest,
    tolerance: float = DEFAULT_TRUNCATION_TOLERANCE,
    warnings: tuple[str, ...] = (),
) -> OpticalResult:
    """Evaluate the Mie series for a request that has already been validated.

    Args:
        request: Sphere and illumination parameters
        tolerance: Relative truncation threshold
        warnings: Validation warnings to carry into the metadata

    Returns:
        OpticalResult; check ``metadata.converged`` before trusting it

    Raises:
        NumericalInstabilityError: If an intermediate value is not finite
    """
    x = request.size_parameter
    m = request.relative_index
    n_max = wiscombe_terms(x)

    a, b = mie_coefficients(m, x, n_max)
    series = sum_series(a, b, x, tolerance)

    q_sca = series.q_sca
    q_ext = series.q_ext
    q_abs = q_ext - q_sca

    area = request.geometry.geometric_cross_section
    notes = tuple(warnings)
    if not series.converged:
        notes += (
            f"Series not converged: {n_max} terms exhausted before the "
            f"{tolerance:g} truncation criterion was met",
        )

    logger.debug(
        "Mie series summed",
        {
            "size_parameter": x,
            "n_max": n_max,
            "terms_used": series.terms_used,
            "converged": series.converged,
        },
    )

    return OpticalResult(
        wavelength=request.wavelength.value,
        q_sca=q_sca,
        q_abs=q_abs,
        q_ext=q_ext,
        c_sca=q_sca * area,
        c_abs=q_abs * area,
        c_ext=q_ext * area,
        metadata=ResultMetadata(
            size_parameter=x,
            number_of_terms_used=series.terms_used,
            converged=series.converged,
            warnings=notes,
        ),
    )


def rayleigh_efficiencies(m: complex, x: float) -> tuple[float, float, float]:
    """Small-particle (x << 1) limit.

    Returns:
        (q_sca, q_abs, q_ext) with ``Q_sca = 8/3 x^4 |F|^2`` and
        ``Q_abs = 4 x Im(F)``, ``F = (m^2 - 1)/(m^2 + 2)``
    """
    m2 = m * m
    polarizability = (m2 - 1.0) / (m2 + 2.0)
    q_sca = (8.0 / 3.0) * x**4 * abs(polarizability) ** 2
    q_abs = 4.0 * x * polarizability.imag
    return q_sca, q_abs, q_sca + q_abs


__all__ = [
    "DEFAULT_TRUNCATION_TOLERANCE",
    "MieSeries",
    "size_parameter",
    "wiscombe_terms",
    "log_derivative",
    "riccati_bessel",
    "mie_coefficients",
    "sum_series",
    "solve",
    "rayleigh_efficiencies",
]
