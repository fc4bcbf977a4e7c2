"""
Numeric Kernel for Projection Formulas.

Small stateless helpers used throughout the projection formulas. They
accept Python floats or numpy arrays so that the same expressions serve
the scalar and batch interfaces.

The series expansions collected here are the ones shared between several
projection families: the inverse of the conformal and authalic latitudes,
and the meridian arc with its footpoint-latitude inverse.

References
----------
- IOGP Publication 373-7-2, Guidance Note 7 part 2 (2019), sections 3.2-3.3.
- Snyder, J.P. (1987). Map Projections - A Working Manual, eqs. 3-5, 3-18,
  3-21, 3-26.
"""

from typing import Callable, Optional, Union
import numpy as np
from numpy.typing import NDArray

ArrayLike = Union[float, NDArray[np.float64]]

HALF_PI = np.pi / 2
QUARTER_PI = np.pi / 4
TWO_PI = 2 * np.pi


def sin2(x: ArrayLike) -> ArrayLike:
    """sin²x"""
    s = np.sin(x)
    return s * s


def cos2(x: ArrayLike) -> ArrayLike:
    """cos²x"""
    c = np.cos(x)
    return c * c


def cos4(x: ArrayLike) -> ArrayLike:
    """cos⁴x"""
    return cos2(x) ** 2


def tan2(x: ArrayLike) -> ArrayLike:
    """tan²x"""
    t = np.tan(x)
    return t * t


def tan4(x: ArrayLike) -> ArrayLike:
    """tan⁴x"""
    return tan2(x) ** 2


def cot(x: ArrayLike) -> ArrayLike:
    """Cotangent; infinite at multiples of π."""
    return np.cos(x) / np.sin(x)


def asinh(x: ArrayLike) -> ArrayLike:
    """Inverse hyperbolic sine."""
    return np.arcsinh(x)


def atanh(x: ArrayLike) -> ArrayLike:
    """Inverse hyperbolic tangent."""
    return np.arctanh(x)


def signed_longitude_delta(longitude: ArrayLike, origin: ArrayLike) -> ArrayLike:
    """Difference ``longitude - origin`` reduced to (-π, π].
    
    Examples
    --------
    >>> round(float(signed_longitude_delta(np.radians(179), np.radians(-179))), 6)
    -0.034907
    """
    delta = np.asarray(longitude) - origin
    wrapped = -np.mod(np.pi - delta, TWO_PI) + np.pi
    return wrapped if np.ndim(wrapped) else float(wrapped)


def conformal_t(phi: ArrayLike, e: float) -> ArrayLike:
    """The conformal t-value tan(π/4 - φ/2) / ((1 - e sinφ)/(1 + e sinφ))^(e/2).
    
    Shared by the Lambert Conformal Conic and Polar Stereographic families.
    """
    e_sin = e * np.sin(phi)
    return np.tan(QUARTER_PI - phi / 2) / ((1 - e_sin) / (1 + e_sin)) ** (e / 2)


def latitude_from_t(t: ArrayLike, e: float, iterations: int = 10) -> ArrayLike:
    """Invert :func:`conformal_t` with a fixed number of iterations.
    
    φ = π/2 - 2 atan(t ((1 - e sinφ)/(1 + e sinφ))^(e/2)), started from the
    spherical value. Ten steps reach machine precision for terrestrial
    eccentricities, so the count is fixed rather than tolerance driven.
    """
    phi = HALF_PI - 2 * np.arctan(t)
    for _ in range(iterations):
        e_sin = e * np.sin(phi)
        phi = HALF_PI - 2 * np.arctan(t * ((1 - e_sin) / (1 + e_sin)) ** (e / 2))
    return phi


def isometric_latitude(phi: ArrayLike, e: float) -> ArrayLike:
    """Isometric latitude ln[tan(π/4 + φ/2) ((1 - e sinφ)/(1 + e sinφ))^(e/2)]."""
    e_sin = e * np.sin(phi)
    return np.log(np.tan(QUARTER_PI + phi / 2)) + (e / 2) * np.log((1 - e_sin) / (1 + e_sin))


def latitude_from_conformal(chi: ArrayLike, e2: float) -> ArrayLike:
    """Geodetic latitude from conformal latitude χ (series to e⁸).
    
    Used by Mercator, Polar Stereographic and Hotine Oblique Mercator.
    """
    e4 = e2 * e2
    e6 = e4 * e2
    e8 = e6 * e2
    return (
        chi
        + (e2 / 2 + 5 * e4 / 24 + e6 / 12 + 13 * e8 / 360) * np.sin(2 * chi)
        + (7 * e4 / 48 + 29 * e6 / 240 + 811 * e8 / 11520) * np.sin(4 * chi)
        + (7 * e6 / 120 + 81 * e8 / 1120) * np.sin(6 * chi)
        + (4279 * e8 / 161280) * np.sin(8 * chi)
    )


def authalic_q(sin_phi: ArrayLike, e: float) -> ArrayLike:
    """Authalic q = (1 - e²)[sinφ/(1 - e² sin²φ) - (1/2e) ln((1 - e sinφ)/(1 + e sinφ))].
    
    Reduces to 2 sinφ on the sphere.
    """
    if e == 0:
        return 2 * sin_phi
    e2 = e * e
    e_sin = e * sin_phi
    return (1 - e2) * (
        sin_phi / (1 - e2 * sin_phi * sin_phi)
        - (1 / (2 * e)) * np.log((1 - e_sin) / (1 + e_sin))
    )


def latitude_from_authalic(beta: ArrayLike, e2: float) -> ArrayLike:
    """Geodetic latitude from authalic latitude β (series to e⁶).
    
    Used by Albers, Lambert Azimuthal and Lambert Cylindrical Equal Area.
    """
    e4 = e2 * e2
    e6 = e4 * e2
    return (
        beta
        + (e2 / 3 + 31 * e4 / 180 + 517 * e6 / 5040) * np.sin(2 * beta)
        + (23 * e4 / 360 + 251 * e6 / 3780) * np.sin(4 * beta)
        + (761 * e6 / 45360) * np.sin(6 * beta)
    )


def _meridian_coefficients(e2: float):
    e4 = e2 * e2
    e6 = e4 * e2
    e8 = e6 * e2
    e10 = e8 * e2
    e12 = e10 * e2
    e14 = e12 * e2
    return (
        1 - e2 / 4 - 3 * e4 / 64 - 5 * e6 / 256 - 175 * e8 / 16384
        - 441 * e10 / 65536 - 4851 * e12 / 1048576 - 14157 * e14 / 4194304,
        -3 * e2 / 8 - 3 * e4 / 32 - 45 * e6 / 1024 - 105 * e8 / 4096
        - 2205 * e10 / 131072 - 6237 * e12 / 524288 - 297297 * e14 / 33554432,
        15 * e4 / 256 + 45 * e6 / 1024 + 525 * e8 / 16384 + 1575 * e10 / 65536
        + 155925 * e12 / 8388608 + 495495 * e14 / 33554432,
        -35 * e6 / 3072 - 175 * e8 / 12288 - 3675 * e10 / 262144
        - 13475 * e12 / 1048576 - 385385 * e14 / 33554432,
        315 * e8 / 131072 + 2205 * e10 / 524288 + 43659 * e12 / 8388608
        + 189189 * e14 / 33554432,
        -693 * e10 / 1310720 - 6237 * e12 / 5242880 - 297297 * e14 / 167772160,
        1001 * e12 / 8388608 + 11011 * e14 / 33554432,
        -6435 * e14 / 234881024,
    )


def meridian_arc(phi: ArrayLike, a: float, e2: float) -> ArrayLike:
    """Length of the meridian arc from the equator to latitude φ.
    
    Closed-form series to e¹⁴ (EPSG method 1028). Truncation error is far
    below a millimetre for terrestrial ellipsoids.
    
    Parameters
    ----------
    phi : float or ndarray
        Geodetic latitude in radians.
    a : float
        Semi-major axis in meters.
    e2 : float
        First eccentricity squared.
        
    Returns
    -------
    float or ndarray
        Arc length M in meters, signed like φ.
    """
    coefficients = _meridian_coefficients(e2)
    total = coefficients[0] * phi
    for k, coefficient in enumerate(coefficients[1:], start=1):
        total = total + coefficient * np.sin(2 * k * phi)
    return a * total


def footpoint_latitude(m: ArrayLike, a: float, e2: float) -> ArrayLike:
    """Latitude whose meridian arc is ``m``; inverse of :func:`meridian_arc`.
    
    Uses the rectifying latitude μ and the series in n = (1 - sqrt(1 - e²)) /
    (1 + sqrt(1 - e²)) to seventh order.
    """
    mu = m / (a * _meridian_coefficients(e2)[0])
    root = np.sqrt(1 - e2)
    n = (1 - root) / (1 + root)
    n2 = n * n
    n3 = n2 * n
    n4 = n3 * n
    n5 = n4 * n
    n6 = n5 * n
    n7 = n6 * n
    return (
        mu
        + (3 * n / 2 - 27 * n3 / 32 + 269 * n5 / 512 - 6607 * n7 / 24576) * np.sin(2 * mu)
        + (21 * n2 / 16 - 55 * n4 / 32 + 6759 * n6 / 4096) * np.sin(4 * mu)
        + (151 * n3 / 96 - 417 * n5 / 128 + 87963 * n7 / 20480) * np.sin(6 * mu)
        + (1097 * n4 / 512 - 15543 * n6 / 2560) * np.sin(8 * mu)
        + (8011 * n5 / 2560 - 69119 * n7 / 6144) * np.sin(10 * mu)
        + (293393 * n6 / 61440) * np.sin(12 * mu)
        + (6845701 * n7 / 860160) * np.sin(14 * mu)
    )


def iterate(
    step: Callable[[float], float],
    initial: float,
    tolerance: float,
    max_iterations: int
) -> Optional[float]:
    """Fixed-point iteration ``x = step(x)`` with a convergence cap.
    
    Parameters
    ----------
    step : callable
        Maps the current estimate to the next one.
    initial : float
        Starting estimate.
    tolerance : float
        Iteration stops once two successive estimates differ by less.
    max_iterations : int
        Number of steps allowed.
        
    Returns
    -------
    float or None
        The converged estimate, or None if the cap was reached or an
        estimate became non-finite.
    """
    current = initial
    for _ in range(max_iterations):
        following = step(current)
        if not np.isfinite(following):
            return None
        if abs(following - current) < tolerance:
            return following
        current = following
    return None
