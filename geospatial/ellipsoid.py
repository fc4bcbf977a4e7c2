"""
Reference Ellipsoid Model.

This module implements the ellipsoid consumed by every projection: the
defining semi-major axis and flattening, the eccentricity family derived
from them once at construction, and the radii of curvature as pure
functions of latitude.

Scientific Context
------------------
Domain: Geodesy, Earth geometry
Model: Oblate ellipsoid of revolution; the sphere is the special case
e = 0 and is represented by the same type.

References
----------
- IOGP Publication 373-7-2, Guidance Note 7 part 2, section 1.2.
- Snyder, J.P. (1987). Map Projections - A Working Manual. USGS Prof.
  Paper 1395, pp. 12-25.
- Torge, W. (2001). Geodesy (3rd ed.). de Gruyter.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Union
import numpy as np
from numpy.typing import NDArray
import pint

from common.constants import Constant, EllipsoidConstants, NumericalTolerances
from common.exceptions import EllipsoidError
from common.logging_config import get_logger
from common.units import Q_, to_metres
from geospatial.numerics import authalic_q, sin2

logger = get_logger(__name__)

Latitude = Union[float, NDArray[np.float64]]


@dataclass(frozen=True)
class Ellipsoid:
    """An immutable reference ellipsoid.
    
    Attributes
    ----------
    a : float
        Semi-major axis (equatorial radius) in meters.
    inverse_flattening : float
        1/f; ``numpy.inf`` for a sphere.
    name : str
        Identifier for the ellipsoid.
    unit : str
        Unit in which the ellipsoid was defined (display only; ``a`` is
        always stored in meters).
        
    Derived Parameters
    ------------------
    f : float
        Flattening: f = (a - b) / a
    b : float
        Semi-minor axis (polar radius) in meters.
    e, e2, e4, e6, e8 : float
        First eccentricity and its even powers.
    ep2 : float
        Second eccentricity squared: e'² = (a² - b²) / b²
    is_sphere : bool
        True when the eccentricity is negligible.
    """
    a: float
    inverse_flattening: float
    name: str = "unnamed"
    unit: str = "meter"
    f: float = field(init=False)
    b: float = field(init=False)
    e: float = field(init=False)
    e2: float = field(init=False)
    e4: float = field(init=False)
    e6: float = field(init=False)
    e8: float = field(init=False)
    ep2: float = field(init=False)
    is_sphere: bool = field(init=False)
    
    def __post_init__(self):
        """Validate the defining parameters and derive the rest."""
        if not np.isfinite(self.a) or self.a <= 0:
            raise EllipsoidError(f"Semi-major axis must be positive, got {self.a}.")
        if np.isinf(self.inverse_flattening):
            f = 0.0
        elif self.inverse_flattening > 1:
            f = 1.0 / self.inverse_flattening
        else:
            raise EllipsoidError(
                f"Inverse flattening must exceed 1 (or be infinite for a sphere), "
                f"got {self.inverse_flattening}."
            )
        e2 = f * (2 - f)
        e = float(np.sqrt(e2))
        derived = {
            "f": f,
            "b": self.a * (1 - f),
            "e": e,
            "e2": e2,
            "e4": e2 ** 2,
            "e6": e2 ** 3,
            "e8": e2 ** 4,
            "ep2": e2 / (1 - e2),
            "is_sphere": e < NumericalTolerances.SPHERE_ECCENTRICITY,
        }
        for key, value in derived.items():
            object.__setattr__(self, key, value)
    
    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    
    @classmethod
    def from_inverse_flattening(
        cls,
        semi_major_axis: Union[float, pint.Quantity],
        inverse_flattening: float,
        name: str = "unnamed"
    ) -> 'Ellipsoid':
        """Create an ellipsoid from a and 1/f; bare axis values are meters."""
        unit = str(semi_major_axis.units) if isinstance(semi_major_axis, pint.Quantity) else "meter"
        return cls(to_metres(semi_major_axis), float(inverse_flattening), name, unit)
    
    @classmethod
    def from_flattening(
        cls,
        semi_major_axis: Union[float, pint.Quantity],
        flattening: float,
        name: str = "unnamed"
    ) -> 'Ellipsoid':
        """Create an ellipsoid from a and f."""
        if not 0 <= flattening < 1:
            raise EllipsoidError(f"Flattening must lie in [0, 1), got {flattening}.")
        inverse = np.inf if flattening == 0 else 1.0 / flattening
        return cls.from_inverse_flattening(semi_major_axis, inverse, name)
    
    @classmethod
    def from_semi_minor_axis(
        cls,
        semi_major_axis: Union[float, pint.Quantity],
        semi_minor_axis: Union[float, pint.Quantity],
        name: str = "unnamed"
    ) -> 'Ellipsoid':
        """Create an ellipsoid from both axes."""
        a = to_metres(semi_major_axis)
        b = to_metres(semi_minor_axis)
        if not 0 < b <= a:
            raise EllipsoidError(
                f"Semi-minor axis must lie in (0, a], got b={b}, a={a}."
            )
        return cls.from_flattening(semi_major_axis, (a - b) / a, name)
    
    @classmethod
    def from_eccentricity(
        cls,
        semi_major_axis: Union[float, pint.Quantity],
        eccentricity: float,
        name: str = "unnamed"
    ) -> 'Ellipsoid':
        """Create an ellipsoid from a and e."""
        if not 0 <= eccentricity < 1:
            raise EllipsoidError(f"Eccentricity must lie in [0, 1), got {eccentricity}.")
        return cls.from_flattening(semi_major_axis, 1 - np.sqrt(1 - eccentricity ** 2), name)
    
    @classmethod
    def sphere(cls, radius: Union[float, pint.Quantity], name: str = "sphere") -> 'Ellipsoid':
        """Create a sphere of the given radius."""
        return cls.from_inverse_flattening(radius, np.inf, name)
    
    def scaled(self, factor: float) -> 'Ellipsoid':
        """Return a copy with both axes multiplied by ``factor``.
        
        Used by grids that define an ellipsoid scaling factor (Michigan
        State Plane).
        """
        if not np.isfinite(factor) or factor <= 0:
            raise EllipsoidError(f"Ellipsoid scaling factor must be positive, got {factor}.")
        return replace(self, a=self.a * factor, name=f"{self.name} x {factor}")
    
    # ------------------------------------------------------------------
    # Radii of curvature
    # ------------------------------------------------------------------
    
    def _check_latitude(self, latitude: Latitude) -> None:
        limit = np.pi / 2 + NumericalTolerances.LATITUDE_OVERSHOOT
        if np.any(np.abs(latitude) > limit):
            raise ValueError(f"Latitude {latitude} rad out of range [-π/2, π/2].")
    
    def radius_of_meridian_curvature(self, latitude: Latitude) -> Latitude:
        """Radius of curvature in the meridian, ρ = a(1 - e²) / (1 - e² sin²φ)^(3/2).
        
        Parameters
        ----------
        latitude : float or ndarray
            Geodetic latitude in radians.
            
        Returns
        -------
        float or ndarray
            ρ in meters.
        """
        self._check_latitude(latitude)
        return self.a * (1 - self.e2) / (1 - self.e2 * sin2(latitude)) ** 1.5
    
    def radius_of_prime_vertical_curvature(self, latitude: Latitude) -> Latitude:
        """Radius of curvature in the prime vertical, ν = a / (1 - e² sin²φ)^(1/2).
        
        Parameters
        ----------
        latitude : float or ndarray
            Geodetic latitude in radians.
            
        Returns
        -------
        float or ndarray
            ν in meters.
        """
        self._check_latitude(latitude)
        return self.a / np.sqrt(1 - self.e2 * sin2(latitude))
    
    def radius_of_parallel_curvature(self, latitude: Latitude) -> Latitude:
        """Radius of the parallel circle, ν cos φ."""
        return self.radius_of_prime_vertical_curvature(latitude) * np.cos(latitude)
    
    def radius_of_conformal_sphere(self, latitude: Latitude) -> Latitude:
        """Radius of the conformal (Gaussian) sphere at a latitude, sqrt(ρν).
        
        Notes
        -----
        Equivalent to a sqrt(1 - e²) / (1 - e² sin²φ), the form used by the
        Oblique Stereographic and Krovak projections.
        """
        self._check_latitude(latitude)
        return self.a * np.sqrt(1 - self.e2) / (1 - self.e2 * sin2(latitude))
    
    def radius_of_authalic_sphere(self) -> float:
        """Radius of the sphere with the same surface area, R_q = a sqrt(q_P / 2)."""
        if self.is_sphere:
            return self.a
        return float(self.a * np.sqrt(authalic_q(1.0, self.e) / 2))


def _from_constants(
    name: str,
    semi_major_axis: Constant,
    second: Constant,
    second_is_axis: bool
) -> Ellipsoid:
    a = Q_(semi_major_axis.value, semi_major_axis.unit)
    if second_is_axis:
        return Ellipsoid.from_semi_minor_axis(a, Q_(second.value, second.unit), name)
    return Ellipsoid.from_inverse_flattening(a, second.value, name)


class ReferenceEllipsoids:
    """Catalogue of named reference ellipsoids.
    
    Examples
    --------
    >>> ReferenceEllipsoids.WGS84.a
    6378137.0
    >>> ReferenceEllipsoids.by_name("Airy 1830").name
    'Airy 1830'
    """
    
    C = EllipsoidConstants
    
    WGS84 = _from_constants("WGS 84", C.WGS84_SEMI_MAJOR_AXIS, C.WGS84_INVERSE_FLATTENING, False)
    GRS80 = _from_constants("GRS 1980", C.GRS80_SEMI_MAJOR_AXIS, C.GRS80_INVERSE_FLATTENING, False)
    AIRY_1830 = _from_constants("Airy 1830", C.AIRY_1830_SEMI_MAJOR_AXIS, C.AIRY_1830_INVERSE_FLATTENING, False)
    BESSEL_1841 = _from_constants("Bessel 1841", C.BESSEL_1841_SEMI_MAJOR_AXIS, C.BESSEL_1841_INVERSE_FLATTENING, False)
    CLARKE_1866 = _from_constants("Clarke 1866", C.CLARKE_1866_SEMI_MAJOR_AXIS, C.CLARKE_1866_SEMI_MINOR_AXIS, True)
    CLARKE_1880_IGN = _from_constants("Clarke 1880 (IGN)", C.CLARKE_1880_IGN_SEMI_MAJOR_AXIS, C.CLARKE_1880_IGN_SEMI_MINOR_AXIS, True)
    CLARKE_1858 = _from_constants("Clarke 1858", C.CLARKE_1858_SEMI_MAJOR_AXIS, C.CLARKE_1858_SEMI_MINOR_AXIS, True)
    INTERNATIONAL_1924 = _from_constants("International 1924", C.INTERNATIONAL_1924_SEMI_MAJOR_AXIS, C.INTERNATIONAL_1924_INVERSE_FLATTENING, False)
    KRASSOWSKY_1940 = _from_constants("Krassowsky 1940", C.KRASSOWSKY_1940_SEMI_MAJOR_AXIS, C.KRASSOWSKY_1940_INVERSE_FLATTENING, False)
    EVEREST_1967 = _from_constants("Everest 1830 (1967 Definition)", C.EVEREST_1967_SEMI_MAJOR_AXIS, C.EVEREST_1967_INVERSE_FLATTENING, False)
    GRS80_AUTHALIC_SPHERE = Ellipsoid.sphere(C.GRS80_AUTHALIC_SPHERE_RADIUS.value, "GRS 1980 Authalic Sphere")
    CLARKE_1866_AUTHALIC_SPHERE = Ellipsoid.sphere(C.CLARKE_1866_AUTHALIC_SPHERE_RADIUS.value, "Clarke 1866 Authalic Sphere")
    
    del C
    
    @classmethod
    def all(cls) -> Dict[str, Ellipsoid]:
        """All catalogue ellipsoids keyed by name."""
        return {
            value.name: value
            for value in vars(cls).values()
            if isinstance(value, Ellipsoid)
        }
    
    @classmethod
    def by_name(cls, name: str) -> Ellipsoid:
        """Look up an ellipsoid by its name, ignoring case and spaces.
        
        Raises
        ------
        EllipsoidError
            If no catalogue ellipsoid has that name.
        """
        wanted = name.replace(" ", "").lower()
        for key, value in vars(cls).items():
            if not isinstance(value, Ellipsoid):
                continue
            if wanted in (value.name.replace(" ", "").lower(), key.replace("_", "").lower()):
                return value
        raise EllipsoidError(f"Unknown reference ellipsoid '{name}'.")
