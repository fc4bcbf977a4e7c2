"""
Cassini-Soldner Family.

Transverse equidistant cylindrical projection along the central meridian.

- Cassini-Soldner, EPSG 9806.
- Hyperbolic Cassini-Soldner, EPSG 9833: the Vanua Levu variant that
  bends the northing by X³/(6ρν).

The two variants share every derived constant and differ in a single
step: how the meridian distance X turns into a northing, and back. That
step is a :class:`CassiniNorthing` strategy selected by the concrete
class.

References
----------
- IOGP Publication 373-7-2, sections 3.4.3 and 3.4.3.1.
- Snyder, J.P. (1987). Map Projections - A Working Manual, pp. 92-95.
"""

from dataclasses import dataclass
from typing import Callable, ClassVar
import numpy as np

from common.constants import NumericalTolerances
from geospatial.ellipsoid import Ellipsoid
from geospatial.numerics import (
    HALF_PI,
    footpoint_latitude,
    meridian_arc,
    signed_longitude_delta,
    tan2,
)
from geospatial.parameters import OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection, FormulaResult

# Vanua Levu approximation of the meridian radius used to seed the hyperbolic reverse
HYPERBOLIC_SEED_RADIUS = 315320.0


def _plain_northing(X: float, phi: float, ellipsoid: Ellipsoid) -> float:
    return X


def _plain_arc_offset(dn: float, phi0: float, ellipsoid: Ellipsoid) -> float:
    return dn


def _hyperbolic_northing(X: float, phi: float, ellipsoid: Ellipsoid) -> float:
    rho = ellipsoid.radius_of_meridian_curvature(phi)
    nu = ellipsoid.radius_of_prime_vertical_curvature(phi)
    return X - X ** 3 / (6 * rho * nu)


def _hyperbolic_arc_offset(dn: float, phi0: float, ellipsoid: Ellipsoid) -> float:
    seed = float(np.clip(phi0 + dn / HYPERBOLIC_SEED_RADIUS, -HALF_PI, HALF_PI))
    rho = ellipsoid.radius_of_meridian_curvature(seed)
    nu = ellipsoid.radius_of_prime_vertical_curvature(seed)
    q_first = dn ** 3 / (6 * rho * nu)
    q = (dn + q_first) ** 3 / (6 * rho * nu)
    return dn + q


@dataclass(frozen=True)
class CassiniNorthing:
    """Northing step of a Cassini-Soldner variant.
    
    Attributes
    ----------
    northing : callable
        (X, φ, ellipsoid) -> northing offset from FN.
    arc_offset : callable
        (N - FN, φ0, ellipsoid) -> M1 - M0, the meridian distance of the
        footpoint measured from the origin.
    """
    northing: Callable[[float, float, Ellipsoid], float]
    arc_offset: Callable[[float, float, Ellipsoid], float]


STANDARD_NORTHING = CassiniNorthing(_plain_northing, _plain_arc_offset)
HYPERBOLIC_NORTHING = CassiniNorthing(_hyperbolic_northing, _hyperbolic_arc_offset)


class CassiniSoldner(CoordinateProjection):
    """Cassini-Soldner, EPSG 9806.
    
    Examples
    --------
    Trinidad 1903 / Trinidad Grid (Clarke 1858, φ0 = 10°26'30"N,
    λ0 = 61°20'W, FE = 430 000 links, FN = 325 000 links) maps
    (10°N, 62°W) to (66 644.94, 82 536.22) links.
    """
    
    method_name = "Cassini-Soldner"
    method_code = 9806
    aliases = ("Cassini", "Cassini_Soldner")
    required_parameters = (
        P.LATITUDE_OF_NATURAL_ORIGIN,
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    northing_step: ClassVar[CassiniNorthing] = STANDARD_NORTHING
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        self.latitude_of_origin = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.e2 = ell.e2
        self.M0 = float(meridian_arc(self.latitude_of_origin, ell.a, ell.e2))
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        ell = self.ellipsoid
        if abs(phi) >= HALF_PI - NumericalTolerances.POLE:
            dn = meridian_arc(np.sign(phi) * HALF_PI, ell.a, self.e2) - self.M0
            return self.false_easting, self.false_northing + self.northing_step.northing(dn, phi, ell)
        A = signed_longitude_delta(lam, self.longitude_of_origin) * np.cos(phi)
        T = tan2(phi)
        C = self.e2 * np.cos(phi) ** 2 / (1 - self.e2)
        nu = ell.radius_of_prime_vertical_curvature(phi)
        X = (
            meridian_arc(phi, ell.a, self.e2) - self.M0
            + nu * np.tan(phi) * (A * A / 2 + (5 - T + 6 * C) * A ** 4 / 24)
        )
        easting = self.false_easting + nu * (
            A - T * A ** 3 / 6 - (8 - T + 8 * C) * T * A ** 5 / 120
        )
        northing = self.false_northing + self.northing_step.northing(X, phi, ell)
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        ell = self.ellipsoid
        offset = self.northing_step.arc_offset(y - self.false_northing, self.latitude_of_origin, ell)
        phi1 = footpoint_latitude(self.M0 + offset, ell.a, self.e2)
        if abs(phi1) >= HALF_PI - NumericalTolerances.POLE:
            return phi1, self.longitude_of_origin
        nu1 = ell.radius_of_prime_vertical_curvature(phi1)
        rho1 = ell.radius_of_meridian_curvature(phi1)
        T1 = tan2(phi1)
        D = (x - self.false_easting) / nu1
        phi = phi1 - (nu1 * np.tan(phi1) / rho1) * (D * D / 2 - (1 + 3 * T1) * D ** 4 / 24)
        lam = self.longitude_of_origin + (
            D - T1 * D ** 3 / 3 + (1 + 3 * T1) * T1 * D ** 5 / 15
        ) / np.cos(phi1)
        return phi, lam


class HyperbolicCassiniSoldner(CassiniSoldner):
    """Hyperbolic Cassini-Soldner, EPSG 9833.
    
    Examples
    --------
    Vanua Levu 1915 / Vanua Levu Grid (Clarke 1880 (international foot),
    φ0 = 16°15'S, λ0 = 179°20'E, FE = 1 251 331.8 links,
    FN = 1 662 888.5 links) maps (16°50'29.2435"S, 179°59'39.6115"E)
    to (1 601 528.90, 1 336 966.01) links.
    """
    
    method_name = "Hyperbolic Cassini-Soldner"
    method_code = 9833
    aliases = ()
    northing_step = HYPERBOLIC_NORTHING
