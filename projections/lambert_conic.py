"""
Lambert Conic Conformal Family.

Conformal conic projections of the ellipsoid. All variants share one
forward and one reverse formula over four derived constants: the cone
constant n, the product a·F (including any scale factor), the radius r0 of
the parallel through the grid origin, and the grid origin itself. The
variants differ only in how those constants are derived:

- 1SP (EPSG 9801) and 1SP West Orientated (EPSG 9826) from a natural
  origin and scale factor;
- 2SP (EPSG 9802), 2SP Belgium (EPSG 9803) and 2SP Michigan (EPSG 1051)
  from two standard parallels and a false origin.

Lambert Conic Near-Conformal (EPSG 9817) truncates the meridian
distance series and is implemented separately.

References
----------
- IOGP Publication 373-7-2, section 3.2.1.
- Snyder, J.P. (1987). Map Projections - A Working Manual, pp. 104-110.
"""

from abc import abstractmethod
from typing import ClassVar, NamedTuple
import numpy as np

from common.constants import NumericalTolerances
from common.exceptions import ParameterValueError
from geospatial.ellipsoid import Ellipsoid
from geospatial.numerics import (
    HALF_PI,
    conformal_t,
    iterate,
    latitude_from_t,
    signed_longitude_delta,
)
from geospatial.parameters import OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection, FormulaResult

# Rotation applied by the Belgian Lambert 1972 grid (29.2985 arc-seconds)
BELGIUM_ROTATION = float(np.radians(29.2985 / 3600))


class ConeConstants(NamedTuple):
    """Constants shared by every Lambert Conic Conformal variant."""
    longitude_of_origin: float
    easting_of_origin: float
    northing_of_origin: float
    n: float
    aF: float
    r0: float


def _m(phi: float, e2: float) -> float:
    return np.cos(phi) / np.sqrt(1 - e2 * np.sin(phi) ** 2)


def one_standard_parallel_constants(
    parameters: OperationParameterSet,
    ellipsoid: Ellipsoid
) -> ConeConstants:
    """Derive cone constants from a natural origin and scale factor."""
    phi0 = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
    if abs(phi0) < 1e-10 or abs(phi0) >= HALF_PI:
        raise ParameterValueError(
            f"Latitude of natural origin {phi0} rad does not define a cone."
        )
    k0 = parameters.scale(P.SCALE_FACTOR_AT_NATURAL_ORIGIN)
    e = ellipsoid.e
    n = np.sin(phi0)
    t0 = conformal_t(phi0, e)
    F = _m(phi0, ellipsoid.e2) / (n * t0 ** n)
    aF = ellipsoid.a * F * k0
    return ConeConstants(
        longitude_of_origin=parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN),
        easting_of_origin=parameters.length(P.FALSE_EASTING),
        northing_of_origin=parameters.length(P.FALSE_NORTHING),
        n=float(n),
        aF=float(aF),
        r0=float(aF * t0 ** n),
    )


def two_standard_parallel_constants(
    parameters: OperationParameterSet,
    ellipsoid: Ellipsoid
) -> ConeConstants:
    """Derive cone constants from two standard parallels and a false origin."""
    phiF = parameters.angle(P.LATITUDE_OF_FALSE_ORIGIN)
    phi1 = parameters.angle(P.LATITUDE_OF_1ST_STANDARD_PARALLEL)
    phi2 = parameters.angle(P.LATITUDE_OF_2ND_STANDARD_PARALLEL)
    if abs(phi1 + phi2) < 1e-10:
        raise ParameterValueError("Standard parallels symmetric about the equator do not define a cone.")
    e = ellipsoid.e
    e2 = ellipsoid.e2
    m1, m2 = _m(phi1, e2), _m(phi2, e2)
    t1, t2, tF = conformal_t(phi1, e), conformal_t(phi2, e), conformal_t(phiF, e)
    if abs(phi1 - phi2) < 1e-12:
        n = np.sin(phi1)
    else:
        n = (np.log(m1) - np.log(m2)) / (np.log(t1) - np.log(t2))
    F = m1 / (n * t1 ** n)
    aF = ellipsoid.a * F
    return ConeConstants(
        longitude_of_origin=parameters.angle(P.LONGITUDE_OF_FALSE_ORIGIN),
        easting_of_origin=parameters.length(P.EASTING_AT_FALSE_ORIGIN),
        northing_of_origin=parameters.length(P.NORTHING_AT_FALSE_ORIGIN),
        n=float(n),
        aF=float(aF),
        r0=float(aF * tF ** n),
    )


_NATURAL_ORIGIN = (
    P.LATITUDE_OF_NATURAL_ORIGIN,
    P.LONGITUDE_OF_NATURAL_ORIGIN,
    P.SCALE_FACTOR_AT_NATURAL_ORIGIN,
    P.FALSE_EASTING,
    P.FALSE_NORTHING,
)

_FALSE_ORIGIN = (
    P.LATITUDE_OF_FALSE_ORIGIN,
    P.LONGITUDE_OF_FALSE_ORIGIN,
    P.LATITUDE_OF_1ST_STANDARD_PARALLEL,
    P.LATITUDE_OF_2ND_STANDARD_PARALLEL,
    P.EASTING_AT_FALSE_ORIGIN,
    P.NORTHING_AT_FALSE_ORIGIN,
)


class LambertConicConformal(CoordinateProjection):
    """Shared Lambert Conic Conformal formulas.
    
    Subclasses implement :meth:`_cone` and may set ``west_orientated`` or
    ``rotation``.
    """
    
    west_orientated: ClassVar[bool] = False
    rotation: ClassVar[float] = 0.0
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        self.cone_ellipsoid = self._cone_ellipsoid(parameters)
        self.e = self.cone_ellipsoid.e
        self.constants = self._cone(parameters, self.cone_ellipsoid)
    
    def _cone_ellipsoid(self, parameters: OperationParameterSet) -> Ellipsoid:
        return self.ellipsoid
    
    @abstractmethod
    def _cone(self, parameters: OperationParameterSet, ellipsoid: Ellipsoid) -> ConeConstants:
        """Derive the cone constants from the operation parameters."""
        pass
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        c = self.constants
        if np.sign(phi) != np.sign(c.n) and abs(phi) >= HALF_PI - NumericalTolerances.POLE:
            return None
        t = conformal_t(phi, self.e)
        r = c.aF * t ** c.n
        theta = c.n * signed_longitude_delta(lam, c.longitude_of_origin) - self.rotation
        offset = r * np.sin(theta)
        easting = c.easting_of_origin - offset if self.west_orientated else c.easting_of_origin + offset
        northing = c.northing_of_origin + c.r0 - r * np.cos(theta)
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        c = self.constants
        dx = c.easting_of_origin - x if self.west_orientated else x - c.easting_of_origin
        dy = c.r0 - (y - c.northing_of_origin)
        sign = np.sign(c.n)
        r = sign * np.hypot(dx, dy)
        theta = np.arctan2(sign * dx, sign * dy)
        t = (r / c.aF) ** (1 / c.n)
        phi = latitude_from_t(t, self.e)
        lam = (theta + self.rotation) / c.n + c.longitude_of_origin
        return phi, lam


class LambertConicConformal1SP(LambertConicConformal):
    """Lambert Conic Conformal (1SP), EPSG 9801."""
    
    method_name = "Lambert Conic Conformal (1SP)"
    method_code = 9801
    aliases = ("Lambert_Conformal_Conic_1SP",)
    required_parameters = _NATURAL_ORIGIN
    
    def _cone(self, parameters, ellipsoid):
        return one_standard_parallel_constants(parameters, ellipsoid)


class LambertConicConformal1SPWestOrientated(LambertConicConformal):
    """Lambert Conic Conformal (West Orientated), EPSG 9826.
    
    Easting increases towards the west.
    """
    
    method_name = "Lambert Conic Conformal (West Orientated)"
    method_code = 9826
    required_parameters = _NATURAL_ORIGIN
    west_orientated = True
    
    def _cone(self, parameters, ellipsoid):
        return one_standard_parallel_constants(parameters, ellipsoid)


class LambertConicConformal2SP(LambertConicConformal):
    """Lambert Conic Conformal (2SP), EPSG 9802."""
    
    method_name = "Lambert Conic Conformal (2SP)"
    method_code = 9802
    aliases = ("Lambert_Conformal_Conic_2SP",)
    required_parameters = _FALSE_ORIGIN
    
    def _cone(self, parameters, ellipsoid):
        return two_standard_parallel_constants(parameters, ellipsoid)


class LambertConicConformal2SPBelgium(LambertConicConformal):
    """Lambert Conic Conformal (2SP Belgium), EPSG 9803.
    
    The grid is rotated by 29.2985 arc-seconds about the cone axis.
    """
    
    method_name = "Lambert Conic Conformal (2SP Belgium)"
    method_code = 9803
    required_parameters = _FALSE_ORIGIN
    rotation = BELGIUM_ROTATION
    
    def _cone(self, parameters, ellipsoid):
        return two_standard_parallel_constants(parameters, ellipsoid)


class LambertConicConformal2SPMichigan(LambertConicConformal):
    """Lambert Conic Conformal (2SP Michigan), EPSG 1051.
    
    The ellipsoid is enlarged by the ellipsoid scaling factor K before the
    cone is derived.
    """
    
    method_name = "Lambert Conic Conformal (2SP Michigan)"
    method_code = 1051
    required_parameters = _FALSE_ORIGIN + (P.ELLIPSOID_SCALING_FACTOR,)
    
    def _cone_ellipsoid(self, parameters):
        return self.ellipsoid.scaled(parameters.scale(P.ELLIPSOID_SCALING_FACTOR))
    
    def _cone(self, parameters, ellipsoid):
        return two_standard_parallel_constants(parameters, ellipsoid)


class LambertConicNearConformal(CoordinateProjection):
    """Lambert Conic Near-Conformal, EPSG 9817.
    
    Uses a truncated (cubic) expansion of the meridian distance, as
    defined for the Levant zone grids. Not strictly conformal; the reverse
    solves the cubic and the meridian distance by Newton iteration.
    """
    
    method_name = "Lambert Conic Near-Conformal"
    method_code = 9817
    required_parameters = _NATURAL_ORIGIN
    tolerance: ClassVar[float] = 1e-12
    max_iterations: ClassVar[int] = 50
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        self.phi0 = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
        if abs(self.phi0) < 1e-10 or abs(self.phi0) >= HALF_PI:
            raise ParameterValueError(
                f"Latitude of natural origin {self.phi0} rad does not define a cone."
            )
        self.lambda0 = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.k0 = parameters.scale(P.SCALE_FACTOR_AT_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        
        n = ell.f / (2 - ell.f)
        a = ell.a
        rho0 = ell.radius_of_meridian_curvature(self.phi0)
        nu0 = ell.radius_of_prime_vertical_curvature(self.phi0)
        self.A = 1 / (6 * rho0 * nu0)
        self.series = (
            a * (1 - n + 5 * (n**2 - n**3) / 4 + 81 * (n**4 - n**5) / 64),
            3 * a * (n - n**2 + 7 * (n**3 - n**4) / 8 + 55 * n**5 / 64) / 2,
            15 * a * (n**2 - n**3 + 3 * (n**4 - n**5) / 4) / 16,
            35 * a * (n**3 - n**4 + 11 * n**5 / 16) / 48,
            315 * a * (n**4 - n**5) / 512,
        )
        self.sin_phi0 = float(np.sin(self.phi0))
        self.r0 = float(self.k0 * nu0 / np.tan(self.phi0))
        self.s0 = self._s(self.phi0)
    
    def _s(self, phi: float) -> float:
        A_, B_, C_, D_, E_ = self.series
        return (
            A_ * phi - B_ * np.sin(2 * phi) + C_ * np.sin(4 * phi)
            - D_ * np.sin(6 * phi) + E_ * np.sin(8 * phi)
        )
    
    def _ds(self, phi: float) -> float:
        A_, B_, C_, D_, E_ = self.series
        return (
            A_ - 2 * B_ * np.cos(2 * phi) + 4 * C_ * np.cos(4 * phi)
            - 6 * D_ * np.cos(6 * phi) + 8 * E_ * np.cos(8 * phi)
        )
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        m = self._s(phi) - self.s0
        M = self.k0 * (m + self.A * m ** 3)
        r = self.r0 - M
        theta = signed_longitude_delta(lam, self.lambda0) * self.sin_phi0
        easting = self.false_easting + r * np.sin(theta)
        northing = self.false_northing + M + r * np.sin(theta) * np.tan(theta / 2)
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        sign = np.sign(self.phi0)
        dx = x - self.false_easting
        dy = self.r0 - (y - self.false_northing)
        theta = np.arctan2(sign * dx, sign * dy)
        r = sign * np.hypot(dx, dy)
        M = self.r0 - r
        k0, A = self.k0, self.A
        m = iterate(
            lambda m_: m_ - (M - k0 * m_ - k0 * A * m_ ** 3) / (-k0 - 3 * k0 * A * m_ ** 2),
            M / k0, 1e-6, self.max_iterations
        )
        if m is None:
            return None
        target = m + self.s0
        phi = iterate(
            lambda p: p + (target - self._s(p)) / self._ds(p),
            self.phi0 + m / self.series[0], self.tolerance, self.max_iterations
        )
        if phi is None:
            return None
        lam = self.lambda0 + theta / self.sin_phi0
        return phi, lam
