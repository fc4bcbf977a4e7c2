"""
Equal-Area Conic and Cylindrical Projections.

- Albers Equal Area, EPSG 9822: conic, two standard parallels.
- Lambert Cylindrical Equal Area (ellipsoidal case), EPSG 9835.
- Lambert Cylindrical Equal Area (spherical case), EPSG 9834.

All three are expressed through the authalic q-function, so the reverse
goes through the authalic latitude β and its series inverse.

References
----------
- IOGP Publication 373-7-2, sections 3.3.4 and 3.4.
- Snyder, J.P. (1987). Map Projections - A Working Manual, pp. 76-85,
  98-103.
"""

from typing import ClassVar
import numpy as np

from common.constants import NumericalTolerances
from common.exceptions import ParameterValueError
from geospatial.numerics import (
    HALF_PI,
    authalic_q,
    latitude_from_authalic,
    signed_longitude_delta,
)
from geospatial.parameters import OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection, FormulaResult


class AlbersEqualArea(CoordinateProjection):
    """Albers Equal Area, EPSG 9822.
    
    With coincident standard parallels the cone constant takes its limit
    n = sin φ1.
    """
    
    method_name = "Albers Equal Area"
    method_code = 9822
    aliases = ("Albers", "Albers_Conic_Equal_Area")
    required_parameters = (
        P.LATITUDE_OF_FALSE_ORIGIN,
        P.LONGITUDE_OF_FALSE_ORIGIN,
        P.LATITUDE_OF_1ST_STANDARD_PARALLEL,
        P.LATITUDE_OF_2ND_STANDARD_PARALLEL,
        P.EASTING_AT_FALSE_ORIGIN,
        P.NORTHING_AT_FALSE_ORIGIN,
    )
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        e = ell.e
        phi_f = parameters.angle(P.LATITUDE_OF_FALSE_ORIGIN)
        phi1 = parameters.angle(P.LATITUDE_OF_1ST_STANDARD_PARALLEL)
        phi2 = parameters.angle(P.LATITUDE_OF_2ND_STANDARD_PARALLEL)
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_FALSE_ORIGIN)
        self.false_easting = parameters.length(P.EASTING_AT_FALSE_ORIGIN)
        self.false_northing = parameters.length(P.NORTHING_AT_FALSE_ORIGIN)
        if abs(phi1 + phi2) < NumericalTolerances.POLE:
            raise ParameterValueError(
                "Standard parallels symmetric about the equator do not define a cone."
            )
        
        self.e = e
        self.e2 = ell.e2
        m1 = self._m(phi1)
        m2 = self._m(phi2)
        alpha0 = authalic_q(np.sin(phi_f), e)
        alpha1 = authalic_q(np.sin(phi1), e)
        alpha2 = authalic_q(np.sin(phi2), e)
        if abs(phi1 - phi2) < NumericalTolerances.POLE:
            n = np.sin(phi1)
        else:
            n = (m1 * m1 - m2 * m2) / (alpha2 - alpha1)
        self.n = float(n)
        self.C = float(m1 * m1 + n * alpha1)
        self.qP = float(authalic_q(1.0, e))
        self.rho0 = self._rho(alpha0)
    
    def _m(self, phi: float) -> float:
        return np.cos(phi) / np.sqrt(1 - self.e2 * np.sin(phi) ** 2)
    
    def _rho(self, alpha: float) -> float:
        return self.ellipsoid.a * np.sqrt(self.C - self.n * alpha) / self.n
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        alpha = authalic_q(np.sin(phi), self.e)
        theta = self.n * signed_longitude_delta(lam, self.longitude_of_origin)
        rho = self._rho(alpha)
        easting = self.false_easting + rho * np.sin(theta)
        northing = self.false_northing + self.rho0 - rho * np.cos(theta)
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        a = self.ellipsoid.a
        n = self.n
        dx = x - self.false_easting
        dy = self.rho0 - (y - self.false_northing)
        rho = np.hypot(dx, dy)
        sign = np.sign(n)
        theta = np.arctan2(sign * dx, sign * dy)
        alpha = (self.C - rho * rho * n * n / (a * a)) / n
        beta = np.arcsin(alpha / self.qP)
        return latitude_from_authalic(beta, self.e2), self.longitude_of_origin + theta / n


class LambertCylindricalEqualArea(CoordinateProjection):
    """Lambert Cylindrical Equal Area (ellipsoidal case), EPSG 9835.
    
    Examples
    --------
    Clarke 1866, φ1 = 5°N, λ0 = 75°W, FE = FN = 0 maps (5°N, 78°W) to
    (-332 699.83, 554 248.45).
    """
    
    method_name = "Lambert Cylindrical Equal Area"
    method_code = 9835
    aliases = ("Lambert Cylindrical Equal Area (ellipsoidal case)", "Cylindrical_Equal_Area")
    required_parameters = (
        P.LATITUDE_OF_1ST_STANDARD_PARALLEL,
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    spherical: ClassVar[bool] = False
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        phi1 = parameters.angle(P.LATITUDE_OF_1ST_STANDARD_PARALLEL)
        if abs(phi1) >= HALF_PI:
            raise ParameterValueError(f"Standard parallel {phi1} rad lies at a pole.")
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.e = 0.0 if self.spherical else self.ellipsoid.e
        self.e2 = self.e * self.e
        self.k0 = float(np.cos(phi1) / np.sqrt(1 - self.e2 * np.sin(phi1) ** 2))
        self.qP = float(authalic_q(1.0, self.e))
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        a = self.ellipsoid.a
        q = authalic_q(np.sin(phi), self.e)
        easting = self.false_easting + a * self.k0 * signed_longitude_delta(lam, self.longitude_of_origin)
        northing = self.false_northing + a * q / (2 * self.k0)
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        a = self.ellipsoid.a
        beta = np.arcsin(2 * (y - self.false_northing) * self.k0 / (a * self.qP))
        lam = self.longitude_of_origin + (x - self.false_easting) / (a * self.k0)
        return latitude_from_authalic(beta, self.e2), lam


class LambertCylindricalEqualAreaSpherical(LambertCylindricalEqualArea):
    """Lambert Cylindrical Equal Area (spherical case), EPSG 9834.
    
    Spherical formulas with R equal to the semi-major axis.
    
    Examples
    --------
    Sphere R = 6 370 997 m, φ1 = 30°N, λ0 = 75°W maps (35°N, 80°E) to
    (14 926 125.81, 4 219 568.78).
    """
    
    method_name = "Lambert Cylindrical Equal Area (Spherical)"
    method_code = 9834
    aliases = ("Lambert Cylindrical Equal Area (spherical case)",)
    spherical = True
