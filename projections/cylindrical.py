"""
Simple Cylindrical and Pseudocylindrical Projections.

- Equidistant Cylindrical, EPSG 1028 (Plate Carrée when φ1 = 0).
- Miller Cylindrical (World Miller), spherical with R = a.
- Sinusoidal, equal-area pseudocylindrical.

Equidistant Cylindrical and Sinusoidal carry exact spherical formulas
for spherical figures; on an ellipsoid the meridian distance comes from
the closed-form arc series.

References
----------
- IOGP Publication 373-7-2, section 3.4.5.
- Snyder, J.P. (1987). Map Projections - A Working Manual, pp. 86-91,
  243-248.
"""

import numpy as np

from common.constants import NumericalTolerances
from common.exceptions import ParameterValueError
from geospatial.numerics import (
    HALF_PI,
    footpoint_latitude,
    meridian_arc,
    signed_longitude_delta,
)
from geospatial.parameters import OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection, FormulaResult

# Miller's flattening of the Mercator latitude scale
MILLER_FACTOR = 0.8


class EquidistantCylindrical(CoordinateProjection):
    """Equidistant Cylindrical, EPSG 1028.
    
    Examples
    --------
    WGS 84 / World Equidistant Cylindrical (φ1 = 0, λ0 = 0) maps
    (55°N, 10°E) to (1 113 194.91, 6 097 230.31).
    """
    
    method_name = "Equidistant Cylindrical"
    method_code = 1028
    aliases = ("Plate Carree", "Equirectangular")
    required_parameters = (
        P.LATITUDE_OF_1ST_STANDARD_PARALLEL,
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        phi1 = parameters.angle(P.LATITUDE_OF_1ST_STANDARD_PARALLEL)
        if abs(phi1) >= HALF_PI:
            raise ParameterValueError(f"Standard parallel {phi1} rad lies at a pole.")
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.is_sphere = self.ellipsoid.is_sphere
        nu1 = self.ellipsoid.radius_of_prime_vertical_curvature(phi1)
        self.parallel_radius = float(nu1 * np.cos(phi1))
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        a = self.ellipsoid.a
        easting = self.false_easting + self.parallel_radius * signed_longitude_delta(lam, self.longitude_of_origin)
        if self.is_sphere:
            northing = self.false_northing + a * phi
        else:
            northing = self.false_northing + meridian_arc(phi, a, self.ellipsoid.e2)
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        a = self.ellipsoid.a
        dy = y - self.false_northing
        if self.is_sphere:
            phi = dy / a
        else:
            phi = footpoint_latitude(dy, a, self.ellipsoid.e2)
        lam = self.longitude_of_origin + (x - self.false_easting) / self.parallel_radius
        return phi, lam


class MillerCylindrical(CoordinateProjection):
    """Miller Cylindrical on the sphere of radius a.
    
    Examples
    --------
    WGS 84, λ0 = 90°W maps (30°N, 110°W) to
    (-2 226 389.81587, 3 441 760.13671).
    """
    
    method_name = "Miller Cylindrical"
    aliases = ("World Miller Cylindrical", "Miller_Cylindrical")
    required_parameters = (
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.radius = self.ellipsoid.a
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        x = self.radius * signed_longitude_delta(lam, self.longitude_of_origin)
        y = self.radius * np.arcsinh(np.tan(MILLER_FACTOR * phi)) / MILLER_FACTOR
        return self.false_easting + x, self.false_northing + y
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        dy = y - self.false_northing
        phi = np.arctan(np.sinh(MILLER_FACTOR * dy / self.radius)) / MILLER_FACTOR
        lam = self.longitude_of_origin + (x - self.false_easting) / self.radius
        return phi, lam


class Sinusoidal(CoordinateProjection):
    """Sinusoidal (Sanson-Flamsteed) projection.
    
    Planar positions outside the bounding sinusoids (|λ - λ0| > π) are
    undefined on reverse.
    
    Examples
    --------
    WGS 84, λ0 = 90°W maps (30°N, 110°W) to
    (-1 929 725.60502, 3 320 113.39794).
    """
    
    method_name = "Sinusoidal"
    aliases = ("Sanson-Flamsteed",)
    required_parameters = (
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.is_sphere = self.ellipsoid.is_sphere
        self.e2 = self.ellipsoid.e2
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        a = self.ellipsoid.a
        dlam = signed_longitude_delta(lam, self.longitude_of_origin)
        if self.is_sphere:
            return self.false_easting + a * dlam * np.cos(phi), self.false_northing + a * phi
        w = np.sqrt(1 - self.e2 * np.sin(phi) ** 2)
        x = a * dlam * np.cos(phi) / w
        y = meridian_arc(phi, a, self.e2)
        return self.false_easting + x, self.false_northing + y
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        a = self.ellipsoid.a
        dx = x - self.false_easting
        dy = y - self.false_northing
        if self.is_sphere:
            phi = dy / a
            w = 1.0
        else:
            phi = footpoint_latitude(dy, a, self.e2)
            w = np.sqrt(1 - self.e2 * np.sin(phi) ** 2)
        if abs(abs(phi) - HALF_PI) < NumericalTolerances.POLE:
            return phi, self.longitude_of_origin
        dlam = dx * w / (a * np.cos(phi))
        if abs(dlam) > np.pi + NumericalTolerances.POLE:
            return None
        return phi, self.longitude_of_origin + dlam
