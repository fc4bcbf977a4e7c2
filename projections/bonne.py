"""
Bonne Projections.

Pseudoconical equal-area projection: parallels are concentric arcs
spaced true to scale along the central meridian, and each parallel is
true to scale along its length.

- Bonne, EPSG 9827.
- Bonne (South Orientated), EPSG 9828: the Portuguese colonial grids,
  with both axes reversed.

The latitude of natural origin must be non-zero; at zero the cone
degenerates into the Sinusoidal projection.

References
----------
- IOGP Publication 373-7-2, section 3.8.
- Snyder, J.P. (1987). Map Projections - A Working Manual, pp. 138-140.
"""

from typing import ClassVar
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


class Bonne(CoordinateProjection):
    """Bonne, EPSG 9827.
    
    ``axis_sign`` is -1 for the south orientated variant, whose grid is
    rotated by 180° about the false origin.
    """
    
    method_name = "Bonne"
    method_code = 9827
    required_parameters = (
        P.LATITUDE_OF_NATURAL_ORIGIN,
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    axis_sign: ClassVar[float] = 1.0
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        phi0 = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
        if abs(phi0) < NumericalTolerances.POLE:
            raise ParameterValueError(
                f"'{self.method_name}' requires a non-zero latitude of natural origin."
            )
        self.latitude_of_origin = phi0
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.e2 = ell.e2
        self.M0 = float(meridian_arc(phi0, ell.a, ell.e2))
        self.apex = float(ell.a * self._m(phi0) / np.sin(phi0))
    
    def _m(self, phi: float) -> float:
        return np.cos(phi) / np.sqrt(1 - self.e2 * np.sin(phi) ** 2)
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        a = self.ellipsoid.a
        rho = self.apex + self.M0 - meridian_arc(phi, a, self.e2)
        dlam = signed_longitude_delta(lam, self.longitude_of_origin)
        if rho == 0:
            T = 0.0
        else:
            T = a * self._m(phi) * dlam / rho
        s = self.axis_sign
        easting = self.false_easting + s * rho * np.sin(T)
        northing = self.false_northing + s * (self.apex - rho * np.cos(T))
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        a = self.ellipsoid.a
        s = self.axis_sign
        X = s * (x - self.false_easting)
        Y = s * (y - self.false_northing)
        sign0 = np.sign(self.latitude_of_origin)
        rho = sign0 * np.hypot(X, self.apex - Y)
        phi = footpoint_latitude(self.apex + self.M0 - rho, a, self.e2)
        if abs(abs(phi) - HALF_PI) < NumericalTolerances.POLE:
            return phi, self.longitude_of_origin
        angle = np.arctan2(sign0 * X, sign0 * (self.apex - Y))
        lam = self.longitude_of_origin + rho * angle / (a * self._m(phi))
        return phi, lam


class BonneSouthOrientated(Bonne):
    """Bonne (South Orientated), EPSG 9828."""
    
    method_name = "Bonne (South Orientated)"
    method_code = 9828
    axis_sign = -1.0
