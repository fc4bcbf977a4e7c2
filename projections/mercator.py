"""
Mercator Projection Family.

Normal-aspect conformal cylindrical projections. The variants differ only
in where the scale factor comes from and whether the spherical formulas
are forced:

- Mercator (variant A), EPSG 9804: scale factor at the equator given.
- Mercator (variant B), EPSG 9805: scale derived from a standard parallel.
- Mercator (Spherical), EPSG 1026: spherical formulas.
- Popular Visualisation Pseudo Mercator, EPSG 1024: spherical formulas
  applied to ellipsoidal coordinates with R = a.

The projection is undefined at the poles; the forward transformation
returns ``UNDEFINED`` for |φ| within 1e-10 rad of π/2.

References
----------
- IOGP Publication 373-7-2, section 3.5.1.
- Snyder, J.P. (1987). Map Projections - A Working Manual, pp. 38-47.
"""

from abc import abstractmethod
from typing import ClassVar
import numpy as np

from common.constants import NumericalTolerances
from common.exceptions import ParameterValueError
from geospatial.numerics import (
    HALF_PI,
    isometric_latitude,
    latitude_from_conformal,
    signed_longitude_delta,
)
from geospatial.parameters import OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection, FormulaResult


class MercatorProjection(CoordinateProjection):
    """Shared Mercator formulas.
    
    Subclasses supply the scale factor at the equator through
    :meth:`_scale_factor`.
    """
    
    spherical: ClassVar[bool] = False
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.scale_factor = self._scale_factor(parameters)
        self.use_sphere = self.spherical or self.ellipsoid.is_sphere
        self.e = 0.0 if self.use_sphere else self.ellipsoid.e
        self.e2 = self.e * self.e
        self.radius = self.ellipsoid.a * self.scale_factor
    
    @abstractmethod
    def _scale_factor(self, parameters: OperationParameterSet) -> float:
        """Scale factor along the equator."""
        pass
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        if abs(phi) >= HALF_PI - NumericalTolerances.POLE:
            return None
        easting = self.false_easting + self.radius * signed_longitude_delta(lam, self.longitude_of_origin)
        northing = self.false_northing + self.radius * isometric_latitude(phi, self.e)
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        t = np.exp((self.false_northing - y) / self.radius)
        chi = HALF_PI - 2 * np.arctan(t)
        phi = chi if self.use_sphere else latitude_from_conformal(chi, self.e2)
        lam = self.longitude_of_origin + (x - self.false_easting) / self.radius
        return phi, lam


def _require_equatorial_origin(parameters: OperationParameterSet, method_name: str) -> None:
    latitude = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
    if abs(latitude) > NumericalTolerances.POLE:
        raise ParameterValueError(
            f"'{method_name}' requires a latitude of natural origin of zero, got {latitude} rad."
        )


class MercatorA(MercatorProjection):
    """Mercator (variant A), EPSG 9804.
    
    Examples
    --------
    Bessel 1841, λ0 = 110°E, k0 = 0.997, FE = 3 900 000 m, FN = 900 000 m
    maps (3°S, 120°E) to (5 009 726.58, 569 150.82).
    """
    
    method_name = "Mercator (variant A)"
    method_code = 9804
    aliases = ("Mercator (1SP)", "Mercator_1SP")
    required_parameters = (
        P.LATITUDE_OF_NATURAL_ORIGIN,
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.SCALE_FACTOR_AT_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    
    def _scale_factor(self, parameters: OperationParameterSet) -> float:
        _require_equatorial_origin(parameters, self.method_name)
        return parameters.scale(P.SCALE_FACTOR_AT_NATURAL_ORIGIN)


class MercatorB(MercatorProjection):
    """Mercator (variant B), EPSG 9805.
    
    The scale factor is exact along the standard parallels ±φ1:
    k0 = cos φ1 / sqrt(1 - e² sin² φ1).
    """
    
    method_name = "Mercator (variant B)"
    method_code = 9805
    aliases = ("Mercator (2SP)", "Mercator_2SP")
    required_parameters = (
        P.LATITUDE_OF_1ST_STANDARD_PARALLEL,
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    
    def _scale_factor(self, parameters: OperationParameterSet) -> float:
        phi1 = parameters.angle(P.LATITUDE_OF_1ST_STANDARD_PARALLEL)
        if abs(phi1) >= HALF_PI:
            raise ParameterValueError(f"Standard parallel {phi1} rad lies at a pole.")
        return float(np.cos(phi1) / np.sqrt(1 - self.ellipsoid.e2 * np.sin(phi1) ** 2))


class MercatorSpherical(MercatorProjection):
    """Mercator (Spherical), EPSG 1026.
    
    Spherical formulas with R equal to the semi-major axis of the supplied
    figure, which is normally a sphere.
    """
    
    method_name = "Mercator (Spherical)"
    method_code = 1026
    required_parameters = (
        P.LATITUDE_OF_NATURAL_ORIGIN,
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    spherical = True
    
    def _scale_factor(self, parameters: OperationParameterSet) -> float:
        _require_equatorial_origin(parameters, self.method_name)
        return 1.0


class PseudoMercator(MercatorProjection):
    """Popular Visualisation Pseudo Mercator, EPSG 1024.
    
    Ellipsoidal latitude and longitude are treated as spherical with
    R = a. The result is not conformal on the ellipsoid.
    """
    
    method_name = "Popular Visualisation Pseudo Mercator"
    method_code = 1024
    aliases = ("Web Mercator", "Pseudo Mercator")
    required_parameters = (
        P.LATITUDE_OF_NATURAL_ORIGIN,
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    spherical = True
    
    def _scale_factor(self, parameters: OperationParameterSet) -> float:
        _require_equatorial_origin(parameters, self.method_name)
        return 1.0
