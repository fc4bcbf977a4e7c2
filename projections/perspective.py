"""
Vertical Perspective Projections.

The view of the ellipsoid from a point vertically above a topocentric
origin. Points are first converted to topocentric coordinates (U, V, W)
about the origin, then projected onto the tangent plane.

- Vertical Perspective, EPSG 9838: viewpoint at a finite height H.
- Vertical Perspective (Orthographic case), EPSG 9839: viewpoint at
  infinity, so E = U and N = V.

Both use the ellipsoidal height of the input point. Neither has a
closed-form reverse: a planar position does not determine the height of
the point seen there, so ``reverse`` always returns ``UNDEFINED``.

References
----------
- IOGP Publication 373-7-2, sections 3.6.3 and 4.1.4 (topocentric).
"""

import numpy as np

from geospatial.numerics import signed_longitude_delta
from geospatial.parameters import OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection, FormulaResult

_TOPOCENTRIC_ORIGIN = (
    P.LATITUDE_OF_TOPOCENTRIC_ORIGIN,
    P.LONGITUDE_OF_TOPOCENTRIC_ORIGIN,
    P.ELLIPSOIDAL_HEIGHT_OF_TOPOCENTRIC_ORIGIN,
)


class VerticalPerspectiveOrthographic(CoordinateProjection):
    """Vertical Perspective (Orthographic case), EPSG 9839.
    
    Forward-only. The grid is the (U, V) topocentric plane with its
    origin at the topocentric origin; there is no false origin.
    """
    
    method_name = "Vertical Perspective (Orthographic case)"
    method_code = 9839
    required_parameters = _TOPOCENTRIC_ORIGIN
    is_reversible = False
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        self.phi0 = parameters.angle(P.LATITUDE_OF_TOPOCENTRIC_ORIGIN)
        self.lambda0 = parameters.angle(P.LONGITUDE_OF_TOPOCENTRIC_ORIGIN)
        self.h0 = parameters.length(P.ELLIPSOIDAL_HEIGHT_OF_TOPOCENTRIC_ORIGIN)
        self.nu0 = float(self.ellipsoid.radius_of_prime_vertical_curvature(self.phi0))
    
    def _topocentric(self, phi: float, lam: float, height: float):
        """Topocentric (U, V, W) of a geographic position, in meters."""
        e2 = self.ellipsoid.e2
        nu = self.ellipsoid.radius_of_prime_vertical_curvature(phi)
        sin0, cos0 = np.sin(self.phi0), np.cos(self.phi0)
        dlam = signed_longitude_delta(lam, self.lambda0)
        r = nu + height
        correction = e2 * (self.nu0 * sin0 - nu * np.sin(phi))
        U = r * np.cos(phi) * np.sin(dlam)
        V = r * (np.sin(phi) * cos0 - np.cos(phi) * sin0 * np.cos(dlam)) + correction * cos0
        W = (
            r * (np.sin(phi) * sin0 + np.cos(phi) * cos0 * np.cos(dlam))
            + correction * sin0
            - (self.nu0 + self.h0)
        )
        return U, V, W
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        U, V, _ = self._topocentric(phi, lam, height)
        return U, V
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        return None


class VerticalPerspective(VerticalPerspectiveOrthographic):
    """Vertical Perspective, EPSG 9838.
    
    E = U·H / (H - W), N = V·H / (H - W), where H is the viewpoint height
    above the topocentric origin. Points at or above the viewpoint plane
    are undefined.
    """
    
    method_name = "Vertical Perspective"
    method_code = 9838
    required_parameters = _TOPOCENTRIC_ORIGIN + (P.VIEWPOINT_HEIGHT,)
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        super()._setup(parameters)
        self.viewpoint_height = parameters.length(P.VIEWPOINT_HEIGHT)
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        U, V, W = self._topocentric(phi, lam, height)
        H = self.viewpoint_height
        if H - W <= 0:
            return None
        return U * H / (H - W), V * H / (H - W)
