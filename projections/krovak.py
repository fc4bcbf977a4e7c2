"""
Krovak Oblique Conformal Conic Family.

The Krovak projection maps the ellipsoid conformally onto the Gaussian
sphere, rotates the sphere so that the cone axis becomes the pole, and
projects onto a conformal cone tangent along the pseudo standard
parallel. It is used by the S-JTSK grid of the Czech Republic and
Slovakia.

- Krovak, EPSG 9819: positive southing (y) and westing (x).
- Krovak (North Orientated), EPSG 1041: easting = -westing,
  northing = -southing.
- Krovak Modified, EPSG 1042, and Krovak Modified (North Orientated),
  EPSG 1043: a degree-4 complex polynomial correction (C1..C10) around an
  evaluation point removes the distortion of the original survey.

References
----------
- IOGP Publication 373-7-2, section 3.2.3.
- Research Institute of Geodesy, Topography and Cartography (2009).
  S-JTSK/05 definition.
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple
import numpy as np

from geospatial.numerics import QUARTER_PI, cos4, iterate, signed_longitude_delta
from geospatial.parameters import OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection, FormulaResult

_KROVAK_PARAMETERS = (
    P.LATITUDE_OF_PROJECTION_CENTRE,
    P.LONGITUDE_OF_ORIGIN,
    P.CO_LATITUDE_OF_CONE_AXIS,
    P.LATITUDE_OF_PSEUDO_STANDARD_PARALLEL,
    P.SCALE_FACTOR_ON_PSEUDO_STANDARD_PARALLEL,
    P.FALSE_EASTING,
    P.FALSE_NORTHING,
)

_CORRECTION_PARAMETERS = (
    P.ORDINATE_1_OF_EVALUATION_POINT,
    P.ORDINATE_2_OF_EVALUATION_POINT,
    P.C1, P.C2, P.C3, P.C4, P.C5, P.C6, P.C7, P.C8, P.C9, P.C10,
)


@dataclass(frozen=True)
class KrovakCorrection:
    """Polynomial correction of Krovak Modified.
    
    Attributes
    ----------
    x0, y0 : float
        Evaluation point (southing and westing ordinates) in meters.
    c : tuple of float
        Coefficients C1..C10.
    """
    x0: float
    y0: float
    c: Tuple[float, ...]
    
    tolerance: ClassVar[float] = 1e-6
    max_iterations: ClassVar[int] = 20
    
    @classmethod
    def from_parameters(cls, parameters: OperationParameterSet) -> 'KrovakCorrection':
        return cls(
            x0=parameters.length(P.ORDINATE_1_OF_EVALUATION_POINT),
            y0=parameters.length(P.ORDINATE_2_OF_EVALUATION_POINT),
            c=tuple(parameters.number(p) for p in _CORRECTION_PARAMETERS[2:]),
        )
    
    def evaluate(self, xp: float, yp: float) -> Tuple[float, float]:
        """Corrections (dX, dY) at an uncorrected position (Xp, Yp)."""
        C1, C2, C3, C4, C5, C6, C7, C8, C9, C10 = self.c
        xr = xp - self.x0
        yr = yp - self.y0
        x2, y2 = xr * xr, yr * yr
        dx = (
            C1 + C3 * xr - C4 * yr - 2 * C6 * xr * yr + C5 * (x2 - y2)
            + C7 * xr * (x2 - 3 * y2) - C8 * yr * (3 * x2 - y2)
            + 4 * C9 * xr * yr * (x2 - y2) + C10 * (x2 * x2 + y2 * y2 - 6 * x2 * y2)
        )
        dy = (
            C2 + C3 * yr + C4 * xr + 2 * C5 * xr * yr + C6 * (x2 - y2)
            + C8 * xr * (x2 - 3 * y2) + C7 * yr * (3 * x2 - y2)
            - 4 * C10 * xr * yr * (x2 - y2) + C9 * (x2 * x2 + y2 * y2 - 6 * x2 * y2)
        )
        return dx, dy
    
    def remove(self, xc: float, yc: float) -> Optional[Tuple[float, float]]:
        """Invert ``(Xp - dX, Yp - dY) = (xc, yc)`` by fixed-point iteration."""
        xp, yp = xc, yc
        for _ in range(self.max_iterations):
            dx, dy = self.evaluate(xp, yp)
            next_x, next_y = xc + dx, yc + dy
            if abs(next_x - xp) < self.tolerance and abs(next_y - yp) < self.tolerance:
                return next_x, next_y
            xp, yp = next_x, next_y
        return None


class KrovakProjection(CoordinateProjection):
    """Krovak, EPSG 9819.
    
    Output x is the westing and y the southing, both positive over the
    Czech and Slovak territory.
    """
    
    method_name = "Krovak"
    method_code = 9819
    required_parameters = _KROVAK_PARAMETERS
    north_orientated: ClassVar[bool] = False
    modified: ClassVar[bool] = False
    tolerance: ClassVar[float] = 1e-12
    max_iterations: ClassVar[int] = 30
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        e, e2 = ell.e, ell.e2
        phic = parameters.angle(P.LATITUDE_OF_PROJECTION_CENTRE)
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_ORIGIN)
        self.alpha_c = parameters.angle(P.CO_LATITUDE_OF_CONE_AXIS)
        self.phi_p = parameters.angle(P.LATITUDE_OF_PSEUDO_STANDARD_PARALLEL)
        kp = parameters.scale(P.SCALE_FACTOR_ON_PSEUDO_STANDARD_PARALLEL)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        
        self.e = e
        self.A = ell.a * np.sqrt(1 - e2) / (1 - e2 * np.sin(phic) ** 2)
        self.B = float(np.sqrt(1 + e2 * cos4(phic) / (1 - e2)))
        gamma0 = np.arcsin(np.sin(phic) / self.B)
        e_sin = e * np.sin(phic)
        self.t0 = float(
            np.tan(QUARTER_PI + gamma0 / 2)
            * ((1 + e_sin) / (1 - e_sin)) ** (e * self.B / 2)
            / np.tan(QUARTER_PI + phic / 2) ** self.B
        )
        self.n = float(np.sin(self.phi_p))
        self.r0 = float(kp * self.A / np.tan(self.phi_p))
        self.tan_p = float(np.tan(QUARTER_PI + self.phi_p / 2))
        self.correction = KrovakCorrection.from_parameters(parameters) if self.modified else None
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        e, B = self.e, self.B
        e_sin = e * np.sin(phi)
        U = 2 * (
            np.arctan(
                self.t0 * np.tan(phi / 2 + QUARTER_PI) ** B
                / ((1 + e_sin) / (1 - e_sin)) ** (e * B / 2)
            ) - QUARTER_PI
        )
        V = -B * signed_longitude_delta(lam, self.longitude_of_origin)
        T = np.arcsin(
            np.cos(self.alpha_c) * np.sin(U)
            + np.sin(self.alpha_c) * np.cos(U) * np.cos(V)
        )
        D = np.arcsin(np.cos(U) * np.sin(V) / np.cos(T))
        theta = self.n * D
        r = self.r0 * self.tan_p ** self.n / np.tan(T / 2 + QUARTER_PI) ** self.n
        xp = r * np.cos(theta)
        yp = r * np.sin(theta)
        if self.correction is not None:
            dx, dy = self.correction.evaluate(xp, yp)
            xp, yp = xp - dx, yp - dy
        southing = xp + self.false_northing
        westing = yp + self.false_easting
        if self.north_orientated:
            return -westing, -southing
        return westing, southing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        westing, southing = (-x, -y) if self.north_orientated else (x, y)
        xp = southing - self.false_northing
        yp = westing - self.false_easting
        if self.correction is not None:
            uncorrected = self.correction.remove(xp, yp)
            if uncorrected is None:
                return None
            xp, yp = uncorrected
        r = np.hypot(xp, yp)
        theta = np.arctan2(yp, xp)
        D = theta / self.n
        T = 2 * (np.arctan((self.r0 / r) ** (1 / self.n) * self.tan_p) - QUARTER_PI)
        U = np.arcsin(
            np.cos(self.alpha_c) * np.sin(T)
            - np.sin(self.alpha_c) * np.cos(T) * np.cos(D)
        )
        V = np.arcsin(np.cos(T) * np.sin(D) / np.cos(U))
        lam = self.longitude_of_origin - V / self.B
        e, B = self.e, self.B
        spherical = self.t0 ** (-1 / B) * np.tan(U / 2 + QUARTER_PI) ** (1 / B)
        
        def step(phi_j: float) -> float:
            e_sin = e * np.sin(phi_j)
            return 2 * (np.arctan(spherical * ((1 + e_sin) / (1 - e_sin)) ** (e / 2)) - QUARTER_PI)
        
        phi = iterate(step, U, self.tolerance, self.max_iterations)
        if phi is None:
            return None
        return phi, lam


class KrovakNorthOrientated(KrovakProjection):
    """Krovak (North Orientated), EPSG 1041."""
    
    method_name = "Krovak (North Orientated)"
    method_code = 1041
    north_orientated = True


class KrovakModified(KrovakProjection):
    """Krovak Modified, EPSG 1042.
    
    Examples
    --------
    On Bessel 1841 with FE = FN = 5 000 000 m, (50°12'32.442"N,
    16°50'59.179"E) maps to westing 5 568 990.91 and southing
    6 050 538.71.
    """
    
    method_name = "Krovak Modified"
    method_code = 1042
    required_parameters = _KROVAK_PARAMETERS + _CORRECTION_PARAMETERS
    modified = True


class KrovakModifiedNorthOrientated(KrovakProjection):
    """Krovak Modified (North Orientated), EPSG 1043."""
    
    method_name = "Krovak Modified (North Orientated)"
    method_code = 1043
    required_parameters = _KROVAK_PARAMETERS + _CORRECTION_PARAMETERS
    modified = True
    north_orientated = True
