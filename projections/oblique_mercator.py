"""
Oblique Mercator Family.

Conformal cylindrical projections whose central line is an arbitrary
great circle (the initial line) through the projection centre.

- Hotine Oblique Mercator (variant A), EPSG 9812: false origin at the
  natural origin of the rectified grid (intersection of the initial line
  with the aposphere equator).
- Hotine Oblique Mercator (variant B), EPSG 9815: grid origin at the
  projection centre.
- Laborde Oblique Mercator, EPSG 9813: the Madagascar grid; an oblique
  Mercator of the conformal sphere followed by a complex cubic correction.

References
----------
- IOGP Publication 373-7-2, sections 3.5.2 and 3.5.4.
- Snyder, J.P. (1987). Map Projections - A Working Manual, pp. 66-75.
- Roggero, M. (2009). Laborde projection: Madagascar.
"""

from typing import ClassVar, Tuple
import numpy as np

from geospatial.numerics import (
    HALF_PI,
    QUARTER_PI,
    conformal_t,
    cos4,
    isometric_latitude,
    iterate,
    latitude_from_conformal,
    signed_longitude_delta,
)
from geospatial.parameters import OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection, FormulaResult

_CENTRE = (
    P.LATITUDE_OF_PROJECTION_CENTRE,
    P.LONGITUDE_OF_PROJECTION_CENTRE,
    P.AZIMUTH_OF_INITIAL_LINE,
    P.SCALE_FACTOR_ON_INITIAL_LINE,
)


def _aposphere_b(phic: float, e2: float) -> float:
    return float(np.sqrt(1 + e2 * cos4(phic) / (1 - e2)))


class HotineObliqueMercator(CoordinateProjection):
    """Shared Hotine Oblique Mercator formulas.
    
    ``centre_origin`` selects variant B, whose grid coordinates are
    measured from the projection centre instead of the natural origin.
    """
    
    centre_origin: ClassVar[bool] = False
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        e, e2 = ell.e, ell.e2
        phic = parameters.angle(P.LATITUDE_OF_PROJECTION_CENTRE)
        self.lambda_c = parameters.angle(P.LONGITUDE_OF_PROJECTION_CENTRE)
        self.alpha_c = parameters.angle(P.AZIMUTH_OF_INITIAL_LINE)
        self.gamma_c = parameters.angle(P.ANGLE_FROM_RECTIFIED_TO_SKEW_GRID)
        kc = parameters.scale(P.SCALE_FACTOR_ON_INITIAL_LINE)
        if self.centre_origin:
            self.false_easting = parameters.length(P.EASTING_AT_PROJECTION_CENTRE)
            self.false_northing = parameters.length(P.NORTHING_AT_PROJECTION_CENTRE)
        else:
            self.false_easting = parameters.length(P.FALSE_EASTING)
            self.false_northing = parameters.length(P.FALSE_NORTHING)
        
        self.e = e
        self.e2 = e2
        self.sign_phic = float(np.sign(phic)) or 1.0
        self.B = _aposphere_b(phic, e2)
        self.A = float(ell.a * self.B * kc * np.sqrt(1 - e2) / (1 - e2 * np.sin(phic) ** 2))
        t0 = conformal_t(phic, e)
        D = self.B * np.sqrt(1 - e2) / (np.cos(phic) * np.sqrt(1 - e2 * np.sin(phic) ** 2))
        root = np.sqrt(max(D * D, 1.0) - 1)
        F = D + root * self.sign_phic
        self.H = float(F * t0 ** self.B)
        G = (F - 1 / F) / 2
        self.gamma0 = float(np.arcsin(np.sin(self.alpha_c) / D))
        self.lambda0 = float(self.lambda_c - np.arcsin(G * np.tan(self.gamma0)) / self.B)
        self.azimuth_is_right_angle = abs(abs(self.alpha_c) - HALF_PI) < 1e-10
        if self.azimuth_is_right_angle:
            self.uc = float(self.A * (self.lambda_c - self.lambda0))
        else:
            self.uc = float((self.A / self.B) * np.arctan2(root, np.cos(self.alpha_c)) * self.sign_phic)
    
    def _uv(self, phi: float, lam: float) -> Tuple[float, float]:
        B, g0 = self.B, self.gamma0
        t = conformal_t(phi, self.e)
        Q = self.H / t ** B
        S = (Q - 1 / Q) / 2
        T = (Q + 1 / Q) / 2
        dlam = signed_longitude_delta(lam, self.lambda0)
        V = np.sin(B * dlam)
        U = (-V * np.cos(g0) + S * np.sin(g0)) / T
        v = self.A * np.log((1 - U) / (1 + U)) / (2 * B)
        u = self.A * np.arctan2(S * np.cos(g0) + V * np.sin(g0), np.cos(B * dlam)) / B
        if self.centre_origin:
            if self.azimuth_is_right_angle:
                side = np.sign(signed_longitude_delta(self.lambda_c, lam))
                u = u - abs(self.uc) * self.sign_phic * side
            else:
                u = u - abs(self.uc) * self.sign_phic
        return u, v
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        if abs(phi) >= HALF_PI:
            return None
        u, v = self._uv(phi, lam)
        cg, sg = np.cos(self.gamma_c), np.sin(self.gamma_c)
        easting = v * cg + u * sg + self.false_easting
        northing = u * cg - v * sg + self.false_northing
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        cg, sg = np.cos(self.gamma_c), np.sin(self.gamma_c)
        dx = x - self.false_easting
        dy = y - self.false_northing
        v = dx * cg - dy * sg
        u = dy * cg + dx * sg
        if self.centre_origin:
            u = u + abs(self.uc) * self.sign_phic
        B, A, g0 = self.B, self.A, self.gamma0
        Q = np.exp(-B * v / A)
        S = (Q - 1 / Q) / 2
        T = (Q + 1 / Q) / 2
        V = np.sin(B * u / A)
        U = (V * np.cos(g0) + S * np.sin(g0)) / T
        t = (self.H / np.sqrt((1 + U) / (1 - U))) ** (1 / B)
        chi = HALF_PI - 2 * np.arctan(t)
        phi = latitude_from_conformal(chi, self.e2)
        lam = self.lambda0 - np.arctan2(S * np.cos(g0) - V * np.sin(g0), np.cos(B * u / A)) / B
        return phi, lam


class HotineObliqueMercatorA(HotineObliqueMercator):
    """Hotine Oblique Mercator (variant A), EPSG 9812."""
    
    method_name = "Hotine Oblique Mercator (variant A)"
    method_code = 9812
    aliases = ("Hotine_Oblique_Mercator",)
    required_parameters = _CENTRE + (
        P.ANGLE_FROM_RECTIFIED_TO_SKEW_GRID,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )


class HotineObliqueMercatorB(HotineObliqueMercator):
    """Hotine Oblique Mercator (variant B), EPSG 9815.
    
    Examples
    --------
    Timbalai 1948 / RSO Borneo (Everest 1830 (1967), φc = 4°N,
    λc = 115°E, αc = 53°18'56.9537", γc = 53°07'48.3685", kc = 0.99984,
    Ec = 590 476.87 m, Nc = 442 857.65 m) maps (5°23'14.1129"N,
    115°48'19.8196"E) to (679 245.73, 596 562.78).
    """
    
    method_name = "Hotine Oblique Mercator (variant B)"
    method_code = 9815
    aliases = ("Hotine_Oblique_Mercator_Azimuth_Center",)
    required_parameters = _CENTRE + (
        P.ANGLE_FROM_RECTIFIED_TO_SKEW_GRID,
        P.EASTING_AT_PROJECTION_CENTRE,
        P.NORTHING_AT_PROJECTION_CENTRE,
    )
    centre_origin = True


class LabordeObliqueMercator(CoordinateProjection):
    """Laborde Oblique Mercator, EPSG 9813.
    
    The ellipsoid is mapped conformally to a sphere tangent at the
    projection centre, the sphere is rotated so that the initial line
    becomes the equator, and a complex cubic H + G·H³ corrects the
    resulting Mercator grid. The reverse solves the cubic with Newton
    iteration in the complex plane.
    """
    
    method_name = "Laborde Oblique Mercator"
    method_code = 9813
    required_parameters = _CENTRE + (P.FALSE_EASTING, P.FALSE_NORTHING)
    tolerance: ClassVar[float] = 1e-11
    max_iterations: ClassVar[int] = 50
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        e2 = ell.e2
        phic = parameters.angle(P.LATITUDE_OF_PROJECTION_CENTRE)
        self.lambda_c = parameters.angle(P.LONGITUDE_OF_PROJECTION_CENTRE)
        alpha_c = parameters.angle(P.AZIMUTH_OF_INITIAL_LINE)
        k0 = parameters.scale(P.SCALE_FACTOR_ON_INITIAL_LINE)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        
        self.e = ell.e
        self.B = _aposphere_b(phic, e2)
        self.phi_s = float(np.arcsin(np.sin(phic) / self.B))
        self.R = float(ell.a * k0 * np.sqrt(1 - e2) / (1 - e2 * np.sin(phic) ** 2))
        self.C = float(
            np.log(np.tan(QUARTER_PI + self.phi_s / 2))
            - self.B * isometric_latitude(phic, self.e)
        )
        self.G = complex((1 - np.cos(2 * alpha_c)) / 12, np.sin(2 * alpha_c) / 12)
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        if abs(phi) >= HALF_PI:
            return None
        L = self.B * signed_longitude_delta(lam, self.lambda_c)
        q = self.C + self.B * isometric_latitude(phi, self.e)
        p = 2 * np.arctan(np.exp(q)) - HALF_PI
        cos_s, sin_s = np.cos(self.phi_s), np.sin(self.phi_s)
        U = np.cos(p) * np.cos(L) * cos_s + np.sin(p) * sin_s
        V = np.cos(p) * np.cos(L) * sin_s - np.sin(p) * cos_s
        W = np.cos(p) * np.sin(L)
        d = np.hypot(U, V)
        if d > self.tolerance:
            l_oblique = 2 * np.arctan(V / (U + d))
            p_oblique = np.arctan(W / d)
        else:
            l_oblique = 0.0
            p_oblique = np.sign(W) * HALF_PI
        H = complex(-l_oblique, np.log(np.tan(QUARTER_PI + p_oblique / 2)))
        corrected = H + self.G * H ** 3
        return (
            self.false_easting + self.R * corrected.imag,
            self.false_northing + self.R * corrected.real,
        )
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        H0 = complex((y - self.false_northing) / self.R, (x - self.false_easting) / self.R)
        G = self.G
        H1 = H0
        for _ in range(self.max_iterations):
            if abs(H0 - H1 - G * H1 ** 3) < self.tolerance:
                break
            H1 = (H0 + 2 * G * H1 ** 3) / (3 * G * H1 ** 2 + 1)
        else:
            return None
        L1 = -H1.real
        P1 = 2 * np.arctan(np.exp(H1.imag)) - HALF_PI
        cos_s, sin_s = np.cos(self.phi_s), np.sin(self.phi_s)
        U = np.cos(P1) * np.cos(L1) * cos_s + np.cos(P1) * np.sin(L1) * sin_s
        V = np.sin(P1)
        W = np.cos(P1) * np.cos(L1) * sin_s - np.cos(P1) * np.sin(L1) * cos_s
        d = np.hypot(U, V)
        if d > self.tolerance:
            L = 2 * np.arctan(V / (U + d))
            p = np.arctan(W / d)
        else:
            L = 0.0
            p = np.sign(W) * HALF_PI
        lam = self.lambda_c + L / self.B
        q = (np.log(np.tan(QUARTER_PI + p / 2)) - self.C) / self.B
        e = self.e
        
        def step(phi: float) -> float:
            e_sin = e * np.sin(phi)
            return 2 * np.arctan(((1 + e_sin) / (1 - e_sin)) ** (e / 2) * np.exp(q)) - HALF_PI
        
        phi = iterate(step, 2 * np.arctan(np.exp(q)) - HALF_PI, self.tolerance, self.max_iterations)
        if phi is None:
            return None
        return phi, lam
