"""
Polyconic Projections.

- American Polyconic, EPSG 9818: every parallel is the development of
  its own tangent cone, so parallels are true to scale and the central
  meridian is true to scale. The reverse has no closed form and is
  solved by Newton-Raphson iteration on the latitude.
- Colombia Urban, EPSG 1052: the city grids of Colombia, a local
  polyconic-like expansion scaled to a projection plane at a given
  height above the ellipsoid.

References
----------
- IOGP Publication 373-7-2, sections 3.5.6 and 3.4.6.
- Snyder, J.P. (1987). Map Projections - A Working Manual, pp. 124-137.
"""

from typing import ClassVar
import numpy as np

from common.constants import NumericalTolerances
from geospatial.numerics import (
    HALF_PI,
    meridian_arc,
    signed_longitude_delta,
)
from geospatial.parameters import OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection, FormulaResult


class AmericanPolyconic(CoordinateProjection):
    """American Polyconic, EPSG 9818.
    
    Points more than 90° of latitude from the origin are undefined on
    forward. The reverse iterates from φ = A until successive estimates
    differ by less than ``tolerance``; reaching ``max_iterations`` first
    yields ``UNDEFINED``.
    
    Examples
    --------
    SIRGAS 2000 / Brazil Polyconic (GRS 1980, φ0 = 0°, λ0 = 54°W,
    FE = 5 000 000 m, FN = 10 000 000 m) maps (24°S, 37°W) to
    (6 725 584.49, 7 240 461.99).
    """
    
    method_name = "American Polyconic"
    method_code = 9818
    aliases = ("Polyconic",)
    required_parameters = (
        P.LATITUDE_OF_NATURAL_ORIGIN,
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    tolerance: ClassVar[float] = 1e-12
    max_iterations: ClassVar[int] = 1000
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        self.phi0 = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
        self.lambda0 = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.e2 = ell.e2
        self.M0 = float(meridian_arc(self.phi0, ell.a, ell.e2))
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        if abs(phi - self.phi0) > HALF_PI:
            return None
        ell = self.ellipsoid
        dlam = signed_longitude_delta(lam, self.lambda0)
        if phi == 0:
            return self.false_easting + ell.a * dlam, self.false_northing - self.M0
        L = dlam * np.sin(phi)
        nu_cot = ell.radius_of_prime_vertical_curvature(phi) / np.tan(phi)
        M = meridian_arc(phi, ell.a, self.e2)
        easting = self.false_easting + nu_cot * np.sin(L)
        northing = self.false_northing + M - self.M0 + nu_cot * (1 - np.cos(L))
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        a = self.ellipsoid.a
        e2 = self.e2
        dx = x - self.false_easting
        dy = y - self.false_northing
        if abs(self.M0 + dy) < NumericalTolerances.LATITUDE_CONVERGENCE * a:
            return 0.0, self.lambda0 + dx / a
        A = (self.M0 + dy) / a
        B = A * A + dx * dx / (a * a)
        phi = A
        for _ in range(self.max_iterations):
            sin_phi = np.sin(phi)
            w2 = 1 - e2 * sin_phi ** 2
            C = np.sqrt(w2) * np.tan(phi)
            J = meridian_arc(phi, a, e2) / a
            H = (1 - e2) / w2 ** 1.5
            sin2 = np.sin(2 * phi)
            numerator = A * (C * J + 1) - J - C * (J * J + B) / 2
            denominator = (
                e2 * sin2 * (J * J + B - 2 * A * J) / (4 * C)
                + (A - J) * (C * H - 2 / sin2)
                - H
            )
            following = phi - numerator / denominator
            if not np.isfinite(following):
                return None
            if abs(following - phi) < self.tolerance:
                phi = following
                break
            phi = following
        else:
            return None
        C = np.sqrt(1 - e2 * np.sin(phi) ** 2) * np.tan(phi)
        lam = self.lambda0 + np.arcsin(dx * C / a) / np.sin(phi)
        return phi, lam


class ColombiaUrban(CoordinateProjection):
    """Colombia Urban, EPSG 1052.
    
    Examples
    --------
    MAGNA-SIRGAS / Bogota urban grid (GRS 1980, φ0 = 4°40'49.75"N,
    λ0 = 74°08'47.73"W, FE = 92 334.879 m, FN = 109 320.965 m,
    H0 = 2 550 m) maps (4°48'N, 74°15'W) to (80 859.033, 122 543.174).
    """
    
    method_name = "Colombia Urban"
    method_code = 1052
    required_parameters = (
        P.LATITUDE_OF_NATURAL_ORIGIN,
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
        P.PROJECTION_PLANE_ORIGIN_HEIGHT,
    )
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        self.phi0 = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
        self.lambda0 = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        H0 = parameters.length(P.PROJECTION_PLANE_ORIGIN_HEIGHT)
        self.H0 = H0
        self.rho0 = float(ell.radius_of_meridian_curvature(self.phi0))
        self.nu0 = float(ell.radius_of_prime_vertical_curvature(self.phi0))
        self.A = 1 + H0 / self.nu0
        self.B = float(np.tan(self.phi0) / (2 * self.rho0 * self.nu0))
        self.C = 1 + H0 / ell.a
        self.D = self.rho0 * (1 + H0 / (ell.a * (1 - ell.e2)))
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        ell = self.ellipsoid
        nu = ell.radius_of_prime_vertical_curvature(phi)
        dlam = signed_longitude_delta(lam, self.lambda0)
        rho_m = ell.radius_of_meridian_curvature((phi + self.phi0) / 2)
        G = 1 + self.H0 / rho_m
        easting = self.false_easting + self.A * nu * np.cos(phi) * dlam
        northing = self.false_northing + G * self.rho0 * (
            (phi - self.phi0) + self.B * dlam ** 2 * nu ** 2 * np.cos(phi) ** 2
        )
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        dx = x - self.false_easting
        phi = self.phi0 + (y - self.false_northing) / self.D - self.B * (dx / self.C) ** 2
        if abs(phi) >= HALF_PI:
            return None
        nu = self.ellipsoid.radius_of_prime_vertical_curvature(phi)
        lam = self.lambda0 + dx / (self.C * nu * np.cos(phi))
        return phi, lam
