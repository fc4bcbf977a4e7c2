"""
Azimuthal Projections.

Projections onto a plane tangent to the ellipsoid (or sphere) at a
chosen centre:

- Gnomonic: central perspective of the sphere, great circles as lines.
- Orthographic, EPSG 9840: parallel projection of the ellipsoid; the
  reverse is solved by two-dimensional Newton-Raphson.
- Lambert Azimuthal Equal Area, EPSG 9820: polar and oblique aspects
  through the authalic sphere.
- Modified Azimuthal Equidistant, EPSG 9832: the Micronesian island grids.
- Guam Projection, EPSG 9831: a simplified azimuthal equidistant for Guam.

Vertical Perspective lives in :mod:`projections.perspective`.

References
----------
- IOGP Publication 373-7-2, sections 3.6 and 3.9.
- Snyder, J.P. (1987). Map Projections - A Working Manual, pp. 145-153,
  164-168, 182-190.
"""

from typing import ClassVar
import numpy as np

from common.constants import NumericalTolerances
from geospatial.numerics import (
    HALF_PI,
    authalic_q,
    footpoint_latitude,
    latitude_from_authalic,
    meridian_arc,
    signed_longitude_delta,
)
from geospatial.parameters import OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection, FormulaResult

_NATURAL_ORIGIN = (
    P.LATITUDE_OF_NATURAL_ORIGIN,
    P.LONGITUDE_OF_NATURAL_ORIGIN,
    P.FALSE_EASTING,
    P.FALSE_NORTHING,
)


class Gnomonic(CoordinateProjection):
    """Gnomonic projection of the sphere of radius a.
    
    Only the hemisphere centred on the projection centre is mapped;
    points 90° or more from it are undefined.
    """
    
    method_name = "Gnomonic"
    required_parameters = (
        P.LATITUDE_OF_PROJECTION_CENTRE,
        P.LONGITUDE_OF_PROJECTION_CENTRE,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        self.phi_c = parameters.angle(P.LATITUDE_OF_PROJECTION_CENTRE)
        self.lambda_c = parameters.angle(P.LONGITUDE_OF_PROJECTION_CENTRE)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.radius = self.ellipsoid.a
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        dlam = signed_longitude_delta(lam, self.lambda_c)
        cos_c = (
            np.sin(self.phi_c) * np.sin(phi)
            + np.cos(self.phi_c) * np.cos(phi) * np.cos(dlam)
        )
        if cos_c <= NumericalTolerances.POLE:
            return None
        k = self.radius / cos_c
        x = k * np.cos(phi) * np.sin(dlam)
        y = k * (
            np.cos(self.phi_c) * np.sin(phi)
            - np.sin(self.phi_c) * np.cos(phi) * np.cos(dlam)
        )
        return self.false_easting + x, self.false_northing + y
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        dx = x - self.false_easting
        dy = y - self.false_northing
        rho = np.hypot(dx, dy)
        if rho == 0:
            return self.phi_c, self.lambda_c
        c = np.arctan(rho / self.radius)
        phi = np.arcsin(
            np.cos(c) * np.sin(self.phi_c) + dy * np.sin(c) * np.cos(self.phi_c) / rho
        )
        lam = self.lambda_c + np.arctan2(
            dx * np.sin(c),
            rho * np.cos(self.phi_c) * np.cos(c) - dy * np.sin(self.phi_c) * np.sin(c)
        )
        return phi, lam


class Orthographic(CoordinateProjection):
    """Orthographic, EPSG 9840.
    
    Forward is closed-form; the far hemisphere is undefined. The reverse
    solves E(φ, λ) = x, N(φ, λ) = y by Newton-Raphson on the 2×2
    Jacobian, seeded with the spherical inverse on a sphere of radius ν0.
    An iterate that steps over a pole is reflected onto the far meridian.
    The reverse is undefined when the iteration cap is reached (points
    off the projected disk) or when the solution lies on the far side.
    """
    
    method_name = "Orthographic"
    method_code = 9840
    required_parameters = _NATURAL_ORIGIN
    tolerance: ClassVar[float] = 1e-12
    max_iterations: ClassVar[int] = 30
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        self.phi0 = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
        self.lambda0 = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.e2 = self.ellipsoid.e2
        self.nu0 = float(self.ellipsoid.radius_of_prime_vertical_curvature(self.phi0))
    
    def _grid(self, phi: float, lam: float):
        nu = self.ellipsoid.radius_of_prime_vertical_curvature(phi)
        dlam = lam - self.lambda0
        easting = self.false_easting + nu * np.cos(phi) * np.sin(dlam)
        northing = self.false_northing + nu * (
            np.sin(phi) * np.cos(self.phi0) - np.cos(phi) * np.sin(self.phi0) * np.cos(dlam)
        ) + self.e2 * (self.nu0 * np.sin(self.phi0) - nu * np.sin(phi)) * np.cos(self.phi0)
        return easting, northing
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        dlam = signed_longitude_delta(lam, self.lambda0)
        cos_c = (
            np.sin(self.phi0) * np.sin(phi)
            + np.cos(self.phi0) * np.cos(phi) * np.cos(dlam)
        )
        if cos_c < 0:
            return None
        return self._grid(phi, self.lambda0 + dlam)
    
    def _seed(self, dx: float, dy: float):
        """Spherical inverse with radius ν0, the starting point of the solve."""
        sin0, cos0 = np.sin(self.phi0), np.cos(self.phi0)
        rho = np.hypot(dx, dy)
        c = np.arcsin(min(rho / self.nu0, 1.0))
        phi = np.arcsin(np.clip(np.cos(c) * sin0 + dy * np.sin(c) * cos0 / rho, -1.0, 1.0))
        lam = self.lambda0 + np.arctan2(
            dx * np.sin(c), rho * cos0 * np.cos(c) - dy * sin0 * np.sin(c)
        )
        return phi, lam
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        ell = self.ellipsoid
        dx = x - self.false_easting
        dy = y - self.false_northing
        if dx == 0 and dy == 0:
            return self.phi0, self.lambda0
        phi, lam = self._seed(dx, dy)
        # Jacobian is singular at the poles
        phi = float(np.clip(phi, -HALF_PI + 1e-9, HALF_PI - 1e-9))
        sin0, cos0 = np.sin(self.phi0), np.cos(self.phi0)
        for _ in range(self.max_iterations):
            easting, northing = self._grid(phi, lam)
            nu = ell.radius_of_prime_vertical_curvature(phi)
            rho = ell.radius_of_meridian_curvature(phi)
            dlam = lam - self.lambda0
            j11 = -rho * np.sin(phi) * np.sin(dlam)
            j12 = nu * np.cos(phi) * np.cos(dlam)
            j21 = rho * (np.cos(phi) * cos0 + np.sin(phi) * sin0 * np.cos(dlam))
            j22 = nu * sin0 * np.cos(phi) * np.sin(dlam)
            D = j11 * j22 - j12 * j21
            if D == 0:
                return None
            dE = x - easting
            dN = y - northing
            phi_next = phi + (j22 * dE - j12 * dN) / D
            lam_next = lam + (-j21 * dE + j11 * dN) / D
            if not (np.isfinite(phi_next) and np.isfinite(lam_next)):
                return None
            if abs(phi_next) > HALF_PI:
                # Step crossed a pole: continue on the far meridian
                phi_next = np.sign(phi_next) * np.pi - phi_next
                lam_next = lam_next + np.pi
            converged = abs(phi_next - phi) < self.tolerance and abs(lam_next - lam) < self.tolerance
            phi, lam = phi_next, lam_next
            if converged:
                return self._visible(phi, lam)
        return None
    
    def _visible(self, phi: float, lam: float) -> FormulaResult:
        cos_c = (
            np.sin(self.phi0) * np.sin(phi)
            + np.cos(self.phi0) * np.cos(phi) * np.cos(lam - self.lambda0)
        )
        if cos_c < -1e-9:
            return None
        return phi, lam


class LambertAzimuthalEqualArea(CoordinateProjection):
    """Lambert Azimuthal Equal Area, EPSG 9820.
    
    The aspect follows the latitude of natural origin: polar when it is
    within 1e-10 rad of a pole, oblique (including equatorial) otherwise.
    On a sphere q = 2 sinφ, Rq = a and D = 1, so the ellipsoidal formulas
    reduce exactly to the spherical ones.
    
    Examples
    --------
    ETRS89 / LAEA Europe (GRS 1980, φ0 = 52°N, λ0 = 10°E,
    FE = 4 321 000 m, FN = 3 210 000 m) maps (50°N, 5°E) to
    (3 962 799.45, 2 999 718.85).
    """
    
    method_name = "Lambert Azimuthal Equal Area"
    method_code = 9820
    aliases = ("Lambert_Azimuthal_Equal_Area",)
    required_parameters = _NATURAL_ORIGIN
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        phi0 = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
        self.phi0 = phi0
        self.lambda0 = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.e = ell.e
        self.e2 = ell.e2
        self.qP = float(authalic_q(1.0, ell.e))
        self.Rq = float(ell.a * np.sqrt(self.qP / 2))
        if abs(abs(phi0) - HALF_PI) < NumericalTolerances.POLE:
            self.pole_sign = float(np.sign(phi0))
            self.beta0 = self.pole_sign * HALF_PI
            self.D = 1.0
        else:
            self.pole_sign = 0.0
            q0 = authalic_q(np.sin(phi0), ell.e)
            self.beta0 = float(np.arcsin(q0 / self.qP))
            m0 = np.cos(phi0) / np.sqrt(1 - ell.e2 * np.sin(phi0) ** 2)
            self.D = float(ell.a * m0 / (self.Rq * np.cos(self.beta0)))
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        a = self.ellipsoid.a
        q = authalic_q(np.sin(phi), self.e)
        dlam = signed_longitude_delta(lam, self.lambda0)
        s = self.pole_sign
        if s:
            rho = a * np.sqrt(max(self.qP - s * q, 0.0))
            return (
                self.false_easting + rho * np.sin(dlam),
                self.false_northing - s * rho * np.cos(dlam),
            )
        beta = np.arcsin(np.clip(q / self.qP, -1.0, 1.0))
        denominator = 1 + np.sin(self.beta0) * np.sin(beta) + np.cos(self.beta0) * np.cos(beta) * np.cos(dlam)
        if denominator <= NumericalTolerances.POLE:
            return None
        B = self.Rq * np.sqrt(2 / denominator)
        easting = self.false_easting + B * self.D * np.cos(beta) * np.sin(dlam)
        northing = self.false_northing + (B / self.D) * (
            np.cos(self.beta0) * np.sin(beta)
            - np.sin(self.beta0) * np.cos(beta) * np.cos(dlam)
        )
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        a = self.ellipsoid.a
        dx = x - self.false_easting
        dy = y - self.false_northing
        s = self.pole_sign
        if s:
            rho = np.hypot(dx, dy)
            beta = s * np.arcsin(1 - rho * rho / (a * a * self.qP))
            lam = self.lambda0 + np.arctan2(dx, -s * dy)
        else:
            rho = np.hypot(dx / self.D, self.D * dy)
            if rho == 0:
                return self.phi0, self.lambda0
            C = 2 * np.arcsin(rho / (2 * self.Rq))
            beta = np.arcsin(
                np.cos(C) * np.sin(self.beta0)
                + self.D * dy * np.sin(C) * np.cos(self.beta0) / rho
            )
            lam = self.lambda0 + np.arctan2(
                dx * np.sin(C),
                self.D * rho * np.cos(self.beta0) * np.cos(C)
                - self.D ** 2 * dy * np.sin(self.beta0) * np.sin(C)
            )
        return latitude_from_authalic(beta, self.e2), lam


class ModifiedAzimuthalEquidistant(CoordinateProjection):
    """Modified Azimuthal Equidistant, EPSG 9832.
    
    Examples
    --------
    Guam 1963 / Yap Islands (Clarke 1866, φ0 = 9°32'48.15"N,
    λ0 = 138°10'07.48"E, FE = 40 000 m, FN = 60 000 m) maps
    (9°35'47.493"N, 138°11'34.908"E) to (42 665.90, 65 509.82).
    """
    
    method_name = "Modified Azimuthal Equidistant"
    method_code = 9832
    required_parameters = _NATURAL_ORIGIN
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        self.phi0 = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
        self.lambda0 = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.e = ell.e
        self.e2 = ell.e2
        self.nu0 = float(ell.radius_of_prime_vertical_curvature(self.phi0))
        self.G = float(ell.e * np.sin(self.phi0) / np.sqrt(1 - ell.e2))
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        e2 = self.e2
        sin0, cos0 = np.sin(self.phi0), np.cos(self.phi0)
        nu = self.ellipsoid.radius_of_prime_vertical_curvature(phi)
        dlam = signed_longitude_delta(lam, self.lambda0)
        psi = np.arctan(
            (1 - e2) * np.tan(phi) + e2 * self.nu0 * sin0 / (nu * np.cos(phi))
        )
        alpha = np.arctan2(np.sin(dlam), cos0 * np.tan(psi) - sin0 * np.cos(dlam))
        G = self.G
        H = self.e * cos0 * np.cos(alpha) / np.sqrt(1 - e2)
        if abs(np.sin(alpha)) < 1e-15:
            s = np.arcsin(cos0 * np.sin(psi) - sin0 * np.cos(psi)) * np.sign(np.cos(alpha))
        else:
            s = np.arcsin(np.sin(dlam) * np.cos(psi) / np.sin(alpha))
        H2 = H * H
        c = self.nu0 * s * (
            (1 - s * s * H2 * (1 - H2) / 6)
            + (s ** 3 / 8) * G * H * (1 - 2 * H2)
            + (s ** 4 / 120) * (H2 * (4 - 7 * H2) - 3 * G * G * (1 - 7 * H2))
            - (s ** 5 / 48) * G * H
        )
        return self.false_easting + c * np.sin(alpha), self.false_northing + c * np.cos(alpha)
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        e2 = self.e2
        sin0, cos0 = np.sin(self.phi0), np.cos(self.phi0)
        dx = x - self.false_easting
        dy = y - self.false_northing
        c = np.hypot(dx, dy)
        if c == 0:
            return self.phi0, self.lambda0
        alpha = np.arctan2(dx, dy)
        A = -e2 * cos0 ** 2 * np.cos(alpha) ** 2 / (1 - e2)
        B = 3 * e2 * (1 - A) * sin0 * cos0 * np.cos(alpha) / (1 - e2)
        D = c / self.nu0
        J = D - A * (1 + A) * D ** 3 / 6 - B * (1 + 3 * A) * D ** 4 / 24
        K = 1 - A * J * J / 2 - B * J ** 3 / 6
        psi = np.arcsin(sin0 * np.cos(J) + cos0 * np.sin(J) * np.cos(alpha))
        # (1 - e²K sinφ0 / sinψ) tanψ, finite where ψ = 0
        phi = np.arctan((np.tan(psi) - e2 * K * sin0 / np.cos(psi)) / (1 - e2))
        lam = self.lambda0 + np.arcsin(np.sin(alpha) * np.sin(J) / np.cos(psi))
        return phi, lam


class GuamProjection(CoordinateProjection):
    """Guam Projection, EPSG 9831.
    
    The reverse refines the latitude with a fixed three steps, which is
    exact to the precision of the method over the island.
    
    Examples
    --------
    Guam 1963 / Guam SPCS (Clarke 1866, φ0 = 13°28'20.87887"N,
    λ0 = 144°44'55.50254"E, FE = FN = 50 000 m) maps
    (13°20'20.53846"N, 144°38'07.19265"E) to (37 712.48, 35 242.00).
    """
    
    method_name = "Guam Projection"
    method_code = 9831
    required_parameters = _NATURAL_ORIGIN
    refinement_steps: ClassVar[int] = 3
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        self.phi0 = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
        self.lambda0 = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        self.e2 = ell.e2
        self.M0 = float(meridian_arc(self.phi0, ell.a, ell.e2))
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        a = self.ellipsoid.a
        w = np.sqrt(1 - self.e2 * np.sin(phi) ** 2)
        x = a * signed_longitude_delta(lam, self.lambda0) * np.cos(phi) / w
        M = meridian_arc(phi, a, self.e2)
        easting = self.false_easting + x
        northing = self.false_northing + M - self.M0 + x * x * np.tan(phi) * w / (2 * a)
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        a = self.ellipsoid.a
        dx = x - self.false_easting
        phi = self.phi0
        for _ in range(self.refinement_steps):
            w = np.sqrt(1 - self.e2 * np.sin(phi) ** 2)
            M = self.M0 + y - self.false_northing - dx * dx * np.tan(phi) * w / (2 * a)
            phi = footpoint_latitude(M, a, self.e2)
        w = np.sqrt(1 - self.e2 * np.sin(phi) ** 2)
        lam = self.lambda0 + dx * w / (a * np.cos(phi))
        return phi, lam
