"""
Stereographic Projections.

Conformal azimuthal projections from a point on the ellipsoid (polar
aspects) or on the conformal sphere (oblique aspect).

- Polar Stereographic (variant A), EPSG 9810: natural origin at a pole
  with a scale factor.
- Polar Stereographic (variant B), EPSG 9829: scale defined by a standard
  parallel, false easting and northing at the pole.
- Polar Stereographic (variant C), EPSG 9830: standard parallel with the
  false origin on the standard parallel at the origin meridian.
- Oblique Stereographic, EPSG 9809: double projection through the
  Gauss conformal sphere (Roussilhe/Schreiber).

The polar aspect (north or south) follows the sign of the defining
latitude parameter.

References
----------
- IOGP Publication 373-7-2, sections 3.3.1 and 3.3.2.
- Snyder, J.P. (1987). Map Projections - A Working Manual, pp. 154-163.
"""

from abc import abstractmethod
from typing import ClassVar
import numpy as np

from common.constants import NumericalTolerances
from common.exceptions import ParameterValueError
from geospatial.numerics import (
    HALF_PI,
    QUARTER_PI,
    conformal_t,
    cos4,
    isometric_latitude,
    latitude_from_conformal,
    signed_longitude_delta,
)
from geospatial.parameters import OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection, FormulaResult


class PolarStereographic(CoordinateProjection):
    """Shared polar stereographic formulas.
    
    Subclasses derive the pole aspect, the radius per unit t-value and
    the grid origin in :meth:`_configure`. ``origin_offset`` is the
    distance from the pole to the grid origin along the origin meridian
    (non-zero only for variant C).
    """
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        e = self.ellipsoid.e
        self.e = e
        self.e2 = self.ellipsoid.e2
        self.polar_constant = float(np.sqrt((1 + e) ** (1 + e) * (1 - e) ** (1 - e)))
        self.origin_offset = 0.0
        self._configure(parameters)
    
    @abstractmethod
    def _configure(self, parameters: OperationParameterSet) -> None:
        """Set the pole sign, radius per t-value, origin meridian and false origin."""
        pass
    
    def _standard_parallel(self, parameters: OperationParameterSet) -> None:
        phi_f = parameters.angle(P.LATITUDE_OF_STANDARD_PARALLEL)
        if abs(phi_f) < NumericalTolerances.POLE or abs(phi_f) > HALF_PI:
            raise ParameterValueError(
                f"Standard parallel {phi_f} rad does not select a polar aspect."
            )
        self.pole_sign = 1.0 if phi_f > 0 else -1.0
        a = self.ellipsoid.a
        if abs(phi_f) >= HALF_PI - NumericalTolerances.POLE:
            self.rho_per_t = 2 * a / self.polar_constant
            self.mF = 0.0
            return
        mF = np.cos(phi_f) / np.sqrt(1 - self.e2 * np.sin(phi_f) ** 2)
        tF = conformal_t(self.pole_sign * phi_f, self.e)
        self.mF = float(mF)
        self.rho_per_t = float(a * mF / tF)
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        s = self.pole_sign
        if s * phi <= -HALF_PI + NumericalTolerances.POLE:
            return None
        rho = self.rho_per_t * conformal_t(s * phi, self.e)
        dlam = signed_longitude_delta(lam, self.longitude_of_origin)
        easting = self.false_easting + rho * np.sin(dlam)
        northing = self.false_northing - s * rho * np.cos(dlam) + s * self.origin_offset
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        s = self.pole_sign
        dx = x - self.false_easting
        dy = y - self.false_northing - s * self.origin_offset
        rho = np.hypot(dx, dy)
        t = rho / self.rho_per_t
        chi = HALF_PI - 2 * np.arctan(t)
        phi = s * latitude_from_conformal(chi, self.e2)
        if rho == 0:
            return phi, self.longitude_of_origin
        lam = self.longitude_of_origin + np.arctan2(dx, -s * dy)
        return phi, lam


class PolarStereographicA(PolarStereographic):
    """Polar Stereographic (variant A), EPSG 9810.
    
    Examples
    --------
    WGS 84 / UPS North: φ0 = 90°N, λ0 = 0°, k0 = 0.994,
    FE = FN = 2 000 000 m maps (73°N, 44°E) to (3 320 416.75, 632 668.43).
    """
    
    method_name = "Polar Stereographic (variant A)"
    method_code = 9810
    aliases = ("Polar_Stereographic",)
    required_parameters = (
        P.LATITUDE_OF_NATURAL_ORIGIN,
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.SCALE_FACTOR_AT_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    
    def _configure(self, parameters: OperationParameterSet) -> None:
        phi0 = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
        if abs(abs(phi0) - HALF_PI) > NumericalTolerances.POLE:
            raise ParameterValueError(
                f"Latitude of natural origin must be ±90°, got {np.degrees(phi0)}°."
            )
        self.pole_sign = 1.0 if phi0 > 0 else -1.0
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        k0 = parameters.scale(P.SCALE_FACTOR_AT_NATURAL_ORIGIN)
        self.rho_per_t = 2 * self.ellipsoid.a * k0 / self.polar_constant
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)


class PolarStereographicB(PolarStereographic):
    """Polar Stereographic (variant B), EPSG 9829.
    
    Examples
    --------
    WGS 84, φF = 71°S, λ0 = 70°E, FE = FN = 6 000 000 m maps
    (75°S, 120°E) to (7 255 380.79, 7 053 389.56).
    """
    
    method_name = "Polar Stereographic (variant B)"
    method_code = 9829
    required_parameters = (
        P.LATITUDE_OF_STANDARD_PARALLEL,
        P.LONGITUDE_OF_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    
    def _configure(self, parameters: OperationParameterSet) -> None:
        self._standard_parallel(parameters)
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)


class PolarStereographicC(PolarStereographic):
    """Polar Stereographic (variant C), EPSG 9830.
    
    The grid origin lies where the standard parallel crosses the origin
    meridian, at distance ρF = a·mF from the pole.
    
    Examples
    --------
    Petrels 1972 / Terre Adelie Polar Stereographic (International 1924,
    φF = 67°S, λ0 = 140°E, EF = 300 000 m, NF = 200 000 m) maps
    (66°36'18.820"S, 140°04'17.040"E) to (303 169.52, 244 055.72).
    """
    
    method_name = "Polar Stereographic (variant C)"
    method_code = 9830
    required_parameters = (
        P.LATITUDE_OF_STANDARD_PARALLEL,
        P.LONGITUDE_OF_ORIGIN,
        P.EASTING_AT_FALSE_ORIGIN,
        P.NORTHING_AT_FALSE_ORIGIN,
    )
    
    def _configure(self, parameters: OperationParameterSet) -> None:
        self._standard_parallel(parameters)
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_ORIGIN)
        self.origin_offset = self.ellipsoid.a * self.mF
        self.false_easting = parameters.length(P.EASTING_AT_FALSE_ORIGIN)
        self.false_northing = parameters.length(P.NORTHING_AT_FALSE_ORIGIN)


class ObliqueStereographic(CoordinateProjection):
    """Oblique Stereographic, EPSG 9809.
    
    The ellipsoid is first mapped to the Gauss conformal sphere of radius
    R = sqrt(ρ0·ν0), then projected stereographically from the antipode of
    the conformal origin. On a sphere the first step is the identity.
    
    Examples
    --------
    Amersfoort / RD New (Bessel 1841, φ0 = 52°09'22.178"N,
    λ0 = 5°23'15.500"E, k0 = 0.9999079, FE = 155 000 m, FN = 463 000 m)
    maps (53°N, 6°E) to (196 105.283, 557 057.739).
    """
    
    method_name = "Oblique Stereographic"
    method_code = 9809
    aliases = ("Double Stereographic", "Oblique_Stereographic")
    required_parameters = (
        P.LATITUDE_OF_NATURAL_ORIGIN,
        P.LONGITUDE_OF_NATURAL_ORIGIN,
        P.SCALE_FACTOR_AT_NATURAL_ORIGIN,
        P.FALSE_EASTING,
        P.FALSE_NORTHING,
    )
    tolerance: ClassVar[float] = 1e-12
    max_iterations: ClassVar[int] = 100
    
    def _setup(self, parameters: OperationParameterSet) -> None:
        ell = self.ellipsoid
        phi0 = parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
        self.longitude_of_origin = parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        k0 = parameters.scale(P.SCALE_FACTOR_AT_NATURAL_ORIGIN)
        self.false_easting = parameters.length(P.FALSE_EASTING)
        self.false_northing = parameters.length(P.FALSE_NORTHING)
        if abs(phi0) >= HALF_PI:
            raise ParameterValueError(
                "Oblique Stereographic requires a non-polar origin; use Polar Stereographic."
            )
        
        self.e = ell.e
        self.e2 = ell.e2
        if ell.is_sphere:
            R = ell.a
            self.n = 1.0
            self.c = 1.0
            self.chi0 = phi0
        else:
            R = ell.radius_of_conformal_sphere(phi0)
            sin0 = np.sin(phi0)
            self.n = float(np.sqrt(1 + ell.e2 * cos4(phi0) / (1 - ell.e2)))
            w1 = self._w(phi0, 1.0)
            sin_chi0 = (w1 - 1) / (w1 + 1)
            self.c = float(
                (self.n + sin0) * (1 - sin_chi0) / ((self.n - sin0) * (1 + sin_chi0))
            )
            w2 = self.c * w1
            self.chi0 = float(np.arcsin((w2 - 1) / (w2 + 1)))
        self.two_r_k0 = 2 * R * k0
        self.g = self.two_r_k0 * np.tan(QUARTER_PI - self.chi0 / 2)
        self.h = 2 * self.two_r_k0 * np.tan(self.chi0) + self.g
    
    def _w(self, phi: float, c: float) -> float:
        sin_phi = np.sin(phi)
        sa = (1 + sin_phi) / (1 - sin_phi)
        sb = (1 - self.e * sin_phi) / (1 + self.e * sin_phi)
        return c * (sa * sb ** self.e) ** self.n
    
    def _conformal_latitude(self, phi: float) -> float:
        if abs(phi) >= HALF_PI:
            return float(np.sign(phi) * HALF_PI)
        w = self._w(phi, self.c)
        return np.arcsin((w - 1) / (w + 1))
    
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        chi = self._conformal_latitude(phi)
        dLam = self.n * signed_longitude_delta(lam, self.longitude_of_origin)
        B = 1 + np.sin(chi) * np.sin(self.chi0) + np.cos(chi) * np.cos(self.chi0) * np.cos(dLam)
        if B < NumericalTolerances.POLE:
            return None
        easting = self.false_easting + self.two_r_k0 * np.cos(chi) * np.sin(dLam) / B
        northing = self.false_northing + self.two_r_k0 * (
            np.sin(chi) * np.cos(self.chi0) - np.cos(chi) * np.sin(self.chi0) * np.cos(dLam)
        ) / B
        return easting, northing
    
    def _reverse(self, x: float, y: float) -> FormulaResult:
        dx = x - self.false_easting
        dy = y - self.false_northing
        i = np.arctan(dx / (self.h + dy))
        j = np.arctan(dx / (self.g - dy)) - i
        chi = self.chi0 + 2 * np.arctan((dy - dx * np.tan(j / 2)) / self.two_r_k0)
        lam = self.longitude_of_origin + (j + 2 * i) / self.n
        if self.e == 0:
            return chi, lam
        
        psi = 0.5 * np.log((1 + np.sin(chi)) / (self.c * (1 - np.sin(chi)))) / self.n
        phi = 2 * np.arctan(np.exp(psi)) - HALF_PI
        for _ in range(self.max_iterations):
            psi_i = isometric_latitude(phi, self.e)
            following = phi - (psi_i - psi) * np.cos(phi) * (
                1 - self.e2 * np.sin(phi) ** 2
            ) / (1 - self.e2)
            if not np.isfinite(following):
                return None
            if abs(following - phi) < self.tolerance:
                return following, lam
            phi = following
        return None
