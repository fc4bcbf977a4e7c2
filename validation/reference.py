"""
Cross-checks Against PROJ.

This module wraps `pyproj` to compare a projection with the PROJ
implementation of the same method. It is a testing aid: the engine never
calls PROJ for its own transformations.

Only methods whose PROJ counterpart implements the same EPSG formulas
are mapped. PROJ's spherical-only operators (``gnom``, ``mill``, ``eqc``)
and its Krovak axis conventions differ from the EPSG definitions, so
:func:`proj4_definition` returns ``None`` for them.

References
----------
- PROJ coordinate transformation software, https://proj.org
"""

from typing import Callable, Dict, List, Optional, Sequence, Type

import numpy as np
from pyproj import CRS, Transformer

from common.exceptions import ValidationError
from common.logging_config import get_logger
from common.types import UNDEFINED, GeographicCoordinate, GeographicResult, PlanarCoordinate
from geospatial.ellipsoid import Ellipsoid
from geospatial.parameters import OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection
from projections.azimuthal import LambertAzimuthalEqualArea, Orthographic
from projections.bonne import Bonne
from projections.cassini import CassiniSoldner
from projections.cylindrical import Sinusoidal
from projections.equal_area import AlbersEqualArea, LambertCylindricalEqualArea
from projections.lambert_conic import LambertConicConformal1SP, LambertConicConformal2SP
from projections.mercator import MercatorA, MercatorB
from projections.oblique_mercator import HotineObliqueMercatorA, HotineObliqueMercatorB
from projections.polyconic import AmericanPolyconic
from projections.stereographic import ObliqueStereographic, PolarStereographicA, PolarStereographicB
from projections.transverse_mercator import TransverseMercator
from validation.projection_checks import ValidationResult

logger = get_logger(__name__)

ProjTerms = Callable[[OperationParameterSet], str]


def _deg(parameters: OperationParameterSet, parameter) -> float:
    return float(np.degrees(parameters.angle(parameter)))


def _natural_origin(p: OperationParameterSet) -> str:
    return (
        f"+lat_0={_deg(p, P.LATITUDE_OF_NATURAL_ORIGIN)} "
        f"+lon_0={_deg(p, P.LONGITUDE_OF_NATURAL_ORIGIN)} "
        f"+x_0={p.length(P.FALSE_EASTING)} +y_0={p.length(P.FALSE_NORTHING)}"
    )


def _central_meridian(p: OperationParameterSet) -> str:
    return (
        f"+lon_0={_deg(p, P.LONGITUDE_OF_NATURAL_ORIGIN)} "
        f"+x_0={p.length(P.FALSE_EASTING)} +y_0={p.length(P.FALSE_NORTHING)}"
    )


def _false_origin(p: OperationParameterSet) -> str:
    return (
        f"+lat_0={_deg(p, P.LATITUDE_OF_FALSE_ORIGIN)} "
        f"+lon_0={_deg(p, P.LONGITUDE_OF_FALSE_ORIGIN)} "
        f"+lat_1={_deg(p, P.LATITUDE_OF_1ST_STANDARD_PARALLEL)} "
        f"+lat_2={_deg(p, P.LATITUDE_OF_2ND_STANDARD_PARALLEL)} "
        f"+x_0={p.length(P.EASTING_AT_FALSE_ORIGIN)} "
        f"+y_0={p.length(P.NORTHING_AT_FALSE_ORIGIN)}"
    )


def _scale(p: OperationParameterSet) -> str:
    return f"+k_0={p.scale(P.SCALE_FACTOR_AT_NATURAL_ORIGIN)}"


def _lcc_1sp(p: OperationParameterSet) -> str:
    return f"+proj=lcc +lat_1={_deg(p, P.LATITUDE_OF_NATURAL_ORIGIN)} {_natural_origin(p)} {_scale(p)}"


def _mercator_b(p: OperationParameterSet) -> str:
    return (
        f"+proj=merc +lat_ts={_deg(p, P.LATITUDE_OF_1ST_STANDARD_PARALLEL)} "
        f"{_central_meridian(p)}"
    )


def _polar_b(p: OperationParameterSet) -> str:
    latitude = _deg(p, P.LATITUDE_OF_STANDARD_PARALLEL)
    return (
        f"+proj=stere +lat_0={90.0 if latitude >= 0 else -90.0} +lat_ts={latitude} "
        f"+lon_0={_deg(p, P.LONGITUDE_OF_ORIGIN)} "
        f"+x_0={p.length(P.FALSE_EASTING)} +y_0={p.length(P.FALSE_NORTHING)}"
    )


def _cea(p: OperationParameterSet) -> str:
    return (
        f"+proj=cea +lat_ts={_deg(p, P.LATITUDE_OF_1ST_STANDARD_PARALLEL)} "
        f"{_central_meridian(p)}"
    )


def _bonne(p: OperationParameterSet) -> str:
    return f"+proj=bonne +lat_1={_deg(p, P.LATITUDE_OF_NATURAL_ORIGIN)} {_natural_origin(p)}"


def _omerc(p: OperationParameterSet, centre_origin: bool) -> str:
    if centre_origin:
        offsets = (
            f"+x_0={p.length(P.EASTING_AT_PROJECTION_CENTRE)} "
            f"+y_0={p.length(P.NORTHING_AT_PROJECTION_CENTRE)}"
        )
    else:
        offsets = f"+no_uoff +x_0={p.length(P.FALSE_EASTING)} +y_0={p.length(P.FALSE_NORTHING)}"
    return (
        f"+proj=omerc +lat_0={_deg(p, P.LATITUDE_OF_PROJECTION_CENTRE)} "
        f"+lonc={_deg(p, P.LONGITUDE_OF_PROJECTION_CENTRE)} "
        f"+alpha={_deg(p, P.AZIMUTH_OF_INITIAL_LINE)} "
        f"+gamma={_deg(p, P.ANGLE_FROM_RECTIFIED_TO_SKEW_GRID)} "
        f"+k={p.scale(P.SCALE_FACTOR_ON_INITIAL_LINE)} {offsets}"
    )


# Exact classes only; subclasses with their own axis or origin
# conventions are not matched.
_PROJ_TERMS: Dict[Type[CoordinateProjection], ProjTerms] = {
    TransverseMercator: lambda p: f"+proj=tmerc {_natural_origin(p)} {_scale(p)}",
    LambertConicConformal1SP: _lcc_1sp,
    LambertConicConformal2SP: lambda p: f"+proj=lcc {_false_origin(p)}",
    MercatorA: lambda p: f"+proj=merc {_central_meridian(p)} {_scale(p)}",
    MercatorB: _mercator_b,
    PolarStereographicA: lambda p: f"+proj=stere {_natural_origin(p)} {_scale(p)}",
    PolarStereographicB: _polar_b,
    ObliqueStereographic: lambda p: f"+proj=sterea {_natural_origin(p)} {_scale(p)}",
    CassiniSoldner: lambda p: f"+proj=cass {_natural_origin(p)}",
    AlbersEqualArea: lambda p: f"+proj=aea {_false_origin(p)}",
    LambertAzimuthalEqualArea: lambda p: f"+proj=laea {_natural_origin(p)}",
    LambertCylindricalEqualArea: _cea,
    AmericanPolyconic: lambda p: f"+proj=poly {_natural_origin(p)}",
    Sinusoidal: lambda p: f"+proj=sinu {_central_meridian(p)}",
    Orthographic: lambda p: f"+proj=ortho {_natural_origin(p)}",
    Bonne: _bonne,
    HotineObliqueMercatorA: lambda p: _omerc(p, centre_origin=False),
    HotineObliqueMercatorB: lambda p: _omerc(p, centre_origin=True),
}


def _ellipsoid_terms(ellipsoid: Ellipsoid) -> str:
    if ellipsoid.is_sphere:
        return f"+R={ellipsoid.a}"
    return f"+a={ellipsoid.a} +rf={ellipsoid.inverse_flattening}"


def proj4_definition(projection: CoordinateProjection) -> Optional[str]:
    """PROJ string equivalent to a projection, or None if PROJ has none.
    
    Parameters
    ----------
    projection : CoordinateProjection
        Projection to describe.
    
    Returns
    -------
    str or None
        A ``+proj=...`` string in meters.
    """
    terms = _PROJ_TERMS.get(type(projection))
    if terms is None:
        return None
    return (
        f"{terms(projection.parameters)} {_ellipsoid_terms(projection.ellipsoid)} "
        "+units=m +no_defs"
    )


class PyprojReference:
    """PROJ counterpart of a projection.
    
    Parameters
    ----------
    projection : CoordinateProjection
        Projection to mirror.
    
    Raises
    ------
    ValidationError
        If PROJ has no equivalent of the projection's method.
    """
    
    def __init__(self, projection: CoordinateProjection):
        definition = proj4_definition(projection)
        if definition is None:
            raise ValidationError(f"No PROJ equivalent for '{projection.method_name}'.")
        self._projection = projection
        self._proj4 = definition
        
        self._crs_geo = CRS.from_proj4(f"+proj=longlat {_ellipsoid_terms(projection.ellipsoid)} +no_defs")
        self._crs_proj = CRS.from_proj4(self._proj4)
        self._to_proj = Transformer.from_crs(self._crs_geo, self._crs_proj, always_xy=True)
        self._to_geo = Transformer.from_crs(self._crs_proj, self._crs_geo, always_xy=True)
        logger.debug("PROJ reference for %s: %s", projection.method_name, self._proj4)
    
    @property
    def proj4_string(self) -> str:
        return self._proj4
    
    def forward(self, coordinate: GeographicCoordinate) -> PlanarCoordinate:
        lat_deg, lon_deg = coordinate.to_degrees()
        x, y = self._to_proj.transform(lon_deg, lat_deg)
        return PlanarCoordinate(float(x), float(y), coordinate.height)
    
    def reverse(self, coordinate: PlanarCoordinate) -> GeographicResult:
        lon_deg, lat_deg = self._to_geo.transform(coordinate.x, coordinate.y)
        if not (np.isfinite(lat_deg) and np.isfinite(lon_deg)):
            return UNDEFINED
        return GeographicCoordinate.from_degrees(lat_deg, lon_deg, coordinate.z)
    
    def compare(
        self,
        coordinates: Optional[Sequence[GeographicCoordinate]] = None,
        tolerance: float = 0.01
    ) -> ValidationResult:
        """Compare forward transformations with PROJ.
        
        Parameters
        ----------
        coordinates : sequence of GeographicCoordinate, optional
            Points to compare; by default a grid over the area of use.
        tolerance : float
            Allowed easting and northing difference in meters.
        """
        if coordinates is None:
            lats, lons = self._projection.area_of_use.sample_grid(5, 5)
            coordinates = [GeographicCoordinate(float(a), float(b)) for a, b in zip(lats, lons)]
        
        differences: List[float] = []
        for coordinate in coordinates:
            ours = self._projection.forward(coordinate)
            if not ours:
                continue
            theirs = self.forward(coordinate)
            if not (np.isfinite(theirs.x) and np.isfinite(theirs.y)):
                continue
            differences.append(max(abs(ours.x - theirs.x), abs(ours.y - theirs.y)))
        
        worst = max(differences) if differences else 0.0
        return ValidationResult(
            test_name="pyproj_reference",
            passed=worst <= tolerance,
            message=f"{self._projection.method_name}: max difference from PROJ {worst:.4f} m",
            details={
                'compared': len(differences),
                'max_difference': float(worst),
                'proj4': self._proj4,
            }
        )
