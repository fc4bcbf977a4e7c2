"""
Operation Parameters and Areas of Use.

This module provides the parameter source consumed by projection
constructors: named parameter identities with a unit category, an
immutable parameter set that converts values to the base units of the
formulas, and the area of use that accompanies every projection.

Parameter names follow the EPSG Geodetic Parameter Dataset, so a
parameter set can be written directly from a published grid definition:

>>> params = OperationParameterSet({
...     "Latitude of natural origin": "49 degree",
...     "Longitude of natural origin": "-2 degree",
...     "Scale factor at natural origin": 0.9996012717,
...     "False easting": "400000 m",
...     "False northing": "-100000 m",
... })
>>> round(params.angle(Parameters.LATITUDE_OF_NATURAL_ORIGIN), 6)
0.855211
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Final, Iterable, Iterator, Mapping, Optional, Tuple, Union

import numpy as np
import pint

from common.exceptions import (
    AreaOfUseError,
    MissingParameterError,
    ParameterError,
    ParameterUnitError,
)
from common.logging_config import get_logger
from common.types import GeographicCoordinate
from common.units import STANDARD_UNITS, UnitCategory, category_of, to_metres, to_radians, units

logger = get_logger(__name__)

ParameterValue = Union[float, pint.Quantity]


@dataclass(frozen=True)
class OperationParameter:
    """Identity of a coordinate operation parameter.
    
    Attributes
    ----------
    name : str
        EPSG parameter name.
    category : UnitCategory
        Unit category the value must have.
    epsg_code : int, optional
        EPSG parameter code.
    aliases : tuple of str
        Alternative names accepted on lookup.
    """
    name: str
    category: UnitCategory
    epsg_code: Optional[int] = None
    aliases: Tuple[str, ...] = ()
    
    def matches(self, name: str) -> bool:
        """True if ``name`` is this parameter's name or an alias (case-insensitive)."""
        wanted = name.strip().lower()
        return wanted == self.name.lower() or wanted in (alias.lower() for alias in self.aliases)


def _angle(name: str, code: Optional[int], *aliases: str) -> OperationParameter:
    return OperationParameter(name, UnitCategory.ANGLE, code, aliases)


def _length(name: str, code: Optional[int], *aliases: str) -> OperationParameter:
    return OperationParameter(name, UnitCategory.LENGTH, code, aliases)


def _scale(name: str, code: Optional[int], *aliases: str) -> OperationParameter:
    return OperationParameter(name, UnitCategory.SCALE, code, aliases)


def _number(name: str, code: Optional[int], *aliases: str) -> OperationParameter:
    return OperationParameter(name, UnitCategory.NUMBER, code, aliases)


class Parameters:
    """Catalogue of operation parameter identities.
    
    Natural Origin
    --------------
    Parameters of projections defined at a point of exact scale.
    
    False Origin
    ------------
    Parameters of conic projections whose grid origin is not the natural
    origin.
    
    Projection Centre
    -----------------
    Parameters of oblique projections.
    """
    
    # =========================================================================
    # Natural Origin
    # =========================================================================
    
    LATITUDE_OF_NATURAL_ORIGIN: Final = _angle("Latitude of natural origin", 8801, "latitude_of_origin", "lat_0")
    LONGITUDE_OF_NATURAL_ORIGIN: Final = _angle("Longitude of natural origin", 8802, "central_meridian", "lon_0")
    SCALE_FACTOR_AT_NATURAL_ORIGIN: Final = _scale("Scale factor at natural origin", 8805, "scale_factor", "k_0")
    FALSE_EASTING: Final = _length("False easting", 8806, "false_easting", "x_0")
    FALSE_NORTHING: Final = _length("False northing", 8807, "false_northing", "y_0")
    
    # =========================================================================
    # False Origin
    # =========================================================================
    
    LATITUDE_OF_FALSE_ORIGIN: Final = _angle("Latitude of false origin", 8821)
    LONGITUDE_OF_FALSE_ORIGIN: Final = _angle("Longitude of false origin", 8822)
    LATITUDE_OF_1ST_STANDARD_PARALLEL: Final = _angle("Latitude of 1st standard parallel", 8823, "standard_parallel_1", "lat_1")
    LATITUDE_OF_2ND_STANDARD_PARALLEL: Final = _angle("Latitude of 2nd standard parallel", 8824, "standard_parallel_2", "lat_2")
    EASTING_AT_FALSE_ORIGIN: Final = _length("Easting at false origin", 8826)
    NORTHING_AT_FALSE_ORIGIN: Final = _length("Northing at false origin", 8827)
    LATITUDE_OF_STANDARD_PARALLEL: Final = _angle("Latitude of standard parallel", 8832, "lat_ts")
    LONGITUDE_OF_ORIGIN: Final = _angle("Longitude of origin", 8833)
    ELLIPSOID_SCALING_FACTOR: Final = _scale("Ellipsoid scaling factor", 1038)
    
    # =========================================================================
    # Projection Centre
    # =========================================================================
    
    LATITUDE_OF_PROJECTION_CENTRE: Final = _angle("Latitude of projection centre", 8811, "latitude_of_center")
    LONGITUDE_OF_PROJECTION_CENTRE: Final = _angle("Longitude of projection centre", 8812, "longitude_of_center")
    AZIMUTH_OF_INITIAL_LINE: Final = _angle("Azimuth of initial line", 8813, "azimuth")
    ANGLE_FROM_RECTIFIED_TO_SKEW_GRID: Final = _angle("Angle from Rectified to Skew Grid", 8814, "rectified_grid_angle")
    SCALE_FACTOR_ON_INITIAL_LINE: Final = _scale("Scale factor on initial line", 8815)
    EASTING_AT_PROJECTION_CENTRE: Final = _length("Easting at projection centre", 8816)
    NORTHING_AT_PROJECTION_CENTRE: Final = _length("Northing at projection centre", 8817)
    LATITUDE_OF_PSEUDO_STANDARD_PARALLEL: Final = _angle("Latitude of pseudo standard parallel", 8818)
    SCALE_FACTOR_ON_PSEUDO_STANDARD_PARALLEL: Final = _scale("Scale factor on pseudo standard parallel", 8819)
    CO_LATITUDE_OF_CONE_AXIS: Final = _angle("Co-latitude of cone axis", 1036)
    
    # =========================================================================
    # Zoned Grids, Topocentric and Height Parameters
    # =========================================================================
    
    INITIAL_LONGITUDE: Final = _angle("Initial longitude", 8830)
    ZONE_WIDTH: Final = _angle("Zone width", 8831)
    LATITUDE_OF_TOPOCENTRIC_ORIGIN: Final = _angle("Latitude of topocentric origin", 8834)
    LONGITUDE_OF_TOPOCENTRIC_ORIGIN: Final = _angle("Longitude of topocentric origin", 8835)
    ELLIPSOIDAL_HEIGHT_OF_TOPOCENTRIC_ORIGIN: Final = _length("Ellipsoidal height of topocentric origin", 8836)
    VIEWPOINT_HEIGHT: Final = _length("Viewpoint height", 8840)
    PROJECTION_PLANE_ORIGIN_HEIGHT: Final = _length("Projection plane origin height", 1039)
    
    # =========================================================================
    # Krovak Modified Polynomial Correction
    # =========================================================================
    
    ORDINATE_1_OF_EVALUATION_POINT: Final = _length("Ordinate 1 of evaluation point", 8617)
    ORDINATE_2_OF_EVALUATION_POINT: Final = _length("Ordinate 2 of evaluation point", 8618)
    C1: Final = _number("C1", 1026)
    C2: Final = _number("C2", 1027)
    C3: Final = _number("C3", 1028)
    C4: Final = _number("C4", 1029)
    C5: Final = _number("C5", 1030)
    C6: Final = _number("C6", 1031)
    C7: Final = _number("C7", 1032)
    C8: Final = _number("C8", 1033)
    C9: Final = _number("C9", 1034)
    C10: Final = _number("C10", 1035)
    
    @classmethod
    def all(cls) -> Tuple[OperationParameter, ...]:
        """Every parameter identity in the catalogue."""
        return tuple(
            value for value in vars(cls).values()
            if isinstance(value, OperationParameter)
        )
    
    @classmethod
    def find(cls, key: Union[OperationParameter, str, int]) -> OperationParameter:
        """Resolve a parameter by identity, name, alias or EPSG code.
        
        Raises
        ------
        ParameterError
            If nothing in the catalogue matches.
        """
        if isinstance(key, OperationParameter):
            return key
        for parameter in cls.all():
            if isinstance(key, int) and parameter.epsg_code == key:
                return parameter
            if isinstance(key, str) and parameter.matches(key):
                return parameter
        raise ParameterError(f"Unknown operation parameter '{key}'.")


class OperationParameterSet(Mapping):
    """Immutable association of operation parameters with values.
    
    Values are pint quantities or bare numbers. Strings are parsed with
    the engine unit registry, so ``"49 degree"`` and ``"2000000 ftUS"`` are
    accepted. Angles and lengths must carry a unit; scale factors and
    polynomial coefficients may be bare numbers.
    
    Parameters
    ----------
    values : mapping, optional
        Keys are :class:`OperationParameter` identities, parameter names,
        aliases or EPSG codes.
    """
    
    def __init__(
        self,
        values: Optional[Mapping[Union[OperationParameter, str, int], Any]] = None
    ):
        resolved: Dict[OperationParameter, ParameterValue] = {}
        for key, value in (values or {}).items():
            parameter = Parameters.find(key)
            if isinstance(value, str):
                value = units.parse(value)
            elif not isinstance(value, pint.Quantity):
                value = float(value)
            resolved[parameter] = value
        self._values = MappingProxyType(resolved)
    
    def __getitem__(self, key: Union[OperationParameter, str, int]) -> ParameterValue:
        try:
            return self._values[Parameters.find(key)]
        except ParameterError:
            raise KeyError(key) from None
    
    def __iter__(self) -> Iterator[OperationParameter]:
        return iter(self._values)
    
    def __len__(self) -> int:
        return len(self._values)
    
    def __repr__(self) -> str:
        body = ", ".join(f"{p.name}={v}" for p, v in self._values.items())
        return f"OperationParameterSet({body})"
    
    def updated(
        self,
        values: Mapping[Union[OperationParameter, str, int], Any]
    ) -> 'OperationParameterSet':
        """Return a new set with ``values`` added or replaced."""
        merged: Dict[Union[OperationParameter, str, int], Any] = dict(self._values)
        for key, value in values.items():
            merged[Parameters.find(key)] = value
        return OperationParameterSet(merged)
    
    def require(self, parameters: Iterable[OperationParameter], method_name: str = "") -> None:
        """Check that every parameter is present with the right unit category.
        
        Raises
        ------
        MissingParameterError
            If a parameter is absent.
        ParameterUnitError
            If a value has the wrong unit category.
        """
        for parameter in parameters:
            if parameter not in self._values:
                raise MissingParameterError(parameter.name, method_name)
            self._check_category(parameter, self._values[parameter])
    
    @staticmethod
    def _check_category(parameter: OperationParameter, value: ParameterValue) -> None:
        actual = category_of(value)
        expected = parameter.category
        dimensionless = (UnitCategory.SCALE, UnitCategory.NUMBER)
        if actual == expected or (expected in dimensionless and actual in dimensionless):
            return
        raise ParameterUnitError(parameter.name, expected.value, actual.value)
    
    def _get(self, parameter: OperationParameter) -> ParameterValue:
        if parameter not in self._values:
            raise MissingParameterError(parameter.name)
        value = self._values[parameter]
        self._check_category(parameter, value)
        return value
    
    def quantity(self, parameter: OperationParameter) -> ParameterValue:
        """Raw value in its display unit."""
        return self._get(parameter)
    
    def angle(self, parameter: OperationParameter) -> float:
        """Angle value in radians."""
        return to_radians(self._get(parameter))
    
    def length(self, parameter: OperationParameter) -> float:
        """Length value in meters."""
        return to_metres(self._get(parameter))
    
    def scale(self, parameter: OperationParameter) -> float:
        """Scale value as a pure ratio (ppm and similar are converted)."""
        value = self._get(parameter)
        if isinstance(value, pint.Quantity):
            return float(value.to(STANDARD_UNITS[UnitCategory.SCALE]).magnitude)
        return float(value)
    
    number = scale


@dataclass(frozen=True)
class AreaOfUse:
    """Geographic extent within which a projection's parameters are valid.
    
    Bounds are in degrees. An extent that crosses the antimeridian has
    ``west > east``.
    
    Attributes
    ----------
    name : str
        Description of the area.
    south, west, north, east : float
        Bounding box in degrees.
    """
    name: str
    south: float = -90.0
    west: float = -180.0
    north: float = 90.0
    east: float = 180.0
    
    def __post_init__(self):
        """Validate bounds."""
        if not -90.0 <= self.south <= self.north <= 90.0:
            raise AreaOfUseError(
                f"Area of use '{self.name}' has invalid latitude bounds "
                f"[{self.south}, {self.north}]."
            )
        if not (-180.0 <= self.west <= 180.0 and -180.0 <= self.east <= 180.0):
            raise AreaOfUseError(
                f"Area of use '{self.name}' has invalid longitude bounds "
                f"[{self.west}, {self.east}]."
            )
    
    @property
    def crosses_antimeridian(self) -> bool:
        return self.west > self.east
    
    def contains(self, coordinate: GeographicCoordinate) -> bool:
        """True if the coordinate lies inside the bounding box."""
        lat_deg, lon_deg = coordinate.to_degrees()
        lon_deg = (lon_deg + 180.0) % 360.0 - 180.0
        if not self.south <= lat_deg <= self.north:
            return False
        if self.crosses_antimeridian:
            return lon_deg >= self.west or lon_deg <= self.east
        return self.west <= lon_deg <= self.east
    
    def sample_grid(self, rows: int = 5, columns: int = 5, margin: float = 0.1) -> Tuple[np.ndarray, np.ndarray]:
        """Regular grid of latitudes and longitudes (radians) inside the area.
        
        Parameters
        ----------
        rows, columns : int
            Grid size.
        margin : float
            Fraction of the extent left free on each side.
            
        Returns
        -------
        Tuple[ndarray, ndarray]
            Flattened latitude and longitude arrays in radians.
        """
        east = self.east + 360.0 if self.crosses_antimeridian else self.east
        lat_pad = (self.north - self.south) * margin
        lon_pad = (east - self.west) * margin
        lats = np.linspace(self.south + lat_pad, self.north - lat_pad, rows)
        lons = np.linspace(self.west + lon_pad, east - lon_pad, columns)
        lat_grid, lon_grid = np.meshgrid(lats, lons, indexing="ij")
        return np.radians(lat_grid.ravel()), np.radians(lon_grid.ravel())


WORLD: Final = AreaOfUse("World")
