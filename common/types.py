"""
Coordinate Types for the Projection Engine.

This module defines the immutable value types that cross the boundary of
every projection: geographic coordinates going in to ``forward`` and
planar coordinates coming out, and the reverse for ``reverse``.

Design Rationale
----------------
Projections are shared between threads, so every value they accept or
return is a frozen dataclass. A failed transformation is not an exception
but the ``UNDEFINED`` sentinel, which callers test for the way they would
test for NaN.
"""

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np
from numpy.typing import NDArray


class UndefinedCoordinate:
    """Result of a transformation that has no defined value.
    
    There is exactly one instance, :data:`UNDEFINED`. It is falsy so that
    ``if result:`` reads naturally, and it compares equal only to itself.
    """
    
    _instance = None
    
    def __new__(cls) -> 'UndefinedCoordinate':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __bool__(self) -> bool:
        return False
    
    def __repr__(self) -> str:
        return "UNDEFINED"
    
    def __reduce__(self):
        return (UndefinedCoordinate, ())


UNDEFINED = UndefinedCoordinate()


@dataclass(frozen=True)
class GeographicCoordinate:
    """A geographic coordinate on a reference ellipsoid.
    
    Attributes
    ----------
    latitude : float
        Geodetic latitude in RADIANS (not degrees). Range: [-π/2, π/2].
    longitude : float
        Geodetic longitude in RADIANS. Not normalised; projections reduce
        the difference to their central meridian themselves.
    height : float, optional
        Ellipsoidal height in METERS. Default is 0.
        
    Notes
    -----
    - Latitude is positive north, negative south.
    - Longitude is positive east, negative west.
    
    Examples
    --------
    >>> coord = GeographicCoordinate.from_degrees(50.5, 0.5)
    >>> round(coord.latitude, 6)
    0.881391
    """
    latitude: float  # radians
    longitude: float  # radians
    height: float = 0.0  # meters above ellipsoid
    
    def __post_init__(self):
        """Validate latitude range."""
        if not -np.pi/2 <= self.latitude <= np.pi/2:
            raise ValueError(
                f"Latitude {self.latitude} rad out of range [-π/2, π/2]. "
                f"Did you pass degrees instead of radians?"
            )
        if not np.isfinite(self.longitude):
            raise ValueError(f"Longitude {self.longitude} is not finite.")
    
    def to_degrees(self) -> Tuple[float, float]:
        """Convert to degrees for display.
        
        Returns
        -------
        Tuple[float, float]
            (latitude_degrees, longitude_degrees)
        """
        return float(np.degrees(self.latitude)), float(np.degrees(self.longitude))
    
    @classmethod
    def from_degrees(
        cls,
        lat_deg: float,
        lon_deg: float,
        height_m: float = 0.0
    ) -> 'GeographicCoordinate':
        """Create coordinate from degrees (convenience constructor).
        
        Parameters
        ----------
        lat_deg : float
            Latitude in degrees.
        lon_deg : float
            Longitude in degrees.
        height_m : float, optional
            Ellipsoidal height in meters.
            
        Returns
        -------
        GeographicCoordinate
            Coordinate with internally stored radians.
        """
        return cls(
            latitude=float(np.radians(lat_deg)),
            longitude=float(np.radians(lon_deg)),
            height=height_m
        )


@dataclass(frozen=True)
class PlanarCoordinate:
    """A projected coordinate.
    
    Attributes
    ----------
    x : float
        Easting (or westing for west/south orientated grids) in meters.
    y : float
        Northing (or southing) in meters.
    z : float, optional
        Height carried through 3-D operations, in meters.
    """
    x: float
    y: float
    z: float = 0.0
    
    def as_tuple(self) -> Tuple[float, float]:
        """Return ``(x, y)``."""
        return self.x, self.y


GeographicResult = Union[GeographicCoordinate, UndefinedCoordinate]
PlanarResult = Union[PlanarCoordinate, UndefinedCoordinate]

# Array aliases used by the batch interfaces
FloatArray = NDArray[np.float64]
CoordinateArrays = Tuple[FloatArray, FloatArray]


def is_undefined(value: object) -> bool:
    """True if ``value`` is the :data:`UNDEFINED` sentinel."""
    return value is UNDEFINED
