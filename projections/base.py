"""
Projection Base Contract.

Every coordinate projection in the engine derives from
:class:`CoordinateProjection`. The base class owns construction-time
validation, immutability, and the conversion of formula results into
coordinate values; concrete projections only derive their constants in
``_setup`` and implement the two formulas ``_forward`` and ``_reverse``.

Undefined Results
-----------------
A formula that has no value for an input returns ``None``. The base class
also treats any non-finite result (the NaN that numpy produces for
``arcsin(1.2)`` or a division by zero) and any reverse latitude beyond a
pole as undefined. Callers receive the ``UNDEFINED`` sentinel in all of
these cases, never an exception.

Thread Safety
-------------
All derived constants are assigned inside the constructor, after which
the instance refuses attribute assignment. ``forward`` and ``reverse`` keep
no state between calls, so a single instance may be shared between
threads without locking.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Mapping, Optional, Tuple, Union
import numpy as np

from common.constants import NumericalTolerances
from common.exceptions import AreaOfUseError, EllipsoidError, ParameterError
from common.logging_config import get_logger
from common.types import (
    UNDEFINED,
    CoordinateArrays,
    FloatArray,
    GeographicCoordinate,
    GeographicResult,
    PlanarCoordinate,
    PlanarResult,
)
from geospatial.ellipsoid import Ellipsoid
from geospatial.numerics import HALF_PI, signed_longitude_delta
from geospatial.parameters import AreaOfUse, OperationParameter, OperationParameterSet

logger = get_logger(__name__)

FormulaResult = Optional[Tuple[float, float]]


class CoordinateProjection(ABC):
    """Abstract base class for map projections.
    
    Parameters
    ----------
    ellipsoid : Ellipsoid
        Reference ellipsoid; shared, never copied.
    parameters : OperationParameterSet or mapping
        Operation parameters. Plain mappings are converted.
    area_of_use : AreaOfUse
        Extent within which the parameters are valid.
        
    Raises
    ------
    EllipsoidError
        If ``ellipsoid`` is missing.
    AreaOfUseError
        If ``area_of_use`` is missing.
    MissingParameterError, ParameterUnitError
        If a required parameter is absent or has the wrong unit category.
    """
    
    method_name: ClassVar[str] = ""
    method_code: ClassVar[Optional[int]] = None
    aliases: ClassVar[Tuple[str, ...]] = ()
    required_parameters: ClassVar[Tuple[OperationParameter, ...]] = ()
    is_reversible: ClassVar[bool] = True
    
    def __init__(
        self,
        ellipsoid: Ellipsoid,
        parameters: Union[OperationParameterSet, Mapping],
        area_of_use: AreaOfUse
    ):
        if ellipsoid is None:
            raise EllipsoidError(f"'{self.method_name}' requires an ellipsoid.")
        if not isinstance(ellipsoid, Ellipsoid):
            raise EllipsoidError(f"Expected an Ellipsoid, got {type(ellipsoid).__name__}.")
        if parameters is None:
            raise ParameterError(f"'{self.method_name}' requires an operation parameter set.")
        if area_of_use is None:
            raise AreaOfUseError(f"'{self.method_name}' requires an area of use.")
        if not isinstance(area_of_use, AreaOfUse):
            raise AreaOfUseError(f"Expected an AreaOfUse, got {type(area_of_use).__name__}.")
        if not isinstance(parameters, OperationParameterSet):
            parameters = OperationParameterSet(parameters)
        parameters.require(self.required_parameters, self.method_name)
        
        self._ellipsoid = ellipsoid
        self._parameters = parameters
        self._area_of_use = area_of_use
        self._setup(parameters)
        self._frozen = True
        logger.debug(
            "Initialized %s on %s for %s",
            self.method_name, ellipsoid.name, area_of_use.name
        )
    
    def __setattr__(self, name, value):
        if getattr(self, "_frozen", False):
            raise AttributeError(f"{type(self).__name__} is immutable after construction.")
        super().__setattr__(name, value)
    
    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable after construction.")
    
    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(ellipsoid={self._ellipsoid.name!r}, "
            f"area_of_use={self._area_of_use.name!r})"
        )
    
    @property
    def ellipsoid(self) -> Ellipsoid:
        return self._ellipsoid
    
    @property
    def parameters(self) -> OperationParameterSet:
        return self._parameters
    
    @property
    def area_of_use(self) -> AreaOfUse:
        return self._area_of_use
    
    # ------------------------------------------------------------------
    # Formula hooks
    # ------------------------------------------------------------------
    
    @abstractmethod
    def _setup(self, parameters: OperationParameterSet) -> None:
        """Extract parameters and derive constants; runs once, in the constructor."""
        pass
    
    @abstractmethod
    def _forward(self, phi: float, lam: float, height: float) -> FormulaResult:
        """Geographic (radians) to planar (meters); None when undefined."""
        pass
    
    @abstractmethod
    def _reverse(self, x: float, y: float) -> FormulaResult:
        """Planar (meters) to geographic (radians); None when undefined."""
        pass
    
    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------
    
    def forward(self, coordinate: GeographicCoordinate) -> PlanarResult:
        """Transform a geographic coordinate to planar.
        
        Parameters
        ----------
        coordinate : GeographicCoordinate
            Input position; its height is carried to ``z``.
            
        Returns
        -------
        PlanarCoordinate or UNDEFINED
        """
        with np.errstate(all="ignore"):
            result = self._forward(coordinate.latitude, coordinate.longitude, coordinate.height)
        if result is None or not np.all(np.isfinite(result)):
            logger.debug("%s forward undefined for %s", self.method_name, coordinate)
            return UNDEFINED
        x, y = result
        return PlanarCoordinate(float(x), float(y), coordinate.height)
    
    def reverse(self, coordinate: PlanarCoordinate) -> GeographicResult:
        """Transform a planar coordinate to geographic.
        
        The returned longitude is reduced to (-π, π].
        
        Parameters
        ----------
        coordinate : PlanarCoordinate
            Input position; its ``z`` is carried to the height.
            
        Returns
        -------
        GeographicCoordinate or UNDEFINED
        """
        with np.errstate(all="ignore"):
            result = self._reverse(coordinate.x, coordinate.y)
        if result is None or not np.all(np.isfinite(result)):
            logger.debug("%s reverse undefined for %s", self.method_name, coordinate)
            return UNDEFINED
        phi, lam = result
        if abs(phi) > HALF_PI + NumericalTolerances.LATITUDE_OVERSHOOT:
            logger.debug("%s reverse latitude %s beyond pole", self.method_name, phi)
            return UNDEFINED
        phi = float(np.clip(phi, -HALF_PI, HALF_PI))
        return GeographicCoordinate(phi, float(signed_longitude_delta(lam, 0.0)), coordinate.z)
    
    def forward_many(
        self,
        latitudes: FloatArray,
        longitudes: FloatArray,
        heights: Optional[FloatArray] = None
    ) -> CoordinateArrays:
        """Project arrays of coordinates.
        
        Parameters
        ----------
        latitudes, longitudes : ndarray
            Coordinates in radians.
        heights : ndarray, optional
            Ellipsoidal heights in meters.
            
        Returns
        -------
        Tuple[ndarray, ndarray]
            (x, y) in meters; undefined positions are NaN.
        """
        latitudes = np.asarray(latitudes, dtype=np.float64)
        longitudes = np.asarray(longitudes, dtype=np.float64)
        if heights is None:
            heights = np.zeros_like(latitudes)
        heights = np.broadcast_to(np.asarray(heights, dtype=np.float64), latitudes.shape)
        xs = np.full(latitudes.shape, np.nan)
        ys = np.full(latitudes.shape, np.nan)
        for index in np.ndindex(latitudes.shape):
            lat, lon = float(latitudes[index]), float(longitudes[index])
            if not (-HALF_PI <= lat <= HALF_PI and np.isfinite(lon)):
                continue
            result = self.forward(GeographicCoordinate(lat, lon, float(heights[index])))
            if result:
                xs[index], ys[index] = result.x, result.y
        return xs, ys
    
    def reverse_many(self, xs: FloatArray, ys: FloatArray) -> CoordinateArrays:
        """Unproject arrays of planar coordinates.
        
        Returns
        -------
        Tuple[ndarray, ndarray]
            (latitude, longitude) in radians; undefined positions are NaN.
        """
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        lats = np.full(xs.shape, np.nan)
        lons = np.full(xs.shape, np.nan)
        for index in np.ndindex(xs.shape):
            result = self.reverse(PlanarCoordinate(float(xs[index]), float(ys[index])))
            if result:
                lats[index], lons[index] = result.latitude, result.longitude
        return lats, lons
