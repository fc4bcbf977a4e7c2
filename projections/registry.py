"""
Projection Method Registry.

Resolves a coordinate operation method, given by EPSG name, alias or
EPSG method code, to its concrete projection class, and builds
projections from plain configuration mappings.

Example Usage
-------------
>>> from projections.registry import create_projection
>>> from geospatial.ellipsoid import ReferenceEllipsoids
>>> utm = create_projection(
...     "Transverse Mercator",
...     ReferenceEllipsoids.WGS84,
...     {
...         "Latitude of natural origin": "0 degree",
...         "Longitude of natural origin": "-3 degree",
...         "Scale factor at natural origin": 0.9996,
...         "False easting": "500000 m",
...         "False northing": "0 m",
...     },
... )
>>> type(utm).__name__
'TransverseMercator'
"""

from typing import Any, Dict, List, Mapping, Optional, Type, Union

from common.exceptions import ConfigurationError, UnknownProjectionError
from common.logging_config import get_logger
from geospatial.ellipsoid import Ellipsoid, ReferenceEllipsoids
from geospatial.parameters import WORLD, AreaOfUse, OperationParameterSet
from projections.azimuthal import (
    Gnomonic,
    GuamProjection,
    LambertAzimuthalEqualArea,
    ModifiedAzimuthalEquidistant,
    Orthographic,
)
from projections.base import CoordinateProjection
from projections.bonne import Bonne, BonneSouthOrientated
from projections.cassini import CassiniSoldner, HyperbolicCassiniSoldner
from projections.cylindrical import EquidistantCylindrical, MillerCylindrical, Sinusoidal
from projections.equal_area import (
    AlbersEqualArea,
    LambertCylindricalEqualArea,
    LambertCylindricalEqualAreaSpherical,
)
from projections.krovak import (
    KrovakModified,
    KrovakModifiedNorthOrientated,
    KrovakNorthOrientated,
    KrovakProjection,
)
from projections.lambert_conic import (
    LambertConicConformal1SP,
    LambertConicConformal1SPWestOrientated,
    LambertConicConformal2SP,
    LambertConicConformal2SPBelgium,
    LambertConicConformal2SPMichigan,
    LambertConicNearConformal,
)
from projections.mercator import MercatorA, MercatorB, MercatorSpherical, PseudoMercator
from projections.oblique_mercator import (
    HotineObliqueMercatorA,
    HotineObliqueMercatorB,
    LabordeObliqueMercator,
)
from projections.perspective import VerticalPerspective, VerticalPerspectiveOrthographic
from projections.polyconic import AmericanPolyconic, ColombiaUrban
from projections.stereographic import (
    ObliqueStereographic,
    PolarStereographicA,
    PolarStereographicB,
    PolarStereographicC,
)
from projections.transverse_mercator import (
    TransverseMercator,
    TransverseMercatorSouthOrientated,
    TransverseMercatorZoned,
)

logger = get_logger(__name__)

PROJECTION_CLASSES: tuple = (
    MercatorA,
    MercatorB,
    MercatorSpherical,
    PseudoMercator,
    LambertConicConformal1SP,
    LambertConicConformal1SPWestOrientated,
    LambertConicConformal2SP,
    LambertConicConformal2SPBelgium,
    LambertConicConformal2SPMichigan,
    LambertConicNearConformal,
    TransverseMercator,
    TransverseMercatorSouthOrientated,
    TransverseMercatorZoned,
    KrovakProjection,
    KrovakNorthOrientated,
    KrovakModified,
    KrovakModifiedNorthOrientated,
    HotineObliqueMercatorA,
    HotineObliqueMercatorB,
    LabordeObliqueMercator,
    PolarStereographicA,
    PolarStereographicB,
    PolarStereographicC,
    ObliqueStereographic,
    Gnomonic,
    Orthographic,
    LambertAzimuthalEqualArea,
    ModifiedAzimuthalEquidistant,
    GuamProjection,
    VerticalPerspective,
    VerticalPerspectiveOrthographic,
    AlbersEqualArea,
    LambertCylindricalEqualArea,
    LambertCylindricalEqualAreaSpherical,
    Bonne,
    BonneSouthOrientated,
    AmericanPolyconic,
    ColombiaUrban,
    CassiniSoldner,
    HyperbolicCassiniSoldner,
    EquidistantCylindrical,
    MillerCylindrical,
    Sinusoidal,
)


def _normalise(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch.isalnum())


def _build_index() -> Dict[Union[str, int], Type[CoordinateProjection]]:
    index: Dict[Union[str, int], Type[CoordinateProjection]] = {}
    for cls in PROJECTION_CLASSES:
        if cls.method_code is not None:
            index[cls.method_code] = cls
        for name in (cls.method_name,) + tuple(cls.aliases):
            index.setdefault(_normalise(name), cls)
    return index


_INDEX = _build_index()


def available_methods() -> List[str]:
    """Names of all registered projection methods."""
    return sorted(cls.method_name for cls in PROJECTION_CLASSES)


def get_projection_class(method: Union[str, int]) -> Type[CoordinateProjection]:
    """Resolve a method name, alias or EPSG method code.
    
    Parameters
    ----------
    method : str or int
        e.g. ``"Transverse Mercator"``, ``"EPSG:9807"``, ``9807``.
        
    Returns
    -------
    type
        The concrete :class:`CoordinateProjection` subclass.
        
    Raises
    ------
    UnknownProjectionError
        If nothing is registered under ``method``.
    """
    key: Union[str, int]
    if isinstance(method, int):
        key = method
    else:
        text = str(method).strip()
        if text.upper().startswith("EPSG:"):
            text = text[5:]
        key = int(text) if text.isdigit() else _normalise(text)
    try:
        cls = _INDEX[key]
    except KeyError:
        raise UnknownProjectionError(f"No projection method registered as '{method}'.") from None
    logger.debug("Resolved method %r to %s", method, cls.__name__)
    return cls


def create_projection(
    method: Union[str, int],
    ellipsoid: Ellipsoid,
    parameters: Union[OperationParameterSet, Mapping],
    area_of_use: AreaOfUse = WORLD
) -> CoordinateProjection:
    """Construct a projection by method name or code."""
    return get_projection_class(method)(ellipsoid, parameters, area_of_use)


def _ellipsoid_from_definition(definition: Any) -> Ellipsoid:
    if isinstance(definition, Ellipsoid):
        return definition
    if isinstance(definition, str):
        return ReferenceEllipsoids.by_name(definition)
    if isinstance(definition, Mapping):
        name = definition.get("name", "unnamed")
        a = definition.get("semi_major_axis")
        if a is None:
            raise ConfigurationError("Ellipsoid definition needs 'semi_major_axis'.")
        if "inverse_flattening" in definition:
            return Ellipsoid.from_inverse_flattening(a, definition["inverse_flattening"], name)
        if "semi_minor_axis" in definition:
            return Ellipsoid.from_semi_minor_axis(a, definition["semi_minor_axis"], name)
        if "flattening" in definition:
            return Ellipsoid.from_flattening(a, definition["flattening"], name)
        return Ellipsoid.sphere(a, name)
    raise ConfigurationError(f"Cannot build an ellipsoid from {definition!r}.")


def projection_from_definition(definition: Mapping[str, Any]) -> CoordinateProjection:
    """Build a projection from a configuration mapping.
    
    Parameters
    ----------
    definition : mapping
        ``method`` (name or code), ``ellipsoid`` (catalogue name or a
        mapping with ``semi_major_axis`` and one of ``inverse_flattening``,
        ``semi_minor_axis`` or ``flattening``; a bare axis is a sphere),
        ``parameters`` (name to value) and optionally ``area_of_use``
        (mapping of ``name``, ``south``, ``west``, ``north``, ``east``).
        
    Raises
    ------
    ConfigurationError
        If a required key is missing or malformed.
    """
    missing = [key for key in ("method", "ellipsoid", "parameters") if key not in definition]
    if missing:
        raise ConfigurationError(f"Projection definition is missing {', '.join(missing)}.")
    area: Optional[Any] = definition.get("area_of_use")
    if area is None:
        area_of_use = WORLD
    elif isinstance(area, AreaOfUse):
        area_of_use = area
    else:
        area_of_use = AreaOfUse(**dict(area))
    return create_projection(
        definition["method"],
        _ellipsoid_from_definition(definition["ellipsoid"]),
        definition["parameters"],
        area_of_use,
    )
