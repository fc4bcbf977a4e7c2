"""
Map Projections for the Geodetic Projection Engine.

Concrete projections are grouped by family. Each one takes an ellipsoid,
an operation parameter set and an area of use, and offers ``forward``
(geographic radians to planar meters) and ``reverse``. Transformations
with no defined value return ``UNDEFINED``.

Projections are looked up by EPSG method name or code through
:func:`create_projection`.
"""

from common.types import UNDEFINED
from projections.base import CoordinateProjection
from projections.registry import (
    PROJECTION_CLASSES,
    available_methods,
    create_projection,
    get_projection_class,
    projection_from_definition,
)
from projections.azimuthal import (
    Gnomonic,
    GuamProjection,
    LambertAzimuthalEqualArea,
    ModifiedAzimuthalEquidistant,
    Orthographic,
)
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

__all__ = [
    "UNDEFINED",
    "CoordinateProjection",
    "PROJECTION_CLASSES",
    "available_methods",
    "create_projection",
    "get_projection_class",
    "projection_from_definition",
    "MercatorA",
    "MercatorB",
    "MercatorSpherical",
    "PseudoMercator",
    "LambertConicConformal1SP",
    "LambertConicConformal1SPWestOrientated",
    "LambertConicConformal2SP",
    "LambertConicConformal2SPBelgium",
    "LambertConicConformal2SPMichigan",
    "LambertConicNearConformal",
    "TransverseMercator",
    "TransverseMercatorSouthOrientated",
    "TransverseMercatorZoned",
    "KrovakProjection",
    "KrovakNorthOrientated",
    "KrovakModified",
    "KrovakModifiedNorthOrientated",
    "HotineObliqueMercatorA",
    "HotineObliqueMercatorB",
    "LabordeObliqueMercator",
    "PolarStereographicA",
    "PolarStereographicB",
    "PolarStereographicC",
    "ObliqueStereographic",
    "Gnomonic",
    "Orthographic",
    "LambertAzimuthalEqualArea",
    "ModifiedAzimuthalEquidistant",
    "GuamProjection",
    "VerticalPerspective",
    "VerticalPerspectiveOrthographic",
    "AlbersEqualArea",
    "LambertCylindricalEqualArea",
    "LambertCylindricalEqualAreaSpherical",
    "Bonne",
    "BonneSouthOrientated",
    "AmericanPolyconic",
    "ColombiaUrban",
    "CassiniSoldner",
    "HyperbolicCassiniSoldner",
    "EquidistantCylindrical",
    "MillerCylindrical",
    "Sinusoidal",
]
