"""
Reference Ellipsoid Constants and Numerical Tolerances.

This module provides the defining constants of the reference ellipsoids
used by national and global coordinate reference systems, together with
their sources. Every ellipsoid is defined by its semi-major axis and one
second defining parameter (inverse flattening or semi-minor axis), exactly
as published; all other quantities are derived in
:mod:`geospatial.ellipsoid`.

References
----------
- IOGP Publication 373-7-2, Geomatics Guidance Note 7 part 2 (2019).
- EPSG Geodetic Parameter Dataset, ellipsoid table.
- NIMA TR8350.2, Third Edition, 2000 (WGS 84).
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class Constant:
    """A defining constant with uncertainty and provenance.
    
    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma); zero for defined values.
    unit : str
        The unit of the constant (a pint unit name).
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class EllipsoidConstants:
    """Registry of reference ellipsoid defining constants.
    
    All constants are class attributes with full metadata. Semi-major axes
    are given in the unit in which the ellipsoid was defined, which is not
    always the metre (Clarke 1858 is defined in Clarke's feet).
    
    Global Ellipsoids
    -----------------
    WGS 84 and GRS 1980 underlie satellite positioning and most modern
    national datums.
    
    Classical Ellipsoids
    --------------------
    Survey ellipsoids of the 19th and early 20th century that remain the
    basis of national grids (Ordnance Survey, Amersfoort, S-JTSK, NAD27).
    """
    
    # =========================================================================
    # WGS 84 (EPSG:7030)
    # Reference: NIMA TR8350.2, Third Edition, 2000
    # =========================================================================
    
    WGS84_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="meter",
        source="WGS84, NIMA TR8350.2",
        description="Semi-major axis (equatorial radius) of WGS 84"
    )
    
    WGS84_INVERSE_FLATTENING: Final[Constant] = Constant(
        value=298.257223563,
        uncertainty=0.0,  # Defined exactly
        unit="dimensionless",
        source="WGS84, NIMA TR8350.2",
        description="Inverse flattening of WGS 84: 1/f = a / (a - b)"
    )
    
    # =========================================================================
    # GRS 1980 (EPSG:7019)
    # Reference: Moritz, H. (1980). Geodetic Reference System 1980.
    # =========================================================================
    
    GRS80_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,
        unit="meter",
        source="IUGG 1979, Bulletin Géodésique 54",
        description="Semi-major axis of GRS 1980"
    )
    
    GRS80_INVERSE_FLATTENING: Final[Constant] = Constant(
        value=298.257222101,
        uncertainty=0.0,
        unit="dimensionless",
        source="IUGG 1979, Bulletin Géodésique 54 (derived)",
        description="Inverse flattening of GRS 1980"
    )
    
    GRS80_AUTHALIC_SPHERE_RADIUS: Final[Constant] = Constant(
        value=6_371_007.0,
        uncertainty=0.5,
        unit="meter",
        source="EPSG:7048",
        description="Radius of the sphere with the surface area of GRS 1980"
    )
    
    # =========================================================================
    # Classical Survey Ellipsoids
    # Reference: EPSG Geodetic Parameter Dataset
    # =========================================================================
    
    AIRY_1830_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_377_563.396,
        uncertainty=0.0,
        unit="meter",
        source="EPSG:7001",
        description="Semi-major axis of Airy 1830 (Ordnance Survey)"
    )
    
    AIRY_1830_INVERSE_FLATTENING: Final[Constant] = Constant(
        value=299.3249646,
        uncertainty=0.0,
        unit="dimensionless",
        source="EPSG:7001",
        description="Inverse flattening of Airy 1830"
    )
    
    BESSEL_1841_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_377_397.155,
        uncertainty=0.0,
        unit="meter",
        source="EPSG:7004",
        description="Semi-major axis of Bessel 1841"
    )
    
    BESSEL_1841_INVERSE_FLATTENING: Final[Constant] = Constant(
        value=299.1528128,
        uncertainty=0.0,
        unit="dimensionless",
        source="EPSG:7004",
        description="Inverse flattening of Bessel 1841"
    )
    
    CLARKE_1866_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_206.4,
        uncertainty=0.0,
        unit="meter",
        source="EPSG:7008",
        description="Semi-major axis of Clarke 1866 (NAD27)"
    )
    
    CLARKE_1866_SEMI_MINOR_AXIS: Final[Constant] = Constant(
        value=6_356_583.8,
        uncertainty=0.0,
        unit="meter",
        source="EPSG:7008",
        description="Semi-minor axis of Clarke 1866"
    )
    
    CLARKE_1866_AUTHALIC_SPHERE_RADIUS: Final[Constant] = Constant(
        value=6_370_997.0,
        uncertainty=0.5,
        unit="meter",
        source="EPSG:7052",
        description="Radius of the sphere with the surface area of Clarke 1866"
    )
    
    CLARKE_1880_IGN_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_249.2,
        uncertainty=0.0,
        unit="meter",
        source="EPSG:7011",
        description="Semi-major axis of Clarke 1880 (IGN)"
    )
    
    CLARKE_1880_IGN_SEMI_MINOR_AXIS: Final[Constant] = Constant(
        value=6_356_515.0,
        uncertainty=0.0,
        unit="meter",
        source="EPSG:7011",
        description="Semi-minor axis of Clarke 1880 (IGN)"
    )
    
    CLARKE_1858_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=20_926_348.0,
        uncertainty=0.0,
        unit="clarke_foot",
        source="EPSG:7007",
        description="Semi-major axis of Clarke 1858, defined in Clarke's feet"
    )
    
    CLARKE_1858_SEMI_MINOR_AXIS: Final[Constant] = Constant(
        value=20_855_233.0,
        uncertainty=0.0,
        unit="clarke_foot",
        source="EPSG:7007",
        description="Semi-minor axis of Clarke 1858, defined in Clarke's feet"
    )
    
    INTERNATIONAL_1924_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_388.0,
        uncertainty=0.0,
        unit="meter",
        source="EPSG:7022",
        description="Semi-major axis of International 1924 (Hayford 1909)"
    )
    
    INTERNATIONAL_1924_INVERSE_FLATTENING: Final[Constant] = Constant(
        value=297.0,
        uncertainty=0.0,
        unit="dimensionless",
        source="EPSG:7022",
        description="Inverse flattening of International 1924"
    )
    
    KRASSOWSKY_1940_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_245.0,
        uncertainty=0.0,
        unit="meter",
        source="EPSG:7024",
        description="Semi-major axis of Krassowsky 1940"
    )
    
    KRASSOWSKY_1940_INVERSE_FLATTENING: Final[Constant] = Constant(
        value=298.3,
        uncertainty=0.0,
        unit="dimensionless",
        source="EPSG:7024",
        description="Inverse flattening of Krassowsky 1940"
    )
    
    EVEREST_1967_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_377_298.556,
        uncertainty=0.0,
        unit="meter",
        source="EPSG:7016",
        description="Semi-major axis of Everest 1830 (1967 Definition)"
    )
    
    EVEREST_1967_INVERSE_FLATTENING: Final[Constant] = Constant(
        value=300.8017,
        uncertainty=0.0,
        unit="dimensionless",
        source="EPSG:7016",
        description="Inverse flattening of Everest 1830 (1967 Definition)"
    )


class NumericalTolerances:
    """Tolerances shared by the projection formulas.
    
    Values are in radians unless stated otherwise.
    """
    
    # Ellipsoids with an eccentricity below this are treated as spheres
    SPHERE_ECCENTRICITY: Final[float] = 1e-12
    
    # Closest approach to a pole for formulas singular there
    POLE: Final[float] = 1e-10
    
    # Slack allowed on a computed latitude before it is rejected
    LATITUDE_OVERSHOOT: Final[float] = 1e-12
    
    # Default convergence tolerance for latitude iterations
    LATITUDE_CONVERGENCE: Final[float] = 1e-12
