"""
Reference data for the projection engine test suite.

A catalogue with one configured instance of every registered projection
method, each with an area of use in which its reverse is expected to undo
its forward, plus helpers for writing sexagesimal test values and comparing results.
"""
import numpy as np
import pytest

from common.types import GeographicCoordinate
from common.units import Q_, dms_to_radians
from geospatial.ellipsoid import Ellipsoid, ReferenceEllipsoids
from geospatial.parameters import AreaOfUse
from projections.registry import get_projection_class


def dms(degrees, minutes=0.0, seconds=0.0):
    """Angle quantity (radians) from sexagesimal components."""
    return Q_(dms_to_radians(degrees, minutes, seconds), "radian")


def geographic(lat, lon, height=0.0):
    """GeographicCoordinate from degrees or (d, m, s) tuples."""
    def radians(value):
        if isinstance(value, tuple):
            return dms_to_radians(*value)
        return float(np.radians(value))
    return GeographicCoordinate(radians(lat), radians(lon), height)


WGS84 = ReferenceEllipsoids.WGS84
GRS80 = ReferenceEllipsoids.GRS80
CLARKE_1866 = ReferenceEllipsoids.CLARKE_1866
BESSEL = ReferenceEllipsoids.BESSEL_1841
INTERNATIONAL = ReferenceEllipsoids.INTERNATIONAL_1924
CLARKE_1880_IGN = ReferenceEllipsoids.CLARKE_1880_IGN


KROVAK_PARAMETERS = {
    "Latitude of projection centre": dms(49, 30),
    "Longitude of origin": dms(24, 50),
    "Co-latitude of cone axis": dms(30, 17, 17.3031),
    "Latitude of pseudo standard parallel": dms(78, 30),
    "Scale factor on pseudo standard parallel": 0.9999,
    "False easting": "0 m",
    "False northing": "0 m",
}

KROVAK_MODIFIED_PARAMETERS = dict(
    KROVAK_PARAMETERS,
    **{
        "False easting": "5000000 m",
        "False northing": "5000000 m",
        "Ordinate 1 of evaluation point": "1089000 m",
        "Ordinate 2 of evaluation point": "654000 m",
        "C1": 2.946529277e-2,
        "C2": 2.515965696e-2,
        "C3": 1.193845912e-7,
        "C4": -4.668270147e-7,
        "C5": 9.233980362e-12,
        "C6": 1.523735715e-12,
        "C7": 1.696780024e-18,
        "C8": 4.408314235e-18,
        "C9": -8.331083518e-24,
        "C10": -3.689471323e-24,
    }
)

BORNEO_PARAMETERS = {
    "Latitude of projection centre": "4 degree",
    "Longitude of projection centre": "115 degree",
    "Azimuth of initial line": dms(53, 18, 56.9537),
    "Angle from Rectified to Skew Grid": dms(53, 7, 48.3685),
    "Scale factor on initial line": 0.99984,
}

TOPOCENTRIC_ORIGIN = {
    "Latitude of topocentric origin": "55 degree",
    "Longitude of topocentric origin": "5 degree",
    "Ellipsoidal height of topocentric origin": "200 m",
}


def _natural(lat, lon, easting=0.0, northing=0.0, **extra):
    values = {
        "Latitude of natural origin": lat if not isinstance(lat, (int, float)) else f"{lat} degree",
        "Longitude of natural origin": lon if not isinstance(lon, (int, float)) else f"{lon} degree",
        "False easting": f"{easting} m",
        "False northing": f"{northing} m",
    }
    values.update(extra)
    return values


# method name -> (ellipsoid, parameters, area of use, round trip length tolerance in m)
CATALOGUE = {
    "Mercator (variant A)": (
        BESSEL,
        _natural(0, 110, 3900000, 900000, **{"Scale factor at natural origin": 0.997}),
        AreaOfUse("Indonesia", -11.0, 94.0, 6.0, 141.0), 1e-3,
    ),
    "Mercator (variant B)": (
        ReferenceEllipsoids.KRASSOWSKY_1940,
        {
            "Latitude of 1st standard parallel": "42 degree",
            "Longitude of natural origin": "51 degree",
            "False easting": "0 m",
            "False northing": "0 m",
        },
        AreaOfUse("World between 80S and 80N", -80.0, -180.0, 80.0, 180.0), 1e-3,
    ),
    "Mercator (Spherical)": (
        Ellipsoid.sphere(6371007.0),
        _natural(0, 0),
        AreaOfUse("World between 80S and 80N", -80.0, -180.0, 80.0, 180.0), 1e-3,
    ),
    "Popular Visualisation Pseudo Mercator": (
        WGS84,
        _natural(0, 0),
        AreaOfUse("World between 85S and 85N", -85.0, -180.0, 85.0, 180.0), 1e-3,
    ),
    "Lambert Conic Conformal (1SP)": (
        CLARKE_1866,
        _natural(18, -77, 250000, 150000, **{"Scale factor at natural origin": 1.0}),
        AreaOfUse("Jamaica", 17.5, -78.5, 18.6, -76.1), 1e-3,
    ),
    "Lambert Conic Conformal (West Orientated)": (
        CLARKE_1866,
        _natural(18, 77, 250000, 150000, **{"Scale factor at natural origin": 1.0}),
        AreaOfUse("Jamaica mirrored", 17.5, 76.1, 18.6, 78.5), 1e-3,
    ),
    "Lambert Conic Conformal (2SP)": (
        CLARKE_1866,
        {
            "Latitude of false origin": dms(27, 50),
            "Longitude of false origin": "-99 degree",
            "Latitude of 1st standard parallel": dms(28, 23),
            "Latitude of 2nd standard parallel": dms(30, 17),
            "Easting at false origin": "2000000 ftUS",
            "Northing at false origin": "0 ftUS",
        },
        AreaOfUse("Texas", 25.8, -106.7, 36.5, -93.5), 1e-3,
    ),
    "Lambert Conic Conformal (2SP Belgium)": (
        INTERNATIONAL,
        {
            "Latitude of false origin": "90 degree",
            "Longitude of false origin": dms(4, 21, 24.983),
            "Latitude of 1st standard parallel": dms(49, 50),
            "Latitude of 2nd standard parallel": dms(51, 10),
            "Easting at false origin": "150000.01 m",
            "Northing at false origin": "5400088.44 m",
        },
        AreaOfUse("Belgium", 49.5, 2.5, 51.5, 6.4), 1e-3,
    ),
    "Lambert Conic Conformal (2SP Michigan)": (
        CLARKE_1866,
        {
            "Latitude of false origin": dms(43, 19),
            "Longitude of false origin": dms(-84, 20),
            "Latitude of 1st standard parallel": dms(44, 11),
            "Latitude of 2nd standard parallel": dms(45, 42),
            "Easting at false origin": "2000000 ftUS",
            "Northing at false origin": "0 ftUS",
            "Ellipsoid scaling factor": 1.0000382,
        },
        AreaOfUse("Michigan", 41.7, -87.0, 45.9, -82.4), 1e-3,
    ),
    "Lambert Conic Near-Conformal": (
        CLARKE_1880_IGN,
        _natural(dms(34, 39), dms(37, 21), 300000, 300000, **{"Scale factor at natural origin": 0.99962560}),
        AreaOfUse("Levant", 32.3, 35.1, 37.3, 42.4), 1e-3,
    ),
    "Transverse Mercator": (
        ReferenceEllipsoids.AIRY_1830,
        _natural(49, -2, 400000, -100000, **{"Scale factor at natural origin": 0.9996012717}),
        AreaOfUse("Great Britain", 49.8, -7.6, 60.9, 1.8), 1e-3,
    ),
    "Transverse Mercator (South Orientated)": (
        WGS84,
        _natural(0, 29, **{"Scale factor at natural origin": 1.0}),
        AreaOfUse("South Africa, 28 to 30E", -30.0, 27.5, -22.0, 30.5), 1e-3,
    ),
    "Transverse Mercator Zoned Grid System": (
        WGS84,
        {
            "Latitude of natural origin": "0 degree",
            "Initial longitude": "-180 degree",
            "Zone width": "6 degree",
            "Scale factor at natural origin": 0.9996,
            "False easting": "500000 m",
            "False northing": "0 m",
        },
        AreaOfUse("World between 80S and 84N", -80.0, -180.0, 84.0, 180.0), 1e-3,
    ),
    "Krovak": (
        BESSEL, KROVAK_PARAMETERS, AreaOfUse("Czechia and Slovakia", 47.7, 12.1, 51.1, 22.6), 1e-3,
    ),
    "Krovak (North Orientated)": (
        BESSEL, KROVAK_PARAMETERS, AreaOfUse("Czechia and Slovakia", 47.7, 12.1, 51.1, 22.6), 1e-3,
    ),
    "Krovak Modified": (
        BESSEL, KROVAK_MODIFIED_PARAMETERS, AreaOfUse("Czechia", 48.5, 12.1, 51.1, 18.9), 1e-3,
    ),
    "Krovak Modified (North Orientated)": (
        BESSEL, KROVAK_MODIFIED_PARAMETERS, AreaOfUse("Czechia", 48.5, 12.1, 51.1, 18.9), 1e-3,
    ),
    "Hotine Oblique Mercator (variant A)": (
        ReferenceEllipsoids.EVEREST_1967,
        dict(BORNEO_PARAMETERS, **{"False easting": "0 m", "False northing": "0 m"}),
        AreaOfUse("Borneo", 0.8, 109.5, 7.4, 119.3), 1e-3,
    ),
    "Hotine Oblique Mercator (variant B)": (
        ReferenceEllipsoids.EVEREST_1967,
        dict(
            BORNEO_PARAMETERS,
            **{
                "Easting at projection centre": "590476.87 m",
                "Northing at projection centre": "442857.65 m",
            }
        ),
        AreaOfUse("Borneo", 0.8, 109.5, 7.4, 119.3), 1e-3,
    ),
    "Laborde Oblique Mercator": (
        INTERNATIONAL,
        {
            "Latitude of projection centre": "-21 grad",
            "Longitude of projection centre": "49 grad",
            "Azimuth of initial line": "21 grad",
            "Scale factor on initial line": 0.9995,
            "False easting": "400000 m",
            "False northing": "800000 m",
        },
        AreaOfUse("Madagascar", -26.0, 43.0, -11.5, 51.0), 1e-3,
    ),
    "Polar Stereographic (variant A)": (
        WGS84,
        _natural(90, 0, 2000000, 2000000, **{"Scale factor at natural origin": 0.994}),
        AreaOfUse("Northern hemisphere, north of 60N", 60.0, -180.0, 90.0, 180.0), 1e-3,
    ),
    "Polar Stereographic (variant B)": (
        WGS84,
        {
            "Latitude of standard parallel": "-71 degree",
            "Longitude of origin": "70 degree",
            "False easting": "6000000 m",
            "False northing": "6000000 m",
        },
        AreaOfUse("Southern hemisphere, south of 60S", -90.0, -180.0, -60.0, 180.0), 1e-3,
    ),
    "Polar Stereographic (variant C)": (
        INTERNATIONAL,
        {
            "Latitude of standard parallel": "-67 degree",
            "Longitude of origin": "140 degree",
            "Easting at false origin": "300000 m",
            "Northing at false origin": "200000 m",
        },
        AreaOfUse("Adelie Land", -68.0, 136.0, -64.0, 142.0), 1e-3,
    ),
    "Oblique Stereographic": (
        BESSEL,
        _natural(dms(52, 9, 22.178), dms(5, 23, 15.5), 155000, 463000,
                 **{"Scale factor at natural origin": 0.9999079}),
        AreaOfUse("Netherlands", 50.7, 3.2, 53.7, 7.3), 1e-3,
    ),
    "Gnomonic": (
        WGS84,
        {
            "Latitude of projection centre": "40 degree",
            "Longitude of projection centre": "-100 degree",
            "False easting": "0 m",
            "False northing": "0 m",
        },
        AreaOfUse("North America", 20.0, -130.0, 60.0, -70.0), 1e-3,
    ),
    "Orthographic": (
        WGS84, _natural(55, 5), AreaOfUse("Europe", 35.0, -20.0, 75.0, 30.0), 1e-3,
    ),
    "Lambert Azimuthal Equal Area": (
        GRS80, _natural(52, 10, 4321000, 3210000), AreaOfUse("Europe", 25.0, -30.0, 72.0, 45.0), 1e-2,
    ),
    "Modified Azimuthal Equidistant": (
        CLARKE_1866,
        _natural(dms(9, 32, 48.15), dms(138, 10, 7.48), 40000, 60000),
        AreaOfUse("Yap Islands", 9.3, 137.9, 9.8, 138.4), 1e-3,
    ),
    "Guam Projection": (
        CLARKE_1866,
        _natural(dms(13, 28, 20.87887), dms(144, 44, 55.50254), 50000, 50000),
        AreaOfUse("Guam", 13.2, 144.6, 13.7, 145.0), 1e-3,
    ),
    "Vertical Perspective (Orthographic case)": (
        WGS84, TOPOCENTRIC_ORIGIN, AreaOfUse("Europe", 45.0, -5.0, 65.0, 15.0), 1e-3,
    ),
    "Vertical Perspective": (
        WGS84,
        dict(TOPOCENTRIC_ORIGIN, **{"Viewpoint height": "5900000 m"}),
        AreaOfUse("Europe", 45.0, -5.0, 65.0, 15.0), 1e-3,
    ),
    "Albers Equal Area": (
        GRS80,
        {
            "Latitude of false origin": "23 degree",
            "Longitude of false origin": "-96 degree",
            "Latitude of 1st standard parallel": "29.5 degree",
            "Latitude of 2nd standard parallel": "45.5 degree",
            "Easting at false origin": "0 m",
            "Northing at false origin": "0 m",
        },
        AreaOfUse("Conterminous USA", 24.0, -125.0, 50.0, -66.0), 1e-2,
    ),
    "Lambert Cylindrical Equal Area": (
        CLARKE_1866,
        {
            "Latitude of 1st standard parallel": "5 degree",
            "Longitude of natural origin": "-75 degree",
            "False easting": "0 m",
            "False northing": "0 m",
        },
        AreaOfUse("World between 60S and 60N", -60.0, -180.0, 60.0, 180.0), 1e-2,
    ),
    "Lambert Cylindrical Equal Area (Spherical)": (
        Ellipsoid.sphere(6370997.0),
        {
            "Latitude of 1st standard parallel": "30 degree",
            "Longitude of natural origin": "-75 degree",
            "False easting": "0 m",
            "False northing": "0 m",
        },
        AreaOfUse("World between 60S and 60N", -60.0, -180.0, 60.0, 180.0), 1e-3,
    ),
    "Bonne": (
        CLARKE_1880_IGN, _natural(45, 0), AreaOfUse("Europe", 35.0, -10.0, 60.0, 30.0), 1e-3,
    ),
    "Bonne (South Orientated)": (
        GRS80,
        _natural(dms(39, 40), dms(-8, 7, 54.862)),
        AreaOfUse("Portugal", 37.0, -9.5, 42.0, -6.2), 1e-3,
    ),
    "American Polyconic": (
        GRS80, _natural(0, -54, 5000000, 10000000), AreaOfUse("Brazil", -34.0, -74.0, 6.0, -34.0), 1e-3,
    ),
    "Colombia Urban": (
        GRS80,
        _natural(dms(4, 40, 49.75), dms(-74, 8, 47.73), 92334.879, 109320.965,
                 **{"Projection plane origin height": "2550 m"}),
        AreaOfUse("Bogota", 4.45, -74.3, 4.85, -73.95), 1e-2,
    ),
    "Cassini-Soldner": (
        ReferenceEllipsoids.CLARKE_1858,
        _natural(dms(10, 26, 30), dms(-61, 20), **{
            "False easting": Q_(430000, "clarke_link"),
            "False northing": Q_(325000, "clarke_link"),
        }),
        AreaOfUse("Trinidad", 9.8, -62.1, 11.4, -60.4), 1e-3,
    ),
    "Hyperbolic Cassini-Soldner": (
        CLARKE_1880_IGN,
        _natural(dms(-16, 15), dms(179, 20), 250000, 300000),
        AreaOfUse("Vanua Levu", -17.0, 178.6, -16.1, 179.9), 5e-2,
    ),
    "Equidistant Cylindrical": (
        WGS84,
        {
            "Latitude of 1st standard parallel": "0 degree",
            "Longitude of natural origin": "0 degree",
            "False easting": "0 m",
            "False northing": "0 m",
        },
        AreaOfUse("World between 80S and 80N", -80.0, -180.0, 80.0, 180.0), 1e-3,
    ),
    "Miller Cylindrical": (
        WGS84,
        {"Longitude of natural origin": "-90 degree", "False easting": "0 m", "False northing": "0 m"},
        AreaOfUse("World between 80S and 80N", -80.0, -180.0, 80.0, 180.0), 1e-3,
    ),
    "Sinusoidal": (
        WGS84,
        {"Longitude of natural origin": "-90 degree", "False easting": "0 m", "False northing": "0 m"},
        AreaOfUse("World between 80S and 80N", -80.0, -180.0, 80.0, 180.0), 1e-3,
    ),
}


def build(method_name):
    """Configured projection from the catalogue."""
    ellipsoid, parameters, area, _ = CATALOGUE[method_name]
    return get_projection_class(method_name)(ellipsoid, parameters, area)



def assert_projects(projection, point, expected, tolerance=0.01):
    """Forward transformation reproduces ``expected`` (x, y) to ``tolerance`` meters."""
    planar = projection.forward(point)
    assert planar, f"{projection.method_name} forward undefined for {point}"
    assert planar.x == pytest.approx(expected[0], abs=tolerance)
    assert planar.y == pytest.approx(expected[1], abs=tolerance)


def assert_unprojects(projection, planar, point, tolerance=2e-8):
    """Reverse transformation reproduces ``point`` to ``tolerance`` radians."""
    geographic = projection.reverse(planar)
    assert geographic, f"{projection.method_name} reverse undefined for {planar}"
    assert geographic.latitude == pytest.approx(point.latitude, abs=tolerance)
    assert geographic.longitude == pytest.approx(point.longitude, abs=tolerance)
