"""
Tests for method lookup and construction from configuration mappings.
"""
import logging

import pytest

from common.exceptions import ConfigurationError, EllipsoidError, UnknownProjectionError
from common.logging_config import set_level
from geospatial.ellipsoid import Ellipsoid
from geospatial.parameters import WORLD, AreaOfUse
from projections.equal_area import LambertCylindricalEqualAreaSpherical
from projections.mercator import MercatorA, PseudoMercator
from projections.registry import (
    PROJECTION_CLASSES,
    available_methods,
    create_projection,
    get_projection_class,
    projection_from_definition,
)
from projections.transverse_mercator import TransverseMercator

from reference_data import CATALOGUE, geographic

UTM_30 = {
    "Latitude of natural origin": "0 degree",
    "Longitude of natural origin": "-3 degree",
    "Scale factor at natural origin": 0.9996,
    "False easting": "500000 m",
    "False northing": "0 m",
}


class TestLookup:
    """Resolving methods by name, alias and code."""

    @pytest.mark.parametrize("key", [
        9807,
        "9807",
        "EPSG:9807",
        "epsg:9807",
        "Transverse Mercator",
        "transverse_mercator",
        "  TRANSVERSE MERCATOR ",
    ])
    def test_transverse_mercator(self, key):
        assert get_projection_class(key) is TransverseMercator

    def test_alias(self):
        assert get_projection_class("Mercator (1SP)") is MercatorA
        assert get_projection_class("Web Mercator") is PseudoMercator
        assert get_projection_class("Lambert Cylindrical Equal Area (spherical case)") is (
            LambertCylindricalEqualAreaSpherical
        )

    @pytest.mark.parametrize("key", ["Mollweide", 1, "EPSG:0", ""])
    def test_unknown(self, key):
        with pytest.raises(UnknownProjectionError):
            get_projection_class(key)

    def test_unknown_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            get_projection_class("Robinson")

    def test_every_class_resolves_by_its_own_name_and_code(self):
        for cls in PROJECTION_CLASSES:
            assert get_projection_class(cls.method_name) is cls
            if cls.method_code is not None:
                assert get_projection_class(cls.method_code) is cls

    def test_codes_are_unique(self):
        codes = [cls.method_code for cls in PROJECTION_CLASSES if cls.method_code is not None]
        assert len(codes) == len(set(codes))

    def test_available_methods(self):
        methods = available_methods()
        assert methods == sorted(CATALOGUE)
        assert "Krovak" in methods


class TestCreateProjection:
    """Construction by method name."""

    def test_create(self, wgs84):
        projection = create_projection("EPSG:9807", wgs84, UTM_30)
        assert isinstance(projection, TransverseMercator)
        assert projection.area_of_use is WORLD
        assert projection.forward(geographic(0, -3)).x == pytest.approx(500000.0)


class TestProjectionFromDefinition:
    """Construction from plain mappings."""

    def test_ellipsoid_by_name(self):
        projection = projection_from_definition({
            "method": "Transverse Mercator",
            "ellipsoid": "WGS 84",
            "parameters": UTM_30,
        })
        assert projection.ellipsoid.name == "WGS 84"

    def test_ellipsoid_instance(self, wgs84):
        projection = projection_from_definition({
            "method": 9807,
            "ellipsoid": wgs84,
            "parameters": UTM_30,
        })
        assert projection.ellipsoid is wgs84

    @pytest.mark.parametrize("ellipsoid", [
        {"semi_major_axis": 6378137.0, "inverse_flattening": 298.257223563},
        {"semi_major_axis": 6378137.0, "semi_minor_axis": 6356752.314245179},
        {"semi_major_axis": 6378137.0, "flattening": 1 / 298.257223563},
    ])
    def test_ellipsoid_mapping(self, ellipsoid, wgs84):
        projection = projection_from_definition({
            "method": "Transverse Mercator",
            "ellipsoid": ellipsoid,
            "parameters": UTM_30,
        })
        assert projection.ellipsoid.f == pytest.approx(wgs84.f, rel=1e-9)

    def test_bare_axis_is_a_sphere(self):
        projection = projection_from_definition({
            "method": "Mercator (Spherical)",
            "ellipsoid": {"name": "Authalic", "semi_major_axis": 6371007.0},
            "parameters": {
                "Latitude of natural origin": "0 degree",
                "Longitude of natural origin": "0 degree",
                "False easting": "0 m",
                "False northing": "0 m",
            },
        })
        assert projection.ellipsoid.is_sphere
        assert projection.ellipsoid.name == "Authalic"

    def test_area_of_use_mapping(self):
        projection = projection_from_definition({
            "method": "Transverse Mercator",
            "ellipsoid": "WGS 84",
            "parameters": UTM_30,
            "area_of_use": {"name": "UTM zone 30N", "south": 0.0, "west": -6.0, "north": 84.0, "east": 0.0},
        })
        assert projection.area_of_use == AreaOfUse("UTM zone 30N", 0.0, -6.0, 84.0, 0.0)

    @pytest.mark.parametrize("missing", ["method", "ellipsoid", "parameters"])
    def test_missing_key(self, missing):
        definition = {"method": "Transverse Mercator", "ellipsoid": "WGS 84", "parameters": UTM_30}
        del definition[missing]
        with pytest.raises(ConfigurationError, match=missing):
            projection_from_definition(definition)

    def test_ellipsoid_mapping_without_axis(self):
        with pytest.raises(ConfigurationError):
            projection_from_definition({
                "method": "Transverse Mercator",
                "ellipsoid": {"inverse_flattening": 298.257223563},
                "parameters": UTM_30,
            })

    def test_unusable_ellipsoid(self):
        with pytest.raises(ConfigurationError):
            projection_from_definition({
                "method": "Transverse Mercator",
                "ellipsoid": 6378137.0,
                "parameters": UTM_30,
            })

    def test_unknown_ellipsoid_name(self):
        with pytest.raises(EllipsoidError):
            projection_from_definition({
                "method": "Transverse Mercator",
                "ellipsoid": "Everest 1830 (typo)",
                "parameters": UTM_30,
            })

    def test_sphere_round_trip(self):
        projection = projection_from_definition({
            "method": "Transverse Mercator",
            "ellipsoid": Ellipsoid.sphere(6371007.0),
            "parameters": UTM_30,
        })
        planar = projection.forward(geographic(40, -1))
        back = projection.reverse(planar)
        assert back.to_degrees() == pytest.approx((40.0, -1.0), abs=1e-9)


def test_lookup_is_logged_at_debug(caplog):
    set_level(logging.DEBUG, prefix="projections")
    try:
        with caplog.at_level(logging.DEBUG, logger="projections.registry"):
            get_projection_class("EPSG:9807")
    finally:
        set_level(logging.INFO, prefix="projections")
    assert "Resolved method 'EPSG:9807' to TransverseMercator" in caplog.text
