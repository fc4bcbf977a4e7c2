"""
Tests for the oblique, stereographic, azimuthal and perspective projections.
"""
import numpy as np
import pytest

from common.types import UNDEFINED, GeographicCoordinate, PlanarCoordinate
from geospatial.ellipsoid import Ellipsoid
from geospatial.parameters import Parameters as P
from projections.azimuthal import ModifiedAzimuthalEquidistant, Orthographic
from projections.stereographic import ObliqueStereographic

from reference_data import (
    CATALOGUE,
    CLARKE_1866,
    WGS84,
    assert_projects,
    assert_unprojects,
    build,
    geographic,
)

GRAD = np.pi / 200


class TestObliqueMercator:
    """Hotine variants and Laborde."""

    BORNEO = geographic((5, 23, 14.1129), (115, 48, 19.8196))

    def test_hotine_variant_b(self):
        projection = build("Hotine Oblique Mercator (variant B)")
        assert_projects(projection, self.BORNEO, (679245.73, 596562.78))
        assert_unprojects(projection, PlanarCoordinate(679245.73, 596562.78), self.BORNEO)

    def test_variant_b_centre_maps_to_centre_offsets(self):
        projection = build("Hotine Oblique Mercator (variant B)")
        assert_projects(projection, geographic(4, 115), (590476.87, 442857.65), tolerance=1e-3)

    def test_variants_differ_by_a_constant_offset(self):
        variant_a = build("Hotine Oblique Mercator (variant A)")
        variant_b = build("Hotine Oblique Mercator (variant B)")
        offsets = []
        for point in (self.BORNEO, geographic(2, 112), geographic(6.5, 118)):
            a = variant_a.forward(point)
            b = variant_b.forward(point)
            offsets.append((a.x - b.x, a.y - b.y))
        assert offsets[1] == pytest.approx(offsets[0], abs=1e-6)
        assert offsets[2] == pytest.approx(offsets[0], abs=1e-6)

    def test_laborde(self):
        projection = build("Laborde Oblique Mercator")
        point = GeographicCoordinate(-17.988666667 * GRAD, 46.800381173 * GRAD)
        assert_projects(projection, point, (188333.848, 1098841.091), tolerance=0.01)
        assert_unprojects(projection, PlanarCoordinate(188333.848, 1098841.091), point)


class TestStereographic:
    """Polar and oblique stereographic."""

    def test_polar_variant_a(self):
        projection = build("Polar Stereographic (variant A)")
        point = geographic(73, 44)
        assert_projects(projection, point, (3320416.75, 632668.43))
        assert_unprojects(projection, PlanarCoordinate(3320416.75, 632668.43), point)

    def test_polar_variant_a_pole(self):
        projection = build("Polar Stereographic (variant A)")
        assert_projects(projection, geographic(90, 0), (2000000.0, 2000000.0), tolerance=1e-6)

    def test_polar_variant_a_far_pole_is_undefined(self):
        projection = build("Polar Stereographic (variant A)")
        assert projection.forward(geographic(-90, 0)) is UNDEFINED

    def test_polar_variant_b(self):
        projection = build("Polar Stereographic (variant B)")
        point = geographic(-75, 120)
        assert_projects(projection, point, (7255380.79, 7053389.56))
        assert_unprojects(projection, PlanarCoordinate(7255380.79, 7053389.56), point)

    def test_polar_variant_c(self):
        projection = build("Polar Stereographic (variant C)")
        point = geographic((-66, 36, 18.820), (140, 4, 17.04))
        assert_projects(projection, point, (303169.52, 244055.72))
        assert_unprojects(projection, PlanarCoordinate(303169.52, 244055.72), point)

    def test_oblique_stereographic(self):
        projection = build("Oblique Stereographic")
        point = geographic(53, 6)
        assert_projects(projection, point, (196105.283, 557057.739))
        assert_unprojects(projection, PlanarCoordinate(196105.283, 557057.739), point)

    def test_antipode_on_sphere_is_undefined(self):
        _, parameters, area, _ = CATALOGUE["Oblique Stereographic"]
        projection = ObliqueStereographic(Ellipsoid.sphere(6371007.0), parameters, area)
        origin = projection.parameters.angle(P.LATITUDE_OF_NATURAL_ORIGIN)
        longitude = projection.parameters.angle(P.LONGITUDE_OF_NATURAL_ORIGIN)
        antipode = GeographicCoordinate(-origin, longitude + np.pi)
        assert projection.forward(antipode) is UNDEFINED


class TestAzimuthal:
    """Gnomonic, Orthographic, LAEA and the local azimuthal methods."""

    def test_gnomonic(self):
        projection = build("Gnomonic")
        assert_projects(projection, geographic(30, -110), (-984035.612371, -1080927.60583), tolerance=1e-3)

    def test_gnomonic_reverse(self):
        projection = build("Gnomonic")
        assert_unprojects(
            projection,
            PlanarCoordinate(600300.0, -295675.0),
            geographic(37.1540954053, -93.2553802038),
            tolerance=1e-9,
        )

    def test_gnomonic_centre(self):
        projection = build("Gnomonic")
        assert_unprojects(projection, PlanarCoordinate(0.0, 0.0), geographic(40, -100), tolerance=1e-12)

    def test_gnomonic_far_hemisphere_is_undefined(self):
        projection = build("Gnomonic")
        assert projection.forward(geographic(-40, 80)) is UNDEFINED
        assert projection.forward(geographic(0, -10)) is UNDEFINED

    def test_orthographic(self):
        projection = build("Orthographic")
        point = geographic((53, 48, 33.82), (2, 7, 46.38))
        assert_projects(projection, point, (-189011.711, -128640.567))
        assert_unprojects(projection, PlanarCoordinate(-189011.711, -128640.567), point)

    def test_orthographic_far_hemisphere_is_undefined(self):
        projection = build("Orthographic")
        assert projection.forward(geographic(-55, -175)) is UNDEFINED

    def test_orthographic_reverse_off_disk_is_undefined(self):
        projection = build("Orthographic")
        assert projection.reverse(PlanarCoordinate(9.0e6, 9.0e6)) is UNDEFINED

    @pytest.mark.parametrize("lat, lon", [(80, 30), (60, -120), (45, 150), (5, -60), (89.5, 10)])
    def test_orthographic_polar_aspect_round_trip(self, lat, lon):
        parameters = {
            "Latitude of natural origin": "90 degree",
            "Longitude of natural origin": "0 degree",
            "False easting": "0 m",
            "False northing": "0 m",
        }
        projection = Orthographic(WGS84, parameters, CATALOGUE["Sinusoidal"][2])
        point = geographic(lat, lon)
        assert_unprojects(projection, projection.forward(point), point, tolerance=1e-9)

    @pytest.mark.parametrize("lat, lon", [(64, -144), (80, -175), (85, 120)])
    def test_orthographic_reverse_across_the_pole(self, lat, lon):
        _, parameters, _, _ = CATALOGUE["Orthographic"]
        projection = Orthographic(WGS84, parameters, CATALOGUE["Sinusoidal"][2])
        point = geographic(lat, lon)
        assert_unprojects(projection, projection.forward(point), point, tolerance=1e-9)

    def test_lambert_azimuthal_equal_area(self):
        projection = build("Lambert Azimuthal Equal Area")
        point = geographic(50, 5)
        assert_projects(projection, point, (3962799.45, 2999718.85))
        assert_unprojects(projection, PlanarCoordinate(3962799.45, 2999718.85), point)

    def test_lambert_azimuthal_origin(self):
        projection = build("Lambert Azimuthal Equal Area")
        assert_projects(projection, geographic(52, 10), (4321000.0, 3210000.0), tolerance=1e-6)
        assert_unprojects(projection, PlanarCoordinate(4321000.0, 3210000.0), geographic(52, 10), tolerance=1e-8)

    def test_modified_azimuthal_equidistant(self):
        projection = build("Modified Azimuthal Equidistant")
        point = geographic((9, 35, 47.493), (138, 11, 34.908))
        assert_projects(projection, point, (42665.90, 65509.82))
        assert_unprojects(projection, PlanarCoordinate(42665.90, 65509.82), point)

    @pytest.mark.parametrize("lat, lon", [(0, 138.2), (0, 137.9), (0.15, 138), (-0.1, 138.1)])
    def test_modified_azimuthal_equidistant_equatorial_origin(self, lat, lon):
        parameters = {
            "Latitude of natural origin": "0 degree",
            "Longitude of natural origin": "138 degree",
            "False easting": "40000 m",
            "False northing": "60000 m",
        }
        projection = ModifiedAzimuthalEquidistant(CLARKE_1866, parameters, CATALOGUE["Sinusoidal"][2])
        point = geographic(lat, lon)
        assert_unprojects(projection, projection.forward(point), point, tolerance=1e-8)

    def test_guam(self):
        projection = build("Guam Projection")
        point = geographic((13, 20, 20.53846), (144, 38, 7.19265))
        assert_projects(projection, point, (37712.48, 35242.00))
        assert_unprojects(projection, PlanarCoordinate(37712.48, 35242.00), point)


class TestVerticalPerspective:
    """Forward-only perspective projections."""

    POINT = geographic((53, 48, 33.82), (2, 7, 46.38), height=73.0)

    def test_orthographic_case(self):
        projection = build("Vertical Perspective (Orthographic case)")
        assert_projects(projection, self.POINT, (-189013.869, -128642.040))

    def test_height_is_carried(self):
        projection = build("Vertical Perspective (Orthographic case)")
        assert projection.forward(self.POINT).z == 73.0

    def test_perspective_shrinks_points_below_the_tangent_plane(self):
        orthographic = build("Vertical Perspective (Orthographic case)").forward(self.POINT)
        perspective = build("Vertical Perspective").forward(self.POINT)
        assert perspective.x == pytest.approx(orthographic.x, rel=0.01)
        assert abs(perspective.x) < abs(orthographic.x)

    def test_above_viewpoint_is_undefined(self):
        projection = build("Vertical Perspective")
        assert projection.forward(geographic(55, 5, height=6_000_000.0)) is UNDEFINED

    @pytest.mark.parametrize("method", [
        "Vertical Perspective (Orthographic case)",
        "Vertical Perspective",
    ])
    def test_reverse_is_always_undefined(self, method):
        projection = build(method)
        assert not projection.is_reversible
        planar = projection.forward(self.POINT)
        assert projection.reverse(planar) is UNDEFINED
        assert projection.reverse(PlanarCoordinate(0.0, 0.0)) is UNDEFINED

