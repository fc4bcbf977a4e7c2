"""
Tests for the Mercator, Lambert Conic Conformal, Transverse Mercator and
Krovak families against the worked examples of IOGP Guidance Note 7-2.
"""
import numpy as np
import pytest

from common.exceptions import ParameterValueError
from common.types import UNDEFINED, PlanarCoordinate
from geospatial.parameters import WORLD
from projections.krovak import KrovakCorrection, KrovakModified
from projections.mercator import MercatorA
from projections.transverse_mercator import TransverseMercator

from reference_data import (
    BESSEL,
    CATALOGUE,
    KROVAK_MODIFIED_PARAMETERS,
    assert_projects,
    assert_unprojects,
    build,
    geographic,
)

US_FOOT = 0.3048006096


class TestMercator:
    """Mercator variants A and B, spherical and Pseudo Mercator."""

    def test_variant_a(self):
        projection = build("Mercator (variant A)")
        point = geographic(-3, 120)
        assert_projects(projection, point, (5009726.58, 569150.82))
        assert_unprojects(projection, PlanarCoordinate(5009726.58, 569150.82), point)

    def test_variant_b(self):
        projection = build("Mercator (variant B)")
        point = geographic(53, 53)
        assert_projects(projection, point, (165704.29, 5171848.07))
        assert_unprojects(projection, PlanarCoordinate(165704.29, 5171848.07), point)

    def test_spherical(self):
        projection = build("Mercator (Spherical)")
        point = geographic((24, 22, 54.433), (-100, 20))
        assert_projects(projection, point, (-11156569.90, 2796869.94))

    def test_pseudo_mercator(self):
        projection = build("Popular Visualisation Pseudo Mercator")
        point = geographic((24, 22, 54.433), (-100, 20))
        assert_projects(projection, point, (-11169055.58, 2800000.00))
        assert_unprojects(projection, PlanarCoordinate(-11169055.58, 2800000.00), point)

    @pytest.mark.parametrize("latitude", [90.0, -90.0])
    def test_poles_are_undefined(self, latitude):
        projection = build("Mercator (variant A)")
        assert projection.forward(geographic(latitude, 110)) is UNDEFINED

    def test_variant_a_rejects_non_equatorial_origin(self):
        ellipsoid, parameters, _, _ = CATALOGUE["Mercator (variant A)"]
        shifted = dict(parameters, **{"Latitude of natural origin": "10 degree"})
        with pytest.raises(ParameterValueError):
            MercatorA(ellipsoid, shifted, WORLD)


class TestLambertConicConformal:
    """Lambert Conic Conformal variants and the near-conformal method."""

    JAMAICA = geographic((17, 55, 55.80), (-76, 56, 37.26))

    def test_one_standard_parallel(self):
        projection = build("Lambert Conic Conformal (1SP)")
        assert_projects(projection, self.JAMAICA, (255966.58, 142493.51))
        assert_unprojects(projection, PlanarCoordinate(255966.58, 142493.51), self.JAMAICA)

    def test_west_orientated(self):
        projection = build("Lambert Conic Conformal (West Orientated)")
        point = geographic((17, 55, 55.80), (76, 56, 37.26))
        assert_projects(projection, point, (255966.58, 142493.51))
        assert_unprojects(projection, PlanarCoordinate(255966.58, 142493.51), point)

    def test_two_standard_parallels(self):
        projection = build("Lambert Conic Conformal (2SP)")
        point = geographic(28.5, -96)
        expected = (2963503.91 * US_FOOT, 254759.80 * US_FOOT)
        assert_projects(projection, point, expected)
        assert_unprojects(projection, PlanarCoordinate(*expected), point)

    def test_belgium(self):
        projection = build("Lambert Conic Conformal (2SP Belgium)")
        point = geographic((50, 40, 46.461), (5, 48, 26.533))
        assert_projects(projection, point, (251763.20, 153034.13))
        assert_unprojects(projection, PlanarCoordinate(251763.20, 153034.13), point)

    def test_michigan(self):
        projection = build("Lambert Conic Conformal (2SP Michigan)")
        point = geographic((43, 45), (-83, 10))
        expected = (2308335.75 * US_FOOT, 160210.48 * US_FOOT)
        assert_projects(projection, point, expected)
        assert_unprojects(projection, PlanarCoordinate(*expected), point)

    def test_near_conformal(self):
        projection = build("Lambert Conic Near-Conformal")
        point = geographic((37, 31, 17.625), (34, 8, 11.291))
        assert_projects(projection, point, (15707.96, 623165.96))
        assert_unprojects(projection, PlanarCoordinate(15707.96, 623165.96), point)

    def test_apex_pole_is_defined(self):
        projection = build("Lambert Conic Conformal (1SP)")
        assert projection.forward(geographic(90, -77))

    def test_opposite_pole_is_undefined(self):
        projection = build("Lambert Conic Conformal (1SP)")
        assert projection.forward(geographic(-90, -77)) is UNDEFINED


class TestTransverseMercator:
    """Transverse Mercator and its variants."""

    def test_british_national_grid(self):
        projection = build("Transverse Mercator")
        point = geographic(50.5, 0.5)
        assert_projects(projection, point, (577274.99, 69740.50))
        assert_unprojects(projection, PlanarCoordinate(577274.99, 69740.50), point)

    def test_south_orientated(self):
        projection = build("Transverse Mercator (South Orientated)")
        point = geographic((-25, 43, 55.302), (28, 16, 57.479))
        assert_projects(projection, point, (71984.49, 2847342.74), tolerance=0.02)
        assert_unprojects(projection, PlanarCoordinate(71984.49, 2847342.74), point)

    def test_central_meridian_is_true_scale(self):
        projection = build("Transverse Mercator")
        planar = projection.forward(geographic(52, -2))
        assert planar.x == pytest.approx(400000.0, abs=1e-6)

    def test_wide_longitude_still_round_trips(self, wgs84):
        projection = TransverseMercator(
            wgs84,
            {
                "Latitude of natural origin": "0 degree",
                "Longitude of natural origin": "0 degree",
                "Scale factor at natural origin": 0.9996,
                "False easting": "500000 m",
                "False northing": "0 m",
            },
            WORLD,
        )
        point = geographic(60, 30)
        planar = projection.forward(point)
        assert_unprojects(projection, planar, point, tolerance=1e-9)

    @pytest.mark.parametrize("latitude, longitude, zone", [
        (0.0, 3.0, 31),
        (51.5, -0.1, 30),
        (-33.9, 151.2, 56),
        (10.0, -179.5, 1),
    ])
    def test_zoned_grid(self, latitude, longitude, zone):
        projection = build("Transverse Mercator Zoned Grid System")
        point = geographic(latitude, longitude)
        planar = projection.forward(point)
        assert int(planar.x // 1_000_000) == zone
        assert_unprojects(projection, planar, point, tolerance=1e-10)

    def test_zone_central_meridian(self):
        projection = build("Transverse Mercator Zoned Grid System")
        planar = projection.forward(geographic(0, 3))
        assert planar.x == pytest.approx(31_500_000.0, abs=1e-6)
        assert planar.y == pytest.approx(0.0, abs=1e-6)

    def test_zoned_reverse_outside_zones(self):
        projection = build("Transverse Mercator Zoned Grid System")
        assert projection.reverse(PlanarCoordinate(99_500_000.0, 0.0)) is UNDEFINED
        assert projection.reverse(PlanarCoordinate(500_000.0, 0.0)) is UNDEFINED

    @pytest.mark.parametrize("longitude, zone", [
        (-144.0, 7),
        (-180.0, 1),
        (180.0, 1),
        (0.0, 31),
        (174.0, 60),
    ])
    def test_boundary_meridian_belongs_to_the_eastern_zone(self, longitude, zone):
        projection = build("Transverse Mercator Zoned Grid System")
        assert projection.zone(np.radians(longitude)) == zone

    @pytest.mark.parametrize("latitude, longitude", [(2.0, -144.0), (-40.0, 6.0), (60.0, 102.0)])
    def test_boundary_point_keeps_its_zone(self, latitude, longitude):
        projection = build("Transverse Mercator Zoned Grid System")
        planar = projection.forward(geographic(latitude, longitude))
        again = projection.forward(projection.reverse(planar))
        assert int(again.x // 1_000_000) == int(planar.x // 1_000_000)
        assert again.x == pytest.approx(planar.x, abs=1e-6)
        assert again.y == pytest.approx(planar.y, abs=1e-6)


class TestKrovak:
    """Krovak and its north orientated and modified variants."""

    POINT = geographic((50, 12, 32.442), (16, 50, 59.179))

    def test_krovak(self):
        projection = build("Krovak")
        assert_projects(projection, self.POINT, (568990.99, 1050538.63), tolerance=0.05)
        assert_unprojects(projection, PlanarCoordinate(568990.99, 1050538.63), self.POINT)

    def test_north_orientated(self):
        projection = build("Krovak (North Orientated)")
        assert_projects(projection, self.POINT, (-568990.99, -1050538.63), tolerance=0.05)
        assert_unprojects(projection, PlanarCoordinate(-568990.99, -1050538.63), self.POINT)

    def test_modified(self):
        projection = build("Krovak Modified")
        assert_projects(projection, self.POINT, (5568990.91, 6050538.71), tolerance=0.05)
        assert_unprojects(projection, PlanarCoordinate(5568990.91, 6050538.71), self.POINT)

    def test_modified_north_orientated(self):
        projection = build("Krovak Modified (North Orientated)")
        assert_projects(projection, self.POINT, (-5568990.91, -6050538.71), tolerance=0.05)

    def test_modified_correction_is_small(self):
        plain = build("Krovak").forward(self.POINT)
        modified = KrovakModified(BESSEL, KROVAK_MODIFIED_PARAMETERS, WORLD).forward(self.POINT)
        assert abs(modified.x - 5_000_000 - plain.x) < 1.0
        assert abs(modified.y - 5_000_000 - plain.y) < 1.0

    def test_correction_removal_inverts_evaluation(self):
        correction = KrovakCorrection.from_parameters(
            KrovakModified(BESSEL, KROVAK_MODIFIED_PARAMETERS, WORLD).parameters
        )
        xp, yp = 1050538.63, 568990.99
        dx, dy = correction.evaluate(xp, yp)
        restored = correction.remove(xp - dx, yp - dy)
        assert restored == pytest.approx((xp, yp), abs=1e-5)

    def test_second_order_correction_is_a_complex_polynomial(self):
        coefficients = (0.3, -0.2, 2.9e-2, 2.5e-2, 1.2e-7, -4.7e-7, 0.0, 0.0, 0.0, 0.0)
        correction = KrovakCorrection(x0=1089000.0, y0=654000.0, c=coefficients)
        xp, yp = 1050538.63, 568990.99
        z = complex(xp - 1089000.0, yp - 654000.0)
        C1, C2, C3, C4, C5, C6 = coefficients[:6]
        expected = complex(C1, C2) + complex(C3, C4) * z + complex(C5, C6) * z * z
        dx, dy = correction.evaluate(xp, yp)
        assert dx == pytest.approx(expected.real, abs=1e-6)
        assert dy == pytest.approx(expected.imag, abs=1e-6)
