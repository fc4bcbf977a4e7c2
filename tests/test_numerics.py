"""
Tests for the shared numeric kernel.
"""
import numpy as np
import pytest

from geospatial.numerics import (
    authalic_q,
    conformal_t,
    footpoint_latitude,
    isometric_latitude,
    iterate,
    latitude_from_authalic,
    latitude_from_conformal,
    latitude_from_t,
    meridian_arc,
    signed_longitude_delta,
)

LATITUDES = np.radians([-89.0, -60.0, -30.0, -1.0, 0.0, 1.0, 30.0, 60.0, 89.0])


class TestLongitudeDelta:
    """Reduction of longitude differences."""

    @pytest.mark.parametrize("longitude, origin, expected", [
        (10.0, 5.0, 5.0),
        (179.0, -179.0, -2.0),
        (-179.0, 179.0, 2.0),
        (180.0, 0.0, 180.0),
        (-180.0, 0.0, 180.0),
    ])
    def test_reduced_to_half_open_interval(self, longitude, origin, expected):
        delta = signed_longitude_delta(np.radians(longitude), np.radians(origin))
        assert delta == pytest.approx(np.radians(expected), abs=1e-12)

    def test_array_input(self):
        delta = signed_longitude_delta(np.radians([0.0, 190.0]), 0.0)
        assert delta == pytest.approx(np.radians([0.0, -170.0]))


class TestMeridianArc:
    """Meridian distance and its inverse."""

    def test_quadrant(self, wgs84):
        quadrant = meridian_arc(np.pi / 2, wgs84.a, wgs84.e2)
        assert quadrant == pytest.approx(10001965.729, abs=1e-3)

    def test_odd_function(self, wgs84):
        phi = np.radians(37.0)
        assert meridian_arc(-phi, wgs84.a, wgs84.e2) == pytest.approx(-meridian_arc(phi, wgs84.a, wgs84.e2))

    def test_sphere(self):
        assert meridian_arc(0.5, 6371000.0, 0.0) == pytest.approx(0.5 * 6371000.0)

    def test_footpoint_inverts_arc(self, wgs84):
        arcs = meridian_arc(LATITUDES, wgs84.a, wgs84.e2)
        assert footpoint_latitude(arcs, wgs84.a, wgs84.e2) == pytest.approx(LATITUDES, abs=1e-12)


class TestAuxiliaryLatitudes:
    """Conformal and authalic latitude conversions."""

    def test_t_inverse(self, wgs84):
        t = conformal_t(LATITUDES, wgs84.e)
        assert latitude_from_t(t, wgs84.e) == pytest.approx(LATITUDES, abs=1e-12)

    def test_conformal_series_inverse(self, wgs84):
        chi = 2 * np.arctan(np.exp(isometric_latitude(LATITUDES, wgs84.e))) - np.pi / 2
        assert latitude_from_conformal(chi, wgs84.e2) == pytest.approx(LATITUDES, abs=1e-10)

    def test_authalic_series_inverse(self, wgs84):
        q_p = authalic_q(1.0, wgs84.e)
        beta = np.arcsin(authalic_q(np.sin(LATITUDES), wgs84.e) / q_p)
        assert latitude_from_authalic(beta, wgs84.e2) == pytest.approx(LATITUDES, abs=1e-8)

    def test_sphere_reductions(self):
        phi = np.radians(40.0)
        assert authalic_q(np.sin(phi), 0.0) == pytest.approx(2 * np.sin(phi))
        assert conformal_t(phi, 0.0) == pytest.approx(np.tan(np.pi / 4 - phi / 2))
        assert isometric_latitude(phi, 0.0) == pytest.approx(np.log(np.tan(np.pi / 4 + phi / 2)))


class TestIterate:
    """Fixed-point iteration with a cap."""

    def test_converges(self):
        root = iterate(np.cos, 1.0, 1e-12, 200)
        assert root == pytest.approx(0.7390851332151607, abs=1e-11)

    def test_cap_reached(self):
        assert iterate(np.cos, 1.0, 1e-12, 3) is None

    def test_divergence(self):
        assert iterate(lambda x: 2 * x + 1, 1.0, 1e-12, 10) is None

    def test_non_finite(self):
        assert iterate(lambda x: np.nan, 1.0, 1e-12, 10) is None
