"""
Tests for the projection base contract.
"""
import copy
import pickle

import numpy as np
import pytest

from common.exceptions import AreaOfUseError, EllipsoidError, MissingParameterError, ParameterError
from common.types import UNDEFINED, GeographicCoordinate, PlanarCoordinate, UndefinedCoordinate, is_undefined
from geospatial.ellipsoid import Ellipsoid
from geospatial.parameters import WORLD, OperationParameterSet, Parameters as P
from projections.base import CoordinateProjection
from projections.mercator import MercatorSpherical


class PlateCarree(CoordinateProjection):
    """Minimal projection: x is the longitude and y the latitude, in radians."""

    method_name = "Plate carree (radians)"
    required_parameters = (P.FALSE_EASTING,)

    def _setup(self, parameters):
        self.false_easting = parameters.length(P.FALSE_EASTING)

    def _forward(self, phi, lam, height):
        if phi > 1.5:
            return None
        return lam + self.false_easting, phi

    def _reverse(self, x, y):
        if x > 100:
            return np.nan, 0.0
        return y, x - self.false_easting


@pytest.fixture
def plate_carree(wgs84):
    return PlateCarree(wgs84, {"False easting": "0 m"}, WORLD)


class TestUndefinedSentinel:
    """The UNDEFINED value."""

    def test_singleton(self):
        assert UndefinedCoordinate() is UNDEFINED
        assert copy.deepcopy(UNDEFINED) is UNDEFINED
        assert pickle.loads(pickle.dumps(UNDEFINED)) is UNDEFINED

    def test_falsy(self):
        assert not UNDEFINED
        assert is_undefined(UNDEFINED)
        assert not is_undefined(None)
        assert repr(UNDEFINED) == "UNDEFINED"


class TestCoordinates:
    """Value types crossing the projection boundary."""

    def test_latitude_range(self):
        with pytest.raises(ValueError):
            GeographicCoordinate(2.0, 0.0)

    def test_degrees(self):
        coordinate = GeographicCoordinate.from_degrees(45.0, -90.0, 10.0)
        assert coordinate.to_degrees() == pytest.approx((45.0, -90.0))
        assert coordinate.height == 10.0

    def test_frozen(self):
        planar = PlanarCoordinate(1.0, 2.0)
        with pytest.raises(AttributeError):
            planar.x = 3.0
        assert planar.as_tuple() == (1.0, 2.0)


class TestConstruction:
    """Construction-time validation."""

    def test_missing_ellipsoid(self):
        with pytest.raises(EllipsoidError):
            PlateCarree(None, {"False easting": "0 m"}, WORLD)

    def test_wrong_ellipsoid_type(self):
        with pytest.raises(EllipsoidError):
            PlateCarree("WGS 84", {"False easting": "0 m"}, WORLD)

    def test_missing_parameters(self, wgs84):
        with pytest.raises(ParameterError):
            PlateCarree(wgs84, None, WORLD)

    def test_missing_parameter(self, wgs84):
        with pytest.raises(MissingParameterError) as info:
            PlateCarree(wgs84, {}, WORLD)
        assert info.value.method_name == "Plate carree (radians)"

    def test_missing_area_of_use(self, wgs84):
        with pytest.raises(AreaOfUseError):
            PlateCarree(wgs84, {"False easting": "0 m"}, None)

    def test_accepts_parameter_set(self, wgs84):
        parameters = OperationParameterSet({"False easting": "10 m"})
        projection = PlateCarree(wgs84, parameters, WORLD)
        assert projection.parameters is parameters
        assert projection.ellipsoid is wgs84
        assert projection.area_of_use is WORLD

    def test_abstract_base(self, wgs84):
        with pytest.raises(TypeError):
            CoordinateProjection(wgs84, {}, WORLD)


class TestImmutability:
    """Instances refuse changes after construction."""

    def test_assignment(self, plate_carree):
        with pytest.raises(AttributeError):
            plate_carree.false_easting = 5.0

    def test_new_attribute(self, plate_carree):
        with pytest.raises(AttributeError):
            plate_carree.cache = {}

    def test_deletion(self, plate_carree):
        with pytest.raises(AttributeError):
            del plate_carree.false_easting


class TestTransformations:
    """Conversion of formula results into coordinates."""

    def test_height_is_carried(self, plate_carree):
        planar = plate_carree.forward(GeographicCoordinate(0.5, 0.25, 73.0))
        assert planar == PlanarCoordinate(0.25, 0.5, 73.0)
        geographic = plate_carree.reverse(planar)
        assert geographic.height == 73.0

    def test_formula_none_is_undefined(self, plate_carree):
        assert plate_carree.forward(GeographicCoordinate(1.55, 0.0)) is UNDEFINED

    def test_non_finite_is_undefined(self, plate_carree):
        assert plate_carree.reverse(PlanarCoordinate(200.0, 0.0)) is UNDEFINED

    def test_latitude_beyond_pole_is_undefined(self, plate_carree):
        assert plate_carree.reverse(PlanarCoordinate(0.0, 1.6)) is UNDEFINED

    def test_reverse_longitude_is_normalised(self, plate_carree):
        geographic = plate_carree.reverse(PlanarCoordinate(3.5, 0.1))
        assert geographic.longitude == pytest.approx(3.5 - 2 * np.pi)
        assert -np.pi < geographic.longitude <= np.pi

    def test_mercator_pole_is_undefined(self):
        mercator = MercatorSpherical(
            Ellipsoid.sphere(6371007.0),
            {
                "Latitude of natural origin": "0 degree",
                "Longitude of natural origin": "0 degree",
                "False easting": "0 m",
                "False northing": "0 m",
            },
            WORLD,
        )
        assert mercator.forward(GeographicCoordinate(np.pi / 2, 0.0)) is UNDEFINED
        assert mercator.forward(GeographicCoordinate(-np.pi / 2, 0.0)) is UNDEFINED


class TestBatch:
    """Array interfaces."""

    def test_forward_many(self, plate_carree):
        lats = np.array([0.1, 1.55, 0.2, 2.0])
        lons = np.array([0.3, 0.0, np.nan, 0.1])
        xs, ys = plate_carree.forward_many(lats, lons)
        assert xs[0] == pytest.approx(0.3)
        assert ys[0] == pytest.approx(0.1)
        assert np.isnan(xs[1:]).all()
        assert np.isnan(ys[1:]).all()

    def test_forward_many_keeps_shape(self, plate_carree):
        lats = np.full((2, 3), 0.5)
        lons = np.zeros((2, 3))
        xs, ys = plate_carree.forward_many(lats, lons)
        assert xs.shape == ys.shape == (2, 3)

    def test_reverse_many(self, plate_carree):
        lats, lons = plate_carree.reverse_many(np.array([0.2, 200.0]), np.array([0.4, 0.0]))
        assert lats[0] == pytest.approx(0.4)
        assert lons[0] == pytest.approx(0.2)
        assert np.isnan(lats[1]) and np.isnan(lons[1])
