"""
Shared test fixtures for the projection engine test suite.
Provides reference ellipsoids and one configured instance of every
registered projection method.
"""
import pytest

pytest.register_assert_rewrite("reference_data")

from reference_data import CATALOGUE, CLARKE_1866, WGS84, build


@pytest.fixture
def wgs84():
    """WGS 84 reference ellipsoid."""
    return WGS84


@pytest.fixture
def clarke_1866():
    """Clarke 1866 reference ellipsoid."""
    return CLARKE_1866


@pytest.fixture(params=sorted(CATALOGUE), ids=str)
def catalogue_entry(request):
    """(projection, round trip tolerance in meters) for every catalogue method."""
    return build(request.param), CATALOGUE[request.param][3]
