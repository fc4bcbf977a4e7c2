"""
Geospatial Module for the Geodetic Projection Engine.

All ellipsoid geometry used by the projections originates here. No
projection recomputes eccentricities, meridian arcs or auxiliary
latitudes independently.

This module provides:
- Reference ellipsoids and their derived quantities
- Auxiliary latitudes and meridian arc series
- Operation parameter catalogue, parameter sets and areas of use
"""

from geospatial.ellipsoid import Ellipsoid, ReferenceEllipsoids

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

from geospatial.parameters import (
    WORLD,
    AreaOfUse,
    OperationParameter,
    OperationParameterSet,
    Parameters,
)

__all__ = [
    # Ellipsoids
    "Ellipsoid",
    "ReferenceEllipsoids",
    # Numerics
    "authalic_q",
    "conformal_t",
    "footpoint_latitude",
    "isometric_latitude",
    "iterate",
    "latitude_from_authalic",
    "latitude_from_conformal",
    "latitude_from_t",
    "meridian_arc",
    "signed_longitude_delta",
    # Parameters
    "WORLD",
    "AreaOfUse",
    "OperationParameter",
    "OperationParameterSet",
    "Parameters",
]
