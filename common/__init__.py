"""
Common utilities and infrastructure for the Geodetic Projection Engine.

This package provides foundational components used across all modules:
- Reference ellipsoid constants with provenance
- Unit registry for angles, lengths and scale factors
- Coordinate value types and the UNDEFINED sentinel
- Typed configuration errors and logging
"""

from common.constants import Constant, EllipsoidConstants, NumericalTolerances
from common.exceptions import (
    AreaOfUseError,
    ConfigurationError,
    EllipsoidError,
    MissingParameterError,
    ParameterError,
    ParameterUnitError,
    ParameterValueError,
    ProjectionEngineError,
    UnknownProjectionError,
    ValidationError,
)
from common.units import (
    Q_,
    UnitCategory,
    UnitRegistry,
    dms_to_radians,
    sexagesimal_to_radians,
    ureg,
    validate_dimensionality,
)
from common.types import (
    UNDEFINED,
    GeographicCoordinate,
    PlanarCoordinate,
    UndefinedCoordinate,
    is_undefined,
)
from common.logging_config import get_logger, set_level

__all__ = [
    "Constant",
    "EllipsoidConstants",
    "NumericalTolerances",
    "AreaOfUseError",
    "ConfigurationError",
    "EllipsoidError",
    "MissingParameterError",
    "ParameterError",
    "ParameterUnitError",
    "ParameterValueError",
    "ProjectionEngineError",
    "UnknownProjectionError",
    "ValidationError",
    "Q_",
    "UnitCategory",
    "UnitRegistry",
    "dms_to_radians",
    "sexagesimal_to_radians",
    "ureg",
    "validate_dimensionality",
    "UNDEFINED",
    "GeographicCoordinate",
    "PlanarCoordinate",
    "UndefinedCoordinate",
    "is_undefined",
    "get_logger",
    "set_level",
]
