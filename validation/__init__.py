"""
Validation Framework for the Geodetic Projection Engine.

This module provides consistency checks for projection instances and
cross-checks against PROJ.
"""

from validation.projection_checks import (
    ProjectionConsistencyChecker,
    ValidationResult,
)

from validation.reference import (
    PyprojReference,
    proj4_definition,
)

__all__ = [
    "ProjectionConsistencyChecker",
    "ValidationResult",
    "PyprojReference",
    "proj4_definition",
]
