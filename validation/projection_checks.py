"""
Consistency Checks for Map Projections.

This module provides checks that a projection instance behaves like a
correct implementation of its method, independent of any particular
grid definition.

Check Categories
----------------
1. Round trip (reverse undoes forward over the area of use)
2. Reference points (published test values are reproduced)
3. Sphere consistency (the ellipsoidal formulas converge on the
   spherical ones as the eccentricity vanishes)
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Type, Union

import numpy as np

from common.exceptions import ValidationError
from common.logging_config import get_logger
from common.types import GeographicCoordinate, PlanarCoordinate
from geospatial.ellipsoid import Ellipsoid
from geospatial.parameters import WORLD, AreaOfUse, OperationParameterSet
from projections.base import CoordinateProjection

logger = get_logger(__name__)

ReferencePoint = Tuple[GeographicCoordinate, PlanarCoordinate]


@dataclass
class ValidationResult:
    """Result of a validation check.
    
    Attributes
    ----------
    test_name : str
        Name of the check.
    passed : bool
        Whether the check passed.
    message : str
        Description of result.
    details : dict
        Additional details.
    """
    test_name: str
    passed: bool
    message: str
    details: Dict[str, Any]


class ProjectionConsistencyChecker:
    """Checker for the internal consistency of projections.
    
    Parameters
    ----------
    strict_mode : bool
        If True, raise :class:`ValidationError` on a failed check.
    log_violations : bool
        Whether to log failed checks at WARNING.
    rows, columns : int
        Size of the sample grid laid over the area of use.
    """
    
    def __init__(
        self,
        strict_mode: bool = False,
        log_violations: bool = True,
        rows: int = 7,
        columns: int = 7
    ):
        self.strict_mode = strict_mode
        self.log_violations = log_violations
        self.rows = rows
        self.columns = columns
    
    def _report(self, result: ValidationResult) -> ValidationResult:
        if not result.passed:
            if self.log_violations:
                logger.warning("%s failed: %s", result.test_name, result.message)
            if self.strict_mode:
                raise ValidationError(f"{result.test_name}: {result.message}")
        return result
    
    def check_all(
        self,
        projection: CoordinateProjection,
        reference_points: Sequence[ReferencePoint] = ()
    ) -> List[ValidationResult]:
        """Run the round trip and every reference point check.
        
        Returns
        -------
        List[ValidationResult]
            Results of all checks.
        """
        results = [self.check_round_trip(projection)]
        for geographic, planar in reference_points:
            results.append(self.check_reference_point(projection, geographic, planar))
        return results
    
    def check_round_trip(
        self,
        projection: CoordinateProjection,
        angular_tolerance: float = 1e-7,
        length_tolerance: float = 1e-3
    ) -> ValidationResult:
        """Check that reverse(forward(p)) returns p over the area of use.
        
        Points where the forward transformation is undefined are skipped.
        For a projection without a reverse, only that the reverse is
        undefined is checked.
        
        Parameters
        ----------
        projection : CoordinateProjection
            Projection to check.
        angular_tolerance : float
            Allowed latitude and longitude error in radians.
        length_tolerance : float
            Allowed error of the re-projected easting and northing in meters.
        """
        lats, lons = projection.area_of_use.sample_grid(self.rows, self.columns)
        checked = 0
        skipped = 0
        worst_angle = 0.0
        worst_length = 0.0
        failures = []
        
        for lat, lon in zip(lats, lons):
            geographic = GeographicCoordinate(float(lat), float(lon))
            planar = projection.forward(geographic)
            if not planar:
                skipped += 1
                continue
            checked += 1
            back = projection.reverse(planar)
            if not projection.is_reversible:
                if back:
                    failures.append((float(lat), float(lon)))
                continue
            if not back:
                failures.append((float(lat), float(lon)))
                continue
            dlon = abs((back.longitude - geographic.longitude + np.pi) % (2 * np.pi) - np.pi)
            angle = max(abs(back.latitude - geographic.latitude), dlon)
            again = projection.forward(back)
            length = max(abs(again.x - planar.x), abs(again.y - planar.y)) if again else np.inf
            worst_angle = max(worst_angle, angle)
            worst_length = max(worst_length, length)
            if angle > angular_tolerance or length > length_tolerance:
                failures.append((float(lat), float(lon)))
        
        return self._report(ValidationResult(
            test_name="round_trip",
            passed=not failures,
            message=(
                f"{projection.method_name}: {len(failures)} of {checked} points failed, "
                f"max angular error {worst_angle:.2e} rad"
            ),
            details={
                'checked': checked,
                'skipped': skipped,
                'max_angular_error': float(worst_angle),
                'max_length_error': float(worst_length),
                'failures': failures,
            }
        ))
    
    def check_reference_point(
        self,
        projection: CoordinateProjection,
        geographic: GeographicCoordinate,
        expected: PlanarCoordinate,
        tolerance: float = 0.01
    ) -> ValidationResult:
        """Check a forward transformation against a published value.
        
        Parameters
        ----------
        tolerance : float
            Allowed easting and northing error in meters.
        """
        planar = projection.forward(geographic)
        if not planar:
            return self._report(ValidationResult(
                test_name="reference_point",
                passed=False,
                message=f"{projection.method_name}: forward undefined for {geographic}",
                details={'expected': expected.as_tuple()}
            ))
        error = max(abs(planar.x - expected.x), abs(planar.y - expected.y))
        return self._report(ValidationResult(
            test_name="reference_point",
            passed=error <= tolerance,
            message=f"{projection.method_name}: error {error:.4f} m",
            details={
                'expected': expected.as_tuple(),
                'computed': planar.as_tuple(),
                'error': float(error),
            }
        ))
    
    def check_sphere_consistency(
        self,
        projection_class: Type[CoordinateProjection],
        parameters: Union[OperationParameterSet, Mapping],
        radius: float = 6_371_007.0,
        eccentricity: float = 1e-6,
        tolerance: float = 1e-3,
        area_of_use: Optional[AreaOfUse] = None
    ) -> ValidationResult:
        """Compare the spherical branch with a nearly spherical ellipsoid.
        
        The projection is built once on a true sphere and once on an
        ellipsoid of the same radius with a tiny eccentricity, which takes
        the ellipsoidal formulas. Both must agree to ``tolerance`` meters.
        
        Parameters
        ----------
        projection_class : type
            Concrete projection class.
        parameters : OperationParameterSet or mapping
            Parameters used for both instances.
        radius : float
            Sphere radius in meters.
        eccentricity : float
            Eccentricity of the comparison ellipsoid.
        """
        area_of_use = area_of_use or WORLD
        sphere = projection_class(Ellipsoid.sphere(radius), parameters, area_of_use)
        ellipsoid = Ellipsoid.from_eccentricity(radius, eccentricity, "near sphere")
        near_sphere = projection_class(ellipsoid, parameters, area_of_use)
        
        lats, lons = area_of_use.sample_grid(self.rows, self.columns)
        worst = 0.0
        mismatched = 0
        for lat, lon in zip(lats, lons):
            geographic = GeographicCoordinate(float(lat), float(lon))
            a = sphere.forward(geographic)
            b = near_sphere.forward(geographic)
            if bool(a) != bool(b):
                mismatched += 1
                continue
            if a:
                worst = max(worst, abs(a.x - b.x), abs(a.y - b.y))
        
        return self._report(ValidationResult(
            test_name="sphere_consistency",
            passed=mismatched == 0 and worst <= tolerance,
            message=(
                f"{projection_class.method_name}: max difference {worst:.2e} m, "
                f"{mismatched} definedness mismatches"
            ),
            details={
                'max_difference': float(worst),
                'mismatched': mismatched,
                'eccentricity': eccentricity,
            }
        ))
