"""
Unit Registry and Unit Categories for Geodetic Parameters.

This module provides a centralized unit system using the `pint` library so
that every operation parameter handed to a projection carries its unit.
Conversion to the base units used by the formulas (radians for angles,
metres for lengths, unity for scale factors) happens exactly once, when a
projection is constructed.

Scientific Context
------------------
Geodetic parameter sets mix angles quoted in degrees, grads or sexagesimal
degrees/minutes/seconds with lengths in metres, US survey feet or
Clarke's links. Confusing degrees with radians, or a survey foot with an
international foot, silently produces coordinates that are wrong by
kilometres. Tagging values with units turns such mistakes into errors.

Example Usage
-------------
>>> from common.units import Q_, category_of, UnitCategory
>>> category_of(Q_(49, 'degree')) is UnitCategory.ANGLE
True
>>> Q_(2000000, 'us_survey_foot').to('m').magnitude
609601.2192024384
"""

from enum import Enum
from typing import Union

import numpy as np
import pint
from pint import UnitRegistry as PintUnitRegistry

# Create the global unit registry
ureg = PintUnitRegistry(on_redefinition="raise")

# Convenience alias for creating quantities
Q_ = ureg.Quantity

# Angle and length units that appear in published geodetic parameter sets
# but are missing from, or named differently in, the pint defaults.
_GEODETIC_UNIT_DEFINITIONS = (
    "us_survey_foot = 1200 / 3937 * meter = ftUS",
    "clarke_foot = 0.3047972654 * meter = ftCla",
    "clarke_link = 0.66 * clarke_foot = lkCla",
    "clarke_chain = 66 * clarke_foot = chCla",
    "german_legal_metre = 1.0000135965 * meter = GLM",
    "indian_foot_1937 = 0.30479841 * meter = ftSe",
)


class UnitCategory(Enum):
    """Category of an operation parameter value."""
    
    ANGLE = "angle"
    LENGTH = "length"
    SCALE = "scale"
    NUMBER = "number"


class UnitRegistry:
    """Wrapper around pint UnitRegistry with geodetic extensions.
    
    Attributes
    ----------
    registry : pint.UnitRegistry
        The underlying pint unit registry.
        
    Examples
    --------
    >>> units = UnitRegistry()
    >>> units.quantity(31706587.88, 'clarke_link').to('m')
    <Quantity(6378293.64..., 'meter')>
    """
    
    def __init__(self):
        """Initialize the unit registry with geodetic extensions."""
        self._registry = ureg
        self._setup_geodetic_units()
    
    def _setup_geodetic_units(self) -> None:
        """Define survey length units used by national grids."""
        for definition in _GEODETIC_UNIT_DEFINITIONS:
            try:
                self._registry.define(definition)
            except pint.errors.RedefinitionError:
                # Already defined by an earlier instance
                continue
    
    @property
    def registry(self) -> PintUnitRegistry:
        """Access the underlying pint registry."""
        return self._registry
    
    def quantity(self, value: float, unit: str) -> pint.Quantity:
        """Create a quantity with units.
        
        Parameters
        ----------
        value : float
            The numerical value.
        unit : str
            The unit string (e.g., 'degree', 'grad', 'us_survey_foot').
            
        Returns
        -------
        pint.Quantity
            A quantity object with associated units.
        """
        return self._registry.Quantity(value, unit)
    
    def parse(self, text: str) -> pint.Quantity:
        """Parse a quantity expression such as ``"400000 m"``."""
        value = self._registry.parse_expression(text)
        if not isinstance(value, pint.Quantity):
            value = self._registry.Quantity(value, "dimensionless")
        return value


# Module level instance so the geodetic units exist on import
units = UnitRegistry()


def category_of(value: Union[float, pint.Quantity]) -> UnitCategory:
    """Classify a parameter value by unit category.
    
    pint treats the radian as dimensionless, so angles are recognised by
    their root unit rather than by dimensionality.
    
    Parameters
    ----------
    value : float or pint.Quantity
        The value to classify.
        
    Returns
    -------
    UnitCategory
        ANGLE, LENGTH or SCALE for quantities, NUMBER for bare numbers.
    """
    if not isinstance(value, pint.Quantity):
        return UnitCategory.NUMBER
    if value.dimensionality == ureg.meter.dimensionality:
        return UnitCategory.LENGTH
    if value.dimensionless:
        _, root = ureg.get_root_units(value.units)
        if str(root) == "radian":
            return UnitCategory.ANGLE
        return UnitCategory.SCALE
    return UnitCategory.NUMBER


# Base units in which projection formulas operate
STANDARD_UNITS = {
    UnitCategory.ANGLE: "radian",
    UnitCategory.LENGTH: "meter",
    UnitCategory.SCALE: "dimensionless",
}


def validate_dimensionality(quantity: pint.Quantity, expected_dim: str) -> bool:
    """Check if a quantity has the expected dimensionality.
    
    Parameters
    ----------
    quantity : pint.Quantity
        The quantity to check.
    expected_dim : str
        The expected dimensionality (e.g., '[length]').
        
    Returns
    -------
    bool
        True if dimensionality matches.
        
    Raises
    ------
    pint.DimensionalityError
        If dimensionality does not match.
    """
    expected = ureg.get_dimensionality(expected_dim)
    if quantity.dimensionality != expected:
        raise pint.DimensionalityError(
            quantity.units,
            expected,
            quantity.dimensionality,
            expected
        )
    return True


def to_radians(value: pint.Quantity) -> float:
    """Angle quantity as a float in radians."""
    return float(value.to(STANDARD_UNITS[UnitCategory.ANGLE]).magnitude)


def to_metres(value: Union[float, pint.Quantity]) -> float:
    """Length quantity as a float in metres; bare numbers are metres."""
    if isinstance(value, pint.Quantity):
        validate_dimensionality(value, "[length]")
        return float(value.to(STANDARD_UNITS[UnitCategory.LENGTH]).magnitude)
    return float(value)


def dms_to_radians(degrees: float, minutes: float = 0.0, seconds: float = 0.0) -> float:
    """Convert sexagesimal degrees, minutes and seconds to radians.
    
    The sign is taken from the first non-zero component, so ``-0, 30, 0``
    means half a degree west or south.
    
    Examples
    --------
    >>> round(dms_to_radians(49, 30), 10)
    0.8639379797
    """
    sign = -1.0
    if np.copysign(1.0, degrees) > 0 and minutes >= 0 and seconds >= 0:
        sign = 1.0
    magnitude = abs(degrees) + abs(minutes) / 60.0 + abs(seconds) / 3600.0
    return sign * to_radians(Q_(magnitude, "degree"))


def sexagesimal_to_radians(value: float) -> float:
    """Convert an angle packed as DDD.MMSSsss to radians.
    
    EPSG publishes some parameters in this form (unit code 9110), e.g.
    ``52.0922178`` for 52°09'22.178".
    
    Examples
    --------
    >>> round(sexagesimal_to_radians(52.0922178), 6)
    0.910297
    """
    sign = -1.0 if value < 0 else 1.0
    text = f"{abs(value):.10f}"
    whole, fraction = text.split(".")
    minutes = int(fraction[:2])
    seconds = float(f"{fraction[2:4]}.{fraction[4:]}")
    if minutes >= 60 or seconds >= 60:
        raise ValueError(f"{value} is not a valid sexagesimal angle.")
    return sign * dms_to_radians(int(whole), minutes, seconds)
