"""Custom exceptions for the projection engine.

Only construction-time misconfiguration is reported by raising. Domain
failures inside a forward or reverse call are reported with the
``UNDEFINED`` sentinel from :mod:`common.types` instead.
"""


class ProjectionEngineError(Exception):
    """Base exception for all projection engine errors."""
    
    pass


class ConfigurationError(ProjectionEngineError):
    """Raised when a projection cannot be configured from its inputs."""
    
    pass


class ParameterError(ConfigurationError):
    """Raised when an operation parameter is unusable."""
    
    pass


class MissingParameterError(ParameterError):
    """Raised when a required operation parameter is absent."""
    
    def __init__(self, parameter_name: str, method_name: str = ""):
        self.parameter_name = parameter_name
        self.method_name = method_name
        target = f" required by '{method_name}'" if method_name else ""
        super().__init__(f"Operation parameter '{parameter_name}'{target} is missing.")


class ParameterUnitError(ParameterError):
    """Raised when a parameter value has the wrong unit category."""
    
    def __init__(self, parameter_name: str, expected: str, actual: str):
        self.parameter_name = parameter_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Operation parameter '{parameter_name}' must be of category "
            f"'{expected}', got '{actual}'."
        )


class ParameterValueError(ParameterError):
    """Raised when a parameter value is outside the range a method accepts."""
    
    pass


class EllipsoidError(ConfigurationError):
    """Raised when an ellipsoid is missing or geometrically invalid."""
    
    pass


class AreaOfUseError(ConfigurationError):
    """Raised when the area of use is missing or malformed."""
    
    def __init__(self, message: str = "An area of use must be provided."):
        super().__init__(message)


class UnknownProjectionError(ConfigurationError):
    """Raised when a projection method cannot be resolved by name or code."""
    
    pass


class ValidationError(ProjectionEngineError):
    """Raised by strict validation when a consistency check fails."""
    
    pass
