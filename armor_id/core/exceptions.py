"""Custom exceptions for armor number identification."""

class ApplicationError(Exception):
    """Base application error."""
    pass

class ConfigurationError(ApplicationError):
    """Startup configuration errors (settings values, digit templates)."""
    pass

class GeometryDegenerateError(ApplicationError):
    """Light bar geometry cannot be rectified into a digit image."""
    pass

class SizeMismatchError(ApplicationError):
    """Digit image is missing or not the canonical size."""
    pass

class FrameError(ApplicationError):
    """Camera frame cannot be processed at all."""
    pass

class ValidationError(ApplicationError):
    """Data validation errors."""
    pass
