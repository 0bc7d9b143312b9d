"""Custom exceptions for map generation."""


class MapError(Exception):
    """Base exception for map generation errors."""

    pass


class InvalidDimensionsError(MapError, ValueError):
    """Raised when the grid width or height is not positive."""

    pass


class InvalidParameterError(MapError, ValueError):
    """Raised when a generation parameter is NaN, infinite, or out of range."""

    pass


class PayloadError(MapError, ValueError):
    """Raised when a caller-facing payload cannot be turned back into a map."""

    pass
