"""
Blueprint Errors
"""


class BlueprintError(Exception):
    """Base class for blueprint errors."""


class InvalidDimension(BlueprintError, ValueError):
    """A grid dimension is negative."""


class DimensionMismatch(BlueprintError, ValueError):
    """Two blueprints that must share dimensions do not."""


class IndexOutOfBounds(BlueprintError, IndexError):
    """A coordinate lies outside the grid extents."""
