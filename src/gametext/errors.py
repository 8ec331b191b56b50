"""
Exceptions raised while building or querying the localization databases.
"""


class LocalizationError(Exception):
    """Base class for all gametext errors."""


class StructuralViolation(LocalizationError):
    """A uniqueness invariant would be broken (duplicate bank or scene)."""


class NotFound(LocalizationError, KeyError):
    """A line, scene, group or bank lookup missed."""

    def __str__(self) -> str:
        # KeyError quotes its argument
        return str(self.args[0]) if self.args else ""


class MalformedSource(LocalizationError, ValueError):
    """A source document could not be decoded for its declared format."""
