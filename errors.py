"""
errors.py - Exceptions raised while building or querying print templates.
"""


class TemplateError(Exception):
    """Base class for all template errors."""


class InvalidGeometryError(TemplateError, ValueError):
    pass


class InvalidOrientationError(TemplateError, ValueError):
    pass


class DuplicateNameError(TemplateError, ValueError):
    pass


class RegionNotFoundError(TemplateError, KeyError):
    """Raised when a name is not present in a region collection.

    Subclasses KeyError so the legacy lookup view behaves like a mapping.
    """

    def __str__(self):
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class UnsupportedMutationError(TemplateError, TypeError):
    pass
