"""
models.py - Shared data structures for print templates.

Defines the orientation values and the placeholder element (region or
text field) that a Template holds.
"""
import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol

import config


class Orientation(str, Enum):
    LANDSCAPE = config.ORIENTATION_LANDSCAPE
    PORTRAIT = config.ORIENTATION_PORTRAIT

    def __str__(self):
        return self.value


@dataclass
class FontInfo:
    name: str
    size: float
    color: tuple = (0.0, 0.0, 0.0)


class TemplateElement(Protocol):
    """Minimal contract a Template needs from the elements it holds."""
    name: str

    def set_parent_template(self, template) -> None:
        ...


@dataclass(eq=False)
class TemplateRegion:
    """A named placeholder on the template page.

    Offsets are in mm from the top-left page corner. The owning template is
    held as a weak reference; the template owns the region, not vice versa.
    """
    name: str
    offset_x: float = 0.0
    offset_y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0
    font: Optional[FontInfo] = None
    _parent_ref: Optional[weakref.ref] = field(default=None, init=False, repr=False)

    @property
    def parent_template(self):
        """The owning Template, or None if unattached or already collected."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def set_parent_template(self, template) -> None:
        current = self.parent_template
        if current is not None and current is not template:
            raise ValueError(
                f"Region '{self.name}' already belongs to another template"
            )
        self._parent_ref = weakref.ref(template)

    def to_dict(self) -> dict:
        """Convert region to dictionary for JSON serialization."""
        data = {
            "name": self.name,
            "offsetX": self.offset_x,
            "offsetY": self.offset_y,
            "width": self.width,
            "height": self.height,
            "rotation": self.rotation,
        }
        if self.font is not None:
            data["font"] = self.font.name
            data["fontSize"] = self.font.size
            data["color"] = list(self.font.color)
        return data
