"""
template.py - Structural description of the first page of a generated PDF.

A Template holds the page size (mm), the orientation, and two independent
pools of named placeholders: regions (such as 'map' or 'overview') and text
fields (such as 'title'). Both pools hold the same element type but are kept
apart and may reuse each other's names.

For older consumers the template also reads like a nested mapping:

    orientation: <"landscape" | "portrait">
    pageSize:
        width: <number>
        height: <number>
    fields: <text field RegionCollection>
    <any other key>: <region with that name>

The mapping view is read-only; use add_region / add_text_field to build.
"""
import logging
import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Union

import config
from errors import (
    InvalidGeometryError, InvalidOrientationError,
    RegionNotFoundError, UnsupportedMutationError,
)
from models import Orientation, TemplateElement
from region_collection import RegionCollection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionKey:
    """Legacy key that names a region."""
    name: str


class LegacyKey(Enum):
    ORIENTATION = config.LEGACY_KEY_ORIENTATION
    PAGE_SIZE = config.LEGACY_KEY_PAGE_SIZE
    FIELDS = config.LEGACY_KEY_FIELDS

    @classmethod
    def resolve(cls, key) -> Union["LegacyKey", RegionKey]:
        """Map a raw legacy key onto a virtual key or a region name.

        Virtual keys take precedence over region names.
        """
        if isinstance(key, (LegacyKey, RegionKey)):
            return key
        for virtual in cls:
            if key == virtual.value:
                return virtual
        return RegionKey(key)


class Template:
    """Page layout descriptor: page geometry plus region and text field pools."""

    def __init__(self, width: float, height: float, orientation: str):
        if not _is_positive(width) or not _is_positive(height):
            raise InvalidGeometryError(f"Invalid width / height {width} {height}")
        try:
            parsed_orientation = Orientation(orientation)
        except ValueError:
            raise InvalidOrientationError(f"Invalid orientation {orientation}") from None

        self._width = float(width)
        self._height = float(height)
        self._orientation = parsed_orientation
        self._regions = RegionCollection("region")
        self._text_fields = RegionCollection("text field")

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------

    @property
    def width(self) -> float:
        """Page width in mm."""
        return self._width

    @property
    def height(self) -> float:
        """Page height in mm."""
        return self._height

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @property
    def regions(self) -> RegionCollection:
        return self._regions

    @property
    def text_fields(self) -> RegionCollection:
        return self._text_fields

    def has_region(self, name) -> bool:
        return self._regions.has_member(name)

    def has_text_field(self, name) -> bool:
        return self._text_fields.has_member(name)

    def get_region(self, name):
        return self._regions.get_member(name)

    def add_region(self, region: TemplateElement) -> None:
        self._add(self._regions, region)

    def add_text_field(self, field: TemplateElement) -> None:
        self._add(self._text_fields, field)

    def _add(self, pool: RegionCollection, element: TemplateElement) -> None:
        # Reject before touching the element so a failed add leaves no back-reference
        pool.check_new_name(element.name)
        element.set_parent_template(self)
        pool.add_member(element.name, element)
        logger.debug("Added %s '%s' (%d in pool)", pool.label, element.name, len(pool))

    # ------------------------------------------------------------------
    # Legacy lookup view
    # ------------------------------------------------------------------

    def lookup(self, key):
        """Resolve a legacy key (raw or already resolved) to its value."""
        resolved = LegacyKey.resolve(key)
        if resolved is LegacyKey.ORIENTATION:
            return self._orientation.value
        if resolved is LegacyKey.PAGE_SIZE:
            return {"width": self._width, "height": self._height}
        if resolved is LegacyKey.FIELDS:
            return self._text_fields
        return self.get_region(resolved.name)

    def get(self, key, default=None):
        try:
            return self.lookup(key)
        except RegionNotFoundError:
            return default

    def __getitem__(self, key):
        return self.lookup(key)

    def __contains__(self, key) -> bool:
        resolved = LegacyKey.resolve(key)
        if isinstance(resolved, LegacyKey):
            return True
        return self.has_region(resolved.name)

    def __setitem__(self, key, value):
        raise UnsupportedMutationError(
            f"{type(self).__name__} does not support item assignment"
        )

    def __delitem__(self, key):
        raise UnsupportedMutationError(
            f"{type(self).__name__} does not support item deletion"
        )

    def to_legacy_dict(self) -> dict:
        """Materialize the legacy nested mapping, e.g. for JSON output.

        Regions whose name collides with a virtual key are not reachable
        through the mapping view and are left out.
        """
        data = {
            config.LEGACY_KEY_ORIENTATION: self._orientation.value,
            config.LEGACY_KEY_PAGE_SIZE: {"width": self._width, "height": self._height},
            config.LEGACY_KEY_FIELDS: {
                name: field.to_dict() for name, field in self._text_fields.items()
            },
        }
        for name, region in self._regions.items():
            if name in data:
                logger.warning("Region '%s' is shadowed by a virtual key", name)
                continue
            data[name] = region.to_dict()
        return data

    def __repr__(self):
        return (f"Template({self._width:g}x{self._height:g}mm, "
                f"{self._orientation.value}, regions={self._regions.names()}, "
                f"text_fields={self._text_fields.names()})")


def _is_positive(value) -> bool:
    # bool is a Real; NaN fails the comparison
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    try:
        return math.isfinite(value) and value > 0
    except OverflowError:
        # ints too large for a float
        return False
