"""Tests for the Template descriptor and its legacy lookup view."""
import gc
import math

import pytest

from errors import (
    DuplicateNameError, InvalidGeometryError, InvalidOrientationError,
    RegionNotFoundError, TemplateError, UnsupportedMutationError,
)
from models import FontInfo, Orientation, TemplateRegion
from template import LegacyKey, RegionKey, Template


@pytest.fixture
def a4():
    template = Template(210, 297, "portrait")
    template.add_region(TemplateRegion("map", 10, 20, 190, 200))
    template.add_text_field(TemplateRegion("title", 10, 5, 190, 10,
                                           font=FontInfo("Helv", 12)))
    return template


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("width,height", [
    (0, 297), (210, 0), (-1, 297), (210, -0.5), (0, 0),
    (math.nan, 297), (210, math.inf), (True, 297), ("210", 297), (None, 297),
])
def test_invalid_geometry(width, height):
    with pytest.raises(InvalidGeometryError):
        Template(width, height, "portrait")


def test_huge_integer_geometry_is_invalid():
    with pytest.raises(InvalidGeometryError):
        Template(10 ** 400, 297, "portrait")


@pytest.mark.parametrize("orientation", ["", "Portrait", "LANDSCAPE", "square", None, 1])
def test_invalid_orientation(orientation):
    with pytest.raises(InvalidOrientationError):
        Template(210, 297, orientation)


def test_geometry_is_checked_before_orientation():
    with pytest.raises(InvalidGeometryError):
        Template(0, 297, "sideways")


def test_errors_share_a_base_class():
    with pytest.raises(TemplateError):
        Template(-1, 1, "portrait")
    with pytest.raises(ValueError):
        Template(1, 1, "upside-down")


def test_error_hierarchy():
    assert issubclass(UnsupportedMutationError, TypeError)
    assert issubclass(RegionNotFoundError, KeyError)
    assert issubclass(DuplicateNameError, ValueError)
    assert issubclass(InvalidGeometryError, ValueError)
    assert issubclass(InvalidOrientationError, ValueError)


def test_accessors_return_construction_values():
    template = Template(297, 210.5, "landscape")
    assert template.width == 297
    assert template.height == 210.5
    assert template.orientation == "landscape"
    assert template.orientation is Orientation.LANDSCAPE
    assert len(template.regions) == 0
    assert len(template.text_fields) == 0


def test_orientation_enum_is_accepted():
    template = Template(210, 297, Orientation.PORTRAIT)
    assert template["orientation"] == "portrait"


def test_geometry_is_read_only():
    template = Template(210, 297, "portrait")
    with pytest.raises(AttributeError):
        template.width = 100
    with pytest.raises(AttributeError):
        template.orientation = "landscape"


# ---------------------------------------------------------------------------
# Typed API
# ---------------------------------------------------------------------------

def test_add_region_sets_back_reference():
    template = Template(210, 297, "portrait")
    region = TemplateRegion("map")
    template.add_region(region)

    assert template.has_region("map")
    assert template.get_region("map") is region
    assert region.parent_template is template


def test_add_text_field_sets_back_reference():
    template = Template(210, 297, "portrait")
    field = TemplateRegion("title")
    template.add_text_field(field)

    assert template.has_text_field("title")
    assert template.text_fields.get_member("title") is field
    assert field.parent_template is template


def test_pools_are_independent_namespaces(a4):
    assert not a4.has_region("title")
    assert not a4.has_text_field("map")

    a4.add_region(TemplateRegion("title"))
    a4.add_text_field(TemplateRegion("map"))
    assert a4.has_region("title")
    assert a4.has_text_field("map")
    assert a4.get_region("title") is not a4.text_fields["title"]


def test_get_region_does_not_find_text_fields(a4):
    with pytest.raises(RegionNotFoundError):
        a4.get_region("title")


def test_no_typed_text_field_getter():
    assert not hasattr(Template, "get_text_field")


def test_collections_are_shared_not_copied(a4):
    assert a4.regions is a4.regions
    a4.add_region(TemplateRegion("overview"))
    assert a4.regions.names() == ["map", "overview"]


def test_duplicate_region_is_rejected_without_touching_element(a4):
    stray = TemplateRegion("map")
    with pytest.raises(DuplicateNameError):
        a4.add_region(stray)
    assert stray.parent_template is None
    assert a4.get_region("map") is not stray


@pytest.mark.parametrize("name", ["", None])
def test_invalid_name_is_rejected_without_touching_element(name):
    template = Template(210, 297, "portrait")
    region = TemplateRegion(name)
    with pytest.raises(ValueError):
        template.add_region(region)
    assert region.parent_template is None
    assert len(template.regions) == 0

    region.name = "map"
    other = Template(100, 100, "portrait")
    other.add_region(region)
    assert region.parent_template is other


def test_element_cannot_move_to_another_template(a4):
    other = Template(100, 100, "portrait")
    with pytest.raises(ValueError):
        other.add_region(a4.get_region("map"))
    assert not other.has_region("map")


def test_same_element_may_sit_in_both_pools_of_one_template():
    template = Template(210, 297, "portrait")
    shared = TemplateRegion("logo")
    template.add_region(shared)
    template.add_text_field(shared)
    assert template.get_region("logo") is template.text_fields["logo"]


def test_back_reference_does_not_keep_template_alive():
    template = Template(210, 297, "portrait")
    region = TemplateRegion("map")
    template.add_region(region)

    del template
    gc.collect()
    assert region.parent_template is None


# ---------------------------------------------------------------------------
# Legacy lookup view
# ---------------------------------------------------------------------------

def test_virtual_keys_always_exist():
    template = Template(210, 297, "portrait")
    for key in ("orientation", "pageSize", "fields"):
        assert key in template


def test_other_keys_exist_only_as_region_names(a4):
    assert "map" in a4
    assert "title" not in a4
    assert "overview" not in a4
    assert 3 not in a4


def test_orientation_key(a4):
    assert a4["orientation"] == "portrait"
    assert type(a4["orientation"]) is str


def test_page_size_key(a4):
    assert a4["pageSize"] == {"width": a4.width, "height": a4.height}
    # fresh structure each time, callers cannot corrupt the geometry
    a4["pageSize"]["width"] = 1
    assert a4.width == 210


def test_fields_key_is_the_text_field_collection(a4):
    assert a4["fields"] is a4.text_fields
    assert a4["fields"]["title"].font.size == 12


def test_region_fallback(a4):
    assert a4["map"] is a4.get_region("map")


def test_unknown_key_raises_not_found(a4):
    with pytest.raises(RegionNotFoundError):
        a4["overview"]
    with pytest.raises(KeyError):
        a4["title"]


def test_get_with_default(a4):
    assert a4.get("overview") is None
    assert a4.get("overview", "x") == "x"
    assert a4.get("map") is a4.get_region("map")


def test_virtual_keys_shadow_regions():
    template = Template(210, 297, "portrait")
    template.add_region(TemplateRegion("fields"))
    assert template.has_region("fields")
    assert template["fields"] is template.text_fields


@pytest.mark.parametrize("key", ["orientation", "pageSize", "fields", "map", "unknown"])
def test_item_assignment_is_unsupported(a4, key):
    with pytest.raises(UnsupportedMutationError):
        a4[key] = "anything"


@pytest.mark.parametrize("key", ["orientation", "pageSize", "fields", "map", "unknown"])
def test_item_deletion_is_unsupported(a4, key):
    with pytest.raises(UnsupportedMutationError):
        del a4[key]
    assert a4.has_region("map")


def test_resolve_legacy_keys():
    assert LegacyKey.resolve("orientation") is LegacyKey.ORIENTATION
    assert LegacyKey.resolve("pageSize") is LegacyKey.PAGE_SIZE
    assert LegacyKey.resolve("fields") is LegacyKey.FIELDS
    assert LegacyKey.resolve("map") == RegionKey("map")
    assert LegacyKey.resolve(LegacyKey.FIELDS) is LegacyKey.FIELDS


def test_lookup_accepts_resolved_keys(a4):
    assert a4.lookup(LegacyKey.PAGE_SIZE) == {"width": 210.0, "height": 297.0}
    assert a4.lookup(RegionKey("map")) is a4.get_region("map")


def test_to_legacy_dict(a4):
    data = a4.to_legacy_dict()
    assert data["orientation"] == "portrait"
    assert data["pageSize"] == {"width": 210.0, "height": 297.0}
    assert data["fields"]["title"]["fontSize"] == 12
    assert data["map"]["offsetY"] == 20
    assert "title" not in data


def test_to_legacy_dict_skips_shadowed_regions():
    template = Template(210, 297, "portrait")
    template.add_region(TemplateRegion("pageSize"))
    assert template.to_legacy_dict()["pageSize"] == {"width": 210.0, "height": 297.0}


# ---------------------------------------------------------------------------
# End to end
# ---------------------------------------------------------------------------

def test_build_and_query_a4_portrait():
    template = Template(210, 297, "portrait")
    template.add_region(TemplateRegion("map"))
    template.add_text_field(TemplateRegion("title"))

    assert template.width == 210
    assert template.height == 297
    assert template.orientation == "portrait"
    assert template["pageSize"] == {"width": 210, "height": 297}
    assert template.has_region("map")
    assert template.has_text_field("title")
    assert not template.has_region("title")
