"""
template_loader.py - Build a Template from a page of a template PDF.

Template PDFs mark their placeholders with annotations:
- /Square annotations carrying an /NM name are regions (map, overview, ...)
- text form fields (/Widget annotations with /FT /Tx) are text fields,
  named by their fully qualified field name

Page size comes from the MediaBox; all geometry is converted to mm, with
offsets measured from the top-left page corner.
"""
import logging
import re
from typing import Optional

import pikepdf

import config
from models import FontInfo, TemplateRegion
from template import Template

logger = logging.getLogger(__name__)

_DA_FONT_RE = re.compile(r"/([^\s/]+)\s+(-?[\d.]+)\s+Tf")
_DA_GRAY_RE = re.compile(r"(-?[\d.]+)\s+g\b")
_DA_RGB_RE = re.compile(r"(-?[\d.]+)\s+(-?[\d.]+)\s+(-?[\d.]+)\s+rg\b")


def load_template(pdf_path: str, page_index: int = config.DEFAULT_PAGE_INDEX) -> Template:
    """Main entry point: describe one page of a template PDF.

    Raises pikepdf.PasswordError for encrypted PDFs and IndexError if the
    page does not exist.
    """
    try:
        pdf = pikepdf.Pdf.open(pdf_path)
    except pikepdf.PasswordError:
        logger.error("Template PDF is encrypted/password-protected: %s", pdf_path)
        raise
    except Exception as e:
        logger.error("Could not open template PDF: %s", e)
        raise

    try:
        if not 0 <= page_index < len(pdf.pages):
            raise IndexError(
                f"Page {page_index} out of range, {pdf_path} has {len(pdf.pages)} page(s)"
            )
        page = pdf.pages[page_index]
        template, page_box = _template_from_page(page)
        default_da = _acroform_default_appearance(pdf)

        for annot in page.obj.get("/Annots", pikepdf.Array()):
            if not isinstance(annot, pikepdf.Dictionary):
                logger.warning("Skipping non-dictionary /Annots entry: %r", annot)
                continue
            subtype = str(annot.get("/Subtype", ""))
            if subtype in config.REGION_ANNOTATION_SUBTYPES:
                _add_region_annotation(template, annot, page_box)
            elif subtype == "/Widget":
                _add_text_field_widget(template, annot, page_box, default_da)
    finally:
        pdf.close()

    logger.debug("Loaded %r from %s page %d", template, pdf_path, page_index)
    return template


# ---------------------------------------------------------------------------
# Page geometry
# ---------------------------------------------------------------------------

def _template_from_page(page) -> tuple:
    """Create an empty Template sized after the page's MediaBox."""
    media_box = _resolve_inherited(page.obj, "/MediaBox")
    if media_box is None:
        raise ValueError("Template page has no MediaBox")
    page_box = _normalize_rect(media_box)
    x0, y0, x1, y1 = page_box

    rotate = int(_resolve_inherited(page.obj, "/Rotate") or 0)
    if rotate % 360:
        logger.warning("Ignoring page /Rotate %d, geometry is taken unrotated", rotate)

    width = (x1 - x0) * config.MM_PER_POINT
    height = (y1 - y0) * config.MM_PER_POINT
    if width > height:
        orientation = config.ORIENTATION_LANDSCAPE
    else:
        orientation = config.ORIENTATION_PORTRAIT
    return Template(width, height, orientation), page_box


def _resolve_inherited(node, key: str):
    """Look up an inheritable attribute, following /Parent links.

    Works for both the page tree and the form field hierarchy.
    """
    seen = set()
    while node is not None:
        value = node.get(key)
        if value is not None:
            return value
        if node.is_indirect:
            if node.objgen in seen:
                break
            seen.add(node.objgen)
        node = node.get("/Parent")
    return None


def _normalize_rect(rect) -> tuple:
    """Return (x0, y0, x1, y1) with x0 <= x1 and y0 <= y1."""
    ax, ay, bx, by = (float(v) for v in rect)
    return min(ax, bx), min(ay, by), max(ax, bx), max(ay, by)


def _region_from_rect(name: str, rect, page_box: tuple, **kwargs) -> TemplateRegion:
    """Convert a PDF rect (points, bottom-left origin) to mm from the top-left."""
    x0, y0, x1, y1 = _normalize_rect(rect)
    page_x0, _, _, page_y1 = page_box
    return TemplateRegion(
        name=name,
        offset_x=(x0 - page_x0) * config.MM_PER_POINT,
        offset_y=(page_y1 - y1) * config.MM_PER_POINT,
        width=(x1 - x0) * config.MM_PER_POINT,
        height=(y1 - y0) * config.MM_PER_POINT,
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Regions
# ---------------------------------------------------------------------------

def _add_region_annotation(template: Template, annot, page_box: tuple):
    name = str(annot.get("/NM", "")).strip()
    if not name:
        logger.warning("Skipping unnamed %s annotation", annot.get("/Subtype"))
        return
    if template.has_region(name):
        logger.warning("Skipping duplicate region '%s'", name)
        return
    if "/Rect" not in annot:
        logger.warning("Skipping region '%s' without /Rect", name)
        return
    template.add_region(_region_from_rect(name, annot.Rect, page_box))


# ---------------------------------------------------------------------------
# Text fields
# ---------------------------------------------------------------------------

def _add_text_field_widget(template: Template, annot, page_box: tuple,
                           default_da: Optional[str]):
    field_type = _resolve_inherited(annot, "/FT")
    if field_type is None or str(field_type) != config.TEXT_FIELD_TYPE:
        return

    name = _qualified_field_name(annot)
    if not name:
        logger.warning("Skipping text field widget without a field name")
        return
    if template.has_text_field(name):
        # Same field shown through several widgets; the first one wins
        logger.warning("Skipping duplicate widget for text field '%s'", name)
        return
    if "/Rect" not in annot:
        logger.warning("Skipping text field '%s' without /Rect", name)
        return

    da = _resolve_inherited(annot, "/DA")
    font = parse_default_appearance(str(da) if da is not None else default_da)

    rotation = 0.0
    mk = annot.get("/MK")
    if mk is not None and "/R" in mk:
        rotation = float(mk.R)

    field = _region_from_rect(name, annot.Rect, page_box, rotation=rotation, font=font)
    template.add_text_field(field)


def _qualified_field_name(annot) -> str:
    """Join the partial /T names from the field root down to this widget."""
    parts = []
    node = annot
    seen = set()
    while node is not None:
        if node.is_indirect:
            if node.objgen in seen:
                break
            seen.add(node.objgen)
        partial = node.get("/T")
        if partial is not None and str(partial):
            parts.append(str(partial))
        node = node.get("/Parent")
    return ".".join(reversed(parts))


def _acroform_default_appearance(pdf: pikepdf.Pdf) -> Optional[str]:
    acroform = pdf.Root.get("/AcroForm")
    if acroform is None:
        return None
    da = acroform.get("/DA")
    return str(da) if da is not None else None


def parse_default_appearance(da: Optional[str]) -> Optional[FontInfo]:
    """Parse a form field default appearance string, e.g. '/Helv 12 Tf 0 g'.

    A font size of 0 means auto-size and is kept as 0.0.
    """
    if not da:
        return None
    font_match = _DA_FONT_RE.search(da)
    if not font_match:
        return None

    color = (0.0, 0.0, 0.0)
    rgb_match = _DA_RGB_RE.search(da)
    gray_match = _DA_GRAY_RE.search(da)
    if rgb_match:
        color = tuple(float(c) for c in rgb_match.groups())
    elif gray_match:
        gray = float(gray_match.group(1))
        color = (gray, gray, gray)

    return FontInfo(
        name=font_match.group(1),
        size=float(font_match.group(2)),
        color=color,
    )
