"""
config.py - Configuration constants for the print template descriptor.
"""
from pathlib import Path

# Orientations
ORIENTATION_LANDSCAPE = "landscape"
ORIENTATION_PORTRAIT = "portrait"

# Legacy lookup view: virtual top-level keys
LEGACY_KEY_ORIENTATION = "orientation"
LEGACY_KEY_PAGE_SIZE = "pageSize"
LEGACY_KEY_FIELDS = "fields"

# Units (PDF user space is 1/72 inch)
MM_PER_POINT = 25.4 / 72.0

# Template PDFs: annotation subtypes that mark a region placeholder
REGION_ANNOTATION_SUBTYPES = ("/Square",)
# Template PDFs: AcroForm field type that marks a text field placeholder
TEXT_FIELD_TYPE = "/Tx"

# CLI
DEFAULT_TEMPLATE_DIR = Path("templates")
DEFAULT_PAGE_INDEX = 0
LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
