"""
main.py - Inspect print template PDFs.

Usage:
    python main.py                              # Inspect all PDFs in templates/
    python main.py a4_portrait.pdf              # Inspect a single template
    python main.py --input-dir my_templates/    # Inspect a directory
    python main.py a4.pdf --page 1              # Describe the second page
    python main.py a4.pdf --json                # Dump the legacy nested map
"""
import argparse
import json
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import config
from template import Template
from template_loader import load_template


@dataclass
class InspectionResult:
    input_path: str
    template: Optional[Template] = None
    success: bool = False
    error: str = ""
    duration_seconds: float = 0.0


def inspect_template(input_path: str, page_index: int = config.DEFAULT_PAGE_INDEX) -> InspectionResult:
    """Load a single template PDF and record the outcome."""
    result = InspectionResult(input_path=input_path)
    start_time = time.time()

    try:
        result.template = load_template(input_path, page_index)
        result.success = True
    except Exception as e:
        result.error = f"{type(e).__name__}: {e}"

    result.duration_seconds = time.time() - start_time
    return result


def format_template_report(template: Template) -> str:
    """Format a Template as a human-readable report."""
    lines = [
        f"Page size: {template.width:.1f} x {template.height:.1f} mm",
        f"Orientation: {template.orientation}",
        f"Regions ({len(template.regions)}):",
    ]
    for region in template.regions:
        lines.append(f"  - {region.name:20s} "
                     f"at ({region.offset_x:.1f}, {region.offset_y:.1f}) mm, "
                     f"{region.width:.1f} x {region.height:.1f} mm")
    lines.append(f"Text fields ({len(template.text_fields)}):")
    for field in template.text_fields:
        font = f", {field.font.name} {field.font.size:g}pt" if field.font else ""
        lines.append(f"  - {field.name:20s} "
                     f"at ({field.offset_x:.1f}, {field.offset_y:.1f}) mm{font}")
    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Describe print template PDFs: page size, orientation, regions and text fields",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                              # Inspect templates/
  python main.py a4_portrait.pdf a3_landscape.pdf
  python main.py --input-dir my_templates/ --json
        """,
    )
    parser.add_argument("inputs", nargs="*", help="Template PDF file(s) to inspect")
    parser.add_argument("--input-dir", "-d", default=str(config.DEFAULT_TEMPLATE_DIR),
                        help=f"Directory of template PDFs (default: {config.DEFAULT_TEMPLATE_DIR}/)")
    parser.add_argument("--page", "-p", type=int, default=config.DEFAULT_PAGE_INDEX,
                        help="Zero-based page index to describe (default: 0)")
    parser.add_argument("--json", action="store_true",
                        help="Print the legacy nested map as JSON instead of a report")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose/debug logging")
    args = parser.parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format=config.LOG_FORMAT)

    # Collect input files
    pdf_files = []
    if args.inputs:
        for name in args.inputs:
            p = Path(name)
            if not p.exists():
                print(f"Error: {p} does not exist")
                return 1
            pdf_files.append(p)
    else:
        input_dir = Path(args.input_dir)
        if not input_dir.exists():
            print(f"Error: Template directory '{input_dir}' does not exist.")
            return 1
        pdf_files = sorted(input_dir.glob("*.pdf"))
        if not pdf_files:
            print(f"No template PDFs found in '{input_dir}/'")
            return 0

    results = [inspect_template(str(pdf_file), args.page) for pdf_file in pdf_files]

    if args.json:
        payload = {
            r.input_path: r.template.to_legacy_dict() if r.success else {"error": r.error}
            for r in results
        }
        print(json.dumps(payload, indent=2))
    else:
        for idx, r in enumerate(results, 1):
            print(f"[{idx}/{len(results)}] {Path(r.input_path).name}")
            if r.success:
                print(format_template_report(r.template))
            else:
                print(f"  ERROR: {r.error}")
            print()
        _print_summary(results)

    return 0 if all(r.success for r in results) else 1


def _print_summary(results: list):
    """Print a summary table of all results."""
    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)

    for r in results:
        status = "OK" if r.success else "ERROR"
        name = Path(r.input_path).name
        if r.success:
            detail = (f"{r.template.orientation}, {len(r.template.regions)} regions, "
                      f"{len(r.template.text_fields)} text fields")
        else:
            detail = r.error
        print(f"  [{status:5s}] {name:40s} {detail}")

    success_count = sum(1 for r in results if r.success)
    print()
    print(f"Total: {len(results)} | "
          f"Loaded: {success_count} | "
          f"Failed: {len(results) - success_count}")


if __name__ == "__main__":
    sys.exit(main())
