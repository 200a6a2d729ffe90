#!/usr/bin/env python3
"""
fontcatalog – generate_fonts_json.py
====================================

Scan the ``fonts/`` directory and write the font catalog.

Every subdirectory of ``fonts/`` is one font family. The generator writes two
artifacts next to the font root:

- ``fonts.json``: ``{"metadata": {...}, "fonts": [...]}``
- ``inline-fonts-data.js``: ``let INLINE_FONTS_DATA = [...];`` (the ``fonts``
  array only, for inlining into a page)

Usage::

    python -m fontcatalog.generate_fonts_json            # URL mode
    python -m fontcatalog.generate_fonts_json --base64   # embed font data

Design principles
-----------------
- **Full rebuild**: each run re-derives everything from the filesystem.
- **One catalog, two views**: both artifacts are serialized from the same
  in-memory catalog.
- **Deterministic ordering**: variants and families are explicitly sorted.
"""

from __future__ import annotations

import argparse
import json
import locale
import sys
from collections import Counter
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from fontcatalog.classify_fonts import family_name_from_folder, format_display_name
from fontcatalog.scan_fonts import ScanTotals, scan_family_dir

# --- Configuration ---
FONT_DIR_NAME = "fonts"
FONTS_JSON = "fonts.json"
INLINE_JS = "inline-fonts-data.js"
GLOBAL_NAME = "INLINE_FONTS_DATA"

MB = 1024 * 1024


class FontRootError(RuntimeError):
    """The font root directory is missing or is not a directory."""


def utc_now_iso() -> str:
    return datetime.now(UTC).replace(microsecond=0).isoformat()


# ============================================================
# Family assembly
# ============================================================


def variant_sort_key(variant: dict[str, Any]) -> tuple[int, bool]:
    """Weight ascending, ``normal`` before any other style."""
    return (variant["weight"], variant["style"] != "normal")


def build_family(folder_name: str, scan: dict[str, Any]) -> dict[str, Any]:
    """
    Assemble a family record from a directory scan.

    The returned dict has the keys ``displayName``, ``familyName``,
    ``variants``, ``formats``, ``hasDefaultFont``, ``fontCount``,
    ``totalSize`` and, when present, ``licenseFile`` / ``licenseText``.
    """
    variants = sorted(scan["variants"], key=variant_sort_key)

    family: dict[str, Any] = {
        "displayName": format_display_name(folder_name),
        "familyName": family_name_from_folder(folder_name),
        "variants": variants,
        "formats": sorted(scan["formats"]),
        "hasDefaultFont": any(
            v["weight"] == 400 and v["style"] == "normal" for v in variants
        ),
        "fontCount": len(variants),
        "totalSize": sum(v["fileSize"] for v in variants),
    }

    if scan.get("licenseFile"):
        family["licenseFile"] = scan["licenseFile"]
    if scan.get("licenseText") is not None:
        family["licenseText"] = scan["licenseText"]

    return family


def display_name_key(family: dict[str, Any]) -> str:
    return locale.strxfrm(family["displayName"])


# ============================================================
# Collection summaries
# ============================================================


def summarize_formats(fonts: list[dict[str, Any]]) -> dict[str, int]:
    """Number of families offering each format (a family counts once)."""
    counts: Counter[str] = Counter()
    for family in fonts:
        counts.update(set(family["formats"]))
    return {fmt: counts[fmt] for fmt in sorted(counts)}


def summarize_weights(fonts: list[dict[str, Any]]) -> dict[str, int]:
    """Number of variants per weight, keys in ascending numeric order."""
    counts: Counter[int] = Counter(
        variant["weight"] for family in fonts for variant in family["variants"]
    )
    return {str(weight): counts[weight] for weight in sorted(counts)}


# ============================================================
# Catalog building
# ============================================================


def build_catalog(
    fonts_dir: Path,
    *,
    include_base64: bool = False,
    verbose: bool = True,
) -> tuple[dict[str, Any], ScanTotals]:
    """
    Scan ``fonts_dir`` and build the whole catalog.

    Args:
        fonts_dir: Font root; each immediate subdirectory is a family.
        include_base64: Embed font data as data URIs.
        verbose: Print per-family progress lines.

    Returns:
        ``(catalog, totals)`` where ``catalog`` is the ``fonts.json`` document.

    Raises:
        FontRootError: if ``fonts_dir`` is missing or not a directory.
    """
    fonts_dir = Path(fonts_dir)
    if not fonts_dir.is_dir():
        raise FontRootError(f'"{fonts_dir.name}" folder not found at {fonts_dir}')

    subdirs = [p for p in fonts_dir.iterdir() if p.is_dir()]

    if verbose:
        print(f"Found {len(subdirs)} font directories to process...")
        if include_base64:
            print("Base64 encoding enabled - this may take a moment...")

    totals = ScanTotals()
    families: list[dict[str, Any]] = []

    for idx, subdir in enumerate(subdirs, start=1):
        if verbose:
            print(f"Processing [{idx}/{len(subdirs)}]: {subdir.name}")

        scan, totals = scan_family_dir(
            subdir,
            fonts_root_name=fonts_dir.name,
            include_base64=include_base64,
            totals=totals,
        )
        families.append(build_family(subdir.name, scan))

    families.sort(key=display_name_key)

    catalog = {
        "metadata": {
            "generated": utc_now_iso(),
            "familyCount": len(families),
            "totalFonts": sum(f["fontCount"] for f in families),
            "totalFileSize": totals.total_file_size,
            "base64Encoded": include_base64,
            "formatSummary": summarize_formats(families),
            "weightSummary": summarize_weights(families),
        },
        "fonts": families,
    }
    return catalog, totals


# ============================================================
# Serialization
# ============================================================


def catalog_json(catalog: dict[str, Any]) -> str:
    """The ``fonts.json`` document."""
    return json.dumps(catalog, indent=2, ensure_ascii=False)


def inline_script(catalog: dict[str, Any], global_name: str = GLOBAL_NAME) -> str:
    """The inlining artifact: a bare assignment of the ``fonts`` array."""
    fonts = json.dumps(catalog["fonts"], indent=2, ensure_ascii=False)
    return f"let {global_name} = {fonts};"


def write_artifacts(catalog: dict[str, Any], output_dir: Path) -> tuple[Path, Path]:
    """Write ``fonts.json`` and ``inline-fonts-data.js`` into ``output_dir``."""
    output_dir = Path(output_dir)
    json_path = output_dir / FONTS_JSON
    inline_path = output_dir / INLINE_JS

    json_path.write_text(catalog_json(catalog), encoding="utf-8")
    inline_path.write_text(inline_script(catalog), encoding="utf-8")
    return json_path, inline_path


def print_summary(catalog: dict[str, Any], totals: ScanTotals) -> None:
    metadata = catalog["metadata"]

    print("\nSummary:")
    print(f"- Generated {FONTS_JSON} with {metadata['familyCount']} font families")
    print(f"- Total font files: {metadata['totalFonts']}")
    print(f"- Total size: {totals.total_file_size / MB:.2f} MB")

    if metadata["base64Encoded"]:
        print(f"- Base64 encoded size: {totals.encoded_size / MB:.2f} MB")
        if totals.total_file_size:
            ratio = totals.encoded_size / totals.total_file_size
            print(f"- Encoding ratio: {ratio:.2f}x")

    print(f"- Detected font formats: {', '.join(sorted(totals.formats))}")


# ============================================================
# CLI
# ============================================================


def run(project_root: Path, *, include_base64: bool = False) -> int:
    """Generate both artifacts under ``project_root``; return an exit code."""
    project_root = Path(project_root)
    try:
        catalog, totals = build_catalog(
            project_root / FONT_DIR_NAME, include_base64=include_base64
        )
    except FontRootError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    write_artifacts(catalog, project_root)
    print_summary(catalog, totals)
    print(f"\nCreated {INLINE_JS} for inlining into index.html")
    print("Done!")
    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Scan ./fonts and write fonts.json plus inline-fonts-data.js.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--base64",
        action="store_true",
        help="Embed font files as Base64 data URIs (portable single-file mode)",
    )
    args, unknown = parser.parse_known_args()

    if unknown:
        print(f"⚠️  Warning: ignoring unrecognized arguments: {' '.join(unknown)}")

    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        print("⚠️  Warning: could not set collation locale; using code point order")

    sys.exit(run(Path.cwd(), include_base64=args.base64))


if __name__ == "__main__":
    main()
