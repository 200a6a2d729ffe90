#!/usr/bin/env python3
"""
fontcatalog – split_fonts.py
============================

Split ``inline-fonts-data.js`` into alphabetic chunks for incremental loading.

Output (in ``font-chunks/``)::

    index.json       [{familyName, displayName, formats, hasDefaultFont, fontCount}, ...]
    a-f.json         {"fonts": [...]}
    g-m.json
    n-z.json
    0-9.json
    symbols.json

All five chunk files are always written, even when empty. The splitter only
accepts URL-mode input: an artifact whose metadata says it carries Base64
data is rejected before any work is done.

After writing, every chunk file is read back from disk and each family routed
to it must be found there by exact ``familyName``. A single miss fails the
whole run.

Usage::

    python -m fontcatalog.split_fonts
"""

from __future__ import annotations

import json
import re
import shutil
import sys
from pathlib import Path
from typing import Any

# --- Configuration ---
CHUNK_DIR = "font-chunks"
SOURCE_JS = "inline-fonts-data.js"
INDEX_JSON = "index.json"
CHUNKS: tuple[str, ...] = ("a-f", "g-m", "n-z", "0-9", "symbols")
FALLBACK_CHUNK = "symbols"

MB = 1024 * 1024

_ASSIGNMENT_RE = re.compile(
    r"^\s*(?:(?:let|const|var)\s+[A-Za-z_$][\w$]*|window\.[A-Za-z_$][\w$]*)\s*=\s*"
    r"(?:window\.[A-Za-z_$][\w$]*\s*\|\|\s*)?"
)


class SplitError(RuntimeError):
    """Base class for fatal splitter errors."""


class InlineDataError(SplitError):
    """The inline data file could not be parsed."""


class ModeMismatchError(SplitError):
    """The inline data file carries embedded Base64 font data."""


class VerificationError(SplitError):
    """Some families were not found in the chunk file they were routed to."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            f"Verification failed: {len(missing)} font(s) missing from their "
            f"chunk files: {', '.join(missing)}"
        )


# ============================================================
# Input parsing
# ============================================================


def _find_fonts(data: Any) -> tuple[list[Any], dict[str, Any] | None] | None:
    """
    Return ``(fonts, owner)`` for the first ``fonts`` list found in ``data``
    (depth first). ``owner`` is the dict holding the list, ``None`` for a
    bare array.
    """
    if isinstance(data, list):
        return data, None
    if not isinstance(data, dict):
        return None

    fonts = data.get("fonts")
    if isinstance(fonts, list):
        return fonts, data

    for value in data.values():
        if isinstance(value, dict):
            found = _find_fonts(value)
            if found is not None:
                return found
    return None


def parse_inline_data(text: str) -> tuple[list[Any], dict[str, Any] | None]:
    """
    Extract the font list from the source of ``inline-fonts-data.js``.

    Accepted forms::

        let INLINE_FONTS_DATA = [...];
        window._INLINE_FONTS_DATA = window._INLINE_FONTS_DATA || {...};

    The assigned value must be JSON: either a bare array of families or an
    object holding a ``fonts`` array (and optionally ``metadata`` next to
    it), possibly nested inside wrapper objects.

    Returns:
        ``(fonts, metadata)``; ``metadata`` is ``None`` for a bare array.

    Raises:
        InlineDataError: if no assignment is found, the value is not JSON, or
            no ``fonts`` array exists.
    """
    match = _ASSIGNMENT_RE.match(text)
    if not match:
        raise InlineDataError("Could not find font data assignment in the source file")

    payload = text[match.end() :].strip()
    if payload.endswith(";"):
        payload = payload[:-1].rstrip()

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise InlineDataError(f"Failed to parse font data: {e}") from e

    found = _find_fonts(data)
    if found is None:
        raise InlineDataError("No 'fonts' array found in the font data")

    # metadata describes the object that holds the fonts, at any depth
    fonts, owner = found
    metadata = owner.get("metadata") if owner is not None else None
    if not isinstance(metadata, dict):
        metadata = None
    return fonts, metadata


def check_mode(metadata: dict[str, Any] | None) -> None:
    """Reject input generated in Base64 (portable) mode."""
    if not metadata:
        return
    if metadata.get("base64Encoded") is True or metadata.get("base64Included") is True:
        raise ModeMismatchError(
            "Input is marked as Base64-encoded; chunking requires URL-mode "
            "data (run the generator without --base64)"
        )


# ============================================================
# Routing
# ============================================================


def shard_for_name(family_name: str) -> str:
    """Return the chunk id for a ``familyName`` (first character decides)."""
    if not family_name:
        return FALLBACK_CHUNK

    first = family_name[0].lower()
    if "a" <= first <= "f":
        return "a-f"
    if "g" <= first <= "m":
        return "g-m"
    if "n" <= first <= "z":
        return "n-z"
    if "0" <= first <= "9":
        return "0-9"
    return FALLBACK_CHUNK


def shard_of(family: dict[str, Any] | None) -> str:
    """Return the chunk id for a family record."""
    name = family.get("familyName") if isinstance(family, dict) else None
    if not isinstance(name, str) or not name:
        print(f"⚠️  Warning: font without familyName routed to '{FALLBACK_CHUNK}'")
        return FALLBACK_CHUNK
    return shard_for_name(name)


def has_location(variant: Any) -> bool:
    """True if the variant can be fetched by URL/path."""
    if not isinstance(variant, dict):
        return False
    url = variant.get("url")
    if isinstance(url, str) and url:
        return True
    file = variant.get("file")
    return isinstance(file, str) and bool(file) and not file.startswith("data:")


def is_valid_family(family: Any) -> bool:
    if not isinstance(family, dict):
        return False
    variants = family.get("variants")
    if not isinstance(variants, list) or not variants:
        return False
    return any(has_location(v) for v in variants)


def index_entry(family: dict[str, Any]) -> dict[str, Any]:
    return {
        "familyName": family.get("familyName"),
        "displayName": family.get("displayName") or family.get("familyName"),
        "formats": family.get("formats", []),
        "hasDefaultFont": family.get("hasDefaultFont", False),
        "fontCount": family.get("fontCount", 0),
    }


def partition(
    fonts: list[Any],
) -> tuple[dict[str, list[dict[str, Any]]], list[dict[str, Any]], int]:
    """
    Route families to chunks.

    Families without a usable variant are skipped: they appear neither in a
    chunk nor in the index.

    Returns:
        ``(chunks, index, skipped)``. ``chunks`` always has all of
        :data:`CHUNKS` as keys; ``index`` follows input order.
    """
    chunks: dict[str, list[dict[str, Any]]] = {name: [] for name in CHUNKS}
    index: list[dict[str, Any]] = []
    skipped = 0

    for family in fonts:
        if not is_valid_family(family):
            skipped += 1
            name = family.get("familyName") if isinstance(family, dict) else None
            print(f"⚠️  Warning: skipping font without usable variants: {name or '<unnamed>'}")
            continue

        chunks[shard_of(family)].append(family)
        index.append(index_entry(family))

    return chunks, index, skipped


# ============================================================
# Output
# ============================================================


def write_chunks(
    chunks: dict[str, list[dict[str, Any]]],
    index: list[dict[str, Any]],
    chunk_dir: Path,
) -> None:
    """Recreate ``chunk_dir`` and write the index and every chunk file."""
    chunk_dir = Path(chunk_dir)
    if chunk_dir.exists():
        shutil.rmtree(chunk_dir)
    chunk_dir.mkdir(parents=True)

    (chunk_dir / INDEX_JSON).write_text(
        json.dumps(index, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    print(f"Created {INDEX_JSON} with metadata for {len(index)} fonts")

    for name in CHUNKS:
        fonts = chunks.get(name, [])
        path = chunk_dir / f"{name}.json"
        path.write_text(
            json.dumps({"fonts": fonts}, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        size = path.stat().st_size / MB
        print(f"Created {name}.json with {len(fonts)} fonts, size: {size:.2f} MB")


def _read_chunk_names(path: Path) -> set[str]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"❌ Could not read back {path}: {e}", file=sys.stderr)
        return set()

    fonts = data.get("fonts") if isinstance(data, dict) else None
    if not isinstance(fonts, list):
        print(f"❌ {path} has no 'fonts' list", file=sys.stderr)
        return set()
    return {f.get("familyName") for f in fonts if isinstance(f, dict)}


def verify_chunks(
    chunks: dict[str, list[dict[str, Any]]],
    chunk_dir: Path,
) -> list[str]:
    """
    Check the written chunk files against the routing decisions.

    Each chunk file is read from disk at most once.

    Returns:
        Names of families not found in their chunk file (empty on success).
    """
    chunk_dir = Path(chunk_dir)
    loaded: dict[str, set[str]] = {}
    missing: list[str] = []

    for name, fonts in chunks.items():
        for family in fonts:
            if name not in loaded:
                loaded[name] = _read_chunk_names(chunk_dir / f"{name}.json")
            family_name = family.get("familyName")
            if family_name not in loaded[name]:
                missing.append(str(family_name))

    return missing


# ============================================================
# CLI
# ============================================================


def run(source: Path | None = None, chunk_dir: Path | None = None) -> int:
    """Split ``source`` into ``chunk_dir``; return an exit code."""
    source = Path(source or SOURCE_JS)
    chunk_dir = Path(chunk_dir or CHUNK_DIR)

    print("Font Chunking Utility")
    print("=====================")

    try:
        if not source.is_file():
            raise SplitError(f"Source file not found: {source}")

        fonts, metadata = parse_inline_data(source.read_text(encoding="utf-8"))
        check_mode(metadata)
        print(f"Successfully extracted {len(fonts)} fonts from {source}")

        chunks, index, skipped = partition(fonts)
        if skipped:
            print(f"⚠️  Warning: skipped {skipped} font(s) without usable variants")

        write_chunks(chunks, index, chunk_dir)

        print("Verifying chunk files...")
        missing = verify_chunks(chunks, chunk_dir)
        if missing:
            raise VerificationError(missing)
    except SplitError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    print(f"✓ Verified {len(index)} fonts across {len(CHUNKS)} chunks")
    print("Font chunking complete! Font chunks are ready for optimized loading.")
    return 0


def main() -> None:
    """CLI entry point (no options; fixed file names relative to the cwd)."""
    sys.exit(run())


if __name__ == "__main__":
    main()
