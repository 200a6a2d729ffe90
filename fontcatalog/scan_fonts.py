"""
fontcatalog – scan_fonts.py
===========================

Per-family directory scanner.

A family directory holds font files and, optionally, a license or readme
file. :func:`scan_family_dir` turns one such directory into variant records
and returns them together with an updated :class:`ScanTotals` accumulator.

Two output modes are supported:

- **URL mode** (default): ``variant["file"]`` is a POSIX path relative to the
  project root, e.g. ``fonts/Open Sans/OpenSans-Regular.ttf``.
- **Inline mode** (``include_base64=True``): ``variant["file"]`` is a
  ``data:<mime>;base64,<payload>`` URI and the license text is embedded.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

from fontcatalog.classify_fonts import infer_style, infer_weight

FONT_EXTENSIONS: tuple[str, ...] = (".otf", ".ttf", ".woff", ".woff2", ".eot")

#: Font format → MIME type used in data URIs.
MIME_TYPES: dict[str, str] = {
    "otf": "font/otf",
    "ttf": "font/ttf",
    "woff": "font/woff",
    "woff2": "font/woff2",
    "eot": "application/vnd.ms-fontobject",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


# ============================================================
# Running totals
# ============================================================


@dataclass(frozen=True)
class ScanTotals:
    """Running totals across a catalog scan.

    Attributes:
        total_file_size: Sum of font file sizes in bytes, before encoding.
        encoded_size: Sum of data URI lengths (inline mode only).
        formats: Every font format seen so far.
    """

    total_file_size: int = 0
    encoded_size: int = 0
    formats: frozenset[str] = field(default_factory=frozenset)

    def plus(
        self, file_size: int, encoded_size: int, formats: set[str]
    ) -> ScanTotals:
        return ScanTotals(
            total_file_size=self.total_file_size + file_size,
            encoded_size=self.encoded_size + encoded_size,
            formats=self.formats | frozenset(formats),
        )


# ============================================================
# Data URIs
# ============================================================


def mime_type(fmt: str) -> str:
    return MIME_TYPES.get(fmt, DEFAULT_MIME_TYPE)


def encode_data_uri(path: Path, fmt: str) -> str:
    """Read ``path`` and return it as a Base64 data URI."""
    payload = base64.b64encode(Path(path).read_bytes()).decode("ascii")
    return f"data:{mime_type(fmt)};base64,{payload}"


def decode_data_uri(uri: str) -> bytes:
    """
    Return the bytes carried by a Base64 data URI.

    Raises:
        ValueError: if ``uri`` is not a ``data:...;base64,...`` URI or the
            payload is not valid Base64.
    """
    header, sep, payload = uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError(f"Not a Base64 data URI: {uri[:40]!r}")
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid Base64 payload: {e}") from e


# ============================================================
# Directory scanning
# ============================================================


def is_font_file(name: str) -> bool:
    return Path(name).suffix.lower() in FONT_EXTENSIONS


def is_license_file(name: str) -> bool:
    lower = name.lower()
    return "license" in lower or lower == "readme.md"


def read_license_text(path: Path) -> str:
    """Read a license file as UTF-8, never raising."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return f"Unable to read license file: {e}"


def build_variant(
    path: Path,
    *,
    fonts_root_name: str,
    include_base64: bool,
) -> dict[str, Any]:
    """Build the variant record for one font file."""
    ext = path.suffix.lower()
    fmt = ext[1:]

    variant: dict[str, Any] = {
        "name": path.name[: -len(ext)],
        "weight": infer_weight(path.name),
        "style": infer_style(path.name),
        "format": fmt,
        "fileSize": path.stat().st_size,
    }

    if include_base64:
        variant["file"] = encode_data_uri(path, fmt)
    else:
        variant["file"] = str(
            PurePosixPath(fonts_root_name, path.parent.name, path.name)
        )
    return variant


def scan_family_dir(
    folder: Path,
    *,
    fonts_root_name: str = "fonts",
    include_base64: bool = False,
    totals: ScanTotals | None = None,
) -> tuple[dict[str, Any], ScanTotals]:
    """
    Scan a single family directory (non-recursive).

    Entries are visited in name order. Font files become variants; the first
    entry that looks like a license or readme becomes ``licenseFile`` and any
    later ones are ignored.

    Args:
        folder: The family directory.
        fonts_root_name: Name of the font root, used as the first component
            of relative paths.
        include_base64: Embed font bytes as data URIs and license text.
        totals: Accumulator to extend; a fresh one is used when omitted.

    Returns:
        A ``(scan, totals)`` tuple. ``scan`` has the keys ``variants`` (in
        visit order, unsorted), ``formats`` (set), ``licenseFile`` and
        ``licenseText`` (``None`` when absent).
    """
    totals = totals or ScanTotals()

    variants: list[dict[str, Any]] = []
    formats: set[str] = set()
    license_file: str | None = None
    license_text: str | None = None
    file_size = 0
    encoded_size = 0

    for entry in sorted(folder.iterdir(), key=lambda p: p.name):
        if not entry.is_file():
            continue

        if is_font_file(entry.name):
            variant = build_variant(
                entry,
                fonts_root_name=fonts_root_name,
                include_base64=include_base64,
            )
            formats.add(variant["format"])
            file_size += variant["fileSize"]
            if include_base64:
                encoded_size += len(variant["file"])
            variants.append(variant)

        elif license_file is None and is_license_file(entry.name):
            license_file = str(PurePosixPath(fonts_root_name, folder.name, entry.name))
            if include_base64:
                license_text = read_license_text(entry)

    scan = {
        "variants": variants,
        "formats": formats,
        "licenseFile": license_file,
        "licenseText": license_text,
    }
    return scan, totals.plus(file_size, encoded_size, formats)
