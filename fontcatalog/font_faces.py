"""
fontcatalog – font_faces.py
===========================

Render ``@font-face`` rules for a font catalog.

The deploy build writes the result as ``css/generated-font-classes.css`` so
the page can use every catalog family by its ``familyName``.
"""

from __future__ import annotations

import re
from typing import Any

#: Catalog format → CSS ``format()`` hint.
CSS_FORMATS: dict[str, str] = {
    "otf": "opentype",
    "ttf": "truetype",
    "woff": "woff",
    "woff2": "woff2",
    "eot": "embedded-opentype",
}

_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*:")

FONT_FACE_TEMPLATE = """@font-face {{
    font-family: "{family}";
    src: url("{src}") format("{fmt}");
    font-weight: {weight};
    font-style: {style};
    font-display: swap;
}}
"""


def variant_source(variant: dict[str, Any], base: str = "") -> str | None:
    """
    Return the variant's URL or file path, or ``None`` without one.

    Relative paths are prefixed with ``base`` so they resolve from the
    stylesheet's directory. Sources with a scheme (``data:``, ``https:``)
    and absolute paths are returned unchanged.
    """
    src = variant.get("url") or variant.get("file")
    if not src:
        return None
    if not base or src.startswith("/") or _SCHEME_RE.match(src):
        return src
    return base + src


def font_face_rule(
    family_name: str, variant: dict[str, Any], base: str = ""
) -> str | None:
    """Return the ``@font-face`` rule for one variant, or ``None`` without a source."""
    src = variant_source(variant, base)
    if not src:
        return None

    fmt = variant.get("format", "")
    return FONT_FACE_TEMPLATE.format(
        family=family_name,
        src=src,
        fmt=CSS_FORMATS.get(fmt, fmt),
        weight=variant.get("weight", 400),
        style=variant.get("style", "normal"),
    )


def font_face_css(fonts: list[dict[str, Any]], base: str = "") -> str:
    """
    Render a stylesheet for all families.

    Only the first variant of each ``(familyName, weight, style)`` is
    emitted; variants come sorted from the generator, so other formats of the
    same face are dropped. ``base`` is prepended to relative sources, e.g.
    ``"../"`` for a stylesheet one directory below the site root.
    """
    seen: set[tuple[str, int, str]] = set()
    rules: list[str] = []

    for family in fonts:
        family_name = family.get("familyName")
        if not family_name:
            continue
        for variant in family.get("variants", []):
            key = (
                family_name,
                variant.get("weight", 400),
                variant.get("style", "normal"),
            )
            if key in seen:
                continue
            rule = font_face_rule(family_name, variant, base)
            if rule is None:
                continue
            seen.add(key)
            rules.append(rule)

    return "\n".join(rules)
