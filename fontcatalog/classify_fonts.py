"""
fontcatalog – classify_fonts.py
===============================

Filename heuristics used by the catalog generator.

Nothing in this module opens a font file: weight and style are guessed from
the file name alone, and display names are derived from folder names.

Design principles
-----------------
- **Total**: every input string yields a defined value, nothing raises.
- **Deterministic**: the weight table is an ordered list, the first matching
  entry wins.
"""

import re
from collections.abc import Callable

DEFAULT_WEIGHT = 400
MIN_WEIGHT = 100
MAX_WEIGHT = 950

# ============================================================
# Weight table
# ============================================================

#: Named weight tokens, in match order.
#:
#: Order is significant: ``"bold"`` is tried before ``"extrabold"``, so
#: ``"Foo-ExtraBold-Italic"`` resolves to 700 while ``"Foo-ExtraBold"``
#: resolves to 800.
WEIGHT_NAMES: list[tuple[str, int]] = [
    ("thin", 100),
    ("hairline", 100),
    ("extralight", 200),
    ("ultralight", 200),
    ("light", 300),
    ("regular", 400),
    ("normal", 400),
    ("book", 400),
    ("medium", 500),
    ("semibold", 600),
    ("demibold", 600),
    ("bold", 700),
    ("extrabold", 800),
    ("ultrabold", 800),
    ("black", 900),
    ("heavy", 900),
    ("extrablack", 950),
    ("ultrablack", 950),
]

_NUMERIC_WEIGHT_RE = re.compile(r"[-_](\d{3})[-_.]")
_SEPARATOR_RE = re.compile(r"[-_]")


def _token_predicate(token: str) -> Callable[[str], bool]:
    """Return a predicate matching ``token`` next to a separator."""
    needles = (f"-{token}", f"_{token}", f"{token}-", f"{token}_", f" {token} ")

    def matches(lower: str) -> bool:
        return any(needle in lower for needle in needles)

    return matches


WEIGHT_RULES: list[tuple[Callable[[str], bool], int]] = [
    (_token_predicate(token), value) for token, value in WEIGHT_NAMES
]


# ============================================================
# Classifiers
# ============================================================


def infer_weight(filename: str) -> int:
    """
    Guess the CSS font weight of a font file from its name.

    Resolution order:

    1. A three digit number delimited by ``-``/``_`` on the left and
       ``-``/``_``/``.`` on the right (``OpenSans-600.otf``), if it lies in
       ``[100, 950]``.
    2. The first entry of :data:`WEIGHT_RULES` that matches.
    3. :data:`DEFAULT_WEIGHT`.
    """
    lower = filename.lower()

    match = _NUMERIC_WEIGHT_RE.search(lower)
    if match:
        weight = int(match.group(1))
        if MIN_WEIGHT <= weight <= MAX_WEIGHT:
            return weight

    for predicate, value in WEIGHT_RULES:
        if predicate(lower):
            return value

    return DEFAULT_WEIGHT


def infer_style(filename: str) -> str:
    """Return ``"italic"``, ``"oblique"`` or ``"normal"``."""
    lower = filename.lower()
    if "italic" in lower:
        return "italic"
    if "oblique" in lower:
        return "oblique"
    return "normal"


def format_display_name(folder_name: str) -> str:
    """
    Turn a folder name into a display name.

    Dashes and underscores become spaces and the first character of every
    word is uppercased. The rest of each word is left as is, so
    ``"open-sans_extra"`` becomes ``"Open Sans Extra"`` and ``"iA-writer"``
    becomes ``"IA Writer"``.
    """
    spaced = _SEPARATOR_RE.sub(" ", folder_name)
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split(" "))


def family_name_from_folder(folder_name: str) -> str:
    # CSS font-family identifier
    return re.sub(r"\s+", "", folder_name)
