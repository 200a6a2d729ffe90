"""
fontcatalog – lookup.py
=======================

Family lookup as done by the browser client.

Families are identified by ``familyName`` (case-insensitive, exact match);
``displayName`` is presentation only and never used for lookup.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from fontcatalog.split_fonts import INDEX_JSON, shard_for_name


def find_family(fonts: list[dict[str, Any]], family_name: str) -> dict[str, Any] | None:
    """Return the family whose ``familyName`` matches, ignoring case."""
    if not family_name:
        return None
    wanted = family_name.lower()
    for family in fonts:
        name = family.get("familyName") if isinstance(family, dict) else None
        if isinstance(name, str) and name.lower() == wanted:
            return family
    return None


def load_family(chunk_dir: Path, family_name: str) -> dict[str, Any] | None:
    """
    Load one family from a chunk directory.

    ``index.json`` is consulted first; only the chunk file selected for the
    indexed ``familyName`` is read.

    Returns:
        The full family record, or ``None`` if the family is not indexed or
        missing from its chunk.
    """
    chunk_dir = Path(chunk_dir)
    index = json.loads((chunk_dir / INDEX_JSON).read_text(encoding="utf-8"))

    entry = find_family(index, family_name)
    if entry is None:
        return None

    chunk_path = chunk_dir / f"{shard_for_name(entry['familyName'])}.json"
    chunk = json.loads(chunk_path.read_text(encoding="utf-8"))
    return find_family(chunk.get("fonts", []), entry["familyName"])
