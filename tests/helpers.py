import io
from pathlib import Path

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen


def make_ttf_bytes(family: str = "Test Family", style: str = "Regular") -> bytes:
    """Build a tiny but valid TrueType font and return its bytes."""
    pen = TTGlyphPen(None)
    pen.moveTo((100, 0))
    pen.lineTo((100, 700))
    pen.lineTo((500, 700))
    pen.lineTo((500, 0))
    pen.closePath()
    glyph = pen.glyph()

    glyph_order = [".notdef", "space", "A"]
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({32: "space", 65: "A"})
    fb.setupGlyf({name: glyph for name in glyph_order})
    fb.setupHorizontalMetrics(
        {name: (600, fb.font["glyf"][name].xMin) for name in glyph_order}
    )
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": family, "styleName": style})
    fb.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()

    buf = io.BytesIO()
    fb.save(buf)
    return buf.getvalue()


def make_font_tree(root: Path, families: dict[str, dict[str, bytes | str]]) -> Path:
    """
    Create ``root/fonts/<family>/<file>`` entries.

    ``families`` maps folder name → {file name: content}. Bytes are written
    as-is, strings as UTF-8 text.
    """
    fonts_dir = root / "fonts"
    fonts_dir.mkdir(parents=True, exist_ok=True)
    for folder, files in families.items():
        family_dir = fonts_dir / folder
        family_dir.mkdir(exist_ok=True)
        for name, content in files.items():
            path = family_dir / name
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
    return fonts_dir


def make_family(
    family_name: str,
    *,
    variants: list[dict] | None = None,
    display_name: str | None = None,
) -> dict:
    """A catalog family record as written by the generator."""
    if variants is None:
        variants = [
            {
                "name": f"{family_name}-Regular",
                "weight": 400,
                "style": "normal",
                "format": "ttf",
                "fileSize": 10,
                "file": f"fonts/{family_name}/{family_name}-Regular.ttf",
            }
        ]
    return {
        "displayName": display_name or family_name,
        "familyName": family_name,
        "variants": variants,
        "formats": sorted({v.get("format", "ttf") for v in variants}),
        "hasDefaultFont": any(
            v.get("weight") == 400 and v.get("style") == "normal" for v in variants
        ),
        "fontCount": len(variants),
        "totalSize": sum(v.get("fileSize", 0) for v in variants),
    }
