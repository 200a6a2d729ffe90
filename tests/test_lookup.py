from helpers import make_family

from fontcatalog.lookup import find_family, load_family
from fontcatalog.split_fonts import partition, write_chunks


def test_find_family_case_insensitive():
    fonts = [make_family("OpenSans", display_name="Open Sans"), make_family("Roboto")]

    assert find_family(fonts, "opensans")["familyName"] == "OpenSans"
    assert find_family(fonts, "ROBOTO")["familyName"] == "Roboto"


def test_find_family_ignores_display_name():
    fonts = [make_family("OpenSans", display_name="Open Sans")]

    assert find_family(fonts, "Open Sans") is None
    assert find_family(fonts, "") is None


def test_load_family_from_chunks(tmp_path):
    open_sans = make_family("OpenSans", display_name="Open Sans")
    open_sans["licenseFile"] = "fonts/Open Sans/LICENSE.txt"
    chunks, index, _ = partition([open_sans, make_family("Arial")])
    write_chunks(chunks, index, tmp_path / "chunks")

    family = load_family(tmp_path / "chunks", "opensans")

    assert family == open_sans


def test_load_family_not_indexed(tmp_path):
    chunks, index, _ = partition([make_family("Arial")])
    write_chunks(chunks, index, tmp_path / "chunks")

    assert load_family(tmp_path / "chunks", "Helvetica") is None
