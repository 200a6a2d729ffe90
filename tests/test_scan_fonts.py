import pytest
from fontTools.ttLib import TTFont
from helpers import make_font_tree, make_ttf_bytes

from fontcatalog.scan_fonts import (
    ScanTotals,
    decode_data_uri,
    encode_data_uri,
    is_license_file,
    mime_type,
    read_license_text,
    scan_family_dir,
)


def test_encode_decode_data_uri_roundtrip(tmp_path):
    data = make_ttf_bytes()
    path = tmp_path / "Test-Regular.ttf"
    path.write_bytes(data)

    uri = encode_data_uri(path, "ttf")

    assert uri.startswith("data:font/ttf;base64,")
    assert decode_data_uri(uri) == data


def test_decoded_font_still_loads(tmp_path):
    path = tmp_path / "Test-Regular.ttf"
    path.write_bytes(make_ttf_bytes(family="Roundtrip"))

    decoded = tmp_path / "decoded.ttf"
    decoded.write_bytes(decode_data_uri(encode_data_uri(path, "ttf")))

    font = TTFont(decoded)
    assert font["name"].getDebugName(1) == "Roundtrip"


def test_decode_data_uri_rejects_plain_paths():
    with pytest.raises(ValueError):
        decode_data_uri("fonts/Foo/Foo-Regular.ttf")
    with pytest.raises(ValueError):
        decode_data_uri("data:font/ttf;base64,@@@")


def test_mime_type():
    assert mime_type("woff2") == "font/woff2"
    assert mime_type("eot") == "application/vnd.ms-fontobject"
    assert mime_type("pfb") == "application/octet-stream"


def test_is_license_file():
    assert is_license_file("LICENSE.txt")
    assert is_license_file("OFL-License.md")
    assert is_license_file("README.md")
    assert not is_license_file("README.txt")
    assert not is_license_file("FONTLOG.txt")


def test_scan_family_dir_url_mode(tmp_path):
    fonts_dir = make_font_tree(
        tmp_path,
        {
            "Open Sans": {
                "OpenSans-Bold.otf": b"bold-bytes",
                "OpenSans-Italic.woff2": b"italic",
                "LICENSE.txt": "OFL",
                "notes.txt": "ignored",
            }
        },
    )

    scan, totals = scan_family_dir(fonts_dir / "Open Sans")

    assert [v["name"] for v in scan["variants"]] == [
        "OpenSans-Bold",
        "OpenSans-Italic",
    ]
    bold = scan["variants"][0]
    assert bold == {
        "name": "OpenSans-Bold",
        "weight": 700,
        "style": "normal",
        "format": "otf",
        "fileSize": len(b"bold-bytes"),
        "file": "fonts/Open Sans/OpenSans-Bold.otf",
    }
    assert scan["formats"] == {"otf", "woff2"}
    assert scan["licenseFile"] == "fonts/Open Sans/LICENSE.txt"
    assert scan["licenseText"] is None

    assert totals.total_file_size == len(b"bold-bytes") + len(b"italic")
    assert totals.encoded_size == 0
    assert totals.formats == {"otf", "woff2"}


def test_scan_family_dir_inline_mode(tmp_path):
    data = make_ttf_bytes()
    fonts_dir = make_font_tree(
        tmp_path,
        {"Test": {"Test-Regular.TTF": data, "LICENSE.txt": "Some license"}},
    )

    scan, totals = scan_family_dir(fonts_dir / "Test", include_base64=True)

    variant = scan["variants"][0]
    assert variant["format"] == "ttf"
    assert variant["name"] == "Test-Regular"
    assert variant["file"].startswith("data:font/ttf;base64,")
    assert decode_data_uri(variant["file"]) == data
    assert scan["licenseFile"] == "fonts/Test/LICENSE.txt"
    assert scan["licenseText"] == "Some license"
    assert totals.encoded_size == len(variant["file"])


def test_scan_family_dir_first_license_wins(tmp_path):
    fonts_dir = make_font_tree(
        tmp_path,
        {
            "Dual": {
                "Dual-Regular.ttf": b"x",
                "LICENSE-apache.txt": "Apache",
                "LICENSE-ofl.txt": "OFL",
            }
        },
    )

    scan, _ = scan_family_dir(fonts_dir / "Dual", include_base64=True)

    assert scan["licenseFile"] == "fonts/Dual/LICENSE-apache.txt"
    assert scan["licenseText"] == "Apache"


def test_read_license_text_degrades_on_bad_utf8(tmp_path):
    path = tmp_path / "LICENSE"
    path.write_bytes(b"\xff\xfe\xfa broken")

    text = read_license_text(path)

    assert text.startswith("Unable to read license file:")


def test_scan_family_dir_accumulates_totals(tmp_path):
    fonts_dir = make_font_tree(
        tmp_path,
        {
            "A": {"A-Regular.ttf": b"1234"},
            "B": {"B-Regular.woff": b"12"},
        },
    )

    _, totals = scan_family_dir(fonts_dir / "A")
    _, totals = scan_family_dir(fonts_dir / "B", totals=totals)

    assert totals == ScanTotals(
        total_file_size=6, encoded_size=0, formats=frozenset({"ttf", "woff"})
    )


def test_scan_family_dir_ignores_subdirectories(tmp_path):
    fonts_dir = make_font_tree(tmp_path, {"Nested": {"Nested-Regular.ttf": b"x"}})
    (fonts_dir / "Nested" / "static").mkdir()
    (fonts_dir / "Nested" / "static" / "Nested-Bold.ttf").write_bytes(b"y")

    scan, _ = scan_family_dir(fonts_dir / "Nested")

    assert [v["name"] for v in scan["variants"]] == ["Nested-Regular"]
