"""Tests for filename inference and filename helpers."""

import pytest

from collector.planning.filenames import (
    build_file_path,
    compose_renamed_filename,
    default_filename,
    format_extension,
    has_image_extension,
    resolve_filename,
    sanitize_directory_path,
    sanitize_filename,
    split_filename,
    split_filename_with_fallback,
)


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://example.com/photos/sunset.JPG", ("sunset", ".jpg")),
        ("https://example.com/gallery/42/image.png", ("gallery", ".png")),
        ("https://example.com/render?format=webp", ("render", ".webp")),
        ("https://example.com/render?f=JPEG", ("render", ".jpg")),
        ("https://example.com/thumb?type=&format=gif", ("thumb", ".gif")),
        ("https://www.pinterest.com/", ("pinterest_image", ".jpg")),
        ("https://example.com/media/images/", ("example_image", ".jpg")),
        ("https://example.com/items/12345", ("12345", ".jpg")),
    ],
)
def test_resolve_filename_from_urls(url: str, expected: tuple[str, str]) -> None:
    assert tuple(resolve_filename(url)) == expected


def test_resolve_filename_keeps_generic_name_without_better_segment() -> None:
    assert resolve_filename("https://example.com/photo.png") == ("photo", ".png")


def test_resolve_filename_for_data_urls() -> None:
    assert resolve_filename("data:image/jpeg;base64,AAAA") == ("image", ".jpg")
    assert resolve_filename("data:image/webp;base64,AAAA") == ("image", ".webp")
    assert resolve_filename("data:image/;base64,AAAA") == ("image", ".png")


def test_resolve_filename_falls_back_for_malformed_urls() -> None:
    assert resolve_filename("uploads/pic.GIF") == ("pic", ".gif")
    assert resolve_filename("") == ("image", ".jpg")


def test_resolve_filename_is_deterministic() -> None:
    url = "https://cdn.example.com/assets/2024/hero"
    assert resolve_filename(url) == resolve_filename(url)
    assert default_filename(url) == "hero.jpg"


def test_split_filename_only_splits_image_extensions() -> None:
    assert split_filename("Screenshot 2.30 PM.png") == ("Screenshot 2.30 PM", ".png")
    assert split_filename("archive.tar") == ("archive.tar", "")
    assert split_filename("photo.JPEG") == ("photo", ".JPEG")
    assert split_filename(None) == ("", "")


def test_split_filename_with_fallback_uses_fallback_extension() -> None:
    assert split_filename_with_fallback("notes.v2", ".png") == ("notes.v2", ".png")
    assert split_filename_with_fallback("a.gif", ".png") == ("a", ".gif")


def test_has_image_extension() -> None:
    assert has_image_extension("a.WebP")
    assert not has_image_extension("a.txt")
    assert not has_image_extension("")


def test_sanitize_filename_replaces_illegal_characters() -> None:
    assert sanitize_filename('a<b>c:d"e/f\\g|h?i*j') == "a_b_c_d_e_f_g_h_i_j"
    assert sanitize_filename(None) == ""


def test_sanitize_directory_path_normalizes_separators() -> None:
    assert sanitize_directory_path("\\Pictures//Trips\\2024/") == "Pictures/Trips/2024"
    assert sanitize_directory_path("What?/Now*") == "What_/Now_"
    assert sanitize_directory_path(None) == ""


def test_build_file_path() -> None:
    assert build_file_path("", "a.jpg") == "a.jpg"
    assert build_file_path("Trip/", "a.jpg") == "Trip/a.jpg"


def test_compose_renamed_filename_keeps_extension() -> None:
    url = "https://example.com/a.webp"
    assert compose_renamed_filename("beach", "a.png", url) == "beach.png"
    assert compose_renamed_filename("beach.gif", "a.png", url) == "beach.gif"
    assert compose_renamed_filename("beach", None, url) == "beach.webp"
    assert compose_renamed_filename("a/b", "a.png", url) == "a_b.png"
    assert compose_renamed_filename("   ", "a.png", url) == ""


def test_resolve_filename_ignores_path_like_format_hints() -> None:
    assert resolve_filename("https://example.com/render?format=..%2F..%2Fevil") == (
        "render",
        ".jpg",
    )
    assert resolve_filename("https://example.com/render?format=png%5Cx") == ("render", ".jpg")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("JPEG", ".jpg"),
        (".png", ".png"),
        (" webp ", ".webp"),
        ("../x", ""),
        ("a/b", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_format_extension(value: str | None, expected: str) -> None:
    assert format_extension(value) == expected
