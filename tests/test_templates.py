"""Tests for filename template expansion."""

from datetime import datetime

from collector.planning.templates import FilenameContext, apply_template, is_default_template

# Tuesday, 5 March 2024, 14:07:09
NOW = datetime(2024, 3, 5, 14, 7, 9)
PHOTO = FilenameContext(name="photo", extension=".png", index=3, group="Trip")


def test_default_template_returns_name_and_extension() -> None:
    assert apply_template("{name}", PHOTO, now=NOW) == "photo.png"
    assert is_default_template("{name}")
    assert is_default_template("")
    assert not is_default_template("{group}_{index}")


def test_content_tokens_are_case_insensitive() -> None:
    assert apply_template("{GROUP}_{Index}_{original}", PHOTO, now=NOW) == "Trip_3_photo.png"


def test_calendar_and_clock_tokens_are_case_sensitive() -> None:
    assert apply_template("{YYYY}-{MM}-{DD}", PHOTO, now=NOW) == "2024-03-05.png"
    assert apply_template("{hh}{mm}{ss}", PHOTO, now=NOW) == "140709.png"
    assert apply_template("{YY}.{M}.{D}.{h}.{m}.{s}", PHOTO, now=NOW) == "24.3.5.14.7.9.png"
    assert apply_template("{MMMM} {MMM} {dddd} {ddd}", PHOTO, now=NOW) == (
        "March Mar Tuesday Tue.png"
    )


def test_convenience_tokens() -> None:
    result = apply_template("{date} {time} {ISO}", PHOTO, now=NOW)
    assert result == "2024-03-05 14-07-09 20240305T140709.png"


def test_unknown_tokens_are_kept() -> None:
    assert apply_template("{camera}_{name}", PHOTO, now=NOW) == "{camera}_photo.png"
    assert apply_template("{yyyy}", PHOTO, now=NOW) == "{yyyy}.png"


def test_substituted_values_are_not_expanded_again() -> None:
    context = FilenameContext(name="{index}", extension=".png", index=7)
    assert apply_template("{name}", context, now=NOW) == "{index}.png"


def test_expanded_text_is_sanitized() -> None:
    context = FilenameContext(name="photo", extension=".png", group="Home/Work")
    assert apply_template("{group}:{name}", context, now=NOW) == "Home_Work_photo.png"


def test_missing_context_values_use_defaults() -> None:
    assert apply_template("{name}-{index}-{group}", FilenameContext(), now=NOW) == (
        "image-1-Ungrouped.jpg"
    )
