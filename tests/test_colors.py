import pytest

from cubed.colors import lookup_color


@pytest.mark.parametrize(
    "name, expected",
    [
        ("snow", 0xFFFAFA),
        ("white", 0xFFFFFF),
        ("black", 0x0),
        ("red", 0xFF0000),
        ("gray100", 0xFFFFFF),
    ],
)
def test_known_names(name, expected):
    assert lookup_color(name) == expected


def test_none_is_transparent_marker():
    assert lookup_color("none") == -1


def test_case_insensitive():
    assert lookup_color("SNOW") == lookup_color("snow")
    assert lookup_color("Ghost White") == lookup_color("ghost white")


def test_first_duplicate_wins():
    # "dark slate" occurs several times; the first entry is used.
    assert lookup_color("dark slate") == 0x2F4F4F
    assert lookup_color("light slate") == lookup_color("lightslategray")


def test_spaced_and_joined_names_agree():
    assert lookup_color("navajo white") == lookup_color("navajowhite")
    assert lookup_color("light gray") == lookup_color("lightgrey")


@pytest.mark.parametrize("level", [0, 13, 50, 99, 100])
def test_gray_and_grey_spellings_match(level):
    assert lookup_color(f"gray{level}") == lookup_color(f"grey{level}")


def test_gray_levels_are_neutral_and_increasing():
    values = [lookup_color(f"gray{level}") for level in range(101)]
    assert values == sorted(values)
    for value in values:
        r, g, b = (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF
        assert r == g == b


def test_unknown_name():
    assert lookup_color("not a colour") is None
    assert lookup_color("") is None