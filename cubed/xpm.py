"""Reader for XPM images, producing 0xRRGGBB pixel grids."""

from __future__ import annotations

import re
from dataclasses import dataclass
from os import PathLike
from typing import Iterable, Iterator, Optional, Union

from cubed.colors import lookup_color

__all__ = [
    "XpmError",
    "Image",
    "strip_comments",
    "color_from_spec",
    "parse_xpm",
    "load_xpm",
]

TRANSPARENT = 0xFF000000

_QUOTED = re.compile(r'"([^"]*)"')
_ATOI = re.compile(r"\s*([+-]?\d+)")
_HEX = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")


class XpmError(ValueError):
    """Raised when XPM data cannot be read or parsed."""


@dataclass(frozen=True)
class Image:
    """A decoded image: row-major pixels, each a 32-bit colour value."""

    width: int
    height: int
    pixels: tuple[int, ...]

    def pixel(self, x: int, y: int) -> int:
        """Return the colour at column ``x`` and row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self.pixels[y * self.width + x]


def _words(text: str) -> list[str]:
    return [word for word in re.split(r"[ \t]+", text) if word]


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def _blank(chars: list[str], start: int, end: int) -> None:
    chars[start:end] = [" "] * (end - start)


def _strip_pass(text: str, opener: str, closer: str) -> str:
    chars = list(text)
    in_quote = False
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char == '"':
            in_quote = not in_quote
        elif not in_quote and text.startswith(opener, pos):
            close = text.find(closer, pos + len(opener))
            end = len(text) if close == -1 else close + len(closer)
            _blank(chars, pos, end)
            pos = end
            continue
        pos += 1
    return "".join(chars)


def strip_comments(text: str) -> str:
    """Blank out ``/* */`` and ``//`` comments lying outside quoted strings.

    Comment characters are replaced by spaces, so the length is kept.
    """
    return _strip_pass(_strip_pass(text, "/*", "*/"), "//", "\n")


def color_from_spec(name: str, end: Optional[str]) -> int:
    """Turn an XPM colour word (and the word after it) into a colour value.

    ``#RRGGBB`` is read as hexadecimal; otherwise the name, joined with
    ``end`` when given, is looked up in the named colour table. Unknown
    names give 0; ``none`` gives -1.
    """
    if name.startswith("#"):
        match = _HEX.match(name[1:])
        digits = match.group(2) if match else ""
        if not digits:
            return 0
        value = int(digits, 16)
        return -value if match.group(1) == "-" else value
    if end:
        name = f"{name} {end}"
    value = lookup_color(name)
    return 0 if value is None else value


def parse_xpm(lines: Iterable[str]) -> Image:
    """Decode XPM data given as its quoted strings, header first."""
    source: Iterator[str] = iter(lines)

    def next_line(what: str) -> str:
        try:
            return next(source)
        except StopIteration:
            raise XpmError(f"missing {what}") from None

    header = _words(next_line("header"))
    if len(header) < 4:
        raise XpmError("header needs width, height, colour count and chars per pixel")
    width, height, ncolors, cpp = (_atoi(word) for word in header[:4])
    if width <= 0 or height <= 0 or ncolors <= 0 or cpp <= 0:
        raise XpmError("header values must be positive numbers")

    # Small keys overwrite earlier definitions; longer keys keep the first one.
    overwrite = cpp <= 2
    palette: dict[str, int] = {}
    for _ in range(ncolors):
        line = next_line("colour definition")
        if len(line) < cpp:
            raise XpmError(f"colour line shorter than {cpp} characters")
        words = _words(line[cpp:])
        try:
            index = words.index("c") + 1
        except ValueError:
            raise XpmError("colour line has no 'c' entry") from None
        if index >= len(words):
            raise XpmError("colour line has no value after 'c'")
        following = words[index + 1] if index + 1 < len(words) else None
        color = color_from_spec(words[index], following)
        key = line[:cpp]
        if overwrite:
            palette[key] = color
        else:
            palette.setdefault(key, color)

    pixels: list[int] = []
    for _ in range(height):
        row = next_line("pixel row")
        if len(row) < width * cpp:
            raise XpmError(f"pixel row shorter than {width * cpp} characters")
        for x in range(width):
            color = palette.get(row[x * cpp:(x + 1) * cpp], 0)
            pixels.append(TRANSPARENT if color == -1 else color)
    return Image(width, height, tuple(pixels))


def load_xpm(path: Union[str, PathLike]) -> Image:
    """Read and decode an XPM file."""
    try:
        with open(path, "rb") as handle:
            raw = handle.read()
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc}") from exc
    text = strip_comments(raw.decode("latin-1"))
    return parse_xpm(match.group(1) for match in _QUOTED.finditer(text))