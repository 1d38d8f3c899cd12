"""Stateless line grammars for trajectory logs.

Each classifier takes one raw line and returns the parsed values, or ``None``
when the line does not fit its grammar. Spaces and tabs around tokens are
ignored, and a trailing line terminator is consumed if present.
"""

import re

from ..core.constants import CAMERA_LABEL_MARKER, INTRINSIC_TAG_MARKER

_FLOAT = r"([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"
_WS = r"[ \t]*"
_SEP = r"[ \t]+"
_EOL = r"(?:\r?\n)?"

_FOUR_FLOATS = re.compile(_WS + _SEP.join([_FLOAT] * 4) + _WS + _EOL)
_THREE_FLOATS = re.compile(_WS + _SEP.join([_FLOAT] * 3) + _WS + _EOL)
_TWO_FLOATS = re.compile(
    _WS + r"\[?" + _WS
    + _FLOAT + rf"(?:{_WS},{_WS}|{_SEP})" + _FLOAT
    + _WS + r"\]?" + _WS + _EOL
)
_CAMERA_LABEL = re.compile(r"^.*" + re.escape(CAMERA_LABEL_MARKER) + r"\s(.*)$")


def four_floats(line: str) -> tuple[float, float, float, float] | None:
    """Match a pose row: exactly four floats."""
    m = _FOUR_FLOATS.fullmatch(line)
    if m is None:
        return None
    return tuple(float(v) for v in m.groups())


def three_floats(line: str) -> tuple[float, float, float] | None:
    """Match a point or intrinsic row: exactly three floats."""
    m = _THREE_FLOATS.fullmatch(line)
    if m is None:
        return None
    return tuple(float(v) for v in m.groups())


def two_floats(line: str) -> tuple[float, float] | None:
    """Match a pixel: two floats, optionally written as ``[x, y]``.

    The opening bracket, the comma and the closing bracket are each optional.
    """
    m = _TWO_FLOATS.fullmatch(line)
    if m is None:
        return None
    return tuple(float(v) for v in m.groups())


def camera_label(line: str) -> str | None:
    """Return the text after ``CAMERA_ID`` and one whitespace char, verbatim."""
    m = _CAMERA_LABEL.match(line.rstrip("\r\n"))
    if m is None:
        return None
    return m.group(1)


def intrinsic_tag(line: str) -> bool:
    """True if the line announces an intrinsic matrix block."""
    return INTRINSIC_TAG_MARKER in line
