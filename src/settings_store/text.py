"""Text helpers — trimming, line splitting, and permissive number parsing.

Every record in a settings file is a single line of the form::

    key name = some value

Parsing such a line takes two small steps:

1. **Split** at the *first* ``=``.  Anything after it (including further
   ``=`` characters) belongs to the value.
2. **Trim** both halves of ASCII whitespace.

Lines with no ``=`` at all are not records; the splitter reports them
as ``None`` and the caller decides what to do (the loader skips them).

Numbers are stored as text.  Reading them back is deliberately
*forgiving*, in the style of C's ``atoi`` and ``atof``: take the longest
numeric prefix and ignore the rest; if there is no numeric prefix the
result is zero.  Nothing here ever raises on malformed numeric text.
"""

import re
import sys

# The six characters C's isspace() accepts in the "C" locale.
ASCII_WHITESPACE = " \t\n\v\f\r"

# strtol saturates here when a digit run is too long to convert.
LONG_MAX = 2**63 - 1
LONG_MIN = -(2**63)

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_FLOAT_PREFIX = re.compile(
    r"[ \t\n\v\f\r]*([+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


def trim(text: str | None) -> str | None:
    """Strip leading and trailing ASCII whitespace.

    Only the six ASCII whitespace characters are removed; other Unicode
    spaces are left alone.  ``None`` passes through unchanged.

    Args:
        text: The string to trim.

    Returns:
        The trimmed string (empty if *text* was all whitespace).

    """
    if text is None:
        return None
    return text.strip(ASCII_WHITESPACE)


def split_on_first_equals(line: str) -> tuple[str, str] | None:
    """Split a ``key = value`` line at its first ``=``.

    Both halves are trimmed independently; further ``=`` characters stay
    in the value verbatim::

        >>> split_on_first_equals("foo  bar  = abc def =   ghi   ")
        ('foo  bar', 'abc def =   ghi')

    Args:
        line: One line of text (a trailing newline is fine).

    Returns:
        A ``(key, value)`` tuple, or ``None`` if the line has no ``=``.

    """
    key, sep, value = line.partition("=")
    if not sep:
        return None
    return key.strip(ASCII_WHITESPACE), value.strip(ASCII_WHITESPACE)


def parse_int(text: str) -> int:
    """Parse the leading decimal integer of *text*, like ``atoi``.

    Leading ASCII whitespace and one optional sign are accepted; parsing
    stops at the first non-digit.  Text with no leading digits gives 0.
    A digit run longer than the interpreter will convert saturates at
    ``LONG_MAX`` or ``LONG_MIN``.
    """
    match = _INT_PREFIX.match(text)
    if match is None:
        return 0
    number = match.group(1)
    negative = number.startswith("-")
    digits = number.lstrip("+-").lstrip("0") or "0"
    limit = sys.get_int_max_str_digits()
    if limit and len(digits) > limit:
        return LONG_MIN if negative else LONG_MAX
    value = int(digits)
    return -value if negative else value


def parse_float(text: str) -> float:
    """Parse the leading floating-point number of *text*, like ``atof``.

    Accepts decimal notation with an optional exponent, and the words
    ``inf``, ``infinity`` and ``nan`` in any case.  Text with no numeric
    prefix gives 0.0.
    """
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return 0.0
    return float(match.group(1))


def format_int(value: int) -> str:
    """Render an integer the way ``printf("%d")`` does."""
    return f"{value:d}"


def format_float(value: float) -> str:
    """Render a float as six-decimal fixed point (``printf("%f")``).

    ``123.1`` becomes ``"123.100000"``; infinities and NaN become
    ``"inf"``, ``"-inf"`` and ``"nan"``.
    """
    return f"{value:f}"
