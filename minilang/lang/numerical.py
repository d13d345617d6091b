"""Numbers in minilang. There is a single value type, a Python float, used for numbers, comparison results (0/1) and
truthiness. This module converts literals to values and values to display strings; it never alters stored values.
"""

import math

from minilang.lang.error import ParseError


EPSILON = 1e-9  # values this close to an integer are displayed as that integer


def number(text, source=None, start=0):
    """Returns float value of numeric literal text. Raises ParseError if text is not a base-10 number (ex: '.')."""
    try:
        return float(text)
    except ValueError:
        raise ParseError("invalid number literal '{}'", text, source=source, start=start, end=start + len(text))


def is_integral(value):
    """Whether or not value is mathematically an integer."""
    return float(value).is_integer()


def display(value):
    """Returns str of value for output: integers without fractional part, everything else with full precision."""
    if not math.isfinite(value):
        return str(value)

    nearest = round(value)
    if abs(value - nearest) < EPSILON:
        return str(int(nearest))
    return repr(float(value))
