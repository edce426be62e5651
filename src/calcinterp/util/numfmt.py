from __future__ import annotations

import math

# Integral floats below this magnitude print without a fractional part.
_INT_DISPLAY_LIMIT = 1e16


def format_number(value: float) -> str:
    """Display form used in trees and traces: ``14`` rather than ``14.0``."""
    if math.isfinite(value) and value.is_integer() and abs(value) < _INT_DISPLAY_LIMIT:
        text = str(int(value))
        if value == 0 and math.copysign(1.0, value) < 0:
            return "-0"
        return text
    return repr(value)
