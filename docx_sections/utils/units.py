"""
Unit conversion for WordprocessingML measurements.

Page geometry in section properties is stored in twentieths of a point (twips).
"""

from typing import Union

TWIPS_PER_INCH = 1440

Number = Union[int, float]


def inches_to_twips(inches: Number) -> int:
    """Convert inches to whole twips."""
    if not isinstance(inches, (int, float)):
        raise ValueError("Inch value must be a number")
    return int(round(inches * TWIPS_PER_INCH))
