"""Common enumerations used across section processing."""

from __future__ import annotations

from enum import Enum


class PageNumberFormat(str, Enum):
    """Page number formats understood by ``w:pgNumType/@w:fmt``."""

    DECIMAL = "decimal"
    LOWER_ROMAN = "lowerRoman"
    UPPER_ROMAN = "upperRoman"
    LOWER_LETTER = "lowerLetter"
    UPPER_LETTER = "upperLetter"

    @classmethod
    def is_known(cls, value: str) -> bool:
        return value in {member.value for member in cls}


class SectionBreakType(str, Enum):
    """Section start kind written on interior sections (``w:type/@w:val``)."""

    NEXT_PAGE = "nextPage"


class FooterType(str, Enum):
    """Footer reference kind written on generated sections."""

    DEFAULT = "default"
