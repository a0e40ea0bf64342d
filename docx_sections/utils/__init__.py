"""Utility helpers for DOCX section processing."""

from .enums import FooterType, PageNumberFormat, SectionBreakType
from .units import inches_to_twips

__all__ = [
    "FooterType",
    "PageNumberFormat",
    "SectionBreakType",
    "inches_to_twips",
]
