"""Locates the paragraph carrying a section sentinel marker."""

from __future__ import annotations

import logging
from typing import Optional

from lxml import etree

from ..config import SectionProcessorConfig
from ..parser.xml_tree import XmlTree, ancestor

logger = logging.getLogger(__name__)


class MarkerLocator:
    """Finds ``[[SECTION_BREAK:<name>]]`` markers in text runs."""

    def __init__(self, config: Optional[SectionProcessorConfig] = None):
        self.config = config or SectionProcessorConfig()

    def marker_text(self, marker: str) -> str:
        return f"{self.config.marker_prefix}{marker}{self.config.marker_suffix}"

    def find(self, tree: XmlTree, marker: str) -> Optional[etree._Element]:
        """
        Paragraph enclosing the first text run that contains the marker.

        Later occurrences of the same marker are ignored.

        Returns:
            The ``w:p`` element, or None when no run carries the marker
        """
        text = self.marker_text(marker)
        runs = tree.query("//w:t[contains(., $marker)]", marker=text)
        if not runs:
            return None
        if len(runs) > 1:
            logger.debug(f"Marker {text} occurs {len(runs)} times, using the first")
        return ancestor(runs[0], "w:p")
