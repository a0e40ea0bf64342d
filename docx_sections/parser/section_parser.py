"""Section parser for DOCX documents."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from lxml import etree

from .relationships import RelationshipTable
from .xml_tree import XmlTree, find_child, find_children, get_attr, local_name


class SectionParser:
    """Parse Word section properties (sectPr blocks) into plain dicts."""

    def __init__(self, document: XmlTree, relationships: Optional[RelationshipTable] = None) -> None:
        self.document = document
        self.relationships = relationships

    def parse_sections(self) -> List[Dict[str, Any]]:
        """Sections in document order; the body-level section comes last."""
        return [self.parse_section_properties(sect_pr) for sect_pr in self.document.query("//w:sectPr")]

    def parse_section_properties(self, sect_pr_element: etree._Element) -> Dict[str, Any]:
        props = self._default_section()
        parent = sect_pr_element.getparent()
        props["location"] = "body" if parent is not None and local_name(parent) == "body" else "paragraph"

        break_type = find_child(sect_pr_element, "w:type")
        if break_type is not None:
            props["break_type"] = get_attr(break_type, "w:val")

        page_size = find_child(sect_pr_element, "w:pgSz")
        if page_size is not None:
            props["page_size"] = {
                "width": self._parse_int_attr(get_attr(page_size, "w:w")),
                "height": self._parse_int_attr(get_attr(page_size, "w:h")),
                "orient": get_attr(page_size, "w:orient", "portrait"),
            }

        page_margin = find_child(sect_pr_element, "w:pgMar")
        if page_margin is not None:
            props["margins"] = {
                side: self._parse_int_attr(get_attr(page_margin, f"w:{side}"))
                for side in ("top", "bottom", "left", "right", "header", "footer", "gutter")
            }

        page_numbers = find_child(sect_pr_element, "w:pgNumType")
        if page_numbers is not None:
            props["page_numbering"] = {
                "start": self._parse_int_attr(get_attr(page_numbers, "w:start")),
                "format": get_attr(page_numbers, "w:fmt"),
            }

        for footer_ref in find_children(sect_pr_element, "w:footerReference"):
            rel_id = get_attr(footer_ref, "r:id")
            target = None
            if self.relationships is not None and rel_id:
                rel = self.relationships.get(rel_id)
                target = rel.target if rel else None
            props["footers"].append({
                "type": get_attr(footer_ref, "w:type", "default"),
                "id": rel_id,
                "target": target,
            })

        props["children"] = [local_name(child) for child in sect_pr_element if isinstance(child.tag, str)]
        return props

    # ------------------------------------------------------------------
    def _default_section(self) -> Dict[str, Any]:
        return {
            "location": None,
            "break_type": None,
            "page_size": {"width": None, "height": None, "orient": "portrait"},
            "margins": {"top": None, "bottom": None, "left": None, "right": None, "header": None, "footer": None, "gutter": None},
            "page_numbering": {"start": None, "format": None},
            "footers": [],
            "children": [],
        }

    def _parse_int_attr(self, value: Optional[str], default: Optional[int] = None) -> Optional[int]:
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default
