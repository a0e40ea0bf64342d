"""
Relationship table for a package part.

Handles parsing of a ``_rels/*.rels`` part, id lookups and appending new
relationships while keeping ids unique.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Set

from lxml import etree

from .xml_tree import PKG_REL_NS, XmlTree

logger = logging.getLogger(__name__)

FOOTER_REL_TYPE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/footer"

_RID_PATTERN = re.compile(r"^rId(\d+)$")


@dataclass(frozen=True)
class Relationship:
    id: str
    type: str
    target: str
    target_mode: str = "Internal"


class RelationshipTable:
    """
    Ordered relationships of one source part.
    
    Entries stay in document order; ``add`` appends at the end.
    """
    
    def __init__(self, tree: XmlTree):
        self.tree = tree

    @classmethod
    def parse(cls, data: bytes, part_name: Optional[str] = None) -> "RelationshipTable":
        return cls(XmlTree.parse(data, part_name))

    def _elements(self) -> List[etree._Element]:
        return self.tree.root.findall(f"{{{PKG_REL_NS}}}Relationship")

    def __iter__(self):
        return iter(self.entries())

    def __len__(self) -> int:
        return len(self._elements())

    def entries(self) -> List[Relationship]:
        return [
            Relationship(
                id=element.get("Id", ""),
                type=element.get("Type", ""),
                target=element.get("Target", ""),
                target_mode=element.get("TargetMode", "Internal"),
            )
            for element in self._elements()
        ]

    def ids(self) -> Set[str]:
        return {element.get("Id") for element in self._elements() if element.get("Id")}

    def get(self, rel_id: str) -> Optional[Relationship]:
        for rel in self.entries():
            if rel.id == rel_id:
                return rel
        return None

    def find_by_target(self, target: str) -> Optional[Relationship]:
        for rel in self.entries():
            if rel.target == target:
                return rel
        return None

    def by_type(self, rel_type: str) -> List[Relationship]:
        return [rel for rel in self.entries() if rel.type == rel_type]

    def max_numeric_id(self) -> int:
        """Largest N among ``rId<N>`` ids (0 when there are none)."""
        highest = 0
        for rel_id in self.ids():
            match = _RID_PATTERN.match(rel_id)
            if match:
                highest = max(highest, int(match.group(1)))
        return highest

    def add(self, rel_id: str, rel_type: str, target: str, target_mode: Optional[str] = None) -> Relationship:
        """
        Append a relationship.
        
        Raises:
            ValueError: The id is already present
        """
        if rel_id in self.ids():
            raise ValueError(f"Duplicate relationship id: {rel_id}")
        element = etree.SubElement(self.tree.root, f"{{{PKG_REL_NS}}}Relationship")
        element.set("Id", rel_id)
        element.set("Type", rel_type)
        element.set("Target", target)
        if target_mode and target_mode != "Internal":
            element.set("TargetMode", target_mode)
        logger.debug(f"Added relationship: {rel_id} ({rel_type}) -> {target}")
        return Relationship(rel_id, rel_type, target, target_mode or "Internal")

    def to_bytes(self) -> bytes:
        return self.tree.serialize()
