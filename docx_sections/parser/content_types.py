"""Content-type registry (``[Content_Types].xml``)."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from lxml import etree

from .xml_tree import CT_NS, XmlTree

logger = logging.getLogger(__name__)

FOOTER_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.footer+xml"


def part_name_for(package_path: str) -> str:
    """Registry part name of a zip entry (``word/footer1.xml`` -> ``/word/footer1.xml``)."""
    return package_path if package_path.startswith("/") else f"/{package_path}"


class ContentTypeRegistry:
    """Default (by extension) and Override (by part name) entries of a package."""

    def __init__(self, tree: XmlTree):
        self.tree = tree

    @classmethod
    def parse(cls, data: bytes, part_name: Optional[str] = "[Content_Types].xml") -> "ContentTypeRegistry":
        return cls(XmlTree.parse(data, part_name))

    def defaults(self) -> Dict[str, str]:
        return {
            element.get("Extension", ""): element.get("ContentType", "")
            for element in self.tree.root.findall(f"{{{CT_NS}}}Default")
        }

    def overrides(self) -> Dict[str, str]:
        result: Dict[str, str] = {}
        for element in self.tree.root.findall(f"{{{CT_NS}}}Override"):
            result.setdefault(element.get("PartName", ""), element.get("ContentType", ""))
        return result

    def has_override(self, part_name: str) -> bool:
        return part_name_for(part_name) in self.overrides()

    def get_override(self, part_name: str) -> Optional[str]:
        return self.overrides().get(part_name_for(part_name))

    def ensure_override(self, part_name: str, content_type: str) -> bool:
        """
        Register an override unless one already exists for the part.
        
        Returns:
            True if a new entry was added
        """
        name = part_name_for(part_name)
        if name in self.overrides():
            logger.debug(f"Content type override already present: {name}")
            return False
        element = etree.SubElement(self.tree.root, f"{{{CT_NS}}}Override")
        element.set("PartName", name)
        element.set("ContentType", content_type)
        logger.debug(f"Added content type override: {name} -> {content_type}")
        return True

    def to_bytes(self) -> bytes:
        return self.tree.serialize()
