"""
XML tree model for package parts.

Thin layer over lxml: a hardened parser, namespace-qualified queries and a
small set of typed node helpers, so call sites never spell namespace URIs.
"""

from __future__ import annotations

import copy
import logging
from typing import Dict, Iterator, List, Optional

from lxml import etree

from ..exceptions import XmlParseError

logger = logging.getLogger(__name__)

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PKG_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
CT_NS = "http://schemas.openxmlformats.org/package/2006/content-types"

NAMESPACES: Dict[str, str] = {
    "w": W_NS,
    "r": R_NS,
    "rels": PKG_REL_NS,
    "ct": CT_NS,
}


def qn(tag: str) -> str:
    """
    Convert a prefixed name (``w:sectPr``) to Clark notation.

    Names without a prefix are returned unchanged.
    """
    if ":" not in tag:
        return tag
    prefix, local = tag.split(":", 1)
    try:
        return f"{{{NAMESPACES[prefix]}}}{local}"
    except KeyError:
        raise ValueError(f"Unknown namespace prefix: {prefix}") from None


def local_name(element: etree._Element) -> str:
    """Local part of an element tag ('' for comments and processing instructions)."""
    if not isinstance(element.tag, str):
        return ""
    return etree.QName(element).localname


def get_attr(element: etree._Element, name: str, default: Optional[str] = None) -> Optional[str]:
    return element.get(qn(name), default)


def set_attr(element: etree._Element, name: str, value) -> None:
    element.set(qn(name), str(value))


def find_child(element: etree._Element, tag: str) -> Optional[etree._Element]:
    """First direct child with the given prefixed tag."""
    return element.find(qn(tag))


def find_children(element: etree._Element, tag: str) -> List[etree._Element]:
    return element.findall(qn(tag))


def iter_elements(element: etree._Element) -> Iterator[etree._Element]:
    """Direct element children, skipping comments and processing instructions."""
    for child in element:
        if isinstance(child.tag, str):
            yield child


def remove_children(element: etree._Element, tag: Optional[str] = None) -> int:
    """
    Remove direct children (all of them, or only those matching ``tag``).

    Returns:
        Number of removed children
    """
    targets = list(element) if tag is None else find_children(element, tag)
    for child in targets:
        element.remove(child)
    return len(targets)


def insert_before(parent: etree._Element, new_child: etree._Element,
                  reference: Optional[etree._Element]) -> None:
    """Insert ``new_child`` before ``reference``; append when reference is None."""
    if reference is None:
        parent.append(new_child)
    else:
        reference.addprevious(new_child)


def clone_node(element: etree._Element) -> etree._Element:
    """Deep copy detached from the source tree."""
    return copy.deepcopy(element)


def _nsmap_for(tag: str, attrs: Optional[Dict[str, object]]) -> Dict[str, str]:
    prefixes = {name.split(":", 1)[0] for name in [tag, *(attrs or {})] if ":" in name}
    return {prefix: NAMESPACES[prefix] for prefix in prefixes if prefix in NAMESPACES}


def make_element(tag: str, attrs: Optional[Dict[str, object]] = None) -> etree._Element:
    element = etree.Element(qn(tag), nsmap=_nsmap_for(tag, attrs))
    for name, value in (attrs or {}).items():
        set_attr(element, name, value)
    return element


def sub_element(parent: etree._Element, tag: str,
                attrs: Optional[Dict[str, object]] = None) -> etree._Element:
    child = etree.SubElement(parent, qn(tag), nsmap=_nsmap_for(tag, attrs))
    for name, value in (attrs or {}).items():
        set_attr(child, name, value)
    return child


def ancestor(element: etree._Element, tag: str) -> Optional[etree._Element]:
    """Nearest ancestor-or-self with the given prefixed tag."""
    target = qn(tag)
    node = element
    while node is not None and node.tag != target:
        node = node.getparent()
    return node


class XmlTree:
    """
    Parsed XML part.

    Wraps an lxml document with namespace-aware queries; absence is always a
    checkable empty result, never an exception.
    """

    def __init__(self, root: etree._Element, part_name: Optional[str] = None):
        self.root = root
        self.part_name = part_name

    @classmethod
    def parse(cls, data: bytes, part_name: Optional[str] = None) -> "XmlTree":
        """
        Parse part bytes.

        Raises:
            XmlParseError: Content is empty or not well-formed
        """
        if not data:
            raise XmlParseError("XML part is empty", part_name, part_name=part_name)
        parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            remove_blank_text=False,
            huge_tree=True,
        )
        try:
            root = etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            logger.error(f"Failed to parse XML part {part_name}: {e}")
            raise XmlParseError("Malformed XML part", f"{part_name}: {e}", part_name=part_name) from e
        return cls(root, part_name)

    def serialize(self) -> bytes:
        return etree.tostring(
            self.root,
            xml_declaration=True,
            encoding="UTF-8",
            standalone=True,
        )

    def query(self, path: str, context: Optional[etree._Element] = None,
              namespaces: Optional[Dict[str, str]] = None, **variables) -> List[etree._Element]:
        """
        Evaluate an XPath expression.

        Args:
            path: XPath using the registered prefixes (w, r, rels, ct)
            context: Node to evaluate from (document root if None)
            namespaces: Extra prefix mappings
            **variables: XPath variables (referenced as $name)

        Returns:
            Matching nodes (empty list when nothing matches)
        """
        ns = dict(NAMESPACES)
        if namespaces:
            ns.update(namespaces)
        node = self.root if context is None else context
        result = node.xpath(path, namespaces=ns, **variables)
        if isinstance(result, list):
            return result
        return []

    def first(self, path: str, context: Optional[etree._Element] = None) -> Optional[etree._Element]:
        matches = self.query(path, context)
        return matches[0] if matches else None
