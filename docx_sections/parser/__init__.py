"""Parsers and models for the XML parts of a DOCX package."""

from .content_types import ContentTypeRegistry
from .relationships import Relationship, RelationshipTable
from .section_parser import SectionParser
from .xml_tree import NAMESPACES, XmlTree, qn

__all__ = [
    "ContentTypeRegistry",
    "NAMESPACES",
    "Relationship",
    "RelationshipTable",
    "SectionParser",
    "XmlTree",
    "qn",
]
