"""
Footer parts and relationship id allocation.

Allocators probe existing package state and hand out the next free value;
they hold no package-wide counters.
"""

from __future__ import annotations

import logging
import posixpath
from typing import Callable, Dict, Iterable, List, Optional, Set

from lxml import etree

from ..config import SectionProcessorConfig
from ..exceptions import RelationshipAllocationExhausted
from ..models.section import SectionDescriptor
from ..parser.content_types import FOOTER_CONTENT_TYPE, ContentTypeRegistry
from ..parser.relationships import FOOTER_REL_TYPE, RelationshipTable
from ..parser.xml_tree import W_NS, XmlTree, sub_element

logger = logging.getLogger(__name__)


def build_footer_xml(config: Optional[SectionProcessorConfig] = None) -> bytes:
    """
    Footer part with one aligned paragraph holding a live page-number field.

    The field is the begin / instruction / end run triplet.
    """
    config = config or SectionProcessorConfig()
    root = etree.Element(f"{{{W_NS}}}ftr", nsmap={"w": W_NS})
    paragraph = sub_element(root, "w:p")
    p_pr = sub_element(paragraph, "w:pPr")
    sub_element(p_pr, "w:jc", {"w:val": config.footer_alignment})

    begin_run = sub_element(paragraph, "w:r")
    sub_element(begin_run, "w:fldChar", {"w:fldCharType": "begin"})

    instr_run = sub_element(paragraph, "w:r")
    instr = sub_element(instr_run, "w:instrText")
    instr.set("{http://www.w3.org/XML/1998/namespace}space", "preserve")
    instr.text = f" {config.footer_field_instruction} "

    end_run = sub_element(paragraph, "w:r")
    sub_element(end_run, "w:fldChar", {"w:fldCharType": "end"})

    return XmlTree(root).serialize()


class FooterNameAllocator:
    """
    Hands out ``footerN.xml`` names not present in the package.

    Probing starts at 1 and never returns a name twice.
    """

    def __init__(self, exists: Callable[[str], bool], config: Optional[SectionProcessorConfig] = None):
        self.exists = exists
        self.config = config or SectionProcessorConfig()
        self._next_index = 1
        self._issued: Set[str] = set()

    def _part_path(self, file_name: str) -> str:
        directory = self.config.footer_directory.strip("/")
        return f"{directory}/{file_name}" if directory else file_name

    def next(self) -> str:
        """
        Returns:
            Package part path of the footer (e.g. ``word/footer1.xml``)

        Raises:
            RelationshipAllocationExhausted: No free name within the probe limit
        """
        for _ in range(self.config.max_allocation_probes):
            index = self._next_index
            self._next_index += 1
            file_name = self.config.footer_name_pattern.format(index=index)
            part_path = self._part_path(file_name)
            if part_path in self._issued or self.exists(part_path):
                continue
            self._issued.add(part_path)
            return part_path
        raise RelationshipAllocationExhausted(
            "No free footer part name",
            f"gave up after {self.config.max_allocation_probes} probes",
        )


class RelationshipIdAllocator:
    """
    Hands out ``rId<N>`` ids unique within a relationship table.

    The candidate is ``max(existing N) + 1``, re-probed until free.
    """

    def __init__(self, table: RelationshipTable, max_probes: int = 10000):
        self.table = table
        self.max_probes = max_probes
        self._issued: Set[str] = set()

    def next(self) -> str:
        taken = self.table.ids() | self._issued
        candidate = self.table.max_numeric_id() + 1
        for _ in range(self.max_probes):
            rel_id = f"rId{candidate}"
            if rel_id not in taken:
                self._issued.add(rel_id)
                return rel_id
            candidate += 1
        raise RelationshipAllocationExhausted(
            "No free relationship id",
            f"gave up after {self.max_probes} probes",
        )


class FooterAllocator:
    """
    Creates one footer part per distinct page number format.
    
    Footer parts are staged in the package store; the relationship table and
    content-type registry are mutated in memory and written by the caller.
    """
    
    def __init__(
        self,
        store,
        relationships: RelationshipTable,
        content_types: ContentTypeRegistry,
        config: Optional[SectionProcessorConfig] = None,
    ):
        """
        Args:
            store: PackageStore (needs ``has_part`` and ``write_part``)
            relationships: Relationship table of the body part
            content_types: Package content-type registry
            config: Processor configuration
        """
        self.store = store
        self.relationships = relationships
        self.content_types = content_types
        self.config = config or SectionProcessorConfig()
        self.names = FooterNameAllocator(store.has_part, self.config)
        self.ids = RelationshipIdAllocator(relationships, self.config.max_allocation_probes)
        self.created_parts: List[str] = []

    def _relationship_target(self, part_path: str) -> str:
        """Footer path relative to the body part's directory."""
        source_dir = posixpath.dirname(self.config.document_part) or "."
        return posixpath.relpath(part_path, source_dir)

    @staticmethod
    def distinct_formats(descriptors: Iterable[SectionDescriptor]) -> List[str]:
        """Non-empty page number formats in first-seen order."""
        formats: Dict[str, None] = {}
        for descriptor in descriptors:
            if descriptor.page_number_format:
                formats.setdefault(descriptor.page_number_format, None)
        return list(formats)

    def allocate(self, descriptors: Iterable[SectionDescriptor]) -> Dict[str, str]:
        """
        Create footers for the requested formats.

        Returns:
            Mapping page number format -> relationship id
        """
        footer_ids: Dict[str, str] = {}
        formats = self.distinct_formats(descriptors)
        if not formats:
            return footer_ids

        footer_xml = build_footer_xml(self.config)
        for fmt in formats:
            part_path = self.names.next()
            self.store.write_part(part_path, footer_xml)
            rel_id = self.ids.next()
            self.relationships.add(rel_id, FOOTER_REL_TYPE, self._relationship_target(part_path))
            self.content_types.ensure_override(part_path, FOOTER_CONTENT_TYPE)
            self.created_parts.append(part_path)
            footer_ids[fmt] = rel_id
            logger.debug(f"Footer {part_path} allocated as {rel_id} for format {fmt}")

        return footer_ids
