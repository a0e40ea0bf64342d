"""
Section processor - turns sentinel markers into section boundaries.

Rewrites a DOCX package so that every ``[[SECTION_BREAK:<name>]]`` marker
paragraph ends a section with its own margins, page numbering and footer.

Interior descriptors replace their marker paragraph with a paragraph whose
``w:pPr`` carries the new ``w:sectPr``; the terminal descriptor replaces (or
creates) the body's trailing ``w:sectPr``. All parts are rebuilt in memory
and committed to the package in one write.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from lxml import etree

from ..config import SectionProcessorConfig
from ..exceptions import DocxSectionsError, MarkerNotFoundError
from ..models.section import ProcessingReport, SectionDescriptor, descriptors_from_list
from ..package.package_store import PackageStore
from ..parser.content_types import ContentTypeRegistry
from ..parser.relationships import RelationshipTable
from ..parser.xml_tree import XmlTree, clone_node, make_element, remove_children
from .footer_allocator import FooterAllocator
from .marker_locator import MarkerLocator
from .sect_pr_builder import SectPrBuilder

logger = logging.getLogger(__name__)


class SectionProcessor:
    """
    Applies section descriptors to a DOCX package.

    Examples:
        >>> processor = SectionProcessor()
        >>> processor.process("thesis.docx", [
        ...     {"marker": "toc_end", "pageNumberFormat": "lowerRoman", "start": 1},
        ...     {"marker": "chapter1_start", "pageNumberFormat": "decimal", "start": 1},
        ...     {"marker": "document_end"},
        ... ])
        True
    """

    def __init__(self, config: Optional[SectionProcessorConfig] = None):
        self.config = config or SectionProcessorConfig()
        self.locator = MarkerLocator(self.config)
        self.builder = SectPrBuilder(self.config)

    def process(
        self,
        docx_path: Union[str, Path],
        section_markers: Iterable[Any],
        output_path: Optional[Union[str, Path]] = None,
    ) -> bool:
        """
        Apply descriptors, reporting only success or failure.

        Args:
            docx_path: Package to transform (rewritten in place unless output_path is set)
            section_markers: SectionDescriptor objects or pipeline mappings, in order
            output_path: Optional destination for the transformed package

        Returns:
            True if the transform completed and was written
        """
        try:
            self.run(docx_path, section_markers, output_path)
        except DocxSectionsError as e:
            logger.error(f"Section processing failed for {docx_path}: {e}")
            return False
        return True

    def run(
        self,
        docx_path: Union[str, Path],
        section_markers: Iterable[Any],
        output_path: Optional[Union[str, Path]] = None,
    ) -> ProcessingReport:
        """
        Apply descriptors and return a detailed report.

        Raises:
            InvalidDescriptorError: A descriptor is malformed (nothing is opened)
            PackageOpenError: Package unreadable or a required part is missing
            XmlParseError: A required XML part is malformed
            RelationshipAllocationExhausted: No free footer name or relationship id
        """
        descriptors = descriptors_from_list(section_markers)
        config = self.config
        report = ProcessingReport()

        with PackageStore(docx_path, required_parts=config.required_parts) as store:
            document = XmlTree.parse(store.read_part(config.document_part), config.document_part)
            relationships = RelationshipTable.parse(
                store.read_part(config.document_rels_part), config.document_rels_part
            )
            content_types = ContentTypeRegistry.parse(
                store.read_part(config.content_types_part), config.content_types_part
            )

            base = self.find_base_sect_pr(document)
            base_template = clone_node(base) if base is not None else None

            allocator = FooterAllocator(store, relationships, content_types, config)
            footer_ids = allocator.allocate(descriptors)
            report.footers = dict(footer_ids)
            report.footer_parts = list(allocator.created_parts)

            terminal_index = self.resolve_terminal_index(descriptors)

            for index, descriptor in enumerate(descriptors):
                if index == terminal_index:
                    continue
                paragraph = self.locator.find(document, descriptor.marker)
                if paragraph is None:
                    error = MarkerNotFoundError(self.locator.marker_text(descriptor.marker), str(docx_path))
                    logger.warning(f"DOCX section marker not found: {error.marker} in {docx_path}")
                    report.skipped.append(descriptor.marker)
                    report.errors.append(error)
                    continue

                sect_pr = self.builder.build(base_template, descriptor, footer_ids, is_interior=True)
                self.replace_paragraph_with_sect_pr(paragraph, sect_pr)
                report.applied.append(descriptor.marker)

            if terminal_index is not None:
                descriptor = descriptors[terminal_index]
                sect_pr = self.builder.build(base_template, descriptor, footer_ids, is_interior=False)
                if self.apply_final_section(document, sect_pr):
                    report.applied.append(descriptor.marker)
                    report.terminal_applied = True
                else:
                    logger.warning(f"Document body not found in {docx_path}, final section skipped")

            store.write_part(config.document_part, document.serialize())
            if footer_ids:
                store.write_part(config.document_rels_part, relationships.to_bytes())
                store.write_part(config.content_types_part, content_types.to_bytes())
            store.commit(output_path)

        logger.info(
            f"Applied {len(report.applied)} section(s) to {output_path or docx_path}"
            f" ({len(report.footer_parts)} footer(s) created, {len(report.skipped)} marker(s) skipped)"
        )
        return report

    def resolve_terminal_index(self, descriptors: List[SectionDescriptor]) -> Optional[int]:
        """
        Index of the descriptor applied to the document end.

        The last explicitly flagged descriptor wins; otherwise the last one
        carrying the terminal marker. None when there is no such descriptor.
        """
        flagged = [i for i, d in enumerate(descriptors) if d.terminal]
        if flagged:
            return flagged[-1]
        terminal_like = [
            i for i, d in enumerate(descriptors) if d.is_terminal_like(self.config.terminal_marker)
        ]
        return terminal_like[-1] if terminal_like else None

    def find_base_sect_pr(self, document: XmlTree) -> Optional[etree._Element]:
        """The body's own section properties, else the first anywhere in the document."""
        sect_pr = document.first("//w:body/w:sectPr")
        if sect_pr is None:
            sect_pr = document.first("//w:sectPr")
        return sect_pr

    def replace_paragraph_with_sect_pr(self, paragraph: etree._Element, sect_pr: etree._Element) -> None:
        """Replace the paragraph's content with ``w:pPr/w:sectPr``."""
        remove_children(paragraph)
        paragraph.text = None
        p_pr = make_element("w:pPr")
        p_pr.append(sect_pr)
        paragraph.append(p_pr)

    def apply_final_section(self, document: XmlTree, sect_pr: etree._Element) -> bool:
        """
        Replace the body's trailing section properties, or append them.

        Returns:
            False if the document has no body
        """
        body = document.first("//w:body")
        if body is None:
            return False
        existing = document.first("./w:sectPr", body)
        if existing is not None:
            body.replace(existing, sect_pr)
        else:
            body.append(sect_pr)
        return True


def process_sections(
    docx_path: Union[str, Path],
    section_markers: Iterable[Any],
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[SectionProcessorConfig] = None,
) -> bool:
    """Apply section descriptors to a package (see SectionProcessor.process)."""
    return SectionProcessor(config).process(docx_path, section_markers, output_path)
