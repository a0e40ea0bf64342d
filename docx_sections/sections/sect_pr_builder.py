"""
Section properties builder.

Builds ``w:sectPr`` nodes from a base template. Children are always placed
according to the CT_SectPr sequence in ``SECT_PR_CHILD_ORDER``.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from lxml import etree

from ..config import SectionProcessorConfig
from ..models.section import SectionDescriptor
from ..parser.xml_tree import (
    clone_node,
    find_child,
    get_attr,
    insert_before,
    iter_elements,
    local_name,
    make_element,
    remove_children,
    set_attr,
)
from ..utils.enums import FooterType, PageNumberFormat, SectionBreakType

logger = logging.getLogger(__name__)

# CT_SectPr child sequence (ECMA-376 Part 1, 17.6.17).
SECT_PR_CHILD_ORDER = (
    "headerReference",
    "footerReference",
    "footnotePr",
    "endnotePr",
    "type",
    "pgSz",
    "pgMar",
    "paperSrc",
    "pgBorders",
    "lnNumType",
    "pgNumType",
    "cols",
    "formProt",
    "vAlign",
    "noEndnote",
    "titlePg",
    "textDirection",
    "bidi",
    "rtlGutter",
    "docGrid",
    "printerSettings",
    "sectPrChange",
)

_RANK: Dict[str, int] = {name: index for index, name in enumerate(SECT_PR_CHILD_ORDER)}

# header/footer references form one interleavable group
_RANK["headerReference"] = _RANK["footerReference"]


def schema_rank(element: etree._Element) -> Optional[int]:
    """Position of a child in the CT_SectPr sequence (None for foreign elements)."""
    return _RANK.get(local_name(element))


def insert_in_schema_order(sect_pr: etree._Element, child: etree._Element) -> etree._Element:
    """
    Insert ``child`` after every sibling that must precede it.

    Foreign-namespace or unknown siblings are stepped over.
    """
    rank = schema_rank(child)
    if rank is None:
        raise ValueError(f"Not a section property: {local_name(child)}")
    reference = None
    for sibling in iter_elements(sect_pr):
        sibling_rank = schema_rank(sibling)
        if sibling_rank is not None and sibling_rank > rank:
            reference = sibling
            break
    insert_before(sect_pr, child, reference)
    return child


class SectPrBuilder:
    """Builds section-properties nodes for interior and terminal sections."""

    def __init__(self, config: Optional[SectionProcessorConfig] = None):
        self.config = config or SectionProcessorConfig()

    def build(
        self,
        base_template: Optional[etree._Element],
        descriptor: SectionDescriptor,
        footer_ids: Mapping[str, str],
        is_interior: bool,
    ) -> etree._Element:
        """
        Build a section-properties node.

        Args:
            base_template: Existing ``w:sectPr`` used as structural seed (not modified)
            descriptor: Requested section
            footer_ids: Page number format -> footer relationship id
            is_interior: True for a section ending at a marker paragraph

        Returns:
            Detached ``w:sectPr`` element
        """
        if base_template is not None:
            sect_pr = clone_node(base_template)
        else:
            sect_pr = make_element("w:sectPr")

        remove_children(sect_pr, "w:pgNumType")
        remove_children(sect_pr, "w:footerReference")

        self._apply_margins(sect_pr)

        if is_interior:
            type_node = find_child(sect_pr, "w:type")
            if type_node is None:
                type_node = insert_in_schema_order(sect_pr, make_element("w:type"))
            set_attr(type_node, "w:val", SectionBreakType.NEXT_PAGE.value)
        else:
            remove_children(sect_pr, "w:type")

        fmt = descriptor.page_number_format
        if fmt:
            if not PageNumberFormat.is_known(fmt):
                logger.debug(f"Passing through unlisted page number format: {fmt}")
            pg_num_type = make_element("w:pgNumType", {"w:fmt": fmt})
            if descriptor.start is not None:
                set_attr(pg_num_type, "w:start", descriptor.start)
            insert_in_schema_order(sect_pr, pg_num_type)

            rel_id = footer_ids.get(fmt)
            if rel_id:
                footer_ref = make_element(
                    "w:footerReference",
                    {"w:type": FooterType.DEFAULT.value, "r:id": rel_id},
                )
                insert_in_schema_order(sect_pr, footer_ref)
            else:
                logger.debug(f"No footer allocated for format {fmt}")

        return sect_pr

    def _apply_margins(self, sect_pr: etree._Element) -> None:
        """Overwrite page margins with the configured policy."""
        pg_mar = find_child(sect_pr, "w:pgMar")
        if pg_mar is None:
            pg_mar = insert_in_schema_order(sect_pr, make_element("w:pgMar"))
        for side, value in self.config.margins.as_attributes().items():
            previous = get_attr(pg_mar, f"w:{side}")
            if previous is not None and previous != value:
                logger.debug(f"Normalizing margin {side}: {previous} -> {value}")
            set_attr(pg_mar, f"w:{side}", value)
