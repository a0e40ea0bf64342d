"""Section boundary processing."""

from .footer_allocator import FooterAllocator, FooterNameAllocator, RelationshipIdAllocator, build_footer_xml
from .marker_locator import MarkerLocator
from .processor import SectionProcessor, process_sections
from .sect_pr_builder import SECT_PR_CHILD_ORDER, SectPrBuilder, insert_in_schema_order

__all__ = [
    "FooterAllocator",
    "FooterNameAllocator",
    "MarkerLocator",
    "RelationshipIdAllocator",
    "SECT_PR_CHILD_ORDER",
    "SectPrBuilder",
    "SectionProcessor",
    "build_footer_xml",
    "insert_in_schema_order",
    "process_sections",
]
