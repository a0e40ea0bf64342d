"""
docx-sections - section breaks and page numbering for generated DOCX files.

Post-processes an assembled DOCX package: every ``[[SECTION_BREAK:<name>]]``
marker paragraph becomes a section boundary with normalized margins, its own
page numbering and a footer carrying a live page-number field.

Quick Start:
    from docx_sections import SectionProcessor

    SectionProcessor().process("thesis.docx", [
        {"marker": "toc_end", "pageNumberFormat": "lowerRoman", "start": 1},
        {"marker": "chapter1_start", "pageNumberFormat": "decimal", "start": 1},
        {"marker": "document_end"},
    ])
"""

from .version import __version__, __version_info__

from .exceptions import (
    DocxSectionsError,
    InvalidDescriptorError,
    MarkerNotFoundError,
    PackageOpenError,
    RelationshipAllocationExhausted,
    XmlParseError,
)
from .config import MarginPolicy, SectionProcessorConfig
from .models import ProcessingReport, SectionDescriptor
from .package import PackageStore
from .sections import SectionProcessor, process_sections
from .utils.enums import PageNumberFormat

__all__ = [
    "__version__",
    "__version_info__",
    "DocxSectionsError",
    "InvalidDescriptorError",
    "MarginPolicy",
    "MarkerNotFoundError",
    "PackageOpenError",
    "PackageStore",
    "PageNumberFormat",
    "ProcessingReport",
    "RelationshipAllocationExhausted",
    "SectionDescriptor",
    "SectionProcessor",
    "SectionProcessorConfig",
    "XmlParseError",
    "process_sections",
]
