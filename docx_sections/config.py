"""
Configuration for the section processor.

All values have defaults matching the export pipeline's conventions; a config
can also be built from plain data (e.g. a JSON file passed to the CLI).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping

from .utils.units import inches_to_twips


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Config key {name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Config key {name} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class MarginPolicy:
    """
    Page margins applied to every generated section, in twips.

    Attributes:
        top, bottom, left, right: Page margins (1 inch by default).
        header: Distance from page edge to header (0.5 inch).
        footer: Distance from page edge to footer (0.5 inch).
        gutter: Binding gutter.
    """

    top: int = inches_to_twips(1)
    bottom: int = inches_to_twips(1)
    left: int = inches_to_twips(1)
    right: int = inches_to_twips(1)
    header: int = inches_to_twips(0.5)
    footer: int = inches_to_twips(0.5)
    gutter: int = 0

    def as_attributes(self) -> Dict[str, str]:
        """Return ``w:pgMar`` attribute values keyed by local name."""
        return {f.name: str(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MarginPolicy":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown margin keys: {', '.join(sorted(unknown))}")
        return cls(**{key: _as_int(f"margins.{key}", value) for key, value in data.items()})


@dataclass(frozen=True)
class SectionProcessorConfig:
    """
    Section processor settings.

    Attributes:
        marker_prefix / marker_suffix: Delimiters of a sentinel marker in body text.
        terminal_marker: Marker name meaning "apply to the end of the document".
        document_part: Body part name inside the package.
        document_rels_part: Relationship part of the body.
        content_types_part: Content-type registry part.
        footer_directory: Package directory holding generated footers.
        footer_name_pattern: File name pattern for generated footers.
        footer_alignment: ``w:jc`` value of the footer paragraph.
        footer_field_instruction: Field instruction of the page-number field.
        margins: Margin policy for every generated section.
        max_allocation_probes: Upper bound on id/name probing before giving up.
    """

    marker_prefix: str = "[[SECTION_BREAK:"
    marker_suffix: str = "]]"
    terminal_marker: str = "document_end"
    document_part: str = "word/document.xml"
    document_rels_part: str = "word/_rels/document.xml.rels"
    content_types_part: str = "[Content_Types].xml"
    footer_directory: str = "word"
    footer_name_pattern: str = "footer{index}.xml"
    footer_alignment: str = "center"
    footer_field_instruction: str = "PAGE"
    margins: MarginPolicy = field(default_factory=MarginPolicy)
    max_allocation_probes: int = 10000

    @property
    def required_parts(self) -> tuple:
        return (self.document_part, self.document_rels_part, self.content_types_part)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SectionProcessorConfig":
        """
        Build a config from plain data.

        Args:
            data: Mapping of field names to values; ``margins`` may be a nested mapping.

        Returns:
            SectionProcessorConfig instance

        Raises:
            ValueError: On unknown keys or values of the wrong type
        """
        known = {f.name: f for f in fields(cls)}
        unknown = set(data) - set(known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

        values = dict(data)
        for name, value in values.items():
            if isinstance(known[name].default, str) and not isinstance(value, str):
                raise ValueError(f"Config key {name} must be a string, got {value!r}")

        if "margins" in values:
            margins = values["margins"]
            if isinstance(margins, Mapping):
                values["margins"] = MarginPolicy.from_dict(margins)
            elif not isinstance(margins, MarginPolicy):
                raise ValueError(f"Config key margins must be a mapping, got {margins!r}")
        if "max_allocation_probes" in values:
            values["max_allocation_probes"] = _as_int("max_allocation_probes", values["max_allocation_probes"])
        return cls(**values)
