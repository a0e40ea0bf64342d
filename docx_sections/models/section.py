"""Section descriptors and processing results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..exceptions import InvalidDescriptorError

TERMINAL_MARKER = "document_end"


@dataclass
class SectionDescriptor:
    """
    One requested section boundary.

    Attributes:
        marker: Sentinel name, or the terminal marker for the document end.
        page_number_format: ``w:pgNumType/@w:fmt`` value (e.g. ``lowerRoman``);
            None leaves page numbering untouched for this section.
        start: First page number when a format is given.
        terminal: Explicitly marks the descriptor as the document-end section.
    """

    marker: Optional[str]
    page_number_format: Optional[str] = None
    start: Optional[int] = None
    terminal: bool = False

    def __post_init__(self):
        if self.marker is None:
            self.marker = TERMINAL_MARKER
        if not isinstance(self.marker, str) or not self.marker:
            raise InvalidDescriptorError("Section marker must be a non-empty string", repr(self.marker))
        if self.page_number_format is not None:
            if not isinstance(self.page_number_format, str) or not self.page_number_format:
                raise InvalidDescriptorError(
                    "Page number format must be a non-empty string", repr(self.page_number_format)
                )
            # str-valued enums (PageNumberFormat) are stored by value
            self.page_number_format = str(getattr(self.page_number_format, "value", self.page_number_format))
        if self.start is not None:
            if isinstance(self.start, bool):
                raise InvalidDescriptorError("Start page must be an integer", repr(self.start))
            try:
                self.start = int(self.start)
            except (TypeError, ValueError) as e:
                raise InvalidDescriptorError("Start page must be an integer", repr(self.start)) from e

    def is_terminal_like(self, terminal_marker: str = TERMINAL_MARKER) -> bool:
        return self.terminal or self.marker == terminal_marker

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SectionDescriptor":
        """
        Build a descriptor from pipeline data.

        Accepts both ``pageNumberFormat`` and ``page_number_format`` keys.
        """
        if not isinstance(data, Mapping):
            raise InvalidDescriptorError("Section descriptor must be a mapping", repr(data))
        page_number_format = data.get("pageNumberFormat", data.get("page_number_format"))
        return cls(
            marker=data.get("marker"),
            page_number_format=page_number_format or None,
            start=data.get("start"),
            terminal=bool(data.get("terminal", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"marker": self.marker}
        if self.page_number_format is not None:
            result["pageNumberFormat"] = self.page_number_format
        if self.start is not None:
            result["start"] = self.start
        if self.terminal:
            result["terminal"] = True
        return result


def descriptors_from_list(items: Iterable[Any]) -> List[SectionDescriptor]:
    """Coerce a list of mappings and/or descriptors into descriptors."""
    descriptors = []
    for item in items:
        if isinstance(item, SectionDescriptor):
            descriptors.append(item)
        else:
            descriptors.append(SectionDescriptor.from_dict(item))
    return descriptors


@dataclass
class ProcessingReport:
    """Outcome of a single transform."""

    applied: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    footers: Dict[str, str] = field(default_factory=dict)
    footer_parts: List[str] = field(default_factory=list)
    terminal_applied: bool = False
    errors: List[Exception] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "applied": list(self.applied),
            "skipped": list(self.skipped),
            "footers": dict(self.footers),
            "footer_parts": list(self.footer_parts),
            "terminal_applied": self.terminal_applied,
            "errors": [str(error) for error in self.errors],
        }
