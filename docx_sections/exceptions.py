"""Custom exceptions for DOCX section processing."""

from typing import Optional


class DocxSectionsError(Exception):
    """Base exception for DOCX section processing errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class PackageOpenError(DocxSectionsError):
    """Exception raised when the package cannot be opened or lacks a required part."""

    def __init__(self, message: str, details: Optional[str] = None, package_path: Optional[str] = None):
        super().__init__(message, details)
        self.package_path = package_path


class XmlParseError(DocxSectionsError):
    """Exception raised when a required XML part is not well-formed."""

    def __init__(self, message: str, details: Optional[str] = None, part_name: Optional[str] = None):
        super().__init__(message, details)
        self.part_name = part_name


class MarkerNotFoundError(DocxSectionsError):
    """Exception describing a section marker with no matching text run."""

    def __init__(self, marker: str, details: Optional[str] = None):
        super().__init__(f"Section marker not found: {marker}", details)
        self.marker = marker


class RelationshipAllocationExhausted(DocxSectionsError):
    """Exception raised when no free relationship id or footer name can be found."""

    pass


class InvalidDescriptorError(DocxSectionsError, ValueError):
    """Exception raised for a malformed section descriptor."""

    pass
