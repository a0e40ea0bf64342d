"""Data model for section processing."""

from .section import ProcessingReport, SectionDescriptor

__all__ = ["ProcessingReport", "SectionDescriptor"]
