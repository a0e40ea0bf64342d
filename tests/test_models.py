"""
Tests for section descriptors, reports and processor configuration.
"""

import pytest

from docx_sections.config import MarginPolicy, SectionProcessorConfig
from docx_sections.exceptions import InvalidDescriptorError, MarkerNotFoundError
from docx_sections.models.section import (
    TERMINAL_MARKER,
    ProcessingReport,
    SectionDescriptor,
    descriptors_from_list,
)
from docx_sections.utils.enums import PageNumberFormat


class TestSectionDescriptor:
    """Test cases for SectionDescriptor."""
    
    def test_from_dict_camel_case(self):
        """Test the pipeline's key spelling."""
        descriptor = SectionDescriptor.from_dict({"marker": "toc_end", "pageNumberFormat": "lowerRoman", "start": 1})
        assert descriptor == SectionDescriptor("toc_end", "lowerRoman", 1)
    
    def test_from_dict_snake_case(self):
        """Test the Python key spelling."""
        descriptor = SectionDescriptor.from_dict({"marker": "a", "page_number_format": "decimal"})
        assert descriptor.page_number_format == "decimal"
        assert descriptor.start is None
    
    def test_empty_format_means_none(self):
        """Test that an empty format leaves numbering untouched."""
        assert SectionDescriptor.from_dict({"marker": "a", "pageNumberFormat": ""}).page_number_format is None
    
    def test_missing_marker_is_terminal(self):
        """Test that a descriptor without marker targets the document end."""
        descriptor = SectionDescriptor.from_dict({"pageNumberFormat": "decimal"})
        assert descriptor.marker == TERMINAL_MARKER
        assert descriptor.is_terminal_like()
    
    def test_enum_format(self):
        """Test that enum formats are stored by value."""
        descriptor = SectionDescriptor("a", PageNumberFormat.UPPER_LETTER)
        assert descriptor.page_number_format == "upperLetter"
        assert type(descriptor.page_number_format) is str
    
    def test_start_coerced(self):
        """Test that numeric strings are accepted as start pages."""
        assert SectionDescriptor("a", "decimal", "3").start == 3
    
    @pytest.mark.parametrize("kwargs", [
        {"marker": ""},
        {"marker": 5},
        {"marker": "a", "page_number_format": ""},
        {"marker": "a", "page_number_format": 3},
        {"marker": "a", "start": "one"},
        {"marker": "a", "start": True},
    ])
    def test_invalid(self, kwargs):
        """Test rejected descriptors."""
        with pytest.raises(InvalidDescriptorError):
            SectionDescriptor(**kwargs)
    
    def test_invalid_is_value_error(self):
        """Test that descriptor errors are also ValueErrors."""
        with pytest.raises(ValueError):
            SectionDescriptor.from_dict(["toc_end"])
    
    def test_to_dict(self):
        """Test serialization to pipeline data."""
        assert SectionDescriptor("toc_end", "lowerRoman", 1).to_dict() == {
            "marker": "toc_end", "pageNumberFormat": "lowerRoman", "start": 1,
        }
        assert SectionDescriptor("x", terminal=True).to_dict() == {"marker": "x", "terminal": True}
    
    def test_descriptors_from_list(self, thesis_sections):
        """Test mixed input coercion."""
        descriptors = descriptors_from_list(thesis_sections + [SectionDescriptor("extra")])
        assert [d.marker for d in descriptors] == ["toc_end", "chapter1_start", "document_end", "extra"]


class TestProcessingReport:
    """Test cases for ProcessingReport."""
    
    def test_to_dict(self):
        """Test that errors are rendered as text."""
        report = ProcessingReport(applied=["a"], skipped=["b"])
        report.errors.append(MarkerNotFoundError("[[SECTION_BREAK:b]]", "thesis.docx"))
        data = report.to_dict()
        assert data["applied"] == ["a"]
        assert data["errors"] == ["Section marker not found: [[SECTION_BREAK:b]]: thesis.docx"]
        assert data["terminal_applied"] is False


class TestSectionProcessorConfig:
    """Test cases for configuration."""
    
    def test_defaults(self):
        """Test default settings."""
        config = SectionProcessorConfig()
        assert config.marker_prefix == "[[SECTION_BREAK:"
        assert config.marker_suffix == "]]"
        assert config.required_parts == (
            "word/document.xml", "word/_rels/document.xml.rels", "[Content_Types].xml",
        )
    
    def test_margin_defaults(self):
        """Test the default margin policy in twips."""
        assert MarginPolicy().as_attributes() == {
            "top": "1440", "bottom": "1440", "left": "1440", "right": "1440",
            "header": "720", "footer": "720", "gutter": "0",
        }
    
    def test_from_dict(self):
        """Test building from plain data."""
        config = SectionProcessorConfig.from_dict({
            "terminal_marker": "the_end",
            "max_allocation_probes": "50",
            "margins": {"left": 1800, "right": "1800"},
        })
        assert config.terminal_marker == "the_end"
        assert config.max_allocation_probes == 50
        assert config.margins == MarginPolicy(left=1800, right=1800)
    
    def test_unknown_keys(self):
        """Test that unknown keys are rejected."""
        with pytest.raises(ValueError):
            SectionProcessorConfig.from_dict({"colour": "red"})
        with pytest.raises(ValueError):
            MarginPolicy.from_dict({"inside": 10})

    @pytest.mark.parametrize("data", [
        {"margins": 5},
        {"margins": ["top", 1440]},
        {"margins": {"top": "abc"}},
        {"margins": {"gutter": True}},
        {"marker_prefix": 5},
        {"max_allocation_probes": None},
    ])
    def test_wrong_value_types(self, data):
        """Test that values of the wrong type are rejected up front."""
        with pytest.raises(ValueError):
            SectionProcessorConfig.from_dict(data)

    def test_margin_policy_instance_accepted(self):
        policy = MarginPolicy(top=720)
        assert SectionProcessorConfig.from_dict({"margins": policy}).margins is policy

    def test_frozen(self):
        """Test that configs are immutable."""
        with pytest.raises(AttributeError):
            SectionProcessorConfig().marker_prefix = "<<"
