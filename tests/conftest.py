"""
Pytest configuration for docx-sections
"""

import pytest
import logging
import sys
import zipfile
from pathlib import Path


W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
R_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

BASE_SECT_PR = '''<w:sectPr>
      <w:pgSz w:w="11906" w:h="16838"/>
      <w:pgMar w:top="720" w:right="2000" w:bottom="720" w:left="2000" w:header="708" w:footer="708" w:gutter="100"/>
      <w:pgNumType w:fmt="upperRoman" w:start="5"/>
      <w:cols w:space="708"/>
      <w:docGrid w:linePitch="360"/>
    </w:sectPr>'''


def build_document_xml(paragraphs, sect_pr=BASE_SECT_PR):
    """Build document.xml from paragraph texts; entries starting with ``<w:p`` are used verbatim."""
    body = []
    for text in paragraphs:
        if text.startswith("<w:p"):
            body.append(text)
        else:
            body.append(f'<w:p><w:r><w:t xml:space="preserve">{text}</w:t></w:r></w:p>')
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'
        f'<w:document xmlns:w="{W_NS}" xmlns:r="{R_NS}">'
        f'<w:body>{"".join(body)}{sect_pr or ""}</w:body>'
        '</w:document>'
    )


DEFAULT_PARAGRAPHS = [
    "Title page",
    "Table of contents",
    "[[SECTION_BREAK:toc_end]]",
    "Chapter 1",
    '<w:p><w:pPr><w:jc w:val="center"/></w:pPr><w:r><w:t xml:space="preserve">Intro </w:t></w:r>'
    '<w:r><w:t>[[SECTION_BREAK:chapter1_start]]</w:t></w:r></w:p>',
    "Body text of chapter one",
]

DOCUMENT_RELS = '''<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
    <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/styles" Target="styles.xml"/>
    <Relationship Id="rId2" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/settings" Target="settings.xml"/>
    <Relationship Id="rId7" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/fontTable" Target="fontTable.xml"/>
    <Relationship Id="rIdCustom" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/theme" Target="theme/theme1.xml"/>
</Relationships>'''

CONTENT_TYPES = '''<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
    <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
    <Default Extension="xml" ContentType="application/xml"/>
    <Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
    <Override PartName="/word/styles.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.styles+xml"/>
</Types>'''


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory for tests."""
    return Path(tmp_path)


@pytest.fixture
def sample_zip_content():
    """Parts of a minimal assembled thesis package with two section markers."""
    return {
        '[Content_Types].xml': CONTENT_TYPES,
        '_rels/.rels': '''<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
    <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>''',
        'word/document.xml': build_document_xml(DEFAULT_PARAGRAPHS),
        'word/_rels/document.xml.rels': DOCUMENT_RELS,
        'word/styles.xml': f'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n<w:styles xmlns:w="{W_NS}"/>',
    }


@pytest.fixture
def make_docx(temp_dir):
    """Factory writing a dict of parts into a DOCX zip."""
    def _make(parts, name="test.docx"):
        docx_path = temp_dir / name
        with zipfile.ZipFile(docx_path, 'w', zipfile.ZIP_DEFLATED) as zf:
            for filename, content in parts.items():
                zf.writestr(filename, content)
        return docx_path
    return _make


@pytest.fixture
def corrupt_member():
    """Factory flipping one byte inside a member's compressed data, in place."""
    def _corrupt(docx_path, member):
        with zipfile.ZipFile(docx_path) as zf:
            info = zf.getinfo(member)
        data = bytearray(docx_path.read_bytes())
        header = info.header_offset
        name_len = int.from_bytes(data[header + 26:header + 28], "little")
        extra_len = int.from_bytes(data[header + 28:header + 30], "little")
        start = header + 30 + name_len + extra_len
        data[start + info.compress_size // 2] ^= 0xFF
        docx_path.write_bytes(bytes(data))
        return docx_path
    return _corrupt


MEDIA_BYTES = bytes(range(256)) * 64


@pytest.fixture
def sample_docx(make_docx, sample_zip_content):
    """DOCX file built from ``sample_zip_content``."""
    return make_docx(sample_zip_content)


@pytest.fixture
def build_document():
    """The ``build_document_xml`` helper."""
    return build_document_xml


@pytest.fixture
def thesis_sections():
    """Descriptor list used by the export pipeline for a thesis."""
    return [
        {"marker": "toc_end", "pageNumberFormat": "lowerRoman", "start": 1},
        {"marker": "chapter1_start", "pageNumberFormat": "decimal", "start": 1},
        {"marker": "document_end"},
    ]


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    logging.raiseExceptions = False


def pytest_collection_modifyitems(config, items):
    """Mark every test that is not an integration test as a unit test."""
    for item in items:
        if "integration" not in item.keywords:
            item.add_marker(pytest.mark.unit)
