"""
Command-line interface for docx-sections.

Usage:
    docx-sections apply thesis.docx --sections sections.json
    docx-sections apply thesis.docx --section toc_end:lowerRoman:1 --section document_end
    docx-sections inspect thesis.docx
    docx-sections version
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .config import SectionProcessorConfig
from .exceptions import DocxSectionsError
from .models.section import SectionDescriptor
from .package.package_store import PackageStore
from .parser.relationships import RelationshipTable
from .parser.section_parser import SectionParser
from .parser.xml_tree import XmlTree
from .sections.processor import SectionProcessor
from .utils.logger import add_file_handler, get_logger
from .utils.rich_logger import get_rich_logger
from .version import __version__

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def parse_section_spec(spec: str) -> SectionDescriptor:
    """
    Parse ``marker[:format[:start]]``.

    Raises:
        argparse.ArgumentTypeError: Malformed spec
    """
    parts = spec.split(":")
    if len(parts) > 3 or not parts[0]:
        raise argparse.ArgumentTypeError(f"invalid section spec: {spec!r} (expected marker[:format[:start]])")
    marker = parts[0]
    page_number_format = parts[1] if len(parts) > 1 and parts[1] else None
    start = None
    if len(parts) == 3 and parts[2]:
        try:
            start = int(parts[2])
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid start page in section spec: {spec!r}") from None
    return SectionDescriptor(marker=marker, page_number_format=page_number_format, start=start)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="docx-sections",
        description="Insert section breaks, page numbering and footers into a DOCX package",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  docx-sections apply thesis.docx --sections sections.json
  docx-sections apply thesis.docx --section toc_end:lowerRoman:1 --section chapter1_start:decimal:1 --section document_end
  docx-sections inspect thesis.docx --json
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"docx-sections {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    apply_parser = subparsers.add_parser("apply", help="Apply section descriptors to a DOCX file")
    apply_parser.add_argument("input", help="Input DOCX file")
    apply_parser.add_argument(
        "--sections",
        help="JSON file with a list of section descriptors",
    )
    apply_parser.add_argument(
        "-s", "--section",
        action="append",
        default=[],
        type=parse_section_spec,
        metavar="SPEC",
        help="Section descriptor as marker[:format[:start]] (repeatable, applied after --sections)",
    )
    apply_parser.add_argument(
        "-o", "--output",
        help="Write the result here instead of rewriting the input",
    )
    apply_parser.add_argument(
        "--config",
        help="JSON file with processor configuration overrides",
    )
    apply_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the processing report as JSON",
    )
    apply_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    apply_parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Also write log records to this file",
    )

    inspect_parser = subparsers.add_parser("inspect", help="List the sections of a DOCX file")
    inspect_parser.add_argument("input", help="Input DOCX file")
    inspect_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON"
    )

    subparsers.add_parser("version", help="Show version information")

    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return create_parser().parse_args(argv)


def load_descriptors(path: str) -> List[SectionDescriptor]:
    """Read descriptors from a JSON list (or an object with a ``sections`` list)."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("sections", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of section descriptors")
    return [SectionDescriptor.from_dict(item) for item in data]


def load_config(path: Optional[str]) -> SectionProcessorConfig:
    if not path:
        return SectionProcessorConfig()
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return SectionProcessorConfig.from_dict(data)


def cmd_apply(args) -> int:
    """Handle apply command."""
    level = "DEBUG" if args.verbose else "INFO"
    rich = get_rich_logger("docx_sections", level)

    file_handler = None
    if args.log_file:
        try:
            file_handler = add_file_handler(rich.logger, args.log_file, level)
        except (OSError, ValueError) as e:
            rich.failure(f"Cannot open log file: {e}")
            return EXIT_USAGE

    try:
        return _apply(args, rich)
    finally:
        if file_handler is not None:
            rich.logger.removeHandler(file_handler)
            file_handler.close()


def _apply(args, rich) -> int:
    try:
        config = load_config(args.config)
        descriptors = load_descriptors(args.sections) if args.sections else []
    except (OSError, ValueError) as e:
        rich.failure(f"Invalid input: {e}")
        return EXIT_USAGE
    descriptors.extend(args.section)

    if not descriptors:
        rich.failure("No section descriptors given (use --sections or --section)")
        return EXIT_USAGE
    logger.debug(f"Applying {len(descriptors)} descriptor(s) to {args.input}")

    try:
        report = SectionProcessor(config).run(args.input, descriptors, args.output)
    except DocxSectionsError as e:
        rich.failure(f"Section processing failed: {e}")
        return EXIT_FAILED

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        rich.table("Section processing", {
            "Output": args.output or args.input,
            "Applied": ", ".join(report.applied) or "-",
            "Skipped": ", ".join(report.skipped) or "-",
            "Footers": ", ".join(f"{fmt}={rel_id}" for fmt, rel_id in report.footers.items()) or "-",
            "Terminal section": "yes" if report.terminal_applied else "no",
        })
        rich.success(f"Applied {len(report.applied)} section(s)")
    return EXIT_OK


def read_sections(input_path: str, config: Optional[SectionProcessorConfig] = None) -> List[dict]:
    """Parse every section of a package into dicts."""
    config = config or SectionProcessorConfig()
    with PackageStore(input_path, required_parts=[config.document_part]) as store:
        document = XmlTree.parse(store.read_part(config.document_part), config.document_part)
        relationships = None
        rels_bytes = store.read_part(config.document_rels_part)
        if rels_bytes:
            relationships = RelationshipTable.parse(rels_bytes, config.document_rels_part)
    return SectionParser(document, relationships).parse_sections()


def cmd_inspect(args) -> int:
    """Handle inspect command."""
    rich = get_rich_logger("docx_sections", "INFO")
    try:
        sections = read_sections(args.input)
    except DocxSectionsError as e:
        rich.failure(f"Cannot read {args.input}: {e}")
        return EXIT_FAILED

    if args.json:
        print(json.dumps(sections, indent=2))
        return EXIT_OK

    rows = []
    for index, section in enumerate(sections, start=1):
        margins = section["margins"]
        numbering = section["page_numbering"]
        rows.append([
            index,
            section["location"],
            section["break_type"] or "-",
            "/".join(str(margins[side]) for side in ("top", "right", "bottom", "left")),
            f"{numbering['format'] or '-'} @ {numbering['start'] if numbering['start'] is not None else '-'}",
            ", ".join(f"{ref['id']}->{ref['target'] or '?'}" for ref in section["footers"]) or "-",
        ])
    rich.rows(
        f"Sections in {args.input}",
        ["#", "Location", "Break", "Margins (t/r/b/l)", "Numbering", "Footers"],
        rows,
    )
    return EXIT_OK


def cmd_version(args=None) -> int:
    """Handle version command."""
    print(f"docx-sections {__version__}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "apply":
        return cmd_apply(args)
    elif args.command == "inspect":
        return cmd_inspect(args)
    elif args.command == "version":
        return cmd_version(args)

    parser.print_help()
    return EXIT_OK
