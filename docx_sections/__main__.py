"""
Entry point for running docx_sections as a module.

Usage:
    python -m docx_sections apply thesis.docx --sections sections.json
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
