"""
Test suite for the docx_sections project.

This module contains all tests for the docx_sections package.
"""

import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
