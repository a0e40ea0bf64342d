"""
Package store for DOCX files.

Reads parts from the zip container and stages modified parts in memory;
staged parts reach disk only through a single ``commit``.
"""

import os
import tempfile
import zipfile
import zlib
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union
import logging

from ..exceptions import PackageOpenError

logger = logging.getLogger(__name__)

# Corrupt members surface as zlib errors or early EOF, bad headers as BadZipFile.
ARCHIVE_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, OSError)


class PackageStore:
    """
    Reads and rewrites DOCX package contents.
    
    Parts written with ``write_part`` shadow the archive's own entries for
    every later read, so a transform sees its own staged output.
    """
    
    def __init__(self, docx_path: Union[str, Path], required_parts: Iterable[str] = ()):
        """
        Open a package.
        
        Args:
            docx_path: Path to DOCX file
            required_parts: Part names that must exist in the archive
            
        Raises:
            PackageOpenError: File missing, not a zip archive, or a required part absent
        """
        self.docx_path = Path(docx_path)
        self._zip_file: Optional[zipfile.ZipFile] = None
        self._staged: Dict[str, bytes] = {}
        self._closed = False

        self._open_package()
        self._check_required_parts(required_parts)

    def _open_package(self):
        """Open DOCX package as ZIP file."""
        if not self.docx_path.is_file():
            raise PackageOpenError("DOCX file not found", str(self.docx_path), package_path=str(self.docx_path))

        try:
            self._zip_file = zipfile.ZipFile(self.docx_path, 'r')
        except ARCHIVE_ERRORS as e:
            logger.error(f"Failed to open DOCX package: {e}")
            raise PackageOpenError("Not a valid zip package", str(e), package_path=str(self.docx_path)) from e

        logger.info(f"Opened DOCX package: {self.docx_path}")

    def _check_required_parts(self, required_parts: Iterable[str]):
        missing = [name for name in required_parts if not self.has_part(name)]
        if missing:
            self.close()
            raise PackageOpenError(
                "Required package parts missing",
                ", ".join(missing),
                package_path=str(self.docx_path),
            )

    @property
    def staged_parts(self) -> Dict[str, bytes]:
        """Parts written during this session."""
        return dict(self._staged)

    @property
    def closed(self) -> bool:
        return self._closed

    def _archive(self) -> zipfile.ZipFile:
        if self._closed or self._zip_file is None:
            raise ValueError("Package not opened")
        return self._zip_file

    def part_names(self) -> List[str]:
        """Names of all parts, archive order first, then newly staged parts."""
        names = self._archive().namelist()
        return names + [name for name in self._staged if name not in names]

    def has_part(self, part_name: str) -> bool:
        if part_name in self._staged:
            return True
        try:
            self._archive().getinfo(part_name)
        except KeyError:
            return False
        return True

    def read_part(self, part_name: str) -> Optional[bytes]:
        """
        Get raw content of a part.
        
        Args:
            part_name: Name of the part to retrieve
            
        Returns:
            Part bytes, or None if the part does not exist
        """
        if part_name in self._staged:
            return self._staged[part_name]
        if not self.has_part(part_name):
            logger.debug(f"Part not found: {part_name}")
            return None
        try:
            return self._archive().read(part_name)
        except ARCHIVE_ERRORS as e:
            raise PackageOpenError("Failed to read package part", f"{part_name}: {e}",
                                   package_path=str(self.docx_path)) from e

    def write_part(self, part_name: str, content: bytes):
        """Stage new content for a part."""
        if not isinstance(content, (bytes, bytearray)):
            raise TypeError("Part content must be bytes")
        self._archive()
        self._staged[part_name] = bytes(content)
        logger.debug(f"Staged part {part_name} ({len(content)} bytes)")

    def commit(self, output_path: Optional[Union[str, Path]] = None) -> Path:
        """
        Write the package with all staged parts.
        
        The archive is rebuilt in a temporary file next to the destination
        and moved into place in one step.
        
        Args:
            output_path: Destination (defaults to the opened package itself)
            
        Returns:
            Path of the written package
            
        Raises:
            PackageOpenError: An archive entry cannot be read or the destination cannot be written
        """
        archive = self._archive()
        destination = Path(output_path) if output_path else self.docx_path
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(prefix=".docx_", suffix=".tmp", dir=str(destination.parent))
        except OSError as e:
            logger.error(f"Cannot write DOCX package to {destination}: {e}")
            raise PackageOpenError("Failed to write package", f"{destination}: {e}",
                                   package_path=str(self.docx_path)) from e
        os.close(fd)

        try:
            with zipfile.ZipFile(temp_name, 'w', zipfile.ZIP_DEFLATED) as out_zip:
                written = set()
                for info in archive.infolist():
                    if info.filename in written:
                        continue
                    content = self._staged.get(info.filename)
                    if content is None:
                        content = archive.read(info.filename)
                    out_zip.writestr(info, content)
                    written.add(info.filename)
                for part_name, content in self._staged.items():
                    if part_name not in written:
                        out_zip.writestr(part_name, content)
                        written.add(part_name)

            # Release the read handle before replacing the file it points at.
            self.close()
            os.replace(temp_name, destination)
        except ARCHIVE_ERRORS as e:
            self._discard(temp_name)
            logger.error(f"Failed to write DOCX package {destination}: {e}")
            raise PackageOpenError("Failed to write package", f"{destination}: {e}",
                                   package_path=str(self.docx_path)) from e
        except BaseException:
            self._discard(temp_name)
            raise

        logger.info(f"Committed {len(self._staged)} part(s) to {destination}")
        return destination

    @staticmethod
    def _discard(temp_name: str):
        if os.path.exists(temp_name):
            os.remove(temp_name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the underlying archive; staged parts not committed are discarded."""
        if self._zip_file is not None:
            self._zip_file.close()
            self._zip_file = None
        if not self._closed:
            self._closed = True
            logger.debug(f"Package closed: {self.docx_path}")
