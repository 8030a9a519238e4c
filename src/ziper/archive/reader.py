"""Read-only listing of ZIP archives.

This module lets the CLI show what a run produced without extracting
anything. It reads the central directory only; file contents and CRCs are
never checked.
"""

import os
import stat
import zipfile
from datetime import datetime
from typing import Any, Dict, List, Optional


class ArchiveReader:
    """Class for listing the contents of a ZIP archive."""

    def __init__(self, archive_path: str):
        """Initialize with path to archive ZIP file.

        Args:
            archive_path: Path to the archive zip file

        Raises:
            FileNotFoundError: If the archive file doesn't exist
            zipfile.BadZipFile: If the file is not a valid ZIP file
        """
        self.archive_path = os.fspath(archive_path)

        if not os.path.exists(self.archive_path):
            raise FileNotFoundError(f"Archive file '{self.archive_path}' not found")

        try:
            with zipfile.ZipFile(self.archive_path, 'r'):
                pass
        except zipfile.BadZipFile:
            raise zipfile.BadZipFile(f"'{self.archive_path}' is not a valid ZIP file")

    def names(self) -> List[str]:
        """Return entry names in archive order."""
        with zipfile.ZipFile(self.archive_path, 'r') as zipf:
            return zipf.namelist()

    def list_entries(self, prefix: Optional[str] = None) -> List[Dict[str, Any]]:
        """List archive entries with their sizes and stored permissions.

        Args:
            prefix: Only return entries whose name starts with this prefix

        Returns:
            List of dictionaries, one per entry
        """
        entries = []
        with zipfile.ZipFile(self.archive_path, 'r') as zipf:
            for info in zipf.infolist():
                if prefix and not info.filename.startswith(prefix):
                    continue
                entries.append(self._describe(info))
        return entries

    def get_entry(self, name: str) -> Optional[Dict[str, Any]]:
        with zipfile.ZipFile(self.archive_path, 'r') as zipf:
            try:
                return self._describe(zipf.getinfo(name))
            except KeyError:
                return None

    def get_archive_stats(self) -> Dict[str, Any]:
        """Get statistics about the archive contents.

        Returns:
            Dictionary with entry count, uncompressed and compressed totals
        """
        entries = self.list_entries()
        return {
            'archive_size': os.path.getsize(self.archive_path),
            'entries': len(entries),
            'total_size': sum(e['size'] for e in entries),
            'compressed_size': sum(e['compressed_size'] for e in entries),
            'top_level': sorted({e['name'].split('/', 1)[0] for e in entries}),
        }

    @staticmethod
    def _describe(info: zipfile.ZipInfo) -> Dict[str, Any]:
        mode = (info.external_attr >> 16) & 0o7777
        return {
            'name': info.filename,
            'size': info.file_size,
            'compressed_size': info.compress_size,
            'compression': info.compress_type,
            'mode': mode,
            'permissions': stat.filemode(stat.S_IFREG | mode) if mode else '',
            'modified': datetime(*info.date_time),
        }
