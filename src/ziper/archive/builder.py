"""
Streams walked entries into a single ZIP archive.

Every entry is handled on its own: a file that cannot be opened, added or
copied is logged and left out while the run carries on. Only two failures
end a run early, creating the output file and finalizing it, and both are
raised as FatalArchiveError subclasses.
"""

import logging
import os
import shutil
import stat
import zipfile
from enum import Enum
from typing import BinaryIO, Iterable, List, Optional, Union

from pydantic import BaseModel, Field

from ziper.archive.patterns import IgnoreRuleSet
from ziper.archive.walker import EntryKind, WalkEntry
from ziper.core.errors import (
    EntryAccessError,
    EntryError,
    FileOpenError,
    FinalizationError,
    RecordWriteError,
    SinkCreationError,
)
from ziper.core.paths import SourceRoot

logger = logging.getLogger(__name__)

COMPRESSION = zipfile.ZIP_DEFLATED
# rwxr-xr-x for every record, whatever the source file's own mode is
FILE_PERMISSIONS = 0o755
COPY_CHUNK_SIZE = 1024 * 1024

Sink = Union[str, "os.PathLike[str]", BinaryIO]


class RunState(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


class SkippedEntry(BaseModel):
    path: str
    reason: str


class ArchiveReport(BaseModel):
    """Outcome of one archive run."""
    output: str
    state: RunState = RunState.RUNNING
    added: List[str] = Field(default_factory=list)
    ignored: List[str] = Field(default_factory=list)
    skipped: List[SkippedEntry] = Field(default_factory=list)
    rejected_patterns: List[str] = Field(default_factory=list)
    bytes_read: int = 0

    @property
    def warnings(self) -> int:
        return len(self.skipped) + len(self.rejected_patterns)

    def skip(self, path: str, reason: str) -> None:
        self.skipped.append(SkippedEntry(path=path, reason=reason))


def _sink_name(output: Sink) -> str:
    if isinstance(output, (str, os.PathLike)):
        return os.fspath(output)
    return getattr(output, "name", "<stream>")


class ArchiveBuilder:
    """
    Writes the files of one walk into a ZIP archive.

    Args:
        rules: Ignore rules tested against each entry.
        compress_level: zlib level 0-9, None for the zlib default.
        exclude_paths: Paths never archived, typically the output file itself
            when it sits inside the source tree.
    """

    def __init__(
        self,
        rules: Optional[IgnoreRuleSet] = None,
        compress_level: Optional[int] = None,
        exclude_paths: Iterable[str] = (),
    ):
        self.rules = rules or IgnoreRuleSet()
        self.compress_level = compress_level
        self.exclude_paths = {os.path.abspath(p) for p in exclude_paths}
        # Report of the latest build, kept when a run raises
        self.report: Optional[ArchiveReport] = None

    def is_ignored(self, root: SourceRoot, entry: WalkEntry) -> bool:
        relative = "/".join(root.relative_parts(entry.path))
        if relative and self.rules.matches(relative):
            return True
        return self.rules.matches(entry.path)

    def build(self, root: SourceRoot, entries: Iterable[WalkEntry], output: Sink) -> ArchiveReport:
        """
        Archive ``entries`` into ``output``.

        Raises:
            SinkCreationError: if the output archive cannot be created.
            FinalizationError: if the archive cannot be finalized.
        """
        report = self.report = ArchiveReport(output=_sink_name(output))
        report.rejected_patterns = [e.pattern for e in self.rules.rejected]

        try:
            archive = zipfile.ZipFile(output, "w", compression=COMPRESSION, compresslevel=self.compress_level)
        except (OSError, ValueError) as e:
            report.state = RunState.ABORTED
            logger.error(f"Failed to create zip file {report.output}: {e}")
            raise SinkCreationError(report.output, e) from e

        try:
            for entry in entries:
                self._add_entry(archive, root, entry, report)
        except BaseException as e:
            report.state = RunState.ABORTED
            logger.error(f"Archive run aborted, {report.output} left unfinished: {e!r}")
            self._abandon(archive)
            raise

        try:
            archive.close()
        except (OSError, ValueError, zipfile.LargeZipFile) as e:
            report.state = RunState.ABORTED
            logger.error(f"Failed to finalize zip file {report.output}: {e}")
            raise FinalizationError(report.output, e) from e

        report.state = RunState.COMPLETED
        return report

    def _add_entry(self, archive: zipfile.ZipFile, root: SourceRoot, entry: WalkEntry, report: ArchiveReport) -> None:
        if entry.kind is EntryKind.ERROR:
            self._warn(report, EntryAccessError(entry.path, entry.error))
            return

        if self.is_ignored(root, entry):
            logger.info(f"Ignoring: {entry.path}")
            report.ignored.append(entry.path)
            return

        if entry.kind is EntryKind.DIRECTORY:
            return

        if entry.kind is not EntryKind.FILE:
            logger.warning(f"Skipping non-regular file: {entry.path}")
            report.skip(entry.path, f"not a regular file ({entry.kind.value})")
            return

        if os.path.abspath(entry.path) in self.exclude_paths:
            logger.warning(f"Skipping output archive: {entry.path}")
            report.skip(entry.path, "output archive")
            return

        self._add_file(archive, root.archive_path(entry.path), entry.path, report)

    def _add_file(self, archive: zipfile.ZipFile, arcname: str, path: str, report: ArchiveReport) -> None:
        try:
            source = open(path, "rb")
        except OSError as e:
            self._warn(report, FileOpenError(path, e))
            return

        with source:
            logger.info(f"Adding: {arcname}")
            try:
                info = self._record_info(arcname, path, self.compress_level)
                dest = archive.open(info, "w")
            except (OSError, ValueError, RuntimeError, zipfile.LargeZipFile) as e:
                self._warn(report, RecordWriteError(path, e))
                return

            try:
                with dest:
                    shutil.copyfileobj(source, dest, COPY_CHUNK_SIZE)
            except (OSError, ValueError, RuntimeError, zipfile.LargeZipFile) as e:
                self._discard_record(archive, info)
                logger.warning(f"Failed to copy file {path}: {e}")
                report.skip(path, str(e))
                return

        report.added.append(arcname)
        report.bytes_read += info.file_size

    @staticmethod
    def _record_info(arcname: str, path: str, compress_level: Optional[int]) -> zipfile.ZipInfo:
        info = zipfile.ZipInfo.from_file(path, arcname, strict_timestamps=False)
        info.compress_type = COMPRESSION
        info.external_attr = (stat.S_IFREG | FILE_PERMISSIONS) << 16
        # ZipFile.write sets the level the same way; ZipInfo has no public setter before 3.13
        info._compresslevel = compress_level
        return info

    @staticmethod
    def _discard_record(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> None:
        """Drop a partly written record from the central directory."""
        if info in archive.filelist:
            archive.filelist.remove(info)
        if archive.NameToInfo.get(info.filename) is info:
            del archive.NameToInfo[info.filename]

    @staticmethod
    def _abandon(archive: zipfile.ZipFile) -> None:
        """Release the output without writing a central directory."""
        fp, archive.fp = archive.fp, None
        if fp is not None and not archive._filePassed:
            fp.close()

    @staticmethod
    def _warn(report: ArchiveReport, error: EntryError) -> None:
        logger.warning(str(error))
        report.skip(error.path, str(error.cause) if error.cause is not None else str(error))
