"""
One-call archive runs: resolve paths, compile ignore rules, walk and build.
"""

import logging
import os
from typing import Iterable, Optional, Union

from ziper.archive.builder import ArchiveBuilder, ArchiveReport
from ziper.archive.patterns import IgnoreRuleSet
from ziper.archive.walker import TreeWalker
from ziper.core.config import Settings, default_settings
from ziper.core.errors import SinkCreationError, SourceNotFoundError
from ziper.core.paths import normalize_source

logger = logging.getLogger(__name__)

PathArg = Union[str, "os.PathLike[str]"]


def default_output_path(source: PathArg, settings: Optional[Settings] = None) -> str:
    """``<name>.zip`` in the current directory, named after the source."""
    settings = settings or default_settings()
    root = normalize_source(os.fspath(source), settings.default_root_name)
    return f"{root.name}.zip"


def ensure_output_dir(output: str) -> None:
    parent = os.path.dirname(output)
    if not parent or os.path.isdir(parent):
        return
    try:
        os.makedirs(parent, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create output directory {parent}: {e}")
        raise SinkCreationError(output, e) from e


def create_archive(
    source: PathArg,
    output: Optional[PathArg] = None,
    ignore_patterns: Iterable[str] = (),
    settings: Optional[Settings] = None,
) -> ArchiveReport:
    """
    Archive the tree at ``source`` into a ZIP file.

    Args:
        source: File or directory to archive.
        output: Destination archive; defaults to ``<source name>.zip``.
        ignore_patterns: Globs excluding entries, added to the configured defaults.
        settings: Explicit configuration; built-in defaults when omitted. The
            environment is only read by callers that load settings themselves.

    Returns:
        The ArchiveReport of the finished run.

    Raises:
        SourceNotFoundError: before any output is created, if source is missing.
        SinkCreationError: if the output file (or its directory) cannot be created.
        FinalizationError: if the archive cannot be finalized.
    """
    settings = settings or default_settings()
    root = normalize_source(os.fspath(source), settings.default_root_name)
    if not os.path.exists(root.path):
        logger.error(f"Source path does not exist: {root.path}")
        raise SourceNotFoundError(root.path)

    output = os.fspath(output) if output is not None else default_output_path(source, settings)
    ensure_output_dir(output)

    rules = IgnoreRuleSet.from_patterns(settings.default_ignore_patterns() + list(ignore_patterns))
    walker = TreeWalker(
        root.path,
        same_file_system=settings.same_file_system,
        sort_entries=settings.sort_entries,
    )
    builder = ArchiveBuilder(rules, compress_level=settings.compress_level, exclude_paths=[output])

    logger.info(f"Compressing {root.path} to {output}")
    report = builder.build(root, walker, output)
    logger.info(f"Successfully created {output}")
    return report
