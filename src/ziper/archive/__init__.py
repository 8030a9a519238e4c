# src/ziper/archive/__init__.py
from ziper.archive.builder import ArchiveBuilder, ArchiveReport, RunState
from ziper.archive.patterns import IgnoreRuleSet, compile_pattern
from ziper.archive.reader import ArchiveReader
from ziper.archive.service import create_archive, default_output_path
from ziper.archive.walker import EntryKind, TreeWalker, WalkEntry

__all__ = [
    'ArchiveBuilder',
    'ArchiveReport',
    'RunState',
    'IgnoreRuleSet',
    'compile_pattern',
    'ArchiveReader',
    'create_archive',
    'default_output_path',
    'EntryKind',
    'TreeWalker',
    'WalkEntry'
]
