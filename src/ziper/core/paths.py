"""
Lexical source path normalization.

Nothing here touches the filesystem: "." segments and repeated separators
are dropped and "a/.." pairs are folded, but symlinks are left alone.
"""

import os
from typing import Tuple

from pydantic import BaseModel

DEFAULT_ROOT_NAME = "archive"


class SourceRoot(BaseModel):
    """The cleaned source path and the name every archive entry lives under."""
    path: str
    name: str

    model_config = {"frozen": True}

    def relative_parts(self, entry_path: str) -> Tuple[str, ...]:
        """
        Components of ``entry_path`` below the root.

        Only valid for paths the walker produced under this root, so the
        result never contains "..".
        """
        if entry_path == self.path:
            return ()
        rel = os.path.relpath(entry_path, self.path)
        return tuple(part for part in rel.split(os.sep) if part and part != ".")

    def archive_path(self, entry_path: str) -> str:
        """
        Map a walked path to its name inside the archive.

        Names that are not valid UTF-8 on disk are stored with U+FFFD in
        place of the undecodable bytes.
        """
        parts = (self.name,) + self.relative_parts(entry_path)
        return "/".join(_lossy_name(part) for part in parts)


def _lossy_name(part: str) -> str:
    return os.fsencode(part).decode("utf-8", "replace")


def clean_path(raw: str) -> str:
    if not raw:
        raise ValueError("Source path must not be empty")
    cleaned = os.path.normpath(raw)
    # normpath keeps a leading "//" on POSIX; collapse it like any other run
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def root_name(cleaned: str, default: str = DEFAULT_ROOT_NAME) -> str:
    name = os.path.basename(cleaned.rstrip(os.sep))
    if name in ("", ".", ".."):
        return default
    return name


def normalize_source(raw: str, default_name: str = DEFAULT_ROOT_NAME) -> SourceRoot:
    cleaned = clean_path(raw)
    return SourceRoot(path=cleaned, name=root_name(cleaned, default_name))
