"""
Utility functions shared across modules: pattern lists and size display.
"""

from typing import Iterable, List, Union


def split_patterns(value: Union[str, Iterable[str], None]) -> List[str]:
    """
    Split comma-separated pattern input into a flat list.

    Accepts a single string ("node_modules,.git") or an iterable of such
    strings (repeated --ignore options). Blank items are dropped.
    """
    if not value:
        return []
    if isinstance(value, str):
        value = [value]
    patterns = []
    for item in value:
        for part in item.split(","):
            part = part.strip()
            if part:
                patterns.append(part)
    return patterns


def human_size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes} B"
    size = num_bytes / 1024
    for unit in ("KB", "MB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"
