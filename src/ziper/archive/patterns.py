"""
Glob-style ignore rules.

A rule set is compiled once from user input and then asked, per walked
entry, whether the entry should be left out of the archive. A path is
excluded when the whole path matches a rule, or when any single component
of it does. The component check is what makes a bare name like
``node_modules`` drop an entire subtree without pruning the walk.
"""

import logging
import os
import re
from pathlib import PurePath
from typing import Iterable, Iterator, List, Tuple, Union

from ziper.core.errors import InvalidPattern
from ziper.core.utils import split_patterns

logger = logging.getLogger(__name__)

ERROR_WILDCARDS = "wildcards are either regular `*` or recursive `**`"
ERROR_RECURSIVE_WILDCARDS = "recursive wildcards must form a single path component"
ERROR_INVALID_RANGE = "invalid range pattern"
ERROR_EMPTY = "pattern is empty"

PathInput = Union[str, "os.PathLike[str]"]


class CompiledPattern:
    """A single glob compiled to an anchored regular expression."""

    def __init__(self, pattern: str, regex: "re.Pattern[str]"):
        self.pattern = pattern
        self.regex = regex

    def matches(self, text: str) -> bool:
        return self.regex.fullmatch(text) is not None

    def __repr__(self) -> str:
        return f"CompiledPattern({self.pattern!r})"


def _class_end(pattern: str, start: int) -> int:
    """
    Index of the "]" closing the class opened at ``start``, or -1.

    A "]" right after "[" or "[!" is a literal member, so the search for
    the closing bracket starts one character later.
    """
    first = start + 1
    if first < len(pattern) and pattern[first] == "!":
        first += 1
    return pattern.find("]", first + 1)


def _translate_class(body: str, negate: bool) -> str:
    """
    Regex for the members of one bracket class.

    "x-y" is a range when both ends are present; a reversed range holds no
    characters instead of being an error.
    """
    members: List[str] = []
    i = 0
    while i < len(body):
        if i + 2 < len(body) and body[i + 1] == "-":
            low, high = body[i], body[i + 2]
            if low <= high:
                members.append(f"{re.escape(low)}-{re.escape(high)}")
            i += 3
        else:
            members.append(re.escape(body[i]))
            i += 1
    if not members:
        return "." if negate else "(?!)"
    return f"[{'^' if negate else ''}{''.join(members)}]"


def _translate(pattern: str) -> str:
    out: List[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            run = i
            while run < n and pattern[run] == "*":
                run += 1
            count = run - i
            if count > 2:
                raise InvalidPattern(pattern, ERROR_WILDCARDS)
            if count == 2:
                starts_component = i == 0 or pattern[i - 1] == "/"
                ends_component = run == n or pattern[run] == "/"
                if not (starts_component and ends_component):
                    raise InvalidPattern(pattern, ERROR_RECURSIVE_WILDCARDS)
                if run < n:
                    # "**/" also matches zero directories
                    out.append("(?:.*/)?")
                    run += 1
                else:
                    out.append(".*")
            else:
                out.append(".*")
            i = run
        elif c == "?":
            out.append(".")
            i += 1
        elif c == "[":
            end = _class_end(pattern, i)
            if end == -1:
                raise InvalidPattern(pattern, ERROR_INVALID_RANGE)
            body = pattern[i + 1:end]
            negate = body.startswith("!")
            if negate:
                body = body[1:]
            out.append(_translate_class(body, negate))
            i = end + 1
        else:
            out.append(re.escape(c))
            i += 1
    return "".join(out)


def compile_pattern(pattern: str) -> CompiledPattern:
    """
    Compile one glob.

    Raises:
        InvalidPattern: if the glob is empty or malformed.
    """
    if not pattern:
        raise InvalidPattern(pattern, ERROR_EMPTY)
    expression = _translate(pattern)
    try:
        regex = re.compile(expression, re.DOTALL)
    except re.error as e:
        raise InvalidPattern(pattern, str(e)) from e
    return CompiledPattern(pattern, regex)


class IgnoreRuleSet:
    """
    An immutable union of compiled ignore globs.

    Order carries no meaning: any pattern matching the full path or any one
    path component excludes the entry.
    """

    def __init__(self, patterns: Iterable[CompiledPattern] = (), rejected: Iterable[InvalidPattern] = ()):
        self._patterns: Tuple[CompiledPattern, ...] = tuple(patterns)
        self._rejected: Tuple[InvalidPattern, ...] = tuple(rejected)

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> "IgnoreRuleSet":
        """
        Compile each pattern independently.

        Invalid patterns are logged and dropped; they never stop the valid
        ones from being applied.
        """
        compiled = []
        rejected = []
        for raw in patterns:
            try:
                compiled.append(compile_pattern(raw))
            except InvalidPattern as e:
                logger.warning(f"Ignoring invalid pattern {e.pattern!r}: {e.reason}")
                rejected.append(e)
        return cls(compiled, rejected)

    @classmethod
    def from_option(cls, value: Union[str, Iterable[str], None]) -> "IgnoreRuleSet":
        """Build from comma-separated input such as the --ignore option."""
        return cls.from_patterns(split_patterns(value))

    @property
    def patterns(self) -> List[str]:
        return [p.pattern for p in self._patterns]

    @property
    def rejected(self) -> List[InvalidPattern]:
        return list(self._rejected)

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self) -> Iterator[CompiledPattern]:
        return iter(self._patterns)

    def _any(self, text: str) -> bool:
        return any(p.matches(text) for p in self._patterns)

    def matches(self, path: PathInput) -> bool:
        """Return True if ``path`` should be excluded."""
        if not self._patterns:
            return False
        full = os.fspath(path)
        if self._any(full):
            return True
        return any(self._any(part) for part in PurePath(full).parts)
