"""Parse allow/deny list text into compiled full-match patterns."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SPLIT_PATTERN = re.compile(r"[,\r\n]+")


@dataclass(frozen=True)
class InvalidPattern:
    """A list entry that did not compile."""

    text: str
    error: str


@dataclass(frozen=True)
class PatternSet:
    """Ordered, deduplicated set of compiled branch name patterns."""

    patterns: tuple[re.Pattern[str], ...] = ()
    invalid: tuple[InvalidPattern, ...] = ()

    @property
    def sources(self) -> tuple[str, ...]:
        return tuple(pattern.pattern for pattern in self.patterns)

    def matches(self, name: str) -> bool:
        """Return True when any pattern matches the whole name."""
        return any(pattern.fullmatch(name) for pattern in self.patterns)

    def __iter__(self) -> Iterator[re.Pattern[str]]:
        return iter(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)

    def __bool__(self) -> bool:
        return bool(self.patterns)


EMPTY_PATTERN_SET = PatternSet()


def split_pattern_text(raw: str | None) -> tuple[str, ...]:
    """Split list text on commas/newlines, trim, drop empties, dedup by text."""
    if raw is None:
        return ()
    trimmed = raw.strip()
    if not trimmed:
        return ()

    entries: list[str] = []
    seen: set[str] = set()
    for token in SPLIT_PATTERN.split(trimmed):
        cleaned = token.strip()
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            entries.append(cleaned)
    return tuple(entries)


def parse_pattern_list(raw: str | None) -> PatternSet:
    """Compile list text into a PatternSet, skipping invalid entries."""
    entries = split_pattern_text(raw)
    if not entries:
        return EMPTY_PATTERN_SET

    compiled: list[re.Pattern[str]] = []
    invalid: list[InvalidPattern] = []
    for entry in entries:
        try:
            compiled.append(re.compile(entry))
        except re.error as exc:
            logger.warning("Invalid regex in branch filter list: %s (%s)", entry, exc)
            invalid.append(InvalidPattern(text=entry, error=str(exc)))
    return PatternSet(patterns=tuple(compiled), invalid=tuple(invalid))
