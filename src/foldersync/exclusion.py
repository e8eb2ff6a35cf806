from __future__ import annotations

from pathlib import Path
import re
from typing import Iterable


_SEPARATORS = re.compile(r"[\\/]+")


def _split_pattern(pattern: str) -> tuple[str, ...]:
    return tuple(part for part in _SEPARATORS.split(pattern.strip()) if part and part != ".")


class ExclusionMatcher:
    def __init__(self, patterns: Iterable[str]) -> None:
        split = (_split_pattern(pattern) for pattern in patterns)
        self._patterns = tuple(parts for parts in split if parts)

    @property
    def patterns(self) -> tuple[tuple[str, ...], ...]:
        return self._patterns

    def __bool__(self) -> bool:
        return bool(self._patterns)

    def matches(self, candidate: Path) -> bool:
        parts = Path(candidate).parts
        for pattern in self._patterns:
            if len(pattern) <= len(parts) and parts[len(parts) - len(pattern):] == pattern:
                return True
        return False


def is_excluded(candidate_path: Path, exclusion_patterns: Iterable[str]) -> bool:
    return ExclusionMatcher(exclusion_patterns).matches(candidate_path)
