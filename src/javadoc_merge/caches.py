# --- Per-engine caches -------------------------------------------------------
import logging
import os
import re
from typing import Optional

log = logging.getLogger(__name__)


class PatternCache:
    """
    Compiled regular expressions keyed by pattern text and flags.
    Meant for patterns built at runtime (package names, page prefixes,
    widths) that repeat across many declarations of one class. Owned by a
    single MergeEngine, so it is never shared between worker threads.
    """

    def __init__(self):
        self._patterns: dict[tuple[str, int], re.Pattern] = {}

    def get(self, pattern: str, flags: int = 0) -> re.Pattern:
        key = (pattern, flags)
        compiled = self._patterns.get(key)
        if compiled is None:
            compiled = re.compile(pattern, flags)
            self._patterns[key] = compiled
        return compiled

    def __len__(self) -> int:
        return len(self._patterns)


class DirectoryListingCache:
    """
    Remembers the listing of the most recently queried directory.
    Source trees are processed package by package, so consecutive lookups
    of inner-class pages mostly hit the same documentation directory.
    """

    def __init__(self):
        self._directory: Optional[str] = None
        self._entries: tuple[str, ...] = ()

    def list(self, directory: str) -> tuple[str, ...]:
        directory = os.path.normpath(directory)
        if directory != self._directory:
            log.debug("Listing documentation directory %s", directory)
            try:
                self._entries = tuple(sorted(os.listdir(directory)))
            except OSError:
                self._entries = ()
            self._directory = directory
        return self._entries
