"""
FileMatcher - name-based file and application finder.

Walks a fixed set of roots to a bounded depth and scores entries whose name
contains the query.

Usage:
    fm = FileMatcher()
    results = fm.match("report")
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from lumina.exceptions import ProviderFailure
from lumina.models import OpenPath, QueryResult
from lumina.search.outcome import ProviderOutcome

logger = logging.getLogger(__name__)

PROVIDER_NAME = "files"

APPLICATION_EXTENSION = ".desktop"
APPLICATIONS_MAX_DEPTH = 2
DEFAULT_MAX_DEPTH = 3
SCORE_THRESHOLD = 0.1

# ── Icons per extension ───────────────────────────────────────────────────────
_ICONS = {
    ".rs": "🦀",
    ".js": "⚡", ".ts": "⚡", ".jsx": "⚡", ".tsx": "⚡",
    ".py": "🐍",
    ".desktop": "🚀",
    ".txt": "📄", ".md": "📄",
    ".pdf": "📕",
    ".png": "🖼️", ".jpg": "🖼️", ".jpeg": "🖼️", ".gif": "🖼️",
}
_DEFAULT_ICON = "📁"


def default_search_roots() -> List[Path]:
    """Home directory plus the system, flatpak and per-user application dirs."""
    home = Path.home()
    return [
        home,
        Path("/usr/share/applications"),
        Path("/var/lib/flatpak/exports/share/applications"),
        home / ".local" / "share" / "applications",
    ]


def max_depth_for(root: Path) -> int:
    """Application manifest dirs are shallow; general trees get one more level."""
    if "applications" in str(root):
        return APPLICATIONS_MAX_DEPTH
    return DEFAULT_MAX_DEPTH


def score_name(name: str, query: str) -> float:
    """
    Score a lower-cased file name against a lower-cased query.
    First rule that applies wins.
    """
    if name == query:
        return 1.0
    if name.startswith(query):
        return 0.8
    if query in name:
        return 0.6
    return 0.0


def file_icon(path: Path) -> str:
    return _ICONS.get(path.suffix.lower(), _DEFAULT_ICON)


def _expired(deadline: Optional[float]) -> bool:
    return deadline is not None and time.monotonic() >= deadline


class FileMatcher:
    """
    Stateless between calls: every `match` rescans the roots.
    Unreadable directories are skipped, never reported.

    A scan given a `deadline` (a `time.monotonic()` value) stops walking once
    it passes and fails instead of returning a partial list.
    """

    blocking = True

    def __init__(self, roots: Optional[Sequence[Path]] = None, extra_roots: Iterable[str] = ()):
        base = list(roots) if roots is not None else default_search_roots()
        for extra in extra_roots:
            candidate = Path(extra).expanduser()
            if candidate not in base:
                base.append(candidate)
        self.roots: List[Path] = base

    # ─────────────────────────────────────────────────────────────────────────
    #  Public
    # ─────────────────────────────────────────────────────────────────────────
    def match(self, query: str, deadline: Optional[float] = None) -> List[QueryResult]:
        """Return every entry under the roots whose name contains *query*."""
        query_lower = query.lower()
        results: List[QueryResult] = []
        if not query_lower:
            return results

        for root in self.roots:
            if not root.is_dir():
                continue
            self._walk(root, query_lower, max_depth_for(root), 1, results, deadline)

        if _expired(deadline):
            raise ProviderFailure(f"File scan ran past its deadline ({len(results)} matches so far)")

        logger.debug(f"[FileMatcher] {len(results)} matches for '{query}'")
        return results

    def search(self, query: str, deadline: Optional[float] = None) -> ProviderOutcome:
        """`match` wrapped in a provider outcome."""
        try:
            return ProviderOutcome.matched(PROVIDER_NAME, self.match(query, deadline))
        except Exception as e:
            logger.warning(f"⚠️ [FileMatcher] scan failed for '{query}': {e}")
            return ProviderOutcome.failed(PROVIDER_NAME, e)

    # ─────────────────────────────────────────────────────────────────────────
    #  Walk
    # ─────────────────────────────────────────────────────────────────────────
    def _walk(self, directory: Path, query: str, max_depth: int, depth: int,
              results: List[QueryResult], deadline: Optional[float]) -> None:
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    if _expired(deadline):
                        return
                    self._consider(entry, query, results)
                    if depth < max_depth and self._is_dir(entry):
                        self._walk(Path(entry.path), query, max_depth, depth + 1, results, deadline)
        except OSError as e:
            logger.debug(f"[FileMatcher] skipping {directory}: {e}")

    @staticmethod
    def _is_dir(entry: os.DirEntry) -> bool:
        try:
            return entry.is_dir(follow_symlinks=False)
        except OSError:
            return False

    @staticmethod
    def _consider(entry: os.DirEntry, query: str, results: List[QueryResult]) -> None:
        name = entry.name
        score = score_name(name.lower(), query)
        if score <= SCORE_THRESHOLD:
            return

        path = Path(entry.path)
        results.append(
            QueryResult(
                id=f"file_{len(results)}",
                title=name,
                description=str(path),
                icon=file_icon(path),
                action=OpenPath(
                    path=str(path),
                    application=path.suffix.lower() == APPLICATION_EXTENSION,
                ),
                score=score,
            )
        )
