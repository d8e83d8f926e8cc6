"""Accumulate inline comments across per-file callbacks."""

from __future__ import annotations

import logging
import threading
from typing import Iterable

from gerritlens_core.models import InlineComment

logger = logging.getLogger(__name__)


class CommentAggregator:
    """Review path -> ordered comments, filled in one file at a time.

    Recording a path that is already present replaces its comments. If the
    host delivers the same file twice in one run, the first delivery is lost;
    that matches the host contract of one callback per file.
    """

    def __init__(self):
        self._comments: dict[str, list[InlineComment]] = {}
        self._lock = threading.Lock()

    def record(self, path: str, comments: Iterable[InlineComment]) -> None:
        entries = list(comments)
        with self._lock:
            if path in self._comments:
                logger.warning("Replacing %d comment(s) already recorded for %s", len(self._comments[path]), path)
            self._comments[path] = entries

    def snapshot(self) -> dict[str, list[InlineComment]]:
        with self._lock:
            return {path: list(entries) for path, entries in self._comments.items()}

    def total_comments(self) -> int:
        with self._lock:
            return sum(len(entries) for entries in self._comments.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._comments)
