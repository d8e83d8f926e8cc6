"""Reconcile the analysis tool's file identifiers with review-system paths.

The review system knows a file by its repository path
(``src/main/java/pl/touk/Foo.java``) while the scanner reports its own "long
name" (``pl.touk.Foo``). The index built here maps the scanner's identifier
back to the review path so findings can be attached to the right file.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from typing import Iterable

NAMING_PATH = "path"
NAMING_QUALIFIED = "qualified"

DEFAULT_SOURCE_ROOTS = ("src/main/java/", "src/test/java/")
DEFAULT_SOURCE_EXTENSIONS = (".java",)

logger = logging.getLogger(__name__)


def qualified_name(path: str, source_roots: Iterable[str] = DEFAULT_SOURCE_ROOTS) -> str:
    """Return the scanner's long name for a review path.

    The first matching source root is stripped, then the extension, and the
    remaining directories become dot-separated segments. Paths outside every
    source root are returned unchanged.
    """
    for root in source_roots:
        prefix = root.rstrip("/") + "/"
        if path.startswith(prefix):
            stem, _ = posixpath.splitext(path[len(prefix) :])
            return stem.replace("/", ".")
    return path


@dataclass(frozen=True)
class FileNaming:
    """Strategy for deriving an analysis identifier from a review path."""

    mode: str = NAMING_QUALIFIED
    source_roots: tuple[str, ...] = field(default=DEFAULT_SOURCE_ROOTS)
    source_extensions: tuple[str, ...] = field(default=DEFAULT_SOURCE_EXTENSIONS)

    def __post_init__(self):
        if self.mode not in (NAMING_PATH, NAMING_QUALIFIED):
            raise ValueError(f"Unknown naming mode: {self.mode!r}. Choose 'path' or 'qualified'.")

    @classmethod
    def from_settings(cls, settings: dict) -> FileNaming:
        roots = settings.get("source_roots") or DEFAULT_SOURCE_ROOTS
        extensions = settings.get("source_extensions") or DEFAULT_SOURCE_EXTENSIONS
        return cls(
            mode=settings.get("naming") or NAMING_QUALIFIED,
            source_roots=tuple(roots),
            source_extensions=tuple(extensions),
        )

    def analysis_id(self, review_path: str) -> str:
        if self.mode == NAMING_PATH:
            return review_path
        return qualified_name(review_path, self.source_roots)

    def build_index(self, review_paths: Iterable[str]) -> dict[str, str]:
        """Map analysis identifier -> review path for every changed file.

        Several paths can share an identifier (``Foo.java`` and ``Foo.xml``).
        When exactly one of them has a source extension it wins; otherwise the
        identifier is left out of the index.
        """
        candidates: dict[str, list[str]] = {}
        for path in review_paths:
            candidates.setdefault(self.analysis_id(path), []).append(path)

        index = {}
        for analysis_id, paths in candidates.items():
            if len(paths) == 1:
                index[analysis_id] = paths[0]
                continue
            sources = [p for p in paths if posixpath.splitext(p)[1] in self.source_extensions]
            if len(sources) == 1:
                logger.debug("%s matches %s; ignoring %s", analysis_id, sources[0], ", ".join(paths))
                index[analysis_id] = sources[0]
            else:
                logger.warning(
                    "Ambiguous file identifier %s matches %s; findings will not be posted",
                    analysis_id,
                    ", ".join(paths),
                )
        return index
