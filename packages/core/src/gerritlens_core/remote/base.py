"""Base review-system client implementing the Template Method pattern.

Every backend shares the same two operations:
    list_files() → _fetch_changed_paths()   ← differs per backend
                 → FileNaming.build_index()
    set_review() → _post_review()           ← differs per backend

Subclasses implement the two raw calls and translate their library's
exceptions into RemoteFetchError / RemoteSubmitError. Reconciling the
scanner's file identifiers with review paths lives here so every backend
applies it the same way.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from gerritlens_core.models import ReviewPayload
from gerritlens_core.naming import FileNaming

logger = logging.getLogger(__name__)


class BaseReviewClient(ABC):
    def __init__(self, naming: FileNaming | None = None):
        self.naming = naming or FileNaming()

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def list_files(self, change_id: str, revision_id: str) -> dict[str, str]:
        """Return analysis identifier -> review path for the revision's changed files."""
        paths = self._fetch_changed_paths(change_id, revision_id)
        index = self.naming.build_index(paths)
        for analysis_id, path in index.items():
            logger.debug("Changed file %s is known to the scanner as %s", path, analysis_id)
        return index

    def set_review(self, change_id: str, revision_id: str, payload: ReviewPayload) -> None:
        self._post_review(change_id, revision_id, payload)

    def close(self) -> None:
        """Release any resources held by the client.

        Default is a no-op so callers can always call close() safely.
        """

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # ------------------------------------------------------------------ #
    # Abstract — implement in each backend                                #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _fetch_changed_paths(self, change_id: str, revision_id: str) -> list[str]:
        """Return the review-system paths changed in the revision.

        Must raise RemoteFetchError on any transport or protocol failure.
        """

    @abstractmethod
    def _post_review(self, change_id: str, revision_id: str, payload: ReviewPayload) -> None:
        """Post the review. Must raise RemoteSubmitError on failure."""
