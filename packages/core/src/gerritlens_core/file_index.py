"""Lazily fetched index of the files changed in one review revision."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gerritlens_core.remote.base import BaseReviewClient

logger = logging.getLogger(__name__)


class RemoteFileIndex:
    """Maps analysis identifiers to review paths, fetched at most once per run.

    The first resolve() performs the changed-files call and caches the result,
    even when it is empty. A failed fetch leaves the cache unset and
    propagates RemoteFetchError, so a later resolve() may try again.
    """

    def __init__(self, client: BaseReviewClient, change_id: str, revision_id: str):
        self._client = client
        self._change_id = change_id
        self._revision_id = revision_id
        self._files: dict[str, str] | None = None
        self._lock = threading.Lock()

    @property
    def fetched(self) -> bool:
        return self._files is not None

    def resolve(self, analysis_id: str) -> str | None:
        """Return the review path for analysis_id, or None if it was not modified."""
        return self._mapping().get(analysis_id)

    def files(self) -> dict[str, str]:
        return dict(self._mapping())

    def _mapping(self) -> dict[str, str]:
        with self._lock:
            if self._files is None:
                files = self._client.list_files(self._change_id, self._revision_id)
                logger.info(
                    "Fetched %d changed file(s) for change %s, revision %s",
                    len(files),
                    self._change_id,
                    self._revision_id,
                )
                self._files = files
            return self._files
