"""Gerrit Code Review REST backend."""

from __future__ import annotations

import json
import logging
from urllib.parse import quote

import httpx

from gerritlens_core.errors import RemoteFetchError, RemoteSubmitError
from gerritlens_core.models import ReviewPayload
from gerritlens_core.naming import FileNaming
from gerritlens_core.remote.base import BaseReviewClient

logger = logging.getLogger(__name__)

# Gerrit prefixes every JSON response with this line to defeat XSSI.
XSSI_PREFIX = ")]}'"

# Entries Gerrit lists alongside real files in a revision.
MAGIC_FILES = frozenset({"/COMMIT_MSG", "/MERGE_LIST", "/PATCHSET_LEVEL"})

_AUTH_SCHEMES = {"digest": httpx.DigestAuth, "basic": httpx.BasicAuth}


def parse_gerrit_json(text: str):
    """Decode a Gerrit REST response body, stripping the anti-XSSI line."""
    if text.startswith(XSSI_PREFIX):
        text = text[len(XSSI_PREFIX) :]
    return json.loads(text)


class GerritClient(BaseReviewClient):
    """Talks to Gerrit's authenticated (``/a/``) REST endpoints."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        scheme: str = "http",
        auth: str = "digest",
        timeout: float | None = None,
        naming: FileNaming | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        super().__init__(naming)
        if auth not in _AUTH_SCHEMES:
            raise ValueError(f"Unknown Gerrit auth scheme: {auth!r}. Choose 'digest' or 'basic'.")
        self._http = httpx.Client(
            base_url=f"{scheme}://{host}:{port}",
            auth=_AUTH_SCHEMES[auth](username, password),
            timeout=timeout,
            transport=transport,
        )

    @staticmethod
    def revision_url(change_id: str, revision_id: str) -> str:
        return f"/a/changes/{quote(str(change_id), safe='')}/revisions/{quote(str(revision_id), safe='')}"

    def _fetch_changed_paths(self, change_id: str, revision_id: str) -> list[str]:
        url = self.revision_url(change_id, revision_id) + "/files/"
        try:
            response = self._http.get(url, headers={"Accept": "application/json"})
            response.raise_for_status()
            files = parse_gerrit_json(response.text)
        except httpx.HTTPError as e:
            raise RemoteFetchError(f"Could not list files of change {change_id}: {e}") from e
        except ValueError as e:
            raise RemoteFetchError(f"Malformed file list for change {change_id}: {e}") from e

        if not isinstance(files, dict):
            raise RemoteFetchError(f"Malformed file list for change {change_id}: expected an object")

        paths = []
        for path, info in files.items():
            if path in MAGIC_FILES:
                continue
            if isinstance(info, dict) and info.get("status") == "D":
                logger.debug("Skipping deleted file %s", path)
                continue
            paths.append(path)
        return paths

    def _post_review(self, change_id: str, revision_id: str, payload: ReviewPayload) -> None:
        url = self.revision_url(change_id, revision_id) + "/review"
        body = {
            "message": payload.message,
            "labels": {payload.label_name: payload.label.value},
            "comments": payload.comment_dicts(),
        }
        try:
            response = self._http.post(url, json=body)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RemoteSubmitError(f"Could not set review on change {change_id}: {e}") from e

    def close(self) -> None:
        self._http.close()
