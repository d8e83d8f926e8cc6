"""GitHub pull request backend.

Maps the review-system vocabulary onto GitHub: the change id is the pull
request number, the revision id is the head commit SHA and the project is the
``owner/name`` repository. The password slot carries the access token.
"""

from __future__ import annotations

import logging

from github import Github, GithubException
from requests.exceptions import RequestException

from gerritlens_core.errors import RemoteFetchError, RemoteSubmitError
from gerritlens_core.models import ReviewLabel, ReviewPayload
from gerritlens_core.naming import FileNaming
from gerritlens_core.remote.base import BaseReviewClient

logger = logging.getLogger(__name__)

PUBLIC_API_HOST = "api.github.com"

_EVENTS = {
    ReviewLabel.APPROVE: "APPROVE",
    ReviewLabel.NEUTRAL: "COMMENT",
    ReviewLabel.REJECT: "REQUEST_CHANGES",
}


def get_repo(repo_name: str, token: str, base_url: str | None = None):
    if base_url:
        return Github(token, base_url=base_url).get_repo(repo_name)
    return Github(token).get_repo(repo_name)


def get_pull(repo, change_id: str):
    try:
        number = int(change_id)
    except (TypeError, ValueError):
        raise ValueError(f"GitHub change id must be a pull request number, got {change_id!r}")
    return repo.get_pull(number)


def build_review_body(payload: ReviewPayload) -> str:
    """Review description, with file-level comments appended as a list.

    GitHub review comments must point at a line, so comments without one are
    folded into the body instead.
    """
    lines = [payload.message] if payload.message else []
    file_level = [(path, c) for path, comments in payload.comments.items() for c in comments if c.is_file_level]
    if file_level:
        lines.append("")
        for path, comment in file_level:
            lines.append(f"- `{path}`: {comment.message}")
    return "\n".join(lines)


class GitHubClient(BaseReviewClient):
    def __init__(
        self,
        host: str,
        port: int,
        token: str,
        project: str,
        naming: FileNaming | None = None,
    ):
        super().__init__(naming)
        self._token = token
        self._project = project
        self._base_url = None if host == PUBLIC_API_HOST else f"https://{host}:{port}/api/v3"
        self._repo = None

    def _get_repo(self):
        if self._repo is None:
            self._repo = get_repo(self._project, token=self._token, base_url=self._base_url)
        return self._repo

    def _fetch_changed_paths(self, change_id: str, revision_id: str) -> list[str]:
        try:
            pr = get_pull(self._get_repo(), change_id)
            head_sha = pr.head.sha
            files = list(pr.get_files())
        except (GithubException, RequestException, ValueError) as e:
            raise RemoteFetchError(f"Could not list files of pull request {change_id}: {e}") from e

        if head_sha != revision_id:
            logger.warning("Pull request %s head is %s, not the analysed revision %s", change_id, head_sha, revision_id)
        return [f.filename for f in files if f.status != "removed"]

    def _post_review(self, change_id: str, revision_id: str, payload: ReviewPayload) -> None:
        comments = [
            {"path": path, "line": c.line, "side": "RIGHT", "body": c.message}
            for path, entries in payload.comments.items()
            for c in entries
            if not c.is_file_level
        ]
        try:
            repo = self._get_repo()
            pr = get_pull(repo, change_id)
            pr.create_review(
                commit=repo.get_commit(revision_id),
                body=build_review_body(payload),
                event=_EVENTS[payload.label],
                comments=comments,
            )
        except (GithubException, RequestException, ValueError) as e:
            raise RemoteSubmitError(f"Could not post review on pull request {change_id}: {e}") from e
