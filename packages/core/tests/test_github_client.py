"""Tests for the GitHub pull request backend."""

import types
from unittest.mock import MagicMock

import pytest
from github import GithubException
from requests.exceptions import ConnectionError as RequestsConnectionError

from gerritlens_core.errors import RemoteFetchError, RemoteSubmitError
from gerritlens_core.models import InlineComment, ReviewLabel, ReviewPayload
from gerritlens_core.naming import FileNaming
from gerritlens_core.remote.github import GitHubClient, build_review_body, get_pull

SHA = "a" * 40


def _file(filename, status="modified"):
    return types.SimpleNamespace(filename=filename, status=status)


def _setup(mocker, files=None):
    mock_pr = MagicMock()
    mock_pr.head.sha = SHA
    mock_pr.get_files.return_value = files or []
    mock_repo = MagicMock()
    mock_repo.get_pull.return_value = mock_pr
    get_repo = mocker.patch("gerritlens_core.remote.github.get_repo", return_value=mock_repo)
    client = GitHubClient(host="api.github.com", port=443, token="tok", project="owner/repo", naming=FileNaming("path"))
    return client, mock_repo, mock_pr, get_repo


class TestGetPull:
    def test_uses_pull_request_number(self):
        repo = MagicMock()
        get_pull(repo, "42")
        repo.get_pull.assert_called_once_with(42)

    def test_rejects_non_numeric_change(self):
        with pytest.raises(ValueError, match="pull request number"):
            get_pull(MagicMock(), "I8473b95934b5732ac55d26311a706c9c2bde9940")


class TestListFiles:
    def test_returns_changed_files_without_removed(self, mocker):
        client, _, _, get_repo = _setup(mocker, [_file("src/a.py"), _file("old.py", status="removed")])

        assert client.list_files("7", SHA) == {"src/a.py": "src/a.py"}
        get_repo.assert_called_once_with("owner/repo", token="tok", base_url=None)

    def test_enterprise_host_uses_api_v3_base_url(self, mocker):
        get_repo = mocker.patch("gerritlens_core.remote.github.get_repo", return_value=MagicMock())
        client = GitHubClient(host="ghe.example.com", port=8443, token="tok", project="owner/repo")
        client.list_files("7", SHA)
        assert get_repo.call_args.kwargs["base_url"] == "https://ghe.example.com:8443/api/v3"

    def test_github_error_becomes_fetch_error(self, mocker):
        client, mock_repo, _, _ = _setup(mocker)
        mock_repo.get_pull.side_effect = GithubException(404, "Not Found")
        with pytest.raises(RemoteFetchError):
            client.list_files("7", SHA)

    def test_connection_error_becomes_fetch_error(self, mocker):
        client, mock_repo, _, _ = _setup(mocker)
        mock_repo.get_pull.side_effect = RequestsConnectionError("down")
        with pytest.raises(RemoteFetchError, match="down"):
            client.list_files("7", SHA)

    def test_bad_change_id_becomes_fetch_error(self, mocker):
        client, _, _, _ = _setup(mocker)
        with pytest.raises(RemoteFetchError):
            client.list_files("not-a-number", SHA)

    def test_repo_looked_up_once(self, mocker):
        client, _, _, get_repo = _setup(mocker)
        client.list_files("7", SHA)
        client.set_review("7", SHA, ReviewPayload(label=ReviewLabel.APPROVE))
        get_repo.assert_called_once()


class TestSetReview:
    def test_creates_review_with_line_comments(self, mocker):
        client, mock_repo, mock_pr, _ = _setup(mocker)
        payload = ReviewPayload(
            label=ReviewLabel.APPROVE,
            message="Static analysis review",
            comments={"src/a.py": [InlineComment(3, "[Pylint] Severity: MAJOR, Message: x")]},
        )

        client.set_review("7", SHA, payload)

        mock_repo.get_commit.assert_called_once_with(SHA)
        kwargs = mock_pr.create_review.call_args.kwargs
        assert kwargs["event"] == "APPROVE"
        assert kwargs["commit"] is mock_repo.get_commit.return_value
        assert kwargs["comments"] == [
            {"path": "src/a.py", "line": 3, "side": "RIGHT", "body": "[Pylint] Severity: MAJOR, Message: x"}
        ]

    @pytest.mark.parametrize(
        "label, event",
        [(ReviewLabel.NEUTRAL, "COMMENT"), (ReviewLabel.REJECT, "REQUEST_CHANGES")],
    )
    def test_label_mapping(self, mocker, label, event):
        client, _, mock_pr, _ = _setup(mocker)
        client.set_review("7", SHA, ReviewPayload(label=label))
        assert mock_pr.create_review.call_args.kwargs["event"] == event

    def test_github_error_becomes_submit_error(self, mocker):
        client, _, mock_pr, _ = _setup(mocker)
        mock_pr.create_review.side_effect = GithubException(422, "Unprocessable")
        with pytest.raises(RemoteSubmitError):
            client.set_review("7", SHA, ReviewPayload(label=ReviewLabel.APPROVE))


    def test_connection_error_becomes_submit_error(self, mocker):
        client, _, mock_pr, _ = _setup(mocker)
        mock_pr.create_review.side_effect = RequestsConnectionError("down")
        with pytest.raises(RemoteSubmitError, match="down"):
            client.set_review("7", SHA, ReviewPayload(label=ReviewLabel.APPROVE))


class TestBuildReviewBody:
    def test_message_only(self):
        assert build_review_body(ReviewPayload(label=ReviewLabel.APPROVE, message="hi")) == "hi"

    def test_file_level_comments_listed(self):
        payload = ReviewPayload(
            label=ReviewLabel.APPROVE,
            message="hi",
            comments={"a.py": [InlineComment(None, "header"), InlineComment(2, "inline")]},
        )
        body = build_review_body(payload)
        assert "- `a.py`: header" in body
        assert "inline" not in body
