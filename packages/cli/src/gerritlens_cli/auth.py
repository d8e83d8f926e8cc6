"""Credential resolution for the review backends.

Gerrit credentials always come from configuration (file, GERRIT_HTTP_*
environment variables or CLI options). The GitHub backend carries its access
token in the password slot; when none is configured, the token is taken from
GITHUB_TOKEN, then from an authenticated GitHub CLI session.
"""

from __future__ import annotations

import logging
import os
import subprocess

logger = logging.getLogger(__name__)

_GH_TOKEN_COMMAND = ["gh", "auth", "token"]


def _gh_session_token() -> str | None:
    try:
        result = subprocess.run(_GH_TOKEN_COMMAND, capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        logger.debug("GitHub CLI unavailable; no session token.")
        return None
    return (result.stdout.strip() or None) if result.returncode == 0 else None


def resolve_password(config: dict) -> str | None:
    """Return the password for the configured backend, or None. Never raises."""
    password = config.get("password")
    if password or config.get("backend") != "github":
        return password
    return os.environ.get("GITHUB_TOKEN") or _gh_session_token()
