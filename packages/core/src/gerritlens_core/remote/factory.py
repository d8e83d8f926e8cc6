from __future__ import annotations

from typing import TYPE_CHECKING

from gerritlens_core.naming import FileNaming
from gerritlens_core.remote.gerrit import GerritClient
from gerritlens_core.remote.github import GitHubClient

if TYPE_CHECKING:
    from gerritlens_core.config import ReviewConfig
    from gerritlens_core.remote.base import BaseReviewClient


def build_client(settings: dict, config: ReviewConfig) -> BaseReviewClient:
    """Instantiate the configured review-system backend."""
    naming = FileNaming.from_settings(settings)
    backend = settings.get("backend", "gerrit")
    if backend == "gerrit":
        return GerritClient(
            host=config.host,
            port=config.port,
            username=config.username,
            password=config.password,
            scheme=settings.get("scheme", "http"),
            auth=settings.get("auth", "digest"),
            timeout=settings.get("timeout"),
            naming=naming,
        )
    if backend == "github":
        return GitHubClient(
            host=config.host,
            port=config.port,
            token=config.password,
            project=config.project,
            naming=naming,
        )
    raise ValueError(f"Unknown review backend: {backend!r}. Choose 'gerrit' or 'github'.")
