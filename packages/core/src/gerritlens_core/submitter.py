"""Build and post the single review submission for a run."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gerritlens_core.models import InlineComment, ReviewLabel, ReviewPayload

if TYPE_CHECKING:
    from gerritlens_core.config import ReviewConfig
    from gerritlens_core.remote.base import BaseReviewClient

logger = logging.getLogger(__name__)


def determine_label(comments: dict[str, list[InlineComment]]) -> ReviewLabel:
    """Outcome label for a completed run.

    Findings are advisory at this layer: a run that reached submission is
    always approved, whatever its comments say.
    """
    return ReviewLabel.APPROVE


class ReviewSubmitter:
    def __init__(self, client: BaseReviewClient, label_name: str = "Code-Review", message: str = ""):
        self._client = client
        self._label_name = label_name
        self._message = message

    def build_payload(self, comments: dict[str, list[InlineComment]]) -> ReviewPayload:
        return ReviewPayload(
            label=determine_label(comments),
            label_name=self._label_name,
            message=self._message,
            comments={path: list(entries) for path, entries in comments.items()},
        )

    def submit(self, config: ReviewConfig, comments: dict[str, list[InlineComment]]) -> ReviewPayload:
        """Post one review; raises RemoteSubmitError and never retries."""
        payload = self.build_payload(comments)
        logger.info(
            "Submitting %s review with %d comment(s) across %d file(s) to change %s, revision %s",
            payload.label.name,
            payload.total_comments(),
            len(payload.comments),
            config.change_id,
            config.revision_id,
        )
        self._client.set_review(config.change_id, config.revision_id, payload)
        return payload
