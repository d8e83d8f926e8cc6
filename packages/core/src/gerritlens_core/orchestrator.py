"""Core review orchestration.

The analysis host drives the orchestrator through two events:
    on_file_resource()  0..N times, in any order, once per analysed resource
    on_run_complete()   exactly once, after every per-file event

Between them the orchestrator fetches the revision's changed files once,
collects translated findings for the files in scope, and finally posts a
single review. Failures are logged and reported in the returned RunOutcome;
nothing is raised back to the host.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from rich.console import Console

from gerritlens_core.aggregator import CommentAggregator
from gerritlens_core.errors import RemoteFetchError, RemoteSubmitError
from gerritlens_core.file_index import RemoteFileIndex
from gerritlens_core.models import Finding, InlineComment, Resource
from gerritlens_core.submitter import ReviewSubmitter
from gerritlens_core.translator import translate_all

if TYPE_CHECKING:
    from gerritlens_core.config import ReviewConfig
    from gerritlens_core.remote.base import BaseReviewClient
    from gerritlens_core.report import ReportEntry

console = Console()
logger = logging.getLogger(__name__)


class RunState(Enum):
    UNCONFIGURED = "unconfigured"
    ACCUMULATING = "accumulating"
    SUBMITTED = "submitted"
    SHADOWED = "shadowed"
    SKIPPED_INVALID_CONFIG = "skipped-invalid-config"
    SKIPPED_FETCH_FAILED = "skipped-fetch-failed"
    SUBMISSION_FAILED = "submission-failed"

    @property
    def is_terminal(self) -> bool:
        return self not in (RunState.UNCONFIGURED, RunState.ACCUMULATING)


@dataclass
class RunOutcome:
    """What happened to one run; returned by on_run_complete()."""

    state: RunState
    label: str | None = None
    files: list[str] = field(default_factory=list)
    total_comments: int = 0
    error: str | None = None

    @property
    def submitted(self) -> bool:
        return self.state is RunState.SUBMITTED


def print_shadow_comments(comments: dict[str, list[InlineComment]]) -> None:
    """Print aggregated comments to the terminal without posting them."""
    total = sum(len(entries) for entries in comments.values())
    if not total:
        console.print("[yellow]Shadow mode: no comments collected.[/yellow]")
        return
    console.print(f"\n[bold]Shadow review — {total} comment(s) (not posted)[/bold]\n")
    for path, entries in comments.items():
        for c in entries:
            where = f"line [bold]{c.line}[/bold]" if c.line else "[dim]file[/dim]"
            console.print(f"[bold cyan]{path}[/bold cyan]  {where}")
            console.print(f"  {c.message}")
            console.print()


class ReviewOrchestrator:
    def __init__(
        self,
        config: ReviewConfig,
        client: BaseReviewClient | None,
        label_name: str = "Code-Review",
        message: str = "",
        shadow: bool = False,
    ):
        self.config = config
        self.shadow = shadow
        self.state = RunState.UNCONFIGURED
        self.outcome: RunOutcome | None = None
        self._fetch_error: str | None = None
        self._lock = threading.Lock()

        if not config.is_valid():
            logger.info(
                "Review configuration is not valid (missing: %s). Results will not be sent.",
                ", ".join(config.missing_fields()),
            )
            self.state = RunState.SKIPPED_INVALID_CONFIG
            return
        if client is None:
            raise ValueError("A review client is required when the configuration is valid.")

        self._index = RemoteFileIndex(client, config.change_id, config.revision_id)
        self._aggregator = CommentAggregator()
        self._submitter = ReviewSubmitter(client, label_name=label_name, message=message)
        self.state = RunState.ACCUMULATING

    def on_file_resource(self, resource: Resource, findings: Iterable[Finding]) -> bool:
        """Handle one analysed resource. Returns True when comments were recorded.

        Runs under the same lock as on_run_complete(), so a file is either
        recorded before the final snapshot or ignored after it.
        """
        if not resource.is_file:
            return False
        with self._lock:
            if self.state is not RunState.ACCUMULATING:
                if self.state.is_terminal and self.state is not RunState.SKIPPED_INVALID_CONFIG:
                    logger.warning("Ignoring %s delivered after the run completed", resource.qualified_name)
                return False
            return self._record_file(resource, findings)

    def _record_file(self, resource: Resource, findings: Iterable[Finding]) -> bool:
        logger.debug(
            "Processing resource scope %s, long name %s, name %s",
            resource.scope.value,
            resource.qualified_name,
            resource.name,
        )
        try:
            review_path = self._index.resolve(resource.qualified_name)
        except RemoteFetchError as e:
            logger.error("Could not fetch changed files; skipping %s", resource.qualified_name, exc_info=True)
            self._fetch_error = str(e)
            return False

        if review_path is None:
            logger.debug("%s is not modified in this revision", resource.qualified_name)
            return False

        comments = translate_all(findings)
        logger.info("File %s matches %s with %d finding(s)", resource.qualified_name, review_path, len(comments))
        self._aggregator.record(review_path, comments)
        return True

    def on_run_complete(self) -> RunOutcome:
        with self._lock:
            if self.outcome is None:
                self.outcome = self._complete()
            return self.outcome

    def _complete(self) -> RunOutcome:
        if self.state is RunState.SKIPPED_INVALID_CONFIG:
            logger.info("Analysis has finished. Not sending results, because configuration is not valid.")
            return RunOutcome(state=self.state, error="invalid configuration")

        comments = self._aggregator.snapshot()
        files = list(comments)
        total = sum(len(entries) for entries in comments.values())

        # Files dropped while the fetch was failing would make the review partial,
        # even if a later retry succeeded.
        if self._fetch_error is not None:
            logger.error("Analysis has finished. Not sending results, changed files could not be fetched.")
            self.state = RunState.SKIPPED_FETCH_FAILED
            return RunOutcome(state=self.state, files=files, total_comments=total, error=self._fetch_error)

        payload = self._submitter.build_payload(comments)
        if self.shadow:
            print_shadow_comments(comments)
            self.state = RunState.SHADOWED
            return RunOutcome(state=self.state, label=payload.label.name, files=files, total_comments=total)

        logger.info("Analysis has finished. Sending results to the review system.")
        try:
            self._submitter.submit(self.config, comments)
        except RemoteSubmitError as e:
            logger.error("Error sending review", exc_info=True)
            self.state = RunState.SUBMISSION_FAILED
            return RunOutcome(
                state=self.state, label=payload.label.name, files=files, total_comments=total, error=str(e)
            )

        self.state = RunState.SUBMITTED
        return RunOutcome(state=self.state, label=payload.label.name, files=files, total_comments=total)


def replay(orchestrator: ReviewOrchestrator, entries: Iterable[ReportEntry]) -> RunOutcome:
    """Drive the orchestrator from a loaded report: each entry, then end-of-run."""
    for entry in entries:
        orchestrator.on_file_resource(entry.resource, entry.findings)
    return orchestrator.on_run_complete()
