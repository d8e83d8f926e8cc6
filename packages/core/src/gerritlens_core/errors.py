"""Error taxonomy for the review integration.

Every error raised by gerritlens derives from GerritLensError so the
orchestrator can absorb them at a single boundary. None of them is allowed to
abort the host's analysis pipeline.
"""

from __future__ import annotations


class GerritLensError(Exception):
    """Base class for all gerritlens errors."""


class ConfigurationError(GerritLensError):
    """Connection or identity settings are missing or invalid."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Review configuration is incomplete; missing: {', '.join(self.missing)}")


class RemoteFetchError(GerritLensError):
    """The changed-files call to the review system failed."""


class RemoteSubmitError(GerritLensError):
    """The set-review call to the review system failed."""


class ReportError(GerritLensError):
    """A findings report could not be read or has an unexpected shape."""
