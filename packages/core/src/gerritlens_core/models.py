"""Value types shared by the aggregation pipeline.

Resources and findings come from the analysis host; inline comments and the
review payload go out to the review system. All of them are immutable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ScopeKind(str, Enum):
    """Kind of resource the analysis host hands to the per-file callback."""

    PROJECT = "PRJ"
    DIRECTORY = "DIR"
    FILE = "FIL"

    @classmethod
    def parse(cls, value: str) -> ScopeKind:
        """Accept the short wire codes (``FIL``) as well as the long names (``file``)."""
        text = str(value).strip().upper()
        for kind in cls:
            if text in (kind.value, kind.name):
                return kind
        raise ValueError(f"Unknown resource scope: {value!r}")


class ReviewLabel(Enum):
    """Outcome attached to a review submission, with its vote value."""

    APPROVE = 1
    NEUTRAL = 0
    REJECT = -1


@dataclass(frozen=True)
class Resource:
    """One resource reported by the analysis host."""

    scope: ScopeKind
    qualified_name: str  # the scanner's long name, e.g. "pl.touk.Foo"
    name: str = ""

    @property
    def is_file(self) -> bool:
        return self.scope is ScopeKind.FILE


@dataclass(frozen=True)
class Finding:
    """A single static-analysis result attached to one file."""

    rule_repository: str
    severity: str
    message: str
    line: int | None = None
    rule: str = ""


@dataclass(frozen=True)
class InlineComment:
    """A comment anchored to a line; ``line`` of None or 0 means file-level."""

    line: int | None
    message: str

    @property
    def is_file_level(self) -> bool:
        return not self.line

    def to_dict(self) -> dict:
        if self.is_file_level:
            return {"message": self.message}
        return {"line": self.line, "message": self.message}


@dataclass(frozen=True)
class ReviewPayload:
    """Everything a transport needs to post one review."""

    label: ReviewLabel
    label_name: str = "Code-Review"
    message: str = ""
    comments: dict[str, list[InlineComment]] = field(default_factory=dict)

    def comment_dicts(self) -> dict[str, list[dict]]:
        return {path: [c.to_dict() for c in comments] for path, comments in self.comments.items()}

    def total_comments(self) -> int:
        return sum(len(comments) for comments in self.comments.values())
