"""Turn analysis findings into inline review comments."""

from __future__ import annotations

from gerritlens_core.models import Finding, InlineComment

COMMENT_FORMAT = "[{repository}] Severity: {severity}, Message: {message}"


def _capitalize(text: str) -> str:
    # Only the first character changes; str.capitalize() would lower-case the rest.
    return text[:1].upper() + text[1:]


def translate(finding: Finding) -> InlineComment:
    return InlineComment(
        line=finding.line,
        message=COMMENT_FORMAT.format(
            repository=_capitalize(finding.rule_repository or ""),
            severity=finding.severity,
            message=finding.message,
        ),
    )


def translate_all(findings) -> list[InlineComment]:
    return [translate(f) for f in findings]
