"""post command — replay a findings report and post one review."""

from __future__ import annotations

import click
from rich.console import Console

from gerritlens_cli.settings import load_settings
from gerritlens_core.errors import ReportError
from gerritlens_core.orchestrator import ReviewOrchestrator, RunState, replay
from gerritlens_core.remote.factory import build_client
from gerritlens_core.report import load_report

console = Console()

_STATE_STYLE = {
    RunState.SUBMITTED: "green",
    RunState.SHADOWED: "cyan",
    RunState.SKIPPED_INVALID_CONFIG: "yellow",
    RunState.SKIPPED_FETCH_FAILED: "red",
    RunState.SUBMISSION_FAILED: "red",
}


@click.command("post")
@click.option(
    "--report",
    "report_path",
    required=True,
    type=click.Path(dir_okay=False),
    help="Findings report (YAML or JSON) produced by the analysis step.",
)
@click.option("--change", "change_id", default=None, help="Change id (Gerrit) or pull request number (GitHub).")
@click.option("--revision", "revision_id", default=None, help="Revision id or commit SHA of the change.")
@click.option(
    "--backend",
    type=click.Choice(["gerrit", "github"]),
    default=None,
    help="Review system backend. Overrides config file.",
)
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print the collected comments without posting them.",
)
@click.option("--strict", is_flag=True, help="Exit non-zero when the review could not be posted.")
@click.pass_context
def post_cmd(
    ctx,
    report_path: str,
    change_id: str | None,
    revision_id: str | None,
    backend: str | None,
    shadow: bool,
    strict: bool,
):
    """Post analysis findings for the files modified in a change revision.

    Files from the report that the revision does not touch are ignored. The
    review is posted once, with an approval label, after every file has been
    processed.

    \b
    Connection settings come from .gerritlens.yml or the environment:
      GERRIT_HOST, GERRIT_HTTP_PORT, GERRIT_HTTP_USERNAME, GERRIT_HTTP_PASSWORD,
      GERRIT_PROJECT, GERRIT_CHANGE_ID, GERRIT_REVISION_ID
    """
    try:
        entries = load_report(report_path)
    except ReportError as e:
        raise click.UsageError(str(e))

    settings, config = load_settings(ctx, change_id=change_id, revision_id=revision_id, backend=backend)

    try:
        client = build_client(settings, config) if config.is_valid() else None
    except ValueError as e:
        raise click.UsageError(str(e))

    try:
        orchestrator = ReviewOrchestrator(
            config,
            client,
            label_name=settings.get("label", "Code-Review"),
            message=settings.get("message", ""),
            shadow=shadow,
        )
        outcome = replay(orchestrator, entries)
    finally:
        if client is not None:
            client.close()

    style = _STATE_STYLE.get(outcome.state, "white")
    console.print(
        f"[{style}]Review {outcome.state.value}[/{style}]: "
        f"{outcome.total_comments} comment(s) across {len(outcome.files)} file(s)"
        + (f" · label {outcome.label}" if outcome.label else "")
    )
    if outcome.error:
        console.print(f"  [dim]{outcome.error}[/dim]")

    if strict and outcome.state not in (RunState.SUBMITTED, RunState.SHADOWED):
        ctx.exit(1)
