"""files command — show the changed-files mapping of a revision."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from gerritlens_cli.settings import load_settings
from gerritlens_core.errors import ConfigurationError, RemoteFetchError
from gerritlens_core.remote.factory import build_client

console = Console()


@click.command("files")
@click.option("--change", "change_id", default=None, help="Change id (Gerrit) or pull request number (GitHub).")
@click.option("--revision", "revision_id", default=None, help="Revision id or commit SHA of the change.")
@click.option(
    "--backend",
    type=click.Choice(["gerrit", "github"]),
    default=None,
    help="Review system backend. Overrides config file.",
)
@click.pass_context
def files_cmd(ctx, change_id: str | None, revision_id: str | None, backend: str | None):
    """List the files changed in a revision with the identifier the scanner must report.

    Useful for checking why findings for a file were not posted: a report
    entry is matched only when its qualified_name equals the left column.
    """
    settings, config = load_settings(ctx, change_id=change_id, revision_id=revision_id, backend=backend)
    try:
        config.assert_valid()
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    try:
        client = build_client(settings, config)
    except ValueError as e:
        raise click.UsageError(str(e))

    with client:
        try:
            files = client.list_files(config.change_id, config.revision_id)
        except RemoteFetchError as e:
            raise click.ClickException(str(e))

    if not files:
        console.print("[yellow]No changed files found.[/yellow]")
        return

    table = Table(
        title=f"Changed files — change {config.change_id}, revision {config.revision_id}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Scanner identifier", style="bold")
    table.add_column("Review path")
    for analysis_id, path in sorted(files.items()):
        table.add_row(analysis_id, path)

    console.print(table)
