"""CLI entry point for gerritlens.

Commands:
  post   — replay a findings report and post one review to the change
  files  — show how the change's files map to the scanner's identifiers
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from gerritlens_cli.commands.files import files_cmd
from gerritlens_cli.commands.post import post_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("gerritlens"),
    prog_name="gerritlens",
)
@click.option(
    "--config",
    "config_path",
    default=".gerritlens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="GERRITLENS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log per-file and per-finding detail.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Post static-analysis findings to a code review as one review."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


main.add_command(post_cmd)
main.add_command(files_cmd)
