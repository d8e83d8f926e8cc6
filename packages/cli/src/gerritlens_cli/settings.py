"""Settings resolution shared by every command."""

from __future__ import annotations

import click

from gerritlens_cli.auth import resolve_password
from gerritlens_core.config import ReviewConfig, load_config


def load_settings(ctx: click.Context, **overrides) -> tuple[dict, ReviewConfig]:
    """Merge config file, environment and CLI options into settings plus a ReviewConfig."""
    config_path = ctx.obj.get("config_path", ".gerritlens.yml") if ctx.obj else ".gerritlens.yml"
    settings = load_config(config_path, cli_overrides=overrides)
    settings["password"] = resolve_password(settings)
    return settings, ReviewConfig.from_settings(settings)
