from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

from gerritlens_core.errors import ConfigurationError

DEFAULT_CONFIG: dict = {
    "backend": "gerrit",  # "gerrit" or "github"
    "scheme": "http",
    "host": None,
    "port": 8080,
    "username": None,
    "password": None,
    "project": None,
    "change_id": None,
    "revision_id": None,
    "auth": "digest",  # Gerrit HTTP auth: "digest" or "basic"
    "label": "Code-Review",
    "message": "Static analysis review",
    "naming": "qualified",  # how analysis ids map to review paths: "qualified" or "path"
    "source_roots": ["src/main/java/", "src/test/java/"],
    "source_extensions": [".java"],  # preferred when several paths share a scanner identifier
    "timeout": None,  # seconds; None blocks until the server answers
}

# Environment variable -> config key. Later entries win when both are set.
_ENV_KEYS = (
    ("GERRIT_HOST", "host"),
    ("GERRIT_HTTP_PORT", "port"),
    ("GERRIT_HTTP_USERNAME", "username"),
    ("GERRIT_HTTP_PASSWORD", "password"),
    ("GERRIT_PROJECT", "project"),
    ("GERRIT_CHANGE_ID", "change_id"),
    ("GERRIT_PATCHSET_REVISION", "revision_id"),
    ("GERRIT_REVISION_ID", "revision_id"),
)


def load_config(config_path: str = ".gerritlens.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .gerritlens.yml in the current directory
      3. GERRIT_* environment variables
      4. CLI argument overrides
    """
    config = {
        **DEFAULT_CONFIG,
        "source_roots": list(DEFAULT_CONFIG["source_roots"]),
        "source_extensions": list(DEFAULT_CONFIG["source_extensions"]),
    }

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    for env_name, key in _ENV_KEYS:
        value = os.environ.get(env_name)
        if value:
            config[key] = value

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def _coerce_port(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class ReviewConfig:
    """Connection and identity parameters for one review submission.

    Built once per run and never mutated. Validity gates every remote call:
    an invalid config turns the whole run into a no-op.
    """

    host: str | None
    port: int
    username: str | None
    password: str | None = field(repr=False)
    project: str | None
    change_id: str | None
    revision_id: str | None

    @classmethod
    def from_settings(cls, settings: dict) -> "ReviewConfig":
        return cls(
            host=settings.get("host"),
            port=_coerce_port(settings.get("port")),
            username=settings.get("username"),
            password=settings.get("password"),
            project=settings.get("project"),
            change_id=_as_text(settings.get("change_id")),
            revision_id=_as_text(settings.get("revision_id")),
        )

    def missing_fields(self) -> list[str]:
        missing = []
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "port":
                if not isinstance(value, int) or value <= 0:
                    missing.append(f.name)
            elif value is None or not str(value).strip():
                missing.append(f.name)
        return missing

    def is_valid(self) -> bool:
        return not self.missing_fields()

    def assert_valid(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise ConfigurationError(missing)


def _as_text(value) -> str | None:
    # YAML turns numeric change ids (e.g. 1234) into ints.
    return None if value is None else str(value)
