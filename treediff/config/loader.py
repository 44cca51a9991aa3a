"""Locates treediff.yaml and turns it into an AppConfig."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from treediff.differ import FLAG_BLACKLISTED_DIRS, FLAG_SKIP_BLACKLIST

from .models import AppConfig

CONFIG_FILENAME = "treediff.yaml"

# Keys of the treediff section and the pipeline flags they feed.
_OPTION_FLAGS = {
    ("treediff", "skip_blacklist"): FLAG_SKIP_BLACKLIST,
    ("treediff", "blacklisted_dirs"): FLAG_BLACKLISTED_DIRS,
}


def user_config_path() -> Path:
    return Path.home() / ".treediff" / "config.yaml"


def load_config(cli_path: str | None = None) -> AppConfig:
    """Load the first non-empty config among --config, ./treediff.yaml and
    ~/.treediff/config.yaml, or the defaults when there is none.

    A path given with --config must exist. Problems are reported as
    ``ValueError`` naming the file and the offending keys.
    """
    if cli_path is not None and not Path(cli_path).is_file():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in _candidate_paths(cli_path):
        raw = _read_yaml(path)
        if raw is None:
            continue
        try:
            return AppConfig.model_validate(raw)
        except ValidationError as e:
            problems = "; ".join(_describe_error(err) for err in e.errors())
            raise ValueError(f"Invalid config in {path}: {problems}") from e

    return AppConfig()


def _candidate_paths(cli_path: str | None) -> list[Path]:
    paths = [Path(cli_path)] if cli_path else []
    paths += [Path(CONFIG_FILENAME), user_config_path()]
    return [p for p in paths if p.is_file()]


def _read_yaml(path: Path) -> dict[str, Any] | None:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(
            f"Invalid config in {path}: expected a mapping of sections, "
            f"got {type(raw).__name__}"
        )
    return raw


def _describe_error(err: dict[str, Any]) -> str:
    """'treediff.skip_blacklist (--skip-blacklist): Input should be ...'"""
    loc = tuple(err["loc"])
    key = ".".join(str(part) for part in loc) or "<root>"
    flag = _OPTION_FLAGS.get(loc[:2])
    if flag:
        key += f" (--{flag})"
    return f"{key}: {err['msg']}"


# Written by `treediff config init`
DEFAULT_CONFIG_TEMPLATE = """\
# treediff.yaml

# Repository to walk
repository:
  path: "."
  rev: "HEAD"
  first_parent: true           # follow only the first parent of merges

# Tree diff
treediff:
  skip_blacklist: false        # drop changes under blacklisted_dirs
  blacklisted_dirs:            # literal path prefixes, keep the trailing "/"
    - "vendor/"
    - "vendors/"
    - "node_modules/"

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
