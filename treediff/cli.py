"""CLI entry point for treediff."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from treediff.config import AppConfig, load_config
from treediff.config.loader import CONFIG_FILENAME, DEFAULT_CONFIG_TEMPLATE
from treediff.differ import DEPENDENCY_TREE_CHANGES
from treediff.errors import TreeDiffError
from treediff.models import Change, ChangeAction
from treediff.pipeline import Pipeline
from treediff.registry import default_registry
from treediff.vcs import open_repository

app = typer.Typer(
    name="treediff",
    help="Per-commit path changes for a git repository.",
)

config_app = typer.Typer(help="Manage treediff configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: AppConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_ACTION_STYLES = {
    ChangeAction.insert: "green",
    ChangeAction.delete: "red",
    ChangeAction.modify: "yellow",
}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _setup_logging(config: AppConfig) -> None:
    handler = logging.StreamHandler()
    if config.log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger("treediff")
    root.handlers[:] = [handler]
    root.setLevel(_LOG_LEVELS[config.log_level])


def _get_config() -> AppConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to treediff.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _setup_logging(_config)


def _short(entry_hash: str | None) -> str:
    return entry_hash[:12] if entry_hash else "-"


def _display_changes(commit: str, changes: list[Change]) -> None:
    table = Table(title=f"{commit[:12]} ({len(changes)} changes)")
    table.add_column("Action")
    table.add_column("Path", style="cyan")
    table.add_column("Old", style="dim")
    table.add_column("New", style="dim")
    for c in changes:
        style = _ACTION_STYLES[c.action]
        table.add_row(
            f"[{style}]{c.action.value}[/{style}]",
            escape(c.path),
            _short(c.old.hash if c.old else None),
            _short(c.new.hash if c.new else None),
        )
    rprint(table)


def _change_record(commit: str, change: Change) -> dict:
    return {
        "commit": commit,
        "action": change.action.value,
        "path": change.path,
        "old_path": change.old.path if change.old else None,
        "old_hash": change.old.hash if change.old else None,
        "new_hash": change.new.hash if change.new else None,
    }


@app.command()
def changes(
    repo: str | None = typer.Argument(None, help="Repository path (default: from config)"),
    rev: str | None = typer.Option(None, "--rev", help="Revision to walk back from"),
    skip_blacklist: bool = typer.Option(
        False, "--skip-blacklist", help="Skip blacklisted directories"
    ),
    blacklisted_dirs: str | None = typer.Option(
        None, "--blacklisted-dirs", help='Blacklisted directories, separated by ","'
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit one JSON object per change"),
) -> None:
    """Print the path changes of every commit, oldest first."""
    cfg = _get_config()
    diff_cfg = cfg.treediff.model_copy()
    if skip_blacklist:
        diff_cfg.skip_blacklist = True
    if blacklisted_dirs is not None:
        diff_cfg.blacklisted_dirs = [d for d in blacklisted_dirs.split(",") if d]

    overrides = {key: value for key, value in (("path", repo), ("rev", rev)) if value}
    repo_cfg = cfg.repository.model_copy(update=overrides)
    try:
        with open_repository(repo_cfg) as repository:
            commits = repository.commits(repo_cfg.rev, first_parent=repo_cfg.first_parent)
            pipeline = Pipeline(default_registry().summon(DEPENDENCY_TREE_CHANGES), repository)
            pipeline.configure(diff_cfg.to_facts())
            pipeline.initialize()
            for commit, deps in pipeline.run(commits):
                commit_id = str(commit)
                result = deps[DEPENDENCY_TREE_CHANGES]
                if as_json:
                    for change in result:
                        typer.echo(json.dumps(_change_record(commit_id, change)))
                else:
                    _display_changes(commit_id, result)
    except TreeDiffError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def items() -> None:
    """List registered pipeline items."""
    registry = default_registry()
    registry.load_entry_points()
    table = Table(title="Pipeline items")
    table.add_column("Name", style="cyan")
    table.add_column("Provides", style="green")
    table.add_column("Requires", style="yellow")
    table.add_column("Flags")
    for name in registry.names():
        item = registry.create(name)
        table.add_row(
            name,
            ", ".join(item.provides()) or "-",
            ", ".join(item.requires()) or "-",
            "\n".join(o.formatted_flag() for o in item.list_configuration_options()) or "-",
        )
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default treediff.yaml in current directory."""
    target = Path(CONFIG_FILENAME)
    if target.exists() and not force:
        rprint("[yellow]treediff.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
