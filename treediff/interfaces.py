"""Protocols for the collaborators the differ talks to."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any, Protocol, runtime_checkable

from treediff.models import Change, ChangeEntry, ConfigurationOption


@runtime_checkable
class TreeSnapshot(Protocol):
    """Immutable listing of paths to (mode, hash) at one point in history."""

    def files(self) -> Generator[ChangeEntry, None, None]:
        """Lazily list every file in the tree. Callers must close the generator."""
        ...

    def diff(self, other: TreeSnapshot) -> list[Change]:
        """Changes turning this snapshot into *other*."""
        ...


@runtime_checkable
class Commit(Protocol):
    """A unit of history that resolves to exactly one tree snapshot."""

    def tree(self) -> TreeSnapshot: ...


@runtime_checkable
class PipelineItem(Protocol):
    """A unit fed one commit at a time by the host pipeline."""

    name: str

    def provides(self) -> list[str]: ...

    def requires(self) -> list[str]: ...

    def list_configuration_options(self) -> list[ConfigurationOption]: ...

    def configure(self, facts: dict[str, Any]) -> None: ...

    def initialize(self, repository: object | None = None) -> None: ...

    def consume(self, deps: dict[str, Any]) -> dict[str, Any]: ...
