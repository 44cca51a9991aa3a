"""Data models for tree changes and pipeline configuration options."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

# SHA-1 (40 hex digits) or SHA-256 (64 hex digits) object ids
_OBJECT_ID_RE = re.compile(r"[a-f0-9]{40}(?:[a-f0-9]{24})?")


class ChangeAction(str, Enum):
    """Kind of a change, derived from which sides are present."""

    insert = "insert"
    delete = "delete"
    modify = "modify"


@dataclass(frozen=True)
class ChangeEntry:
    """One side of a change: a file path with its mode and content hash."""

    path: str
    mode: int
    hash: str

    def __post_init__(self) -> None:
        if not _OBJECT_ID_RE.fullmatch(self.hash):
            raise ValueError(f"hash must be 40- or 64-char hex, got {self.hash!r}")


@dataclass(frozen=True)
class Change:
    """State of one path before and after a commit.

    ``old`` is absent for insertions, ``new`` is absent for deletions.
    Renames are not tracked and show up as a deletion plus an insertion.
    """

    old: ChangeEntry | None = None
    new: ChangeEntry | None = None

    def __post_init__(self) -> None:
        if self.old is None and self.new is None:
            raise ValueError("a change needs at least one of old or new")

    @classmethod
    def insert(cls, entry: ChangeEntry) -> Change:
        return cls(old=None, new=entry)

    @classmethod
    def delete(cls, entry: ChangeEntry) -> Change:
        return cls(old=entry, new=None)

    @classmethod
    def modify(cls, old: ChangeEntry, new: ChangeEntry) -> Change:
        return cls(old=old, new=new)

    @property
    def action(self) -> ChangeAction:
        if self.old is None:
            return ChangeAction.insert
        if self.new is None:
            return ChangeAction.delete
        return ChangeAction.modify

    @property
    def path(self) -> str:
        """Path after the change, or before it for deletions."""
        entry = self.new if self.new is not None else self.old
        return entry.path


class ConfigurationOption(BaseModel):
    """A changeable public property of a pipeline item."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    flag: str
    type: Literal["bool", "int", "string", "strings"]
    default: Any = None

    def formatted_flag(self) -> str:
        """Render the command line flag, with a value placeholder for non-bool types."""
        if self.type == "bool":
            return f"--{self.flag}"
        return f"--{self.flag} <{self.type}>"
