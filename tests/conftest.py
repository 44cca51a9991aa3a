"""Shared test fixtures for treediff."""

from __future__ import annotations

import hashlib

import pytest
from dulwich.index import commit_tree
from dulwich.objects import Blob, Commit
from dulwich.repo import MemoryRepo

from treediff.config.models import AppConfig
from treediff.models import Change, ChangeEntry

FILE_MODE = 0o100644


def fake_hash(content: str) -> str:
    """40-char hex id for *content*."""
    return hashlib.sha1(content.encode()).hexdigest()


def entry(path: str, content: str = "", mode: int = FILE_MODE) -> ChangeEntry:
    return ChangeEntry(path=path, mode=mode, hash=fake_hash(content or path))


class FakeTree:
    """In-memory tree snapshot: path -> content."""

    def __init__(self, files: dict[str, str], fail_after: int | None = None) -> None:
        self.entries = {p: entry(p, c) for p, c in files.items()}
        self.fail_after = fail_after
        self.diff_error: Exception | None = None

    def __repr__(self) -> str:
        return f"FakeTree({sorted(self.entries)})"

    def files(self):
        for i, path in enumerate(sorted(self.entries)):
            if self.fail_after is not None and i >= self.fail_after:
                raise OSError("pack file truncated")
            yield self.entries[path]

    def diff(self, other: FakeTree) -> list[Change]:
        if self.diff_error is not None:
            raise self.diff_error
        changes = []
        for path in sorted(set(self.entries) | set(other.entries)):
            old = self.entries.get(path)
            new = other.entries.get(path)
            if old != new:
                changes.append(Change(old=old, new=new))
        return changes


class FakeCommit:
    def __init__(self, tree: FakeTree | None = None, error: Exception | None = None) -> None:
        self._tree = tree
        self._error = error

    def tree(self) -> FakeTree:
        if self._error is not None:
            raise self._error
        return self._tree


class BurndownItem:
    """Downstream pipeline item that counts changes per commit."""

    name = "Burndown"

    def provides(self):
        return ["burndown"]

    def requires(self):
        return ["changes"]

    def list_configuration_options(self):
        return []

    def configure(self, facts):
        pass

    def initialize(self, repository=None):
        pass

    def consume(self, deps):
        return {"burndown": len(deps["changes"])}


class GitHistory:
    """Builds commits in a dulwich repository, one linear chain on HEAD."""

    def __init__(self, repo) -> None:
        self.repo = repo
        self.head: bytes | None = None
        self._time = 1_700_000_000

    def blob_id(self, content: str) -> str:
        return Blob.from_string(content.encode()).id.decode("ascii")

    def commit(self, files: dict[str, str], message: str = "change", parents=None) -> bytes:
        store = self.repo.object_store
        blobs = []
        for path, content in files.items():
            blob = Blob.from_string(content.encode())
            store.add_object(blob)
            blobs.append((path.encode(), blob.id, FILE_MODE))
        tree_id = commit_tree(store, blobs)

        commit = Commit()
        commit.tree = tree_id
        if parents is None:
            parents = [self.head] if self.head is not None else []
        commit.parents = parents
        commit.author = commit.committer = b"Test User <test@example.com>"
        commit.author_time = commit.commit_time = self._time
        commit.author_timezone = commit.commit_timezone = 0
        commit.encoding = b"UTF-8"
        commit.message = message.encode()
        store.add_object(commit)
        self._time += 60

        self.head = commit.id
        self.repo.refs[b"HEAD"] = commit.id
        return commit.id


@pytest.fixture
def memory_repo():
    return MemoryRepo()


@pytest.fixture
def history(memory_repo):
    return GitHistory(memory_repo)


@pytest.fixture
def sample_config():
    return AppConfig()
