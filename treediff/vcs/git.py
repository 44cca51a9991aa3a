"""Git backing store built on dulwich."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator

from dulwich.diff_tree import tree_changes
from dulwich.errors import MissingCommitError, NotGitRepository, WrongObjectException
from dulwich.object_store import iter_tree_contents
from dulwich.objects import Commit as DulwichCommit
from dulwich.objects import Tree, TreeEntry
from dulwich.objectspec import parse_commit
from dulwich.repo import BaseRepo, Repo
from dulwich.walk import ORDER_TOPO

from treediff.errors import RepositoryError, TreeResolutionError
from treediff.models import Change, ChangeEntry

logger = logging.getLogger(__name__)


def _to_entry(entry: TreeEntry | None) -> ChangeEntry | None:
    if entry is None:
        return None
    return ChangeEntry(
        path=os.fsdecode(entry.path),
        mode=entry.mode,
        hash=entry.sha.decode("ascii"),
    )


class GitTree:
    """A tree object in a dulwich object store."""

    def __init__(self, object_store, tree_id: bytes) -> None:
        self._store = object_store
        self.id = tree_id

    def __repr__(self) -> str:
        return f"GitTree({self.id.decode('ascii')[:12]})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GitTree):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def files(self) -> Generator[ChangeEntry, None, None]:
        for entry in iter_tree_contents(self._store, self.id):
            yield _to_entry(entry)

    def diff(self, other: GitTree) -> list[Change]:
        changes: list[Change] = []
        for change in tree_changes(self._store, self.id, other.id):
            changes.append(Change(old=_to_entry(change.old), new=_to_entry(change.new)))
        return changes


class GitCommit:
    """A commit id bound to the repository that holds it."""

    def __init__(self, repo: BaseRepo, commit_id: bytes) -> None:
        self._repo = repo
        self.id = commit_id

    def __repr__(self) -> str:
        return f"GitCommit({self.id.decode('ascii')[:12]})"

    def __str__(self) -> str:
        return self.id.decode("ascii")

    def tree(self) -> GitTree:
        store = self._repo.object_store
        try:
            commit = store[self.id]
            if not isinstance(commit, DulwichCommit):
                raise TypeError(f"{self.id!r} is a {commit.type_name.decode()}, not a commit")
            tree = store[commit.tree]
            if not isinstance(tree, Tree):
                raise TypeError(f"{commit.tree!r} is a {tree.type_name.decode()}, not a tree")
        except (KeyError, TypeError) as e:
            raise TreeResolutionError(self, e) from e
        return GitTree(store, tree.id)


class GitRepository:
    """Commit source over a dulwich repository."""

    def __init__(self, repo: BaseRepo) -> None:
        self.repo = repo

    @classmethod
    def open(cls, path: str | os.PathLike) -> GitRepository:
        try:
            repo = Repo(os.fspath(path))
        except NotGitRepository as e:
            raise RepositoryError(f"Not a git repository: {path}") from e
        return cls(repo)

    def __enter__(self) -> GitRepository:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if isinstance(self.repo, Repo):
            self.repo.close()

    def resolve(self, rev: str) -> GitCommit:
        """Resolve a revision (ref name, HEAD or hex id) to a commit."""
        try:
            commit = parse_commit(self.repo, rev.encode())
        except (KeyError, ValueError, WrongObjectException) as e:
            raise RepositoryError(f"Unknown revision: {rev}") from e
        return GitCommit(self.repo, commit.id)

    def commits(self, rev: str = "HEAD", first_parent: bool = True) -> list[GitCommit]:
        """History reachable from *rev*, oldest first.

        With *first_parent* only the first-parent chain is walked, so each
        commit's parent is the commit right before it in the list.

        A first-parent chain whose older commits are absent from the object
        store (a shallow clone) starts at the oldest commit present. The
        full walk raises :class:`RepositoryError` instead.
        """
        head = self.resolve(rev)
        if not first_parent:
            try:
                walker = self.repo.get_walker(
                    include=[head.id], order=ORDER_TOPO, reverse=True
                )
                return [GitCommit(self.repo, entry.commit.id) for entry in walker]
            except (KeyError, MissingCommitError) as e:
                raise RepositoryError(f"Incomplete history below {rev}: {e}") from e

        chain: list[GitCommit] = []
        commit_id: bytes | None = head.id
        while commit_id is not None:
            try:
                commit = self.repo[commit_id]
            except KeyError:
                # Shallow clone: the chain ends at the oldest commit present.
                logger.warning(
                    "commit %s is missing, history truncated", commit_id.decode("ascii")
                )
                break
            chain.append(GitCommit(self.repo, commit_id))
            commit_id = commit.parents[0] if commit.parents else None
        chain.reverse()
        logger.debug("walked %d commits from %s", len(chain), rev)
        return chain
