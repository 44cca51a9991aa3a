"""Error taxonomy for tree diffing and the host around it."""

from __future__ import annotations


class TreeDiffError(Exception):
    """Base class for every error raised by treediff."""


class TreeResolutionError(TreeDiffError):
    """Raised when a commit cannot be resolved to its tree snapshot."""

    def __init__(self, commit: object, cause: Exception | None = None) -> None:
        self.commit = commit
        msg = f"Cannot resolve tree of commit {commit}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
        self.__cause__ = cause


class EnumerationError(TreeDiffError):
    """Raised when the file listing of a tree stops before its natural end."""

    def __init__(self, tree: object, cause: Exception) -> None:
        self.tree = tree
        super().__init__(f"Listing files of tree {tree} failed: {cause}")
        self.__cause__ = cause


class DiffComputationError(TreeDiffError):
    """Raised when two tree snapshots cannot be compared."""

    def __init__(self, old_tree: object, new_tree: object, cause: Exception) -> None:
        self.old_tree = old_tree
        self.new_tree = new_tree
        super().__init__(f"Diff {old_tree} -> {new_tree} failed: {cause}")
        self.__cause__ = cause


class RepositoryError(TreeDiffError):
    """Raised when the repository cannot be opened or a revision is unknown."""


class PipelineItemNotFoundError(TreeDiffError):
    """Raised when a requested pipeline item is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No pipeline item registered with name '{name}'")
