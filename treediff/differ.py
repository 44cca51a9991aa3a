"""TreeDiff: per-commit list of changed paths relative to the previous commit."""

from __future__ import annotations

import logging
from contextlib import closing
from typing import Any

from treediff import filter as change_filter
from treediff.errors import (
    DiffComputationError,
    EnumerationError,
    TreeDiffError,
    TreeResolutionError,
)
from treediff.interfaces import Commit, TreeSnapshot
from treediff.models import Change, ConfigurationOption

logger = logging.getLogger(__name__)

# Name of the slot TreeDiff fills in the pipeline deps.
DEPENDENCY_TREE_CHANGES = "changes"
# Slot the host always fills with the commit being processed.
DEPENDENCY_COMMIT = "commit"

CONFIG_SKIP_BLACKLIST = "TreeDiff.SkipBlacklist"
CONFIG_BLACKLISTED_DIRS = "TreeDiff.BlacklistedDirs"
FLAG_SKIP_BLACKLIST = "skip-blacklist"
FLAG_BLACKLISTED_DIRS = "blacklisted-dirs"

DEFAULT_BLACKLISTED_DIRS: tuple[str, ...] = ("vendor/", "vendors/", "node_modules/")


class TreeDiff:
    """Generates the list of changes for each commit.

    A change holds the "before" and "after" entries of one path. The first
    commit after :meth:`initialize` has nothing to compare against, so every
    file in its tree is reported as an insertion. Later commits are diffed
    against the tree of the commit processed just before them; callers must
    feed commits so that this tree is the logical parent.
    """

    name = "TreeDiff"

    def __init__(self) -> None:
        self._previous_tree: TreeSnapshot | None = None
        self.skip_dirs: list[str] = []

    @property
    def previous_tree(self) -> TreeSnapshot | None:
        return self._previous_tree

    def provides(self) -> list[str]:
        return [DEPENDENCY_TREE_CHANGES]

    def requires(self) -> list[str]:
        return []

    def list_configuration_options(self) -> list[ConfigurationOption]:
        return [
            ConfigurationOption(
                name=CONFIG_SKIP_BLACKLIST,
                description="Skip blacklisted directories.",
                flag=FLAG_SKIP_BLACKLIST,
                type="bool",
                default=False,
            ),
            ConfigurationOption(
                name=CONFIG_BLACKLISTED_DIRS,
                description='List of blacklisted directories. Separated by comma ",".',
                flag=FLAG_BLACKLISTED_DIRS,
                type="strings",
                default=list(DEFAULT_BLACKLISTED_DIRS),
            ),
        ]

    def configure(self, facts: dict[str, Any]) -> None:
        """Apply options published by :meth:`list_configuration_options`.

        Facts may be keyed by option name or by flag. The blacklist only takes
        effect when skip-blacklist is set.
        """
        skip = _lookup(facts, CONFIG_SKIP_BLACKLIST, FLAG_SKIP_BLACKLIST)
        if not skip:
            self.skip_dirs = []
            return
        dirs = _lookup(facts, CONFIG_BLACKLISTED_DIRS, FLAG_BLACKLISTED_DIRS)
        if dirs is None:
            dirs = DEFAULT_BLACKLISTED_DIRS
        self.skip_dirs = list(dirs)
        logger.debug("blacklisted prefixes: %s", self.skip_dirs)

    def initialize(self, repository: object | None = None) -> None:
        """Forget the previous tree before a new, independent series of commits."""
        self._previous_tree = None
        logger.debug("reset previous tree")

    def consume(self, deps: dict[str, Any]) -> dict[str, Any]:
        return {DEPENDENCY_TREE_CHANGES: self.process_commit(deps[DEPENDENCY_COMMIT])}

    def process_commit(self, commit: Commit) -> list[Change]:
        """Return the changes *commit* introduces over the previous commit.

        On error the previous tree is left as it was, so the same commit can
        be retried.
        """
        try:
            tree = commit.tree()
        except TreeDiffError:
            raise
        except Exception as e:
            raise TreeResolutionError(commit, e) from e

        if self._previous_tree is None:
            changes = self._list_files(tree)
        else:
            try:
                changes = self._previous_tree.diff(tree)
            except TreeDiffError:
                raise
            except Exception as e:
                raise DiffComputationError(self._previous_tree, tree, e) from e
        self._previous_tree = tree

        changes = change_filter.apply(changes, self.skip_dirs)
        logger.debug("%s: %d changes", commit, len(changes))
        return changes

    @staticmethod
    def _list_files(tree: TreeSnapshot) -> list[Change]:
        try:
            with closing(tree.files()) as files:
                return [Change.insert(entry) for entry in files]
        except TreeDiffError:
            raise
        except Exception as e:
            raise EnumerationError(tree, e) from e


def _lookup(facts: dict[str, Any], name: str, flag: str) -> Any:
    if name in facts:
        return facts[name]
    return facts.get(flag)
