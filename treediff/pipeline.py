"""Host loop that feeds commits through a chain of pipeline items."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from treediff.differ import DEPENDENCY_COMMIT
from treediff.interfaces import Commit, PipelineItem

logger = logging.getLogger(__name__)


class Pipeline:
    """Runs pipeline items over commits in the order they are given.

    Every item sees the commit under the ``"commit"`` slot plus whatever the
    items before it provided.
    """

    def __init__(self, items: Iterable[PipelineItem], repository: object | None = None) -> None:
        self.items = list(items)
        self.repository = repository
        self._check_dependencies()

    def _check_dependencies(self) -> None:
        available = {DEPENDENCY_COMMIT}
        for item in self.items:
            missing = [dep for dep in item.requires() if dep not in available]
            if missing:
                raise ValueError(
                    f"{item.name} requires {', '.join(missing)} which no earlier item provides"
                )
            available.update(item.provides())

    def configure(self, facts: dict[str, Any]) -> None:
        for item in self.items:
            item.configure(facts)

    def initialize(self) -> None:
        """Reset every item before a new series of commits."""
        for item in self.items:
            item.initialize(self.repository)

    def run(self, commits: Iterable[Commit]) -> Iterator[tuple[Commit, dict[str, Any]]]:
        """Yield (commit, deps) once every item has consumed the commit."""
        count = 0
        for commit in commits:
            deps: dict[str, Any] = {DEPENDENCY_COMMIT: commit}
            for item in self.items:
                deps.update(item.consume(deps))
            count += 1
            yield commit, deps
        logger.info("processed %d commits", count)
