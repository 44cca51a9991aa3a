"""Explicit table of pipeline items, assembled once by the host at startup."""

from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Callable

from treediff.differ import TreeDiff
from treediff.errors import PipelineItemNotFoundError
from treediff.interfaces import PipelineItem

logger = logging.getLogger(__name__)

ItemFactory = Callable[[], PipelineItem]


class PipelineItemRegistry:
    """Maps pipeline item names to factories and slots to their providers."""

    # Entry point group third-party packages publish pipeline items under
    ENTRY_POINT_GROUP = "treediff.pipeline_items"

    def __init__(self) -> None:
        self._factories: dict[str, ItemFactory] = {}
        self._provided: dict[str, list[str]] = {}

    def register(self, factory: ItemFactory) -> None:
        """Add *factory*; the item's name and provided slots come from a sample instance."""
        sample = factory()
        if sample.name in self._factories:
            raise ValueError(f"Pipeline item '{sample.name}' is already registered")
        self._factories[sample.name] = factory
        for slot in sample.provides():
            self._provided.setdefault(slot, []).append(sample.name)

    def names(self) -> list[str]:
        return sorted(self._factories)

    def providers(self) -> dict[str, list[str]]:
        """Return {slot: [item name, ...]}."""
        return {slot: list(names) for slot, names in self._provided.items()}

    def create(self, name: str) -> PipelineItem:
        try:
            factory = self._factories[name]
        except KeyError:
            raise PipelineItemNotFoundError(name) from None
        return factory()

    def summon(self, slot: str) -> list[PipelineItem]:
        """Fresh instances of every item providing *slot*."""
        return [self.create(name) for name in self._provided.get(slot, [])]

    def load_entry_points(self) -> list[str]:
        """Register items published under ENTRY_POINT_GROUP. Returns the loaded names."""
        loaded: list[str] = []
        for ep in importlib.metadata.entry_points(group=self.ENTRY_POINT_GROUP):
            if ep.name in self._factories:
                continue
            try:
                factory = ep.load()
                self.register(factory)
            except Exception:
                logger.warning("Failed to load pipeline item %s", ep.name, exc_info=True)
                continue
            loaded.append(ep.name)
        return loaded


def default_registry() -> PipelineItemRegistry:
    """Registry holding the built-in pipeline items."""
    registry = PipelineItemRegistry()
    registry.register(TreeDiff)
    return registry
