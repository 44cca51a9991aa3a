"""treediff - per-commit path changes over a git history."""

from treediff.differ import TreeDiff
from treediff.errors import (
    DiffComputationError,
    EnumerationError,
    PipelineItemNotFoundError,
    RepositoryError,
    TreeDiffError,
    TreeResolutionError,
)
from treediff.models import Change, ChangeAction, ChangeEntry, ConfigurationOption
from treediff.pipeline import Pipeline
from treediff.registry import PipelineItemRegistry, default_registry
from treediff.config import AppConfig, load_config

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "Change",
    "ChangeAction",
    "ChangeEntry",
    "ConfigurationOption",
    "DiffComputationError",
    "EnumerationError",
    "Pipeline",
    "PipelineItemNotFoundError",
    "PipelineItemRegistry",
    "RepositoryError",
    "TreeDiff",
    "TreeDiffError",
    "TreeResolutionError",
    "default_registry",
    "load_config",
]
