"""Git commit source and tree snapshots for treediff."""

from treediff.config.models import RepositoryConfig
from treediff.vcs.git import GitCommit, GitRepository, GitTree


def open_repository(config: RepositoryConfig) -> GitRepository:
    """Open the repository named in config.path."""
    return GitRepository.open(config.path)


__all__ = [
    "GitCommit",
    "GitRepository",
    "GitTree",
    "open_repository",
]
