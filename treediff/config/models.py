from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from treediff.differ import (
    CONFIG_BLACKLISTED_DIRS,
    CONFIG_SKIP_BLACKLIST,
    DEFAULT_BLACKLISTED_DIRS,
)


class TreeDiffConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    skip_blacklist: bool = False
    blacklisted_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_BLACKLISTED_DIRS))

    def to_facts(self) -> dict[str, object]:
        """Facts for TreeDiff.configure()."""
        return {
            CONFIG_SKIP_BLACKLIST: self.skip_blacklist,
            CONFIG_BLACKLISTED_DIRS: list(self.blacklisted_dirs),
        }


class RepositoryConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str = "."
    rev: str = "HEAD"
    first_parent: bool = True


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    treediff: TreeDiffConfig = Field(default_factory=TreeDiffConfig)
    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
