from .loader import load_config
from .models import AppConfig, RepositoryConfig, TreeDiffConfig

__all__ = [
    "AppConfig",
    "RepositoryConfig",
    "TreeDiffConfig",
    "load_config",
]
