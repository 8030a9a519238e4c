# ziper/src/ziper/core/config.py

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional

from ziper.core.paths import DEFAULT_ROOT_NAME
from ziper.core.utils import split_patterns


class Settings(BaseSettings):
    # Comma-separated patterns applied on top of whatever the caller passes
    default_ignore: str = Field(default="")
    compress_level: Optional[int] = Field(default=None, ge=0, le=9)
    sort_entries: bool = Field(default=True)
    same_file_system: bool = Field(default=True)
    # Used when the source path has no final component, e.g. "/" or "."
    default_root_name: str = Field(default=DEFAULT_ROOT_NAME, min_length=1)
    log_level: Optional[str] = Field(default=None)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "ZIPER_",
        "extra": "ignore"
    }

    def default_ignore_patterns(self) -> List[str]:
        return split_patterns(self.default_ignore)


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, letting explicit values win."""
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def default_settings() -> Settings:
    """Field defaults only, without reading the environment or a .env file."""
    return Settings.model_construct()
