"""Configuration management for Ye Olde Todos."""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)


class Config(BaseModel):
    """Main configuration for a TODO scan."""

    codebase_dir: Path = Field(default=Path("."), description="Directory to scan")
    markers: List[str] = Field(
        default=["// TODO", "# TODO"],
        description="Case-sensitive substrings that flag a line as a TODO",
    )
    exclude_dirs: List[str] = Field(
        default=[
            ".git",
            "node_modules",
            "__pycache__",
            "venv",
            ".venv",
            "target",
            "dist",
            "build",
        ],
        description="Directories never walked into",
    )
    respect_gitignore: bool = Field(
        default=True, description="Skip paths matched by .gitignore files"
    )
    max_file_size: int = Field(
        default=1048576, description="Files larger than this (bytes) are not scanned"
    )

    # Thread pools
    scan_threads: int = Field(default=8, description="Threads reading files")
    blame_threads: int = Field(
        default=8, description="Concurrent git blame subprocesses"
    )
    # No timeout unless configured; a stalled git blame stalls its occurrence
    blame_timeout: Optional[float] = Field(
        default=None, description="Seconds before a git blame call is abandoned"
    )

    @field_validator("codebase_dir", mode="before")
    @classmethod
    def convert_path(cls, v: Any) -> Path:
        """Convert string paths to Path objects."""
        if isinstance(v, str):
            return Path(v)
        if isinstance(v, Path):
            return v
        raise ValueError(f"Expected str or Path, got {type(v)}")

    @field_validator("markers")
    @classmethod
    def require_markers(cls, v: List[str]) -> List[str]:
        markers = [marker for marker in v if marker]
        if not markers:
            raise ValueError("At least one non-empty marker is required")
        return markers

    @field_validator("scan_threads", "blame_threads")
    @classmethod
    def require_positive_threads(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Thread counts must be at least 1")
        return v

    @field_validator("blame_timeout")
    @classmethod
    def require_positive_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("blame_timeout must be positive")
        return v


class ConfigManager:
    """Loads configuration from an optional JSON file."""

    CONFIG_FILENAME = ".ye-olde-todos.json"

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or Path(self.CONFIG_FILENAME)
        self._config: Optional[Config] = None

    @classmethod
    def for_root(cls, root: Path) -> "ConfigManager":
        """Manager for the config file that lives at the scan root."""
        return cls(root / cls.CONFIG_FILENAME)

    def load(self) -> Config:
        """Load configuration from file, or defaults when there is none."""
        if self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("top-level JSON value must be an object")

                # Relative codebase_dir is relative to the config file
                if "codebase_dir" in data:
                    data["codebase_dir"] = str(
                        self._resolve_relative_path(data["codebase_dir"])
                    )

                self._config = Config(**data)
            except (OSError, ValueError, ValidationError) as e:
                raise ConfigError(
                    f"Failed to load config from {self.config_path}: {e}"
                ) from e
            logger.debug("Loaded configuration from %s", self.config_path)
        else:
            self._config = Config()

        return self._config

    def get_config(self) -> Config:
        if self._config is None:
            return self.load()
        return self._config

    def _resolve_relative_path(self, value: str) -> Path:
        path = Path(value)
        if path.is_absolute():
            return path
        return (self.config_path.parent / path).resolve()
