"""Configuration management for Code Walkthrough using Pydantic Settings."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import get_logger

logger = get_logger("config")

PROJECT_CONFIG_FILENAME = ".code-walkthrough.yaml"


class IndexConfig(BaseModel):
    """Project indexing configuration."""
    max_file_size: int = Field(default=1048576, gt=0, description="Files larger than this (bytes) are dropped")
    max_content_size: int = Field(default=100000, gt=0, description="Content is read only for files below this size (bytes)")
    preview_lines: int = Field(default=5, ge=0, description="Number of leading lines kept as a file preview")
    include: List[str] = Field(default_factory=lambda: ["**/*"], description="Glob patterns to include")
    exclude: List[str] = Field(
        default_factory=lambda: ["node_modules/**", ".git/**", "dist/**", "build/**"],
        description="Glob patterns to exclude (always win over include)"
    )
    respect_gitignore: bool = Field(default=True, description="Honor .gitignore files in the tree")
    max_workers: int = Field(default=8, gt=0, description="Worker threads used to read file contents")


class TraceConfig(BaseModel):
    """Execution tracing configuration."""
    context_before: int = Field(default=2, ge=0, description="Lines of leading context around a matched line")
    context_after: int = Field(default=5, ge=0, description="Lines of trailing context around a matched line")
    fallback_file_limit: int = Field(default=5, gt=0, description="Files scanned by the keyword fallback")
    follow_imports: bool = Field(default=True, description="Follow relative imports from entry points")


class UIConfig(BaseModel):
    """UI configuration."""
    show_debug_info: bool = Field(default=False, description="Show debug information")
    max_display_steps: int = Field(default=20, gt=0, description="Maximum walkthrough steps to display")
    use_colors: bool = Field(default=True, description="Use colors in output")
    show_line_numbers: bool = Field(default=True, description="Show line numbers")


class Config(BaseSettings):
    """Main configuration class using Pydantic Settings."""

    # Nested configurations
    index: IndexConfig = Field(default_factory=IndexConfig)
    trace: TraceConfig = Field(default_factory=TraceConfig)
    ui: UIConfig = Field(default_factory=UIConfig)

    # Environment variable configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore"
    )

    # Direct environment mappings for common settings
    max_file_size: Optional[int] = Field(default=None, alias="MAX_FILE_SIZE")
    max_content_size: Optional[int] = Field(default=None, alias="MAX_CONTENT_SIZE")
    debug: Optional[bool] = Field(default=None, alias="DEBUG")
    no_color: Optional[bool] = Field(default=None, alias="NO_COLOR")
    code_walkthrough_max_steps: Optional[int] = Field(default=None, alias="CODE_WALKTHROUGH_MAX_STEPS")

    def model_post_init(self, __context) -> None:
        """Apply environment variable overrides after model initialization."""
        if self.max_file_size is not None:
            self.index.max_file_size = self.max_file_size
        if self.max_content_size is not None:
            self.index.max_content_size = self.max_content_size

        if self.debug is not None:
            self.ui.show_debug_info = self.debug
        if self.no_color is not None:
            self.ui.use_colors = not self.no_color
        if self.code_walkthrough_max_steps is not None:
            self.ui.max_display_steps = self.code_walkthrough_max_steps

        # The content-read ceiling is a secondary, smaller threshold
        if self.index.max_content_size > self.index.max_file_size:
            raise ValueError(
                f"max_content_size ({self.index.max_content_size}) must not exceed "
                f"max_file_size ({self.index.max_file_size})"
            )


class ConfigManager:
    """Manage configuration loading from the environment and project files."""

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.project_config_file = self.project_dir / PROJECT_CONFIG_FILENAME

    def _load_project_overrides(self) -> Dict[str, Any]:
        """Read the optional YAML project file; malformed files contribute nothing."""
        if not self.project_config_file.is_file():
            return {}
        try:
            data = yaml.safe_load(self.project_config_file.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Ignoring unreadable %s: %s", self.project_config_file, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {key: value for key, value in data.items() if key in ("index", "trace", "ui")}

    def load_config(self) -> Config:
        """Load configuration; environment variables take precedence over the YAML file."""
        overrides = self._load_project_overrides()
        if not overrides:
            return Config()

        # Settings sources apply init kwargs with the highest priority, so
        # nested environment values are merged back on top of the YAML ones.
        env_config = Config()
        merged: Dict[str, Any] = {}
        for section, values in overrides.items():
            if not isinstance(values, dict):
                continue
            if section in env_config.model_fields_set:
                from_env = getattr(env_config, section).model_dump(exclude_unset=True)
                merged[section] = {**values, **from_env}
            else:
                merged[section] = values
        return Config(**merged)


def load_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project directory (defaults to the working directory)."""
    return ConfigManager(project_dir).load_config()
