"""Configuration management for recordkit projects."""

import os
from pathlib import Path
from typing import Optional, Dict, Any, List
import toml
from pydantic import BaseModel, Field, ConfigDict

DEFAULT_CHANNEL = "RecordKitDataDidChange"


class InflectionConfig(BaseModel):
    """Extra inflection rules layered over the built-in table."""

    irregular: Dict[str, str] = Field(
        default_factory=dict, description="Irregular singular -> plural words"
    )
    uncountable: List[str] = Field(
        default_factory=list, description="Words with no plural form"
    )


class ProjectConfig(BaseModel):
    """Configuration for a recordkit project stored in .recordkit/config.toml."""

    model_config = ConfigDict(
        extra="allow"
    )  # Allow additional fields for extensibility

    snapshot_dir: str = Field(
        default=".recordkit/snapshots",
        description="Directory relative snapshot paths resolve against",
    )
    notification_channel: str = Field(
        default=DEFAULT_CHANNEL, description="Channel name change events are posted under"
    )
    log_level: str = Field(default="WARNING", description="Logging level for the CLI")
    inflections: InflectionConfig = Field(
        default_factory=InflectionConfig, description="Extra inflection rules"
    )


class Config:
    """Manages recordkit project configuration."""

    def __init__(self, project_dir: Optional[Path] = None):
        """Initialize config manager.

        Args:
            project_dir: Path to project directory. If None, uses RECORDKIT_PROJECT_DIR env var or current directory.
        """
        # Check environment variable first
        if project_dir is None:
            env_dir = os.environ.get("RECORDKIT_PROJECT_DIR")
            if env_dir:
                project_dir = Path(env_dir)

        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.config_dir = self.project_dir / ".recordkit"
        self.config_path = self.config_dir / "config.toml"
        self._config: Optional[ProjectConfig] = None

    @property
    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    def load(self) -> ProjectConfig:
        """Load configuration from disk, with environment variable overrides."""
        if not self.exists:
            raise FileNotFoundError(f"Config file not found at {self.config_path}")

        with open(self.config_path, "r") as f:
            data = toml.load(f)

        self._apply_env_overrides(data)

        self._config = ProjectConfig(**data)
        return self._config

    def load_or_default(self) -> ProjectConfig:
        """Load the config file if present, otherwise defaults with env overrides."""
        if self.exists:
            return self.load()
        data: Dict[str, Any] = {}
        self._apply_env_overrides(data)
        self._config = ProjectConfig(**data)
        return self._config

    def _apply_env_overrides(self, data: Dict[str, Any]) -> None:
        """Apply environment variable overrides to configuration data."""
        if env_dir := os.environ.get("RECORDKIT_SNAPSHOT_DIR"):
            data["snapshot_dir"] = env_dir

        if env_level := os.environ.get("RECORDKIT_LOG_LEVEL"):
            data["log_level"] = env_level.upper()

    @property
    def snapshot_dir(self) -> Path:
        """Absolute snapshot directory for the loaded configuration."""
        config = self._config or self.load_or_default()
        path = Path(config.snapshot_dir).expanduser()
        return path if path.is_absolute() else self.project_dir / path

    def save(self, config: Optional[ProjectConfig] = None) -> None:
        """Save configuration to disk.

        Args:
            config: Configuration to save. If None, saves current config.
        """
        if config:
            self._config = config

        if not self._config:
            raise ValueError("No configuration to save")

        # Ensure config directory exists
        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, "w") as f:
            toml.dump(self._config.model_dump(), f)

    def init_project(self) -> ProjectConfig:
        """Initialize a new recordkit project with default configuration.

        Raises:
            FileExistsError: If the project already has a config file
        """
        if self.exists:
            raise FileExistsError(f"Project already initialized at {self.project_dir}")

        config = ProjectConfig()
        self.save(config)
        self.snapshot_dir.mkdir(parents=True, exist_ok=True)
        return config
