"""Configuration management for theme-forge."""

import logging
import os
from pathlib import Path
from dataclasses import dataclass, field, fields
from typing import List, Optional, Dict, Any

import yaml

from .theme_engine.schema import DarkModeIntensity, WCAGLevel

logger = logging.getLogger(__name__)


@dataclass
class ForgeConfig:
    """Global configuration model for theme-forge."""

    # File paths
    data_dir: str = "~/.theme-forge"
    themes_dir: Optional[str] = None  # defaults to <data_dir>/themes
    output_dir: str = "./theme-output"

    # Generation defaults
    default_theme: str = "default"
    default_formats: List[str] = field(default_factory=lambda: ["css", "json"])
    css_scope: str = ":root"
    max_workers: int = 1

    # Resolution and accessibility
    strict_resolution: bool = False
    wcag_level: str = WCAGLevel.AA.value
    dark_mode_intensity: str = DarkModeIntensity.MODERATE.value

    # Logging
    log_level: str = "WARNING"

    def __post_init__(self):
        """Expand user paths and normalize enum-valued settings."""
        self.data_dir = os.path.expanduser(self.data_dir)
        if self.themes_dir:
            self.themes_dir = os.path.expanduser(self.themes_dir)
        else:
            self.themes_dir = str(Path(self.data_dir) / "themes")
        self.output_dir = os.path.expanduser(self.output_dir)

        try:
            self.wcag_level = WCAGLevel(str(self.wcag_level).upper()).value
        except ValueError:
            logger.warning(f"Unknown WCAG level '{self.wcag_level}', using AA")
            self.wcag_level = WCAGLevel.AA.value
        try:
            self.dark_mode_intensity = DarkModeIntensity(str(self.dark_mode_intensity).lower()).value
        except ValueError:
            logger.warning(f"Unknown dark mode intensity '{self.dark_mode_intensity}', using moderate")
            self.dark_mode_intensity = DarkModeIntensity.MODERATE.value

        self.log_level = str(self.log_level).upper()
        self.max_workers = max(1, int(self.max_workers))

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ForgeConfig":
        """Deserialize config from YAML; unknown keys are ignored."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.data_dir) / "config.yaml"

    def get_themes_path(self) -> Path:
        return Path(self.themes_dir)

    def get_output_path(self, theme_slug: Optional[str] = None) -> Path:
        """Directory generated files are written to."""
        if theme_slug:
            return Path(self.output_dir) / theme_slug
        return Path(self.output_dir)


class Config:
    """Configuration manager for theme-forge."""

    _instance: Optional[ForgeConfig] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> ForgeConfig:
        """Load configuration from file or fall back to defaults."""
        if cls._instance is not None:
            return cls._instance

        config = ForgeConfig()

        if config_path is None:
            config_path = config.get_config_path()
        config_path = Path(config_path)

        if config_path.exists():
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    config = ForgeConfig.from_yaml(f.read())
                logger.debug(f"Loaded configuration from {config_path}")
            except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {config_path}: {e}")
                logger.warning("Using default configuration.")
        else:
            logger.debug(f"No configuration at {config_path}; using defaults")

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ForgeConfig, config_path: Optional[Path] = None) -> None:
        """Save configuration to file.

        Raises:
            ValueError: If the file cannot be written
        """
        if config_path is None:
            config_path = config.get_config_path()
        config_path = Path(config_path)

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(config.to_yaml())
            logger.info(f"Configuration saved to {config_path}")
        except OSError as e:
            raise ValueError(f"Failed to save config to {config_path}: {e}")

    @classmethod
    def get(cls) -> ForgeConfig:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls, config_path: Optional[Path] = None) -> ForgeConfig:
        """Reload configuration from file."""
        cls._instance = None
        return cls.load(config_path)


def get_config() -> ForgeConfig:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None) -> ForgeConfig:
    """Load configuration from file."""
    return Config.load(config_path)


def save_config(config: ForgeConfig, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    Config.save(config, config_path)
