"""Configuration for fullshot.

Loads fullshot.yaml with driver and capture settings.

Example fullshot.yaml:

    driver_url: http://localhost:9515
    timeout: 60
    emulation: device-metrics
    restore_device_metrics: false
    screenshot_dir: .fullshot/screenshots
    webp_quality: 85
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from fullshot.errors import ConfigError
from fullshot.paths import expand_path, find_config_file

EmulationMode = Literal["device-metrics", "force-viewport", "auto"]


class FullshotConfig(BaseModel):
    """Configuration for the screenshot relay."""

    driver_url: str = Field(
        default="http://localhost:9515",
        description="Base URL of the chromedriver serving the session",
    )
    timeout: float = Field(
        default=60.0, gt=0, description="Round-trip timeout for each command in seconds"
    )

    # Capture settings
    emulation: EmulationMode = Field(
        default="device-metrics",
        description="How the renderer is stretched to the content size",
    )
    restore_device_metrics: bool = Field(
        default=False,
        description="Clear the device metrics override after capture, on every exit path",
    )
    screenshot_dir: str = Field(
        default=".fullshot/screenshots",
        description="Directory for file screenshots (relative to cwd)",
    )
    webp_quality: int = Field(
        default=85, ge=1, le=100, description="WebP quality for converted screenshots"
    )

    log_level: str = Field(
        default_factory=lambda: os.getenv("FULLSHOT_LOG_LEVEL", "INFO"),
        description="Minimum log level",
    )

    def get_screenshot_path(self) -> Path:
        """Get resolved path for the screenshot directory."""
        return expand_path(self.screenshot_dir)


def load_config(config_path: Path | str | None = None) -> FullshotConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to config file (overrides resolution)

    Returns:
        Validated FullshotConfig

    Raises:
        ConfigError: If the file cannot be read, parsed or validated
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is None or not path.exists():
        logger.debug("No config file found, using defaults")
        return FullshotConfig()

    logger.debug(f"Loading config from {path}")
    try:
        with path.open() as f:
            raw_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading {path}: {e}") from e

    if raw_data is None:
        raw_data = {}
    if not isinstance(raw_data, dict):
        raise ConfigError(f"Invalid configuration in {path}: expected a mapping")

    try:
        return FullshotConfig.model_validate(raw_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


# Global config instance
_config: FullshotConfig | None = None


def get_config(config_path: Path | str | None = None, reload: bool = False) -> FullshotConfig:
    """Get or load the global configuration.

    Args:
        config_path: Path to config file (only used on first load)
        reload: Force reload configuration
    """
    global _config

    if _config is None or reload:
        _config = load_config(config_path)

    return _config
