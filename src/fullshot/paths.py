"""Path resolution for fullshot global and project directories.

- Global: ~/.fullshot/ for user-wide settings
- Project: .fullshot/ under the effective working directory
"""

from __future__ import annotations

import os
from pathlib import Path

GLOBAL_DIR_NAME = ".fullshot"
PROJECT_DIR_NAME = ".fullshot"
CONFIG_FILE_NAME = "fullshot.yaml"


def get_effective_cwd() -> Path:
    """Get the effective working directory.

    Returns FULLSHOT_CWD if set, else Path.cwd().
    """
    env_cwd = os.getenv("FULLSHOT_CWD")
    if env_cwd:
        return Path(env_cwd).resolve()
    return Path.cwd()


def get_global_dir() -> Path:
    """Get the global fullshot directory (not necessarily existing)."""
    return Path.home() / GLOBAL_DIR_NAME


def find_config_file() -> Path | None:
    """Locate the config file.

    Resolution order:
    1. FULLSHOT_CONFIG env var
    2. cwd/.fullshot/config/fullshot.yaml
    3. ~/.fullshot/fullshot.yaml

    Returns:
        Path to the first candidate that exists, or None
    """
    env_config = os.getenv("FULLSHOT_CONFIG")
    if env_config:
        return Path(env_config).expanduser()

    project_config = get_effective_cwd() / PROJECT_DIR_NAME / "config" / CONFIG_FILE_NAME
    if project_config.exists():
        return project_config

    global_config = get_global_dir() / CONFIG_FILE_NAME
    if global_config.exists():
        return global_config

    return None


def expand_path(path: str) -> Path:
    """Expand ~ and resolve a relative path against the effective cwd."""
    expanded = Path(path).expanduser()
    if not expanded.is_absolute():
        expanded = get_effective_cwd() / expanded
    return expanded.resolve()
