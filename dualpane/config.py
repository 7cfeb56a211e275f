"""
Runtime configuration for DualPane.

Values come from DUALPANE_* environment variables; anything not set falls back
to the defaults on Settings.
"""

import os
from typing import Mapping, Optional
from pydantic import BaseModel


# Directories skipped by recursive search for performance
EXCLUDED_DIRS = {
    # Package managers
    'node_modules', '.pnpm', 'bower_components',
    # Version control
    '.git', '.svn', '.hg',
    # Build outputs
    'dist', 'build', '.next', '.nuxt', '.output',
    # Caches
    '.cache', '__pycache__', '.pytest_cache', '.mypy_cache', '.tox',
    # Virtual environments
    '.venv', 'venv',
}

# Maximum depth for recursive search
MAX_SEARCH_DEPTH = 5

# Notices kept for GET /api/notices
MAX_NOTICES = 50

# Seconds to wait for a clipboard tool before trying the next one
CLIPBOARD_TIMEOUT = 5


class Settings(BaseModel):
    """Settings read from the environment"""
    home_dir: Optional[str] = None
    log_level: str = "INFO"
    notice_duration_ms: int = 3000
    copy_progress_delay: float = 0.05


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Settings with every DUALPANE_* override applied
    """
    if environ is None:
        environ = os.environ

    values = {}
    mapping = {
        "DUALPANE_HOME_DIR": "home_dir",
        "DUALPANE_LOG_LEVEL": "log_level",
        "DUALPANE_NOTICE_DURATION_MS": "notice_duration_ms",
        "DUALPANE_COPY_PROGRESS_DELAY": "copy_progress_delay",
    }
    for env_name, field in mapping.items():
        value = environ.get(env_name)
        if value:
            values[field] = value

    # pydantic coerces the numeric strings
    return Settings(**values)
