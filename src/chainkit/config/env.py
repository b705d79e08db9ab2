"""
Environment loading.

Reads ``.env`` and then ``.env.local`` from the project directory; values
in ``.env.local`` override those in ``.env``.  Variables already exported
in the shell are kept unless ``.env.local`` redefines them.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_FILES = (".env", ".env.local")


def env_dir() -> Path:
    return Path(os.environ.get("CHAINKIT_ENV_DIR", Path.cwd()))


def load_env(directory: Optional[Path] = None) -> list[Path]:
    """
    Load .env files from a directory.

    Args:
        directory: Where to look (default: CHAINKIT_ENV_DIR or cwd)

    Returns:
        The files that were found and loaded, in load order
    """
    directory = directory or env_dir()
    loaded: list[Path] = []

    base = directory / ENV_FILES[0]
    if base.exists():
        load_dotenv(base, override=False)
        loaded.append(base)

    local = directory / ENV_FILES[1]
    if local.exists():
        load_dotenv(local, override=True)
        loaded.append(local)

    return loaded
