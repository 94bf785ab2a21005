import logging
import os
from pathlib import Path
from typing import Iterable

from .config import AppSettings


def _existing(paths: Iterable[Path]) -> list[Path]:
    return [p for p in paths if p.exists()]


def load_settings() -> AppSettings:
    # allow an explicit path via env var
    explicit = Path(os.environ["VECTORINDEX_ENV_FILE"]) if "VECTORINDEX_ENV_FILE" in os.environ else None

    if explicit is not None and not explicit.exists():
        raise FileNotFoundError(f"Explicitly specified env file not found: {explicit}")

    candidates = _existing([
        Path.cwd() / ".env",
        Path.cwd() / ".env.local",
    ])
    if explicit is not None:
        candidates.append(explicit)

    if not candidates:
        log = logging.getLogger("vectorindex.config.loader")
        log.debug("No env files found; using defaults and env vars only.")
        return AppSettings()

    # Later files override earlier ones
    return AppSettings(_env_file=[str(p) for p in candidates])
