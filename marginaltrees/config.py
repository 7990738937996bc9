"""Configuration for marginal tree reconstruction."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class BuilderConfig:
    """Configuration for the marginal tree builder."""

    validate_conversions: bool = True
    logger_name: str = "marginaltrees.builder"


def _env_log_file() -> Optional[Path]:
    value = os.environ.get("MARGINALTREES_LOG_FILE")
    return Path(value) if value else None


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings, read from the environment by default."""

    level: str = field(
        default_factory=lambda: os.environ.get("MARGINALTREES_LOG_LEVEL", "INFO")
    )
    log_file: Optional[Path] = field(default_factory=_env_log_file)
    max_bytes: int = 1_000_000
    backup_count: int = 3
