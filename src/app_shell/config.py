import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from src.rules.loader import DEFAULT_RULES_PATH
from src.rules.models import Rules

logger = logging.getLogger(__name__)

BACKENDS = ("sqlite", "memory")


@dataclass
class Settings:
    """Runtime settings read from JOURNAL_* environment variables."""

    data_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("JOURNAL_DATA_DIR", "./data"))
    )
    backend: str = field(default_factory=lambda: os.environ.get("JOURNAL_BACKEND", "sqlite"))
    rules_path: Path = field(
        default_factory=lambda: Path(os.environ.get("JOURNAL_RULES_PATH", str(DEFAULT_RULES_PATH)))
    )

    @property
    def db_path(self) -> str:
        return str(self.data_dir / "journal.db")


def validate_ops_rules(rules: Rules, settings: Settings) -> None:
    """
    Validate operational requirements before startup. Exits on failure.
    """
    if settings.backend not in BACKENDS:
        logger.critical(f"Unknown JOURNAL_BACKEND {settings.backend!r}; expected one of {BACKENDS}")
        sys.exit(1)

    missing = [env_var for env_var in rules.ops.required_env if env_var not in os.environ]
    if missing:
        logger.critical(f"Missing required environment variables: {', '.join(missing)}")
        sys.exit(1)

    if settings.backend == "sqlite":
        settings.data_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Configuration validated.")
