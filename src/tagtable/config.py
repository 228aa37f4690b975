"""Table settings (layout flags, terminal width) and logging config."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # None means "ask the console"; rich falls back to 80 off a terminal.
    terminal_width: int | None = None

    show_file_labels: bool = False
    display_empty_rows: bool = False
    flatten_results: bool = False
    truncate_long_items: bool = False

    log_path: Path = Path.home() / ".tagtable" / "tagtable.log"
    log_level: str = "INFO"

    model_config = {"env_prefix": "TAGTABLE_", "env_file": ".env", "extra": "ignore"}


def load_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Route tagtable diagnostics to stderr and a rotating log file.

    Meant for the front end that drives :func:`~tagtable.runner.run_queries`;
    the library itself only logs through module loggers.  Does nothing if
    the root logger is already configured.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    settings.log_path.parent.mkdir(parents=True, exist_ok=True)
    level = logging.getLevelName(settings.log_level.upper())
    root.setLevel(level)

    fmt = logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
    handlers: list[logging.Handler] = [
        logging.StreamHandler(),
        RotatingFileHandler(
            settings.log_path,
            maxBytes=1_000_000,
            backupCount=3,  # keep tagtable.log.1, .2, .3
        ),
    ]
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(fmt)
        root.addHandler(handler)
