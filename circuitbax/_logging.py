import logging
import logging.handlers
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

from circuitbax.config import CONFIG


def _remove_handlers(logger: logging.Logger, *, predicate) -> None:
    """Remove and close all handlers on `logger` for which `predicate(handler)` is True."""
    for h in list(logger.handlers):
        if predicate(h):
            logger.removeHandler(h)
            h.close()


def _console_handler_pred(h: logging.Handler) -> bool:
    return isinstance(h, (logging.StreamHandler, RichHandler)) and not isinstance(
        h, logging.FileHandler
    )


def _make_rotating_handler(path: Path, level: int, fmt: logging.Formatter) -> RotatingFileHandler:
    """Create a RotatingFileHandler writing to `path` at `level` with `fmt`."""
    fh = RotatingFileHandler(
        filename=str(path),
        maxBytes=CONFIG.logging.max_bytes,
        backupCount=CONFIG.logging.backup_count,
        encoding="utf-8",
    )
    fh.setLevel(level)
    fh.setFormatter(fmt)
    return fh


def enable_logging_handlers(
    console_level: int | None = None,
    log_file: Optional[Path | str] = None,
    file_level: int | None = None,
    *,
    logger_name: str = "circuitbax",
) -> logging.Logger:
    """
    Attach a Rich console handler (and optionally a rotating file handler) to the
    package logger. Levels and formats default to the `logging` section of the config.

    Calling this again replaces the handlers it attached before.
    """
    console_lvl: int = console_level or CONFIG.logging.console_level
    file_lvl: int = file_level or CONFIG.logging.file_level

    lg = logging.getLogger(logger_name)
    _remove_handlers(lg, predicate=_console_handler_pred)

    console_h = RichHandler(level=console_lvl)
    console_h.setFormatter(logging.Formatter(CONFIG.logging.console_format_str))
    lg.addHandler(console_h)

    if log_file is not None:
        _remove_handlers(lg, predicate=lambda h: isinstance(h, RotatingFileHandler))
        path = Path(log_file).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        lg.addHandler(
            _make_rotating_handler(
                path, file_lvl, logging.Formatter(CONFIG.logging.file_format_str)
            )
        )

    lg.setLevel(min(console_lvl, file_lvl) if log_file is not None else console_lvl)
    lg.info("Logging enabled for `%s`", logger_name)
    return lg
