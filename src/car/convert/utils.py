import logging
from logging.config import dictConfig
from pathlib import Path
from typing import Callable, Optional

ARCHIVE_SUFFIX = ".xls"


def path_exists(arg: str) -> Path:
    return Path(arg).resolve(strict=True)


def dir_exists(arg: str) -> Path:
    path = Path(arg)
    return path.parent.resolve(strict=True) / path.name


def ensure_suffix(path: Path, suffix: str = ARCHIVE_SUFFIX) -> Path:
    """Append the suffix unless the name already ends in it (ignoring case)."""
    if path.name.lower().endswith(suffix.lower()):
        return path
    return path.with_name(path.name + suffix)


def confirm_overwrite(
    path: Path, prompt: Optional[Callable[[str], str]] = None
) -> bool:
    """Ask before replacing an existing file. Anything but yes means no."""
    if not path.exists():
        return True
    if prompt is None:
        prompt = input
    try:
        response = prompt(f"File '{path}' already exists. Overwrite? (y/N): ")
    except EOFError:
        return False
    return response.strip().lower() in ("y", "yes")


class _BelowError:
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


def configure_logging(verbose: bool = False) -> None:
    """Progress goes to stdout, errors to stderr, so ``list`` output stays clean."""
    dictConfig(
        {
            "version": 1,
            "formatters": {
                "plain": {"format": "%(message)s"},
                "detailed": {
                    "format": "[%(asctime)s] %(levelname)-8s %(name)s - %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S%z",
                },
            },
            "filters": {"below_error": {"()": _BelowError}},
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "detailed" if verbose else "plain",
                    "filters": ["below_error"],
                    "stream": "ext://sys.stdout",
                },
                "stderr": {
                    "class": "logging.StreamHandler",
                    "level": "ERROR",
                    "formatter": "plain",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "car": {
                    "level": "DEBUG" if verbose else "INFO",
                    "handlers": ["stdout", "stderr"],
                    "propagate": False,
                },
            },
            "root": {"level": "ERROR", "handlers": ["stderr"]},
            "disable_existing_loggers": False,
        }
    )
