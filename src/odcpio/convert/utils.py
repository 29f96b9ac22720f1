import sys
from argparse import ArgumentParser
from logging.config import dictConfig
from pathlib import Path
from typing import NoReturn, Optional


class Parser(ArgumentParser):
    """An argument parser that exits with status 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def path_exists(arg: str) -> Path:
    return Path(arg).resolve(strict=True)


def dir_exists(arg: str) -> Path:
    path = Path(arg)
    return path.parent.resolve(strict=True) / path.name


def output_or_stdout(arg: str) -> Optional[Path]:
    if arg == "-":
        return None
    return dir_exists(arg)


def configure_debug_logging(verbosity: str = "DEBUG") -> None:
    dictConfig(
        {
            "version": 1,
            "formatters": {
                "detailed": {
                    "format": "[%(asctime)s] %(levelname)-8s - %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S%z",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": "DEBUG",
                    "formatter": "detailed",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "odcpio": {
                    "level": verbosity,
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
            "root": {"level": "ERROR", "handlers": ["console"]},
            "disable_existing_loggers": False,
        }
    )
