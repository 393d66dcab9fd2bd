"""
Logging setup and progress reporting.

Shelfwise logs through loguru. The CLI calls configure_logging() once;
library code only imports `logger`.
"""

import sys
from typing import Callable, Iterable, TypeVar

from loguru import logger

T = TypeVar("T")
U = TypeVar("U")


LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

DEFAULT_FORMAT = "<level>{level: <8}</level> | {message}"
TIMED_FORMAT = "<green>{elapsed}</green> | <level>{level: <8}</level> | {message}"


def configure_logging(level: str = "INFO", show_time: bool = False) -> None:
    """
    Route log output to stderr.

    Args:
        level: Minimum level to emit
        show_time: Prefix entries with the elapsed time
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=TIMED_FORMAT if show_time else DEFAULT_FORMAT,
    )


def run_sequence(
    label: str,
    tasks: Iterable[T],
    run_task: Callable[[T], U],
) -> list[U]:
    """
    Run tasks one at a time, logging numbered progress.

    Args:
        label: Description of the whole sequence
        tasks: Inputs to process
        run_task: Function applied to each input

    Returns:
        Results in task order
    """
    tasks = list(tasks)
    total = len(tasks)
    digits = len(str(total))

    logger.info(f"{'=' * (digits * 2 + 1)} {label}")

    results = []
    for index, task in enumerate(tasks, start=1):
        logger.info(f"{str(index).rjust(digits)}/{total} {label}")
        results.append(run_task(task))

    return results
