"""Decorators for command functions."""

import asyncio
import functools
import inspect
import time
import traceback
from collections.abc import Callable

import typer

from todopro_core.models import BackendFailure, TodoProCoreError
from todopro_core.utils.logger import get_logger
from todopro_core.utils.ui.formatters import format_error

EXIT_ERROR = 1
EXIT_BACKEND_FAILURE = 2


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = EXIT_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


def _to_app_error(error: TodoProCoreError) -> AppError:
    if isinstance(error, BackendFailure):
        return AppError(f"Storage backend failed: {error.cause}", EXIT_BACKEND_FAILURE)
    return AppError(str(error), EXIT_ERROR)


def command_wrapper(func: Callable):
    """Decorator to wrap command functions with logging and error mapping."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger()
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            try:
                if inspect.iscoroutinefunction(func):
                    result = asyncio.run(func(*args, **kwargs))
                else:
                    result = func(*args, **kwargs)
            except TodoProCoreError as e:
                raise _to_app_error(e) from e

            elapsed = time.monotonic() - start
            logger.info("command completed: %s (%.3fs)", cmd, elapsed)
            return result

        except AppError as e:
            elapsed = time.monotonic() - start
            logger.error("command failed: %s (%.3fs) - %s", cmd, elapsed, str(e))
            format_error(str(e))
            raise typer.Exit(code=e.exit_code) from e

        except (typer.Exit, typer.Abort):
            raise

        except Exception as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) - %s\n%s",
                cmd,
                elapsed,
                str(e),
                traceback.format_exc(),
            )
            format_error(f"An unexpected error occurred: {str(e)}")
            raise typer.Exit(code=EXIT_ERROR) from e

    return wrapper
