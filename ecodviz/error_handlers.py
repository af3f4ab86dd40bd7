#!/usr/bin/env python3
"""
Error reporting for the ecodviz command line.

Errors are shown as one headline plus short hint lines taken from the
error's details: the chains a structure offers, where a structure was
looked for, which configuration values failed validation, and so on.
"""
import sys
import traceback
import logging
from functools import wraps
from typing import Callable, TypeVar, Any, Dict, List, Optional, Union

from .exceptions import (
    ECODError, ConfigurationError, DatabaseError, QueryError, StructureLoadError,
    StructureError, MappingError, ViewerError
)

T = TypeVar('T')

EXIT_OK = 0
EXIT_KNOWN_ERROR = 1
EXIT_UNEXPECTED_ERROR = 2
EXIT_INTERRUPTED = 130


def _structure_hints(error: StructureError) -> List[str]:
    chains = error.details.get('all_chains')
    if chains is None or 'Available chains:' in error.message:
        return []
    return [f"Available chains: {', '.join(chains) or 'none'}"]


def _load_hints(error: StructureLoadError) -> List[str]:
    details = error.details
    source = details.get('url') or details.get('path') or details.get('source')
    hints = [f"Source: {source}"] if source else []
    if details.get('url'):
        hints.append("Use --structure-file to load a local copy instead")
    return hints


def _config_hints(error: ConfigurationError) -> List[str]:
    hints = [f"  - {problem}" for problem in error.details.get('errors', [])]
    if error.details.get('config_path'):
        hints.append(f"Config file: {error.details['config_path']}")
    return hints


def _database_hints(error: DatabaseError) -> List[str]:
    if isinstance(error, QueryError):
        return []
    database, host = error.details.get('database'), error.details.get('host')
    if not database and not host:
        return []
    return [f"Database: {database or '?'} on {host or '?'}",
            "Set DB_HOST/DB_PORT/DB_NAME/DB_USER/DB_PASSWORD or the database section of the config"]


def _mapping_hints(error: MappingError) -> List[str]:
    domain_id = error.details.get('domain_id')
    if not domain_id:
        return []
    hint = f"Domain: {domain_id}"
    if error.details.get('chain'):
        hint += f" (chain {error.details['chain']})"
    return [hint]


def _viewer_hints(error: ViewerError) -> List[str]:
    backend = error.details.get('backend')
    return [f"Viewer backend: {backend}"] if backend else []


# First matching class wins; subclasses precede their bases
_HINTS = [
    (StructureLoadError, _load_hints),
    (StructureError, _structure_hints),
    (ConfigurationError, _config_hints),
    (DatabaseError, _database_hints),
    (MappingError, _mapping_hints),
    (ViewerError, _viewer_hints),
]


def error_hints(error: ECODError) -> List[str]:
    """Hint lines for an application error, empty if its details add nothing"""
    for error_class, hints in _HINTS:
        if isinstance(error, error_class):
            return hints(error)
    return []


def format_error(error: Exception, verbose: bool = False) -> str:
    """Format an error for the terminal

    Args:
        error: Exception object
        verbose: Append the raw details (or the traceback of unexpected errors)

    Returns:
        Formatted error message
    """
    if not isinstance(error, ECODError):
        if verbose:
            return f"Unexpected Error ({error.__class__.__name__}): {str(error)}\n{traceback.format_exc()}"
        return f"Unexpected Error: {str(error)}"

    lines = [f"{error.__class__.__name__}: {error.message}"]
    lines.extend(error_hints(error))
    if verbose and error.details:
        lines.append(f"Details: {error.details}")
    return "\n".join(lines)


def handle_exceptions(exit_on_error: bool = False) -> Callable[[Callable[..., T]], Callable[..., Union[T, int]]]:
    """Turn exceptions raised by a command into exit codes

    ECODError gives EXIT_KNOWN_ERROR, anything else EXIT_UNEXPECTED_ERROR and
    Ctrl-C EXIT_INTERRUPTED. With exit_on_error the code is passed to sys.exit.
    """
    def finish(code: int) -> int:
        if exit_on_error:
            sys.exit(code)
        return code

    def decorator(func: Callable[..., T]) -> Callable[..., Union[T, int]]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Union[T, int]:
            logger = logging.getLogger(func.__module__)
            try:
                return func(*args, **kwargs)
            except KeyboardInterrupt:
                logger.info("Operation cancelled by user")
                print("\nOperation cancelled by user", file=sys.stderr)
                return finish(EXIT_INTERRUPTED)
            except ECODError as e:
                log_exception(logger, e, logging.ERROR)
                print(format_error(e), file=sys.stderr)
                return finish(EXIT_KNOWN_ERROR)
            except Exception as e:
                logger.error(f"Unexpected error: {str(e)}", exc_info=True)
                print(format_error(e), file=sys.stderr)
                print("See log for details. Run with --verbose for more information.", file=sys.stderr)
                return finish(EXIT_UNEXPECTED_ERROR)
        return wrapper
    return decorator


def cli_error_handler(func: Callable[..., T]) -> Callable[..., T]:
    """handle_exceptions for console entry points, exiting with the error code"""
    return handle_exceptions(exit_on_error=True)(func)


def log_exception(logger: logging.Logger,
                  error: Exception,
                  level: int = logging.ERROR,
                  context: Optional[Dict[str, Any]] = None) -> None:
    """Log an exception with its details merged into ``record.context``

    Tracebacks are attached only at ERROR and above; per-domain misses
    logged as warnings stay one line each.
    """
    exc_info = level >= logging.ERROR
    if isinstance(error, ECODError):
        ctx = {**(error.details or {}), **(context or {})}
        logger.log(level, f"{error.__class__.__name__}: {error.message}",
                   extra={"context": ctx} if ctx else None,
                   exc_info=exc_info)
    else:
        logger.log(level, f"Unexpected error: {str(error)}",
                   extra={"context": context} if context else None,
                   exc_info=exc_info)
