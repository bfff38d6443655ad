"""
Unified error handling for templatekit.

Every failure the orchestrator can raise derives from TemplateKitError and
carries the exit code the CLI returns for it.

Exit Codes:
- 0: Success
- 10: Configuration error
- 11: Ledger error (backend or transport failure)
- 20: Provisioning error (a dependency could not be resolved)
- 21: Deployment failure (a local deployment produced no valid handle)
- 22: Registration conflict (registry rejected a duplicate registration)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    CONFIG_ERROR = 10
    LEDGER_ERROR = 11
    PROVISIONING_ERROR = 20
    DEPLOYMENT_FAILURE = 21
    REGISTRATION_CONFLICT = 22
    UNKNOWN_ERROR = 127


class TemplateKitError(Exception):
    """Base exception for templatekit errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(TemplateKitError):
    """Raised for invalid options, plans, backends or templates."""

    exit_code = ExitCode.CONFIG_ERROR


class LedgerError(TemplateKitError):
    """Raised when a ledger backend call fails."""

    exit_code = ExitCode.LEDGER_ERROR


class ProvisioningError(TemplateKitError):
    """Raised when no resolution tier could provide a required dependency."""

    exit_code = ExitCode.PROVISIONING_ERROR

    def __init__(self, dependency: Any, reason: str):
        super().__init__(
            f"Could not resolve {dependency}: {reason}",
            details={"dependency": str(dependency)},
        )
        self.dependency = dependency
        self.reason = reason


class DeploymentFailure(TemplateKitError):
    """Raised when a local deployment did not yield a valid resource."""

    exit_code = ExitCode.DEPLOYMENT_FAILURE

    def __init__(self, dependency: Any, reason: str):
        super().__init__(
            f"Deployment of {dependency} failed: {reason}",
            details={"dependency": str(dependency)},
        )
        self.dependency = dependency
        self.reason = reason


class RegistrationConflict(LedgerError):
    """Raised by the registry layer when a name is already registered."""

    exit_code = ExitCode.REGISTRATION_CONFLICT


F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI main functions that provides unified error handling.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Exit codes:
        - TemplateKitError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except TemplateKitError as e:
                if log_errors:
                    logger.debug(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=int(e.exit_code),
                        **e.details,
                    )
                print(format_error_message(e), file=sys.stderr)
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130
            except Exception as e:
                if log_errors:
                    logger.debug(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=int(ExitCode.UNKNOWN_ERROR),
                    )
                print(f"Unexpected error: {e}", file=sys.stderr)
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: TemplateKitError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
