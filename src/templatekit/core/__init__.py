"""Core modules for templatekit - centralized error definitions."""

from templatekit.core.errors import (
    ConfigurationError,
    DeploymentFailure,
    ExitCode,
    LedgerError,
    ProvisioningError,
    RegistrationConflict,
    TemplateKitError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "TemplateKitError",
    "ConfigurationError",
    "LedgerError",
    "ProvisioningError",
    "DeploymentFailure",
    "RegistrationConflict",
    "main_with_error_handling",
    "format_error_message",
]
