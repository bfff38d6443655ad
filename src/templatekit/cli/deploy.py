"""
Template deployment command.

Resolves the template's dependencies (override, registry lookup, local
deployment), reconciles its apps, deploys the template and records it.
"""

from __future__ import annotations

import logging
from typing import Any

from templatekit.cli.templates import TEMPLATES, TemplateSpec
from templatekit.cli.ux import console, header, print_table, success, warning
from templatekit.config.loader import load_deploy_options
from templatekit.config.settings import Settings, get_settings
from templatekit.core.errors import ConfigurationError, main_with_error_handling
from templatekit.ledger import create_backend
from templatekit.ledger.base import Ledger
from templatekit.logging import configure_logging
from templatekit.orchestration import DeploymentResult, TemplateDeployer, build_context
from templatekit.resources.handles import Dependency


def open_ledger(settings: Settings, backend: str | None = None, rpc_url: str | None = None) -> Ledger:
    """Create the configured ledger backend."""
    name = backend or settings.backend
    kwargs: dict[str, Any] = {}
    if name == "memory":
        kwargs["state_path"] = settings.memory_state_file
    elif name == "rpc":
        kwargs["url"] = rpc_url or settings.rpc_url
        kwargs["timeout"] = settings.rpc_timeout
    return create_backend(name, **kwargs)


@main_with_error_handling()
def deploy_template_command(
    template: str,
    *,
    network: str | None = None,
    backend: str | None = None,
    rpc_url: str | None = None,
    owner: str | None = None,
    config: str | None = None,
    record_file: str | None = None,
    overrides: dict[Dependency, str | None] | None = None,
    verbose: bool = False,
    settings: Settings | None = None,
) -> int:
    """
    Deploy one template type.

    Exit codes: 0 = deployed and recorded, non-zero = see ExitCode
    """
    spec = _template_spec(template)
    settings = settings or get_settings()

    options = load_deploy_options(config)
    options = options.merged_with(
        overrides=overrides,
        apps=None if options.apps else spec.apps,
        verbose=True if verbose or settings.verbose else None,
    )
    configure_logging(logging.DEBUG if options.verbose else logging.WARNING)

    ledger = open_ledger(settings, backend, rpc_url)
    try:
        ctx = build_context(ledger, settings, network=network, owner=owner, record_file=record_file)
        header(f"Deploying {spec.name} on {ctx.environment}")
        result = TemplateDeployer(ctx, options).deploy(spec.name, spec.resource_type)
    finally:
        ledger.close()

    _display_result(result, verbose=options.verbose)
    return 0


def _template_spec(template: str) -> TemplateSpec:
    spec = TEMPLATES.get(template)
    if spec is None:
        raise ConfigurationError(
            f"Unknown template '{template}'",
            details={"available": ", ".join(sorted(TEMPLATES))},
        )
    return spec


def _display_result(result: DeploymentResult, *, verbose: bool = False) -> None:
    rows = [
        [dependency.display_name, handle.address, result.tiers[dependency].value]
        for dependency, handle in result.dependencies.items()
    ]
    print_table("Dependencies", ["Dependency", "Address", "Resolved by"], rows)

    if verbose and result.apps:
        app_rows = [[report.name, report.registry_name, report.status.value] for report in result.apps]
        print_table("Apps", ["App", "Name", "Status"], app_rows)
        for name in result.absent_apps:
            warning(f"No {name} app registered")

    success(f"{result.template.resource_type} deployed at {result.template.address}")
    if result.template_registered:
        success(f"Registered {result.template_name} at version 1.0.0")
    console.print(f"[muted]Template addresses saved to {result.record_path}[/muted]")
