"""Catalog of deployable templates."""

from __future__ import annotations

from dataclasses import dataclass

from templatekit.cli.ux import console, print_table
from templatekit.config.loader import AppDescriptor

DEFAULT_APPS: tuple[AppDescriptor, ...] = (
    AppDescriptor("agent", "Agent"),
    AppDescriptor("vault", "Vault"),
    AppDescriptor("voting", "Voting"),
    AppDescriptor("survey", "Survey"),
    AppDescriptor("payroll", "Payroll"),
    AppDescriptor("finance", "Finance"),
    AppDescriptor("token-manager", "TokenManager"),
)


@dataclass(frozen=True)
class TemplateSpec:
    """A template type: the name it is registered under and its contract."""

    command: str
    name: str
    resource_type: str
    description: str
    apps: tuple[AppDescriptor, ...] = DEFAULT_APPS


TEMPLATES: dict[str, TemplateSpec] = {
    spec.command: spec
    for spec in (
        TemplateSpec("bare", "bare-template", "BareTemplate", "Organization with no apps preinstalled"),
        TemplateSpec("company", "company-template", "CompanyTemplate", "Transferable-token organization"),
        TemplateSpec(
            "company-board",
            "company-board-template",
            "CompanyBoardTemplate",
            "Company with a separate board of directors",
        ),
        TemplateSpec("membership", "membership-template", "MembershipTemplate", "Non-transferable membership tokens"),
        TemplateSpec("reputation", "reputation-template", "ReputationTemplate", "Non-transferable reputation tokens"),
        TemplateSpec("trust", "trust-template", "TrustTemplate", "Family trust with hold and heirs"),
    )
}


def list_templates_command() -> int:
    """Print the available template types."""
    rows = [[spec.command, spec.name, spec.resource_type, spec.description] for spec in TEMPLATES.values()]
    print_table("Templates", ["Command", "Registered name", "Contract", "Description"], rows)
    console.print()
    return 0
