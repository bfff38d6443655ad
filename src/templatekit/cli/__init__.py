"""
CLI commands for templatekit.
"""

from templatekit.cli.backends import list_backends_command
from templatekit.cli.deploy import deploy_template_command
from templatekit.cli.templates import list_templates_command

__all__ = [
    "deploy_template_command",
    "list_backends_command",
    "list_templates_command",
]
