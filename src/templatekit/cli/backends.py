from __future__ import annotations

from templatekit.cli.ux import print_table
from templatekit.ledger import list_backends


def list_backends_command() -> int:
    """Print the registered ledger backends."""
    rows = [[spec.name, spec.description or "(not provided)"] for spec in list_backends()]
    print_table("Ledger backends", ["Name", "Description"], rows)
    return 0
