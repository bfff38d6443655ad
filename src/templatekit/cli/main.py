from __future__ import annotations

import argparse
import sys
from typing import Sequence

from templatekit.cli.templates import TEMPLATES
from templatekit.resources.handles import Dependency


def _add_deploy_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--network", help="Target network (local networks allow deploying missing dependencies)")
    parser.add_argument("--backend", help="Ledger backend (memory, rpc)")
    parser.add_argument("--rpc-url", help="Deployment gateway URL for the rpc backend")
    parser.add_argument("--owner", help="Account that owns deployed resources")
    parser.add_argument("--config", help="YAML file with dependency overrides and apps")
    parser.add_argument("--record-file", help="File the template record is written to")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every resolution step")

    overrides = parser.add_argument_group("dependency overrides")
    for dependency in Dependency:
        flag = "--" + dependency.value.replace("_", "-")
        overrides.add_argument(flag, dest=dependency.value, help=f"Use this {dependency.display_name} address")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="templatekit", description="Template provisioning CLI")
    subparsers = parser.add_subparsers(dest="command")

    deploy_parser = subparsers.add_parser("deploy", help="Deploy a template and its dependencies")
    template_parsers = deploy_parser.add_subparsers(dest="template")
    for command, spec in TEMPLATES.items():
        template_parser = template_parsers.add_parser(command, help=f"Deploy {spec.name} ({spec.description})")
        _add_deploy_arguments(template_parser)

    subparsers.add_parser("templates", help="List available templates")
    subparsers.add_parser("backends", help="List ledger backends")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "deploy":
        if not args.template:
            parser.error("deploy requires a template type")
        from templatekit.cli.deploy import deploy_template_command

        sys.exit(
            deploy_template_command(
                args.template,
                network=args.network,
                backend=args.backend,
                rpc_url=args.rpc_url,
                owner=args.owner,
                config=args.config,
                record_file=args.record_file,
                overrides={dependency: getattr(args, dependency.value) for dependency in Dependency},
                verbose=args.verbose,
            )
        )

    if args.command == "templates":
        from templatekit.cli.templates import list_templates_command

        sys.exit(list_templates_command())

    if args.command == "backends":
        from templatekit.cli.backends import list_backends_command

        sys.exit(list_backends_command())

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":  # pragma: no cover - exercised via module entrypoint
    main()
