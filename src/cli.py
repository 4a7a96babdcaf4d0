"""Console entry point for the Cloud Functions Fleet Tool CLI."""

from __future__ import annotations

import argparse
import logging
from typing import List

from clients import CloudFunctionsRestClient
from config import DEFAULT_REGION, FleetConfig
from deployer import FunctionDeployer
from inspector import describe_function, list_functions
from log_utils import setup_logging

logger = logging.getLogger(__name__)

COMMANDS = ("deploy", "describe", "list")


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="gcf-fleet",
        usage="%(prog)s [OPTIONS] COMMAND [ARGS]",
        description="Deploy, describe and list Google Cloud Functions.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Commands:\n"
            "  deploy <function-name> [-e ENV] [-v VERSION] [-c] [-s SOURCE]\n"
            "                             Deploy cloud function\n"
            "  describe <function-name>   Describe cloud function details\n"
            "  list                       List all cloud functions\n\n"
            "Global options must come before COMMAND; everything after it is\n"
            "passed to the command.\n\n"
            "Environment Variables:\n"
            "  GOOGLE_APPLICATION_CREDENTIALS  Path to service account key\n"
            "  GCP_PROJECT_ID                  Default project ID"
        ),
    )
    parser.add_argument(
        "-p", "--project", metavar="PROJECT_ID", default="", help="GCP project ID"
    )
    parser.add_argument(
        "-r",
        "--region",
        default=DEFAULT_REGION,
        help=f"GCP region (default: {DEFAULT_REGION})",
    )
    parser.add_argument(
        "--output",
        choices=("table", "json"),
        default="table",
        help="Output format for describe/list (default: table)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("command", nargs="?", help=argparse.SUPPRESS)
    parser.add_argument("args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
    return parser


def _require_function_name(
    parser: argparse.ArgumentParser, command: str, args: List[str]
) -> str:
    if not args:
        parser.error(f"Function name required for {command} command")
    return args[0]


def main(argv: List[str] | None = None) -> int:
    """CLI main for console_scripts entry point."""
    parser = build_parser()
    args = parser.parse_args(args=argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command not in COMMANDS:
        print(f"Unknown command: {args.command}")
        parser.print_help()
        return 1

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        config = FleetConfig.from_args(args)
    except ValueError as e:
        parser.error(str(e))

    try:
        if args.command == "deploy":
            name = _require_function_name(parser, "deploy", args.args)
            FunctionDeployer(config).deploy(name, args.args[1:])
        elif args.command == "describe":
            name = _require_function_name(parser, "describe", args.args)
            with CloudFunctionsRestClient(config.project_id) as client:
                describe_function(config, client, name)
        else:
            with CloudFunctionsRestClient(config.project_id) as client:
                list_functions(config, client)
    except RuntimeError as e:
        logger.error(str(e))
        return 1

    return 0
