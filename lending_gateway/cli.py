"""Command-line interface for the lending gateway."""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

import uvicorn

from .api import create_app
from .codec import encode_account, encode_provider, encode_rates
from .config import load_config
from .errors import LendingError
from .logging_setup import configure_logging
from .models import AccountRequest, RatesRequest
from .registry import build_registry
from .services import LendingService


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="lending-gateway",
        description="Aggregation gateway for DeFi lending providers",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    serve_parser = sub.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind host (overrides config)")
    serve_parser.add_argument(
        "--port", type=int, default=None, help="Bind port (overrides config)"
    )

    sub.add_parser("providers", help="List providers and their assets")

    rates_parser = sub.add_parser("rates", help="Current rates of one provider")
    rates_parser.add_argument("provider")
    rates_parser.add_argument("assets", nargs="*", help="Asset symbols")

    account_parser = sub.add_parser("account", help="Lending contracts of addresses")
    account_parser.add_argument("provider")
    account_parser.add_argument(
        "--address",
        dest="addresses",
        action="append",
        required=True,
        help="Account address (repeatable)",
    )
    account_parser.add_argument(
        "--asset",
        dest="assets",
        action="append",
        default=[],
        help="Asset symbol filter (repeatable)",
    )

    return parser


async def _query(args: argparse.Namespace, service: LendingService) -> list[dict[str, Any]]:
    """Execute a one-shot query command and return the encoded docs."""
    if args.command == "providers":
        return [encode_provider(p) for p in await service.list_providers()]
    if args.command == "rates":
        result = await service.get_rates(args.provider, RatesRequest(assets=tuple(args.assets)))
        return [encode_rates(r) for r in result]
    accounts = await service.get_accounts(
        args.provider,
        AccountRequest(addresses=tuple(args.addresses), assets=tuple(args.assets)),
    )
    return [encode_account(a) for a in accounts]


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(args.log_level)
    config = load_config(args.config)
    service = LendingService(build_registry(config))

    if args.command == "serve":
        uvicorn.run(
            create_app(service),
            host=args.host or config.server.host,
            port=args.port or config.server.port,
            log_level=args.log_level.lower(),
        )
        return

    try:
        docs = asyncio.run(_query(args, service))
    except LendingError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps({"docs": docs}, indent=2))
