#!/usr/bin/env python3
"""Terminal front-end for the payment gateway API.

Usage examples::

    paygate-cli pay 100 usd paypal
    paygate-cli accounts user-42
    paygate-cli shell
"""
from __future__ import annotations

import argparse
import asyncio
import shlex
import sys
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Optional

from paygate.adapters.http import GatewayApiClient, GatewayClientError
from paygate.config.settings import Settings
from paygate.domain.models import PaymentMethod

PAYMENT_METHODS = [m.value for m in PaymentMethod]


def _amount(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid amount: {value!r}") from None
    if not amount.is_finite() or amount <= 0:
        raise argparse.ArgumentTypeError("amount must be a positive number")
    return amount


def build_parser() -> argparse.ArgumentParser:
    settings = Settings()
    parser = argparse.ArgumentParser(prog="paygate-cli", description="Payment gateway CLI.")
    parser.add_argument("--api-url", default=settings.api_url, help="Gateway API base URL")
    parser.add_argument("--timeout", type=float, default=settings.client_timeout, help="Request timeout in seconds")

    commands = parser.add_subparsers(dest="command", required=True)

    pay = commands.add_parser("pay", help="Process a payment")
    pay.add_argument("amount", type=_amount)
    pay.add_argument("currency")
    pay.add_argument("method", choices=PAYMENT_METHODS)
    pay.add_argument("--name", default="CLI User", help="Customer name")
    pay.add_argument("--email", default="cli@example.com", help="Customer email")

    accounts = commands.add_parser("accounts", help="List linked bank accounts")
    accounts.add_argument("user_id")

    commands.add_parser("health", help="Check gateway health")
    commands.add_parser("shell", help="Start an interactive prompt")
    return parser


def render_payment(data: Dict[str, Any]) -> str:
    if not data.get("success"):
        return f"Payment failed: {data.get('message', 'unknown error')}"

    lines = [
        "Payment processed successfully!",
        f"   Transaction ID: {data['transactionId']}",
        f"   Status: {data['status']}",
        f"   Processing Time: {data.get('processingTime', 'n/a')}",
    ]
    if data.get("fees") is not None:
        lines.append(f"   Fees: ${data['fees']:.2f}")
    return "\n".join(lines)


def render_accounts(data: Dict[str, Any]) -> str:
    accounts = data.get("accounts", [])
    if not accounts:
        return "No linked bank accounts."

    lines = [f"Found {len(accounts)} linked accounts:"]
    for account in accounts:
        state = "active" if account.get("isActive") else "inactive"
        lines.append(
            f"   {account['bankName']} {account['accountType']} ({account['accountId']}): "
            f"{account['balance']:.2f} {account['currency']} [{state}]"
        )
    return "\n".join(lines)


def render_health(data: Dict[str, Any]) -> str:
    services = ", ".join(f"{name}={state}" for name, state in data.get("services", {}).items())
    return f"Gateway status: {data.get('status')} ({services})"


async def run_command(args: argparse.Namespace, client: GatewayApiClient, out=print) -> int:
    """Execute one parsed command. Returns the process exit code."""
    try:
        if args.command == "pay":
            out(f"Processing {args.method} payment: {args.amount} {args.currency.upper()}...")
            data = await client.process_payment(args.amount, args.currency, args.method, args.name, args.email)
            out(render_payment(data))
            return 0 if data.get("success") else 1
        if args.command == "accounts":
            out(render_accounts(await client.get_bank_accounts(args.user_id)))
            return 0
        if args.command == "health":
            out(render_health(await client.health()))
            return 0
    except GatewayClientError as exc:
        out(f"Error: {exc}")
        return 1

    out(f"Unknown command: {args.command}")
    return 1


async def run_shell(
    client: GatewayApiClient,
    parser: argparse.ArgumentParser,
    read_line: Callable[[str], str] = input,
    out=print,
) -> int:
    out("Welcome to the payment gateway CLI. Type 'help' for commands, 'exit' to quit.")
    while True:
        try:
            line = read_line("paygate> ")
        except EOFError:
            break

        try:
            words = shlex.split(line)
        except ValueError as exc:
            out(f"Error: {exc}")
            continue
        if not words:
            continue
        if words[0] == "exit":
            break
        if words[0] == "help":
            out(parser.format_help())
            continue
        if words[0] == "shell":
            out("Already in the shell.")
            continue

        try:
            args = parser.parse_args(words)
        except SystemExit:
            # argparse already printed the usage error
            continue
        await run_command(args, client, out=out)

    out("Goodbye!")
    return 0


async def _main(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    async with GatewayApiClient(args.api_url, timeout=args.timeout) as client:
        if args.command == "shell":
            return await run_shell(client, parser)
        return await run_command(args, client)


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return asyncio.run(_main(args, parser))


if __name__ == "__main__":
    sys.exit(main())
