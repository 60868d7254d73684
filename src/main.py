"""
Main CLI entry point for the subscription relay.

Usage:
    python src/main.py serve
    python src/main.py serve --port 3000
    python src/main.py subscribe P-123 someone@example.com --name "Jane Doe"
    python src/main.py status
    python src/main.py cancel --reason "Too expensive"
    python src/main.py clear

The client commands (subscribe, status, cancel, clear) talk to a running
relay and keep the last known subscription in a local cache directory.
"""

import asyncio
import sys
import argparse

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from client.relay_client import RelayClient, RelayClientError
from client.state_cache import SubscriptionCache
from config.constants import DEFAULT_RELAY_URL, SERVICE_NAME
from config.logging_config import setup_cli_logging
from config.settings import get_settings
from core.exceptions import ConfigurationError

DEFAULT_CACHE_DIR = "~/.subscription-relay"


def build_client(args) -> RelayClient:
    """Create a relay client from the shared CLI options."""
    return RelayClient(args.url, SubscriptionCache(args.cache_dir))


async def command_subscribe(args):
    """Create a subscription and print the approval link."""
    console = Console()
    client = build_client(args)

    try:
        result = await client.create_subscription(args.plan_id, args.email, args.name)
    except RelayClientError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        return 1

    console.print(Panel(
        f"Subscription: [cyan]{result['subscriptionId']}[/cyan]\n"
        f"Approve at:   [link]{result.get('approvalLink') or '-'}[/link]",
        title="Subscription created"
    ))
    console.print("[dim]Run 'status' after approving to refresh the cached state.[/dim]")
    return 0


async def command_status(args):
    """Re-validate the cached subscription and show it."""
    console = Console()
    client = build_client(args)

    report = await client.check_subscription_status()
    if report is None:
        console.print("[yellow]No subscription cached.[/yellow]")
        return 0

    table = Table(title=f"Subscription: {report.subscription_id}")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Status", report.status or "-")
    table.add_row("Active", "yes" if report.is_active else "no")
    if report.is_pending:
        table.add_row("Pending", "awaiting approval")

    snapshot = client.snapshot()
    table.add_row("Created", snapshot.created_at or "-")
    table.add_row("Validated", snapshot.validated_at or "-")

    console.print(table)

    if report.error:
        console.print(f"[red]Error: {report.error}[/red]")
        return 1
    return 0


async def command_cancel(args):
    """Cancel the given or cached subscription."""
    console = Console()
    client = build_client(args)

    try:
        result = await client.cancel_subscription(args.subscription_id, args.reason)
    except RelayClientError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        return 1

    console.print(f"[green]{result.get('message', 'Subscription cancelled')}[/green]")
    return 0


def command_clear(args):
    """Forget the cached subscription."""
    console = Console()
    build_client(args).clear()
    console.print("[green]Subscription cache cleared.[/green]")
    return 0


def command_serve(args):
    """Start the relay server."""
    import uvicorn

    from api.app import create_app

    console = Console()
    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port

    app = create_app(settings)

    console.print(f"[bold green]Starting {SERVICE_NAME}[/bold green]")
    console.print(f"Host: {host}")
    console.print(f"Port: {port}")
    console.print(f"PayPal: {settings.paypal_api_url}")
    if not settings.paypal_configured:
        console.print("[yellow]PayPal credentials not configured[/yellow]")

    uvicorn.run(app, host=host, port=port)

    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description=f"{SERVICE_NAME} - PayPal subscriptions for the browser extension",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Server configuration is read from RELAY_* environment variables or .env:
  RELAY_PAYPAL_CLIENT_ID, RELAY_PAYPAL_SECRET, RELAY_ENVIRONMENT,
  RELAY_AUTOMATION_WEBHOOK_URL, RELAY_PORT
        """
    )
    parser.add_argument(
        "--url",
        default=DEFAULT_RELAY_URL,
        help=f"Relay base URL for client commands (default: {DEFAULT_RELAY_URL})"
    )
    parser.add_argument(
        "--cache-dir",
        default=DEFAULT_CACHE_DIR,
        help=f"Directory for the local subscription cache (default: {DEFAULT_CACHE_DIR})"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logs"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the relay server")
    serve_parser.add_argument("--host", help="Host to bind to (default: RELAY_HOST)")
    serve_parser.add_argument("--port", type=int, help="Port to bind to (default: RELAY_PORT)")

    # Subscribe command
    subscribe_parser = subparsers.add_parser("subscribe", help="Create a subscription")
    subscribe_parser.add_argument("plan_id", help="PayPal plan ID")
    subscribe_parser.add_argument("email", help="Subscriber email")
    subscribe_parser.add_argument("--name", help="Subscriber given name")

    # Status command
    subparsers.add_parser("status", help="Validate the cached subscription")

    # Cancel command
    cancel_parser = subparsers.add_parser("cancel", help="Cancel a subscription")
    cancel_parser.add_argument(
        "subscription_id",
        nargs="?",
        help="Subscription ID (default: the cached one)"
    )
    cancel_parser.add_argument("--reason", help="Cancellation reason")

    # Clear command
    subparsers.add_parser("clear", help="Forget the cached subscription")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 0

    if args.command != "serve":
        setup_cli_logging(args.verbose)

    # Execute command
    try:
        if args.command == "serve":
            return command_serve(args)
        elif args.command == "subscribe":
            return asyncio.run(command_subscribe(args))
        elif args.command == "status":
            return asyncio.run(command_status(args))
        elif args.command == "cancel":
            return asyncio.run(command_cancel(args))
        elif args.command == "clear":
            return command_clear(args)
    except ConfigurationError as e:
        Console().print(f"[red]Error: {e.message}[/red]")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
