"""Command-line interface for the SagaPay gateway.

Credentials are read from SAGAPAY_* environment variables (or a .env file)
and can be overridden per invocation.
"""

import dataclasses
import json
import sys
from pathlib import Path
from typing import Callable, Dict, Optional

import click
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sagapay.api import ClientConfig, SagaPayClient
from sagapay.config import get_config
from sagapay.errors import SagaPayError
from sagapay.exit_codes import ExitCode, exit_code_for
from sagapay.logging import setup_logging
from sagapay.models import (
    AddressType,
    DepositRequest,
    NetworkType,
    TransactionType,
    WebhookPayload,
    WireModel,
    WithdrawalRequest,
)
from sagapay.webhooks import WebhookVerifier, create_webhook_app

console = Console()
err_console = Console(stderr=True)

NETWORK_CHOICE = click.Choice([n.value for n in NetworkType])


def _make_client(overrides: Dict[str, Optional[str]]) -> SagaPayClient:
    """Build a client from settings plus command-line overrides."""
    config = ClientConfig.from_settings()
    changes = {name: value for name, value in overrides.items() if value}
    return SagaPayClient(dataclasses.replace(config, **changes))


def _run(ctx: click.Context, call: Callable[[SagaPayClient], WireModel], as_json: bool) -> None:
    """Run a gateway call and print its result, exiting with a mapped code on failure."""
    try:
        with _make_client(ctx.obj) as client:
            result = call(client)
    except SagaPayError as e:
        err_console.print(f"[red]✗ Error:[/red] {e}")
        sys.exit(exit_code_for(e))
    except KeyboardInterrupt:
        err_console.print("[yellow]Interrupted[/yellow]")
        sys.exit(ExitCode.INTERRUPTED)

    if as_json:
        click.echo(json.dumps(result.to_wire(), indent=2))
    else:
        _print_model(result)


def _print_model(model: WireModel) -> None:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Field")
    table.add_column("Value")

    for key, value in model.to_wire().items():
        if isinstance(value, (dict, list)):
            value = json.dumps(value)
        table.add_row(key, str(value))

    console.print()
    console.print(table)
    console.print()


@click.group()
@click.option("--api-key", default=None, help="API key (default: SAGAPAY_API_KEY)")
@click.option("--api-secret", default=None, help="API secret (default: SAGAPAY_API_SECRET)")
@click.option("--base-url", default=None, help="Gateway URL (default: SAGAPAY_BASE_URL)")
@click.pass_context
def main(
    ctx: click.Context,
    api_key: Optional[str],
    api_secret: Optional[str],
    base_url: Optional[str],
) -> None:
    """SagaPay blockchain payment gateway client."""
    try:
        setup_logging()
    except PydanticValidationError as e:
        err_console.print(f"[red]✗ Invalid SAGAPAY_* settings:[/red] {escape(str(e))}")
        sys.exit(ExitCode.USER_ERROR)
    ctx.obj = {"api_key": api_key, "api_secret": api_secret, "base_url": base_url}


@main.command()
@click.option("--network", required=True, type=NETWORK_CHOICE, help="Blockchain network")
@click.option("--contract", default="0", show_default=True, help="Token contract ('0' = native)")
@click.option("--amount", required=True, help="Amount as a decimal string")
@click.option("--ipn-url", required=True, help="URL notified on status changes")
@click.option("--udf", default=None, help="User-defined value echoed in notifications")
@click.option(
    "--address-type",
    type=click.Choice([t.value for t in AddressType]),
    default=None,
    help="Deposit address lifetime",
)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def deposit(
    ctx: click.Context,
    network: str,
    contract: str,
    amount: str,
    ipn_url: str,
    udf: Optional[str],
    address_type: Optional[str],
    as_json: bool,
) -> None:
    """Create a deposit address.

    \b
    Examples:
      sagapay deposit --network BEP20 --amount 1.5 --ipn-url https://shop.example/ipn
    """
    params = DepositRequest(
        network_type=network,
        contract_address=contract,
        amount=amount,
        ipn_url=ipn_url,
        udf=udf,
        type=address_type,
    )
    _run(ctx, lambda client: client.create_deposit(params), as_json)


@main.command()
@click.option("--network", required=True, type=NETWORK_CHOICE, help="Blockchain network")
@click.option("--contract", default="0", show_default=True, help="Token contract ('0' = native)")
@click.option("--address", required=True, help="Destination wallet address")
@click.option("--amount", required=True, help="Amount as a decimal string")
@click.option("--ipn-url", required=True, help="URL notified on status changes")
@click.option("--udf", default=None, help="User-defined value echoed in notifications")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def withdraw(
    ctx: click.Context,
    network: str,
    contract: str,
    address: str,
    amount: str,
    ipn_url: str,
    udf: Optional[str],
    as_json: bool,
) -> None:
    """Create a withdrawal."""
    params = WithdrawalRequest(
        network_type=network,
        contract_address=contract,
        address=address,
        amount=amount,
        ipn_url=ipn_url,
        udf=udf,
    )
    _run(ctx, lambda client: client.create_withdrawal(params), as_json)


@main.command()
@click.argument("address")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice([t.value for t in TransactionType]),
    default=TransactionType.DEPOSIT.value,
    show_default=True,
)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def status(ctx: click.Context, address: str, transaction_type: str, as_json: bool) -> None:
    """Show transactions for an address."""
    _run(
        ctx,
        lambda client: client.check_transaction_status(address, transaction_type),
        as_json,
    )


@main.command()
@click.argument("address")
@click.option("--network", required=True, type=NETWORK_CHOICE, help="Blockchain network")
@click.option("--contract", default=None, help="Token contract (omit for native asset)")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_context
def balance(
    ctx: click.Context,
    address: str,
    network: str,
    contract: Optional[str],
    as_json: bool,
) -> None:
    """Show the balance of a wallet."""
    _run(
        ctx,
        lambda client: client.fetch_wallet_balance(address, network, contract),
        as_json,
    )


@main.group()
def webhook() -> None:
    """Sign and receive webhook notifications."""
    pass


def _webhook_secret(secret: Optional[str]) -> str:
    config = get_config()
    resolved = secret or config.webhook_secret or config.api_secret
    if not resolved:
        err_console.print(
            "[red]✗ Error:[/red] no webhook secret. "
            "Pass --secret or set SAGAPAY_WEBHOOK_SECRET."
        )
        sys.exit(ExitCode.USER_ERROR)
    return resolved


@webhook.command()
@click.argument("body_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--secret", default=None, help="Signing secret (default: SAGAPAY_WEBHOOK_SECRET)")
def sign(body_file: Path, secret: Optional[str]) -> None:
    """Print the signature of a notification body file."""
    verifier = WebhookVerifier(_webhook_secret(secret))
    click.echo(verifier.compute_signature(body_file.read_bytes()))


@webhook.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", default=8080, type=int, help="Port to bind to (default: 8080)")
@click.option("--path", "route", default="/webhook", help="Webhook route (default: /webhook)")
@click.option("--secret", default=None, help="Signing secret (default: SAGAPAY_WEBHOOK_SECRET)")
def serve(host: str, port: int, route: str, secret: Optional[str]) -> None:
    """Run a webhook receiver that logs every verified notification.

    Examples:
        sagapay webhook serve
        sagapay webhook serve --host 0.0.0.0 --port 9000
    """
    import uvicorn

    def on_payload(payload: WebhookPayload) -> None:
        console.print(
            f"[green]✓[/green] {payload.id} {payload.type.value} "
            f"{payload.status.value} {payload.amount}"
        )

    app = create_webhook_app(WebhookVerifier(_webhook_secret(secret)), on_payload, route)

    console.print(f"[green]Receiving webhooks on http://{host}:{port}{route}[/green]")
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
