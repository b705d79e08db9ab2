"""
Commands Account - Signer identity and native transfers.

- account: show which key signs, where it came from, and its balance
- send:    transfer native currency and wait for the receipt
"""

from __future__ import annotations

from typing import Optional

import click

from ..chain.rpc import fetch_chain_id, get_balance
from ..chain.tx import ensure_success, send_value
from ..wallet.eth import key_source
from .common import (
    faucet_hint,
    header,
    label,
    load_signer,
    native,
    network_of,
    parse_amount,
    report_tx,
    reports_errors,
)


@click.command()
@click.pass_context
@reports_errors
def account(ctx: click.Context) -> None:
    """Show the signing account for the selected network.

    The signer is whichever key the network's PRIVATE_KEY variable holds;
    contracts deployed from it see this address as msg.sender.
    """
    network = network_of(ctx)
    header(f"Signer ({network.name})")

    _, address = load_signer(network)
    balance = get_balance(address)
    chain_id = fetch_chain_id()

    label("Address", address)
    label("Key source", key_source(network))
    label("Balance", native(network, balance))
    label("Chain ID", chain_id)
    if chain_id != network.chain_id:
        click.secho(
            f"  Warning: node reports chain {chain_id}, expected {network.chain_id}",
            fg="yellow",
        )
    if balance == 0:
        click.echo()
        faucet_hint(network)


@click.command()
@click.option("--to", "recipient", default=None, help="Recipient (default: the signer itself)")
@click.option("--amount", default="0.001", show_default=True, help="Amount in native units")
@click.pass_context
@reports_errors
def send(ctx: click.Context, recipient: Optional[str], amount: str) -> None:
    """Send native currency from the signer."""
    network = network_of(ctx)
    header(f"Native Transfer ({network.name})")

    value = parse_amount(amount)

    private_key, sender = load_signer(network)
    recipient = recipient or sender

    label("From", sender)
    label("To", recipient)
    label("Amount", f"{amount} {network.native_symbol}")
    click.echo()
    click.echo("  Waiting for confirmation...")

    result = send_value(recipient, value, private_key=private_key)
    report_tx(network, result, "Transfer")
    ensure_success(result, "Transfer")
    label("Gas used", result.get("gas_used"))
