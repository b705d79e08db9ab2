"""
Commands Smoke - End-to-end check of a network.

Walks through what a fresh deployment needs: funds, chain info, a native
transfer, a Counter deployment, state-changing calls and event queries.
"""

from __future__ import annotations

import sys

import click

from ..chain.events import get_contract_events
from ..chain.interfaces import COUNTER_ABI
from ..chain.rpc import fetch_chain_id, get_balance, get_block_number, get_gas_price
from ..chain.tx import deploy_contract, ensure_success, send_value
from ..utils import format_units
from .common import (
    artifacts_of,
    faucet_hint,
    label,
    load_signer,
    native,
    network_of,
    parse_amount,
    report_address,
    report_tx,
    reports_errors,
)
from .counter import increment, read_value


def _step(number: int, title: str) -> None:
    click.echo()
    click.secho(f"=== {number}. {title} ===", fg="cyan")


@click.command()
@click.option("--amount", default="0.001", show_default=True,
              help="Native amount for the transfer step")
@click.option("--to", "recipient", envvar="SMOKE_RECIPIENT_ADDRESS", default=None,
              help="Transfer recipient (default: the signer itself)")
@click.option("--inc-by", default=5, type=click.IntRange(min=1), show_default=True)
@click.pass_context
@reports_errors
def smoke(ctx: click.Context, amount: str, recipient: str, inc_by: int) -> None:
    """Run an end-to-end smoke test on the selected network."""
    network = network_of(ctx)
    value = parse_amount(amount)
    private_key, me = load_signer(network)
    recipient = recipient or me
    click.echo(f"Smoke test on {network.name} as {me}")

    _step(1, "Balance")
    start_balance = get_balance(me)
    label("Balance", native(network, start_balance))
    if start_balance == 0:
        faucet_hint(network)
        sys.exit(1)

    _step(2, "Chain")
    gas_price = get_gas_price()
    label("Chain ID", fetch_chain_id())
    label("Block", get_block_number())
    label("Gas price", f"{format_units(gas_price, 9)} gwei")

    _step(3, "Native transfer")
    click.echo(f"  Sending {amount} {network.native_symbol} to {recipient}...")
    transfer = send_value(recipient, value, private_key=private_key)
    report_tx(network, transfer, "Transfer")
    ensure_success(transfer, "Transfer")
    label("Gas used", transfer.get("gas_used"))

    _step(4, "Deploy Counter")
    deployed = deploy_contract(
        "Counter", private_key=private_key, artifacts_dir=artifacts_of(ctx)
    )
    ensure_success(deployed, "Deployment")
    address = deployed["contract_address"]
    report_address(network, address)

    _step(5, "Counter calls")
    label("x", read_value(address))
    ensure_success(increment(address, private_key=private_key), "inc()")
    label("x", read_value(address))
    ensure_success(increment(address, inc_by, private_key=private_key), f"incBy({inc_by})")
    label("x", read_value(address))

    _step(6, "Events")
    found = get_contract_events(
        address, COUNTER_ABI, "Increment", from_block=transfer["block_number"]
    )
    click.echo(f"  {len(found)} Increment event(s)")
    for i, event in enumerate(found, 1):
        click.echo(f"    {i}. +{event.args['by']}")

    _step(7, "Cost")
    end_balance = get_balance(me)
    label("Balance", native(network, end_balance))
    label("Spent", native(network, start_balance - end_balance))

    click.echo()
    click.secho("Smoke test complete.", fg="green", bold=True)
