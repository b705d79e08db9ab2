"""
Commands Check - Inspect an address on the selected network.

Confirms the node serves the expected chain, whether the address holds
contract code, and whether the signer can pay for gas.
"""

from __future__ import annotations

import sys

import click

from ..chain.rpc import fetch_chain_id, get_balance, get_code
from ..verification.bytecode import has_code
from .common import (
    faucet_hint,
    header,
    label,
    load_signer,
    native,
    network_of,
    report_address,
    reports_errors,
)


@click.command()
@click.argument("address")
@click.pass_context
@reports_errors
def check(ctx: click.Context, address: str) -> None:
    """Check whether ADDRESS holds a contract."""
    network = network_of(ctx)
    header(f"Contract Check ({network.name})")
    report_address(network, address)

    chain_id = fetch_chain_id()
    if chain_id == network.chain_id:
        label("Chain ID", f"{chain_id} (matches {network.name})")
    else:
        label("Chain ID", click.style(
            f"{chain_id} (expected {network.chain_id} for {network.name})", fg="red"
        ))

    click.echo()
    code = get_code(address)
    has_contract = has_code(code)
    if has_contract:
        click.secho("  Contract code present", fg="green")
        label("Code size", f"{(len(code) - 2) // 2} bytes")
        label("Balance", native(network, get_balance(address)))
    else:
        click.secho("  No contract code at this address.", fg="red")
        click.echo("  Possible causes:")
        click.echo("    1. The address is a plain account (EOA), not a contract")
        click.echo("    2. The contract was never deployed to this network")
        click.echo("    3. The RPC endpoint points at a different network")

    click.echo()
    _, signer = load_signer(network)
    signer_balance = get_balance(signer)
    label("Signer", signer)
    label("Balance", native(network, signer_balance))
    if signer_balance == 0:
        faucet_hint(network)

    if not has_contract:
        sys.exit(1)
