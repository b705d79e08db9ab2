"""
Commands Counter - Deploy and drive the Counter contract.

Counter exposes x(), inc(), incBy(uint256) and emits Increment(by) on
every change, so the sum of all Increment events must equal x().
"""

from __future__ import annotations

import sys

import click

from ..chain.events import get_contract_events
from ..chain.interfaces import COUNTER_ABI
from ..chain.rpc import get_balance, read_contract
from ..chain.tx import deploy_contract, ensure_success, send_contract_tx
from ..verification.explorer import verify_command
from .common import (
    artifacts_of,
    faucet_hint,
    header,
    label,
    load_signer,
    native,
    network_of,
    report_address,
    report_tx,
    reports_errors,
)

ADDRESS_OPTION = click.option(
    "--address", envvar="COUNTER_ADDRESS", required=True,
    help="Counter contract address (env: COUNTER_ADDRESS)",
)


def read_value(address: str) -> int:
    return read_contract(address, "x", abi=COUNTER_ABI) or 0


def increment(address: str, by: int | None = None, private_key: str | None = None) -> dict:
    """Call inc() or incBy(by) and wait for the receipt."""
    if by is None:
        result = send_contract_tx(address, "inc", [], abi=COUNTER_ABI, private_key=private_key)
    else:
        result = send_contract_tx(
            address, "incBy", [by], abi=COUNTER_ABI, private_key=private_key
        )
    return result


@click.group()
def counter() -> None:
    """Counter contract operations."""


@counter.command()
@click.option("--contract", "contract_name", default="Counter", show_default=True,
              help="Artifact name to deploy")
@click.option("--inc-by", default=0, type=int, help="Call incBy(N) after deploying")
@click.pass_context
@reports_errors
def deploy(ctx: click.Context, contract_name: str, inc_by: int) -> None:
    """Deploy a Counter and exercise it once."""
    network = network_of(ctx)
    header(f"Deploy {contract_name} ({network.name})")

    private_key, deployer = load_signer(network)
    balance = get_balance(deployer)
    label("Deployer", deployer)
    label("Balance", native(network, balance))
    if balance == 0:
        click.secho("  Insufficient balance to deploy.", fg="red")
        faucet_hint(network)
        sys.exit(1)

    click.echo()
    click.echo(f"  Deploying {contract_name}...")
    result = deploy_contract(
        contract_name, private_key=private_key, artifacts_dir=artifacts_of(ctx)
    )
    ensure_success(result, "Deployment")
    address = result["contract_address"]

    click.secho("  Deployed!", fg="green", bold=True)
    report_address(network, address)
    label("TX", result["tx_hash"])

    click.echo()
    label("x", read_value(address))
    if inc_by:
        click.echo(f"  Calling incBy({inc_by})...")
    else:
        click.echo("  Calling inc()...")
    tx = increment(address, inc_by or None, private_key=private_key)
    ensure_success(tx, "Increment")
    label("x", read_value(address))

    if not network.is_local:
        click.echo()
        click.echo("  Verify the source with:")
        click.echo(f"    {verify_command(network, address)}")
    click.echo()
    click.echo(f"  export COUNTER_ADDRESS={address}")


@counter.command()
@ADDRESS_OPTION
@click.pass_context
@reports_errors
def read(ctx: click.Context, address: str) -> None:
    """Read the current value x()."""
    click.echo(f"x = {read_value(address)}")


@counter.command()
@ADDRESS_OPTION
@click.pass_context
@reports_errors
def inc(ctx: click.Context, address: str) -> None:
    """Increment by one."""
    network = network_of(ctx)
    private_key, _ = load_signer(network)
    click.echo(f"  x before: {read_value(address)}")
    result = increment(address, private_key=private_key)
    report_tx(network, result, "inc()")
    ensure_success(result, "inc()")
    click.echo(f"  x after:  {read_value(address)}")


@counter.command("inc-by")
@ADDRESS_OPTION
@click.argument("amount", type=click.IntRange(min=1))
@click.pass_context
@reports_errors
def inc_by(ctx: click.Context, address: str, amount: int) -> None:
    """Increment by AMOUNT."""
    network = network_of(ctx)
    private_key, _ = load_signer(network)
    click.echo(f"  x before: {read_value(address)}")
    result = increment(address, amount, private_key=private_key)
    report_tx(network, result, f"incBy({amount})")
    ensure_success(result, f"incBy({amount})")
    click.echo(f"  x after:  {read_value(address)}")


@counter.command()
@ADDRESS_OPTION
@click.option("--from-block", default=0, type=int, show_default=True)
@click.pass_context
@reports_errors
def events(ctx: click.Context, address: str, from_block: int) -> None:
    """List Increment events."""
    found = get_contract_events(address, COUNTER_ABI, "Increment", from_block=from_block)
    click.echo(f"{len(found)} Increment event(s)")
    for i, event in enumerate(found, 1):
        click.echo(f"  {i}. block {event.block_number}: +{event.args['by']}")


@counter.command()
@ADDRESS_OPTION
@click.option("--from-block", default=0, type=int, show_default=True,
              help="Deployment block of the contract")
@click.pass_context
@reports_errors
def tally(ctx: click.Context, address: str, from_block: int) -> None:
    """Check that the Increment events add up to x()."""
    found = get_contract_events(address, COUNTER_ABI, "Increment", from_block=from_block)
    total = sum(event.args["by"] for event in found)
    value = read_value(address)

    label("Events", len(found))
    label("Sum", total)
    label("x()", value)
    if total == value:
        click.secho("  Events match the counter value.", fg="green")
    else:
        click.secho("  Events do not add up to the counter value.", fg="red")
        sys.exit(1)
