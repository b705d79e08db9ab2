"""
Commands Verify - Check deployed code against the local build.

- bytecode: compare eth_getCode with the artifact's deployedBytecode
- status:   ask the block explorer whether sources are published
"""

from __future__ import annotations

import sys

import click

from ..chain.abi import load_deployed_bytecode
from ..chain.rpc import get_code
from ..verification.bytecode import (
    METADATA_HEX_LENGTH,
    MatchKind,
    compare,
    diff_context,
    has_code,
    strip_metadata,
)
from ..verification.explorer import code_url, fetch_verification_status, verify_command
from .common import artifacts_of, header, label, network_of, reports_errors

PREVIEW_LENGTH = 100

MISMATCH_CAUSES = (
    "Different optimizer settings at deployment",
    "Different Solidity compiler version",
    "Contract source changed since deployment",
)


@click.group()
def verify() -> None:
    """Verify deployed contracts."""


@verify.command("bytecode")
@click.argument("address")
@click.option(
    "--contract", "contract_name", default="Counter", show_default=True,
    help="Artifact name of the contract deployed at ADDRESS",
)
@click.option(
    "--constructor-arg", "constructor_args", multiple=True,
    help="Constructor argument, for the printed verify command (repeatable)",
)
@click.pass_context
@reports_errors
def verify_bytecode(
    ctx: click.Context, address: str, contract_name: str, constructor_args: tuple
) -> None:
    """Compare on-chain bytecode at ADDRESS with the local artifact.

    Solidity appends a metadata hash to every build, so a match that
    differs only in the trailing metadata window is still verifiable.
    """
    network = network_of(ctx)
    header(f"Bytecode Verification ({network.name})")

    deployed = get_code(address)
    label("Contract", address, width=16)
    label("On-chain size", f"{len(deployed)} chars", width=16)
    if not has_code(deployed):
        click.echo()
        click.secho("  No contract code at this address.", fg="red")
        click.echo("  It may be an EOA, or the contract was never deployed on this network.")
        sys.exit(1)
    label("On-chain head", deployed[:PREVIEW_LENGTH] + "...", width=16)

    local = load_deployed_bytecode(contract_name, artifacts_of(ctx))
    label("Local size", f"{len(local)} chars ({contract_name})", width=16)
    label("Local head", local[:PREVIEW_LENGTH] + "...", width=16)

    result = compare(deployed, local)

    click.echo()
    click.echo(f"  Without metadata ({METADATA_HEX_LENGTH} hex chars):")
    label("On-chain", len(strip_metadata(result.deployed)), width=14)
    label("Local", len(strip_metadata(result.local)), width=14)
    click.echo()

    command = verify_command(network, address, list(constructor_args))

    if result.kind is MatchKind.EXACT_MATCH:
        click.secho("  Bytecode matches exactly (including metadata).", fg="green", bold=True)
    elif result.kind is MatchKind.MATCH_EXCLUDING_METADATA:
        click.secho("  Bytecode matches excluding the metadata hash.", fg="yellow", bold=True)
        click.echo("  This is expected: the compiler embeds a build-specific metadata hash.")
    else:
        click.secho("  Bytecode does NOT match.", fg="red", bold=True)
        if result.first_difference is not None:
            on_chain, local_window = diff_context(result)
            click.echo()
            click.echo(f"  First difference at index {result.first_difference}:")
            label("On-chain", f"...{on_chain}...", width=14)
            label("Local", f"...{local_window}...", width=14)
        click.echo()
        click.echo("  Possible causes:")
        for i, cause in enumerate(MISMATCH_CAUSES, 1):
            click.echo(f"    {i}. {cause}")
        click.echo()
        click.echo("  Redeploy the contract, or align the compiler settings with the deployment.")
        sys.exit(1)

    click.echo()
    click.echo("  Ready to verify:")
    click.echo(f"    {command}")
    link = code_url(network, address)
    if link:
        click.echo(f"  Then check: {link}")


@verify.command("status")
@click.argument("address")
@click.option("--api-key", default=None, help="Explorer API key (default: from .env)")
@click.pass_context
@reports_errors
def verify_status(ctx: click.Context, address: str, api_key: str) -> None:
    """Show whether ADDRESS has verified source on the explorer."""
    network = network_of(ctx)
    header(f"Explorer Verification ({network.name})")

    status = fetch_verification_status(network, address, api_key=api_key)

    label("Contract", address)
    if status.verified:
        click.secho("  Source verified", fg="green", bold=True)
        label("Name", status.contract_name or "?")
        label("Compiler", status.compiler_version or "?")
        if status.optimization_used is not None:
            runs = f" ({status.runs} runs)" if status.runs is not None else ""
            label("Optimizer", ("enabled" if status.optimization_used else "disabled") + runs)
    else:
        click.secho("  Source not verified", fg="yellow", bold=True)
        click.echo(f"  Run: {verify_command(network, address)}")

    link = code_url(network, address)
    if link:
        label("Explorer", link)
