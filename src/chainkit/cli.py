"""
chainkit CLI

Command-line interface for deploying, exercising and verifying Solidity
contracts on local and public EVM test networks.

Contracts are compiled by Hardhat or Foundry; chainkit reads their
artifacts, signs with the key configured for the selected network
(.env / .env.local), and talks JSON-RPC to the node.

Commands:
  account   - Show the signer for the selected network
  send      - Send native currency
  check     - Inspect an address for contract code
  counter   - Deploy and drive the Counter contract
  token     - ERC-20 deployment and operations
  fee-token - ERC-20 with a native-currency transfer fee
  verify    - Compare deployed bytecode / explorer status
  smoke     - End-to-end network smoke test
  networks  - List configured networks
  info      - Show system information
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from .config.env import load_env
from .config.networks import DEFAULT_NETWORK, NETWORKS, activate, get_network
from .errors import NetworkConfigError
from .wallet.eth import key_source


# ============ Constants ============

VERSION = "0.3.0"


# ============ Banner ============


def _print_banner() -> None:
    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()
    click.echo(
        click.style("        C H A I N K I T", fg="bright_white", bold=True)
        + click.style(f"          v{VERSION}", dim=True)
    )
    click.secho("        ─── EVM contract toolkit ───", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="chainkit")
@click.option(
    "--network", "-n", "network_name",
    envvar="CHAINKIT_NETWORK",
    default=DEFAULT_NETWORK,
    show_default=True,
    help="Target network (see 'chainkit networks')",
)
@click.option("--rpc-url", default=None, help="Override the network's RPC URL")
@click.option(
    "--artifacts",
    envvar="CHAINKIT_ARTIFACTS",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Compilation output directory (artifacts/contracts or out)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    network_name: str,
    rpc_url: Optional[str],
    artifacts: Optional[Path],
) -> None:
    """chainkit: deploy, exercise and verify EVM contracts."""
    load_env()
    try:
        network = get_network(network_name)
        url = activate(network, rpc_url)
    except NetworkConfigError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    ctx.ensure_object(dict)
    ctx.obj["network"] = network
    ctx.obj["rpc_url"] = url
    ctx.obj["artifacts"] = artifacts

    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .commands.account import account, send
from .commands.check import check
from .commands.counter import counter
from .commands.fee_token import fee_token
from .commands.smoke import smoke
from .commands.token import token
from .commands.verify import verify

cli.add_command(account)
cli.add_command(send)
cli.add_command(check)
cli.add_command(counter)
cli.add_command(token)
cli.add_command(fee_token)
cli.add_command(verify)
cli.add_command(smoke)


# ============ Networks ============


@cli.command()
def networks() -> None:
    """List configured networks."""
    for name, network in NETWORKS.items():
        kind = "testnet" if network.testnet else "local"
        click.echo(
            click.style(f"  {name:<12}", fg="bright_white", bold=True)
            + click.style(f" chain {network.chain_id:<9}", dim=True)
            + f" {network.native_symbol:<4} {kind}"
        )


# ============ Info ============


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show system information."""
    _print_banner()
    network = ctx.obj["network"]

    click.secho("  Status ─────────────────────────────────", fg="cyan")
    click.echo()
    click.echo(click.style("  Network:     ", dim=True) + click.style(network.name, fg="bright_white"))
    click.echo(click.style("  Chain ID:    ", dim=True) + str(network.chain_id))
    click.echo(click.style("  RPC:         ", dim=True) + ctx.obj["rpc_url"])
    click.echo(click.style("  Signer key:  ", dim=True) + key_source(network))

    artifacts = ctx.obj["artifacts"]
    if artifacts is None:
        from .chain.abi import find_artifacts_dir
        from .errors import ArtifactError

        try:
            artifacts = find_artifacts_dir()
        except ArtifactError:
            artifacts = None
    if artifacts is not None:
        artifacts_text = click.style(str(artifacts), fg="green")
    else:
        artifacts_text = click.style("not found", fg="yellow") + click.style(
            "  (run: npx hardhat compile)", dim=True
        )
    click.echo(click.style("  Artifacts:   ", dim=True) + artifacts_text)
    click.echo()


# ============ Entry Points ============


def main() -> None:
    """chainkit CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: old Python or non-tty
    cli()


if __name__ == "__main__":
    main()
