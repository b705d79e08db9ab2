"""
Helpers shared by the command modules: context access, signer loading,
error reporting and the recurring output lines.
"""

from __future__ import annotations

import functools
import sys
from pathlib import Path
from typing import Any, Callable, NoReturn, Optional

import click

from ..chain.rpc import get_code
from ..config.networks import Network
from ..errors import ChainkitError
from ..utils import format_units, parse_units
from ..verification.bytecode import has_code
from ..verification.explorer import address_url, tx_url
from ..wallet.eth import get_address, load_private_key


def network_of(ctx: click.Context) -> Network:
    return ctx.find_root().obj["network"]


def artifacts_of(ctx: click.Context) -> Optional[Path]:
    return ctx.find_root().obj.get("artifacts")


def fail(exc: ChainkitError) -> NoReturn:
    click.secho(f"ERROR: {exc}", fg="red")
    sys.exit(exc.exit_code)


def reports_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Turn ChainkitError / TimeoutError into a red message and exit code."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ChainkitError as exc:
            fail(exc)
        except TimeoutError as exc:
            click.secho(f"ERROR: {exc}", fg="red")
            sys.exit(1)

    return wrapper


def load_signer(network: Network) -> tuple[str, str]:
    """Return (private_key, address) of the network's signer."""
    private_key = load_private_key(network)
    return private_key, get_address(private_key)


def native(network: Network, wei: int) -> str:
    return f"{format_units(wei)} {network.native_symbol}"


def label(name: str, value: Any, width: int = 12) -> None:
    click.echo(click.style(f"  {name + ':':<{width}}", dim=True) + f"{value}")


def header(title: str) -> None:
    click.echo(f"=== {title} ===")
    click.echo()


def report_tx(network: Network, result: dict, action: str = "Transaction") -> None:
    """Print hash, explorer link and outcome of a sent transaction."""
    label("TX", result["tx_hash"])
    link = tx_url(network, result["tx_hash"])
    if link:
        label("Explorer", link)
    if "status" not in result:
        return
    if result["status"] == 1:
        click.secho(
            f"  {action} confirmed in block {result.get('block_number')}", fg="green"
        )
    else:
        click.secho(f"  {action} reverted", fg="red")


def report_address(network: Network, address: str) -> None:
    label("Address", address)
    link = address_url(network, address)
    if link:
        label("Explorer", link)


def faucet_hint(network: Network) -> None:
    if network.faucet_url:
        click.secho(
            f"  Get test {network.native_symbol} from the faucet: {network.faucet_url}",
            fg="yellow",
        )


def parse_amount(
    text: str, decimals: int = 18, option: str = "--amount", allow_zero: bool = False
) -> int:
    """Scale a human amount to raw units, or fail as a usage error (exit 2)."""
    try:
        raw = parse_units(text, decimals)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=option)
    if raw < 0 or (raw == 0 and not allow_zero):
        message = "Amount must not be negative" if allow_zero else "Amount must be positive"
        raise click.BadParameter(message, param_hint=option)
    return raw


def require_code(address: str) -> None:
    """Exit 1 unless ADDRESS holds contract code."""
    if not has_code(get_code(address)):
        click.secho(f"  No contract code at {address}.", fg="red")
        click.echo("  Check the address and the selected network (--network).")
        sys.exit(1)
