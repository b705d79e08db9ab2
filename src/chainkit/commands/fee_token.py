"""
Commands Fee Token - ERC20WithNativeFee deployment and transfers.

Every transfer of this token must carry a fixed fee in the chain's native
currency (msg.value), forwarded to a fee recipient.  Exempt accounts pay
nothing; getRequiredFee(from, to) tells which case applies.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..chain.events import get_contract_events
from ..chain.interfaces import NATIVE_FEE_ERC20_ABI
from ..chain.rpc import get_balance, read_contract
from ..chain.tx import deploy_contract, ensure_success, send_contract_tx
from ..utils import format_units
from ..verification.explorer import verify_command
from .common import (
    artifacts_of,
    header,
    label,
    load_signer,
    native,
    network_of,
    parse_amount,
    report_address,
    report_tx,
    reports_errors,
    require_code,
)

CONTRACT_NAME = "ERC20WithNativeFee"

ADDRESS_OPTION = click.option(
    "--address", envvar="FEE_TOKEN_ADDRESS", required=True,
    help="Fee token contract address (env: FEE_TOKEN_ADDRESS)",
)


def _read(address: str, function: str, args: Optional[list] = None):
    return read_contract(address, function, args or [], abi=NATIVE_FEE_ERC20_ABI)


@click.group("fee-token")
def fee_token() -> None:
    """ERC-20 token with a native-currency transfer fee."""


@fee_token.command()
@click.option("--name", "token_name", default="Fee Token", show_default=True)
@click.option("--symbol", default="FEE", show_default=True)
@click.option("--supply", default=1_000_000, type=click.IntRange(min=0), show_default=True,
              help="Initial supply in whole tokens")
@click.option("--decimals", default=18, type=click.IntRange(0, 255), show_default=True)
@click.option("--fee-recipient", envvar="FEE_RECIPIENT_ADDRESS", default=None,
              help="Fee recipient (env: FEE_RECIPIENT_ADDRESS, default: deployer)")
@click.option("--fee", default="0.0001", show_default=True,
              help="Fee per transfer in native units")
@click.pass_context
@reports_errors
def deploy(
    ctx: click.Context,
    token_name: str,
    symbol: str,
    supply: int,
    decimals: int,
    fee_recipient: Optional[str],
    fee: str,
) -> None:
    """Deploy ERC20WithNativeFee."""
    network = network_of(ctx)
    header(f"Deploy {CONTRACT_NAME} ({network.name})")

    fee_wei = parse_amount(fee, option="--fee", allow_zero=True)

    private_key, deployer = load_signer(network)
    fee_recipient = fee_recipient or deployer

    label("Deployer", deployer, width=16)
    label("Balance", native(network, get_balance(deployer)), width=16)
    label("Fee recipient", fee_recipient, width=16)
    label("Token", f"{token_name} ({symbol})", width=16)
    label("Supply", f"{supply:,}", width=16)
    label("Fee", native(network, fee_wei), width=16)
    click.echo()

    constructor_args = [token_name, symbol, supply, decimals, fee_recipient, fee_wei]
    result = deploy_contract(
        CONTRACT_NAME,
        constructor_args=constructor_args,
        private_key=private_key,
        artifacts_dir=artifacts_of(ctx),
    )
    ensure_success(result, "Deployment")
    address = result["contract_address"]

    click.secho("  Deployed!", fg="green", bold=True)
    report_address(network, address)
    label("Fee to", _read(address, "feeRecipient"))
    label("Fee", native(network, _read(address, "nativeFeeAmount") or 0))
    held = _read(address, "balanceOf", [deployer]) or 0
    label("Deployer", f"{format_units(held, decimals)} {symbol}")

    if not network.is_local:
        click.echo()
        click.echo("  Verify the source with:")
        click.echo(f"    {verify_command(network, address, constructor_args)}")
    click.echo()
    click.echo(f"  export FEE_TOKEN_ADDRESS={address}")


@fee_token.command()
@ADDRESS_OPTION
@click.option("--to", "recipient", default=None, help="Planned recipient (default: signer)")
@click.pass_context
@reports_errors
def info(ctx: click.Context, address: str, recipient: Optional[str]) -> None:
    """Show fee settings and what the signer would pay."""
    network = network_of(ctx)
    header(f"Fee Token ({network.name})")
    require_code(address)

    _, sender = load_signer(network)
    recipient = recipient or sender

    report_address(network, address)
    label("Fee to", _read(address, "feeRecipient"), width=14)
    label("Fixed fee", native(network, _read(address, "nativeFeeAmount") or 0), width=14)
    label("Exempt", bool(_read(address, "feeExempt", [sender])), width=14)
    required = _read(address, "getRequiredFee", [sender, recipient]) or 0
    label("Required fee", native(network, required), width=14)


@fee_token.command()
@ADDRESS_OPTION
@click.option("--to", "recipient", envvar="RECIPIENT_ADDRESS", default=None,
              help="Recipient (env: RECIPIENT_ADDRESS, default: signer)")
@click.option("--amount", default="100", show_default=True, help="Amount in token units")
@click.pass_context
@reports_errors
def transfer(ctx: click.Context, address: str, recipient: Optional[str], amount: str) -> None:
    """Transfer tokens, paying the native fee as msg.value."""
    network = network_of(ctx)
    header(f"Fee Token Transfer ({network.name})")
    require_code(address)

    private_key, sender = load_signer(network)
    recipient = recipient or sender

    decimals = int(_read(address, "decimals"))
    raw = parse_amount(amount, decimals)

    fee_to = _read(address, "feeRecipient")
    fee = _read(address, "getRequiredFee", [sender, recipient]) or 0
    label("From", sender, width=14)
    label("To", recipient, width=14)
    label("Amount", amount, width=14)
    label("Fee", native(network, fee), width=14)
    label("Fee to", fee_to, width=14)

    sender_before = _read(address, "balanceOf", [sender]) or 0
    recipient_before = _read(address, "balanceOf", [recipient]) or 0
    fee_before = get_balance(fee_to)
    if sender_before < raw:
        click.secho(
            f"  Insufficient token balance: {format_units(sender_before, decimals)}", fg="red"
        )
        sys.exit(1)
    if get_balance(sender) < fee:
        click.secho(
            f"  Insufficient {network.native_symbol} to pay the transfer fee.", fg="red"
        )
        sys.exit(1)

    click.echo()
    click.echo("  Sending transfer...")
    result = send_contract_tx(
        address,
        "transfer",
        [recipient, raw],
        abi=NATIVE_FEE_ERC20_ABI,
        value=fee,
        private_key=private_key,
    )
    report_tx(network, result, "Transfer")
    ensure_success(result, "Transfer")

    sender_after = _read(address, "balanceOf", [sender]) or 0
    recipient_after = _read(address, "balanceOf", [recipient]) or 0
    fee_after = get_balance(fee_to)

    click.echo()
    label("Sender", format_units(sender_after, decimals), width=14)
    label("Recipient", format_units(recipient_after, decimals), width=14)
    label("Sent", format_units(sender_before - sender_after, decimals), width=14)
    label("Received", format_units(recipient_after - recipient_before, decimals), width=14)
    label("Fee paid", native(network, fee_after - fee_before), width=14)

    block = result.get("block_number")
    collected = get_contract_events(
        address, NATIVE_FEE_ERC20_ABI, "NativeFeeCollected", from_block=block, to_block=block
    )
    if collected:
        click.echo()
        click.echo("  NativeFeeCollected:")
        for event in collected:
            click.echo(
                f"    {event.args['from']} -> {event.args['to']}: "
                f"{native(network, event.args['feeAmount'])}"
            )
