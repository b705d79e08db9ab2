"""
Commands Token - ERC-20 deployment and operations.

Works with any ERC-20; mint and burn need the MintableBurnableToken
extensions.  Amounts are given in human units and scaled by the token's
decimals().

Commands:
- deploy:        Deploy MintableBurnableToken or HandwrittenERC20
- info:          Name, symbol, decimals, supply, owner
- balance:       Balance of an account
- transfer:      transfer(to, amount)
- approve:       approve(spender, amount)
- transfer-from: transferFrom(from, to, amount)
- mint / burn:   Supply changes (MintableBurnableToken)
- exercise:      Transfer/approve/transferFrom round trip on the signer
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..chain.events import get_contract_events
from ..chain.interfaces import MINTABLE_ERC20_ABI
from ..chain.rpc import get_balance, read_contract
from ..chain.tx import deploy_contract, ensure_success, send_contract_tx
from ..errors import RpcError
from ..utils import format_units
from ..verification.explorer import verify_command
from .common import (
    artifacts_of,
    faucet_hint,
    header,
    label,
    load_signer,
    native,
    network_of,
    parse_amount,
    report_address,
    report_tx,
    reports_errors,
)

TOKEN_CONTRACTS = ("MintableBurnableToken", "HandwrittenERC20")

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Deploying costs well under this on every supported testnet
MIN_DEPLOY_BALANCE = 10**15

ADDRESS_OPTION = click.option(
    "--address", envvar="TOKEN_ADDRESS", required=True,
    help="Token contract address (env: TOKEN_ADDRESS)",
)


def query_token_meta(address: str) -> tuple[str, int]:
    """Read symbol and decimals.  Falls back to ("???", 18) on call errors."""
    symbol = "???"
    decimals = 18

    try:
        sym = read_contract(address, "symbol", abi=MINTABLE_ERC20_ABI)
        if sym:
            symbol = str(sym)
    except RpcError:
        pass

    try:
        dec = read_contract(address, "decimals", abi=MINTABLE_ERC20_ABI)
        if dec is not None:
            decimals = int(dec)
    except RpcError:
        pass

    return symbol, decimals


def _send(ctx: click.Context, address: str, function: str, args: list, action: str) -> dict:
    network = network_of(ctx)
    private_key, _ = load_signer(network)
    click.echo(f"  Sending {action}...")
    result = send_contract_tx(
        address, function, args, abi=MINTABLE_ERC20_ABI, private_key=private_key
    )
    report_tx(network, result, action)
    return ensure_success(result, action)


def _balance_of(address: str, account: str) -> int:
    return read_contract(address, "balanceOf", [account], abi=MINTABLE_ERC20_ABI) or 0


def _block_events(address: str, event_name: str, result: dict) -> list:
    """Events of one type emitted in the block that mined RESULT."""
    block = result.get("block_number")
    if block is None:
        return []
    return get_contract_events(
        address, MINTABLE_ERC20_ABI, event_name, from_block=block, to_block=block
    )


@click.group()
def token() -> None:
    """ERC-20 token operations.

    \b
    Examples:
      chainkit -n bscTestnet token deploy --name "Mock Token" --symbol MOCK
      chainkit -n bscTestnet token info --address 0xAbC...
      chainkit -n bscTestnet token transfer --address 0xAbC... --to 0x... --amount 10
    """


@token.command()
@click.option("--contract", "contract_name", type=click.Choice(TOKEN_CONTRACTS),
              default="MintableBurnableToken", show_default=True)
@click.option("--name", "token_name", required=True, help="Token name")
@click.option("--symbol", required=True, help="Token symbol")
@click.option("--supply", default=100_000_000, type=click.IntRange(min=0),
              show_default=True, help="Initial supply in whole tokens")
@click.option("--decimals", default=18, type=click.IntRange(0, 255), show_default=True)
@click.pass_context
@reports_errors
def deploy(
    ctx: click.Context,
    contract_name: str,
    token_name: str,
    symbol: str,
    supply: int,
    decimals: int,
) -> None:
    """Deploy a token; the initial supply goes to the deployer."""
    network = network_of(ctx)
    header(f"Deploy {contract_name} ({network.name})")

    private_key, deployer = load_signer(network)
    balance = get_balance(deployer)
    label("Deployer", deployer)
    label("Balance", native(network, balance))
    if balance < MIN_DEPLOY_BALANCE:
        click.secho("  Balance too low to deploy.", fg="red")
        faucet_hint(network)
        sys.exit(1)

    click.echo()
    label("Name", token_name)
    label("Symbol", symbol)
    label("Supply", f"{supply:,} {symbol}")
    label("Decimals", decimals)
    click.echo()
    click.echo(f"  Deploying {contract_name}...")

    constructor_args = [token_name, symbol, supply, decimals]
    result = deploy_contract(
        contract_name,
        constructor_args=constructor_args,
        private_key=private_key,
        artifacts_dir=artifacts_of(ctx),
    )
    ensure_success(result, "Deployment")
    address = result["contract_address"]

    click.secho("  Deployed!", fg="green", bold=True)
    report_address(network, address)

    click.echo()
    token_symbol, token_decimals = query_token_meta(address)
    total = read_contract(address, "totalSupply", abi=MINTABLE_ERC20_ABI) or 0
    label("Total", f"{format_units(total, token_decimals)} {token_symbol}")
    label("Deployer", f"{format_units(_balance_of(address, deployer), token_decimals)} {token_symbol}")

    if not network.is_local:
        click.echo()
        click.echo("  Verify the source with:")
        click.echo(f"    {verify_command(network, address, constructor_args)}")
    click.echo()
    click.echo(f"  export TOKEN_ADDRESS={address}")


@token.command()
@ADDRESS_OPTION
@click.pass_context
@reports_errors
def info(ctx: click.Context, address: str) -> None:
    """Show token metadata."""
    network = network_of(ctx)
    header(f"Token ({network.name})")

    name = read_contract(address, "name", abi=MINTABLE_ERC20_ABI)
    symbol, decimals = query_token_meta(address)
    total = read_contract(address, "totalSupply", abi=MINTABLE_ERC20_ABI) or 0

    report_address(network, address)
    label("Name", name)
    label("Symbol", symbol)
    label("Decimals", decimals)
    label("Supply", f"{format_units(total, decimals)} {symbol}")

    # Only Ownable variants have owner()
    try:
        owner = read_contract(address, "owner", abi=MINTABLE_ERC20_ABI)
    except RpcError:
        owner = None
    if owner:
        label("Owner", owner)


@token.command()
@ADDRESS_OPTION
@click.option("--of", "account", default=None, help="Account (default: the signer)")
@click.pass_context
@reports_errors
def balance(ctx: click.Context, address: str, account: Optional[str]) -> None:
    """Show the token balance of an account."""
    if account is None:
        _, account = load_signer(network_of(ctx))
    symbol, decimals = query_token_meta(address)
    raw = _balance_of(address, account)
    click.echo(f"{account}: {format_units(raw, decimals)} {symbol}")


@token.command()
@ADDRESS_OPTION
@click.option("--to", "recipient", required=True, help="Recipient address")
@click.option("--amount", required=True, help="Amount in token units (e.g. 1.5)")
@click.pass_context
@reports_errors
def transfer(ctx: click.Context, address: str, recipient: str, amount: str) -> None:
    """Transfer tokens from the signer."""
    symbol, decimals = query_token_meta(address)
    raw = parse_amount(amount, decimals)

    _, sender = load_signer(network_of(ctx))
    held = _balance_of(address, sender)
    if held < raw:
        click.secho(
            f"  Insufficient balance: {format_units(held, decimals)} {symbol} < {amount} {symbol}",
            fg="red",
        )
        sys.exit(1)

    _send(ctx, address, "transfer", [recipient, raw], f"transfer {amount} {symbol}")


@token.command()
@ADDRESS_OPTION
@click.option("--spender", required=True, help="Spender address")
@click.option("--amount", required=True, help="Allowance in token units")
@click.pass_context
@reports_errors
def approve(ctx: click.Context, address: str, spender: str, amount: str) -> None:
    """Approve a spender."""
    symbol, decimals = query_token_meta(address)
    raw = parse_amount(amount, decimals)
    _send(ctx, address, "approve", [spender, raw], f"approve {amount} {symbol}")

    _, owner = load_signer(network_of(ctx))
    allowance = read_contract(address, "allowance", [owner, spender], abi=MINTABLE_ERC20_ABI) or 0
    label("Allowance", f"{format_units(allowance, decimals)} {symbol}")


@token.command("transfer-from")
@ADDRESS_OPTION
@click.option("--from", "holder", required=True, help="Address tokens are taken from")
@click.option("--to", "recipient", required=True, help="Recipient address")
@click.option("--amount", required=True, help="Amount in token units")
@click.pass_context
@reports_errors
def transfer_from(
    ctx: click.Context, address: str, holder: str, recipient: str, amount: str
) -> None:
    """Move tokens using an allowance granted to the signer."""
    symbol, decimals = query_token_meta(address)
    raw = parse_amount(amount, decimals)

    _, spender = load_signer(network_of(ctx))
    allowance = read_contract(address, "allowance", [holder, spender], abi=MINTABLE_ERC20_ABI) or 0
    if allowance < raw:
        click.secho(
            f"  Allowance too low: {format_units(allowance, decimals)} {symbol} < {amount} {symbol}",
            fg="red",
        )
        sys.exit(1)

    _send(ctx, address, "transferFrom", [holder, recipient, raw], f"transferFrom {amount} {symbol}")


@token.command()
@ADDRESS_OPTION
@click.option("--to", "recipient", default=None, help="Recipient (default: the signer)")
@click.option("--amount", required=True, help="Amount in token units")
@click.pass_context
@reports_errors
def mint(ctx: click.Context, address: str, recipient: Optional[str], amount: str) -> None:
    """Mint new tokens (owner only)."""
    symbol, decimals = query_token_meta(address)
    raw = parse_amount(amount, decimals)
    if recipient is None:
        _, recipient = load_signer(network_of(ctx))

    before = read_contract(address, "totalSupply", abi=MINTABLE_ERC20_ABI) or 0
    label("Supply", f"{format_units(before, decimals)} {symbol}")
    result = _send(ctx, address, "mint", [recipient, raw], f"mint {amount} {symbol}")
    after = read_contract(address, "totalSupply", abi=MINTABLE_ERC20_ABI) or 0
    label("Supply", f"{format_units(after, decimals)} {symbol}")

    minted = _block_events(address, "Mint", result)
    click.echo()
    click.echo(f"  {len(minted)} Mint event(s)")
    for event in minted:
        click.echo(
            f"    {event.args['to']}: +{format_units(event.args['amount'], decimals)} {symbol}"
        )


@token.command()
@ADDRESS_OPTION
@click.option("--amount", required=True, help="Amount in token units")
@click.pass_context
@reports_errors
def burn(ctx: click.Context, address: str, amount: str) -> None:
    """Burn tokens held by the signer."""
    symbol, decimals = query_token_meta(address)
    raw = parse_amount(amount, decimals)

    before = read_contract(address, "totalSupply", abi=MINTABLE_ERC20_ABI) or 0
    label("Supply", f"{format_units(before, decimals)} {symbol}")
    result = _send(ctx, address, "burn", [raw], f"burn {amount} {symbol}")
    after = read_contract(address, "totalSupply", abi=MINTABLE_ERC20_ABI) or 0
    label("Supply", f"{format_units(after, decimals)} {symbol}")

    # Burns surface as Transfer events to the zero address
    burned = [
        event for event in _block_events(address, "Transfer", result)
        if event.args["to"] == ZERO_ADDRESS
    ]
    click.echo()
    click.echo(f"  {len(burned)} burn Transfer event(s)")
    for event in burned:
        click.echo(
            f"    {event.args['from']}: -{format_units(event.args['value'], decimals)} {symbol}"
        )


@token.command()
@ADDRESS_OPTION
@click.option("--amount", default="100", show_default=True, help="Transfer amount")
@click.option("--allowance", "allowance_amount", default="50", show_default=True)
@click.option("--pull", "pull_amount", default="10", show_default=True,
              help="transferFrom amount")
@click.pass_context
@reports_errors
def exercise(
    ctx: click.Context,
    address: str,
    amount: str,
    allowance_amount: str,
    pull_amount: str,
) -> None:
    """Run transfer, approve and transferFrom against the signer itself."""
    network = network_of(ctx)
    header(f"ERC-20 Exercise ({network.name})")

    _, me = load_signer(network)
    name = read_contract(address, "name", abi=MINTABLE_ERC20_ABI)
    symbol, decimals = query_token_meta(address)
    label("Token", f"{name} ({symbol})")
    label("Account", me)

    held = _balance_of(address, me)
    label("Balance", f"{format_units(held, decimals)} {symbol}")
    if held == 0:
        click.secho("  Zero balance: only the deployer holds the initial supply.", fg="red")
        sys.exit(1)

    click.echo()
    raw = parse_amount(amount, decimals)
    if held < raw:
        click.secho("  Balance below the transfer amount, sending half instead.", fg="yellow")
        raw = held // 2
    _send(ctx, address, "transfer", [me, raw], f"transfer {format_units(raw, decimals)} {symbol}")

    click.echo()
    approved = parse_amount(allowance_amount, decimals, "--allowance")
    _send(ctx, address, "approve", [me, approved], f"approve {allowance_amount} {symbol}")
    allowance = read_contract(address, "allowance", [me, me], abi=MINTABLE_ERC20_ABI) or 0
    label("Allowance", f"{format_units(allowance, decimals)} {symbol}")

    click.echo()
    pulled = parse_amount(pull_amount, decimals, "--pull")
    if allowance >= pulled:
        _send(ctx, address, "transferFrom", [me, me, pulled], f"transferFrom {pull_amount} {symbol}")
    else:
        click.secho("  Allowance too low, skipping transferFrom.", fg="yellow")

    click.echo()
    final = _balance_of(address, me)
    remaining = read_contract(address, "allowance", [me, me], abi=MINTABLE_ERC20_ABI) or 0
    label("Balance", f"{format_units(final, decimals)} {symbol}")
    label("Allowance", f"{format_units(remaining, decimals)} {symbol}")
    click.secho("  ERC-20 exercise complete.", fg="green", bold=True)
