"""Command line entry point.

Each subcommand runs one wallet operation against the configured wallet
service and prints the resulting state, or the error message with exit
status 1. ``simulate`` serves the dry-run backend instead.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

import uvicorn

from arkwallet.client.api import WalletApiClient
from arkwallet.config import Settings, get_settings
from arkwallet.contracts.wallet import Network
from arkwallet.services.orchestrator import WalletOrchestrator
from arkwallet.state.store import WalletStateStore
from arkwallet.utils.amounts import format_sats

logger = logging.getLogger(__name__)

NETWORK_CHOICES = [n.value for n in Network] + ["ark"]


def configure_logging(debug: bool) -> None:
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def print_state(command: str, store: WalletStateStore) -> None:
    """Print the part of the state a command produced."""
    if command in ("create", "deposit-addresses"):
        addresses = store.addresses if command == "create" else store.deposit_addresses
        if addresses:
            print(f"Off-chain address: {addresses.offchain_address}")
            print(f"Boarding address:  {addresses.boarding_address}")

    elif command == "balance":
        print(f"Off-chain balance: {format_sats(store.balances.offchain)}")
        print(f"On-chain balance:  {format_sats(store.balances.onchain)}")

    elif command == "utxos":
        if not store.utxos:
            print("No UTXOs")
        for utxo in store.utxos:
            print(f"{format_sats(utxo.amount):>20}  {utxo.status.value}")

    elif command == "estimate":
        quote = store.fee_quote
        print(f"Total fee:   {format_sats(quote.total)}")
        print(f"Network fee: {format_sats(quote.breakdown.network)}")
        print(f"Service fee: {format_sats(quote.breakdown.service)}")
        if store.warning.warn:
            print(f"Warning: {store.warning.message}")

    elif command == "send" and store.payment_txid:
        print(f"Transaction ID: {store.payment_txid}")

    elif command == "settle" and store.settlement_txid:
        print(f"Settlement TXID: {store.settlement_txid}")

    elif command == "withdraw" and store.withdrawal_txid:
        print(f"Withdrawal TXID: {store.withdrawal_txid}")

    elif command == "faucet" and store.faucet_message:
        print(store.faucet_message)


async def run_command(args: argparse.Namespace, client: WalletApiClient) -> int:
    """Run one wallet command; returns the process exit status."""
    orchestrator = WalletOrchestrator(client)
    command = args.command

    if command == "create":
        await orchestrator.create_wallet()
    elif command == "balance":
        await orchestrator.refresh_balances()
    elif command == "utxos":
        await orchestrator.refresh_utxos()
    elif command == "estimate":
        # The warning needs the current UTXO snapshot.
        await orchestrator.refresh_utxos()
        await orchestrator.estimate_fees(args.amount, args.network)
    elif command == "send":
        await orchestrator.send_payment(args.to, args.amount, args.network)
    elif command == "deposit-addresses":
        await orchestrator.get_deposit_addresses()
    elif command == "settle":
        await orchestrator.settle_funds(args.amount)
    elif command == "withdraw":
        await orchestrator.withdraw_funds(args.to, args.amount)
    elif command == "faucet":
        await orchestrator.request_faucet_funds(args.address)
    else:
        raise ValueError(f"Unknown command: {command}")

    store = orchestrator.store
    if store.errors.is_set:
        print(f"Error: {store.errors.message}", file=sys.stderr)
        return 1

    print_state(command, store)
    return 0


async def serve_simulator(settings: Settings) -> None:
    """Run the dry-run wallet service."""
    from arkwallet.simulator.app import create_app

    config = uvicorn.Config(
        create_app(),
        host=settings.simulator_host,
        port=settings.simulator_port,
        log_level="debug" if settings.debug else "info",
    )
    server = uvicorn.Server(config)
    logger.info(f"Starting dry-run backend on {settings.simulator_host}:{settings.simulator_port}")
    await server.serve()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arkwallet",
        description="Off-chain/on-chain wallet operations against a wallet service",
    )
    parser.add_argument("--url", help="Wallet service URL (default: ARKWALLET_WALLET_API_URL)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("create", help="Generate wallet addresses")
    sub.add_parser("balance", help="Show off-chain and on-chain balances")
    sub.add_parser("utxos", help="List UTXOs")

    estimate = sub.add_parser("estimate", help="Estimate fees for an amount")
    estimate.add_argument("amount", help="Amount in sats")
    estimate.add_argument("--network", choices=NETWORK_CHOICES, default=None)

    send = sub.add_parser("send", help="Send a payment")
    send.add_argument("to", help="Recipient address")
    send.add_argument("amount", help="Amount in sats")
    send.add_argument("--network", choices=NETWORK_CHOICES, default=None)

    sub.add_parser("deposit-addresses", help="Show deposit addresses")

    settle = sub.add_parser("settle", help="Settle off-chain funds")
    settle.add_argument("amount", nargs="?", default=None, help="Amount in sats (default: all)")

    withdraw = sub.add_parser("withdraw", help="Withdraw funds on-chain")
    withdraw.add_argument("to", help="Destination address")
    withdraw.add_argument("amount", help="Amount in sats")

    faucet = sub.add_parser("faucet", help="Request test funds")
    faucet.add_argument("address", help="Address to fund")

    sub.add_parser("simulate", help="Serve the dry-run wallet backend")

    return parser


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    async with WalletApiClient(base_url=args.url or settings.wallet_api_url) as client:
        return await run_command(args, client)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(args.debug or settings.debug)

    if args.command == "simulate":
        try:
            asyncio.run(serve_simulator(settings))
        except KeyboardInterrupt:
            logger.info("Keyboard interrupt received")
        return 0

    return asyncio.run(_run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
