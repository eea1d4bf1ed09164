"""End-to-end tests against the dry-run wallet service."""

import httpx
import pytest
import pytest_asyncio

from arkwallet.client.api import Endpoint, WalletApiClient
from arkwallet.client.errors import HttpError
from arkwallet.contracts.wallet import Network, UtxoStatus
from arkwallet.main import build_parser, run_command
from arkwallet.services.orchestrator import WalletOrchestrator
from arkwallet.simulator.app import create_app
from arkwallet.simulator.wallet import FAUCET_AMOUNT, DryRunWallet


@pytest.fixture
def wallet() -> DryRunWallet:
    return DryRunWallet(seed="test", fee_rate=2.0)


@pytest_asyncio.fixture
async def sim_client(wallet):
    """API client talking to the dry-run app in-process."""
    transport = httpx.ASGITransport(app=create_app(wallet))
    client = WalletApiClient(base_url="http://test", transport=transport)
    yield client
    await client.close()


@pytest.fixture
def sim(sim_client) -> WalletOrchestrator:
    return WalletOrchestrator(sim_client, multiplier=10, discard_stale_responses=False)


class TestDryRunWallet:
    """Tests for the in-memory wallet itself."""

    def test_addresses_are_stable(self, wallet):
        assert wallet.receive() == wallet.receive()
        assert wallet.offchain_address.startswith("tark1q")
        assert wallet.boarding_address.startswith("bcrt1q")

    def test_estimate_split(self, wallet):
        estimate = wallet.estimate_fee()

        assert estimate == {
            "total_fee": 200,
            "breakdown": {"network_fee": 160, "service_fee": 40},
        }

    def test_empty_utxos_encode_as_null(self, wallet):
        assert wallet.list_utxos() is None


class TestEndToEnd:
    """Orchestrator operations against the dry-run app."""

    @pytest.mark.asyncio
    async def test_fresh_wallet(self, sim):
        await sim.initialize()

        assert sim.store.balances.total == 0
        assert sim.store.utxos == ()
        assert sim.store.errors.is_set is False

    @pytest.mark.asyncio
    async def test_create_wallet(self, sim, wallet):
        await sim.create_wallet()

        assert sim.store.addresses.offchain_address == wallet.offchain_address
        assert sim.store.addresses.boarding_address == wallet.boarding_address

    @pytest.mark.asyncio
    async def test_faucet_settle_send_withdraw(self, sim, wallet):
        addresses = await sim.get_deposit_addresses()

        message = await sim.request_faucet_funds(addresses.boarding_address)
        assert message.startswith("txId: ")
        await sim.refresh_balances()
        assert sim.store.balances.onchain == FAUCET_AMOUNT

        assert await sim.settle_funds() is not None
        assert sim.store.balances.offchain == FAUCET_AMOUNT
        assert sim.store.balances.onchain == 0

        await sim.refresh_utxos()
        quote = await sim.estimate_fees("30000", Network.OFFCHAIN)
        assert quote.total == 200
        assert quote.breakdown.network == 160
        assert quote.is_consistent
        # 100,000 > 200 * 10
        assert sim.store.warning.warn is True
        assert "100,000 sats" in sim.store.warning.message

        txid = await sim.send_payment("tark1qfriend", "30000", Network.OFFCHAIN)
        assert txid == sim.store.payment_txid
        assert sim.store.balances.offchain == 70_000
        statuses = sorted((u.amount, u.status) for u in sim.store.utxos)
        assert statuses == [
            (70_000, UtxoStatus.SPENDABLE),
            (100_000, UtxoStatus.LOCKED),
        ]

        assert await sim.withdraw_funds("bcrt1qexit", 20_000) is not None
        assert sim.store.balances.offchain == 50_000
        assert sim.store.errors.is_set is False

    @pytest.mark.asyncio
    async def test_settle_without_funds(self, sim):
        assert await sim.settle_funds() is None
        assert sim.store.errors.message == "no funds to settle"

    @pytest.mark.asyncio
    async def test_send_more_than_balance(self, sim, wallet):
        wallet.faucet("bcrt1qboard")
        wallet.settle()

        assert await sim.send_payment("tark1qfriend", 1_000_000) is None
        assert sim.store.errors.message == "not enough funds: have 100000, need 1000000"

    @pytest.mark.asyncio
    async def test_non_numeric_amount_rejected_by_service(self, sim):
        assert await sim.send_payment("tark1qfriend", "abc") is None
        assert sim.store.errors.message == "invalid amount"

    @pytest.mark.asyncio
    async def test_invalid_network_is_plain_text(self, sim_client):
        with pytest.raises(HttpError) as exc_info:
            await sim_client.call(
                Endpoint.SEND_PAYMENT,
                body={"network": "lightning", "to": "x", "amount": 1},
            )

        assert exc_info.value.status_code == 400
        assert exc_info.value.body == "invalid network"

    @pytest.mark.asyncio
    async def test_ark_network_name_accepted(self, sim_client, wallet):
        wallet.faucet("bcrt1qboard")
        wallet.settle()

        data = await sim_client.call(
            Endpoint.SEND_PAYMENT,
            body={"network": "ark", "to": "tark1qfriend", "amount": 1},
        )

        assert len(data["txid"]) == 64

    @pytest.mark.asyncio
    async def test_offchain_spelling_rejected_on_send(self, sim_client, wallet):
        wallet.faucet("bcrt1qboard")
        wallet.settle()

        with pytest.raises(HttpError) as exc_info:
            await sim_client.call(
                Endpoint.SEND_PAYMENT,
                body={"network": "offchain", "to": "tark1qfriend", "amount": 1},
            )

        assert exc_info.value.status_code == 400
        assert exc_info.value.body == "invalid network"

    @pytest.mark.asyncio
    async def test_unknown_network_never_reaches_service(self, sim, wallet):
        assert await sim.send_payment("tark1qfriend", "100", "lightning") is None

        assert sim.store.errors.message == "invalid network: lightning"
        assert wallet.vtxos == []


class TestCommandLine:
    """Tests for the CLI commands."""

    @pytest.mark.asyncio
    async def test_balance_command(self, sim_client, wallet, capsys):
        wallet.faucet("bcrt1qboard")

        status = await run_command(build_parser().parse_args(["balance"]), sim_client)

        out = capsys.readouterr().out
        assert status == 0
        assert "Off-chain balance: 0 sats" in out
        assert "On-chain balance:  100,000 sats" in out

    @pytest.mark.asyncio
    async def test_estimate_command_prints_warning(self, sim_client, wallet, capsys):
        wallet.faucet("bcrt1qboard")
        wallet.settle()

        status = await run_command(
            build_parser().parse_args(["estimate", "1000", "--network", "ark"]), sim_client
        )

        out = capsys.readouterr().out
        assert status == 0
        assert "Total fee:   200 sats" in out
        assert "Warning: Large UTXO detected (100,000 sats)" in out

    @pytest.mark.asyncio
    async def test_failed_command_exits_nonzero(self, sim_client, capsys):
        status = await run_command(build_parser().parse_args(["settle"]), sim_client)

        assert status == 1
        assert "Error: no funds to settle" in capsys.readouterr().err

    def test_parser_settle_amount_optional(self):
        parser = build_parser()

        assert parser.parse_args(["settle"]).amount is None
        assert parser.parse_args(["settle", "500"]).amount == "500"

    def test_parser_rejects_unknown_network(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["send", "addr", "1", "--network", "lightning"])


class TestConfig:
    """Tests for configuration module."""

    def test_get_settings(self):
        from arkwallet.config import get_settings

        settings = get_settings()

        assert settings.wallet_api_url == "http://wallet.test"
        assert settings.consolidation_multiplier == 10
        assert settings.discard_stale_responses is False

    def test_settings_safe_dict(self):
        from arkwallet.config import get_settings

        safe = get_settings().get_safe_dict()

        assert safe["environment"] == "test"
        assert safe["risk"]["consolidation_multiplier"] == 10
