"""Tests for the transaction fetch stage."""

import pytest

from app.config import Settings
from app.constants import TxStatus
from app.core.datasource import ChainDataSource
from app.core.exceptions import (
    DataSourceError,
    ErrorKind,
    InvalidTransactionHashError,
    TransactionNotFoundError,
    UnsupportedNetworkError,
)
from app.models.transaction import NormalizedTransaction
from app.providers.blockchair import BlockchairDataSource
from app.providers.evm_rpc import EvmRpcDataSource
from app.providers.registry import build_data_sources
from app.providers.static import StaticDataSource
from app.services.fetcher import TransactionFetcherService


class StubSource(ChainDataSource):
    """Data source returning a preset record or raising a preset error."""

    def __init__(self, record=None, error: Exception | None = None) -> None:
        self.record = record
        self.error = error
        self.closed = 0

    @property
    def name(self) -> str:
        return "stub"

    @property
    def supported_networks(self) -> list[str]:
        return ["ethereum-mainnet"]

    async def get_transaction(self, network: str, tx_hash: str) -> NormalizedTransaction:
        if self.error:
            raise self.error
        return self.record

    async def close(self) -> None:
        self.closed += 1


class TestStaticDataSource:
    """Tests for StaticDataSource."""

    @pytest.mark.asyncio
    async def test_fixture_record(self, static_source: StaticDataSource) -> None:
        """Test the fixture carries one Uniswap log and echoes the hash."""
        tx = await static_source.get_transaction("ethereum-mainnet", "0xabc123")

        assert tx.hash == "0xabc123"
        assert tx.status == TxStatus.SUCCESS
        assert tx.gas_used == 21000
        assert str(tx.value) == "1.5"
        assert len(tx.logs) == 1
        assert "Uniswap" in tx.logs[0].address

    @pytest.mark.asyncio
    async def test_unsupported_network(self, static_source: StaticDataSource) -> None:
        with pytest.raises(UnsupportedNetworkError):
            await static_source.get_transaction("polygon-mainnet", "0xabc")


class TestTransactionFetcherService:
    """Tests for TransactionFetcherService."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tx_hash", ["0xabc123", "0x" + "f" * 64, "opaque-id"])
    async def test_hash_round_trip(
        self, fetcher: TransactionFetcherService, tx_hash: str
    ) -> None:
        """Test the fetched record's hash equals the requested hash."""
        tx = await fetcher.fetch("ethereum-mainnet", tx_hash)

        assert tx.hash == tx_hash

    @pytest.mark.asyncio
    async def test_unsupported_network(self, fetcher: TransactionFetcherService) -> None:
        """Test an unknown network is an input error."""
        with pytest.raises(UnsupportedNetworkError) as exc_info:
            await fetcher.fetch("unsupported-chain", "0xabc123")

        error = exc_info.value
        assert error.network == "unsupported-chain"
        assert error.kind == ErrorKind.INVALID_INPUT
        assert error.retryable is False
        assert error.stage == "fetch"
        assert "unsupported-chain" in str(error)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tx_hash", ["", "   "])
    async def test_empty_hash(self, fetcher: TransactionFetcherService, tx_hash: str) -> None:
        with pytest.raises(InvalidTransactionHashError):
            await fetcher.fetch("ethereum-mainnet", tx_hash)

    @pytest.mark.asyncio
    async def test_hash_mismatch_is_data_source_error(self, make_tx) -> None:
        """Test a record for the wrong hash is treated as malformed data."""
        fetcher = TransactionFetcherService(
            {"ethereum-mainnet": StubSource(record=make_tx(hash="0xother"))}
        )

        with pytest.raises(DataSourceError) as exc_info:
            await fetcher.fetch("ethereum-mainnet", "0xabc123")

        assert exc_info.value.kind == ErrorKind.TRANSIENT
        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    async def test_wrong_record_type(self) -> None:
        fetcher = TransactionFetcherService(
            {"ethereum-mainnet": StubSource(record={"hash": "0xabc123"})}
        )

        with pytest.raises(DataSourceError):
            await fetcher.fetch("ethereum-mainnet", "0xabc123")

    @pytest.mark.asyncio
    async def test_not_found_propagates(self) -> None:
        source = StubSource(error=TransactionNotFoundError("0xabc123", "ethereum-mainnet"))
        fetcher = TransactionFetcherService({"ethereum-mainnet": source})

        with pytest.raises(TransactionNotFoundError):
            await fetcher.fetch("ethereum-mainnet", "0xabc123")

    @pytest.mark.asyncio
    async def test_close_each_source_once(self) -> None:
        """Test a source registered for several networks is closed once."""
        source = StubSource()
        fetcher = TransactionFetcherService(
            {"ethereum-mainnet": source, "base-mainnet": source}
        )

        await fetcher.close()

        assert source.closed == 1

    def test_supported_networks_sorted(self, static_source: StaticDataSource) -> None:
        fetcher = TransactionFetcherService(
            {"polygon-mainnet": static_source, "ethereum-mainnet": static_source}
        )

        assert fetcher.supported_networks == ["ethereum-mainnet", "polygon-mainnet"]

    def test_table_is_read_only(self, static_source: StaticDataSource) -> None:
        """Test mutating the input mapping does not change the fetcher."""
        sources = {"ethereum-mainnet": static_source}
        fetcher = TransactionFetcherService(sources)

        sources["polygon-mainnet"] = static_source

        assert fetcher.supports_network("polygon-mainnet") is False


class TestBuildDataSources:
    """Tests for the startup data-source registry."""

    def test_static_mode(self) -> None:
        table = build_data_sources(Settings(data_source="static"))

        assert list(table) == ["ethereum-mainnet"]
        assert isinstance(table["ethereum-mainnet"], StaticDataSource)

    def test_live_mode(self) -> None:
        settings = Settings(
            data_source="live",
            rpc_urls={
                "ethereum-mainnet": "https://eth.example",
                "base-mainnet": "https://base.example",
            },
        )

        table = build_data_sources(settings)

        assert set(table) == {"ethereum-mainnet", "base-mainnet", "bitcoin-mainnet"}
        assert isinstance(table["ethereum-mainnet"], EvmRpcDataSource)
        assert table["ethereum-mainnet"] is table["base-mainnet"]
        assert isinstance(table["bitcoin-mainnet"], BlockchairDataSource)

    def test_unknown_rpc_network_rejected(self) -> None:
        with pytest.raises(ValueError):
            Settings(data_source="live", rpc_urls={"dogechain": "https://x.example"})
