"""End-to-end tests for the fetch -> analyze pipeline."""

import pytest

from app.constants import TxType
from app.core.exceptions import DataSourceError, ErrorKind, UnsupportedNetworkError
from app.services.analyzer import TransactionAnalyzerService
from app.services.fetcher import TransactionFetcherService
from app.services.pipeline import TransactionAnalysisPipeline
from tests.conftest import RecordingBackend
from tests.test_fetcher import StubSource


class TestTransactionAnalysisPipeline:
    """Tests for TransactionAnalysisPipeline."""

    @pytest.mark.asyncio
    async def test_uniswap_swap_scenario(self, pipeline: TransactionAnalysisPipeline) -> None:
        """Test ethereum-mainnet fixture with a Uniswap log is a DEX swap."""
        result = await pipeline.run("ethereum-mainnet", "0xabc123")

        assert result.tx_type == TxType.DEX_SWAP
        assert result.protocol is not None
        assert 0.0 <= result.risk_score <= 1.0
        assert "0xabc123" in result.natural_language_explanation
        assert "ethereum-mainnet" in result.natural_language_explanation

    @pytest.mark.asyncio
    async def test_unsupported_network_skips_analyzer(
        self, fetcher: TransactionFetcherService, recording_backend: RecordingBackend
    ) -> None:
        """Test the analyzer never runs when the fetch is rejected."""
        pipeline = TransactionAnalysisPipeline(
            fetcher=fetcher, analyzer=TransactionAnalyzerService(recording_backend)
        )

        with pytest.raises(UnsupportedNetworkError) as exc_info:
            await pipeline.run("unsupported-chain", "0xabc123")

        assert exc_info.value.network == "unsupported-chain"
        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        assert recording_backend.calls == []

    @pytest.mark.asyncio
    async def test_data_source_error_skips_analyzer(
        self, recording_backend: RecordingBackend
    ) -> None:
        source = StubSource(error=DataSourceError("node down", "stub", "ethereum-mainnet"))
        pipeline = TransactionAnalysisPipeline(
            fetcher=TransactionFetcherService({"ethereum-mainnet": source}),
            analyzer=TransactionAnalyzerService(recording_backend),
        )

        with pytest.raises(DataSourceError) as exc_info:
            await pipeline.run("ethereum-mainnet", "0xabc123")

        assert exc_info.value.retryable is True
        assert recording_backend.calls == []

    @pytest.mark.asyncio
    async def test_empty_logs_scenario(
        self, make_tx, analyzer: TransactionAnalyzerService
    ) -> None:
        """Test a record with no logs is analyzed as a plain transfer."""
        source = StubSource(record=make_tx(hash="0xabc123", logs=()))
        pipeline = TransactionAnalysisPipeline(
            fetcher=TransactionFetcherService({"ethereum-mainnet": source}),
            analyzer=analyzer,
        )

        result = await pipeline.run("ethereum-mainnet", "0xabc123")

        assert result.tx_type == TxType.TRANSFER
        assert result.protocol is None
        assert result.risk_reasons

    @pytest.mark.asyncio
    async def test_repeatable(self, pipeline: TransactionAnalysisPipeline) -> None:
        first = await pipeline.run("ethereum-mainnet", "0xabc123")
        second = await pipeline.run("ethereum-mainnet", "0xabc123")

        assert first.model_dump_json() == second.model_dump_json()
