"""Test configuration and fixtures."""

from typing import Any, Callable

import pytest

from app.constants import TxStatus
from app.core.scoring import RiskAssessment, ScoringBackend
from app.models.transaction import LogEntry, NormalizedTransaction
from app.providers.static import StaticDataSource
from app.services.analyzer import TransactionAnalyzerService
from app.services.fetcher import TransactionFetcherService
from app.services.heuristics import HeuristicScoringBackend
from app.services.pipeline import TransactionAnalysisPipeline


class RecordingBackend(ScoringBackend):
    """Backend that records calls and returns a fixed or failing outcome."""

    def __init__(
        self,
        assessment: RiskAssessment | None = None,
        error: Exception | None = None,
    ) -> None:
        self.calls: list[tuple[str, str, NormalizedTransaction]] = []
        self._assessment = assessment or RiskAssessment(
            tx_type="TRANSFER", risk_score=0.0, reasons=["fixed"]
        )
        self._error = error

    @property
    def name(self) -> str:
        return "recording"

    def assess(
        self, network: str, tx_hash: str, tx: NormalizedTransaction
    ) -> RiskAssessment:
        self.calls.append((network, tx_hash, tx))
        if self._error:
            raise self._error
        return self._assessment


@pytest.fixture
def make_tx() -> Callable[..., NormalizedTransaction]:
    """Factory for normalized transactions with sensible defaults."""

    def _make(**overrides: Any) -> NormalizedTransaction:
        fields: dict[str, Any] = {
            "hash": "0xabc123",
            "network": "ethereum-mainnet",
            "sender": "0x1111111111111111111111111111111111111111",
            "recipient": "0x2222222222222222222222222222222222222222",
            "value_raw": 10**18,
            "decimals": 18,
            "symbol": "ETH",
            "gas_used": 21000,
            "status": TxStatus.SUCCESS,
            "logs": (),
        }
        fields.update(overrides)
        return NormalizedTransaction(**fields)

    return _make


@pytest.fixture
def uniswap_log() -> LogEntry:
    return LogEntry(address="0xUniswapV3Pool...", topics=("Swap", "..."), data="...")


@pytest.fixture
def static_source() -> StaticDataSource:
    """Provide the fixture data source for ethereum-mainnet."""
    return StaticDataSource()


@pytest.fixture
def fetcher(static_source: StaticDataSource) -> TransactionFetcherService:
    """Provide a fetcher serving ethereum-mainnet from fixtures."""
    return TransactionFetcherService({"ethereum-mainnet": static_source})


@pytest.fixture
def heuristic_backend() -> HeuristicScoringBackend:
    return HeuristicScoringBackend()


@pytest.fixture
def analyzer(heuristic_backend: HeuristicScoringBackend) -> TransactionAnalyzerService:
    """Provide an analyzer using the heuristic backend."""
    return TransactionAnalyzerService(heuristic_backend)


@pytest.fixture
def recording_backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def pipeline(
    fetcher: TransactionFetcherService, analyzer: TransactionAnalyzerService
) -> TransactionAnalysisPipeline:
    return TransactionAnalysisPipeline(fetcher=fetcher, analyzer=analyzer)
