"""Fetch -> analyze orchestration."""

import logging

from app.models.analysis import AnalysisResult
from app.services.analyzer import TransactionAnalyzerService
from app.services.fetcher import TransactionFetcherService

logger = logging.getLogger(__name__)


class TransactionAnalysisPipeline:
    """Runs the fetch stage, then the analyze stage, for one request."""

    def __init__(
        self,
        fetcher: TransactionFetcherService,
        analyzer: TransactionAnalyzerService,
    ) -> None:
        self.fetcher = fetcher
        self.analyzer = analyzer

    async def run(self, network: str, tx_hash: str) -> AnalysisResult:
        """
        Analyze a transaction end to end.

        The analyzer only runs once the fetch has succeeded. Errors from
        either stage propagate unchanged; no retries are attempted.
        """
        logger.info(f"[Pipeline] Fetching {tx_hash[:16]}... on {network}")
        tx = await self.fetcher.fetch(network, tx_hash)

        logger.info(f"[Pipeline] Analyzing {tx_hash[:16]}... ({len(tx.logs)} logs)")
        result = self.analyzer.analyze(network, tx_hash, tx)

        logger.info(f"[Pipeline] Done {tx_hash[:16]}...: risk score {result.risk_score}")
        return result
