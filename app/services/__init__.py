"""Services package."""

from app.services.analyzer import TransactionAnalyzerService
from app.services.fetcher import TransactionFetcherService
from app.services.heuristics import HeuristicScoringBackend
from app.services.pipeline import TransactionAnalysisPipeline

__all__ = [
    "HeuristicScoringBackend",
    "TransactionAnalysisPipeline",
    "TransactionAnalyzerService",
    "TransactionFetcherService",
]
