"""Dependency injection for FastAPI.

Services are built once in the application lifespan and stored on
``app.state``; the providers below only read them back.
"""

from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings, get_settings
from app.providers.registry import build_data_sources
from app.services.analyzer import TransactionAnalyzerService
from app.services.fetcher import TransactionFetcherService
from app.services.heuristics import HeuristicScoringBackend
from app.services.pipeline import TransactionAnalysisPipeline


def build_pipeline(settings: Settings) -> TransactionAnalysisPipeline:
    """Assemble fetcher, analyzer and pipeline from settings."""
    fetcher = TransactionFetcherService(build_data_sources(settings))
    analyzer = TransactionAnalyzerService(HeuristicScoringBackend())
    return TransactionAnalysisPipeline(fetcher=fetcher, analyzer=analyzer)


def get_pipeline(request: Request) -> TransactionAnalysisPipeline:
    """Get the pipeline built at startup."""
    return request.app.state.pipeline


def get_fetcher(
    pipeline: Annotated[TransactionAnalysisPipeline, Depends(get_pipeline)],
) -> TransactionFetcherService:
    """Get the transaction fetcher."""
    return pipeline.fetcher


SettingsDep = Annotated[Settings, Depends(get_settings)]
