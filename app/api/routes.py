"""API route definitions."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from app.api.dependencies import SettingsDep, get_fetcher, get_pipeline
from app.constants import SUPPORTED_NETWORKS
from app.core.exceptions import (
    AnalysisError,
    DataSourceError,
    ErrorKind,
    TransactionNotFoundError,
    TxLensError,
)
from app.models.analysis import (
    AnalysisResult,
    AnalyzeTxRequest,
    ErrorDetail,
    HealthResponse,
)
from app.services.fetcher import TransactionFetcherService
from app.services.pipeline import TransactionAnalysisPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])

STAGE_PREFIXES = {
    "fetch": "Failed to fetch tx details",
    "analyze": "Transaction analysis failed",
}


def error_status(error: TxLensError) -> int:
    """HTTP status for a pipeline error, chosen by its kind."""
    if isinstance(error, TransactionNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if error.kind == ErrorKind.INVALID_INPUT:
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, DataSourceError):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_detail(error: TxLensError) -> dict:
    """Structured error body naming the failing stage."""
    prefix = STAGE_PREFIXES.get(error.stage, "Request failed")
    return ErrorDetail(
        stage=error.stage,
        kind=error.kind.value,
        code=error.code,
        message=f"{prefix}: {error.message}",
        retryable=error.retryable,
    ).model_dump()


@router.post(
    "/analyze_tx",
    response_model=AnalysisResult,
    summary="Analyze Transaction",
    description="Classify a transaction and estimate its risk.",
)
async def analyze_tx(
    request: AnalyzeTxRequest,
    pipeline: Annotated[TransactionAnalysisPipeline, Depends(get_pipeline)],
) -> AnalysisResult:
    """
    Fetch a transaction and return its risk assessment.

    - **network**: Network identifier (e.g. ethereum-mainnet)
    - **tx_hash**: Transaction hash
    """
    try:
        return await pipeline.run(request.network, request.tx_hash)

    except TxLensError as e:
        status_code = error_status(e)
        if e.kind == ErrorKind.INVALID_INPUT:
            logger.warning(f"{e.stage} rejected input: {e.message}")
        elif isinstance(e, AnalysisError):
            logger.error(f"Analysis failed for {request.tx_hash[:16]}...: {e.message}")
        else:
            logger.error(f"Fetch failed for {request.tx_hash[:16]}...: {e.message}")
        raise HTTPException(status_code=status_code, detail=error_detail(e))

    except Exception as e:
        logger.exception(f"Unexpected error during analysis: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ErrorDetail(
                stage="pipeline",
                kind=ErrorKind.INTERNAL.value,
                code="UNEXPECTED_ERROR",
                message="An unexpected error occurred during analysis",
            ).model_dump(),
        )


@router.get(
    "/networks",
    summary="List Supported Networks",
    description="Get the networks the configured data sources can serve.",
)
async def list_networks(
    fetcher: Annotated[TransactionFetcherService, Depends(get_fetcher)],
) -> JSONResponse:
    """List served networks with their metadata."""
    networks = [
        {
            "slug": config.slug,
            "name": config.name,
            "family": config.family.value,
            "symbol": config.symbol,
            "decimals": config.decimals,
            "chain_id": config.chain_id,
            "source": fetcher.source_for(config.slug).name,
        }
        for config in SUPPORTED_NETWORKS.values()
        if fetcher.supports_network(config.slug)
    ]
    return JSONResponse(content={"networks": networks, "count": len(networks)})


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Check that the service is up and serving at least one network.",
)
async def health_check(
    fetcher: Annotated[TransactionFetcherService, Depends(get_fetcher)],
    settings: SettingsDep,
) -> HealthResponse:
    """Report service health."""
    networks = fetcher.supported_networks
    return HealthResponse(
        status="healthy" if networks else "degraded",
        version=settings.app_version,
        networks=networks,
    )
