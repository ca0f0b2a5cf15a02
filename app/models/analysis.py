"""Analysis result and API boundary models."""

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.constants import TxType


class AnalysisResult(BaseModel):
    """Risk assessment for a single transaction."""

    model_config = ConfigDict(frozen=True)

    tx_hash: str
    network: str
    tx_type: TxType
    protocol: str | None = None
    risk_score: float = Field(ge=0.0, le=1.0)
    risk_reasons: list[str] = Field(min_length=1)
    natural_language_explanation: str

    @field_validator("risk_score")
    @classmethod
    def reject_nan(cls, v: float) -> float:
        """NaN slips through ge/le comparisons."""
        if math.isnan(v):
            raise ValueError("risk_score must be a number")
        return v


class AnalyzeTxRequest(BaseModel):
    """Request model for transaction analysis."""

    network: str = Field(..., min_length=1, description="Network identifier, e.g. ethereum-mainnet")
    tx_hash: str = Field(..., min_length=1, description="Transaction hash to analyze")


class ErrorDetail(BaseModel):
    """Error body returned when a pipeline stage fails."""

    stage: Literal["fetch", "analyze", "pipeline"]
    kind: str
    code: str
    message: str
    retryable: bool = False


class HealthResponse(BaseModel):
    """Health check response model."""

    status: Literal["healthy", "degraded"]
    version: str
    networks: list[str] = Field(default_factory=list)
