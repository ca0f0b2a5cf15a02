"""Domain models package."""

from app.models.analysis import (
    AnalysisResult,
    AnalyzeTxRequest,
    ErrorDetail,
    HealthResponse,
)
from app.models.transaction import LogEntry, NormalizedTransaction

__all__ = [
    "AnalysisResult",
    "AnalyzeTxRequest",
    "ErrorDetail",
    "HealthResponse",
    "LogEntry",
    "NormalizedTransaction",
]
