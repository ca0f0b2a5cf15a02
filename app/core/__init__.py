"""Core module for base interfaces and abstractions."""

from app.core.datasource import ChainDataSource
from app.core.exceptions import (
    AnalysisError,
    DataSourceError,
    ErrorKind,
    FetchError,
    InvalidTransactionHashError,
    TransactionNotFoundError,
    TxLensError,
    UnsupportedNetworkError,
)
from app.core.scoring import RiskAssessment, ScoringBackend

__all__ = [
    "AnalysisError",
    "ChainDataSource",
    "DataSourceError",
    "ErrorKind",
    "FetchError",
    "InvalidTransactionHashError",
    "RiskAssessment",
    "ScoringBackend",
    "TransactionNotFoundError",
    "TxLensError",
    "UnsupportedNetworkError",
]
