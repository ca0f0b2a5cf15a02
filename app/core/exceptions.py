"""Custom exceptions for TxLens.

Every error carries a ``kind`` from a closed set so callers can branch on
it (e.g. to decide retry eligibility) instead of parsing messages.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of error origins."""

    INVALID_INPUT = "invalid_input"
    TRANSIENT = "transient"
    INTERNAL = "internal"


class TxLensError(Exception):
    """Base exception for all TxLens errors."""

    kind: ErrorKind = ErrorKind.INTERNAL
    stage: str = "pipeline"

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or "TXLENS_ERROR"
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        """Only transient errors are worth retrying."""
        return self.kind == ErrorKind.TRANSIENT


class FetchError(TxLensError):
    """Base exception for the transaction fetch stage."""

    stage = "fetch"

    def __init__(
        self, message: str, code: str | None = None, network: str | None = None
    ) -> None:
        self.network = network
        super().__init__(message, code or "FETCH_ERROR")


class UnsupportedNetworkError(FetchError):
    """Raised when a network is not served by any configured data source."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, network: str) -> None:
        super().__init__(f"Unsupported network: {network}", "UNSUPPORTED_NETWORK", network)


class InvalidTransactionHashError(FetchError):
    """Raised when the transaction hash is empty."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, tx_hash: str, network: str | None = None) -> None:
        self.tx_hash = tx_hash
        super().__init__(
            f"Invalid transaction hash: {tx_hash!r}", "INVALID_TRANSACTION_HASH", network
        )


class TransactionNotFoundError(FetchError):
    """Raised when the data source has no record of the transaction."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, tx_hash: str, network: str) -> None:
        self.tx_hash = tx_hash
        super().__init__(
            f"Transaction {tx_hash} not found on {network}", "TRANSACTION_NOT_FOUND", network
        )


class DataSourceError(FetchError):
    """Raised when a data source is unreachable or returns malformed data."""

    kind = ErrorKind.TRANSIENT

    def __init__(
        self, message: str, source: str | None = None, network: str | None = None
    ) -> None:
        self.source = source
        if source:
            message = f"[{source}] {message}"
        super().__init__(message, "DATA_SOURCE_ERROR", network)


class AnalysisError(TxLensError):
    """Raised when the scoring engine fails or breaks the result contract."""

    kind = ErrorKind.INTERNAL
    stage = "analyze"

    def __init__(self, message: str, backend: str | None = None) -> None:
        self.backend = backend
        super().__init__(message, "ANALYSIS_ERROR")
