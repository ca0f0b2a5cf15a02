"""Abstract scoring backend interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from app.models.transaction import NormalizedTransaction


@dataclass(frozen=True)
class RiskAssessment:
    """Raw outcome of a scoring backend, validated by the analyzer."""

    tx_type: str
    risk_score: float
    reasons: list[str] = field(default_factory=list)
    protocol: str | None = None
    explanation: str | None = None


class ScoringBackend(ABC):
    """Classification and risk-scoring strategy used by the analyzer.

    Implementations must be deterministic for identical inputs and must
    not mutate the transaction.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name identifier."""
        ...

    @abstractmethod
    def assess(
        self, network: str, tx_hash: str, tx: NormalizedTransaction
    ) -> RiskAssessment:
        """
        Classify and score a transaction.

        Args:
            network: Network identifier.
            tx_hash: Requested transaction hash.
            tx: Normalized transaction to inspect.

        Returns:
            RiskAssessment with type, score, reasons and optional explanation.
        """
        ...
