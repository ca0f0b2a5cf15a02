"""Transaction analysis stage."""

import logging
import math

from pydantic import ValidationError

from app.constants import TxType, risk_level_for
from app.core.exceptions import AnalysisError
from app.core.scoring import RiskAssessment, ScoringBackend
from app.models.analysis import AnalysisResult
from app.models.transaction import NormalizedTransaction
from app.services.heuristics import HeuristicScoringBackend

logger = logging.getLogger(__name__)


class TransactionAnalyzerService:
    """
    Turns a NormalizedTransaction into an AnalysisResult.

    Classification and scoring are delegated to a ScoringBackend. The
    analyzer owns the result contract: it validates whatever the backend
    returns and fails the whole call rather than return a partial result.
    """

    def __init__(self, backend: ScoringBackend | None = None) -> None:
        """
        Initialize the analyzer.

        Args:
            backend: Scoring strategy. Defaults to the heuristic backend.
        """
        self._backend = backend or HeuristicScoringBackend()

    @property
    def backend(self) -> ScoringBackend:
        return self._backend

    def analyze(
        self, network: str, tx_hash: str, tx: NormalizedTransaction
    ) -> AnalysisResult:
        """
        Classify and score a transaction.

        Args:
            network: Network identifier, echoed in the result.
            tx_hash: Transaction hash, echoed in the result.
            tx: Normalized transaction from the fetch stage.

        Returns:
            AnalysisResult with a score in [0, 1] and non-empty reasons.

        Raises:
            AnalysisError: If the backend fails or breaks the result contract.
        """
        backend_name = self._backend.name
        try:
            assessment = self._backend.assess(network, tx_hash, tx)
        except AnalysisError:
            raise
        except Exception as e:
            logger.exception(f"[Analyzer] Backend {backend_name} failed for {tx_hash[:16]}...")
            raise AnalysisError(f"Scoring backend failed: {e}", backend_name) from e

        tx_type = self._validate(assessment, backend_name)
        explanation = self._explanation(network, tx_hash, tx_type, assessment)

        try:
            result = AnalysisResult(
                tx_hash=tx_hash,
                network=network,
                tx_type=tx_type,
                protocol=assessment.protocol,
                risk_score=assessment.risk_score,
                risk_reasons=list(assessment.reasons),
                natural_language_explanation=explanation,
            )
        except ValidationError as e:
            raise AnalysisError(f"Invalid analysis result: {e}", backend_name) from e

        logger.info(
            f"[Analyzer] {tx_hash[:16]}... on {network}: {result.tx_type.value}, "
            f"score={result.risk_score} via {backend_name}"
        )
        return result

    def _validate(self, assessment: RiskAssessment, backend_name: str) -> TxType:
        """Check the backend outcome against the result contract."""
        try:
            tx_type = TxType(assessment.tx_type)
        except ValueError as e:
            raise AnalysisError(
                f"Unknown transaction type {assessment.tx_type!r}", backend_name
            ) from e

        score = assessment.risk_score
        if (
            not isinstance(score, (int, float))
            or isinstance(score, bool)
            or math.isnan(score)
            or not 0.0 <= score <= 1.0
        ):
            raise AnalysisError(f"Risk score out of range: {score!r}", backend_name)

        reasons = assessment.reasons
        if (
            not isinstance(reasons, (list, tuple))
            or not reasons
            or any(not isinstance(reason, str) or not reason.strip() for reason in reasons)
        ):
            raise AnalysisError("Risk reasons must be a non-empty list of text", backend_name)

        if assessment.explanation is not None and not isinstance(assessment.explanation, str):
            raise AnalysisError(
                f"Explanation must be text, got {type(assessment.explanation).__name__}",
                backend_name,
            )

        return tx_type

    def _explanation(
        self, network: str, tx_hash: str, tx_type: TxType, assessment: RiskAssessment
    ) -> str:
        """Backend explanation anchored to the transaction, or the built one."""
        explanation = (assessment.explanation or "").strip()
        if not explanation:
            return self.build_explanation(network, tx_hash, tx_type, assessment)
        if tx_hash in explanation and network in explanation:
            return explanation
        return f"Transaction {tx_hash} on {network}: {explanation}"

    @staticmethod
    def build_explanation(
        network: str, tx_hash: str, tx_type: TxType, assessment: RiskAssessment
    ) -> str:
        """Deterministic summary of the classification and score."""
        if tx_type == TxType.DEX_SWAP and assessment.protocol:
            classification = f"a decentralized-exchange swap via {assessment.protocol}"
        elif tx_type == TxType.DEX_SWAP:
            classification = "a decentralized-exchange swap"
        elif tx_type == TxType.TRANSFER:
            classification = "a transfer with no known protocol interaction"
        elif tx_type == TxType.CONTRACT_CREATION:
            classification = "a contract deployment"
        else:
            classification = "an unrecognized pattern"

        level = risk_level_for(float(assessment.risk_score))
        return (
            f"Transaction {tx_hash} on {network} was classified as {classification}. "
            f"Risk score {float(assessment.risk_score):.2f} ({level.value}); "
            f"primary reason: {assessment.reasons[0]}."
        )
