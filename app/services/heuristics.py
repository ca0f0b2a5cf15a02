"""Rule-based classification and risk scoring."""

import logging
from collections.abc import Sequence
from decimal import Decimal

from app.constants import (
    HEURISTIC_PROTOCOL_SUFFIX,
    HIGH_LOG_COUNT_THRESHOLD,
    LARGE_VALUE_THRESHOLDS,
    PROTOCOL_SIGNATURES,
    RISK_SIGNAL_WEIGHTS,
    RiskSignal,
    TxStatus,
    TxType,
)
from app.core.scoring import RiskAssessment, ScoringBackend
from app.models.transaction import LogEntry, NormalizedTransaction

logger = logging.getLogger(__name__)

NO_ANOMALIES_REASON = "No anomalies detected by current heuristics"
HEURISTIC_BASIS_REASON = "Heuristic analysis only; no AI risk model yet"


def match_protocol(
    address: str, signatures: Sequence[tuple[str, str]] = PROTOCOL_SIGNATURES
) -> str | None:
    """Return the display name of the first signature contained in address."""
    for signature, display_name in signatures:
        if signature in address:
            return display_name
    return None


def detect_protocols(
    logs: Sequence[LogEntry], signatures: Sequence[tuple[str, str]] = PROTOCOL_SIGNATURES
) -> list[str]:
    """Distinct protocols touched by the logs, in order of first appearance."""
    found: list[str] = []
    for log in logs:
        protocol = match_protocol(log.address, signatures)
        if protocol and protocol not in found:
            found.append(protocol)
    return found


class HeuristicScoringBackend(ScoringBackend):
    """
    Static-rule scoring backend.

    Classification: the earliest log whose emitting address contains a
    known DEX signature (case-sensitive) makes the transaction a DEX_SWAP;
    anything else is a TRANSFER.

    Scoring: each fired signal adds its weight from RISK_SIGNAL_WEIGHTS,
    the sum is clamped to [0, 1]. Reasons follow the order signals are
    evaluated, and a final reason always states the heuristic basis.
    """

    def __init__(
        self,
        signal_weights: dict[RiskSignal, float] | None = None,
        signatures: Sequence[tuple[str, str]] | None = None,
        large_value_thresholds: dict[str, Decimal] | None = None,
        high_log_count: int = HIGH_LOG_COUNT_THRESHOLD,
    ) -> None:
        """
        Initialize the heuristic backend.

        Args:
            signal_weights: Custom weights per signal.
            signatures: Ordered (substring, display name) protocol signatures.
            large_value_thresholds: Native-unit thresholds per symbol.
            high_log_count: Log count at which HIGH_LOG_VOLUME fires.
        """
        self._weights = RISK_SIGNAL_WEIGHTS if signal_weights is None else signal_weights
        self._signatures = tuple(PROTOCOL_SIGNATURES if signatures is None else signatures)
        self._large_value_thresholds = (
            LARGE_VALUE_THRESHOLDS if large_value_thresholds is None else large_value_thresholds
        )
        self._high_log_count = high_log_count

    @property
    def name(self) -> str:
        return "heuristic"

    def assess(
        self, network: str, tx_hash: str, tx: NormalizedTransaction
    ) -> RiskAssessment:
        """Classify the transaction and score its risk signals."""
        protocols = detect_protocols(tx.logs, self._signatures)

        if protocols:
            tx_type = TxType.DEX_SWAP
            protocol = f"{protocols[0]} {HEURISTIC_PROTOCOL_SUFFIX}"
        else:
            tx_type = TxType.TRANSFER
            protocol = None

        signals = self.collect_signals(tx, protocols)
        total = sum(self._weights.get(signal, 0.0) for signal, _ in signals)
        risk_score = round(min(max(total, 0.0), 1.0), 4)

        reasons = [reason for _, reason in signals] or [NO_ANOMALIES_REASON]
        reasons.append(HEURISTIC_BASIS_REASON)

        logger.debug(
            f"[Heuristics] {tx_hash[:16]}... on {network}: {tx_type.value}, "
            f"signals={[s.value for s, _ in signals]}, score={risk_score}"
        )
        return RiskAssessment(
            tx_type=tx_type.value,
            risk_score=risk_score,
            reasons=reasons,
            protocol=protocol,
        )

    def collect_signals(
        self, tx: NormalizedTransaction, protocols: list[str]
    ) -> list[tuple[RiskSignal, str]]:
        """Evaluate every rule in a fixed order and return the ones that fired."""
        signals: list[tuple[RiskSignal, str]] = []

        if tx.status == TxStatus.FAILURE:
            signals.append(
                (RiskSignal.FAILED_EXECUTION, "Transaction execution failed on-chain")
            )
        elif tx.status == TxStatus.PENDING:
            signals.append(
                (RiskSignal.PENDING, "Transaction is still pending; final outcome unknown")
            )

        if tx.is_contract_creation:
            signals.append(
                (RiskSignal.CONTRACT_CREATION, "Transaction deploys a new contract")
            )

        if protocols:
            signals.append(
                (
                    RiskSignal.DEX_INTERACTION,
                    f"Interaction with decentralized exchange {protocols[0]}",
                )
            )
        if len(protocols) > 1:
            signals.append(
                (
                    RiskSignal.MULTI_PROTOCOL,
                    f"Touches {len(protocols)} DEX protocols in one transaction "
                    f"({', '.join(protocols)}), consistent with arbitrage or MEV routing",
                )
            )

        threshold = self._large_value_thresholds.get(tx.symbol)
        if threshold is not None and tx.value >= threshold:
            signals.append(
                (
                    RiskSignal.LARGE_VALUE,
                    f"Transferred value {tx.value.normalize():f} {tx.symbol} "
                    f"meets large-value threshold of {threshold} {tx.symbol}",
                )
            )

        if len(tx.logs) >= self._high_log_count:
            signals.append(
                (
                    RiskSignal.HIGH_LOG_VOLUME,
                    f"Emitted {len(tx.logs)} log entries, indicating complex contract activity",
                )
            )

        if tx.sender is not None and tx.sender == tx.recipient:
            signals.append(
                (RiskSignal.SELF_TRANSFER, "Sender and recipient are the same address")
            )

        return signals
