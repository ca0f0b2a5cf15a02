"""Application constants and network configurations."""

from decimal import Decimal
from enum import Enum
from typing import NamedTuple


class ChainFamily(str, Enum):
    """Blockchain family, used to pick a data-source adapter."""

    EVM = "evm"
    UTXO = "utxo"


class NetworkConfig(NamedTuple):
    """Configuration for a blockchain network."""

    slug: str
    name: str
    family: ChainFamily
    symbol: str
    decimals: int
    chain_id: int | None = None


# Networks the service knows how to describe. Which of them are actually
# served depends on the data sources registered at startup.
SUPPORTED_NETWORKS: dict[str, NetworkConfig] = {
    "ethereum-mainnet": NetworkConfig(
        "ethereum-mainnet", "Ethereum", ChainFamily.EVM, "ETH", 18, 1
    ),
    "polygon-mainnet": NetworkConfig(
        "polygon-mainnet", "Polygon", ChainFamily.EVM, "POL", 18, 137
    ),
    "arbitrum-one": NetworkConfig(
        "arbitrum-one", "Arbitrum One", ChainFamily.EVM, "ETH", 18, 42161
    ),
    "optimism-mainnet": NetworkConfig(
        "optimism-mainnet", "Optimism", ChainFamily.EVM, "ETH", 18, 10
    ),
    "base-mainnet": NetworkConfig(
        "base-mainnet", "Base", ChainFamily.EVM, "ETH", 18, 8453
    ),
    "bsc-mainnet": NetworkConfig(
        "bsc-mainnet", "BNB Smart Chain", ChainFamily.EVM, "BNB", 18, 56
    ),
    "bitcoin-mainnet": NetworkConfig(
        "bitcoin-mainnet", "Bitcoin", ChainFamily.UTXO, "BTC", 8
    ),
}


class TxStatus(str, Enum):
    """Execution status of a transaction."""

    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"


class TxType(str, Enum):
    """Transaction categories known to the analyzer."""

    TRANSFER = "TRANSFER"
    DEX_SWAP = "DEX_SWAP"
    CONTRACT_CREATION = "CONTRACT_CREATION"
    UNKNOWN = "UNKNOWN"


# (substring matched against a log's emitting address, display name).
# Order matters: within one log entry the first matching signature wins.
PROTOCOL_SIGNATURES: tuple[tuple[str, str], ...] = (
    ("Uniswap", "Uniswap"),
    ("SushiSwap", "SushiSwap"),
    ("PancakeSwap", "PancakeSwap"),
    ("Curve", "Curve"),
    ("Balancer", "Balancer"),
    ("1inch", "1inch"),
    # Router contracts, lowercase as returned by EVM JSON-RPC
    ("0x7a250d5630b4cf539739df2c5dacb4c659f2488d", "Uniswap"),  # V2 router
    ("0xe592427a0aece92de3edee1f18e0157c05861564", "Uniswap"),  # V3 router
    ("0x68b3465833fb72a70ecdf485e0e4c7bd8665fc45", "Uniswap"),  # V3 router 02
    ("0x3fc91a3afd70395cd496c647d5a6cc9d4b2b7fad", "Uniswap"),  # universal router
    ("0xd9e1ce17f2641f24ae83637ab66a2cca9c378b9f", "SushiSwap"),
    ("0x10ed43c718714eb63d5aa57b78b54704e256024e", "PancakeSwap"),
    ("0x1111111254eeb25477b68fb85ed929f73a960582", "1inch"),
)

HEURISTIC_PROTOCOL_SUFFIX = "(detected heuristically)"


class RiskSignal(str, Enum):
    """Signals raised by the heuristic scoring backend."""

    FAILED_EXECUTION = "failed_execution"
    PENDING = "pending"
    CONTRACT_CREATION = "contract_creation"
    DEX_INTERACTION = "dex_interaction"
    MULTI_PROTOCOL = "multi_protocol"
    LARGE_VALUE = "large_value"
    HIGH_LOG_VOLUME = "high_log_volume"
    SELF_TRANSFER = "self_transfer"


# Signal weights for heuristic scoring. The total is clamped to 1.0.
RISK_SIGNAL_WEIGHTS: dict[RiskSignal, float] = {
    RiskSignal.FAILED_EXECUTION: 0.30,
    RiskSignal.PENDING: 0.10,
    RiskSignal.CONTRACT_CREATION: 0.20,
    RiskSignal.DEX_INTERACTION: 0.10,
    RiskSignal.MULTI_PROTOCOL: 0.15,
    RiskSignal.LARGE_VALUE: 0.25,
    RiskSignal.HIGH_LOG_VOLUME: 0.15,
    RiskSignal.SELF_TRANSFER: 0.05,
}

# Native amounts at or above which a transfer is considered large
LARGE_VALUE_THRESHOLDS: dict[str, Decimal] = {
    "ETH": Decimal("100"),
    "POL": Decimal("250000"),
    "BNB": Decimal("500"),
    "BTC": Decimal("10"),
}

HIGH_LOG_COUNT_THRESHOLD = 25


class RiskLevel(str, Enum):
    """Risk level classification."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# Upper bound (inclusive) of each level
RISK_THRESHOLDS: dict[RiskLevel, float] = {
    RiskLevel.LOW: 0.30,
    RiskLevel.MEDIUM: 0.70,
    RiskLevel.HIGH: 1.0,
}


def risk_level_for(score: float) -> RiskLevel:
    """Map a score in [0, 1] to its risk level."""
    if score <= RISK_THRESHOLDS[RiskLevel.LOW]:
        return RiskLevel.LOW
    if score <= RISK_THRESHOLDS[RiskLevel.MEDIUM]:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH
