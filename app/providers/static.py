"""Fixture-backed data source used when no live provider is configured."""

import logging

from app.constants import SUPPORTED_NETWORKS, TxStatus
from app.core.datasource import ChainDataSource
from app.core.exceptions import UnsupportedNetworkError
from app.models.transaction import LogEntry, NormalizedTransaction

logger = logging.getLogger(__name__)


class StaticDataSource(ChainDataSource):
    """
    Returns a fixed, deterministic transaction for any requested hash.

    Useful for local development and demos: the record always carries a
    single Uniswap pool log so the full analysis path is exercised without
    network access.
    """

    def __init__(self, networks: list[str] | None = None) -> None:
        self._networks = list(networks or ["ethereum-mainnet"])

    @property
    def name(self) -> str:
        return "static"

    @property
    def supported_networks(self) -> list[str]:
        return list(self._networks)

    async def get_transaction(self, network: str, tx_hash: str) -> NormalizedTransaction:
        """Build the fixture record for tx_hash."""
        if not self.supports_network(network):
            raise UnsupportedNetworkError(network)

        config = SUPPORTED_NETWORKS[network]
        logger.debug(f"[Static] Serving fixture for {tx_hash[:16]} on {network}")

        return NormalizedTransaction(
            hash=tx_hash,
            network=network,
            sender="0x1234...abcd",
            recipient="0xabcd...1234",
            value_raw=15 * 10 ** (config.decimals - 1),  # 1.5 native units
            decimals=config.decimals,
            symbol=config.symbol,
            gas_used=21000,
            status=TxStatus.SUCCESS,
            logs=(
                LogEntry(
                    address="0xUniswapV3Pool...",
                    topics=("Swap", "..."),
                    data="...",
                ),
            ),
        )

    async def close(self) -> None:
        """Nothing to release."""
