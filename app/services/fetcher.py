"""Transaction fetch stage."""

import logging
from collections.abc import Mapping
from types import MappingProxyType

from pydantic import ValidationError

from app.core.datasource import ChainDataSource
from app.core.exceptions import (
    DataSourceError,
    FetchError,
    InvalidTransactionHashError,
    UnsupportedNetworkError,
)
from app.models.transaction import NormalizedTransaction

logger = logging.getLogger(__name__)


class TransactionFetcherService:
    """
    Resolves (network, tx_hash) to a NormalizedTransaction.

    Dispatches to the data source registered for the network. The lookup
    table is frozen at construction, so one instance can serve any number
    of concurrent requests.
    """

    def __init__(self, sources: Mapping[str, ChainDataSource]) -> None:
        """
        Initialize the fetcher.

        Args:
            sources: Mapping of network identifier to the data source serving it.
        """
        self._sources = MappingProxyType(dict(sources))

    @property
    def supported_networks(self) -> list[str]:
        """Networks this fetcher can serve, sorted."""
        return sorted(self._sources)

    def supports_network(self, network: str) -> bool:
        return network in self._sources

    def source_for(self, network: str) -> ChainDataSource:
        """Get the data source for a network or raise UnsupportedNetworkError."""
        source = self._sources.get(network)
        if source is None:
            raise UnsupportedNetworkError(network)
        return source

    async def fetch(self, network: str, tx_hash: str) -> NormalizedTransaction:
        """
        Fetch and normalize a transaction.

        Args:
            network: Network identifier.
            tx_hash: Opaque transaction identifier.

        Returns:
            NormalizedTransaction whose hash equals tx_hash.

        Raises:
            UnsupportedNetworkError: Network not served. Not retryable.
            InvalidTransactionHashError: Empty hash. Not retryable.
            TransactionNotFoundError: Source has no such transaction.
            DataSourceError: Source unreachable or returned malformed data.
        """
        source = self.source_for(network)
        if not tx_hash or not tx_hash.strip():
            raise InvalidTransactionHashError(tx_hash, network)

        logger.info(f"[Fetcher] {tx_hash[:16]}... on {network} via {source.name}")
        try:
            tx = await source.get_transaction(network, tx_hash)
        except FetchError:
            raise
        except ValidationError as e:
            logger.error(f"[Fetcher] {source.name} produced an invalid record: {e}")
            raise DataSourceError(
                f"Invalid transaction record: {e.error_count()} validation error(s)",
                source.name,
                network,
            ) from e

        if not isinstance(tx, NormalizedTransaction):
            raise DataSourceError(
                f"Expected NormalizedTransaction, got {type(tx).__name__}",
                source.name,
                network,
            )
        if tx.hash != tx_hash:
            logger.error(f"[Fetcher] {source.name} returned hash {tx.hash} for {tx_hash}")
            raise DataSourceError(
                f"Returned hash {tx.hash} does not match requested {tx_hash}",
                source.name,
                network,
            )
        return tx

    async def close(self) -> None:
        """Close each distinct data source once."""
        closed: set[int] = set()
        for source in self._sources.values():
            if id(source) in closed:
                continue
            closed.add(id(source))
            try:
                await source.close()
            except Exception as e:
                logger.warning(f"[Fetcher] Failed to close {source.name}: {e}")
