"""Abstract chain data-source interface."""

from abc import ABC, abstractmethod

from app.models.transaction import NormalizedTransaction


class ChainDataSource(ABC):
    """Abstract base class for per-chain-family transaction data sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Data source name identifier."""
        ...

    @property
    @abstractmethod
    def supported_networks(self) -> list[str]:
        """List of network identifiers this source can serve."""
        ...

    @abstractmethod
    async def get_transaction(self, network: str, tx_hash: str) -> NormalizedTransaction:
        """
        Fetch a transaction and normalize it.

        Args:
            network: Network identifier (e.g., 'ethereum-mainnet').
            tx_hash: Transaction hash, passed through unchanged.

        Returns:
            NormalizedTransaction whose hash equals tx_hash.

        Raises:
            UnsupportedNetworkError: If the network is not served here.
            TransactionNotFoundError: If the transaction doesn't exist.
            DataSourceError: If the source is unreachable or the payload is malformed.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the data source and release resources."""
        ...

    def supports_network(self, network: str) -> bool:
        """Check if the source serves a given network."""
        return network in self.supported_networks
