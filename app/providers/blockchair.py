"""Blockchair API data source for UTXO chains."""

import logging
from typing import Any

import httpx

from app.constants import SUPPORTED_NETWORKS, ChainFamily, TxStatus
from app.core.datasource import ChainDataSource
from app.core.exceptions import (
    DataSourceError,
    TransactionNotFoundError,
    UnsupportedNetworkError,
)
from app.models.transaction import NormalizedTransaction

logger = logging.getLogger(__name__)

# Network identifier -> Blockchair chain slug
BLOCKCHAIR_SLUGS: dict[str, str] = {
    "bitcoin-mainnet": "bitcoin",
}


class BlockchairDataSource(ChainDataSource):
    """
    Blockchair dashboard API data source.

    UTXO transactions have no sender/recipient or logs, so they are
    flattened: the first input and first output address stand in for the
    parties, the output total is the value and the fee is reported as
    gas_used.
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = "https://api.blockchair.com",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize Blockchair data source.

        Args:
            api_key: Blockchair API key (optional but recommended).
            base_url: Base URL for Blockchair API.
            timeout: Request timeout in seconds.
            client: Optional pre-built HTTP client.
        """
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    @property
    def name(self) -> str:
        return "blockchair"

    @property
    def supported_networks(self) -> list[str]:
        return [
            network
            for network in BLOCKCHAIR_SLUGS
            if SUPPORTED_NETWORKS[network].family == ChainFamily.UTXO
        ]

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                headers={
                    "Accept": "application/json",
                    "User-Agent": "TxLens/0.1",
                },
            )
        return self._client

    async def _request(self, network: str, path: str) -> dict[str, Any] | None:
        """
        Make a single GET request.

        Returns:
            JSON response data, or None on 404.

        Raises:
            DataSourceError: On timeout, transport failure, HTTP error or invalid JSON.
        """
        url = f"{self._base_url}/{path.lstrip('/')}"
        params = {"key": self._api_key} if self._api_key else {}
        client = await self._get_client()

        logger.info(f"[Blockchair] GET {url}")
        try:
            response = await client.get(url, params=params)
            if response.status_code == 404:
                logger.warning(f"[Blockchair] Resource not found (404): {url}")
                return None
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as e:
            logger.warning(f"[Blockchair] Request timeout after {self._timeout}s")
            raise DataSourceError(
                f"Request timeout after {self._timeout}s", self.name, network
            ) from e
        except httpx.HTTPStatusError as e:
            logger.error(
                f"[Blockchair] HTTP error {e.response.status_code}: {e.response.text[:200]}"
            )
            raise DataSourceError(
                f"HTTP {e.response.status_code} from Blockchair", self.name, network
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"[Blockchair] Transport error: {e}")
            raise DataSourceError(f"Blockchair unreachable: {e}", self.name, network) from e
        except ValueError as e:
            raise DataSourceError("Blockchair returned invalid JSON", self.name, network) from e

        if not isinstance(body, dict):
            raise DataSourceError("Blockchair response is not a JSON object", self.name, network)
        return body

    async def get_transaction(self, network: str, tx_hash: str) -> NormalizedTransaction:
        """Fetch transaction details from Blockchair."""
        if not self.supports_network(network):
            raise UnsupportedNetworkError(network)

        logger.info(f"[Blockchair] Fetching transaction {tx_hash[:16]}... on {network}")
        slug = BLOCKCHAIR_SLUGS[network]
        body = await self._request(network, f"{slug}/dashboards/transaction/{tx_hash}")

        tx_data = (body or {}).get("data") or {}
        raw_tx = None
        if isinstance(tx_data, dict):
            raw_tx = tx_data.get(tx_hash) or tx_data.get(tx_hash.lower())
        if not raw_tx:
            logger.warning(f"[Blockchair] Transaction {tx_hash[:16]}... not found on {network}")
            raise TransactionNotFoundError(tx_hash, network)

        try:
            return self._normalize(network, tx_hash, raw_tx)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"[Blockchair] Malformed transaction payload: {e}")
            raise DataSourceError(
                f"Malformed transaction payload: {e}", self.name, network
            ) from e

    def _normalize(
        self, network: str, tx_hash: str, raw_tx: dict[str, Any]
    ) -> NormalizedTransaction:
        """Flatten a UTXO dashboard record onto the normalized model."""
        config = SUPPORTED_NETWORKS[network]
        tx_info = raw_tx["transaction"]
        inputs = raw_tx.get("inputs") or []
        outputs = raw_tx.get("outputs") or []

        block_id = tx_info.get("block_id")
        status = TxStatus.PENDING if block_id in (None, -1) else TxStatus.SUCCESS

        if "output_total" in tx_info:
            value_raw = int(tx_info["output_total"])
        else:
            value_raw = sum(int(out.get("value", 0)) for out in outputs)

        normalized = NormalizedTransaction(
            hash=tx_hash,
            network=network,
            sender=inputs[0].get("recipient") if inputs else None,
            recipient=outputs[0].get("recipient") if outputs else None,
            value_raw=value_raw,
            decimals=config.decimals,
            symbol=config.symbol,
            gas_used=int(tx_info.get("fee") or 0),
            status=status,
        )
        logger.info(
            f"[Blockchair] ✓ UTXO transaction parsed - {len(inputs)} inputs, "
            f"{len(outputs)} outputs, value: {normalized.value:.8f} {config.symbol}"
        )
        return normalized

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
