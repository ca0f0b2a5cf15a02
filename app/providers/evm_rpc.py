"""EVM JSON-RPC data source implementation."""

import asyncio
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
from app.models.transaction import LogEntry, NormalizedTransaction

logger = logging.getLogger(__name__)


def _hex_to_int(value: Any, field: str) -> int:
    """Decode a JSON-RPC quantity ("0x..." string)."""
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ValueError(f"{field} is not a hex quantity: {value!r}")
    return int(value, 16) if len(value) > 2 else 0


def _lower(address: Any) -> str | None:
    return address.lower() if isinstance(address, str) else None


class EvmRpcDataSource(ChainDataSource):
    """
    Fetches transactions from EVM nodes over JSON-RPC.

    One instance serves every EVM network that has an RPC URL configured.
    Each fetch issues ``eth_getTransactionByHash`` and
    ``eth_getTransactionReceipt`` concurrently. No retries are performed;
    failures surface as DataSourceError so the caller can decide.
    """

    def __init__(
        self,
        rpc_urls: dict[str, str],
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the EVM RPC data source.

        Args:
            rpc_urls: Mapping of network identifier to JSON-RPC endpoint.
            timeout: Request timeout in seconds.
            client: Optional pre-built HTTP client (tests inject a mock transport).
        """
        self._rpc_urls = {
            network: url
            for network, url in rpc_urls.items()
            if network in SUPPORTED_NETWORKS
            and SUPPORTED_NETWORKS[network].family == ChainFamily.EVM
        }
        self._timeout = timeout
        self._client = client

    @property
    def name(self) -> str:
        return "evm_rpc"

    @property
    def supported_networks(self) -> list[str]:
        return list(self._rpc_urls)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                    "User-Agent": "TxLens/0.1",
                },
            )
        return self._client

    async def _call(self, network: str, method: str, params: list[Any]) -> Any:
        """
        Perform a single JSON-RPC call.

        Raises:
            DataSourceError: On transport failure, HTTP error, RPC error or
                a response that is not a JSON-RPC envelope.
        """
        url = self._rpc_urls[network]
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        client = await self._get_client()

        logger.debug(f"[EvmRpc] {method} on {network}")
        try:
            response = await client.post(url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as e:
            logger.warning(f"[EvmRpc] {method} timed out after {self._timeout}s on {network}")
            raise DataSourceError(
                f"RPC timeout after {self._timeout}s", self.name, network
            ) from e
        except httpx.HTTPStatusError as e:
            logger.error(f"[EvmRpc] HTTP error {e.response.status_code} on {network}")
            raise DataSourceError(
                f"RPC returned HTTP {e.response.status_code}", self.name, network
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"[EvmRpc] Transport error on {network}: {e}")
            raise DataSourceError(f"RPC unreachable: {e}", self.name, network) from e
        except ValueError as e:
            raise DataSourceError("RPC returned invalid JSON", self.name, network) from e

        if not isinstance(body, dict):
            raise DataSourceError("RPC response is not a JSON object", self.name, network)
        if body.get("error"):
            error = body["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            logger.error(f"[EvmRpc] {method} failed on {network}: {message}")
            raise DataSourceError(f"RPC error: {message}", self.name, network)
        if "result" not in body:
            raise DataSourceError("RPC response has no result", self.name, network)
        return body["result"]

    async def get_transaction(self, network: str, tx_hash: str) -> NormalizedTransaction:
        """Fetch transaction and receipt, then normalize them."""
        if not self.supports_network(network):
            raise UnsupportedNetworkError(network)

        logger.info(f"[EvmRpc] Fetching transaction {tx_hash[:16]}... on {network}")
        tasks = [
            asyncio.ensure_future(self._call(network, "eth_getTransactionByHash", [tx_hash])),
            asyncio.ensure_future(self._call(network, "eth_getTransactionReceipt", [tx_hash])),
        ]
        try:
            tx_data, receipt = await asyncio.gather(*tasks)
        except BaseException:
            # One call failed or the caller went away: stop the other request.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        if tx_data is None:
            logger.warning(f"[EvmRpc] Transaction {tx_hash[:16]}... not found on {network}")
            raise TransactionNotFoundError(tx_hash, network)

        try:
            return self._normalize(network, tx_hash, tx_data, receipt)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"[EvmRpc] Malformed transaction payload on {network}: {e}")
            raise DataSourceError(
                f"Malformed transaction payload: {e}", self.name, network
            ) from e

    def _normalize(
        self,
        network: str,
        tx_hash: str,
        tx_data: dict[str, Any],
        receipt: dict[str, Any] | None,
    ) -> NormalizedTransaction:
        """Map raw JSON-RPC objects onto the normalized model."""
        config = SUPPORTED_NETWORKS[network]

        returned_hash = tx_data.get("hash")
        if not isinstance(returned_hash, str) or returned_hash.lower() != tx_hash.lower():
            raise ValueError(f"node returned hash {returned_hash!r}")

        if receipt is None or tx_data.get("blockNumber") is None:
            status = TxStatus.PENDING
            gas_used = 0
            logs: tuple[LogEntry, ...] = ()
        else:
            status = (
                TxStatus.SUCCESS
                if _hex_to_int(receipt["status"], "status") == 1
                else TxStatus.FAILURE
            )
            gas_used = _hex_to_int(receipt["gasUsed"], "gasUsed")
            logs = tuple(
                LogEntry(
                    address=log["address"].lower(),
                    topics=tuple(log.get("topics") or ()),
                    data=log.get("data") or "",
                )
                for log in receipt.get("logs") or []
            )

        normalized = NormalizedTransaction(
            hash=tx_hash,
            network=network,
            sender=_lower(tx_data.get("from")),
            recipient=_lower(tx_data.get("to")),
            value_raw=_hex_to_int(tx_data.get("value", "0x0"), "value"),
            decimals=config.decimals,
            symbol=config.symbol,
            gas_used=gas_used,
            status=status,
            logs=logs,
        )
        logger.info(
            f"[EvmRpc] ✓ Transaction parsed - status: {status.value}, "
            f"value: {normalized.value} {config.symbol}, logs: {len(logs)}"
        )
        return normalized

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("[EvmRpc] HTTP client closed")
