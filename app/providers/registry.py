"""Builds the network -> data source lookup table at startup."""

import logging

from app.config import Settings
from app.core.datasource import ChainDataSource
from app.providers.blockchair import BlockchairDataSource
from app.providers.evm_rpc import EvmRpcDataSource
from app.providers.static import StaticDataSource

logger = logging.getLogger(__name__)


def register(
    table: dict[str, ChainDataSource], source: ChainDataSource
) -> dict[str, ChainDataSource]:
    """Add every network a source serves. The first source registered for a network keeps it."""
    for network in source.supported_networks:
        if network in table:
            logger.warning(
                f"[Registry] {network} already served by {table[network].name}, "
                f"ignoring {source.name}"
            )
            continue
        table[network] = source
    return table


def build_data_sources(settings: Settings) -> dict[str, ChainDataSource]:
    """
    Build the data-source table for the configured mode.

    - static: fixture data for ethereum-mainnet only.
    - live: JSON-RPC for each EVM network with an RPC URL, Blockchair for bitcoin.
    """
    table: dict[str, ChainDataSource] = {}

    if settings.data_source == "static":
        register(table, StaticDataSource())
    else:
        if settings.rpc_urls:
            register(
                table,
                EvmRpcDataSource(
                    rpc_urls=settings.rpc_urls,
                    timeout=settings.rpc_timeout_seconds,
                ),
            )
        else:
            logger.warning("[Registry] Live mode without RPC URLs - no EVM networks served")
        register(
            table,
            BlockchairDataSource(
                api_key=settings.blockchair_api_key.get_secret_value(),
                base_url=settings.blockchair_base_url,
                timeout=settings.blockchair_timeout_seconds,
            ),
        )

    logger.info(
        f"[Registry] Data sources ready ({settings.data_source}): "
        + ", ".join(f"{network}={source.name}" for network, source in sorted(table.items()))
    )
    return table
