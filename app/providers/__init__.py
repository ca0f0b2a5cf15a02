"""Chain data sources package."""

from app.providers.blockchair import BlockchairDataSource
from app.providers.evm_rpc import EvmRpcDataSource
from app.providers.registry import build_data_sources
from app.providers.static import StaticDataSource

__all__ = [
    "BlockchairDataSource",
    "EvmRpcDataSource",
    "StaticDataSource",
    "build_data_sources",
]
