"""Chain-agnostic transaction models produced by the fetch stage."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.constants import SUPPORTED_NETWORKS, ChainFamily, TxStatus


class LogEntry(BaseModel):
    """A log emitted during execution. Topics and data are kept opaque."""

    model_config = ConfigDict(frozen=True)

    address: str
    topics: tuple[str, ...] = ()
    data: str = ""


class NormalizedTransaction(BaseModel):
    """Normalized transaction record shared by every data source."""

    model_config = ConfigDict(frozen=True)

    hash: str = Field(..., min_length=1)
    network: str
    sender: str | None = None
    recipient: str | None = None
    value_raw: int = Field(default=0, ge=0, description="Amount in the smallest unit")
    decimals: int = Field(default=18, ge=0)
    symbol: str = ""
    gas_used: int = Field(default=0, ge=0)
    status: TxStatus = TxStatus.SUCCESS
    logs: tuple[LogEntry, ...] = ()

    @property
    def value(self) -> Decimal:
        """Amount expressed in the native unit."""
        return Decimal(self.value_raw) / (Decimal(10) ** self.decimals)

    @property
    def is_contract_creation(self) -> bool:
        """True for an EVM deployment. UTXO records never create contracts."""
        config = SUPPORTED_NETWORKS.get(self.network)
        if config is not None and config.family != ChainFamily.EVM:
            return False
        return self.recipient is None and self.sender is not None

    def log_addresses(self) -> list[str]:
        """Emitting addresses in log order."""
        return [log.address for log in self.logs]
