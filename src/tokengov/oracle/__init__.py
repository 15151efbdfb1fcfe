"""External collaborators: token balance oracles and clocks."""

from .base import (
    BalanceOracle,
    Clock,
    InMemoryBalanceOracle,
    ManualClock,
    SystemClock,
)
from .ethereum import (
    ERC1155_BALANCE_ABI,
    BlockHeightClock,
    Erc1155BalanceOracle,
    EthereumOracleConfig,
)

__all__ = [
    "BalanceOracle",
    "Clock",
    "InMemoryBalanceOracle",
    "ManualClock",
    "SystemClock",
    # web3-backed
    "ERC1155_BALANCE_ABI",
    "Erc1155BalanceOracle",
    "EthereumOracleConfig",
    "BlockHeightClock",
]
