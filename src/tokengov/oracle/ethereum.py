"""
Ethereum-backed balance oracle and block height clock.

Membership tokens are read from an ERC-1155 contract through web3, and
deadlines can be measured in block numbers instead of seconds.
"""

import logging

logger = logging.getLogger(__name__)
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from web3 import Web3

from ..errors.exceptions import OracleUnavailable
from .base import BalanceOracle, Clock

ERC1155_BALANCE_ABI: List[Dict[str, Any]] = [
    {
        "constant": True,
        "inputs": [
            {"name": "account", "type": "address"},
            {"name": "id", "type": "uint256"},
        ],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    }
]


@dataclass
class EthereumOracleConfig:
    """Connection settings for the ERC-1155 oracle."""

    rpc_url: str = "http://127.0.0.1:8545"
    contract_address: str = ""
    timeout: int = 30


class Erc1155BalanceOracle(BalanceOracle):
    """Balance oracle that calls ``balanceOf(address,uint256)`` on-chain."""

    def __init__(
        self,
        config: EthereumOracleConfig,
        web3: Optional[Web3] = None,
    ):
        if not config.contract_address:
            raise ValueError("contract_address is required")
        self.config = config
        self.web3 = web3 or Web3(
            Web3.HTTPProvider(
                config.rpc_url, request_kwargs={"timeout": config.timeout}
            )
        )
        self.contract = self.web3.eth.contract(
            address=Web3.to_checksum_address(config.contract_address),
            abi=ERC1155_BALANCE_ABI,
        )

    def balance_of(self, holder: str, token_id: int) -> int:
        try:
            return int(
                self.contract.functions.balanceOf(
                    Web3.to_checksum_address(holder), token_id
                ).call()
            )
        except Exception as e:
            logger.warning(f"balanceOf({holder}, {token_id}) failed: {e}")
            raise OracleUnavailable(
                f"ERC-1155 balance query failed: {e}",
                holder=holder,
                token_id=token_id,
                cause=e,
            ) from e


class BlockHeightClock(Clock):
    """Clock that reports the latest block number."""

    def __init__(self, web3: Web3):
        self.web3 = web3

    def now(self) -> int:
        return int(self.web3.eth.block_number)
