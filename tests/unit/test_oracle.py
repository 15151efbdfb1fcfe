"""
Unit tests for balance oracles and clocks.
"""

import logging

logger = logging.getLogger(__name__)
import pytest
from unittest.mock import MagicMock, Mock, patch

from tokengov.oracle.base import InMemoryBalanceOracle, ManualClock, SystemClock
from tokengov.errors.exceptions import OracleUnavailable, ValidationError

HOLDER = "0x" + "11" * 20
CONTRACT = "0x" + "22" * 20


class TestInMemoryBalanceOracle:
    """Test InMemoryBalanceOracle."""

    def test_unknown_balance_is_zero(self):
        assert InMemoryBalanceOracle().balance_of("0xa", 1) == 0

    def test_set_and_clear_balance(self):
        oracle = InMemoryBalanceOracle()
        oracle.set_balance("0xa", 1, 3)
        assert oracle.balance_of("0xa", 1) == 3
        assert oracle.balance_of("0xa", 2) == 0

        oracle.set_balance("0xa", 1, 0)
        assert oracle.balance_of("0xa", 1) == 0

    def test_initial_balances(self):
        oracle = InMemoryBalanceOracle({("0xa", 1): 2})
        assert oracle.balance_of("0xa", 1) == 2

    def test_negative_balance_rejected(self):
        with pytest.raises(ValidationError):
            InMemoryBalanceOracle().set_balance("0xa", 1, -1)


class TestManualClock:
    """Test ManualClock."""

    def test_advance_and_set(self):
        clock = ManualClock(10)
        assert clock.now() == 10
        assert clock.advance(5) == 15
        clock.set(20)
        assert clock.now() == 20
        clock.set(20)
        assert clock.now() == 20

    def test_monotonic(self):
        clock = ManualClock(10)
        with pytest.raises(ValidationError):
            clock.set(9)
        with pytest.raises(ValidationError):
            clock.advance(-1)
        assert clock.now() == 10

    def test_negative_start(self):
        with pytest.raises(ValidationError):
            ManualClock(-1)


class TestSystemClock:
    """Test SystemClock."""

    def test_integer_seconds(self):
        with patch("tokengov.oracle.base.time.time", return_value=1700000000.7):
            assert SystemClock().now() == 1700000000

    def test_never_goes_backwards(self):
        clock = SystemClock()
        with patch("tokengov.oracle.base.time.time", side_effect=[200.0, 150.0, 250.0]):
            assert clock.now() == 200
            assert clock.now() == 200
            assert clock.now() == 250


class TestEthereumOracle:
    """Test the ERC-1155 oracle and block height clock against a mocked web3."""

    @pytest.fixture
    def web3(self):
        return MagicMock()

    def test_balance_of_calls_contract(self, web3):
        from tokengov.oracle.ethereum import (
            ERC1155_BALANCE_ABI,
            Erc1155BalanceOracle,
            EthereumOracleConfig,
        )

        contract = web3.eth.contract.return_value
        contract.functions.balanceOf.return_value.call.return_value = 4

        oracle = Erc1155BalanceOracle(
            EthereumOracleConfig(contract_address=CONTRACT), web3=web3
        )

        assert oracle.balance_of(HOLDER, 12) == 4
        kwargs = web3.eth.contract.call_args.kwargs
        assert kwargs["abi"] == ERC1155_BALANCE_ABI
        assert kwargs["address"].lower() == CONTRACT
        args = contract.functions.balanceOf.call_args.args
        assert args[0].lower() == HOLDER
        assert args[1] == 12

    def test_balance_of_failure(self, web3):
        from tokengov.oracle.ethereum import Erc1155BalanceOracle, EthereumOracleConfig

        contract = web3.eth.contract.return_value
        contract.functions.balanceOf.return_value.call.side_effect = ConnectionError("rpc")

        oracle = Erc1155BalanceOracle(
            EthereumOracleConfig(contract_address=CONTRACT), web3=web3
        )

        with pytest.raises(OracleUnavailable) as exc_info:
            oracle.balance_of(HOLDER, 12)
        assert exc_info.value.token_id == 12

    def test_contract_address_required(self, web3):
        from tokengov.oracle.ethereum import Erc1155BalanceOracle, EthereumOracleConfig

        with pytest.raises(ValueError):
            Erc1155BalanceOracle(EthereumOracleConfig(), web3=web3)

    def test_block_height_clock(self, web3):
        from tokengov.oracle.ethereum import BlockHeightClock

        web3.eth.block_number = 1234
        assert BlockHeightClock(web3).now() == 1234

    def test_package_exports(self, web3):
        from tokengov.oracle import BlockHeightClock, Erc1155BalanceOracle, EthereumOracleConfig

        web3.eth.block_number = 7
        assert BlockHeightClock(web3).now() == 7
        oracle = Erc1155BalanceOracle(EthereumOracleConfig(contract_address=CONTRACT), web3=web3)
        assert oracle.contract is web3.eth.contract.return_value
