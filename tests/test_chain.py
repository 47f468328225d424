"""
Unit Tests for the Chain Client
===============================
Tests transaction submission with a local key and with node accounts,
and receipt handling. The web3 connection is mocked.

Run: python -m pytest tests/test_chain.py -v
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from arcdao.chain import ChainClient
from arcdao.config import ArcConfig
from arcdao.errors import TransactionFailedError
from arcdao.gas import compute_max_gas_limit

# Well-known test key; never holds funds
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
NODE_ACCOUNT = "0x" + "0c" * 20


def resolved(value):
    """An awaitable property value, like AsyncWeb3's `eth.chain_id`."""
    future = asyncio.get_running_loop().create_future()
    future.set_result(value)
    return future


# ============================================================
# Test Fixtures
# ============================================================

@pytest.fixture
def web3():
    web3 = MagicMock()
    web3.eth.get_transaction_count = AsyncMock(return_value=7)
    web3.eth.send_raw_transaction = AsyncMock(return_value=b"\xab" * 32)
    web3.eth.get_block = AsyncMock(return_value={"gasLimit": 8_000_000})
    return web3


@pytest.fixture
def contract_function():
    function = MagicMock()
    function.build_transaction = AsyncMock(return_value={"data": "0x"})
    function.transact = AsyncMock(return_value=b"\xcd" * 32)
    return function


# ============================================================
# Send Tests
# ============================================================

class TestSendTransaction:
    """Test both signing paths."""

    @pytest.mark.asyncio
    async def test_signs_locally_with_private_key(self, web3, contract_function):
        web3.eth.chain_id = resolved(1337)
        chain = ChainClient(ArcConfig(private_key=PRIVATE_KEY), web3=web3)
        address = chain.account.address
        chain.account = MagicMock()
        chain.account.sign_transaction.return_value.raw_transaction = b"\x01\x02"

        tx_hash = await chain.send_transaction(contract_function, gas=500_000)

        assert tx_hash == "0x" + "ab" * 32
        params = contract_function.build_transaction.await_args.args[0]
        assert params["from"] == address
        assert params["gas"] == 500_000
        assert params["nonce"] == 7
        assert params["chainId"] == 1337
        web3.eth.get_transaction_count.assert_awaited_once_with(address, "pending")
        web3.eth.send_raw_transaction.assert_awaited_once_with(b"\x01\x02")
        contract_function.transact.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_node_account_without_key(self, web3, contract_function):
        web3.eth.accounts = resolved([NODE_ACCOUNT])
        chain = ChainClient(ArcConfig(gas_price_gwei=2), web3=web3)

        tx_hash = await chain.send_transaction(contract_function)

        assert tx_hash == "0x" + "cd" * 32
        params = contract_function.transact.await_args.args[0]
        assert params == {"from": NODE_ACCOUNT, "gasPrice": 2_000_000_000}

    @pytest.mark.asyncio
    async def test_no_accounts(self, web3, contract_function):
        web3.eth.accounts = resolved([])
        chain = ChainClient(ArcConfig(), web3=web3)

        with pytest.raises(ConnectionError):
            await chain.send_transaction(contract_function)

    @pytest.mark.asyncio
    async def test_concurrent_sends_are_serialized(self, web3, contract_function):
        web3.eth.chain_id = resolved(1337)
        chain = ChainClient(ArcConfig(private_key=PRIVATE_KEY), web3=web3)
        chain.account = MagicMock()
        chain.account.sign_transaction.return_value.raw_transaction = b"\x01"
        in_flight = []

        async def send_raw(raw):
            in_flight.append(1)
            assert len(in_flight) == 1
            await asyncio.sleep(0)
            in_flight.pop()
            return b"\xab" * 32

        web3.eth.send_raw_transaction = AsyncMock(side_effect=send_raw)

        await asyncio.gather(*(chain.send_transaction(contract_function) for _ in range(3)))

        assert web3.eth.send_raw_transaction.await_count == 3


# ============================================================
# Receipt Tests
# ============================================================

class TestReceipts:

    @pytest.mark.asyncio
    async def test_failed_status_raises(self, web3):
        web3.eth.wait_for_transaction_receipt = AsyncMock(return_value={"status": 0})
        chain = ChainClient(ArcConfig(), web3=web3)

        with pytest.raises(TransactionFailedError) as exc_info:
            await chain.wait_for_receipt("0xdead")

        assert exc_info.value.tx_hash == "0xdead"

    @pytest.mark.asyncio
    async def test_deploy_returns_contract_address(self, web3, contract_function):
        web3.eth.accounts = resolved([NODE_ACCOUNT])
        web3.eth.wait_for_transaction_receipt = AsyncMock(
            return_value={"status": 1, "contractAddress": "0x" + "0d" * 20}
        )
        contract_class = MagicMock()
        contract_class.constructor.return_value = contract_function
        chain = ChainClient(ArcConfig(tx_timeout_seconds=5), web3=web3)

        address = await chain.deploy(contract_class, "0xtoken", gas=1_000_000)

        assert address == "0x" + "0d" * 20
        contract_class.constructor.assert_called_once_with("0xtoken")
        web3.eth.wait_for_transaction_receipt.assert_awaited_once_with("0x" + "cd" * 32, timeout=5)

    @pytest.mark.asyncio
    async def test_max_gas_limit(self, web3):
        chain = ChainClient(ArcConfig(), web3=web3)
        assert await compute_max_gas_limit(chain) == 7_900_000
