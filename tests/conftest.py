"""
Shared Test Fixtures
====================
A fake chain and contract doubles; nothing here talks to a node.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from arcdao.config import ArcConfig
from arcdao.transactions import TransactionService
from arcdao.wrapper_base import WrapperContext

TX_HASH = "0x" + "ab" * 32
AVATAR = "0x" + "a1" * 20
REPUTATION = "0x" + "b2" * 20
EXECUTABLE = "0x" + "c3" * 20
PROPOSAL_ID = "0x" + "d4" * 32


def make_contract(address, **call_results):
    """
    A contract double whose read-only functions return `call_results`.

    `contract.functions.<name>(...)` records its arguments; `.call()` on the
    result returns the configured value.
    """
    contract = MagicMock()
    contract.address = address
    for name, value in call_results.items():
        getattr(contract.functions, name).return_value.call = AsyncMock(return_value=value)
    return contract


@pytest.fixture
def chain():
    """Chain client that accepts every transaction and mines it at once."""
    chain = MagicMock()
    chain.send_transaction = AsyncMock(return_value=TX_HASH)
    chain.wait_for_receipt = AsyncMock(return_value={"status": 1, "logs": []})
    chain.get_chain_id = AsyncMock(return_value=1337)
    chain.web3.eth.get_code = AsyncMock(return_value=b"\x60\x80")
    return chain


@pytest.fixture
def context(chain):
    return WrapperContext(
        chain=chain,
        artifacts=MagicMock(),
        config=ArcConfig(),
        transactions=TransactionService(),
        registry=MagicMock(),
    )


@pytest.fixture
def published(context):
    """Topics published on the context's transaction service, in order."""
    topics = []
    context.transactions.subscribe("TxTracking", lambda topic, payload: topics.append((topic, payload)))
    return topics
