"""
Chain Client
============
The single process-wide handle on the chain. Constructed once at startup
and passed to every component that sends or reads transactions.

Signing is delegated to eth-account, RPC to web3.py.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from eth_account import Account
from web3 import AsyncWeb3, Web3
from web3.providers import AsyncHTTPProvider

from .config import ArcConfig
from .errors import TransactionFailedError

logger = logging.getLogger(__name__)


class ChainClient:
    """
    Async web3 connection plus the account that signs transactions.

    Usage:
        chain = ChainClient(ArcConfig.from_env())
        tx_hash = await chain.send_transaction(contract.functions.vote(pid, 1))
        receipt = await chain.wait_for_receipt(tx_hash)
    """

    def __init__(self, config: ArcConfig, web3: Optional[AsyncWeb3] = None):
        self.config = config
        self.web3 = web3 or AsyncWeb3(AsyncHTTPProvider(config.provider_url))

        self.account = Account.from_key(config.private_key) if config.private_key else None
        self._default_account: Optional[str] = self.account.address if self.account else None
        self._chain_id: Optional[int] = None

        # One signing account means one nonce sequence; submissions never overlap
        self._nonce_lock = asyncio.Lock()

    async def get_default_account(self) -> str:
        """Address of the account that signs transactions."""
        if not self._default_account:
            accounts = await self.web3.eth.accounts
            if not accounts:
                raise ConnectionError(f"No unlocked accounts at {self.config.provider_url}")
            self._default_account = accounts[0]
        return self._default_account

    async def get_chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = await self.web3.eth.chain_id
        return self._chain_id

    async def get_block_gas_limit(self) -> int:
        block = await self.web3.eth.get_block("latest")
        return block["gasLimit"]

    async def _tx_params(self, gas: Optional[int], value: int) -> Dict[str, Any]:
        params: Dict[str, Any] = {"from": await self.get_default_account()}
        if gas:
            params["gas"] = gas
        if value:
            params["value"] = value
        if self.config.gas_price_gwei:
            params["gasPrice"] = Web3.to_wei(self.config.gas_price_gwei, "gwei")
        return params

    async def send_transaction(self, contract_function, gas: Optional[int] = None, value: int = 0) -> str:
        """
        Submit a contract function call as a transaction.

        Args:
            contract_function: A bound web3 contract function, e.g.
                contract.functions.propose(...)
            gas: Optional gas ceiling. Estimated by the node when omitted.
            value: Wei to send along

        Returns:
            The transaction hash (hex)
        """
        params = await self._tx_params(gas, value)

        async with self._nonce_lock:
            if self.account:
                params["nonce"] = await self.web3.eth.get_transaction_count(params["from"], "pending")
                params["chainId"] = await self.get_chain_id()
                tx = await contract_function.build_transaction(params)
                signed = self.account.sign_transaction(tx)
                tx_hash = await self.web3.eth.send_raw_transaction(signed.raw_transaction)
            else:
                tx_hash = await contract_function.transact(params)

        tx_hash = Web3.to_hex(tx_hash)
        logger.debug(f"Sent transaction {tx_hash}")
        return tx_hash

    async def deploy(self, contract_class, *args, gas: Optional[int] = None) -> str:
        """Deploy a contract and return its address once mined."""
        tx_hash = await self.send_transaction(contract_class.constructor(*args), gas=gas)
        receipt = await self.wait_for_receipt(tx_hash)
        return receipt["contractAddress"]

    async def wait_for_receipt(self, tx_hash: str) -> Dict[str, Any]:
        """Wait until the transaction is mined; raise if it reverted."""
        receipt = await self.web3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self.config.tx_timeout_seconds
        )
        if receipt["status"] != 1:
            raise TransactionFailedError(tx_hash)
        return receipt
