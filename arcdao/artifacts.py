"""
Contract Artifacts
==================
Loads Truffle-style JSON artifacts and turns them into web3 contract
instances: at an address, at the address deployed on the current chain,
or freshly deployed.

Artifact format:
    {"contractName": "...", "abi": [...], "bytecode": "0x...",
     "networks": {"<chainId>": {"address": "0x..."}}}
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from web3 import Web3

from .errors import ContractNotFoundError

logger = logging.getLogger(__name__)


class ContractArtifact:
    """A compiled contract: ABI, bytecode and known deployments."""

    def __init__(
        self,
        chain,
        name: str,
        abi: List[Dict[str, Any]],
        bytecode: Optional[str] = None,
        networks: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self.chain = chain
        self.name = name
        self.abi = abi
        self.bytecode = bytecode
        self.networks = networks or {}

    def at(self, address: str):
        """Contract instance at the given address."""
        checksum_address = Web3.to_checksum_address(address)
        return self.chain.web3.eth.contract(address=checksum_address, abi=self.abi)

    async def deployed_address(self) -> str:
        chain_id = await self.chain.get_chain_id()
        deployment = self.networks.get(str(chain_id))
        if not deployment or not deployment.get("address"):
            raise ContractNotFoundError(f"{self.name} has not been deployed to chain {chain_id}")
        return deployment["address"]

    async def deployed(self):
        """Contract instance deployed on the current chain."""
        return self.at(await self.deployed_address())

    async def new(self, *args, gas: Optional[int] = None):
        """Deploy a new instance and return it once mined."""
        if not self.bytecode or self.bytecode == "0x":
            raise ContractNotFoundError(f"{self.name} artifact has no bytecode")

        contract_class = self.chain.web3.eth.contract(abi=self.abi, bytecode=self.bytecode)
        address = await self.chain.deploy(contract_class, *args, gas=gas)
        logger.info(f"Deployed {self.name} at {address}")
        return self.at(address)


class ArtifactResolver:
    """
    Resolves contract names to artifacts in a directory.

    Usage:
        artifacts = ArtifactResolver(chain, "contracts")
        avatar = artifacts.require_contract("Avatar").at(avatar_address)
    """

    def __init__(self, chain, artifacts_dir: str = "contracts"):
        self.chain = chain
        self.artifacts_dir = Path(artifacts_dir)
        self._cache: Dict[str, ContractArtifact] = {}

    def require_contract(self, name: str) -> ContractArtifact:
        """Load the artifact for `name`, raising if there is none."""
        if name in self._cache:
            return self._cache[name]

        artifact_path = self.artifacts_dir / f"{name}.json"
        if not artifact_path.exists():
            raise ContractNotFoundError(f"No artifact for contract {name} in {self.artifacts_dir}")

        data = json.loads(artifact_path.read_text())
        artifact = ContractArtifact(
            self.chain,
            name=data.get("contractName", name),
            abi=data["abi"],
            bytecode=data.get("bytecode"),
            networks=data.get("networks", {}),
        )
        self._cache[name] = artifact
        return artifact
