"""
Unit Tests for Contract Resolution
==================================
Tests artifact loading, wrapper factories, the wrapper registry and the
avatar service.

Run: python -m pytest tests/test_registry.py -v
"""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from web3 import Web3

from arcdao.artifacts import ArtifactResolver
from arcdao.avatar import AvatarService
from arcdao.config import ArcConfig
from arcdao.errors import ContractNotFoundError, MissingArgumentError
from arcdao.registry import BUNDLED_WRAPPERS, WrapperRegistry, create_context
from arcdao.wrapper_base import ContractWrapperFactory
from arcdao.wrappers.absolute_vote import AbsoluteVoteWrapper

from conftest import AVATAR, REPUTATION, make_contract

ABSOLUTE_VOTE = "0x" + "02" * 20

ABI = [
    {"type": "function", "name": "setParameters", "inputs": [], "outputs": []},
    {"type": "event", "name": "NewProposal", "inputs": []},
]


# ============================================================
# Test Fixtures
# ============================================================

@pytest.fixture
def artifacts_dir(tmp_path):
    artifact = {
        "contractName": "AbsoluteVote",
        "abi": ABI,
        "bytecode": "0x6080",
        "networks": {"1337": {"address": ABSOLUTE_VOTE}},
    }
    (tmp_path / "AbsoluteVote.json").write_text(json.dumps(artifact))
    return tmp_path


@pytest.fixture
def resolver(chain, artifacts_dir):
    return ArtifactResolver(chain, str(artifacts_dir))


# ============================================================
# Artifact Tests
# ============================================================

class TestArtifacts:
    """Test artifact loading and deployment lookup."""

    def test_missing_artifact(self, resolver):
        with pytest.raises(ContractNotFoundError, match="No artifact for contract Avatar"):
            resolver.require_contract("Avatar")

    def test_loaded_once(self, resolver):
        artifact = resolver.require_contract("AbsoluteVote")

        assert resolver.require_contract("AbsoluteVote") is artifact
        assert artifact.name == "AbsoluteVote"

    @pytest.mark.asyncio
    async def test_deployed_address_for_chain(self, resolver):
        assert await resolver.require_contract("AbsoluteVote").deployed_address() == ABSOLUTE_VOTE

    @pytest.mark.asyncio
    async def test_not_deployed_on_chain(self, resolver, chain):
        chain.get_chain_id = AsyncMock(return_value=1)

        with pytest.raises(ContractNotFoundError, match="has not been deployed to chain 1"):
            await resolver.require_contract("AbsoluteVote").deployed_address()

    def test_at_uses_checksum_address(self, resolver, chain):
        resolver.require_contract("AbsoluteVote").at("0x" + "ab" * 20)

        chain.web3.eth.contract.assert_called_once_with(
            address=Web3.to_checksum_address("0x" + "ab" * 20), abi=ABI
        )


# ============================================================
# Factory Tests
# ============================================================

class TestContractWrapperFactory:
    """Test locating wrapped contracts."""

    @pytest.mark.asyncio
    async def test_deployed(self, context):
        context.artifacts.require_contract.return_value.deployed = AsyncMock(
            return_value=make_contract(ABSOLUTE_VOTE)
        )
        factory = ContractWrapperFactory(AbsoluteVoteWrapper, context)

        wrapper = await factory.deployed()

        assert isinstance(wrapper, AbsoluteVoteWrapper)
        assert wrapper.address == ABSOLUTE_VOTE
        context.artifacts.require_contract.assert_called_with("AbsoluteVote")

    @pytest.mark.asyncio
    async def test_at_without_code(self, context, chain):
        chain.web3.eth.get_code = AsyncMock(return_value=b"")
        factory = ContractWrapperFactory(AbsoluteVoteWrapper, context)

        with pytest.raises(ContractNotFoundError, match="could not be found"):
            await factory.at(ABSOLUTE_VOTE)


# ============================================================
# Registry Tests
# ============================================================

class TestWrapperRegistry:
    """Test wrapper registration and lookup."""

    def test_create_context_registers_bundled_wrappers(self):
        context = create_context(ArcConfig(), web3=MagicMock())

        assert context.registry.context is context
        assert set(context.registry.factories) == {w.name for w, _ in BUNDLED_WRAPPERS}
        assert "DaoCreator" in context.registry.factories

    @pytest.mark.asyncio
    async def test_initialize_skips_undeployed(self, context):
        registry = WrapperRegistry(context)
        absolute_vote = AbsoluteVoteWrapper(context, make_contract(ABSOLUTE_VOTE))
        registry.factories = {
            "AbsoluteVote": MagicMock(deployed=AsyncMock(return_value=absolute_vote)),
            "GenesisProtocol": MagicMock(deployed=AsyncMock(side_effect=ContractNotFoundError("none"))),
        }

        await registry.initialize()

        assert registry.wrappers == {"AbsoluteVote": absolute_vote}

    @pytest.mark.asyncio
    async def test_initialize_without_artifacts(self, context):
        context.artifacts.require_contract.side_effect = ContractNotFoundError("none")
        registry = WrapperRegistry(context)
        for wrapper_class, factory_class in BUNDLED_WRAPPERS:
            registry.register(wrapper_class, factory_class)

        await registry.initialize()

        assert registry.wrappers == {}

    @pytest.mark.asyncio
    async def test_get_contract_wrapper(self, context, chain):
        registry = WrapperRegistry(context)
        registry.register(AbsoluteVoteWrapper)
        registry.wrappers["AbsoluteVote"] = deployed = MagicMock()

        assert await registry.get_contract_wrapper("Unknown") is None
        assert await registry.get_contract_wrapper("AbsoluteVote") is deployed

        chain.web3.eth.get_code = AsyncMock(return_value=b"")
        assert await registry.get_contract_wrapper("AbsoluteVote", ABSOLUTE_VOTE) is None


# ============================================================
# Avatar Tests
# ============================================================

class TestAvatarService:

    def test_requires_avatar(self, context):
        with pytest.raises(MissingArgumentError, match="avatar address is not defined"):
            AvatarService(context, "")

    @pytest.mark.asyncio
    async def test_native_reputation_cached(self, context):
        avatar = make_contract(AVATAR, nativeReputation=REPUTATION)
        context.artifacts.require_contract.return_value.at.return_value = avatar
        service = AvatarService(context, AVATAR)

        assert await service.get_native_reputation_address() == REPUTATION
        assert await service.get_native_reputation_address() == REPUTATION

        avatar.functions.nativeReputation.return_value.call.assert_awaited_once()
        context.artifacts.require_contract.assert_called_once_with("Avatar")

    @pytest.mark.asyncio
    async def test_token_and_controller(self, context):
        token = "0x" + "0e" * 20
        controller = "0x" + "0f" * 20
        context.artifacts.require_contract.return_value.at.return_value = make_contract(
            AVATAR, nativeToken=token, owner=controller
        )
        service = AvatarService(context, AVATAR)

        assert await service.get_native_token_address() == token
        assert await service.get_controller_address() == controller
