"""
Avatar Service
==============
Read-only queries on a DAO's avatar, the contract whose address
identifies the organization on chain.
"""

from typing import Optional

from .errors import MissingArgumentError


class AvatarService:
    """
    Usage:
        service = AvatarService(context, avatar_address)
        reputation = await service.get_native_reputation_address()
    """

    def __init__(self, context, avatar_address: str):
        if not avatar_address:
            raise MissingArgumentError("avatar", "avatar address is not defined")
        self.context = context
        self.avatar_address = avatar_address
        self._avatar = None
        self._native_reputation: Optional[str] = None

    @property
    def avatar(self):
        if self._avatar is None:
            self._avatar = self.context.artifacts.require_contract("Avatar").at(self.avatar_address)
        return self._avatar

    async def get_native_reputation_address(self) -> str:
        """Address of the DAO's reputation contract."""
        if self._native_reputation is None:
            self._native_reputation = await self.avatar.functions.nativeReputation().call()
        return self._native_reputation

    async def get_native_token_address(self) -> str:
        """Address of the DAO's token contract."""
        return await self.avatar.functions.nativeToken().call()

    async def get_controller_address(self) -> str:
        """The avatar's owner: its controller, or the universal controller."""
        return await self.avatar.functions.owner().call()
