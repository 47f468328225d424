"""
GenesisProtocol Setup
=====================
Deploys a GenesisProtocol voting machine staking the given token and
registers the default GenesisProtocol parameters on it.

Usage:
    python -m arcdao.scripts.create_gp_scheme <staking_token_address>
"""

import asyncio
import sys
from typing import Tuple

from ..config import ArcConfig
from ..gas import compute_max_gas_limit
from ..registry import create_context
from ..wrapper_base import WrapperContext
from ..wrappers.genesis_protocol import get_default_genesis_protocol_parameters


async def create_gp_scheme(context: WrapperContext, staking_token_address: str) -> Tuple[str, str]:
    """
    Deploy a GenesisProtocol and register its default parameters.

    Returns:
        (GenesisProtocol address, parameters hash)
    """
    factory = context.registry.factories["GenesisProtocol"]

    gas = await compute_max_gas_limit(context.chain)
    genesis_protocol = await factory.new(staking_token_address, gas=gas)
    print(f"[gp-scheme] GenesisProtocol address: {genesis_protocol.address}")

    params = get_default_genesis_protocol_parameters()
    params_hash = await genesis_protocol.get_parameters_hash(params)

    result = await genesis_protocol.set_parameters(params)
    await result.watch_for_tx_mined()
    print(f"[gp-scheme] GenesisProtocol params hash: {params_hash}")

    return genesis_protocol.address, params_hash


async def main():
    if len(sys.argv) < 2:
        print("Usage: python -m arcdao.scripts.create_gp_scheme <staking_token_address>")
        return

    config = ArcConfig.from_env()
    print(f"[gp-scheme] Provider: '{config.provider_url}'")

    context = create_context(config)
    print(f"[gp-scheme] Account: '{await context.chain.get_default_account()}'")

    await create_gp_scheme(context, sys.argv[1])


if __name__ == "__main__":
    asyncio.run(main())
