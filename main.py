#!/usr/bin/env python3
"""
Arc DAO Client - Main Entry Point
=================================

Creates and configures Arc DAOs and inspects their voting machines:
1. Forging a DAO with its founders, token and reputation
2. Registering its schemes and voting machine parameters
3. Deploying a GenesisProtocol voting machine with default parameters

Setup:
    pip install -e .
    cp .env.example .env
    # Edit .env with your provider and key
    python main.py status

Commands:
    python main.py status                     # Show chain and wrapped contracts
    python main.py forge <org.json>           # Create a DAO and set its schemes
    python main.py gp-scheme <stake_token>    # Deploy a configured GenesisProtocol
    python main.py proposals <voting_machine> # List votable proposals
    python main.py proposals <voting_machine> --watch  # Follow new ones

Environment Variables:
    ARCJS_PROVIDER_URL            - JSON-RPC endpoint of the node
    ARCJS_PRIVATE_KEY             - Signing key (hex); node accounts otherwise
    ARCJS_ARTIFACTS_DIR           - Directory of contract JSON artifacts
    ARCJS_DEFAULT_VOTING_MACHINE  - Voting machine for universal schemes
"""

import asyncio
import json
import logging
import sys

from web3 import Web3

from arcdao import ArcConfig, create_context
from arcdao.scripts.create_gp_scheme import create_gp_scheme


def on_tx_event(topic: str, payload: dict):
    print(f"[tx] {topic} ({payload['tx_sent_count']}/{payload['tx_count']} sent)")


async def forge(context, org_path: str):
    with open(org_path) as f:
        org = json.load(f)

    dao_creator = context.registry.wrappers.get("DaoCreator")
    if not dao_creator:
        print("[forge] DaoCreator is not deployed on this network")
        return

    result = await dao_creator.forge_org(
        name=org.get("name"),
        token_name=org.get("tokenName"),
        token_symbol=org.get("tokenSymbol"),
        founders=org.get("founders", []),
        token_cap=org.get("tokenCap", 0),
        universal_controller=org.get("universalController", True),
    )
    avatar = await result.get_value_from_tx("_avatar", "NewOrg")
    print(f"[forge] Avatar: {avatar}")

    result = await dao_creator.set_schemes(
        avatar,
        org.get("schemes", []),
        org.get("votingMachineParams"),
    )
    await result.watch_for_tx_mined()
    print(f"[forge] Schemes set: {', '.join(s['name'] for s in org.get('schemes', [])) or 'none'}")


async def main():
    """Main entry point."""
    if len(sys.argv) < 2:
        print(__doc__)
        return

    config = ArcConfig.from_env()
    logging.basicConfig(level=config.log_level.upper())

    context = create_context(config)
    context.transactions.subscribe("TxTracking", on_tx_event)
    await context.registry.initialize()

    command = sys.argv[1]

    if command == "status":
        print("\n=== Arc Client Status ===\n")
        print(f"Provider:  {config.provider_url}")
        print(f"Chain ID:  {await context.chain.get_chain_id()}")
        print(f"Account:   {await context.chain.get_default_account()}")
        print(f"Gas limit: {await context.chain.get_block_gas_limit():,}")
        print(f"Default voting machine: {config.default_voting_machine or 'None'}")
        print(f"\nDeployed Contracts:")
        for name, wrapper in context.registry.wrappers.items():
            print(f"  {name:<26} {wrapper.address}")
        if not context.registry.wrappers:
            print("  None")

    elif command == "forge":
        if len(sys.argv) < 3:
            print("Usage: python main.py forge <org.json>")
            print("\nExample org.json:")
            print('  {"name": "My DAO", "tokenName": "My Token", "tokenSymbol": "MDT",')
            print('   "founders": [{"address": "0x...", "tokens": "1000", "reputation": "1000"}],')
            print('   "schemes": [{"name": "SchemeRegistrar"}]}')
            return

        await forge(context, sys.argv[2])

    elif command == "gp-scheme":
        if len(sys.argv) < 3:
            print("Usage: python main.py gp-scheme <staking_token_address>")
            return

        await create_gp_scheme(context, sys.argv[2])

    elif command == "proposals":
        if len(sys.argv) < 3:
            print("Usage: python main.py proposals <voting_machine_address>")
            return

        voting_machine = await context.registry.get_contract_wrapper("IntVoteInterface", sys.argv[2])
        if not voting_machine:
            print(f"[proposals] No contract found at {sys.argv[2]}")
            return

        watch = "--watch" in sys.argv[3:]
        count = 0
        async for event in voting_machine.votable_proposals(watch=watch):
            count += 1
            print(f"[proposals] {Web3.to_hex(event.args['_proposalId'])} (block {event.block_number})")
        print(f"[proposals] {count} votable")

    else:
        print(f"Unknown command: {command}")
        print("Use 'python main.py' for help")


if __name__ == "__main__":
    asyncio.run(main())
