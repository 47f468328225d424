"""Gas ceilings for transactions whose cost the node estimates poorly."""

# forgeOrg mints founder tokens and reputation in a loop
FORGE_ORG_BASE_GAS = 4_200_000
FORGE_ORG_GAS_PER_FOUNDER = 50_000

# Headroom left under the block gas limit
MAX_GAS_MARGIN = 100_000


def compute_forge_org_gas_limit(num_founders: int) -> int:
    """Gas ceiling for DaoCreator.forgeOrg with the given number of founders."""
    return FORGE_ORG_BASE_GAS + FORGE_ORG_GAS_PER_FOUNDER * num_founders


async def compute_max_gas_limit(chain) -> int:
    """The largest gas limit a single transaction can use on the current chain."""
    return await chain.get_block_gas_limit() - MAX_GAS_MARGIN
