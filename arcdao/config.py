"""
Arc Client Configuration
========================
Handles environment variables and client settings.
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Optional
from dotenv import load_dotenv


# Keys accepted by ArcConfig.get(), in the camelCase used by Arc tooling
CONFIG_KEYS = {
    "providerUrl": "provider_url",
    "network": "network",
    "artifactsDir": "artifacts_dir",
    "defaultVotingMachine": "default_voting_machine",
    "gasPriceGwei": "gas_price_gwei",
    "txTimeoutSeconds": "tx_timeout_seconds",
    "logLevel": "log_level",
}


@dataclass
class ArcConfig:
    """Configuration for the Arc contract client."""

    # Chain connection
    provider_url: str = "http://127.0.0.1:8545"
    network: str = "ganache"

    # Signing account. Without a key the node's first unlocked account signs.
    private_key: Optional[str] = None

    # Truffle-style JSON artifacts (abi, bytecode, networks)
    artifacts_dir: str = "contracts"

    # Voting machine used for universal schemes that don't name their own
    default_voting_machine: Optional[str] = "AbsoluteVote"

    # Transactions
    gas_price_gwei: Optional[float] = None
    tx_timeout_seconds: int = 120

    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "ArcConfig":
        """Load configuration from environment variables."""
        load_dotenv()

        gas_price = os.getenv("ARCJS_GAS_PRICE_GWEI")

        return cls(
            provider_url=os.getenv("ARCJS_PROVIDER_URL", "http://127.0.0.1:8545"),
            network=os.getenv("ARCJS_NETWORK", "ganache"),
            private_key=os.getenv("ARCJS_PRIVATE_KEY"),
            artifacts_dir=os.getenv("ARCJS_ARTIFACTS_DIR", "contracts"),
            # An empty value means "no default voting machine"
            default_voting_machine=os.getenv("ARCJS_DEFAULT_VOTING_MACHINE", "AbsoluteVote") or None,
            gas_price_gwei=float(gas_price) if gas_price else None,
            tx_timeout_seconds=int(os.getenv("ARCJS_TX_TIMEOUT_SECONDS", "120")),
            log_level=os.getenv("ARCJS_LOG_LEVEL", "WARNING"),
        )

    def get(self, key: str) -> Any:
        """Look up a setting by its Arc name (e.g. "defaultVotingMachine")."""
        attr = CONFIG_KEYS.get(key, key)
        if attr not in {f.name for f in fields(self)}:
            raise KeyError(f"Unknown config key: {key}")
        return getattr(self, attr)
