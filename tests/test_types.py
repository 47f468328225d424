"""
Unit Tests for Types and Configuration
======================================
Run: python -m pytest tests/test_types.py -v
"""

import pytest
from decimal import Decimal
from unittest.mock import patch

from arcdao.config import ArcConfig
from arcdao.errors import MissingArgumentError
from arcdao.gas import compute_forge_org_gas_limit
from arcdao.types import FounderConfig, SchemeConfig, SchemePermissions, to_int_amount


# ============================================================
# Amount Tests
# ============================================================

class TestAmounts:
    """Amounts accept ints, decimal strings, hex strings and Decimals."""

    @pytest.mark.parametrize("value,expected", [
        (5, 5),
        ("1000000000000000000000", 10 ** 21),
        (" 42 ", 42),
        ("0x10", 16),
        (Decimal("7"), 7),
        ("1e3", 1000),
    ])
    def test_valid(self, value, expected):
        assert to_int_amount(value) == expected

    def test_fraction_rejected(self):
        with pytest.raises(ValueError, match="whole number"):
            to_int_amount("1.5")

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            to_int_amount(True)

    def test_float_rejected(self):
        with pytest.raises(TypeError):
            to_int_amount(1.0)


# ============================================================
# Permission Tests
# ============================================================

class TestSchemePermissions:
    """Permissions render as bytes4 hex."""

    def test_to_bytes4_hex(self):
        assert SchemePermissions.to_bytes4_hex(SchemePermissions.ALL) == "0x0000001f"
        assert SchemePermissions.to_bytes4_hex(SchemePermissions.NONE) == "0x00000000"

    def test_from_string(self):
        perms = SchemePermissions.from_string("0x00000003")
        assert perms == SchemePermissions.IS_REGISTERED | SchemePermissions.CAN_REGISTER_SCHEMES


# ============================================================
# Config Object Tests
# ============================================================

class TestSchemeConfig:

    def test_from_dict_splits_scheme_params(self):
        config = SchemeConfig.from_dict({
            "name": "ContributionReward",
            "permissions": 16,
            "votingMachineParams": {"votePerc": 60},
            "orgNativeTokenFee": 10,
        })

        assert config.name == "ContributionReward"
        assert config.address is None
        assert config.permissions == 16
        assert config.voting_machine_params == {"votePerc": 60}
        assert config.params == {"orgNativeTokenFee": 10}

    def test_founder_defaults(self):
        founder = FounderConfig.from_dict({"address": "0x" + "07" * 20})
        assert founder.tokens == 0
        assert founder.reputation == 0


class TestArcConfig:
    """Configuration from the environment."""

    def test_from_env(self):
        env = {
            "ARCJS_PROVIDER_URL": "http://node:8545",
            "ARCJS_DEFAULT_VOTING_MACHINE": "GenesisProtocol",
            "ARCJS_GAS_PRICE_GWEI": "2.5",
            "ARCJS_TX_TIMEOUT_SECONDS": "30",
        }
        with patch("arcdao.config.load_dotenv"), patch.dict("os.environ", env, clear=True):
            config = ArcConfig.from_env()

        assert config.provider_url == "http://node:8545"
        assert config.default_voting_machine == "GenesisProtocol"
        assert config.gas_price_gwei == 2.5
        assert config.tx_timeout_seconds == 30
        assert config.private_key is None

    def test_empty_default_voting_machine_disables_it(self):
        env = {"ARCJS_DEFAULT_VOTING_MACHINE": ""}
        with patch("arcdao.config.load_dotenv"), patch.dict("os.environ", env, clear=True):
            config = ArcConfig.from_env()

        assert config.default_voting_machine is None

    def test_get_by_arc_name(self):
        config = ArcConfig(default_voting_machine="AbsoluteVote")
        assert config.get("defaultVotingMachine") == "AbsoluteVote"
        assert config.get("provider_url") == "http://127.0.0.1:8545"

    def test_get_unknown_key(self):
        with pytest.raises(KeyError):
            ArcConfig().get("noSuchSetting")


# ============================================================
# Misc
# ============================================================

def test_forge_org_gas_limit():
    assert compute_forge_org_gas_limit(0) == 4_200_000
    assert compute_forge_org_gas_limit(3) == 4_350_000


def test_missing_argument_default_message():
    error = MissingArgumentError("proposalId")
    assert str(error) == "proposalId is not defined"
    assert isinstance(error, ValueError)
