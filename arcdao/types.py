"""
Arc Types
=========
Data structures shared by the contract wrappers.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum, IntFlag
from typing import Any, Dict, List, Optional, Union

Address = str
Hash = str

NULL_ADDRESS: Address = "0x" + "0" * 40
NULL_HASH: Hash = "0x" + "0" * 64

# Token and reputation amounts, in wei
Amount = Union[int, str, Decimal]


def to_int_amount(value: Amount) -> int:
    """Normalize an amount given as int, decimal string or Decimal."""
    if isinstance(value, bool):
        raise TypeError("amount must be a number, not a bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if value.lower().startswith("0x"):
            return int(value, 16)
        value = Decimal(value)
    if isinstance(value, Decimal):
        if value != value.to_integral_value():
            raise ValueError(f"amount must be a whole number of wei: {value}")
        return int(value)
    raise TypeError(f"unsupported amount type: {type(value).__name__}")


class SchemePermissions(IntFlag):
    """Permissions a scheme holds in a DAO's controller (bytes4 on chain)."""
    NONE = 0
    IS_REGISTERED = 1
    CAN_REGISTER_SCHEMES = 2
    CAN_ADD_REMOVE_GLOBAL_CONSTRAINTS = 4
    CAN_UPGRADE_CONTROLLER = 8
    CAN_CALL_DELEGATE_CALL = 16
    ALL = 31

    @staticmethod
    def to_bytes4_hex(permissions: int) -> str:
        """Render as the 4-byte hex string the controller expects."""
        return "0x%08x" % int(permissions)

    @classmethod
    def from_string(cls, value: str) -> "SchemePermissions":
        return cls(int(value, 16))


class BinaryVoteResult(IntEnum):
    """Indices into a vote-status list for yes/no proposals."""
    ABSTAIN = 0
    YES = 1
    NO = 2


@dataclass
class VoteRange:
    """Allowed range of choices for a voting machine."""
    min_vote: int
    max_vote: int


@dataclass
class FounderConfig:
    """A founder of a new DAO."""
    address: Address
    tokens: Amount = 0         # In wei
    reputation: Amount = 0     # In wei

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FounderConfig":
        return cls(
            address=d["address"],
            tokens=d.get("tokens", 0),
            reputation=d.get("reputation", 0),
        )


@dataclass
class SchemeConfig:
    """
    A scheme to register with a new DAO.

    `params` carries scheme-specific parameters (e.g. orgNativeTokenFee).
    `voting_machine_params` overrides the DAO-wide voting machine
    configuration for this scheme only; it costs an extra transaction.
    """
    name: str
    address: Optional[Address] = None
    permissions: int = SchemePermissions.NONE
    voting_machine_params: Optional[Dict[str, Any]] = None
    params: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SchemeConfig":
        known = {"name", "address", "permissions", "votingMachineParams"}
        permissions = d.get("permissions", 0)
        if isinstance(permissions, str):
            permissions = SchemePermissions.from_string(permissions)
        return cls(
            name=d.get("name"),
            address=d.get("address"),
            permissions=permissions,
            voting_machine_params=d.get("votingMachineParams"),
            params={k: v for k, v in d.items() if k not in known},
        )


def founders_from_dicts(founders: List[Union[FounderConfig, Dict[str, Any]]]) -> List[FounderConfig]:
    return [f if isinstance(f, FounderConfig) else FounderConfig.from_dict(f) for f in founders]
