"""
Scheme Wrappers
===============
Governance modules registered with a DAO.

A universal scheme is deployed once and shared by many DAOs; each DAO
selects its configuration by parameters hash, which includes the hash of
the voting machine parameters its proposals are decided with. Whether a
scheme is universal is declared by its wrapper class (`universal`).
"""

from typing import Any, Dict

from ..types import SchemePermissions
from ..wrapper_base import ContractWrapperBase
from .parameters import ParameterizedWrapperMixin


class SchemeWrapper(ContractWrapperBase):
    """A non-universal scheme, or any scheme contract without its own wrapper."""

    name = "Scheme"
    friendly_name = "Scheme"
    universal = False


class UniversalSchemeWrapper(ParameterizedWrapperMixin, ContractWrapperBase):
    """
    Parameters always include `voteParametersHash` and
    `votingMachineAddress`, supplied by DaoCreator.setSchemes.
    """

    name = "UniversalScheme"
    friendly_name = "Universal Scheme"
    universal = True

    parameter_names = ["voteParametersHash", "votingMachineAddress"]

    def hydrated(self):
        self.NewProposal = self.create_event_fetcher_factory("NewProposal")


class SchemeRegistrarWrapper(UniversalSchemeWrapper):
    """Proposes adding and removing schemes of a DAO."""

    name = "SchemeRegistrar"
    friendly_name = "Scheme Registrar"
    default_permissions = SchemePermissions.IS_REGISTERED | SchemePermissions.CAN_REGISTER_SCHEMES

    parameter_names = ["voteParametersHash", "voteRemoveParametersHash", "votingMachineAddress"]

    def merge_parameters(self, params: Dict[str, Any]) -> Dict[str, Any]:
        params = dict(params)
        # Removal is voted like registration unless configured otherwise
        if not params.get("voteRemoveParametersHash"):
            params["voteRemoveParametersHash"] = params.get("voteParametersHash")
        return super().merge_parameters(params)


class ContributionRewardWrapper(UniversalSchemeWrapper):
    """Proposes and redeems rewards for contributions to a DAO."""

    name = "ContributionReward"
    friendly_name = "Contribution Reward"
    default_permissions = SchemePermissions.IS_REGISTERED

    parameter_names = ["orgNativeTokenFee", "voteParametersHash", "votingMachineAddress"]

    def get_default_parameters(self) -> Dict[str, Any]:
        return {"orgNativeTokenFee": 0}


class GlobalConstraintRegistrarWrapper(UniversalSchemeWrapper):
    name = "GlobalConstraintRegistrar"
    friendly_name = "Global Constraint Registrar"
    default_permissions = (
        SchemePermissions.IS_REGISTERED | SchemePermissions.CAN_ADD_REMOVE_GLOBAL_CONSTRAINTS
    )


class UpgradeSchemeWrapper(UniversalSchemeWrapper):
    name = "UpgradeScheme"
    friendly_name = "Upgrade Scheme"
    default_permissions = (
        SchemePermissions.IS_REGISTERED
        | SchemePermissions.CAN_REGISTER_SCHEMES
        | SchemePermissions.CAN_UPGRADE_CONTROLLER
    )


class VoteInOrganizationSchemeWrapper(UniversalSchemeWrapper):
    name = "VoteInOrganizationScheme"
    friendly_name = "Vote In Organization Scheme"
    default_permissions = SchemePermissions.IS_REGISTERED | SchemePermissions.CAN_CALL_DELEGATE_CALL
