"""
DaoCreator Wrapper
==================
Creates a DAO and registers its initial schemes, in two calls that must
be made in order, by the same account, once each:

1. forge_org   - creates the avatar, token, reputation and controller
2. set_schemes - registers schemes, configuring universal schemes and
                 their voting machines on the way

The contract enforces caller identity and single use of setSchemes; a
second forge_org simply creates a second, unrelated DAO.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Union

from web3 import Web3

from ..avatar import AvatarService
from ..errors import ContractNotFoundError, MissingArgumentError, UnsupportedOperationError
from ..gas import compute_forge_org_gas_limit
from ..transactions import ArcTransactionResult, TxEventContext
from ..types import (
    NULL_ADDRESS,
    NULL_HASH,
    Amount,
    FounderConfig,
    SchemeConfig,
    SchemePermissions,
    founders_from_dicts,
    to_int_amount,
)
from ..wrapper_base import ContractWrapperBase, ContractWrapperFactory
from .schemes import SchemeWrapper
from .voting_machine import VotingMachineWrapper


class ParamsHashCache:
    """
    Parameters hashes registered during one set_schemes call, per contract
    address. Registering a hash once avoids a redundant transaction and a
    nonce collision.
    """

    def __init__(self):
        self._hashes: Dict[str, Set[str]] = {}

    def add(self, address: str, params_hash: str):
        self._hashes.setdefault(address.lower(), set()).add(params_hash.lower())

    def has(self, address: str, params_hash: str) -> bool:
        return params_hash.lower() in self._hashes.get(address.lower(), set())


@dataclass
class SchemeRegistration:
    """A scheme of one set_schemes call, resolved and hashed but not yet registered."""

    scheme: ContractWrapperBase
    params_hash: str
    permissions: str
    # Unset for non-universal schemes
    parameters: Optional[Dict[str, Any]] = None
    voting_machine: Optional[VotingMachineWrapper] = None
    # Only set when the scheme brings its own voting machine parameters
    voting_machine_params: Optional[Dict[str, Any]] = None
    vote_parameters_hash: Optional[str] = None


class DaoCreatorWrapper(ContractWrapperBase):
    """
    Event fetcher factories: NewOrg, InitialSchemesSet

    Usage:
        result = await dao_creator.forge_org(
            name="My DAO", token_name="My Token", token_symbol="MDT",
            founders=[{"address": me, "tokens": "1000", "reputation": "1000"}],
        )
        avatar = await result.get_value_from_tx("_avatar", "NewOrg")
        await dao_creator.set_schemes(avatar, [SchemeConfig("SchemeRegistrar")])
    """

    name = "DaoCreator"
    friendly_name = "Dao Creator"

    def hydrated(self):
        self.NewOrg = self.create_event_fetcher_factory("NewOrg")
        self.InitialSchemesSet = self.create_event_fetcher_factory("InitialSchemesSet")

    async def forge_org(
        self,
        name: str,
        token_name: str,
        token_symbol: str,
        founders: List[Union[FounderConfig, Dict[str, Any]]],
        token_cap: Amount = 0,
        universal_controller: bool = True,
    ) -> ArcTransactionResult:
        """
        Create a new DAO.

        Args:
            name: The DAO's name
            token_name: Name of the DAO's token
            token_symbol: Symbol of the DAO's token
            founders: Address, token and reputation amount (in wei) of each founder
            token_cap: Cap on the token supply; 0 means no cap
            universal_controller: Use the shared UController instead of a
                new per-DAO controller

        Returns:
            Transaction result; the avatar address is the `_avatar` of the
            NewOrg event.
        """
        if not name:
            raise MissingArgumentError("name", "DAO name is not defined")

        if not token_name:
            raise MissingArgumentError("tokenName", "DAO token name is not defined")

        if not token_symbol:
            raise MissingArgumentError("tokenSymbol", "DAO token symbol is not defined")

        if not founders:
            raise MissingArgumentError("founders", "DAO must have at least one founder")

        founders = founders_from_dicts(founders)
        for founder in founders:
            if not founder.address:
                raise MissingArgumentError("founder.address", "founder address is not defined")

        if universal_controller:
            controller_address = await self.context.artifacts.require_contract("UController").deployed_address()
        else:
            # The DaoCreator deploys a controller for this DAO alone
            controller_address = NULL_ADDRESS

        total_gas = compute_forge_org_gas_limit(len(founders))

        founder_addresses = [f.address for f in founders]
        founder_tokens = [to_int_amount(f.tokens) for f in founders]
        founder_reputation = [to_int_amount(f.reputation) for f in founders]
        token_cap = to_int_amount(token_cap)

        options = {
            "name": name,
            "tokenName": token_name,
            "tokenSymbol": token_symbol,
            "founderAddresses": founder_addresses,
            "founderTokens": founder_tokens,
            "founderReputation": founder_reputation,
            "controllerAddress": controller_address,
            "tokenCap": token_cap,
            "gas": total_gas,
        }
        self.log_contract_function_call("DaoCreator.forgeOrg", options)

        return await self.wrap_transaction_invocation(
            "DaoCreator.forgeOrg",
            options,
            "forgeOrg",
            [
                name,
                token_name,
                token_symbol,
                founder_addresses,
                founder_tokens,
                founder_reputation,
                controller_address,
                token_cap,
            ],
            gas=total_gas,
        )

    async def set_schemes(
        self,
        avatar: str,
        schemes: Optional[List[Union[SchemeConfig, Dict[str, Any]]]] = None,
        voting_machine_params: Optional[Dict[str, Any]] = None,
    ) -> ArcTransactionResult:
        """
        Register schemes with a newly created DAO.

        Only the account that ran forge_org can call this, and only once.
        Every scheme and voting machine is resolved and every parameters
        hash computed before the first transaction is sent, so a bad
        scheme list fails without touching the chain.

        Args:
            avatar: The DAO's avatar address
            schemes: Schemes to register
            voting_machine_params: DAO-wide voting machine configuration
                (votingMachineName, votingMachineAddress, reputation and
                machine-specific parameters). Reputation defaults to the
                DAO's native reputation, the machine to the configured
                default voting machine.
        """
        schemes = [s if isinstance(s, SchemeConfig) else SchemeConfig.from_dict(s) for s in (schemes or [])]

        if not avatar:
            raise MissingArgumentError("avatar", "avatar address is not defined")

        reputation_address = await AvatarService(self.context, avatar).get_native_reputation_address()
        default_voting_machine_params = {
            # Voting machines can't default the reputation; they don't know the DAO
            "reputation": reputation_address,
            "votingMachineName": self.context.config.get("defaultVotingMachine"),
        }
        default_voting_machine_params.update(voting_machine_params or {})

        default_voting_machine: Optional[VotingMachineWrapper] = None
        default_vote_parameters_hash: Optional[str] = None

        # No default is fine when no scheme is universal, or each names its own machine
        if default_voting_machine_params.get("votingMachineName"):
            default_voting_machine = await self._resolve_voting_machine(
                default_voting_machine_params["votingMachineName"],
                default_voting_machine_params.get("votingMachineAddress"),
            )
            default_voting_machine_params["votingMachineAddress"] = default_voting_machine.address
            default_vote_parameters_hash = await default_voting_machine.get_parameters_hash(
                default_voting_machine_params
            )

        registrations = [
            await self._plan_scheme(
                scheme_config, default_voting_machine, default_voting_machine_params, default_vote_parameters_hash
            )
            for scheme_config in schemes
        ]

        function_name = "DaoCreator.setSchemes"
        options = {
            "avatar": avatar,
            "schemes": [s.name for s in schemes],
            "votingMachineParams": voting_machine_params or {},
        }

        payload = self.transactions.publish_kickoff_event(
            function_name, options, self.set_schemes_transactions_count(schemes)
        )
        # Sub-transactions report as DaoCreator.setSchemes
        event_context = self.transactions.new_tx_event_context(function_name, payload, options)

        params_hashes = ParamsHashCache()

        if default_voting_machine:
            await self._register_parameters(
                default_voting_machine,
                default_voting_machine_params,
                default_vote_parameters_hash,
                params_hashes,
                event_context,
            )

        for registration in registrations:
            if registration.voting_machine_params is not None:
                await self._register_parameters(
                    registration.voting_machine,
                    registration.voting_machine_params,
                    registration.vote_parameters_hash,
                    params_hashes,
                    event_context,
                )
            if registration.parameters is not None:
                await self._register_parameters(
                    registration.scheme,
                    registration.parameters,
                    registration.params_hash,
                    params_hashes,
                    event_context,
                )

        initial_schemes = [r.scheme.address for r in registrations]
        initial_params = [r.params_hash for r in registrations]
        initial_permissions = [r.permissions for r in registrations]

        self.log_contract_function_call("DaoCreator.setSchemes", {
            "avatar": avatar,
            "initialSchemesSchemes": initial_schemes,
            "initialSchemesParams": initial_params,
            "initialSchemesPermissions": initial_permissions,
        })

        tx = await self.send_transaction(
            event_context,
            "setSchemes",
            [avatar, initial_schemes, initial_params, initial_permissions],
        )

        result = ArcTransactionResult(
            tx, self.contract, self.chain, context=event_context, transactions=self.transactions
        )
        self.transactions.publish_tx_lifecycle_events(event_context, result)
        return result

    def forge_org_transactions_count(self) -> int:
        return 1

    def set_schemes_transactions_count(self, schemes: Optional[List[Union[SchemeConfig, Dict[str, Any]]]]) -> int:
        """
        Expected transactions of set_schemes, for progress reporting: one
        for setSchemes, one for the default voting machine parameters, one
        for each scheme's parameters, and one for each scheme with its own
        voting machine parameters.
        """
        schemes = schemes or []
        with_own_params = 0
        for s in schemes:
            own = s.voting_machine_params if isinstance(s, SchemeConfig) else s.get("votingMachineParams")
            if own:
                with_own_params += 1
        return 2 + len(schemes) + with_own_params

    async def _plan_scheme(
        self,
        scheme_config: SchemeConfig,
        default_voting_machine: Optional[VotingMachineWrapper],
        default_voting_machine_params: Dict[str, Any],
        default_vote_parameters_hash: Optional[str],
    ) -> SchemeRegistration:
        """Resolve a scheme and compute its hashes, sending nothing."""
        if not scheme_config.name:
            raise MissingArgumentError(
                "SchemeConfig.name",
                "SchemeConfig.name is required. Use SchemeRegistrar to register non-Arc schemes",
            )

        scheme = await self._resolve_scheme(scheme_config)
        # Callers can add permissions but never drop the scheme's required ones
        permissions = SchemePermissions.to_bytes4_hex(
            scheme.get_default_permissions() | int(scheme_config.permissions or 0)
        )

        if not scheme.universal:
            if scheme_config.voting_machine_params:
                raise UnsupportedOperationError(
                    "SchemeConfig.votingMachineParams on non-universal schemes is not supported"
                )
            return SchemeRegistration(scheme, NULL_HASH, permissions)

        registration = SchemeRegistration(scheme, NULL_HASH, permissions)

        if scheme_config.voting_machine_params:
            scheme_voting_machine_params = dict(scheme_config.voting_machine_params)
            machine_name = scheme_voting_machine_params.get("votingMachineName")
            machine_address = scheme_voting_machine_params.get("votingMachineAddress")

            if not machine_address and not machine_name and not default_voting_machine:
                raise MissingArgumentError(
                    "votingMachineParams",
                    "universal scheme requires a voting machine, but none was supplied",
                )

            if not machine_address and (
                not machine_name or machine_name == default_voting_machine_params["votingMachineName"]
            ):
                scheme_voting_machine = default_voting_machine
            else:
                if not machine_name:
                    scheme_voting_machine_params["votingMachineName"] = (
                        default_voting_machine_params["votingMachineName"]
                    )
                scheme_voting_machine = await self._resolve_voting_machine(
                    scheme_voting_machine_params["votingMachineName"], machine_address
                )
            scheme_voting_machine_params["votingMachineAddress"] = scheme_voting_machine.address

            scheme_voting_machine_params = {**default_voting_machine_params, **scheme_voting_machine_params}
            registration.voting_machine = scheme_voting_machine
            registration.voting_machine_params = scheme_voting_machine_params
            registration.vote_parameters_hash = await scheme_voting_machine.get_parameters_hash(
                scheme_voting_machine_params
            )
        else:
            if not default_voting_machine:
                raise MissingArgumentError(
                    "votingMachineParams",
                    "universal scheme requires a voting machine, but none was supplied",
                )
            registration.voting_machine = default_voting_machine
            registration.vote_parameters_hash = default_vote_parameters_hash

        registration.parameters = {
            "voteParametersHash": registration.vote_parameters_hash,
            "votingMachineAddress": registration.voting_machine.address,
        }
        registration.parameters.update(scheme_config.params)
        registration.params_hash = await scheme.get_parameters_hash(registration.parameters)
        return registration

    async def _register_parameters(
        self,
        wrapper: ContractWrapperBase,
        params: Dict[str, Any],
        params_hash: str,
        params_hashes: ParamsHashCache,
        event_context: TxEventContext,
    ):
        # Mined before the next registration so nonces never collide
        if params_hashes.has(wrapper.address, params_hash):
            return
        tx_result = await wrapper.set_parameters(params, event_context=event_context)
        await tx_result.watch_for_tx_mined()
        params_hashes.add(wrapper.address, params_hash)

    async def _resolve_voting_machine(self, name: Optional[str], address: Optional[str] = None) -> VotingMachineWrapper:
        # Only wrapped Arc voting machines can be configured here
        voting_machine = await self.context.registry.get_contract_wrapper(name, address) if name else None
        if not isinstance(voting_machine, VotingMachineWrapper):
            raise ContractNotFoundError(f"voting machine {name} was not found")
        return voting_machine

    async def _resolve_scheme(self, scheme_config: SchemeConfig) -> ContractWrapperBase:
        registry = self.context.registry
        scheme = None

        if scheme_config.name in registry.factories:
            if scheme_config.address:
                scheme = await registry.get_contract_wrapper(scheme_config.name, scheme_config.address)
                if not scheme:
                    raise ContractNotFoundError(
                        f"An instance of '{scheme_config.name}' could not be found at {scheme_config.address}"
                    )
            else:
                # Wrapped but not deployed with this release: most likely a non-universal scheme
                scheme = registry.wrappers.get(scheme_config.name)

        if not scheme:
            if not scheme_config.address:
                raise ContractNotFoundError(
                    "A scheme that has no contract wrapper or has not been deployed must supply an address"
                )

            artifact = self.context.artifacts.require_contract(scheme_config.name)
            code = await self.chain.web3.eth.get_code(Web3.to_checksum_address(scheme_config.address))
            if not code:
                raise ContractNotFoundError(
                    f"An instance of '{scheme_config.name}' could not be found at {scheme_config.address}"
                )
            scheme = SchemeWrapper(self.context, artifact.at(scheme_config.address))

        return scheme


class DaoCreatorFactory(ContractWrapperFactory):

    async def new(self, controller_creator_address: Optional[str] = None, gas=None) -> DaoCreatorWrapper:
        """
        Deploy a DaoCreator.

        Args:
            controller_creator_address: The ControllerCreator used for
                non-universal controllers in forge_org. Defaults to the
                deployed ControllerCreator.
        """
        if not controller_creator_address:
            artifact = self.context.artifacts.require_contract("ControllerCreator")
            controller_creator_address = await artifact.deployed_address()
        return await super().new(controller_creator_address, gas=gas)
