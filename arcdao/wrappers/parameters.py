"""
Registered Parameters
=====================
Contracts that store their configuration on chain under a parameters
hash: voting machines and universal schemes. Registering identical
parameters twice yields the same hash.
"""

from typing import Any, Dict, List, Optional

from ..errors import MissingArgumentError
from ..transactions import ArcTransactionDataResult, TxEventContext


def _hash_to_hex(value) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return value


class ParameterizedWrapperMixin:
    """
    Subclasses list their parameters in contract order in
    `parameter_names` and supply defaults in `get_default_parameters()`.
    Keys a contract doesn't take are ignored, so one option dict can
    configure several contracts.
    """

    parameter_names: List[str] = []

    def get_default_parameters(self) -> Dict[str, Any]:
        return {}

    def merge_parameters(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Defaults overlaid with the given parameters, validated."""
        merged = self.get_default_parameters()
        merged.update({k: v for k, v in params.items() if v is not None})
        self.validate_parameters(merged)
        return merged

    def validate_parameters(self, params: Dict[str, Any]):
        for name in self.parameter_names:
            if params.get(name) is None:
                raise MissingArgumentError(name, f"{self.name}: {name} is not defined")

    def parameters_args(self, params: Dict[str, Any]) -> list:
        """Positional contract arguments for the merged parameters."""
        return [params[name] for name in self.parameter_names]

    async def get_parameters_hash(self, params: Dict[str, Any]) -> str:
        merged = self.merge_parameters(params)
        return _hash_to_hex(await self.call("getParametersHash", *self.parameters_args(merged)))

    async def set_parameters(
        self,
        params: Dict[str, Any],
        event_context: Optional[TxEventContext] = None,
    ) -> ArcTransactionDataResult:
        """
        Register parameters on chain. The returned result's `result` is
        the parameters hash under which they are stored.
        """
        merged = self.merge_parameters(params)
        params_hash = await self.get_parameters_hash(merged)

        function_name = f"{self.name}.setParameters"
        self.log_contract_function_call(function_name, merged)

        return await self.wrap_transaction_invocation(
            function_name,
            merged,
            "setParameters",
            self.parameters_args(merged),
            event_context=event_context,
            result_class=ArcTransactionDataResult,
            result=params_hash,
        )
