"""Exceptions raised by the Arc contract wrappers"""


class ArcError(Exception):
    """Base exception for Arc client errors"""
    pass


class MissingArgumentError(ArcError, ValueError):
    """Raised when a required argument is absent"""
    def __init__(self, argument: str, message: str = None):
        self.argument = argument
        super().__init__(message or f"{argument} is not defined")


class OutOfRangeError(ArcError, ValueError):
    """Raised when a value falls outside bounds reported by the chain"""
    pass


class ContractNotFoundError(ArcError, LookupError):
    """Raised when a contract, artifact or wrapper cannot be resolved"""
    pass


class UnsupportedOperationError(ArcError, NotImplementedError):
    """Raised for operations a wrapper type does not provide"""
    pass


class TransactionFailedError(ArcError):
    """Raised when a mined transaction reports a failed status"""
    def __init__(self, tx_hash: str):
        self.tx_hash = tx_hash
        super().__init__(f"Transaction failed: {tx_hash}")
