"""
Exception types raised by solagent.

Every stage of an on-chain operation raises its own subclass of
``SolAgentError`` so callers (and the agent tools) can tell where an attempt
stopped. Nothing here is retried; the first failure is the one reported.
"""

from typing import Optional


class SolAgentError(Exception):
    """Base class for all solagent failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class ConfigurationError(SolAgentError):
    """Missing or invalid configuration (RPC URL, private key, ...)."""


class ParseError(SolAgentError):
    """A public key or address string could not be parsed."""


class QuoteError(SolAgentError):
    """The aggregator quote could not be obtained."""


class MintLookupError(QuoteError):
    """The mint account could not be read to resolve its decimals."""


class BuildError(SolAgentError):
    """The aggregator did not return a usable transaction."""


class SignError(SolAgentError):
    """The wallet could not sign the transaction message."""


class SubmitError(SolAgentError):
    """The RPC node rejected the transaction or could not be reached."""


class ConfirmError(SolAgentError):
    """The transaction did not reach the requested commitment."""

    def __init__(
        self,
        message: str,
        signature: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.signature = signature


class BalanceError(SolAgentError):
    """A balance query failed."""


class TransferError(SolAgentError):
    """A transfer transaction could not be built."""


class DeployError(SolAgentError):
    """Token deployment failed."""


class FaucetError(SolAgentError):
    """The faucet airdrop request failed."""


class PriceError(SolAgentError):
    """A price lookup failed."""


class LaunchError(SolAgentError):
    """A pump.fun token launch could not be prepared."""
