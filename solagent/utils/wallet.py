from typing import Optional
import logging
import nacl.signing
from solana.rpc.async_api import AsyncClient
from solders.keypair import Keypair
from solders.signature import Signature
from solders.pubkey import Pubkey

from solagent.errors import ConfigurationError, ParseError

logger = logging.getLogger(__name__)


def parse_pubkey(address: str, what: str = "address") -> Pubkey:
    """Parse a base58 address, raising ParseError instead of ValueError."""
    if isinstance(address, Pubkey):
        return address
    try:
        return Pubkey.from_string(address)
    except Exception as e:
        raise ParseError(f"Invalid {what}: {address!r}", cause=e) from e


def load_keypair(private_key: str) -> Keypair:
    try:
        return Keypair.from_base58_string(private_key)
    except Exception as e:
        raise ConfigurationError("Private key is not a valid base58 keypair.", cause=e) from e


class SolanaWalletClient:
    """
    Solana wallet handle: one signing keypair plus an RPC connection.

    Built once and shared read-only by every operation; nothing on it is
    mutated after construction.
    """

    def __init__(
        self,
        rpc_url: str,
        keypair: Optional[Keypair] = None,
        pubkey: Optional[str] = None,
        timeout: float = 10.0,
    ):
        self.pubkey = pubkey
        if pubkey:
            self.pubkey = parse_pubkey(pubkey, "wallet address")
        elif keypair:
            self.pubkey = keypair.pubkey()
        self.rpc_url = rpc_url
        self.keypair = keypair
        self.client = AsyncClient(rpc_url, timeout=timeout)

    @classmethod
    def from_private_key(
        cls, rpc_url: str, private_key: str, timeout: float = 10.0
    ) -> "SolanaWalletClient":
        return cls(rpc_url, load_keypair(private_key), timeout=timeout)

    @property
    def address(self) -> str:
        return str(self.pubkey)

    def sign_message(self, message: bytes) -> Signature:
        signed = nacl.signing.SigningKey(self.keypair.secret()).sign(message)
        return Signature.from_bytes(signed.signature)

    async def close(self) -> None:
        await self.client.close()
