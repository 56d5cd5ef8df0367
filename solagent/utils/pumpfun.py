"""
pump.fun token launches through the pump.fun IPFS uploader and PumpPortal.

A launch is three HTTP calls and one transaction: download the token image,
upload image plus metadata to IPFS, ask PumpPortal's local-trade endpoint for
an unsigned ``create`` transaction, then sign it with the wallet and a fresh
mint keypair and submit it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from solders.keypair import Keypair
from solders.transaction import VersionedTransaction

from solagent.config import PUMPFUN_IPFS_API, PUMPPORTAL_TRADE_API, SolAgentConfig
from solagent.errors import BuildError, LaunchError
from solagent.utils.transaction import sign_and_send
from solagent.utils.wallet import SolanaWalletClient

logger = logging.getLogger(__name__)


@dataclass
class PumpfunTokenOptions:
    twitter: Optional[str] = None
    telegram: Optional[str] = None
    website: Optional[str] = None
    # SOL spent buying the new token in the create transaction
    initial_liquidity_sol: float = 0.0001
    # PumpPortal slippage, in percent
    slippage: float = 5
    priority_fee: float = 0.00005


@dataclass
class PumpfunTokenResponse:
    signature: str
    mint: str
    metadata_uri: str


class PumpfunClient:
    """pump.fun IPFS and PumpPortal API client."""

    def __init__(
        self,
        ipfs_url: Optional[str] = None,
        trade_url: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.ipfs_url = ipfs_url or PUMPFUN_IPFS_API
        self.trade_url = trade_url or PUMPPORTAL_TRADE_API
        self.timeout = timeout

    async def fetch_image(self, image_url: str) -> bytes:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(image_url)
        except httpx.HTTPError as e:
            raise LaunchError(f"Failed to download token image: {e}", cause=e) from e
        if response.status_code != 200:
            raise LaunchError(f"Failed to download token image: {response.status_code}")
        return response.content

    async def upload_metadata(
        self,
        name: str,
        symbol: str,
        description: str,
        image: bytes,
        options: PumpfunTokenOptions,
    ) -> Dict[str, Any]:
        """
        Upload the token image and metadata to IPFS.

        Returns:
            The uploader response; ``metadataUri`` points at the metadata JSON
        """
        form = {
            "name": name,
            "symbol": symbol,
            "description": description,
            "showName": "true",
        }
        for field in ("twitter", "telegram", "website"):
            value = getattr(options, field)
            if value:
                form[field] = value

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.ipfs_url,
                    data=form,
                    files={"file": ("image.png", image, "image/png")},
                )
        except httpx.HTTPError as e:
            raise LaunchError(f"Metadata upload failed: {e}", cause=e) from e

        if response.status_code != 200:
            raise LaunchError(
                f"Metadata upload failed: {response.status_code} - {response.text}"
            )
        try:
            data = response.json()
        except ValueError as e:
            raise LaunchError(f"Metadata upload response is not JSON: {e}", cause=e) from e
        if not isinstance(data, dict) or not data.get("metadataUri"):
            raise LaunchError("Metadata upload response has no metadataUri.")
        return data

    async def get_create_transaction(
        self,
        wallet_address: str,
        mint_address: str,
        name: str,
        symbol: str,
        metadata_uri: str,
        options: PumpfunTokenOptions,
    ) -> VersionedTransaction:
        """
        Get an unsigned ``create`` transaction from PumpPortal.

        The endpoint answers with raw transaction bytes, not base64.

        Raises:
            BuildError: If the request fails or the bytes are not a transaction
        """
        payload = {
            "publicKey": wallet_address,
            "action": "create",
            "tokenMetadata": {"name": name, "symbol": symbol, "uri": metadata_uri},
            "mint": mint_address,
            "denominatedInSol": "true",
            "amount": options.initial_liquidity_sol,
            "slippage": options.slippage,
            "priorityFee": options.priority_fee,
            "pool": "pump",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.trade_url, json=payload)
        except httpx.HTTPError as e:
            raise BuildError(f"Failed to fetch create transaction: {e}", cause=e) from e

        if response.status_code != 200:
            raise BuildError(
                f"Failed to fetch create transaction: {response.status_code} - {response.text}"
            )
        try:
            return VersionedTransaction.from_bytes(response.content)
        except Exception as e:
            raise BuildError(f"Malformed transaction bytes: {e}", cause=e) from e


async def launch_token(
    wallet: SolanaWalletClient,
    pumpfun: PumpfunClient,
    config: SolAgentConfig,
    token_name: str,
    token_ticker: str,
    description: str,
    image_url: str,
    options: Optional[PumpfunTokenOptions] = None,
) -> PumpfunTokenResponse:
    """
    Launch a token on pump.fun.

    Args:
        wallet: The agent wallet; pays for and signs the launch
        pumpfun: pump.fun API client
        config: Submission and confirmation settings
        token_name: Token name
        token_ticker: Token symbol
        description: Token description
        image_url: URL of the token image
        options: Socials, initial buy and fee settings

    Returns:
        The confirmed signature, new mint address and metadata URI
    """
    options = options or PumpfunTokenOptions()
    mint_keypair = Keypair()

    image = await pumpfun.fetch_image(image_url)
    metadata = await pumpfun.upload_metadata(
        token_name, token_ticker, description, image, options
    )
    metadata_uri = metadata["metadataUri"]
    logger.info(f"Uploaded pump.fun metadata: {metadata_uri}")

    transaction = await pumpfun.get_create_transaction(
        wallet.address,
        str(mint_keypair.pubkey()),
        token_name,
        token_ticker,
        metadata_uri,
        options,
    )
    signature = await sign_and_send(
        wallet, transaction, config, extra_signers=[mint_keypair]
    )
    logger.info(f"Launched {token_ticker} on pump.fun: mint {mint_keypair.pubkey()}")
    return PumpfunTokenResponse(
        signature=signature,
        mint=str(mint_keypair.pubkey()),
        metadata_uri=metadata_uri,
    )
