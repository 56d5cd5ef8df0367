import logging
import struct
from typing import Optional

from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.instruction import AccountMeta, Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.transaction import VersionedTransaction
from spl.token.async_client import AsyncToken
from spl.token.constants import TOKEN_PROGRAM_ID

from solagent.config import SolAgentConfig
from solagent.errors import DeployError, SolAgentError
from solagent.utils.token import human_to_smallest_units
from solagent.utils.transaction import send_and_confirm, sign_transaction
from solagent.utils.wallet import SolanaWalletClient

logger = logging.getLogger(__name__)

METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")
CREATE_METADATA_ACCOUNT_V3 = 33
MAX_NAME_LENGTH = 32
MAX_SYMBOL_LENGTH = 10
MAX_URI_LENGTH = 200


def find_metadata_address(mint: Pubkey) -> Pubkey:
    seeds = [b"metadata", bytes(METADATA_PROGRAM_ID), bytes(mint)]
    address, _ = Pubkey.find_program_address(seeds, METADATA_PROGRAM_ID)
    return address


def _borsh_string(value: str) -> bytes:
    encoded = value.encode("utf-8")
    return struct.pack("<I", len(encoded)) + encoded


def validate_metadata(name: str, symbol: str, uri: str) -> None:
    for label, value, limit in (
        ("name", name, MAX_NAME_LENGTH),
        ("symbol", symbol, MAX_SYMBOL_LENGTH),
        ("uri", uri, MAX_URI_LENGTH),
    ):
        if len(value.encode("utf-8")) > limit:
            raise DeployError(f"Token {label} is longer than {limit} bytes: {value!r}")


def make_create_metadata_instruction(
    mint: Pubkey, authority: Pubkey, name: str, symbol: str, uri: str
) -> Instruction:
    """
    Metaplex ``CreateMetadataAccountV3`` for a fungible token.

    ``authority`` is mint authority, payer and update authority. No creators,
    collection or uses; zero seller fee; the metadata stays mutable.
    """
    validate_metadata(name, symbol, uri)
    data = bytearray([CREATE_METADATA_ACCOUNT_V3])
    data.extend(_borsh_string(name))
    data.extend(_borsh_string(symbol))
    data.extend(_borsh_string(uri))
    data.extend(struct.pack("<H", 0))  # seller_fee_basis_points
    data.extend(b"\x00\x00\x00")  # creators, collection, uses: None
    data.append(1)  # is_mutable
    data.append(0)  # collection_details: None

    keys = [
        AccountMeta(find_metadata_address(mint), is_signer=False, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(authority, is_signer=True, is_writable=False),
        AccountMeta(authority, is_signer=True, is_writable=True),
        AccountMeta(authority, is_signer=True, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(program_id=METADATA_PROGRAM_ID, accounts=keys, data=bytes(data))


async def deploy_token(
    wallet: SolanaWalletClient,
    config: SolAgentConfig,
    name: str,
    uri: str,
    symbol: str,
    decimals: int = 9,
    initial_supply: Optional[float] = None,
) -> str:
    """
    Create a new SPL token mint owned by the wallet.

    The wallet becomes both mint and freeze authority, and the Metaplex
    metadata account carries ``name``, ``symbol`` and ``uri``. When
    ``initial_supply`` is given (human units) it is minted into the wallet's
    associated token account.

    Returns:
        The new mint address
    """
    validate_metadata(name, symbol, uri)
    try:
        token = await AsyncToken.create_mint(
            wallet.client,
            wallet.keypair,
            wallet.pubkey,
            decimals,
            TOKEN_PROGRAM_ID,
            freeze_authority=wallet.pubkey,
        )
        logger.info(f"Created mint {token.pubkey} with {decimals} decimals")

        ix = make_create_metadata_instruction(token.pubkey, wallet.pubkey, name, symbol, uri)
        blockhash_response = await wallet.client.get_latest_blockhash(commitment=Confirmed)
        msg = Message.new_with_blockhash([ix], wallet.pubkey, blockhash_response.value.blockhash)
        signed = sign_transaction(
            wallet, VersionedTransaction.populate(msg, [Signature.default()])
        )
        await send_and_confirm(wallet, signed, config)
        logger.info(f"Attached metadata {name} ({symbol}) to {token.pubkey}")

        if initial_supply:
            amount = human_to_smallest_units(initial_supply, decimals)
            ata = await token.create_associated_token_account(wallet.pubkey)
            await token.mint_to(
                ata,
                wallet.keypair,
                amount,
                opts=TxOpts(skip_confirmation=False, preflight_commitment=Confirmed),
            )
            logger.info(f"Minted {amount} base units of {token.pubkey} to {ata}")
    except SolAgentError:
        raise
    except Exception as e:
        logger.exception(f"Token deployment failed: {str(e)}")
        raise DeployError(f"Token deployment failed: {str(e)}", cause=e) from e

    return str(token.pubkey)
