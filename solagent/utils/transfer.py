import logging
from typing import List, Optional

from solana.rpc.commitment import Confirmed
from solders.instruction import Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import VersionedTransaction
from spl.token.async_client import AsyncToken
from spl.token.instructions import (
    create_idempotent_associated_token_account,
    get_associated_token_address,
    transfer_checked as spl_transfer,
    TransferCheckedParams as SPLTransferParams,
)

from solagent.config import SolAgentConfig
from solagent.errors import MintLookupError, SolAgentError, TransferError
from solagent.utils.token import (
    NATIVE_DECIMALS,
    get_token_program,
    human_to_smallest_units,
    is_native_mint,
)
from solagent.utils.transaction import send_and_confirm, sign_transaction
from solagent.utils.wallet import SolanaWalletClient, parse_pubkey

logger = logging.getLogger(__name__)

MEMO_PROGRAM_ID = "MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr"


def make_memo_instruction(memo: str) -> Instruction:
    return Instruction(
        program_id=Pubkey.from_string(MEMO_PROGRAM_ID),
        accounts=[],
        data=memo.encode("utf-8"),
    )


class TokenTransferManager:
    @staticmethod
    async def build_instructions(
        wallet: SolanaWalletClient,
        to: str,
        amount: float,
        mint: Optional[str] = None,
        memo: str = "",
    ) -> List[Instruction]:
        """
        Instructions moving ``amount`` human units of SOL or an SPL token to ``to``.

        SPL transfers go between associated token accounts; the recipient's
        account is created idempotently, paid for by the wallet.
        """
        to_pubkey = parse_pubkey(to, "recipient address")
        ixs = []

        if is_native_mint(mint):
            ixs.append(
                transfer(
                    TransferParams(
                        from_pubkey=wallet.pubkey,
                        to_pubkey=to_pubkey,
                        lamports=human_to_smallest_units(amount, NATIVE_DECIMALS),
                    )
                )
            )
        else:
            mint_pubkey = parse_pubkey(mint, "mint")
            program_id = await get_token_program(wallet.client, mint_pubkey)
            token = AsyncToken(wallet.client, mint_pubkey, program_id, wallet.keypair)
            try:
                mint_info = await token.get_mint_info()
            except Exception as e:
                raise MintLookupError(
                    f"Failed to read mint info for {mint_pubkey}: {e}", cause=e
                ) from e

            from_ata = get_associated_token_address(wallet.pubkey, mint_pubkey, program_id)
            to_ata = get_associated_token_address(to_pubkey, mint_pubkey, program_id)

            ixs.append(
                create_idempotent_associated_token_account(
                    wallet.pubkey, to_pubkey, mint_pubkey, program_id
                )
            )
            ixs.append(
                spl_transfer(
                    SPLTransferParams(
                        program_id=program_id,
                        source=from_ata,
                        mint=mint_pubkey,
                        dest=to_ata,
                        owner=wallet.pubkey,
                        amount=human_to_smallest_units(amount, mint_info.decimals),
                        decimals=mint_info.decimals,
                    )
                )
            )

        if memo:
            ixs.append(make_memo_instruction(memo))
        return ixs

    @staticmethod
    async def transfer(
        wallet: SolanaWalletClient,
        config: SolAgentConfig,
        to: str,
        amount: float,
        mint: Optional[str] = None,
        memo: str = "",
    ) -> str:
        """
        Transfer SOL, SPL, or Token2022 tokens to a recipient.

        :param wallet: An instance of SolanaWalletClient
        :param config: Submission and confirmation settings
        :param to: Recipient's public key
        :param amount: Amount to transfer in human units
        :param mint: Optional mint address; SOL when omitted
        :param memo: Optional memo for the transaction
        :return: The confirmed transaction signature
        """
        try:
            ixs = await TokenTransferManager.build_instructions(
                wallet, to, amount, mint, memo
            )
            blockhash_response = await wallet.client.get_latest_blockhash(
                commitment=Confirmed,
            )
            msg = Message.new_with_blockhash(
                ixs, wallet.pubkey, blockhash_response.value.blockhash
            )
        except SolAgentError:
            raise
        except Exception as e:
            logger.exception(f"Transfer failed: {str(e)}")
            raise TransferError(f"Transfer failed: {str(e)}", cause=e) from e

        signed = sign_transaction(
            wallet, VersionedTransaction.populate(msg, [Signature.default()])
        )
        return await send_and_confirm(wallet, signed, config)
