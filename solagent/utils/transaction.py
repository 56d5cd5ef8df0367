"""
Sign, submit and confirm transactions with the agent wallet.

One attempt moves through Built -> Signed -> Submitted -> Confirmed and stops
at the first failure with the stage's own exception type. Nothing is retried
here; the only rebroadcasting is what the RPC node does with ``max_retries``.
"""

import asyncio
import logging
from typing import Sequence, Tuple, Union

from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import Message, MessageV0, to_bytes_versioned
from solders.signature import Signature
from solders.transaction import VersionedTransaction
from solders.transaction_status import TransactionConfirmationStatus

from solagent.config import SolAgentConfig
from solagent.errors import ConfirmError, SignError, SubmitError
from solagent.utils.wallet import SolanaWalletClient

logger = logging.getLogger(__name__)

CONFIRMED_STATUSES = (
    TransactionConfirmationStatus.Confirmed,
    TransactionConfirmationStatus.Finalized,
)


def replace_recent_blockhash(
    message: Union[Message, MessageV0], blockhash: Hash
) -> Union[Message, MessageV0]:
    """Return a copy of ``message`` that references ``blockhash``."""
    if isinstance(message, MessageV0):
        return MessageV0(
            message.header,
            message.account_keys,
            blockhash,
            message.instructions,
            message.address_table_lookups,
        )
    header = message.header
    return Message.new_with_compiled_instructions(
        header.num_required_signatures,
        header.num_readonly_signed_accounts,
        header.num_readonly_unsigned_accounts,
        message.account_keys,
        blockhash,
        message.instructions,
    )


async def get_latest_blockhash(wallet: SolanaWalletClient) -> Tuple[Hash, int]:
    resp = await wallet.client.get_latest_blockhash(commitment=Confirmed)
    return resp.value.blockhash, resp.value.last_valid_block_height


def sign_transaction(
    wallet: SolanaWalletClient,
    transaction: VersionedTransaction,
    extra_signers: Sequence[Keypair] = (),
) -> VersionedTransaction:
    """
    Sign ``transaction`` with the wallet key and any ``extra_signers``.

    The required signers of the message must be exactly the wallet plus the
    extra keypairs; anything else is a signer-set mismatch.
    """
    message = transaction.message
    num_signers = message.header.num_required_signatures
    signers = list(message.account_keys[:num_signers])
    keypairs = {kp.pubkey(): kp for kp in extra_signers}
    expected = {wallet.pubkey, *keypairs}
    if len(signers) != len(expected) or set(signers) != expected:
        raise SignError(
            f"Transaction signers {[str(s) for s in signers]} do not match wallet {wallet.pubkey}"
            + (f" and {[str(k) for k in keypairs]}." if keypairs else ".")
        )
    try:
        message_bytes = to_bytes_versioned(message)
        signatures = [
            wallet.sign_message(message_bytes)
            if signer == wallet.pubkey
            else keypairs[signer].sign_message(message_bytes)
            for signer in signers
        ]
        return VersionedTransaction.populate(message, signatures)
    except Exception as e:
        raise SignError(f"Failed to sign transaction: {e}", cause=e) from e


async def submit_transaction(
    wallet: SolanaWalletClient,
    transaction: Union[VersionedTransaction, bytes],
    config: SolAgentConfig,
) -> Signature:
    tx_bytes = transaction if isinstance(transaction, bytes) else bytes(transaction)
    try:
        resp = await wallet.client.send_raw_transaction(
            tx_bytes,
            opts=TxOpts(
                skip_preflight=config.skip_preflight,
                preflight_commitment=Confirmed,
                max_retries=config.send_max_retries,
            ),
        )
    except Exception as e:
        raise SubmitError(f"Transaction rejected: {e}", cause=e) from e
    logger.info(f"Transaction sent: {resp.value}")
    return resp.value


async def confirm_signature(
    wallet: SolanaWalletClient, signature: Signature, config: SolAgentConfig
) -> None:
    """
    Poll until ``signature`` reaches confirmed commitment.

    The wait is bounded by ``config.confirm_max_attempts`` polls and by the
    validity window of the latest blockhash fetched before polling starts.
    """
    sig_str = str(signature)
    try:
        _, last_valid_block_height = await get_latest_blockhash(wallet)
    except Exception as e:
        raise ConfirmError(f"Failed to fetch blockhash: {e}", sig_str, e) from e

    for attempt in range(config.confirm_max_attempts):
        try:
            resp = await wallet.client.get_signature_statuses([signature])
        except Exception as e:
            raise ConfirmError(f"Failed to poll transaction status: {e}", sig_str, e) from e

        status = resp.value[0] if resp.value else None
        if status is not None:
            if status.err is not None:
                raise ConfirmError(f"Transaction failed: {status.err}", sig_str)
            if status.confirmation_status in CONFIRMED_STATUSES:
                logger.info(f"Transaction confirmed: {sig_str}")
                return
        logger.debug(f"Waiting for {sig_str} (poll {attempt + 1}/{config.confirm_max_attempts})")

        if attempt == config.confirm_max_attempts - 1:
            break
        try:
            block_height = (await wallet.client.get_block_height(Confirmed)).value
        except Exception as e:
            raise ConfirmError(f"Failed to fetch block height: {e}", sig_str, e) from e
        if block_height > last_valid_block_height:
            raise ConfirmError(f"Blockhash expired before {sig_str} was confirmed.", sig_str)
        await asyncio.sleep(config.confirm_poll_interval)

    raise ConfirmError(
        f"Transaction {sig_str} not confirmed after {config.confirm_max_attempts} polls.",
        sig_str,
    )


async def send_and_confirm(
    wallet: SolanaWalletClient,
    transaction: Union[VersionedTransaction, bytes],
    config: SolAgentConfig,
) -> str:
    signature = await submit_transaction(wallet, transaction, config)
    await confirm_signature(wallet, signature, config)
    return str(signature)


async def sign_and_send(
    wallet: SolanaWalletClient,
    transaction: VersionedTransaction,
    config: SolAgentConfig,
    refresh_blockhash: bool = False,
    extra_signers: Sequence[Keypair] = (),
) -> str:
    """
    Sign an aggregator-built transaction, submit it and wait for confirmation.

    Args:
        wallet: The agent wallet
        transaction: Unsigned versioned transaction
        config: Submission and confirmation settings
        refresh_blockhash: Replace the embedded blockhash with a fresh one first
        extra_signers: Keypairs that must co-sign, such as a new mint

    Returns:
        The transaction signature as a string
    """
    if refresh_blockhash:
        try:
            blockhash, _ = await get_latest_blockhash(wallet)
        except Exception as e:
            raise SignError(f"Failed to fetch blockhash: {e}", cause=e) from e
        logger.info(f"Got fresh blockhash: {blockhash}")
        transaction = VersionedTransaction.populate(
            replace_recent_blockhash(transaction.message, blockhash),
            list(transaction.signatures),
        )

    signed = sign_transaction(wallet, transaction, extra_signers)
    return await send_and_confirm(wallet, signed, config)
