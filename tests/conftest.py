"""Shared fixtures: a real keypair, a wallet with a mocked RPC client, and
well-formed unsigned versioned transactions."""

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import VersionedTransaction
from solders.transaction_status import TransactionConfirmationStatus

from solagent.config import SolAgentConfig
from solagent.utils.wallet import SolanaWalletClient

RPC_URL = "https://api.devnet.solana.com"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
SOL_MINT = "So11111111111111111111111111111111111111112"
MOCK_SIGNATURE = Signature.from_bytes(bytes([7]) * 64)


def make_unsigned_transaction(
    payer, blockhash: Hash = None, extra_signer=None
) -> VersionedTransaction:
    """A SOL transfer from ``payer`` compiled into a v0 message with a placeholder signature."""
    instructions = [
        transfer(
            TransferParams(
                from_pubkey=payer, to_pubkey=Keypair().pubkey(), lamports=1_000
            )
        )
    ]
    signatures = [Signature.default()]
    if extra_signer is not None:
        instructions.append(
            transfer(
                TransferParams(
                    from_pubkey=extra_signer, to_pubkey=payer, lamports=1
                )
            )
        )
        signatures.append(Signature.default())
    message = MessageV0.try_compile(
        payer=payer,
        instructions=instructions,
        address_lookup_table_accounts=[],
        recent_blockhash=blockhash or Hash.new_unique(),
    )
    return VersionedTransaction.populate(message, signatures)


def encode_transaction(tx: VersionedTransaction) -> str:
    return base64.b64encode(bytes(tx)).decode("utf-8")


def confirmed_status():
    return MagicMock(err=None, confirmation_status=TransactionConfirmationStatus.Confirmed)


@pytest.fixture
def keypair():
    return Keypair()


@pytest.fixture
def config():
    return SolAgentConfig(
        rpc_url=RPC_URL,
        confirm_poll_interval=0,
        confirm_max_attempts=3,
    )


@pytest.fixture
def fresh_blockhash():
    return Hash.new_unique()


@pytest.fixture
def wallet(keypair, fresh_blockhash):
    """Wallet whose RPC client accepts submissions and confirms on the first poll."""
    wallet = SolanaWalletClient(RPC_URL, keypair)
    client = MagicMock()
    client.get_latest_blockhash = AsyncMock(
        return_value=MagicMock(
            value=MagicMock(blockhash=fresh_blockhash, last_valid_block_height=1_000)
        )
    )
    client.send_raw_transaction = AsyncMock(return_value=MagicMock(value=MOCK_SIGNATURE))
    client.get_signature_statuses = AsyncMock(
        return_value=MagicMock(value=[confirmed_status()])
    )
    client.get_block_height = AsyncMock(return_value=MagicMock(value=10))
    client.close = AsyncMock()
    wallet.client = client
    return wallet


def make_mock_agent(**methods) -> MagicMock:
    """A SolAgent stand-in usable as ``async with SolAgent(...) as agent``."""
    agent = MagicMock()
    agent.__aenter__ = AsyncMock(return_value=agent)
    agent.__aexit__ = AsyncMock(return_value=False)
    for name, value in methods.items():
        setattr(agent, name, value)
    return agent
