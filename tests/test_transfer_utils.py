"""
Tests for Token Transfer utility.

Tests the TokenTransferManager which handles SOL and SPL token transfers.
"""

import pytest
from unittest.mock import patch, AsyncMock, MagicMock
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction
from spl.token.constants import TOKEN_PROGRAM_ID

from solagent.errors import MintLookupError, ParseError, SubmitError, TransferError
from solagent.utils.transfer import MEMO_PROGRAM_ID, TokenTransferManager
from conftest import MOCK_SIGNATURE, USDC_MINT


def _sent_transaction(wallet) -> VersionedTransaction:
    return VersionedTransaction.from_bytes(
        wallet.client.send_raw_transaction.call_args[0][0]
    )


def _program_ids(tx: VersionedTransaction):
    keys = tx.message.account_keys
    return [keys[ix.program_id_index] for ix in tx.message.instructions]


class TestBuildInstructions:
    @pytest.mark.asyncio
    async def test_sol_transfer(self, wallet):
        ixs = await TokenTransferManager.build_instructions(
            wallet, str(Keypair().pubkey()), 1.5
        )

        assert len(ixs) == 1
        assert str(ixs[0].program_id) == "11111111111111111111111111111111"

    @pytest.mark.asyncio
    async def test_memo_appended(self, wallet):
        ixs = await TokenTransferManager.build_instructions(
            wallet, str(Keypair().pubkey()), 1.0, memo="gm"
        )

        assert len(ixs) == 2
        assert ixs[1].program_id == Pubkey.from_string(MEMO_PROGRAM_ID)
        assert bytes(ixs[1].data) == b"gm"

    @pytest.mark.asyncio
    async def test_spl_transfer(self, wallet):
        mock_token = MagicMock()
        mock_token.get_mint_info = AsyncMock(return_value=MagicMock(decimals=6))

        with (
            patch(
                "solagent.utils.transfer.get_token_program",
                new=AsyncMock(return_value=TOKEN_PROGRAM_ID),
            ),
            patch("solagent.utils.transfer.AsyncToken", return_value=mock_token),
        ):
            ixs = await TokenTransferManager.build_instructions(
                wallet, str(Keypair().pubkey()), 2.5, mint=USDC_MINT
            )

        # create ATA (idempotent) + transfer_checked
        assert len(ixs) == 2
        assert ixs[1].program_id == TOKEN_PROGRAM_ID
        # transfer_checked data: tag 12, u64 amount, u8 decimals
        data = bytes(ixs[1].data)
        assert data[0] == 12
        assert int.from_bytes(data[1:9], "little") == 2_500_000
        assert data[9] == 6

    @pytest.mark.asyncio
    async def test_mint_info_failure(self, wallet):
        mock_token = MagicMock()
        mock_token.get_mint_info = AsyncMock(side_effect=Exception("account not found"))

        with (
            patch(
                "solagent.utils.transfer.get_token_program",
                new=AsyncMock(return_value=TOKEN_PROGRAM_ID),
            ),
            patch("solagent.utils.transfer.AsyncToken", return_value=mock_token),
        ):
            with pytest.raises(MintLookupError):
                await TokenTransferManager.build_instructions(
                    wallet, str(Keypair().pubkey()), 1.0, mint=USDC_MINT
                )

    @pytest.mark.asyncio
    async def test_invalid_recipient(self, wallet):
        with pytest.raises(ParseError):
            await TokenTransferManager.build_instructions(wallet, "nope", 1.0)


class TestTokenTransferManager:
    """Test TokenTransferManager.transfer."""

    @pytest.mark.asyncio
    async def test_transfer_sol(self, wallet, keypair, config, fresh_blockhash):
        """Should sign, submit and confirm a SOL transfer."""
        result = await TokenTransferManager.transfer(
            wallet, config, str(Keypair().pubkey()), 0.1
        )

        assert result == str(MOCK_SIGNATURE)
        sent = _sent_transaction(wallet)
        assert sent.message.recent_blockhash == fresh_blockhash
        assert sent.message.account_keys[0] == keypair.pubkey()
        wallet.client.get_signature_statuses.assert_awaited()

    @pytest.mark.asyncio
    async def test_transfer_with_memo(self, wallet, config):
        await TokenTransferManager.transfer(
            wallet, config, str(Keypair().pubkey()), 0.1, memo="invoice 42"
        )

        sent = _sent_transaction(wallet)
        assert _program_ids(sent)[-1] == Pubkey.from_string(MEMO_PROGRAM_ID)

    @pytest.mark.asyncio
    async def test_invalid_amount(self, wallet, config):
        with pytest.raises(TransferError):
            await TokenTransferManager.transfer(
                wallet, config, str(Keypair().pubkey()), -5
            )

        wallet.client.send_raw_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_blockhash_failure(self, wallet, config):
        wallet.client.get_latest_blockhash = AsyncMock(side_effect=Exception("rpc down"))

        with pytest.raises(TransferError) as exc_info:
            await TokenTransferManager.transfer(
                wallet, config, str(Keypair().pubkey()), 0.1
            )

        assert "rpc down" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_submit_rejected(self, wallet, config):
        wallet.client.send_raw_transaction.side_effect = Exception("insufficient funds")

        with pytest.raises(SubmitError):
            await TokenTransferManager.transfer(
                wallet, config, str(Keypair().pubkey()), 0.1
            )

        wallet.client.get_signature_statuses.assert_not_called()
