"""
Tests for airdrops, token deployment and TPS lookup.
"""

import struct

import pytest
from unittest.mock import patch, AsyncMock, MagicMock
from solders.keypair import Keypair
from solders.message import to_bytes_versioned
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.transaction import VersionedTransaction
from spl.token.constants import TOKEN_PROGRAM_ID

from solagent.errors import ConfirmError, DeployError, FaucetError, SolAgentError
from solagent.utils.deploy import (
    METADATA_PROGRAM_ID,
    deploy_token,
    find_metadata_address,
    make_create_metadata_instruction,
)
from solagent.utils.faucet import request_faucet_funds
from solagent.utils.network import get_tps
from conftest import MOCK_SIGNATURE


class TestGetTps:
    @pytest.mark.asyncio
    async def test_tps(self):
        client = MagicMock()
        client.get_recent_performance_samples = AsyncMock(
            return_value=MagicMock(
                value=[MagicMock(num_transactions=180_000, sample_period_secs=60)]
            )
        )

        assert await get_tps(client) == 3000.0
        client.get_recent_performance_samples.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_no_samples(self):
        client = MagicMock()
        client.get_recent_performance_samples = AsyncMock(return_value=MagicMock(value=[]))

        with pytest.raises(SolAgentError):
            await get_tps(client)

    @pytest.mark.asyncio
    async def test_rpc_failure(self):
        client = MagicMock()
        client.get_recent_performance_samples = AsyncMock(side_effect=Exception("boom"))

        with pytest.raises(SolAgentError):
            await get_tps(client)


class TestRequestFaucetFunds:
    @pytest.mark.asyncio
    async def test_airdrop_confirmed(self, wallet, keypair, config):
        wallet.client.request_airdrop = AsyncMock(
            return_value=MagicMock(value=MOCK_SIGNATURE)
        )

        result = await request_faucet_funds(wallet, config)

        assert result == str(MOCK_SIGNATURE)
        args = wallet.client.request_airdrop.call_args[0]
        assert args[0] == keypair.pubkey()
        assert args[1] == 5_000_000_000
        wallet.client.get_signature_statuses.assert_awaited()

    @pytest.mark.asyncio
    async def test_custom_amount(self, wallet, config):
        config.faucet_amount_sol = 0.5
        wallet.client.request_airdrop = AsyncMock(
            return_value=MagicMock(value=MOCK_SIGNATURE)
        )

        await request_faucet_funds(wallet, config)

        assert wallet.client.request_airdrop.call_args[0][1] == 500_000_000

    @pytest.mark.asyncio
    async def test_mainnet_rejects(self, wallet, config):
        wallet.client.request_airdrop = AsyncMock(
            side_effect=Exception("airdrop request failed")
        )

        with pytest.raises(FaucetError) as exc_info:
            await request_faucet_funds(wallet, config)

        assert "devnet" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unconfirmed(self, wallet, config):
        wallet.client.request_airdrop = AsyncMock(
            return_value=MagicMock(value=MOCK_SIGNATURE)
        )
        wallet.client.get_signature_statuses = AsyncMock(
            return_value=MagicMock(value=[None])
        )

        with pytest.raises(ConfirmError):
            await request_faucet_funds(wallet, config)


class TestCreateMetadataInstruction:
    def test_layout(self):
        mint = Keypair().pubkey()
        authority = Keypair().pubkey()

        ix = make_create_metadata_instruction(
            mint, authority, "Agent Token", "AGT", "https://example.com/agt.json"
        )

        assert ix.program_id == METADATA_PROGRAM_ID
        expected_pda, _ = Pubkey.find_program_address(
            [b"metadata", bytes(METADATA_PROGRAM_ID), bytes(mint)], METADATA_PROGRAM_ID
        )
        assert [meta.pubkey for meta in ix.accounts] == [
            expected_pda,
            mint,
            authority,
            authority,
            authority,
            SYSTEM_PROGRAM_ID,
        ]
        assert ix.accounts[0].is_writable
        assert ix.accounts[3].is_signer and ix.accounts[3].is_writable

        data = bytes(ix.data)
        assert data[0] == 33
        name_len = struct.unpack_from("<I", data, 1)[0]
        assert data[5 : 5 + name_len] == b"Agent Token"
        offset = 5 + name_len
        symbol_len = struct.unpack_from("<I", data, offset)[0]
        assert data[offset + 4 : offset + 4 + symbol_len] == b"AGT"
        offset += 4 + symbol_len
        uri_len = struct.unpack_from("<I", data, offset)[0]
        assert data[offset + 4 : offset + 4 + uri_len] == b"https://example.com/agt.json"
        offset += 4 + uri_len
        # seller fee, creators/collection/uses, is_mutable, collection_details
        assert data[offset:] == b"\x00\x00" + b"\x00\x00\x00" + b"\x01" + b"\x00"

    def test_symbol_too_long(self):
        with pytest.raises(DeployError) as exc_info:
            make_create_metadata_instruction(
                Keypair().pubkey(), Keypair().pubkey(), "Agent Token", "TOOLONGSYMBOL", ""
            )

        assert "symbol" in str(exc_info.value)


class TestDeployToken:
    @pytest.mark.asyncio
    async def test_mint_and_metadata(self, wallet, keypair, config):
        mint = Keypair().pubkey()
        mock_token = MagicMock(pubkey=mint)
        mock_token.create_associated_token_account = AsyncMock()

        with patch("solagent.utils.deploy.AsyncToken") as MockToken:
            MockToken.create_mint = AsyncMock(return_value=mock_token)

            result = await deploy_token(
                wallet, config, "Agent Token", "https://example.com/agt.json", "AGT", 6
            )

        assert result == str(mint)
        args, kwargs = MockToken.create_mint.call_args
        assert args == (wallet.client, keypair, keypair.pubkey(), 6, TOKEN_PROGRAM_ID)
        assert kwargs["freeze_authority"] == keypair.pubkey()
        mock_token.create_associated_token_account.assert_not_called()

        sent = VersionedTransaction.from_bytes(
            wallet.client.send_raw_transaction.call_args[0][0]
        )
        message = sent.message
        assert message.account_keys[0] == keypair.pubkey()
        assert METADATA_PROGRAM_ID in message.account_keys
        assert find_metadata_address(mint) in message.account_keys
        assert sent.signatures[0].verify(keypair.pubkey(), to_bytes_versioned(message))

    @pytest.mark.asyncio
    async def test_initial_supply(self, wallet, keypair, config):
        mint = Keypair().pubkey()
        ata = Keypair().pubkey()
        mock_token = MagicMock(pubkey=mint)
        mock_token.create_associated_token_account = AsyncMock(return_value=ata)
        mock_token.mint_to = AsyncMock()

        with patch("solagent.utils.deploy.AsyncToken") as MockToken:
            MockToken.create_mint = AsyncMock(return_value=mock_token)

            await deploy_token(
                wallet, config, "Agent Token", "", "AGT", decimals=6, initial_supply=1000
            )

        mock_token.create_associated_token_account.assert_awaited_once_with(
            keypair.pubkey()
        )
        args = mock_token.mint_to.call_args[0]
        assert args == (ata, keypair, 1_000_000_000)

    @pytest.mark.asyncio
    async def test_overlong_metadata_rejected_before_mint(self, wallet, config):
        with patch("solagent.utils.deploy.AsyncToken") as MockToken:
            MockToken.create_mint = AsyncMock()

            with pytest.raises(DeployError):
                await deploy_token(wallet, config, "x" * 33, "", "AGT")

        MockToken.create_mint.assert_not_called()
        wallet.client.send_raw_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_metadata_confirm_failure_propagates(self, wallet, config):
        wallet.client.get_signature_statuses = AsyncMock(
            return_value=MagicMock(value=[MagicMock(err="InstructionError")])
        )
        mock_token = MagicMock(pubkey=Keypair().pubkey())

        with patch("solagent.utils.deploy.AsyncToken") as MockToken:
            MockToken.create_mint = AsyncMock(return_value=mock_token)

            with pytest.raises(ConfirmError):
                await deploy_token(wallet, config, "Agent Token", "", "AGT")

    @pytest.mark.asyncio
    async def test_failure(self, wallet, config):
        with patch("solagent.utils.deploy.AsyncToken") as MockToken:
            MockToken.create_mint = AsyncMock(side_effect=Exception("insufficient lamports"))

            with pytest.raises(DeployError) as exc_info:
                await deploy_token(wallet, config, "Agent Token", "", "AGT")

        assert "insufficient lamports" in str(exc_info.value)
