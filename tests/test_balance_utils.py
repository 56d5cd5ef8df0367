"""
Tests for SOL and SPL balance lookups.
"""

import pytest
from unittest.mock import patch, AsyncMock, MagicMock
from solders.keypair import Keypair
from spl.token.constants import TOKEN_PROGRAM_ID

from solagent.errors import BalanceError, MintLookupError, ParseError
from solagent.utils.balance import get_balance
from conftest import USDC_MINT


@pytest.fixture
def owner():
    return Keypair().pubkey()


@pytest.fixture
def token_program():
    with patch(
        "solagent.utils.balance.get_token_program",
        new=AsyncMock(return_value=TOKEN_PROGRAM_ID),
    ) as mock_program:
        yield mock_program


class TestSolBalance:
    @pytest.mark.asyncio
    async def test_lamports_converted(self, owner):
        client = MagicMock()
        client.get_balance = AsyncMock(return_value=MagicMock(value=2_500_000_000))

        assert await get_balance(client, owner) == 2.5
        assert client.get_balance.call_args[0][0] == owner

    @pytest.mark.asyncio
    async def test_native_mint_is_sol(self, owner):
        client = MagicMock()
        client.get_balance = AsyncMock(return_value=MagicMock(value=1_000_000_000))

        result = await get_balance(
            client, owner, "So11111111111111111111111111111111111111112"
        )

        assert result == 1.0

    @pytest.mark.asyncio
    async def test_rpc_failure(self, owner):
        client = MagicMock()
        client.get_balance = AsyncMock(side_effect=Exception("connection reset"))

        with pytest.raises(BalanceError) as exc_info:
            await get_balance(client, owner)

        assert "connection reset" in str(exc_info.value)


class TestTokenBalance:
    @pytest.mark.asyncio
    async def test_ui_amount(self, owner, token_program):
        client = MagicMock()
        client.get_account_info = AsyncMock(return_value=MagicMock(value=MagicMock()))
        client.get_token_account_balance = AsyncMock(
            return_value=MagicMock(value=MagicMock(ui_amount_string="12.5"))
        )

        assert await get_balance(client, owner, USDC_MINT) == 12.5

    @pytest.mark.asyncio
    async def test_missing_token_account(self, owner, token_program):
        client = MagicMock()
        client.get_account_info = AsyncMock(return_value=MagicMock(value=None))
        client.get_token_account_balance = AsyncMock()

        assert await get_balance(client, owner, USDC_MINT) == 0.0
        client.get_token_account_balance.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_mint_propagates(self, owner):
        client = MagicMock()

        with patch(
            "solagent.utils.balance.get_token_program",
            new=AsyncMock(side_effect=MintLookupError("Mint account not found")),
        ):
            with pytest.raises(MintLookupError):
                await get_balance(client, owner, USDC_MINT)

    @pytest.mark.asyncio
    async def test_invalid_token_address(self, owner):
        with pytest.raises(ParseError):
            await get_balance(MagicMock(), owner, "xyz")
