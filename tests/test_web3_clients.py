from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
from web3 import Web3
from web3.exceptions import TimeExhausted

from lp_range.domain.entities.liquidity import LiquidityAddedEvent, MintParams
from lp_range.domain.exceptions import SettlementPendingError
from lp_range.infrastructure.clients.erc20_custody_client import Web3Erc20CustodyClient
from lp_range.infrastructure.clients.liquidity_event_logger import LoggingLiquidityEventPublisher
from lp_range.infrastructure.clients.position_manager_client import (
    MintEventNotFoundError,
    Web3PositionManagerClient,
)
from lp_range.infrastructure.clients.web3_market_client import Web3MarketClient
from lp_range.infrastructure.clients.web3_transactions import (
    TransactionPendingError,
    TransactionRevertedError,
    Web3TransactionSender,
    Web3TransactionSettings,
)


POOL = "0x" + "11" * 20
TOKEN0 = "0x" + "22" * 20
TOKEN1 = "0x" + "33" * 20
CALLER = "0x" + "44" * 20
ESCROW = "0x" + "55" * 20
POSITION_MANAGER = "0x" + "66" * 20


def _settings() -> Web3TransactionSettings:
    return Web3TransactionSettings(
        chain_id=1,
        sender_address=ESCROW,
        sender_private_key="0x" + "ab" * 32,
        gas_limit=600_000,
        receipt_timeout_seconds=30,
        max_priority_fee_wei=2,
    )


def _web3(status: int = 1) -> MagicMock:
    web3 = MagicMock()
    web3.eth.get_block.return_value = {"baseFeePerGas": 10}
    web3.eth.get_transaction_count.return_value = 7
    web3.eth.send_raw_transaction.return_value = b"\x01" * 32
    web3.eth.wait_for_transaction_receipt.return_value = {"status": status, "logs": []}
    return web3


class TestWeb3TransactionSender:
    def test_builds_eip1559_transaction_and_returns_receipt(self):
        web3 = _web3()
        sender = Web3TransactionSender(web3, _settings())
        call = MagicMock()

        receipt = sender.send(call, label="approve")

        tx_params = call.build_transaction.call_args.args[0]
        assert tx_params["from"] == Web3.to_checksum_address(ESCROW)
        assert tx_params["nonce"] == 7
        assert tx_params["gas"] == 600_000
        assert tx_params["maxFeePerGas"] == 22
        assert tx_params["maxPriorityFeePerGas"] == 2
        assert tx_params["type"] == "0x2"
        assert tx_params["chainId"] == 1
        web3.eth.get_transaction_count.assert_called_once_with(Web3.to_checksum_address(ESCROW), "pending")
        web3.eth.wait_for_transaction_receipt.assert_called_once_with(b"\x01" * 32, timeout=30)
        assert receipt["status"] == 1

    def test_reverted_receipt_raises(self):
        sender = Web3TransactionSender(_web3(status=0), _settings())

        with pytest.raises(TransactionRevertedError, match="mint reverted"):
            sender.send(MagicMock(), label="mint")

    def test_receipt_timeout_is_reported_as_pending(self):
        web3 = _web3()
        web3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("not mined")
        sender = Web3TransactionSender(web3, _settings())

        with pytest.raises(TransactionPendingError, match="mint not mined within 30s") as exc_info:
            sender.send(MagicMock(), label="mint")
        assert isinstance(exc_info.value, SettlementPendingError)
        assert isinstance(exc_info.value.__cause__, TimeExhausted)


class TestWeb3MarketClient:
    def test_reads_pool_state(self):
        web3 = MagicMock()
        pool = web3.eth.contract.return_value
        pool.functions.token0.return_value.call.return_value = TOKEN0
        pool.functions.token1.return_value.call.return_value = TOKEN1
        pool.functions.fee.return_value.call.return_value = 3000
        pool.functions.slot0.return_value.call.return_value = [2**96, 0, 1, 1, 1, 0, True]
        client = Web3MarketClient(web3)

        assert client.get_token_addresses(pool_address=POOL) == (
            Web3.to_checksum_address(TOKEN0),
            Web3.to_checksum_address(TOKEN1),
        )
        assert client.get_fee_tier(pool_address=POOL) == 3000
        assert client.get_current_state(pool_address=POOL) == (2**96, 0)
        assert client.sqrt_price_to_tick(2**96) == 0
        assert web3.eth.contract.call_args.kwargs["address"] == Web3.to_checksum_address(POOL)


class TestWeb3Erc20CustodyClient:
    def test_routes_token_calls_through_escrow_sender(self):
        web3 = MagicMock()
        token = web3.eth.contract.return_value
        sender = MagicMock()
        sender.sender_address = Web3.to_checksum_address(ESCROW)
        client = Web3Erc20CustodyClient(web3, sender)

        client.transfer_from(token=TOKEN0, owner=CALLER, dest=ESCROW, amount=100)
        client.approve(token=TOKEN0, spender=POSITION_MANAGER, amount=100)
        client.transfer(token=TOKEN0, dest=CALLER, amount=25)

        assert client.escrow_address == Web3.to_checksum_address(ESCROW)
        token.functions.transferFrom.assert_called_once_with(
            Web3.to_checksum_address(CALLER),
            Web3.to_checksum_address(ESCROW),
            100,
        )
        token.functions.approve.assert_called_once_with(Web3.to_checksum_address(POSITION_MANAGER), 100)
        token.functions.transfer.assert_called_once_with(Web3.to_checksum_address(CALLER), 25)
        assert sender.send.call_count == 3

    def test_failed_transaction_propagates(self):
        sender = MagicMock()
        sender.send.side_effect = TransactionRevertedError("transferFrom reverted")
        client = Web3Erc20CustodyClient(MagicMock(), sender)

        with pytest.raises(TransactionRevertedError):
            client.transfer_from(token=TOKEN0, owner=CALLER, dest=ESCROW, amount=100)


class TestWeb3PositionManagerClient:
    def _params(self) -> MintParams:
        return MintParams(
            token0_address=TOKEN0,
            token1_address=TOKEN1,
            fee_tier=3000,
            tick_lower=75900,
            tick_upper=76080,
            amount0_desired=100_000,
            amount1_desired=100,
            amount0_min=0,
            amount1_min=0,
            recipient=CALLER,
            deadline=1_700_000_000,
        )

    def test_mint_encodes_params_and_decodes_event(self):
        web3 = MagicMock()
        contract = web3.eth.contract.return_value
        contract.events.IncreaseLiquidity.return_value.process_receipt.return_value = [
            {"args": {"tokenId": 9, "liquidity": 12345, "amount0": 75_000, "amount1": 100}}
        ]
        sender = MagicMock()
        client = Web3PositionManagerClient(web3, sender, position_manager_address=POSITION_MANAGER)

        result = client.mint(self._params())

        mint_tuple = contract.functions.mint.call_args.args[0]
        assert mint_tuple == (
            Web3.to_checksum_address(TOKEN0),
            Web3.to_checksum_address(TOKEN1),
            3000,
            75900,
            76080,
            100_000,
            100,
            0,
            0,
            Web3.to_checksum_address(CALLER),
            1_700_000_000,
        )
        assert sender.send.call_args.kwargs["label"] == "mint"
        assert client.address == Web3.to_checksum_address(POSITION_MANAGER)
        assert (result.position_id, result.liquidity, result.amount0_used, result.amount1_used) == (
            9,
            12345,
            75_000,
            100,
        )

    def test_missing_event_raises(self):
        web3 = MagicMock()
        web3.eth.contract.return_value.events.IncreaseLiquidity.return_value.process_receipt.return_value = []
        client = Web3PositionManagerClient(web3, MagicMock(), position_manager_address=POSITION_MANAGER)

        with pytest.raises(MintEventNotFoundError):
            client.mint(self._params())


def test_event_publisher_logs_used_amounts(caplog):
    caplog.set_level(logging.INFO, logger="lp_range.infrastructure.clients.liquidity_event_logger")

    LoggingLiquidityEventPublisher().publish_liquidity_added(
        LiquidityAddedEvent(caller=CALLER, amount0_used=75_000, amount1_used=100)
    )

    assert "liquidity_added" in caplog.text
    assert "amount0_used=75000" in caplog.text
    assert CALLER in caplog.text
