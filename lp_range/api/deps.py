from __future__ import annotations

from functools import lru_cache

from fastapi import HTTPException
from web3 import Web3

from lp_range.application.use_cases.add_liquidity import AddLiquidityUseCase
from lp_range.application.use_cases.compute_tick_bounds import ComputeTickBoundsUseCase
from lp_range.infrastructure.clients.erc20_custody_client import Web3Erc20CustodyClient
from lp_range.infrastructure.clients.liquidity_event_logger import LoggingLiquidityEventPublisher
from lp_range.infrastructure.clients.position_manager_client import Web3PositionManagerClient
from lp_range.infrastructure.clients.web3_market_client import Web3MarketClient
from lp_range.infrastructure.clients.web3_transactions import (
    Web3TransactionSender,
    Web3TransactionSettings,
    connect_web3,
)
from lp_range.shared.config import get_settings


@lru_cache(maxsize=1)
def _get_web3() -> Web3:
    settings = get_settings()
    if not settings.rpc_url:
        raise HTTPException(status_code=500, detail="RPC_URL is required.")
    return connect_web3(settings.rpc_url)


@lru_cache(maxsize=1)
def _get_transaction_sender() -> Web3TransactionSender:
    settings = get_settings()
    if not settings.escrow_address or not settings.escrow_private_key:
        raise HTTPException(status_code=500, detail="ESCROW_ADDRESS and ESCROW_PRIVATE_KEY are required.")
    return Web3TransactionSender(
        _get_web3(),
        Web3TransactionSettings(
            chain_id=settings.chain_id,
            sender_address=settings.escrow_address,
            sender_private_key=settings.escrow_private_key,
            gas_limit=settings.tx_gas_limit,
            receipt_timeout_seconds=settings.tx_receipt_timeout_seconds,
            max_priority_fee_wei=settings.max_priority_fee_wei,
        ),
    )


@lru_cache(maxsize=1)
def _get_market_client() -> Web3MarketClient:
    return Web3MarketClient(_get_web3())


def get_compute_tick_bounds_use_case() -> ComputeTickBoundsUseCase:
    return ComputeTickBoundsUseCase(market_port=_get_market_client())


@lru_cache(maxsize=1)
def get_add_liquidity_use_case() -> AddLiquidityUseCase:
    settings = get_settings()
    sender = _get_transaction_sender()
    return AddLiquidityUseCase(
        market_port=_get_market_client(),
        position_manager_port=Web3PositionManagerClient(
            _get_web3(),
            sender,
            position_manager_address=settings.position_manager_address,
        ),
        custody_port=Web3Erc20CustodyClient(_get_web3(), sender),
        event_port=LoggingLiquidityEventPublisher(),
    )
