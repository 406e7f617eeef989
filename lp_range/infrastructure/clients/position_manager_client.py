from __future__ import annotations

import logging

from web3 import Web3
from web3.logs import DISCARD

from lp_range.domain.entities.liquidity import MintParams, ProvisionResult
from lp_range.infrastructure.clients.abis import POSITION_MANAGER_ABI
from lp_range.infrastructure.clients.web3_transactions import Web3TransactionSender


logger = logging.getLogger(__name__)


class MintEventNotFoundError(RuntimeError):
    pass


class Web3PositionManagerClient:
    def __init__(self, web3: Web3, sender: Web3TransactionSender, *, position_manager_address: str):
        self._sender = sender
        self._address = Web3.to_checksum_address(position_manager_address)
        self._contract = web3.eth.contract(address=self._address, abi=POSITION_MANAGER_ABI)

    @property
    def address(self) -> str:
        return self._address

    def mint(self, params: MintParams) -> ProvisionResult:
        call = self._contract.functions.mint(
            (
                Web3.to_checksum_address(params.token0_address),
                Web3.to_checksum_address(params.token1_address),
                params.fee_tier,
                params.tick_lower,
                params.tick_upper,
                params.amount0_desired,
                params.amount1_desired,
                params.amount0_min,
                params.amount1_min,
                Web3.to_checksum_address(params.recipient),
                params.deadline,
            )
        )
        receipt = self._sender.send(call, label="mint")
        return self._decode_mint_receipt(receipt)

    def _decode_mint_receipt(self, receipt) -> ProvisionResult:
        events = self._contract.events.IncreaseLiquidity().process_receipt(receipt, errors=DISCARD)
        if not events:
            raise MintEventNotFoundError("IncreaseLiquidity event not found in mint receipt.")
        args = events[0]["args"]
        result = ProvisionResult(
            position_id=int(args["tokenId"]),
            liquidity=int(args["liquidity"]),
            amount0_used=int(args["amount0"]),
            amount1_used=int(args["amount1"]),
        )
        logger.info(
            "position_manager: minted position_id=%s liquidity=%s amount0=%s amount1=%s",
            result.position_id,
            result.liquidity,
            result.amount0_used,
            result.amount1_used,
        )
        return result
