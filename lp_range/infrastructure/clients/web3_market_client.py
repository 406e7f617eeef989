from __future__ import annotations

from web3 import Web3

from lp_range.domain.services.univ3_math import get_tick_at_sqrt_ratio
from lp_range.infrastructure.clients.abis import UNIV3_POOL_ABI


class Web3MarketClient:
    def __init__(self, web3: Web3):
        self._web3 = web3

    def get_token_addresses(self, *, pool_address: str) -> tuple[str, str]:
        pool = self._pool(pool_address)
        token0 = pool.functions.token0().call()
        token1 = pool.functions.token1().call()
        return Web3.to_checksum_address(token0), Web3.to_checksum_address(token1)

    def get_fee_tier(self, *, pool_address: str) -> int:
        return int(self._pool(pool_address).functions.fee().call())

    def get_current_state(self, *, pool_address: str) -> tuple[int, int]:
        slot0 = self._pool(pool_address).functions.slot0().call()
        return int(slot0[0]), int(slot0[1])

    def sqrt_price_to_tick(self, sqrt_price_x96: int) -> int:
        return get_tick_at_sqrt_ratio(sqrt_price_x96)

    def _pool(self, pool_address: str):
        return self._web3.eth.contract(
            address=Web3.to_checksum_address(pool_address),
            abi=UNIV3_POOL_ABI,
        )
