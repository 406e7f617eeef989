from __future__ import annotations

import math

import pytest

from lp_range.application.dto.tick_bounds import ComputeTickBoundsInput
from lp_range.application.use_cases.compute_tick_bounds import ComputeTickBoundsUseCase
from lp_range.domain.exceptions import UnsupportedFeeTierError
from lp_range.domain.services.tick_bounds import floor_tick_to_spacing
from lp_range.domain.services.univ3_math import get_tick_at_sqrt_ratio


class FakeMarketPort:
    def __init__(self, *, fee_tier: int, sqrt_price_x96: int):
        self._fee_tier = fee_tier
        self._sqrt_price_x96 = sqrt_price_x96
        self.token_reads = 0

    def get_token_addresses(self, *, pool_address: str) -> tuple[str, str]:
        self.token_reads += 1
        return "0xt0", "0xt1"

    def get_fee_tier(self, *, pool_address: str) -> int:
        return self._fee_tier

    def get_current_state(self, *, pool_address: str) -> tuple[int, int]:
        return self._sqrt_price_x96, get_tick_at_sqrt_ratio(self._sqrt_price_x96)

    def sqrt_price_to_tick(self, sqrt_price_x96: int) -> int:
        return get_tick_at_sqrt_ratio(sqrt_price_x96)


def test_preview_returns_market_snapshot_and_bounds():
    sqrt_price = math.isqrt(2000 << 192)
    market = FakeMarketPort(fee_tier=3000, sqrt_price_x96=sqrt_price)
    use_case = ComputeTickBoundsUseCase(market_port=market)

    result = use_case.execute(ComputeTickBoundsInput(pool_address="0xpool", width_bps=100))

    assert result.pool_address == "0xpool"
    assert result.fee_tier == 3000
    assert result.tick_spacing == 60
    assert result.current_tick == 76012
    assert result.sqrt_price_x96 == sqrt_price
    assert (result.tick_lower, result.tick_upper) == (75900, 76080)
    assert market.token_reads == 0


def test_preview_uses_configured_rounding():
    market = FakeMarketPort(fee_tier=500, sqrt_price_x96=math.isqrt((1 << 192) // 2000))
    use_case = ComputeTickBoundsUseCase(market_port=market, rounding=floor_tick_to_spacing)

    result = use_case.execute(ComputeTickBoundsInput(pool_address="0xpool", width_bps=100))

    assert (result.tick_lower, result.tick_upper) == (-76120, -75920)


def test_preview_propagates_unsupported_fee_tier():
    market = FakeMarketPort(fee_tier=123, sqrt_price_x96=2**96)
    use_case = ComputeTickBoundsUseCase(market_port=market)

    with pytest.raises(UnsupportedFeeTierError):
        use_case.execute(ComputeTickBoundsInput(pool_address="0xpool", width_bps=100))
