from __future__ import annotations

from lp_range.application.ports.market_port import MarketPort
from lp_range.domain.entities.market import MarketState


def read_market_state(*, market_port: MarketPort, pool_address: str) -> MarketState:
    fee_tier = market_port.get_fee_tier(pool_address=pool_address)
    sqrt_price_x96, tick = market_port.get_current_state(pool_address=pool_address)
    return MarketState(sqrt_price_x96=int(sqrt_price_x96), tick=int(tick), fee_tier=int(fee_tier))
