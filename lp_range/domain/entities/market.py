from __future__ import annotations

from dataclasses import dataclass

from lp_range.domain.exceptions import InvalidPriceBandError


@dataclass(frozen=True)
class MarketState:
    sqrt_price_x96: int
    tick: int
    fee_tier: int

    def __post_init__(self) -> None:
        if self.sqrt_price_x96 <= 0:
            raise InvalidPriceBandError("sqrt_price_x96 must be positive.")


@dataclass(frozen=True)
class MarketTokens:
    token0_address: str
    token1_address: str
