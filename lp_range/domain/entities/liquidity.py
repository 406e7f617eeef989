from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PriceBand:
    lower_price_x96: int
    upper_price_x96: int


@dataclass(frozen=True)
class TickBounds:
    tick_lower: int
    tick_upper: int
    tick_spacing: int


@dataclass(frozen=True)
class MintParams:
    token0_address: str
    token1_address: str
    fee_tier: int
    tick_lower: int
    tick_upper: int
    amount0_desired: int
    amount1_desired: int
    amount0_min: int
    amount1_min: int
    recipient: str
    deadline: int


@dataclass(frozen=True)
class ProvisionResult:
    position_id: int
    liquidity: int
    amount0_used: int
    amount1_used: int


@dataclass(frozen=True)
class LiquidityAddedEvent:
    caller: str
    amount0_used: int
    amount1_used: int
