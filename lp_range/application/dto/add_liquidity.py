from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AddLiquidityInput:
    pool_address: str
    caller: str
    amount0_desired: int
    amount1_desired: int
    width_bps: int


@dataclass(frozen=True)
class AddLiquidityOutput:
    position_id: int
    liquidity: int
    amount0_used: int
    amount1_used: int
    amount0_refunded: int
    amount1_refunded: int
    tick_lower: int
    tick_upper: int
