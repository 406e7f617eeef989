from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ComputeTickBoundsInput:
    pool_address: str
    width_bps: int


@dataclass(frozen=True)
class ComputeTickBoundsOutput:
    pool_address: str
    fee_tier: int
    tick_spacing: int
    current_tick: int
    sqrt_price_x96: int
    tick_lower: int
    tick_upper: int
