from __future__ import annotations

from typing import Protocol


class MarketPort(Protocol):
    def get_token_addresses(self, *, pool_address: str) -> tuple[str, str]:
        ...

    def get_fee_tier(self, *, pool_address: str) -> int:
        ...

    def get_current_state(self, *, pool_address: str) -> tuple[int, int]:
        ...

    def sqrt_price_to_tick(self, sqrt_price_x96: int) -> int:
        ...
