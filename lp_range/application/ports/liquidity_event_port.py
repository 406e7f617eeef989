from __future__ import annotations

from typing import Protocol

from lp_range.domain.entities.liquidity import LiquidityAddedEvent


class LiquidityEventPort(Protocol):
    def publish_liquidity_added(self, event: LiquidityAddedEvent) -> None:
        ...
