from __future__ import annotations

import logging

from lp_range.domain.entities.liquidity import LiquidityAddedEvent


logger = logging.getLogger(__name__)


class LoggingLiquidityEventPublisher:
    def publish_liquidity_added(self, event: LiquidityAddedEvent) -> None:
        logger.info(
            "liquidity_added: caller=%s amount0_used=%s amount1_used=%s",
            event.caller,
            event.amount0_used,
            event.amount1_used,
        )
