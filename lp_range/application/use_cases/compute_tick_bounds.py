from __future__ import annotations

import logging

from lp_range.application.dto.tick_bounds import ComputeTickBoundsInput, ComputeTickBoundsOutput
from lp_range.application.ports.market_port import MarketPort
from lp_range.application.use_cases.market_state_reader import read_market_state
from lp_range.domain.services.tick_bounds import (
    TickRounding,
    compute_tick_bounds,
    truncate_tick_to_spacing,
)


logger = logging.getLogger(__name__)


class ComputeTickBoundsUseCase:
    def __init__(self, *, market_port: MarketPort, rounding: TickRounding = truncate_tick_to_spacing):
        self._market_port = market_port
        self._rounding = rounding

    def execute(self, command: ComputeTickBoundsInput) -> ComputeTickBoundsOutput:
        state = read_market_state(market_port=self._market_port, pool_address=command.pool_address)
        bounds = compute_tick_bounds(
            state=state,
            width_bps=command.width_bps,
            sqrt_price_to_tick=self._market_port.sqrt_price_to_tick,
            rounding=self._rounding,
        )
        logger.info(
            "compute_tick_bounds: pool=%s fee_tier=%s tick=%s width_bps=%s tick_lower=%s tick_upper=%s",
            command.pool_address,
            state.fee_tier,
            state.tick,
            command.width_bps,
            bounds.tick_lower,
            bounds.tick_upper,
        )
        return ComputeTickBoundsOutput(
            pool_address=command.pool_address,
            fee_tier=state.fee_tier,
            tick_spacing=bounds.tick_spacing,
            current_tick=state.tick,
            sqrt_price_x96=state.sqrt_price_x96,
            tick_lower=bounds.tick_lower,
            tick_upper=bounds.tick_upper,
        )
