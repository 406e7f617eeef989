from __future__ import annotations

from types import MappingProxyType
from typing import Callable

from lp_range.domain.entities.liquidity import PriceBand, TickBounds
from lp_range.domain.entities.market import MarketState
from lp_range.domain.exceptions import (
    InvalidPriceBandError,
    TickRangeInvalidError,
    UnsupportedFeeTierError,
)
from lp_range.domain.services.univ3_math import (
    MAX_SQRT_RATIO,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MIN_TICK,
    UINT256_MAX,
    isqrt_babylonian,
)


BPS_DENOMINATOR = 10_000

# fee (centesimos de bps) -> tick spacing
TICK_SPACINGS = MappingProxyType(
    {
        100: 1,
        500: 10,
        3000: 60,
        10000: 200,
    }
)

TickRounding = Callable[[int, int], int]


def tick_spacing_for_fee(fee_tier: int) -> int:
    spacing = TICK_SPACINGS.get(fee_tier)
    if spacing is None:
        raise UnsupportedFeeTierError(f"Unsupported fee tier: {fee_tier}.")
    return spacing


def truncate_tick_to_spacing(tick: int, tick_spacing: int) -> int:
    """Alinha o tick ao spacing com divisao inteira truncada em direcao a zero.

    Para ticks negativos o resultado fica mais perto de zero, nao abaixo do
    tick original (ex.: -65 com spacing 60 -> -60). E o comportamento de
    referencia; a variante com floor e `floor_tick_to_spacing`.
    """
    quotient = abs(tick) // tick_spacing
    if tick < 0:
        quotient = -quotient
    return quotient * tick_spacing


def floor_tick_to_spacing(tick: int, tick_spacing: int) -> int:
    return (tick // tick_spacing) * tick_spacing


def derive_price_band(*, sqrt_price_x96: int, width_bps: int) -> PriceBand:
    if width_bps < 0:
        raise InvalidPriceBandError("width_bps must be non-negative.")

    price_x96 = _checked_uint256((sqrt_price_x96 * sqrt_price_x96) >> 64, "price_x96")
    scaled = _checked_uint256(price_x96 * width_bps, "price_x96 * width_bps")
    delta_x96 = scaled // BPS_DENOMINATOR

    lower_price_x96 = price_x96 - delta_x96
    upper_price_x96 = _checked_uint256(price_x96 + delta_x96, "upper_price_x96")
    if lower_price_x96 <= 0:
        raise InvalidPriceBandError(
            f"Lower price collapses to zero or below for width_bps={width_bps}."
        )
    return PriceBand(lower_price_x96=lower_price_x96, upper_price_x96=upper_price_x96)


def band_to_sqrt_prices(band: PriceBand) -> tuple[int, int]:
    lower_x192 = _checked_uint256(band.lower_price_x96 << 64, "lower_price_x96 << 64")
    upper_x192 = _checked_uint256(band.upper_price_x96 << 64, "upper_price_x96 << 64")
    return isqrt_babylonian(lower_x192), isqrt_babylonian(upper_x192)


def validate_tick_bounds(*, tick_lower: int, tick_upper: int, tick_spacing: int) -> TickBounds:
    if tick_lower < MIN_TICK:
        raise TickRangeInvalidError(
            TickRangeInvalidError.TOO_LOW,
            f"tick_lower {tick_lower} is below MIN_TICK {MIN_TICK}.",
        )
    if tick_upper > MAX_TICK:
        raise TickRangeInvalidError(
            TickRangeInvalidError.TOO_HIGH,
            f"tick_upper {tick_upper} is above MAX_TICK {MAX_TICK}.",
        )
    if tick_lower >= tick_upper:
        raise TickRangeInvalidError(
            TickRangeInvalidError.INVERTED,
            f"tick_lower {tick_lower} must be lower than tick_upper {tick_upper}.",
        )
    return TickBounds(tick_lower=tick_lower, tick_upper=tick_upper, tick_spacing=tick_spacing)


def compute_tick_bounds(
    *,
    state: MarketState,
    width_bps: int,
    sqrt_price_to_tick: Callable[[int], int],
    rounding: TickRounding = truncate_tick_to_spacing,
) -> TickBounds:
    spacing = tick_spacing_for_fee(state.fee_tier)
    band = derive_price_band(sqrt_price_x96=state.sqrt_price_x96, width_bps=width_bps)
    sqrt_lower, sqrt_upper = band_to_sqrt_prices(band)

    # A primitiva do mercado so aceita [MIN_SQRT_RATIO, MAX_SQRT_RATIO).
    if sqrt_lower < MIN_SQRT_RATIO:
        raise TickRangeInvalidError(
            TickRangeInvalidError.TOO_LOW,
            f"Lower sqrt price {sqrt_lower} is below MIN_SQRT_RATIO.",
        )
    if sqrt_upper >= MAX_SQRT_RATIO:
        raise TickRangeInvalidError(
            TickRangeInvalidError.TOO_HIGH,
            f"Upper sqrt price {sqrt_upper} is not below MAX_SQRT_RATIO.",
        )

    tick_lower = rounding(sqrt_price_to_tick(sqrt_lower), spacing)
    tick_upper = rounding(sqrt_price_to_tick(sqrt_upper), spacing)
    return validate_tick_bounds(tick_lower=tick_lower, tick_upper=tick_upper, tick_spacing=spacing)


def _checked_uint256(value: int, label: str) -> int:
    if value > UINT256_MAX:
        raise InvalidPriceBandError(f"{label} overflows uint256.")
    return value
