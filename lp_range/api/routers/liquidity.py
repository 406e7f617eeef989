from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from lp_range.api.deps import get_add_liquidity_use_case, get_compute_tick_bounds_use_case
from lp_range.api.schemas.liquidity import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    TickBoundsRequest,
    TickBoundsResponse,
)
from lp_range.application.dto.add_liquidity import AddLiquidityInput
from lp_range.application.dto.tick_bounds import ComputeTickBoundsInput
from lp_range.application.use_cases.add_liquidity import AddLiquidityUseCase
from lp_range.application.use_cases.compute_tick_bounds import ComputeTickBoundsUseCase
from lp_range.domain.exceptions import (
    InvalidPriceBandError,
    ProvisioningFailedError,
    ReentrantCallError,
    RefundFailedError,
    SettlementPendingError,
    TickRangeInvalidError,
    TransferInFailedError,
    UnsupportedFeeTierError,
    ZeroAmountError,
)

router = APIRouter()
logger = logging.getLogger(__name__)

_BAD_INPUT_ERRORS = (
    ZeroAmountError,
    UnsupportedFeeTierError,
    InvalidPriceBandError,
    TickRangeInvalidError,
)


@router.post("/v1/liquidity/bounds", response_model=TickBoundsResponse)
def preview_tick_bounds(
    req: TickBoundsRequest,
    use_case: ComputeTickBoundsUseCase = Depends(get_compute_tick_bounds_use_case),
):
    try:
        result = use_case.execute(
            ComputeTickBoundsInput(pool_address=req.pool_address, width_bps=req.width_bps)
        )
    except _BAD_INPUT_ERRORS as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return TickBoundsResponse(
        pool_address=result.pool_address,
        fee_tier=result.fee_tier,
        tick_spacing=result.tick_spacing,
        current_tick=result.current_tick,
        sqrt_price_x96=str(result.sqrt_price_x96),
        tick_lower=result.tick_lower,
        tick_upper=result.tick_upper,
    )


@router.post("/v1/liquidity", response_model=AddLiquidityResponse)
def add_liquidity(
    req: AddLiquidityRequest,
    use_case: AddLiquidityUseCase = Depends(get_add_liquidity_use_case),
):
    try:
        result = use_case.execute(
            AddLiquidityInput(
                pool_address=req.pool_address,
                caller=req.caller,
                amount0_desired=req.amount0_desired,
                amount1_desired=req.amount1_desired,
                width_bps=req.width_bps,
            )
        )
    except _BAD_INPUT_ERRORS as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ReentrantCallError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except SettlementPendingError as exc:
        logger.error("add_liquidity: settlement pending pool=%s caller=%s error=%s", req.pool_address, req.caller, exc)
        raise HTTPException(status_code=504, detail=str(exc)) from exc
    except (TransferInFailedError, ProvisioningFailedError) as exc:
        logger.warning("add_liquidity: collaborator failure pool=%s error=%s", req.pool_address, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except RefundFailedError as exc:
        logger.error("add_liquidity: refund failed pool=%s caller=%s error=%s", req.pool_address, req.caller, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return AddLiquidityResponse(
        position_id=result.position_id,
        liquidity=str(result.liquidity),
        amount0_used=str(result.amount0_used),
        amount1_used=str(result.amount1_used),
        amount0_refunded=str(result.amount0_refunded),
        amount1_refunded=str(result.amount1_refunded),
        tick_lower=result.tick_lower,
        tick_upper=result.tick_upper,
    )
