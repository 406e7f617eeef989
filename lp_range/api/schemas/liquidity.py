from __future__ import annotations

from pydantic import BaseModel, Field


class TickBoundsRequest(BaseModel):
    pool_address: str = Field(..., description="Endereco da pool Uniswap V3.")
    width_bps: int = Field(..., ge=0, description="Meia largura da faixa em basis points (10000 = 100%).")


class TickBoundsResponse(BaseModel):
    pool_address: str
    fee_tier: int
    tick_spacing: int
    current_tick: int
    sqrt_price_x96: str
    tick_lower: int
    tick_upper: int


class AddLiquidityRequest(BaseModel):
    pool_address: str = Field(..., description="Endereco da pool Uniswap V3.")
    caller: str = Field(..., description="Dono dos tokens e recipient da posicao.")
    amount0_desired: int = Field(..., ge=0, description="Quantidade de token0 em unidades nativas.")
    amount1_desired: int = Field(..., ge=0, description="Quantidade de token1 em unidades nativas.")
    width_bps: int = Field(..., ge=0, description="Meia largura da faixa em basis points (10000 = 100%).")


class AddLiquidityResponse(BaseModel):
    position_id: int
    liquidity: str
    amount0_used: str
    amount1_used: str
    amount0_refunded: str
    amount1_refunded: str
    tick_lower: int
    tick_upper: int
