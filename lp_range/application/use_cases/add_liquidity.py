from __future__ import annotations

import logging
import time
from typing import Callable

from lp_range.application.dto.add_liquidity import AddLiquidityInput, AddLiquidityOutput
from lp_range.application.ports.liquidity_event_port import LiquidityEventPort
from lp_range.application.ports.market_port import MarketPort
from lp_range.application.ports.position_manager_port import PositionManagerPort
from lp_range.application.ports.token_custody_port import TokenCustodyPort
from lp_range.application.use_cases.market_state_reader import read_market_state
from lp_range.domain.entities.liquidity import (
    LiquidityAddedEvent,
    MintParams,
    ProvisionResult,
    TickBounds,
)
from lp_range.domain.entities.market import MarketTokens
from lp_range.domain.exceptions import (
    ProvisioningFailedError,
    RefundFailedError,
    SettlementPendingError,
    TransferInFailedError,
    ZeroAmountError,
)
from lp_range.domain.services.tick_bounds import (
    TickRounding,
    compute_tick_bounds,
    truncate_tick_to_spacing,
)
from lp_range.shared.call_guard import CallGuard


logger = logging.getLogger(__name__)


def _unix_now() -> int:
    return int(time.time())


class AddLiquidityUseCase:
    """Provisiona uma posicao com faixa simetrica em torno do preco atual.

    Fluxo: valida -> calcula ticks -> escrow (transfer_from) -> approve ->
    mint -> devolve o que sobrou -> publica o evento. Nao ha transacao
    atomica do lado do host, entao toda falha depois do escrow devolve ao
    caller o que ainda esta custodiado antes de propagar o erro.

    Excecao: `SettlementPendingError` (instrucao enviada sem confirmacao)
    propaga sem compensacao, porque a devolucao poderia correr contra a
    instrucao pendente.
    """

    def __init__(
        self,
        *,
        market_port: MarketPort,
        position_manager_port: PositionManagerPort,
        custody_port: TokenCustodyPort,
        event_port: LiquidityEventPort,
        clock: Callable[[], int] = _unix_now,
        rounding: TickRounding = truncate_tick_to_spacing,
    ):
        self._market_port = market_port
        self._position_manager_port = position_manager_port
        self._custody_port = custody_port
        self._event_port = event_port
        self._clock = clock
        self._rounding = rounding
        self._guard = CallGuard("add_liquidity")

    def execute(self, command: AddLiquidityInput) -> AddLiquidityOutput:
        with self._guard:
            return self._execute(command)

    def _execute(self, command: AddLiquidityInput) -> AddLiquidityOutput:
        if command.amount0_desired <= 0 or command.amount1_desired <= 0:
            raise ZeroAmountError("amount0_desired and amount1_desired must be positive.")

        logger.info(
            "add_liquidity: start pool=%s caller=%s amount0=%s amount1=%s width_bps=%s",
            command.pool_address,
            command.caller,
            command.amount0_desired,
            command.amount1_desired,
            command.width_bps,
        )

        token0, token1 = self._market_port.get_token_addresses(pool_address=command.pool_address)
        tokens = MarketTokens(token0_address=token0, token1_address=token1)
        state = read_market_state(market_port=self._market_port, pool_address=command.pool_address)
        bounds = compute_tick_bounds(
            state=state,
            width_bps=command.width_bps,
            sqrt_price_to_tick=self._market_port.sqrt_price_to_tick,
            rounding=self._rounding,
        )
        logger.info(
            "add_liquidity: bounds pool=%s fee_tier=%s tick=%s tick_lower=%s tick_upper=%s",
            command.pool_address,
            state.fee_tier,
            state.tick,
            bounds.tick_lower,
            bounds.tick_upper,
        )

        self._transfer_in(tokens=tokens, command=command)
        result = self._mint(tokens=tokens, fee_tier=state.fee_tier, bounds=bounds, command=command)

        refund0 = command.amount0_desired - result.amount0_used
        refund1 = command.amount1_desired - result.amount1_used
        self._refund(tokens=tokens, caller=command.caller, amount0=refund0, amount1=refund1)

        self._event_port.publish_liquidity_added(
            LiquidityAddedEvent(
                caller=command.caller,
                amount0_used=result.amount0_used,
                amount1_used=result.amount1_used,
            )
        )
        logger.info(
            "add_liquidity: done position_id=%s liquidity=%s amount0_used=%s amount1_used=%s refund0=%s refund1=%s",
            result.position_id,
            result.liquidity,
            result.amount0_used,
            result.amount1_used,
            refund0,
            refund1,
        )
        return AddLiquidityOutput(
            position_id=result.position_id,
            liquidity=result.liquidity,
            amount0_used=result.amount0_used,
            amount1_used=result.amount1_used,
            amount0_refunded=refund0,
            amount1_refunded=refund1,
            tick_lower=bounds.tick_lower,
            tick_upper=bounds.tick_upper,
        )

    def _transfer_in(self, *, tokens: MarketTokens, command: AddLiquidityInput) -> None:
        escrow = self._custody_port.escrow_address
        try:
            self._custody_port.transfer_from(
                token=tokens.token0_address,
                owner=command.caller,
                dest=escrow,
                amount=command.amount0_desired,
            )
        except SettlementPendingError:
            logger.error("add_liquidity: token0 transfer_in pending caller=%s", command.caller)
            raise
        except Exception as exc:
            raise TransferInFailedError(f"token0 transfer into escrow failed: {exc}") from exc

        try:
            self._custody_port.transfer_from(
                token=tokens.token1_address,
                owner=command.caller,
                dest=escrow,
                amount=command.amount1_desired,
            )
        except SettlementPendingError:
            logger.error(
                "add_liquidity: token1 transfer_in pending, token0 held in escrow caller=%s amount0=%s",
                command.caller,
                command.amount0_desired,
            )
            raise
        except Exception as exc:
            logger.warning(
                "add_liquidity: token1 transfer_in failed, returning token0 caller=%s amount0=%s error=%s",
                command.caller,
                command.amount0_desired,
                exc,
            )
            self._send_back(
                token=tokens.token0_address,
                caller=command.caller,
                amount=command.amount0_desired,
            )
            raise TransferInFailedError(f"token1 transfer into escrow failed: {exc}") from exc

    def _mint(
        self,
        *,
        tokens: MarketTokens,
        fee_tier: int,
        bounds: TickBounds,
        command: AddLiquidityInput,
    ) -> ProvisionResult:
        spender = self._position_manager_port.address
        try:
            self._custody_port.approve(
                token=tokens.token0_address,
                spender=spender,
                amount=command.amount0_desired,
            )
            self._custody_port.approve(
                token=tokens.token1_address,
                spender=spender,
                amount=command.amount1_desired,
            )
            # deadline lido so depois dos approves, no momento do envio do mint
            params = MintParams(
                token0_address=tokens.token0_address,
                token1_address=tokens.token1_address,
                fee_tier=fee_tier,
                tick_lower=bounds.tick_lower,
                tick_upper=bounds.tick_upper,
                amount0_desired=command.amount0_desired,
                amount1_desired=command.amount1_desired,
                amount0_min=0,
                amount1_min=0,
                recipient=command.caller,
                deadline=self._clock(),
            )
            result = self._position_manager_port.mint(params)
        except SettlementPendingError:
            logger.error(
                "add_liquidity: mint pending, escrow not returned caller=%s amount0=%s amount1=%s",
                command.caller,
                command.amount0_desired,
                command.amount1_desired,
            )
            raise
        except Exception as exc:
            logger.warning("add_liquidity: mint failed caller=%s error=%s", command.caller, exc)
            self._refund(
                tokens=tokens,
                caller=command.caller,
                amount0=command.amount0_desired,
                amount1=command.amount1_desired,
            )
            raise ProvisioningFailedError(f"Position manager mint failed: {exc}") from exc

        if result.liquidity <= 0:
            logger.warning("add_liquidity: mint returned zero liquidity caller=%s", command.caller)
            self._refund_shortfall(tokens=tokens, command=command, result=result)
            raise ProvisioningFailedError("Position manager minted zero liquidity.")

        if result.amount0_used > command.amount0_desired or result.amount1_used > command.amount1_desired:
            logger.warning(
                "add_liquidity: mint reported usage above desired caller=%s amount0_used=%s amount1_used=%s",
                command.caller,
                result.amount0_used,
                result.amount1_used,
            )
            self._refund_shortfall(tokens=tokens, command=command, result=result)
            raise ProvisioningFailedError(
                "Position manager reported usage above the desired amounts "
                f"(amount0_used={result.amount0_used}, amount1_used={result.amount1_used})."
            )
        return result

    def _refund_shortfall(
        self,
        *,
        tokens: MarketTokens,
        command: AddLiquidityInput,
        result: ProvisionResult,
    ) -> None:
        self._refund(
            tokens=tokens,
            caller=command.caller,
            amount0=max(command.amount0_desired - result.amount0_used, 0),
            amount1=max(command.amount1_desired - result.amount1_used, 0),
        )

    def _refund(self, *, tokens: MarketTokens, caller: str, amount0: int, amount1: int) -> None:
        if amount0 > 0:
            self._send_back(token=tokens.token0_address, caller=caller, amount=amount0)
        if amount1 > 0:
            self._send_back(token=tokens.token1_address, caller=caller, amount=amount1)

    def _send_back(self, *, token: str, caller: str, amount: int) -> None:
        try:
            self._custody_port.transfer(token=token, dest=caller, amount=amount)
        except SettlementPendingError:
            logger.error("add_liquidity: refund pending token=%s caller=%s amount=%s", token, caller, amount)
            raise
        except Exception as exc:
            raise RefundFailedError(f"Refund of {amount} {token} to {caller} failed: {exc}") from exc
