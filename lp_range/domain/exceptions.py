from __future__ import annotations


class DomainError(Exception):
    """Base para erros de dominio."""


class ZeroAmountError(DomainError):
    """Quantidade desejada de algum token e zero."""


class UnsupportedFeeTierError(DomainError):
    """Fee tier sem tick spacing conhecido."""


class InvalidPriceBandError(DomainError):
    """Faixa de preco derivada e invalida (preco inferior <= 0 ou overflow)."""


class TickRangeInvalidError(DomainError):
    """Ticks finais fora do intervalo permitido ou invertidos."""

    TOO_LOW = "too_low"
    TOO_HIGH = "too_high"
    INVERTED = "inverted"

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


class TransferInFailedError(DomainError):
    """Nao foi possivel mover os tokens do caller para o escrow."""


class ProvisioningFailedError(DomainError):
    """Position manager rejeitou o mint ou nao gerou liquidez."""


class RefundFailedError(DomainError):
    """Nao foi possivel devolver ao caller o saldo nao utilizado."""


class ReentrantCallError(DomainError):
    """Ja existe um add_liquidity em andamento nesta instancia."""


class SettlementPendingError(DomainError):
    """Instrucao enviada sem confirmacao; o resultado ainda e desconhecido.

    Nenhuma compensacao automatica e feita: uma devolucao enviada agora pode
    ser executada antes ou depois da instrucao pendente. O escrow precisa de
    conciliacao manual.
    """
