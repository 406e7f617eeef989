from __future__ import annotations

from typing import Protocol


class TokenCustodyPort(Protocol):
    @property
    def escrow_address(self) -> str:
        ...

    def transfer_from(self, *, token: str, owner: str, dest: str, amount: int) -> None:
        ...

    def transfer(self, *, token: str, dest: str, amount: int) -> None:
        ...

    def approve(self, *, token: str, spender: str, amount: int) -> None:
        ...
