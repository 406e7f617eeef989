from __future__ import annotations

from typing import Protocol

from lp_range.domain.entities.liquidity import MintParams, ProvisionResult


class PositionManagerPort(Protocol):
    @property
    def address(self) -> str:
        ...

    def mint(self, params: MintParams) -> ProvisionResult:
        ...
