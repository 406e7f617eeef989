from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


@dataclass(frozen=True)
class Settings:
    rpc_url: str
    chain_id: int
    position_manager_address: str
    escrow_address: str
    escrow_private_key: str
    tx_gas_limit: int
    tx_receipt_timeout_seconds: float
    max_priority_fee_wei: int


def get_settings() -> Settings:
    return Settings(
        rpc_url=_env("RPC_URL", ""),
        chain_id=int(_env("CHAIN_ID", "1")),
        position_manager_address=_env(
            "POSITION_MANAGER_ADDRESS",
            "0xC36442b4a4522E871399CD717aBDD847Ab11FE88",
        ),
        escrow_address=_env("ESCROW_ADDRESS", ""),
        escrow_private_key=_env("ESCROW_PRIVATE_KEY", ""),
        tx_gas_limit=int(_env("TX_GAS_LIMIT", "600000")),
        tx_receipt_timeout_seconds=float(_env("TX_RECEIPT_TIMEOUT_SECONDS", "120")),
        max_priority_fee_wei=int(_env("MAX_PRIORITY_FEE_WEI", "1000000000")),
    )
