from __future__ import annotations

from dataclasses import dataclass
import logging
from threading import Lock

from web3 import Web3
from web3.exceptions import TimeExhausted

from lp_range.domain.exceptions import SettlementPendingError


logger = logging.getLogger(__name__)


class TransactionRevertedError(RuntimeError):
    pass


class TransactionPendingError(SettlementPendingError):
    pass


@dataclass(frozen=True)
class Web3TransactionSettings:
    chain_id: int
    sender_address: str
    sender_private_key: str
    gas_limit: int
    receipt_timeout_seconds: float
    max_priority_fee_wei: int


def connect_web3(rpc_url: str) -> Web3:
    w3 = Web3(Web3.HTTPProvider(rpc_url))
    if not w3.is_connected():
        raise ConnectionError(f"Could not establish a connection with RPC {rpc_url}")
    return w3


class Web3TransactionSender:
    """Assina e envia transacoes da carteira de escrow, uma por vez."""

    def __init__(self, web3: Web3, settings: Web3TransactionSettings):
        self._web3 = web3
        self._settings = settings
        self._sender = Web3.to_checksum_address(settings.sender_address)
        self._lock = Lock()

    @property
    def sender_address(self) -> str:
        return self._sender

    def send(self, contract_call, *, label: str):
        with self._lock:
            base_fee = int(self._web3.eth.get_block("latest")["baseFeePerGas"])
            priority_fee = self._settings.max_priority_fee_wei
            tx = contract_call.build_transaction(
                {
                    "from": self._sender,
                    "nonce": self._web3.eth.get_transaction_count(self._sender, "pending"),
                    "gas": self._settings.gas_limit,
                    "maxFeePerGas": base_fee * 2 + priority_fee,
                    "maxPriorityFeePerGas": priority_fee,
                    "type": "0x2",
                    "chainId": self._settings.chain_id,
                }
            )
            signed = self._web3.eth.account.sign_transaction(tx, self._settings.sender_private_key)
            tx_hash = self._web3.eth.send_raw_transaction(signed.raw_transaction)

        logger.info("web3_tx: sent label=%s tx_hash=%s", label, Web3.to_hex(tx_hash))
        try:
            receipt = self._web3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self._settings.receipt_timeout_seconds,
            )
        except TimeExhausted as exc:
            raise TransactionPendingError(
                f"{label} not mined within {self._settings.receipt_timeout_seconds}s "
                f"(tx_hash={Web3.to_hex(tx_hash)})."
            ) from exc
        if receipt["status"] != 1:
            raise TransactionRevertedError(f"{label} reverted (tx_hash={Web3.to_hex(tx_hash)}).")
        return receipt
