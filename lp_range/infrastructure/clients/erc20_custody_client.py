from __future__ import annotations

from web3 import Web3

from lp_range.infrastructure.clients.abis import ERC20_ABI
from lp_range.infrastructure.clients.web3_transactions import Web3TransactionSender


class Web3Erc20CustodyClient:
    def __init__(self, web3: Web3, sender: Web3TransactionSender):
        self._web3 = web3
        self._sender = sender

    @property
    def escrow_address(self) -> str:
        return self._sender.sender_address

    def transfer_from(self, *, token: str, owner: str, dest: str, amount: int) -> None:
        call = self._token(token).functions.transferFrom(
            Web3.to_checksum_address(owner),
            Web3.to_checksum_address(dest),
            int(amount),
        )
        self._sender.send(call, label=f"transferFrom {token}")

    def transfer(self, *, token: str, dest: str, amount: int) -> None:
        call = self._token(token).functions.transfer(Web3.to_checksum_address(dest), int(amount))
        self._sender.send(call, label=f"transfer {token}")

    def approve(self, *, token: str, spender: str, amount: int) -> None:
        call = self._token(token).functions.approve(Web3.to_checksum_address(spender), int(amount))
        self._sender.send(call, label=f"approve {token}")

    def _token(self, token: str):
        return self._web3.eth.contract(address=Web3.to_checksum_address(token), abi=ERC20_ABI)
