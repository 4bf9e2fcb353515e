"""
Asset ledger collaborator.

The pair never owns asset balances; it only asks a ledger to move funds and to
report what the pool address holds. `AssetLedger` is the contract the engine
depends on. `InMemoryAssetLedger` is a complete implementation with
allowance-based pulls, used by tools and tests.

Ledgers must also expose `snapshot()` / `restore(token)` so that a pool can
undo every transfer it issued when a later step of the same operation fails.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Protocol, Tuple

from ..errors import TransferFailed
from .balances import AssetId, Amount, BalanceTable, Holder, require_amount

logger = logging.getLogger(__name__)


class AssetLedger(Protocol):
    def balance_of(self, asset: AssetId, holder: Holder) -> Amount: ...

    def transfer(self, asset: AssetId, sender: Holder, recipient: Holder, amount: Amount) -> None: ...

    def transfer_from(
        self,
        asset: AssetId,
        owner: Holder,
        spender: Holder,
        recipient: Holder,
        amount: Amount,
    ) -> None: ...

    def snapshot(self) -> Any: ...

    def restore(self, token: Any) -> None: ...


class InMemoryAssetLedger:
    """
    Fungible balances for any number of assets, plus ERC20-style allowances.

    `transfer_from` debits `owner` on behalf of `spender`; the allowance is not
    consulted when the owner spends its own funds.
    """

    def __init__(self) -> None:
        self._balances = BalanceTable()
        self._allowances: Dict[Tuple[AssetId, Holder, Holder], Amount] = {}

    # -- funding helpers -------------------------------------------------

    def mint(self, asset: AssetId, holder: Holder, amount: Amount) -> None:
        """Credit `amount` of `asset` to `holder` out of thin air."""
        require_amount("amount", amount)
        if amount < 0:
            raise ValueError(f"mint amount must be non-negative: {amount}")
        self._balances.credit(holder, asset, amount)

    def approve(self, asset: AssetId, owner: Holder, spender: Holder, amount: Amount) -> None:
        require_amount("amount", amount)
        if amount < 0:
            raise ValueError(f"allowance must be non-negative: {amount}")
        if amount == 0:
            self._allowances.pop((asset, owner, spender), None)
        else:
            self._allowances[(asset, owner, spender)] = amount

    def allowance(self, asset: AssetId, owner: Holder, spender: Holder) -> Amount:
        return self._allowances.get((asset, owner, spender), 0)

    # -- AssetLedger ------------------------------------------------------

    def balance_of(self, asset: AssetId, holder: Holder) -> Amount:
        return self._balances.get(holder, asset)

    def total_supply(self, asset: AssetId) -> Amount:
        return self._balances.total(asset)

    def transfer(self, asset: AssetId, sender: Holder, recipient: Holder, amount: Amount) -> None:
        require_amount("amount", amount)
        if amount < 0:
            raise TransferFailed(f"negative transfer amount: {amount}")
        if amount == 0:
            return
        have = self._balances.get(sender, asset)
        if have < amount:
            raise TransferFailed(
                f"insufficient {asset} balance for {sender}: {have} < {amount}"
            )
        self._balances.move(asset, sender, recipient, amount)
        logger.debug("transfer %s %s -> %s: %d", asset, sender, recipient, amount)

    def transfer_from(
        self,
        asset: AssetId,
        owner: Holder,
        spender: Holder,
        recipient: Holder,
        amount: Amount,
    ) -> None:
        require_amount("amount", amount)
        if spender != owner and amount > 0:
            allowed = self.allowance(asset, owner, spender)
            if allowed < amount:
                raise TransferFailed(
                    f"{spender} not authorized to move {amount} {asset} of {owner} (allowance {allowed})"
                )
            self.transfer(asset, owner, recipient, amount)
            self.approve(asset, owner, spender, allowed - amount)
            return
        self.transfer(asset, owner, recipient, amount)

    def snapshot(self) -> Tuple[Dict[Tuple[Holder, AssetId], Amount], Dict[Tuple[AssetId, Holder, Holder], Amount]]:
        return self._balances.get_all_balances(), dict(self._allowances)

    def restore(self, token: Any) -> None:
        balances, allowances = token
        self._balances.replace_all(balances)
        self._allowances = dict(allowances)

    def __repr__(self) -> str:
        return f"InMemoryAssetLedger({self._balances!r}, {len(self._allowances)} allowances)"
