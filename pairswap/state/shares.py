"""
Claim-token (share) ledger for a single pair.

The pool holds a `ShareLedger` by composition: minting and burning are driven
by the liquidity engine, while transfers and approvals follow ordinary
fungible-token semantics.

Notes:
- Balances are always non-negative and zero balances are omitted.
- `sum(balances) == total_supply` after every call.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple

from ..errors import InsufficientAllowance, InsufficientShares, InvalidAmount
from ..events import Event, SharesApproved, SharesTransferred
from .balances import Amount, Holder, require_amount


class ShareLedger:
    def __init__(self, on_event: Optional[Callable[[Event], None]] = None) -> None:
        self._balances: Dict[Holder, Amount] = {}
        self._allowances: Dict[Tuple[Holder, Holder], Amount] = {}
        self._total_supply: Amount = 0
        self._on_event = on_event

    @property
    def total_supply(self) -> Amount:
        return self._total_supply

    def balance_of(self, holder: Holder) -> Amount:
        """Get share balance for `holder`. Returns 0 if not found."""
        return self._balances.get(holder, 0)

    def allowance(self, owner: Holder, spender: Holder) -> Amount:
        return self._allowances.get((owner, spender), 0)

    def get_all_balances(self) -> Dict[Holder, Amount]:
        return dict(self._balances)

    def get_all_allowances(self) -> Dict[Tuple[Holder, Holder], Amount]:
        return dict(self._allowances)

    def _set(self, holder: Holder, amount: Amount) -> None:
        if amount == 0:
            self._balances.pop(holder, None)
        else:
            self._balances[holder] = amount

    def _emit(self, event: Event) -> None:
        if self._on_event is not None:
            self._on_event(event)

    def mint(self, holder: Holder, amount: Amount) -> None:
        require_amount("amount", amount)
        if amount <= 0:
            raise InvalidAmount(f"mint amount must be positive: {amount}")
        self._set(holder, self.balance_of(holder) + amount)
        self._total_supply += amount
        self._emit(SharesTransferred(sender=None, recipient=holder, amount=amount))

    def burn(self, holder: Holder, amount: Amount) -> None:
        require_amount("amount", amount)
        if amount <= 0:
            raise InvalidAmount(f"burn amount must be positive: {amount}")
        have = self.balance_of(holder)
        if have < amount:
            raise InsufficientShares(f"{holder} holds {have} shares, cannot burn {amount}")
        self._set(holder, have - amount)
        self._total_supply -= amount
        self._emit(SharesTransferred(sender=holder, recipient=None, amount=amount))

    def transfer(self, sender: Holder, recipient: Holder, amount: Amount) -> None:
        require_amount("amount", amount)
        if amount < 0:
            raise InvalidAmount(f"transfer amount must be non-negative: {amount}")
        have = self.balance_of(sender)
        if have < amount:
            raise InsufficientShares(f"{sender} holds {have} shares, cannot transfer {amount}")
        self._set(sender, have - amount)
        self._set(recipient, self.balance_of(recipient) + amount)
        self._emit(SharesTransferred(sender=sender, recipient=recipient, amount=amount))

    def approve(self, owner: Holder, spender: Holder, amount: Amount) -> None:
        require_amount("amount", amount)
        if amount < 0:
            raise InvalidAmount(f"allowance must be non-negative: {amount}")
        if amount == 0:
            self._allowances.pop((owner, spender), None)
        else:
            self._allowances[(owner, spender)] = amount
        self._emit(SharesApproved(owner=owner, spender=spender, amount=amount))

    def transfer_from(self, spender: Holder, owner: Holder, recipient: Holder, amount: Amount) -> None:
        require_amount("amount", amount)
        allowed = self.allowance(owner, spender)
        if spender != owner and allowed < amount:
            raise InsufficientAllowance(
                f"{spender} may move {allowed} shares of {owner}, requested {amount}"
            )
        self.transfer(owner, recipient, amount)
        if spender != owner:
            remaining = allowed - amount
            if remaining == 0:
                self._allowances.pop((owner, spender), None)
            else:
                self._allowances[(owner, spender)] = remaining

    def snapshot(self) -> Tuple[Dict[Holder, Amount], Dict[Tuple[Holder, Holder], Amount], Amount]:
        return dict(self._balances), dict(self._allowances), self._total_supply

    def restore(self, token: Any) -> None:
        balances, allowances, total_supply = token
        self._balances = dict(balances)
        self._allowances = dict(allowances)
        self._total_supply = total_supply

    def verify_supply(self) -> bool:
        """True when balances are non-negative and sum to `total_supply`."""
        return (
            all(amount > 0 for amount in self._balances.values())
            and sum(self._balances.values()) == self._total_supply
        )

    def __repr__(self) -> str:
        return f"ShareLedger(total_supply={self._total_supply}, {len(self._balances)} holders)"
