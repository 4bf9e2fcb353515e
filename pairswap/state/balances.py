"""
Per-holder, per-asset balance tracking for the in-memory asset ledger.

Implements BalanceTable[Holder, AssetId] -> Amount
"""

from typing import Dict, Tuple


# Type aliases
Holder = str  # account identity (any non-empty string; pools use their address)
AssetId = str  # asset identifier
Amount = int  # Non-negative integer (arbitrary precision)


def require_amount(name: str, value: Amount) -> None:
    """Reject non-integers (including bool) early; these are caller bugs, not pool failures."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


class BalanceTable:
    """
    Sparse (holder, asset) -> amount table. Zero balances are never stored.

    Callers that need a deterministic order must sort keys themselves.
    """

    def __init__(self):
        self._balances: Dict[Tuple[Holder, AssetId], Amount] = {}

    def get(self, holder: Holder, asset: AssetId) -> Amount:
        return self._balances.get((holder, asset), 0)

    def set(self, holder: Holder, asset: AssetId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((holder, asset), None)
        else:
            self._balances[(holder, asset)] = amount

    def credit(self, holder: Holder, asset: AssetId, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Credit must be non-negative: {amount}")
        self.set(holder, asset, self.get(holder, asset) + amount)

    def debit(self, holder: Holder, asset: AssetId, amount: Amount) -> None:
        """
        Raises:
            ValueError: If `amount` is negative or exceeds the holder's balance
        """
        if amount < 0:
            raise ValueError(f"Debit must be non-negative: {amount}")
        current = self.get(holder, asset)
        if current < amount:
            raise ValueError(f"Insufficient balance: {current} < {amount}")
        self.set(holder, asset, current - amount)

    def move(self, asset: AssetId, sender: Holder, recipient: Holder, amount: Amount) -> None:
        """Debit `sender` and credit `recipient`; a failed debit leaves the table untouched."""
        self.debit(sender, asset, amount)
        self.credit(recipient, asset, amount)

    def total(self, asset: AssetId) -> Amount:
        """Sum of all balances of `asset`."""
        return sum(amount for (_, a), amount in self._balances.items() if a == asset)

    def get_all_balances(self) -> Dict[Tuple[Holder, AssetId], Amount]:
        return dict(self._balances)

    def replace_all(self, balances: Dict[Tuple[Holder, AssetId], Amount]) -> None:
        """Overwrite the whole table (used to restore a snapshot)."""
        self._balances = {k: v for k, v in balances.items() if v != 0}

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
