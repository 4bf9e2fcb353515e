"""
PairSwap: a two-asset constant-product market maker.

Subpackages:
- `pairswap.state`: balance tables, the asset ledger collaborator, the claim-token ledger, reserves
- `pairswap.core`: liquidity / swap engines and the `Pool` aggregate
- `pairswap.integration`: persisted snapshots
"""

__version__ = "0.1.0"
