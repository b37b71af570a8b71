"""
SplitSave - Budget Allocation & Safety-Net Engine

Works out how two partners fund a shared household budget: who pays
what share, how income is split across buckets, what each savings goal
needs per month and how healthy the shared emergency fund is.

DESIGN PRINCIPLES:
1. Money is Decimal, rounded once, and always adds back up
2. Fail early, fail visibly
3. No silent corrections (the only defaults are documented ones)
4. Every calculation behind a plan is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "SplitSave Team"
